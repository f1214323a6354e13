"""
Sanity Check Script for the costmap observation environment

This script verifies that the third-party packages the project depends on
(numpy, numpy-quaternion, matplotlib) are installed and importable, and that
the costmap_obs package itself resolves. It serves as a quick diagnostic tool
before running the pipeline on a new machine or container.

Usage:
    python scripts/sanity_check.py

The script prints the Python version and the import status of each package.
If any import fails, the exception is re-raised with its original traceback.
"""

import sys

def main():
    print("Python:", sys.version)
    try:
        import numpy
        print("numpy import: OK", numpy.__version__)
    except Exception:
        print("numpy import: FAIL")
        raise

    try:
        import quaternion  # noqa: F401
        print("numpy-quaternion import: OK")
    except Exception:
        print("numpy-quaternion import: FAIL")
        raise

    try:
        import matplotlib
        print("matplotlib import: OK", matplotlib.__version__)
    except Exception:
        print("matplotlib import: FAIL")
        raise

    from costmap_obs.observation import Observation
    print("costmap_obs import: OK", Observation())

if __name__ == "__main__":
    main()
