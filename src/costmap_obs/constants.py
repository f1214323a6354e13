"""Global immutable constants for costmap observations.

These values are intended to be stable across sensors. Per-sensor values should
live in an ``ObservationSourceConfig`` (see ``costmap_obs.config``).
"""

from __future__ import annotations

from typing import Final, Tuple

import numpy as np

# --- Storage layout ---
# Origins keep double precision, clouds mirror pcl::PointXYZ (float32).
ORIGIN_DTYPE: Final[type] = np.float64
CLOUD_DTYPE: Final[type] = np.float32
POINT_DIM: Final[int] = 3

# --- Defaults ---
DEFAULT_ORIGIN: Final[Tuple[float, float, float]] = (0.0, 0.0, 0.0)
UNRESTRICTED_FOV: Final[float] = 0.0  # fov == 0 means every direction is seen

# --- Obstacle layer defaults (meters) ---
DEFAULT_OBSTACLE_RANGE: Final[float] = 2.5
DEFAULT_RAYTRACE_RANGE: Final[float] = 3.0

__all__ = [
    "CLOUD_DTYPE",
    "DEFAULT_OBSTACLE_RANGE",
    "DEFAULT_ORIGIN",
    "DEFAULT_RAYTRACE_RANGE",
    "ORIGIN_DTYPE",
    "POINT_DIM",
    "UNRESTRICTED_FOV",
]
