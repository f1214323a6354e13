from __future__ import annotations

import math
import numbers
from typing import Mapping, Sequence, Tuple, Union

import numpy as np

from costmap_obs.types import QuaternionLike, ScalarLike

try:
    import quaternion  # type: ignore
except ImportError as e:  # pragma: no cover
    raise ImportError(
        "Missing dependency `numpy-quaternion` (module name: `quaternion`). "
        "Install it (e.g. `pip install numpy-quaternion`) or adjust this module "
        "to use a different quaternion type."
    ) from e


def _as_wxyz(q: QuaternionLike) -> Tuple[float, float, float, float]:
    """
    Coerce a quaternion-like input to (w, x, y, z).

    Accepts:
      - quaternion.quaternion or geometry_msgs/Quaternion (attributes: w, x, y, z)
      - Sequence[float] of length 4: (w, x, y, z)
      - Mapping with keys {'w','x','y','z'}
    """
    if hasattr(q, "w") and hasattr(q, "x") and hasattr(q, "y") and hasattr(q, "z"):
        return float(q.w), float(q.x), float(q.y), float(q.z)

    if isinstance(q, Mapping):
        return float(q["w"]), float(q["x"]), float(q["y"]), float(q["z"])

    if isinstance(q, (Sequence, np.ndarray)) and len(q) == 4:
        return float(q[0]), float(q[1]), float(q[2]), float(q[3])

    raise TypeError(
        "q must be a quaternion.quaternion, a length-4 sequence (w,x,y,z), "
        "or a mapping with keys w,x,y,z."
    )


def _normalize_wxyz(w: float, x: float, y: float, z: float) -> Tuple[float, float, float, float]:
    """Return a unit quaternion (w, x, y, z)."""
    n2 = w * w + x * x + y * y + z * z
    if n2 == 0.0:
        raise ValueError("Cannot normalize a zero-norm quaternion.")
    inv_n = 1.0 / math.sqrt(n2)
    return w * inv_n, x * inv_n, y * inv_n, z * inv_n


def coerce_quaternion(q: QuaternionLike, *, normalize: bool = True) -> "quaternion.quaternion":
    """
    Coerce a quaternion-like input to a quaternion.quaternion.

    Args:
        q: Quaternion input (quaternion.quaternion, wxyz sequence, or mapping).
        normalize: If True, normalize the quaternion.

    Returns:
        quaternion.quaternion instance.
    """
    if isinstance(q, quaternion.quaternion) and not normalize:
        return q

    w, x, y, z = _as_wxyz(q)
    if normalize:
        w, x, y, z = _normalize_wxyz(w, x, y, z)
    return quaternion.quaternion(w, x, y, z)


def quaternion_to_yaw(q: QuaternionLike, *, degrees: bool = False, normalize: bool = True) -> float:
    """
    Convert a quaternion to a yaw/heading angle.

    Convention:
      - Z-up world (REP-103): yaw is rotation about +Z, zero along +X,
        increasing counter-clockwise.
      - Quaternion is assumed in (w, x, y, z) scalar-first format.

    Returns:
        Yaw angle as float (radians by default; degrees if degrees=True).
    """
    w, x, y, z = _as_wxyz(q)
    if normalize:
        w, x, y, z = _normalize_wxyz(w, x, y, z)

    siny_cosp = 2.0 * (w * z + x * y)
    cosy_cosp = 1.0 - 2.0 * (y * y + z * z)
    yaw = math.atan2(siny_cosp, cosy_cosp)

    return math.degrees(yaw) if degrees else yaw


def yaw_to_quaternion(yaw: ScalarLike, *, degrees: bool = False) -> "quaternion.quaternion":
    """Convert a yaw angle to a pure rotation about +Z, scalar-first."""
    yaw_rad = math.radians(yaw) if degrees else float(yaw)
    half = 0.5 * yaw_rad
    return quaternion.quaternion(math.cos(half), 0.0, 0.0, math.sin(half))


def normalize_angle(angle: ScalarLike, *, degrees: bool = False) -> float:
    """
    Normalize an angle to a canonical range.

    Args:
        angle: Input angle.
        degrees: If True, normalize to [-180, 180); else to [-pi, pi).
    """
    if degrees:
        return ((float(angle) + 180.0) % 360.0) - 180.0
    return ((float(angle) + math.pi) % (2.0 * math.pi)) - math.pi


def angular_difference(a: Union[ScalarLike, np.ndarray], b: ScalarLike) -> Union[float, np.ndarray]:
    """
    Signed smallest difference ``a - b`` in radians, wrapped to [-pi, pi).

    `a` may be an array of angles; the result then has the same shape.
    """
    diff = np.asarray(a, dtype=np.float64) - float(b)
    wrapped = np.mod(diff + math.pi, 2.0 * math.pi) - math.pi
    return float(wrapped) if wrapped.ndim == 0 else wrapped


def rotation_to_yaw(rotation: Union[QuaternionLike, ScalarLike], *, normalize: bool = True) -> float:
    """
    Convert a rotation (scalar yaw in radians or quaternion) to a yaw in radians.
    Serves as a unified interface for both input types.
    """
    if isinstance(rotation, numbers.Real) or (isinstance(rotation, np.ndarray) and rotation.ndim == 0):
        yaw = float(rotation)
    else:
        yaw = quaternion_to_yaw(rotation, degrees=False)
    return normalize_angle(yaw) if normalize else yaw


__all__ = [
    "angular_difference",
    "coerce_quaternion",
    "normalize_angle",
    "quaternion_to_yaw",
    "rotation_to_yaw",
    "yaw_to_quaternion",
]
