"""The Observation value type consumed by costmap obstacle layers.

An Observation is one sensor reading: the points it returned, where the sensor
was when it took them, and the distance/angle limits that tell an obstacle
layer which points may mark obstacles and which rays may clear free space.

The constructor never validates or reorders ranges. Range policy belongs to
the ingestion boundary (see ``costmap_obs.validation``).
"""

from __future__ import annotations

import dataclasses
import warnings
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import numpy as np

from costmap_obs.constants import CLOUD_DTYPE, DEFAULT_ORIGIN, ORIGIN_DTYPE, POINT_DIM
from costmap_obs.types import Point3DLike, PointCloudLike, ScalarLike


def _point_values(point: Any) -> Any:
    """Return (x, y, z) for point-like objects (e.g. geometry_msgs/Point), else the input."""
    if hasattr(point, "x") and hasattr(point, "y") and hasattr(point, "z"):
        return float(point.x), float(point.y), float(point.z)
    return point


def _as_origin(origin: Point3DLike) -> np.ndarray:
    """Copy `origin` into a fresh read-only (3,) array."""
    arr = np.array(_point_values(origin), dtype=ORIGIN_DTYPE)
    if arr.shape != (POINT_DIM,):
        raise ValueError(f"origin must be length 3, got shape {arr.shape}")
    arr.flags.writeable = False
    return arr


def _as_cloud(cloud: PointCloudLike) -> np.ndarray:
    """Copy `cloud` into a fresh read-only (N, 3) array."""
    if isinstance(cloud, np.ndarray):
        arr = np.array(cloud, dtype=CLOUD_DTYPE)
    else:
        arr = np.array([_point_values(p) for p in cloud], dtype=CLOUD_DTYPE)

    if arr.shape == (0,):
        arr = arr.reshape(0, POINT_DIM)
    if arr.ndim != 2 or arr.shape[1] != POINT_DIM:
        raise ValueError(f"cloud must be an Nx3 array, got shape {arr.shape}")
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False, repr=False)
class Observation:
    """
    A point cloud plus the metadata needed to mark and clear obstacles with it.

    Calling the class with every field is the canonical (full) form; calling it
    with no arguments gives the empty observation. ``from_cloud`` and the
    deprecated ``from_legacy_ranges`` cover the remaining shapes.

    The origin and cloud are always copied on construction and stored as
    read-only arrays owned by this instance, so two observations never share
    point storage.
    """

    origin: np.ndarray = field(default_factory=lambda: np.array(DEFAULT_ORIGIN, dtype=ORIGIN_DTYPE))
    """Sensor position in the global frame at capture time. Shape (3,)."""

    cloud: np.ndarray = field(default_factory=lambda: np.empty((0, POINT_DIM), dtype=CLOUD_DTYPE))
    """Points detected by the sensor, same frame as `origin`. Shape (N, 3)."""

    min_obstacle_range: float = 0.0
    """Points closer than this to the origin do not insert obstacles."""

    max_obstacle_range: float = 0.0
    """Points farther than this from the origin do not insert obstacles."""

    min_raytrace_range: float = 0.0
    """Distance from the origin at which clearing rays begin."""

    max_raytrace_range: float = 0.0
    """Distance from the origin at which clearing rays end."""

    orientation_in_global_frame: float = 0.0
    """Sensor yaw in the global frame (radians)."""

    fov: float = 0.0
    """Angular field of view (radians). 0 means no restriction."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "origin", _as_origin(self.origin))
        object.__setattr__(self, "cloud", _as_cloud(self.cloud))
        for name in _SCALAR_FIELDS:
            object.__setattr__(self, name, float(getattr(self, name)))

    # --- Alternative construction shapes ---

    @classmethod
    def from_cloud(cls, cloud: PointCloudLike, max_obstacle_range: ScalarLike) -> "Observation":
        """
        Build an observation that only inserts obstacles.

        The origin is left at its default and every other range and angle is
        zero, so raytracing is disabled.
        """
        return cls(cloud=cloud, max_obstacle_range=max_obstacle_range)

    @classmethod
    def from_legacy_ranges(
        cls,
        origin: Point3DLike,
        cloud: PointCloudLike,
        max_obstacle_range: ScalarLike,
        max_raytrace_range: ScalarLike,
    ) -> "Observation":
        """
        Build an observation from max ranges only.

        Deprecated: pass every range explicitly to ``Observation(...)`` instead.
        Minimum ranges, orientation and fov are set to zero.
        """
        warnings.warn(
            "Observation.from_legacy_ranges is deprecated; construct Observation with "
            "explicit min/max obstacle and raytrace ranges, orientation and fov.",
            DeprecationWarning,
            stacklevel=2,
        )
        return cls(
            origin=origin,
            cloud=cloud,
            max_obstacle_range=max_obstacle_range,
            max_raytrace_range=max_raytrace_range,
        )

    # --- Copy semantics ---

    def copy(self) -> "Observation":
        """Return an independent copy; origin and cloud storage are duplicated."""
        return dataclasses.replace(self)

    def __copy__(self) -> "Observation":
        return self.copy()

    def __deepcopy__(self, memo: Optional[Dict[int, Any]]) -> "Observation":
        return self.copy()

    # --- Read accessors ---

    @property
    def num_points(self) -> int:
        return int(self.cloud.shape[0])

    @property
    def is_empty(self) -> bool:
        return self.num_points == 0

    def scalars(self) -> Tuple[float, ...]:
        """The six range/angle fields, in declaration order."""
        return tuple(getattr(self, name) for name in _SCALAR_FIELDS)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Observation):
            return NotImplemented
        return (
            self.scalars() == other.scalars()
            and np.array_equal(self.origin, other.origin)
            and np.array_equal(self.cloud, other.cloud)
        )

    def __repr__(self) -> str:
        origin = ", ".join(f"{v:g}" for v in self.origin)
        return (
            f"Observation(origin=({origin}), num_points={self.num_points}, "
            f"obstacle_range=[{self.min_obstacle_range:g}, {self.max_obstacle_range:g}], "
            f"raytrace_range=[{self.min_raytrace_range:g}, {self.max_raytrace_range:g}], "
            f"orientation_in_global_frame={self.orientation_in_global_frame:g}, fov={self.fov:g})"
        )


_SCALAR_FIELDS: Tuple[str, ...] = (
    "min_obstacle_range",
    "max_obstacle_range",
    "min_raytrace_range",
    "max_raytrace_range",
    "orientation_in_global_frame",
    "fov",
)

__all__ = ["Observation"]
