from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping, Union

from costmap_obs.constants import DEFAULT_OBSTACLE_RANGE, DEFAULT_RAYTRACE_RANGE, UNRESTRICTED_FOV
from costmap_obs.observation import Observation
from costmap_obs.types import Point3DLike, PointCloudLike, QuaternionLike, ScalarLike
from costmap_obs.utils.spatial.rotations import rotation_to_yaw

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ObservationSourceConfig:
    """Per-sensor settings used to turn a raw cloud into an Observation.

    Prefer overriding via a run config (YAML, loaded with ``from_mapping``)
    rather than editing code.
    """

    sensor_frame: str = field(default="", metadata={"help": "Frame of the sensor; empty means the cloud's own frame."})

    # --- Marking ---
    marking: bool = field(default=True, metadata={"help": "Allow this source to insert obstacles."})
    min_obstacle_range: float = field(default=0.0, metadata={"help": "Minimum distance (m) for marking."})
    obstacle_range: float = field(
        default=DEFAULT_OBSTACLE_RANGE,
        metadata={"help": "Maximum distance (m) for marking."},
    )

    # --- Clearing ---
    clearing: bool = field(default=False, metadata={"help": "Allow this source to clear free space."})
    min_raytrace_range: float = field(default=0.0, metadata={"help": "Distance (m) at which clearing rays start."})
    raytrace_range: float = field(
        default=DEFAULT_RAYTRACE_RANGE,
        metadata={"help": "Distance (m) at which clearing rays end."},
    )

    # --- Sensor geometry ---
    fov: float = field(
        default=UNRESTRICTED_FOV,
        metadata={"help": "Horizontal field of view (rad); 0 disables the restriction."},
    )

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, Any]) -> "ObservationSourceConfig":
        """Build a config from a plain mapping, e.g. one observation source of a YAML file."""
        known = {f.name: f for f in dataclasses.fields(cls)}
        kwargs = {}
        for key, value in mapping.items():
            if key not in known:
                logger.warning("Ignoring unknown observation source option %r", key)
                continue
            kwargs[key] = _coerce_option(key, value, known[key].type)
        return cls(**kwargs)


def _coerce_option(key: str, value: Any, annotation: Any) -> Any:
    # Annotations are strings under `from __future__ import annotations`.
    if annotation in ("bool", bool):
        if not isinstance(value, bool):
            raise ValueError(f"{key} must be a boolean, got {value!r}")
        return value
    if annotation in ("float", float):
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise ValueError(f"{key} must be a number, got {value!r}")
        return float(value)
    return str(value)


def build_observation(
    config: ObservationSourceConfig,
    origin: Point3DLike,
    cloud: PointCloudLike,
    orientation: Union[ScalarLike, QuaternionLike] = 0.0,
) -> Observation:
    """
    Wrap a sensor cloud as a full-form Observation using `config`.

    Args:
        config: Settings of the source that produced the cloud.
        origin: Sensor position in the global frame.
        cloud: Points in the global frame (already transformed by the caller).
        orientation: Sensor yaw in radians, or its rotation as a quaternion-like
            (w, x, y, z); converted to a yaw about +Z.

    Returns:
        Observation whose obstacle or raytrace ranges are both 0 when the
        config turns marking or clearing off.
    """
    obs = Observation(
        origin=origin,
        cloud=cloud,
        min_obstacle_range=config.min_obstacle_range if config.marking else 0.0,
        max_obstacle_range=config.obstacle_range if config.marking else 0.0,
        min_raytrace_range=config.min_raytrace_range if config.clearing else 0.0,
        max_raytrace_range=config.raytrace_range if config.clearing else 0.0,
        orientation_in_global_frame=rotation_to_yaw(orientation),
        fov=config.fov,
    )
    logger.debug("Built %r from source %r", obs, config.sensor_frame or "<cloud frame>")
    return obs


__all__ = ["ObservationSourceConfig", "build_observation"]
