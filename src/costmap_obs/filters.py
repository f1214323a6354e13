"""
Selection helpers for consumers of an Observation.

These answer the two questions an obstacle layer asks of every observation:
which points may mark obstacles, and which rays may clear free space. They
work on the point cloud only; mapping results onto a grid is left to the
caller.

Inverted ranges (min > max) are tolerated and select nothing.
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

import numpy as np

from costmap_obs.constants import POINT_DIM, UNRESTRICTED_FOV
from costmap_obs.observation import Observation
from costmap_obs.utils.spatial.rotations import angular_difference

logger = logging.getLogger(__name__)


def point_distances(obs: Observation) -> np.ndarray:
    """Euclidean distance of every cloud point from the observation origin. Shape (N,)."""
    offsets = obs.cloud.astype(np.float64) - obs.origin
    return np.linalg.norm(offsets, axis=1)


def obstacle_mask(obs: Observation) -> np.ndarray:
    """
    Boolean mask of points whose distance lies in [min_obstacle_range, max_obstacle_range].

    Nothing is selected unless ``max_obstacle_range > 0``; a zero maximum marks
    a source that does not insert obstacles (see ``Observation.from_cloud`` and
    ``build_observation``).
    """
    if not obs.max_obstacle_range > 0.0:
        return np.zeros(obs.num_points, dtype=bool)
    d = point_distances(obs)
    return (d >= obs.min_obstacle_range) & (d <= obs.max_obstacle_range)


def obstacle_points(obs: Observation) -> np.ndarray:
    """The subset of the cloud allowed to insert obstacles. Shape (M, 3)."""
    mask = obstacle_mask(obs)
    logger.debug("%d of %d points eligible for marking", int(mask.sum()), obs.num_points)
    return obs.cloud[mask]


def in_field_of_view(obs: Observation, points: Optional[np.ndarray] = None) -> np.ndarray:
    """
    Boolean mask of points inside the sensor's horizontal field of view.

    A point is inside when its planar bearing from the origin is within
    ``orientation_in_global_frame ± fov / 2``. With ``fov == 0`` there is no
    restriction and every point is inside.

    Args:
        obs: The observation providing origin, orientation and fov.
        points: Points to test, shape (K, 3). Defaults to ``obs.cloud``.
    """
    pts = obs.cloud if points is None else np.asarray(points, dtype=np.float64)
    if pts.ndim != 2 or pts.shape[1] != POINT_DIM:
        raise ValueError(f"points must be an Nx3 array, got shape {pts.shape}")

    if obs.fov == UNRESTRICTED_FOV:
        return np.ones(pts.shape[0], dtype=bool)

    dx = pts[:, 0] - obs.origin[0]
    dy = pts[:, 1] - obs.origin[1]
    bearing = np.arctan2(dy, dx)
    offset = angular_difference(bearing, obs.orientation_in_global_frame)
    return np.abs(offset) <= 0.5 * obs.fov


def raytrace_mask(obs: Observation) -> np.ndarray:
    """
    Boolean mask of points whose rays clear free space.

    A ray is traced when the point is at least ``min_raytrace_range`` away and
    inside the field of view. Rays to points beyond ``max_raytrace_range`` are
    still traced but clipped (see ``clearing_segments``). Nothing is traced
    unless ``max_raytrace_range > min_raytrace_range``.
    """
    if not obs.max_raytrace_range > obs.min_raytrace_range:
        return np.zeros(obs.num_points, dtype=bool)
    d = point_distances(obs)
    return (d > 0.0) & (d >= obs.min_raytrace_range) & in_field_of_view(obs)


def clearing_segments(obs: Observation) -> Tuple[np.ndarray, np.ndarray]:
    """
    Free-space segments implied by the observation.

    Each traced point yields one segment along the ray from the origin to the
    point, starting ``min_raytrace_range`` from the origin and ending at the
    point or at ``max_raytrace_range``, whichever is closer.

    Returns:
        (starts, ends), each of shape (M, 3) in the global frame.
    """
    mask = raytrace_mask(obs)
    targets = obs.cloud[mask].astype(np.float64)
    offsets = targets - obs.origin
    d = np.linalg.norm(offsets, axis=1)
    directions = offsets / d[:, None] if d.size else offsets

    starts = obs.origin + directions * obs.min_raytrace_range
    ends = obs.origin + directions * np.minimum(d, obs.max_raytrace_range)[:, None]
    logger.debug("%d clearing segments from %d points", targets.shape[0], obs.num_points)
    return starts, ends


__all__ = [
    "clearing_segments",
    "in_field_of_view",
    "obstacle_mask",
    "obstacle_points",
    "point_distances",
    "raytrace_mask",
]
