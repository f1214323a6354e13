"""Boundary checks for observations coming from sensor ingestion.

``Observation`` accepts any ranges as given. Pipelines that want to reject or
flag malformed readings run these checks where the data enters the system.
"""

from __future__ import annotations

import logging
import math
from typing import List

import numpy as np

from costmap_obs.observation import Observation

logger = logging.getLogger(__name__)


class InvalidObservationError(ValueError):
    """Raised by ``validate_observation`` when an observation fails the boundary checks."""

    def __init__(self, issues: List[str]):
        self.issues = list(issues)
        super().__init__("invalid observation: " + "; ".join(self.issues))


def find_observation_issues(obs: Observation) -> List[str]:
    """Return a description of every problem found in `obs` (empty when it is well formed)."""
    issues: List[str] = []

    for name in ("min_obstacle_range", "max_obstacle_range", "min_raytrace_range", "max_raytrace_range"):
        value = getattr(obs, name)
        if not math.isfinite(value):
            issues.append(f"{name} is not finite ({value})")
        elif value < 0.0:
            issues.append(f"{name} is negative ({value})")

    if obs.min_obstacle_range > obs.max_obstacle_range:
        issues.append(
            f"min_obstacle_range ({obs.min_obstacle_range}) exceeds "
            f"max_obstacle_range ({obs.max_obstacle_range})"
        )
    if obs.min_raytrace_range > obs.max_raytrace_range:
        issues.append(
            f"min_raytrace_range ({obs.min_raytrace_range}) exceeds "
            f"max_raytrace_range ({obs.max_raytrace_range})"
        )

    if not math.isfinite(obs.orientation_in_global_frame):
        issues.append(f"orientation_in_global_frame is not finite ({obs.orientation_in_global_frame})")
    if not math.isfinite(obs.fov):
        issues.append(f"fov is not finite ({obs.fov})")
    elif obs.fov < 0.0:
        issues.append(f"fov is negative ({obs.fov})")

    if not np.all(np.isfinite(obs.origin)):
        issues.append(f"origin has non-finite coordinates {obs.origin.tolist()}")
    bad_points = int(np.count_nonzero(~np.isfinite(obs.cloud).all(axis=1)))
    if bad_points:
        issues.append(f"cloud has {bad_points} point(s) with non-finite coordinates")

    return issues


def validate_observation(obs: Observation, *, strict: bool = True) -> List[str]:
    """
    Check `obs` at the system boundary.

    Args:
        obs: The observation to check.
        strict: If True, raise on any issue. Otherwise log each issue as a
            warning and return them.

    Returns:
        The list of issues (always empty when `strict` is True).

    Raises:
        InvalidObservationError: If `strict` and any issue was found.
    """
    issues = find_observation_issues(obs)
    if issues and strict:
        raise InvalidObservationError(issues)
    for issue in issues:
        logger.warning("Observation check: %s", issue)
    return issues


__all__ = [
    "InvalidObservationError",
    "find_observation_issues",
    "validate_observation",
]
