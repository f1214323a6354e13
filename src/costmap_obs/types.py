"""Shared typing aliases used across the project."""

from __future__ import annotations

from typing import Mapping, Sequence, Union, TYPE_CHECKING

import numpy as np

if TYPE_CHECKING:
    import quaternion  # type: ignore

QuaternionLike = Union["quaternion.quaternion", Sequence[float], Mapping[str, float]]
ScalarLike = Union[int, float, np.floating]
Point3DLike = Union[Sequence[float], np.ndarray]
# Anything np.asarray can turn into an (N, 3) array: nested sequences, arrays,
# or an iterable of objects with x/y/z attributes (see observation._as_cloud).
PointCloudLike = Union[Sequence[Sequence[float]], np.ndarray, Sequence[object]]

__all__ = [
    "Point3DLike",
    "PointCloudLike",
    "QuaternionLike",
    "ScalarLike",
]
