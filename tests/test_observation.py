import copy
import dataclasses
import math
from types import SimpleNamespace

import numpy as np
import pytest

from costmap_obs.observation import Observation


@pytest.fixture
def full_obs():
    return Observation(
        origin=(1.0, 2.0, 0.5),
        cloud=[(1.0, 0.0, 0.0), (5.0, 0.0, 0.0), (0.25, 0.5, 0.0)],
        min_obstacle_range=0.2,
        max_obstacle_range=4.0,
        min_raytrace_range=0.1,
        max_raytrace_range=4.5,
        orientation_in_global_frame=0.75,
        fov=1.5,
    )


def test_empty_observation_defaults():
    obs = Observation()
    assert obs.cloud.shape == (0, 3)
    assert obs.is_empty
    assert obs.num_points == 0
    np.testing.assert_array_equal(obs.origin, [0.0, 0.0, 0.0])
    assert obs.scalars() == (0.0, 0.0, 0.0, 0.0, 0.0, 0.0)


def test_full_form_assigns_every_field(full_obs):
    np.testing.assert_array_equal(full_obs.origin, [1.0, 2.0, 0.5])
    np.testing.assert_array_equal(
        full_obs.cloud,
        np.array([(1.0, 0.0, 0.0), (5.0, 0.0, 0.0), (0.25, 0.5, 0.0)], dtype=np.float32),
    )
    assert full_obs.min_obstacle_range == 0.2
    assert full_obs.max_obstacle_range == 4.0
    assert full_obs.min_raytrace_range == 0.1
    assert full_obs.max_raytrace_range == 4.5
    assert full_obs.orientation_in_global_frame == 0.75
    assert full_obs.fov == 1.5


def test_full_form_positional_order():
    obs = Observation((0, 0, 0), [(1, 1, 1)], 1, 2, 3, 4, 5, 6)
    assert obs.scalars() == (1.0, 2.0, 3.0, 4.0, 5.0, 6.0)


def test_inverted_and_malformed_ranges_are_kept_as_given():
    obs = Observation(
        origin=(0.0, 0.0, 0.0),
        cloud=[],
        min_obstacle_range=5.0,
        max_obstacle_range=1.0,
        min_raytrace_range=-2.0,
        max_raytrace_range=-3.0,
        orientation_in_global_frame=10.0,
        fov=-1.0,
    )
    assert obs.min_obstacle_range == 5.0
    assert obs.max_obstacle_range == 1.0
    assert obs.min_raytrace_range == -2.0
    assert obs.max_raytrace_range == -3.0
    assert obs.orientation_in_global_frame == 10.0
    assert obs.fov == -1.0


def test_non_finite_values_are_accepted():
    obs = Observation(origin=(math.nan, 0.0, 0.0), cloud=[(math.inf, 0.0, 0.0)], max_obstacle_range=math.nan)
    assert math.isnan(obs.origin[0])
    assert math.isinf(obs.cloud[0, 0])
    assert math.isnan(obs.max_obstacle_range)


def test_from_cloud_disables_raytracing():
    obs = Observation.from_cloud([(1.0, 2.0, 3.0)], 2.5)
    assert obs.max_obstacle_range == 2.5
    assert obs.min_obstacle_range == 0.0
    assert obs.min_raytrace_range == 0.0
    assert obs.max_raytrace_range == 0.0
    assert obs.orientation_in_global_frame == 0.0
    assert obs.fov == 0.0
    np.testing.assert_array_equal(obs.origin, [0.0, 0.0, 0.0])
    assert obs.num_points == 1


def test_from_legacy_ranges_is_deprecated():
    with pytest.deprecated_call():
        obs = Observation.from_legacy_ranges((1.0, 1.0, 0.0), [(2.0, 1.0, 0.0)], 3.0, 3.5)
    assert obs.min_obstacle_range == 0.0
    assert obs.min_raytrace_range == 0.0
    assert obs.max_obstacle_range == 3.0
    assert obs.max_raytrace_range == 3.5
    assert obs.orientation_in_global_frame == 0.0
    assert obs.fov == 0.0
    np.testing.assert_array_equal(obs.origin, [1.0, 1.0, 0.0])


def test_constructor_takes_ownership_of_inputs():
    origin = np.array([0.0, 0.0, 0.0])
    cloud = np.array([[1.0, 0.0, 0.0]], dtype=np.float32)
    obs = Observation(origin=origin, cloud=cloud, max_obstacle_range=1.0)

    origin[0] = 9.0
    cloud[0, 0] = 9.0
    assert obs.origin[0] == 0.0
    assert obs.cloud[0, 0] == 1.0
    assert not np.shares_memory(obs.cloud, cloud)


def test_fields_are_read_only(full_obs):
    with pytest.raises(dataclasses.FrozenInstanceError):
        full_obs.max_obstacle_range = 1.0
    with pytest.raises(ValueError):
        full_obs.cloud[0, 0] = 3.0
    with pytest.raises(ValueError):
        full_obs.origin[0] = 3.0


@pytest.mark.parametrize("make_copy", [Observation.copy, copy.copy, copy.deepcopy])
def test_copy_is_deep_and_lossless(full_obs, make_copy):
    dup = make_copy(full_obs)
    assert dup is not full_obs
    assert dup.cloud is not full_obs.cloud
    assert not np.shares_memory(dup.cloud, full_obs.cloud)
    assert not np.shares_memory(dup.origin, full_obs.origin)
    np.testing.assert_array_equal(dup.cloud, full_obs.cloud)
    np.testing.assert_array_equal(dup.origin, full_obs.origin)
    assert dup.scalars() == full_obs.scalars()
    assert dup == full_obs
    assert not dup.cloud.flags.writeable


def test_copy_of_empty_observation():
    dup = Observation().copy()
    assert dup.is_empty
    assert dup == Observation()


def test_equality_compares_every_field(full_obs):
    other = dataclasses.replace(full_obs, fov=0.0)
    assert other != full_obs
    moved = dataclasses.replace(full_obs, cloud=[(1.0, 0.0, 0.0)])
    assert moved != full_obs
    assert full_obs != "observation"


def test_observation_is_unhashable(full_obs):
    with pytest.raises(TypeError):
        hash(full_obs)


def test_point_like_objects_are_accepted():
    origin = SimpleNamespace(x=1.0, y=2.0, z=3.0)
    cloud = [SimpleNamespace(x=4.0, y=5.0, z=6.0), SimpleNamespace(x=7.0, y=8.0, z=9.0)]
    obs = Observation(origin=origin, cloud=cloud)
    np.testing.assert_array_equal(obs.origin, [1.0, 2.0, 3.0])
    np.testing.assert_array_equal(obs.cloud, [[4.0, 5.0, 6.0], [7.0, 8.0, 9.0]])


def test_empty_array_cloud_is_valid():
    obs = Observation(cloud=np.empty((0,)))
    assert obs.cloud.shape == (0, 3)


@pytest.mark.parametrize(
    "kwargs",
    [
        {"origin": (0.0, 0.0)},
        {"cloud": [(1.0, 2.0)]},
        {"cloud": np.zeros((2, 4))},
        {"cloud": np.zeros((5, 0))},
        {"cloud": np.zeros((0, 2))},
    ],
)
def test_structural_shape_errors(kwargs):
    with pytest.raises(ValueError):
        Observation(**kwargs)


def test_repr_is_compact(full_obs):
    text = repr(full_obs)
    assert text.startswith("Observation(origin=(1, 2, 0.5), num_points=3")
    assert "fov=1.5" in text
