import numpy as np
import pytest

from wvdm.occlusion import (
    OcclusionOracle, SpheroidSolid, TorusSolid, UnionSolid, camera_position, solid_for,
)
from wvdm.params import MotionParameters, PathMode, ShapeParameters


def test_camera_position():
    assert np.allclose(camera_position(10.0, 0.0, 0.0), [10.0, 0.0, 0.0])
    assert np.allclose(camera_position(10.0, 90.0, 0.0), [0.0, 0.0, 10.0])
    assert np.allclose(camera_position(5.0, 0.0, 90.0), [0.0, 5.0, 0.0])


def test_torus_far_side_is_obstructed():
    solid = TorusSolid(2.0, 0.5)
    oracle = OcclusionOracle(solid, camera=(0.0, 0.0, 20.0))
    assert oracle.is_obstructed(np.array([2.0, 0.0, -0.5]))
    assert not oracle.is_obstructed(np.array([2.0, 0.0, 0.5]))
    # straight down through the hole
    assert not oracle(np.array([0.0, 0.0, -3.0]))


def test_entry_distance_is_refined():
    solid = TorusSolid(2.0, 0.5)
    oracle = OcclusionOracle(solid, camera=(2.0, 0.0, 20.0))
    assert oracle.entry_distance(np.array([2.0, 0.0, -0.5])) == pytest.approx(19.5, abs=1e-6)
    assert oracle.entry_distance(np.array([2.0, 0.0, 5.0])) is None


def test_thin_tube_is_not_missed():
    solid = TorusSolid(13.65, 0.1)
    oracle = OcclusionOracle(solid, camera=(13.65, 0.0, 60.0))
    assert oracle.is_obstructed(np.array([13.65, 0.0, -0.5]))


def test_spheroid_back_is_obstructed():
    solid = SpheroidSolid((0.0, 0.0, 0.0), 1.5, 3.0)
    oracle = OcclusionOracle(solid, camera=(20.0, 0.0, 0.0))
    assert oracle.is_obstructed(np.array([-1.5, 0.0, 0.0]))
    assert not oracle.is_obstructed(np.array([1.5, 0.0, 0.0]))


def test_union_takes_minimum():
    left = SpheroidSolid((-1.0, 0.0, 0.0), 1.0, 1.0)
    right = SpheroidSolid((1.0, 0.0, 0.0), 1.0, 1.0)
    union = UnionSolid([left, right])
    pts = np.array([[-1.0, 0.0, 0.0], [1.0, 0.0, 0.0], [0.0, 5.0, 0.0]])
    values = union(pts)
    assert values[0] < 0 and values[1] < 0 and values[2] > 0


def test_solid_for_each_mode(shape):
    assert isinstance(solid_for(PathMode.TORUS, shape), TorusSolid)
    assert isinstance(solid_for('lemniscate-c', shape), SpheroidSolid)
    s_solid = solid_for(PathMode.LEMNISCATE_S, shape)
    assert isinstance(s_solid, UnionSolid)
    assert np.allclose([p.center for p in s_solid.parts], [[-1.5, 0, 0], [1.5, 0, 0]])


def test_s_solid_follows_precession():
    shape = ShapeParameters(1.0, 2.0)
    motion = MotionParameters(path_mode=PathMode.LEMNISCATE_S, precession=0.5, spin_direction=1)
    # phase π at t = 1/4 → θ = π/4
    solid = solid_for(PathMode.LEMNISCATE_S, shape, motion, t=0.25)
    left = solid.parts[0].center
    assert np.linalg.norm(left) == pytest.approx(1.0)
    assert abs(left[2]) > 0.5
