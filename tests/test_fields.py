import numpy as np
import pytest

from wvdm import curves
from wvdm.fields import (
    perpendicular_unit, rotating_transverse_fields, torus_fields, transverse_basis,
)
from wvdm.modes import get_path_model
from wvdm.params import MotionParameters, ParticleType, PathMode

TIMES = np.linspace(0.0, 1.5, 61)


def _fields(mode, shape, motion, t, particle):
    model = get_path_model(mode)
    pos = model.position(t, shape, motion)
    vel = model.velocity(t, shape, motion)
    return model.fields(t, pos, vel, shape, motion, particle)


@pytest.mark.parametrize('particle', list(ParticleType))
@pytest.mark.parametrize('precession', [0.0, 0.3])
def test_fields_are_unit_and_orthogonal(shape, mode, particle, precession):
    motion = MotionParameters(path_mode=mode, precession=precession)
    for t in TIMES:
        f = _fields(mode, shape, motion, t, particle)
        assert np.linalg.norm(f.electric) == pytest.approx(1.0, abs=1e-9)
        assert np.linalg.norm(f.magnetic) == pytest.approx(1.0, abs=1e-9)
        assert abs(np.dot(f.electric, f.magnetic)) < 1e-9


def test_particle_flip_reverses_electric_field(shape, mode):
    motion = MotionParameters(path_mode=mode, precession=0.1)
    for t in TIMES[::5]:
        e = _fields(mode, shape, motion, t, ParticleType.ELECTRON)
        p = _fields(mode, shape, motion, t, ParticleType.POSITRON)
        assert np.allclose(e.electric, -p.electric)


def test_particle_flip_reverses_b_on_torus_only(shape):
    for mode in PathMode:
        motion = MotionParameters(path_mode=mode)
        t = 0.137
        e = _fields(mode, shape, motion, t, ParticleType.ELECTRON)
        p = _fields(mode, shape, motion, t, ParticleType.POSITRON)
        if mode is PathMode.TORUS:
            assert np.allclose(e.magnetic, -p.magnetic)
        else:
            assert np.allclose(e.magnetic, p.magnetic)


def test_torus_electron_field_points_into_tube(shape):
    major, _ = shape.torus_radii()
    motion = MotionParameters()
    for t in TIMES:
        pos = curves.torus_position(t, shape, motion)
        center = major * np.array([pos[0], pos[1], 0.0]) / np.hypot(pos[0], pos[1])
        f = _fields(PathMode.TORUS, shape, motion, t, ParticleType.ELECTRON)
        assert np.dot(f.electric, pos - center) < 0


def test_torus_b_fallback_when_velocity_vanishes(shape):
    major, minor = shape.torus_radii()
    r_u, r_v = curves.torus_tangents(0.4, 1.1, major, minor)
    f = torus_fields(0.4, 1.1, r_u, r_v, np.zeros(3), ParticleType.ELECTRON)
    assert np.linalg.norm(f.magnetic) == pytest.approx(1.0)
    assert abs(np.dot(f.magnetic, f.electric)) < 1e-12


def test_transverse_basis_is_orthonormal_and_transverse():
    pos = np.array([1.0, 2.0, 0.5])
    vel = np.array([0.3, -1.0, 2.0])
    i_vec, j_vec = transverse_basis(pos, vel)
    tangent = vel / np.linalg.norm(vel)
    assert np.linalg.norm(i_vec) == pytest.approx(1.0)
    assert np.linalg.norm(j_vec) == pytest.approx(1.0)
    assert abs(np.dot(i_vec, j_vec)) < 1e-12
    assert abs(np.dot(i_vec, tangent)) < 1e-12
    assert abs(np.dot(j_vec, tangent)) < 1e-12


def test_transverse_basis_falls_back_at_origin():
    i_vec, _ = transverse_basis(np.zeros(3), np.array([0.0, 0.0, 1.0]))
    assert np.allclose(i_vec, [1.0, 0.0, 0.0])


def test_rotating_field_turns_with_phase():
    pos = np.array([1.0, 0.0, 0.0])
    vel = np.array([0.0, 1.0, 0.0])
    e0 = rotating_transverse_fields(pos, vel, 0.0, ParticleType.ELECTRON).electric
    e1 = rotating_transverse_fields(pos, vel, np.pi / 2, ParticleType.ELECTRON).electric
    assert np.allclose(e0, [-1.0, 0.0, 0.0])
    assert abs(np.dot(e0, e1)) < 1e-12


@pytest.mark.parametrize('direction', [
    None, np.array([0.0, 0.0, 1.0]), np.array([1.0, 0.0, 0.0]), np.array([0.6, 0.0, 0.8]),
])
def test_perpendicular_unit_never_zero(direction):
    u = perpendicular_unit(direction)
    assert np.linalg.norm(u) == pytest.approx(1.0)
    if direction is not None:
        assert abs(np.dot(u, direction)) < 1e-12


@pytest.mark.parametrize('t, component', [(1 / 16, 'J'), (1 / 8, '-I')])
def test_c_polarization_phase_equals_curve_parameter(shape, t, component):
    model = get_path_model(PathMode.LEMNISCATE_C)
    motion = MotionParameters(path_mode=PathMode.LEMNISCATE_C, spin_direction=1)
    pos = model.position(t, shape, motion)
    vel = model.velocity(t, shape, motion)
    i_vec, j_vec = transverse_basis(pos, vel)
    expected = {'J': j_vec, '-I': -i_vec}[component]
    f = model.fields(t, pos, vel, shape, motion, ParticleType.ELECTRON)
    assert np.allclose(f.electric, expected)
