import numpy as np
import pytest

from wvdm.params import (
    MotionParameters, ParticleType, PathMode, ShapeParameters, WindingRatio,
    parse_particle_type, parse_path_mode, parse_spin_direction, parse_winding_ratio,
)


def test_default_torus_radii():
    major, minor = ShapeParameters().torus_radii()
    assert major == pytest.approx(2.25)
    assert minor == pytest.approx(0.75)


def test_inner_above_outer_is_corrected_and_floored():
    major, minor = ShapeParameters(inner_radius=5.0, outer_radius=3.0).torus_radii()
    assert major == pytest.approx(2.95)
    assert minor == pytest.approx(0.1)


def test_lemniscate_axes_floor_but_allow_oblate():
    shape = ShapeParameters(inner_radius=4.0, outer_radius=0.01)
    assert shape.minor_axis == 4.0
    assert shape.major_axis == 0.1


def test_winding_rates():
    assert WindingRatio.ONE_TWO.rates == (4 * np.pi, 2 * np.pi)
    assert WindingRatio.TWO_ONE.rates == (2 * np.pi, 4 * np.pi)


def test_parse_tags():
    assert parse_path_mode('lemniscate-s') is PathMode.LEMNISCATE_S
    assert parse_path_mode(PathMode.TORUS) is PathMode.TORUS
    assert parse_winding_ratio('2:1') is WindingRatio.TWO_ONE
    assert parse_particle_type('positron') is ParticleType.POSITRON
    assert parse_spin_direction('+1') == 1


@pytest.mark.parametrize('parser, value', [
    (parse_path_mode, 'lemniscate-x'),
    (parse_winding_ratio, '3:1'),
    (parse_particle_type, 'muon'),
    (parse_spin_direction, 0),
])
def test_unknown_tags_raise(parser, value):
    with pytest.raises(ValueError):
        parser(value)


def test_is_lemniscate():
    assert not PathMode.TORUS.is_lemniscate
    assert PathMode.LEMNISCATE_C.is_lemniscate


def test_with_changes_returns_new_instance():
    m = MotionParameters()
    m2 = m.with_changes(precession=0.5)
    assert m.precession == 0.0
    assert m2.precession == 0.5
    assert m2.spin_direction == m.spin_direction
