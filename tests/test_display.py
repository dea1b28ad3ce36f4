import itertools

import numpy as np
import pytest

from wvdm.display import (
    DisplayThrottle, PrintSink, TextPanel, angular_labels, build_readings,
    format_scientific, format_vector,
)
from wvdm.engine import PhotonEngine
from wvdm.params import MotionParameters, PathMode


@pytest.mark.parametrize('value, text', [
    (0.0, '0.000'),
    (1.5, '1.500'),
    (-0.25, '-0.250'),
    (0.0005, '5.000e-04'),
    (-0.0002, '-2.000e-04'),
    (2500.0, '2.500e+03'),
    (999.0, '999.000'),
])
def test_format_scientific(value, text):
    assert format_scientific(value) == text


def test_format_vector():
    assert format_vector(np.array([3.0, 4.0, 0.0])) == '|5.000|: (3.000, 4.000, 0.000)'


def test_angular_labels():
    assert angular_labels(False) == ('L_tor', 'L_pol', 'L_tot')
    assert angular_labels(True) == ('L_lem', 'L_pol', 'L_tot')


@pytest.mark.parametrize('mode, first', [
    (PathMode.TORUS, 'L_tor'), (PathMode.LEMNISCATE_C, 'L_lem'),
])
def test_build_readings_keys(mode, first):
    engine = PhotonEngine(motion=MotionParameters(path_mode=mode))
    readings = build_readings(engine.tick())
    expected = {'E', 'B', 'p', first, 'L_pol', 'L_tot',
                '<E>', '<B>', '<p>', f'<{first}>', '<L_pol>', '<L_tot>'}
    assert set(readings) == expected
    assert readings['<E>'] == '|0.000|: (0.000, 0.000, 0.000)'


def test_throttle_limits_rate():
    now = [0.0]
    throttle = DisplayThrottle(interval=0.5, clock=lambda: now[0])
    assert throttle.ready()
    now[0] = 0.2
    assert not throttle.ready()
    now[0] = 0.5
    assert throttle.ready()
    throttle.force_next()
    assert throttle.ready()


def test_text_panel_and_print_sink(capsys):
    panel = TextPanel()
    panel.update({'E': 'a', '<E>': 'b'})
    assert panel.updates == 1
    assert panel.text().splitlines() == ['E    a', '<E>  b']

    sink = PrintSink()
    sink.update({'p': 'x'})
    assert 'p  x' in capsys.readouterr().out


def test_engine_pushes_readings_through_throttle():
    clock = itertools.count()
    panel = TextPanel()
    engine = PhotonEngine(display=panel, throttle=DisplayThrottle(interval=0.5, clock=lambda: next(clock)))
    engine.run(10)
    assert panel.updates == 10
    assert 'E' in panel.readings
