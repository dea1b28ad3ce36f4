import pytest

from wvdm.cli import build_engine, build_parser, main
from wvdm.params import ParticleType, PathMode, WindingRatio


def test_no_arguments_prints_help(capsys):
    assert main([]) == 0
    assert 'Quick start' in capsys.readouterr().out


def test_build_engine_from_flags():
    args = build_parser().parse_args([
        '--mode', 'lemniscate-c', '--winding', '2:1', '--spin', '1',
        '--particle', 'positron', '--precession', '-3', '--speed', '1.0',
        '--trail', '1.0', '--inner', '2.0', '--outer', '4.0',
    ])
    engine, controls = build_engine(args)
    assert engine.motion.path_mode is PathMode.LEMNISCATE_C
    assert engine.motion.winding_ratio is WindingRatio.TWO_ONE
    assert engine.motion.spin_direction == 1
    assert engine.motion.precession == 0.0
    assert engine.motion.photon_speed == pytest.approx(10.0)
    assert engine.particle is ParticleType.POSITRON
    assert engine.trails['main'].unlimited
    assert engine.shape.outer_radius == 4.0
    assert controls.transparency == 0.5


def test_fine_structure_flag():
    engine, controls = build_engine(build_parser().parse_args(['--fine-structure']))
    assert engine.shape.outer_radius == 13.7
    assert controls.camera_distance == 60.0


def test_headless_run_prints_summary(capsys):
    assert main(['--frames', '50', '--quiet']) == 0
    out = capsys.readouterr().out
    assert 'frames=50' in out
    assert 'L_tor' in out


def test_unknown_mode_is_usage_error():
    with pytest.raises(SystemExit) as exc:
        main(['--mode', 'spiral', '--frames', '1'])
    assert exc.value.code == 2


def test_validation_suite_passes(capsys):
    assert main(['--test', '--quiet']) == 0
    assert 'ALL TESTS PASSED' in capsys.readouterr().out
