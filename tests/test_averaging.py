import numpy as np
import pytest

from wvdm.averaging import FIELD_CHANNELS, CycleAccumulator


def feed(acc, angles, spin=1, base=1.0):
    done = []
    for angle in angles:
        sample = {name: angle * np.array([1.0, 0.0, 0.0]) for name in acc.channels}
        done.append(acc.update(angle, spin, base, sample))
    return done


def test_first_cycle_is_anchored_at_first_sample():
    acc = CycleAccumulator(FIELD_CHANNELS)
    done = feed(acc, [0.25, 0.5, 0.75, 1.0, 1.25])
    assert done == [False, False, False, False, True]
    # completing sample is not included: mean of 0.25..1.0
    assert np.allclose(acc.averages['electric'], [0.625, 0.0, 0.0])
    assert acc.cycle_start_angle == 1.25
    assert acc.sample_count == 0
    assert acc.cycles_completed == 1


def test_negative_spin_counts_decreasing_angle():
    acc = CycleAccumulator(('electric',))
    done = feed(acc, [-0.25, -0.5, -0.75, -1.0, -1.25], spin=-1)
    assert done[-1] is True
    assert np.allclose(acc.averages['electric'], [-0.625, 0.0, 0.0])


def test_averages_persist_until_next_completion():
    acc = CycleAccumulator(('electric',))
    feed(acc, [0.25, 0.5, 0.75, 1.0, 1.25])
    published = acc.averages['electric'].copy()
    feed(acc, [1.5, 1.75])
    assert np.array_equal(acc.averages['electric'], published)
    assert np.allclose(acc.running_mean('electric'), [1.625, 0.0, 0.0])


def test_non_finite_samples_are_skipped():
    acc = CycleAccumulator(('electric',))
    acc.update(0.0, 1, 1.0, {'electric': np.array([1.0, 1.0, 1.0])})
    acc.update(0.1, 1, 1.0, {'electric': np.array([np.nan, 0.0, 0.0])})
    acc.update(0.2, 1, 1.0, {'electric': np.array([0.0, np.inf, 0.0])})
    assert acc.sample_count == 1
    assert acc.skipped_samples == 2
    assert np.allclose(acc.running_mean('electric'), [1.0, 1.0, 1.0])


def test_empty_cycle_does_not_publish():
    acc = CycleAccumulator(('electric',))
    acc.update(0.0, 1, 1.0, {'electric': np.ones(3)})
    acc.reset()
    acc.update(0.0, 1, 1.0, {'electric': np.array([np.nan] * 3)})
    assert acc.update(5.0, 1, 1.0, {'electric': np.ones(3)}) is True
    assert acc.cycles_completed == 0
    assert np.array_equal(acc.averages['electric'], np.zeros(3))


def test_reset_zeros_published_averages():
    acc = CycleAccumulator(FIELD_CHANNELS)
    feed(acc, [0.25, 0.5, 0.75, 1.0, 1.25])
    acc.reset()
    for name in FIELD_CHANNELS:
        assert np.array_equal(acc.averages[name], np.zeros(3))
    assert acc.sample_count == 0
    assert acc.cycles_completed == 0


def test_progress():
    acc = CycleAccumulator(('electric',))
    assert acc.progress(1.0, 1) == 0.0
    feed(acc, [0.0, 0.5])
    assert acc.progress(1.0, 1) == pytest.approx(0.5)
