"""
Per-lap averaging of vector samples.

A CycleAccumulator sums named vector channels frame by frame.  When the
driving loop angle has advanced one base unit past the start of the
current cycle, the running means are published as the "last completed"
averages and the sums start over.  The published averages persist until
the next completion or an explicit reset().

The field and momentum accumulators are two instances of this class fed
the same loop angle every frame, so their cycles stay in phase.
"""

import numpy as np

from .vectors import is_finite

FIELD_CHANNELS = ('electric', 'magnetic')
MOMENTUM_CHANNELS = ('linear', 'first_angular', 'second_angular', 'total')


class CycleAccumulator:
    """Running sums over the current cycle plus the last completed averages."""

    def __init__(self, channels):
        self.channels = tuple(channels)
        self.reset()

    def reset(self):
        """Zero everything, including the published averages (no publish step)."""
        self.sums = {name: np.zeros(3) for name in self.channels}
        self.averages = {name: np.zeros(3) for name in self.channels}
        self.sample_count = 0
        self.cycle_start_angle = 0.0
        self.last_loop_angle = 0.0
        self.cycles_completed = 0
        self.skipped_samples = 0
        self._anchored = False

    def update(self, loop_angle, spin_direction, base_unit, sample) -> bool:
        """
        Feed one frame; returns True if this frame completed a cycle.

        `sample` maps every channel name to a 3-vector.  A completing frame
        publishes and restarts; it is not itself added.  Samples with any
        non-finite component are skipped.
        """
        if not self._anchored:
            # First frame after a reset starts the cycle where we are.
            self.cycle_start_angle = loop_angle
            self._anchored = True

        self.last_loop_angle = loop_angle
        if spin_direction > 0:
            angle_delta = loop_angle - self.cycle_start_angle
        else:
            angle_delta = self.cycle_start_angle - loop_angle

        if angle_delta >= base_unit:
            if self.sample_count > 0:
                self.averages = {name: self.sums[name] / self.sample_count
                                 for name in self.channels}
                self.cycles_completed += 1
            self.sums = {name: np.zeros(3) for name in self.channels}
            self.sample_count = 0
            self.cycle_start_angle = loop_angle
            return True

        vectors = [np.asarray(sample[name], dtype=float) for name in self.channels]
        if not all(is_finite(v) for v in vectors):
            self.skipped_samples += 1
            return False

        for name, v in zip(self.channels, vectors):
            self.sums[name] = self.sums[name] + v
        self.sample_count += 1
        return False

    def running_mean(self, name):
        if self.sample_count == 0:
            return np.zeros(3)
        return self.sums[name] / self.sample_count

    def progress(self, base_unit, spin_direction) -> float:
        """Fraction of the current cycle already covered, in [0, 1]."""
        if not self._anchored or base_unit <= 0:
            return 0.0
        delta = (self.last_loop_angle - self.cycle_start_angle) * (1 if spin_direction > 0 else -1)
        return float(min(1.0, max(0.0, delta / base_unit)))
