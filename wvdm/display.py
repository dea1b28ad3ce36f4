"""Text summaries of the field and momentum readings."""

import time

import numpy as np

DISPLAY_INTERVAL = 0.5  # seconds between text refreshes (twice per second)


def format_scientific(value) -> str:
    """Fixed 3 decimals, or 3-digit scientific below 1e-3 / at or above 1e3."""
    value = float(value)
    if (abs(value) < 0.001 and value != 0) or abs(value) >= 1000:
        return f"{value:.3e}"
    return f"{value:.3f}"


def format_vector(v) -> str:
    """|magnitude|: (x, y, z)"""
    v = np.asarray(v, dtype=float)
    mag = float(np.linalg.norm(v))
    return (f"|{format_scientific(mag)}|: "
            f"({format_scientific(v[0])}, {format_scientific(v[1])}, {format_scientific(v[2])})")


def angular_labels(mode_is_lemniscate):
    first = 'L_lem' if mode_is_lemniscate else 'L_tor'
    return first, 'L_pol', 'L_tot'


def build_readings(frame):
    """Label -> formatted vector for one engine frame (instantaneous and lap averages)."""
    first, second, total = angular_labels(frame.mode.is_lemniscate)
    f_avg = frame.field_averages
    m_avg = frame.momentum_averages
    m = frame.momentum
    return {
        'E': format_vector(frame.fields.electric),
        'B': format_vector(frame.fields.magnetic),
        'p': format_vector(m.linear),
        first: format_vector(m.first_angular),
        second: format_vector(m.second_angular),
        total: format_vector(m.total),
        '<E>': format_vector(f_avg['electric']),
        '<B>': format_vector(f_avg['magnetic']),
        '<p>': format_vector(m_avg['linear']),
        f'<{first}>': format_vector(m_avg['first_angular']),
        f'<{second}>': format_vector(m_avg['second_angular']),
        f'<{total}>': format_vector(m_avg['total']),
    }


class DisplayThrottle:
    """True at most once per `interval` seconds of wall-clock time."""

    def __init__(self, interval=DISPLAY_INTERVAL, clock=time.monotonic):
        self.interval = interval
        self.clock = clock
        self.last_update = None

    def ready(self) -> bool:
        now = self.clock()
        if self.last_update is None or now - self.last_update >= self.interval:
            self.last_update = now
            return True
        return False

    def force_next(self):
        self.last_update = None


class TextPanel:
    """Display sink that keeps the latest readings for a renderer to draw."""

    def __init__(self):
        self.readings = {}
        self.updates = 0

    def update(self, readings):
        self.readings = dict(readings)
        self.updates += 1

    def text(self) -> str:
        width = max((len(k) for k in self.readings), default=0)
        return '\n'.join(f"{k:<{width}}  {v}" for k, v in self.readings.items())


class PrintSink(TextPanel):
    """Display sink that also prints each refresh."""

    def update(self, readings):
        super().update(readings)
        print(self.text())
        print('-' * 60)
