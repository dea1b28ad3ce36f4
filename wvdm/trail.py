"""Bounded trail of recent photon positions."""

from collections import deque
from dataclasses import dataclass
from enum import Enum

import numpy as np

MAX_TRAIL_POINTS = 5000
UNLIMITED_ROTATIONS = 100.0   # trail length at or above this means "no angular limit"


class TrailColor(Enum):
    VISIBLE = 'visible'
    OBSTRUCTED = 'obstructed'


@dataclass(frozen=True)
class TrailPoint:
    position: np.ndarray
    color: TrailColor
    sequential_index: int
    loop_angle: float


class TrailBuffer:
    """
    Append at the back, evict from the front.

    Eviction after every append: drop the oldest point while the angle span
    to the newest exceeds trail_length_rotations × base_unit (skipped when
    the length is the unlimited sentinel), then trim to max_points.
    sequential_index keeps counting across evictions.
    """

    def __init__(self, trail_length_rotations=1.0, base_unit=4 * np.pi,
                 max_points=MAX_TRAIL_POINTS):
        self.trail_length_rotations = trail_length_rotations
        self.base_unit = base_unit
        self.max_points = max_points
        self._points = deque()
        self._next_index = 0

    def __len__(self):
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def __getitem__(self, idx):
        return self._points[idx]

    @property
    def unlimited(self) -> bool:
        return self.trail_length_rotations >= UNLIMITED_ROTATIONS

    @property
    def max_angle_span(self) -> float:
        return float('inf') if self.unlimited else self.trail_length_rotations * self.base_unit

    def append(self, position, is_obstructed, loop_angle) -> TrailPoint:
        point = TrailPoint(position=np.array(position, dtype=float),
                           color=TrailColor.OBSTRUCTED if is_obstructed else TrailColor.VISIBLE,
                           sequential_index=self._next_index,
                           loop_angle=float(loop_angle))
        self._next_index += 1
        self._points.append(point)
        self._evict(point.loop_angle)
        return point

    def _evict(self, current_angle):
        if not self.unlimited:
            limit = self.max_angle_span
            while len(self._points) > 1 and abs(current_angle - self._points[0].loop_angle) > limit:
                self._points.popleft()
        while len(self._points) > self.max_points:
            self._points.popleft()

    def clear(self):
        self._points.clear()
        self._next_index = 0

    def recolor(self, is_obstructed):
        """Re-run the occlusion test on every stored point (e.g. after a view change)."""
        self._points = deque(
            TrailPoint(position=p.position,
                       color=TrailColor.OBSTRUCTED if is_obstructed(p.position) else TrailColor.VISIBLE,
                       sequential_index=p.sequential_index,
                       loop_angle=p.loop_angle)
            for p in self._points)

    def positions(self) -> np.ndarray:
        if not self._points:
            return np.zeros((0, 3))
        return np.array([p.position for p in self._points])

    def colors(self):
        return [p.color for p in self._points]

    def angle_span(self) -> float:
        if len(self._points) < 2:
            return 0.0
        return abs(self._points[-1].loop_angle - self._points[0].loop_angle)
