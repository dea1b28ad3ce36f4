"""
Parameter types for the photon path model.

Shape parameters carry the two radii exactly as the user set them; the
floors and the torus inner/outer correction are applied when a curve
asks for its radii, never to their ratio.  Lemniscate modes read the
same two numbers as (minor axis, major axis) and explicitly allow
minor > major (oblate spheroid).
"""

from dataclasses import dataclass, replace
from enum import Enum

import numpy as np

MIN_RADIUS = 0.1           # floor applied to every radius / axis
TORUS_MIN_GAP = 0.1        # outer must exceed inner by at least this


class PathMode(Enum):
    TORUS = 'torus'
    LEMNISCATE_S = 'lemniscate-s'
    LEMNISCATE_C = 'lemniscate-c'

    @property
    def is_lemniscate(self) -> bool:
        return self is not PathMode.TORUS


class WindingRatio(Enum):
    TWO_ONE = '2:1'     # 2π toroidal, 4π poloidal per unit time
    ONE_TWO = '1:2'     # 4π toroidal, 2π poloidal per unit time

    @property
    def rates(self):
        """(toroidal, poloidal) angular rates per unit animation time."""
        if self is WindingRatio.ONE_TWO:
            return 4 * np.pi, 2 * np.pi
        return 2 * np.pi, 4 * np.pi


class ParticleType(Enum):
    ELECTRON = 'electron'
    POSITRON = 'positron'


def _coerce(enum_cls, value):
    if isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        options = ', '.join(m.value for m in enum_cls)
        raise ValueError(f"unknown {enum_cls.__name__} {value!r} (expected one of: {options})") from None


def parse_path_mode(value) -> PathMode:
    return _coerce(PathMode, value)


def parse_winding_ratio(value) -> WindingRatio:
    return _coerce(WindingRatio, value)


def parse_particle_type(value) -> ParticleType:
    return _coerce(ParticleType, value)


def parse_spin_direction(value) -> int:
    spin = int(value)
    if spin not in (-1, 1):
        raise ValueError(f"spin direction must be -1 or +1, got {value!r}")
    return spin


@dataclass(frozen=True)
class ShapeParameters:
    """Inner/outer radius (torus) or minor/major axis (lemniscates)."""
    inner_radius: float = 1.5
    outer_radius: float = 3.0

    @property
    def minor_axis(self) -> float:
        return max(MIN_RADIUS, self.inner_radius)

    @property
    def major_axis(self) -> float:
        return max(MIN_RADIUS, self.outer_radius)

    def torus_radii(self):
        """(major, minor) torus radii with the inner < outer correction and floors."""
        inner = min(self.inner_radius, self.outer_radius - TORUS_MIN_GAP)
        major = max(MIN_RADIUS, (inner + self.outer_radius) / 2)
        minor = max(MIN_RADIUS, (self.outer_radius - inner) / 2)
        return major, minor


@dataclass(frozen=True)
class MotionParameters:
    precession: float = 0.0
    spin_direction: int = -1
    winding_ratio: WindingRatio = WindingRatio.ONE_TWO
    path_mode: PathMode = PathMode.TORUS
    photon_speed: float = 1.0

    def with_changes(self, **changes) -> 'MotionParameters':
        return replace(self, **changes)
