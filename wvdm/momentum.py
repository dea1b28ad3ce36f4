"""
Momentum of the circulating photon, in normalised model units.

The velocity is scaled by a per-mode normalisation factor and split into
two orthogonal parts; each part gets its own angular momentum L = r × p
about the origin (r scaled by the same factor):

    torus        toroidal (along ∂r/∂u) + poloidal (along ∂r/∂v)
    lemniscates  lemniscate (azimuthal about the z-axis) + poloidal (rest)
"""

from dataclasses import dataclass

import numpy as np

from .params import MIN_RADIUS
from .vectors import is_finite, zero

# Display-scale knob for the lemniscate modes: keeps their magnitudes
# comparable with torus mode. Not a physical constant.
LEMNISCATE_DISPLAY_SCALE = 10.0

AXIS_EPS = 1e-10


@dataclass(frozen=True)
class MomentumSample:
    linear: np.ndarray
    first_angular: np.ndarray      # toroidal (torus) or lemniscate
    second_angular: np.ndarray     # poloidal
    total: np.ndarray

    @property
    def is_finite(self) -> bool:
        return all(is_finite(v) for v in
                   (self.linear, self.first_angular, self.second_angular, self.total))


def torus_normalization(major):
    return 1.0 / max(MIN_RADIUS, major)


def lemniscate_normalization(minor, major):
    length = max(2 * minor, major) * 4 * np.pi
    return LEMNISCATE_DISPLAY_SCALE / max(MIN_RADIUS, length)


def _project(v, direction):
    d2 = float(np.dot(direction, direction))
    if d2 == 0.0:
        return zero()
    return (np.dot(v, direction) / d2) * direction


def torus_momentum(position, velocity, r_u, r_v, normalization):
    p = np.asarray(velocity, dtype=float) * normalization
    r = np.asarray(position, dtype=float) * normalization

    p_tor = _project(p, r_u)
    p_pol = _project(p, r_v)

    L_tor = np.cross(r, p_tor)
    L_pol = np.cross(r, p_pol)
    return MomentumSample(linear=p_tor + p_pol,
                          first_angular=L_tor,
                          second_angular=L_pol,
                          total=L_tor + L_pol)


def lemniscate_momentum(position, velocity, normalization):
    p = np.asarray(velocity, dtype=float) * normalization
    r = np.asarray(position, dtype=float) * normalization

    x, y = float(position[0]), float(position[1])
    rho = np.hypot(x, y)
    if rho < AXIS_EPS:
        p_lem = zero()
    else:
        azimuthal = np.array([-y / rho, x / rho, 0.0])
        p_lem = np.dot(p, azimuthal) * azimuthal
    p_pol = p - p_lem

    L_lem = np.cross(r, p_lem)
    L_pol = np.cross(r, p_pol)
    return MomentumSample(linear=p,
                          first_angular=L_lem,
                          second_angular=L_pol,
                          total=L_lem + L_pol)
