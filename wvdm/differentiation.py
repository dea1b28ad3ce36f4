"""
Velocity along the photon path.

Two strategies, kept separate so it is always clear which one produced a
given velocity:

    AnalyticDifferentiator   chain rule on a closed-form parameterization
                             (torus, C-curve)
    NumericalDifferentiator  finite difference of a position function
                             (S-curve lobes, and any mode without a
                             closed-form derivative)

Velocities are not normalised; callers normalise where they need a
direction.
"""

import numpy as np

from .curves import (
    C_LAP_RATE, spheroid_axes, torus_angle_rates, torus_angles,
    torus_tangents, viviani_body, viviani_body_derivative, viviani_phase,
)
from .vectors import rot_y

DT = 1e-4  # finite-difference step in animation time


def torus_velocity(t, shape, motion):
    """dr/dt = ∂r/∂u · du/dt + ∂r/∂v · dv/dt."""
    major, minor = shape.torus_radii()
    u, v = torus_angles(t, motion)
    du_dt, dv_dt = torus_angle_rates(motion)
    r_u, r_v = torus_tangents(u, v, major, minor)
    return r_u * du_dt + r_v * dv_dt


def c_curve_velocity(t, shape, motion):
    """
    Chain rule through the precession rotation.

    With (x, z) = R_y(θ)(x0, z0):  d/dθ (x, y, z) = (z, 0, -x).
    """
    a, c = spheroid_axes(shape)
    u, theta = viviani_phase(t, motion)
    du_dt = C_LAP_RATE * motion.spin_direction
    d_body = viviani_body_derivative(u, a, c) * du_dt
    if motion.precession == 0:
        return d_body

    dtheta_dt = motion.spin_direction * (motion.precession / 2) * C_LAP_RATE
    rot = rot_y(theta)
    pos = rot @ viviani_body(u, a, c)
    return rot @ d_body + dtheta_dt * np.array([pos[2], 0.0, -pos[0]])


class AnalyticDifferentiator:
    """Velocity from a closed-form derivative."""

    kind = 'analytic'

    def __init__(self, derivative):
        self.derivative = derivative

    def velocity(self, t, shape, motion):
        return self.derivative(t, shape, motion)


class NumericalDifferentiator:
    """
    Finite-difference velocity of a position function f(t, shape, motion).

    `reason` records why this path has no analytic derivative; it is shown
    by `describe()` so the choice of strategy stays auditable.
    """

    kind = 'numerical'

    def __init__(self, position_fn, dt=DT, scheme='forward', reason=''):
        if scheme not in ('forward', 'central'):
            raise ValueError(f"unknown finite-difference scheme {scheme!r}")
        self.position_fn = position_fn
        self.dt = dt
        self.scheme = scheme
        self.reason = reason

    def velocity(self, t, shape, motion):
        f = self.position_fn
        dt = self.dt
        if self.scheme == 'central':
            return (f(t + dt, shape, motion) - f(t - dt, shape, motion)) / (2 * dt)
        return (f(t + dt, shape, motion) - f(t, shape, motion)) / dt

    def describe(self) -> str:
        text = f"{self.scheme} difference, dt={self.dt:g}"
        if self.reason:
            text += f" ({self.reason})"
        return text
