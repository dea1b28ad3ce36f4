"""
Per-mode path models.

Each path family implements the same interface, so the frame loop never
branches on the mode tag:

    position(t, shape, motion)                              -> (3,)
    velocity(t, shape, motion)                              -> (3,)
    fields(t, position, velocity, shape, motion, particle)  -> FieldSample
    momentum(t, position, velocity, shape, motion)          -> MomentumSample
    base_unit(motion)       angle of one lap (averaging, trail length)
    loop_angle(t, motion)   driving angle, including precession
    trail_angle(t, motion)  bare angle, without the precession multiplier
    trail_lobe(t, motion)   trail buffer the current point belongs to
"""

import numpy as np

from . import curves
from .curves import FOUR_PI, LEFT, RIGHT
from .differentiation import (
    AnalyticDifferentiator, NumericalDifferentiator, c_curve_velocity, torus_velocity,
)
from .fields import rotating_transverse_fields, spheroid_fields, torus_fields
from .momentum import (
    lemniscate_momentum, lemniscate_normalization, torus_momentum, torus_normalization,
)
from .params import PathMode, parse_path_mode
from .vectors import rot_y

MAIN = 'main'


class PathModel:
    """Base class; subclasses supply the geometry."""

    mode = None
    trail_lobes = (MAIN,)

    def __init__(self):
        self.differentiator = NumericalDifferentiator(
            self.position, reason='no closed-form derivative for this path')

    def position(self, t, shape, motion):
        raise NotImplementedError

    def velocity(self, t, shape, motion):
        return self.differentiator.velocity(t, shape, motion)

    def fields(self, t, position, velocity, shape, motion, particle):
        raise NotImplementedError

    def momentum(self, t, position, velocity, shape, motion):
        raise NotImplementedError

    def base_unit(self, motion):
        return FOUR_PI

    def loop_angle(self, t, motion):
        raise NotImplementedError

    def trail_angle(self, t, motion):
        return self.loop_angle(t, motion)

    def trail_lobe(self, t, motion):
        return MAIN

    def trail_position(self, position, shape):
        return position


class TorusPath(PathModel):
    mode = PathMode.TORUS

    def __init__(self):
        self.differentiator = AnalyticDifferentiator(torus_velocity)

    def position(self, t, shape, motion):
        return curves.torus_position(t, shape, motion)

    def _basis(self, t, shape, motion):
        major, minor = shape.torus_radii()
        u, v = curves.torus_angles(t, motion)
        return u, v, curves.torus_tangents(u, v, major, minor)

    def fields(self, t, position, velocity, shape, motion, particle):
        u, v, (r_u, r_v) = self._basis(t, shape, motion)
        return torus_fields(u, v, r_u, r_v, velocity, particle)

    def momentum(self, t, position, velocity, shape, motion):
        # Velocity per toroidal lap: the toroidal rate counts as 1.
        major, _ = shape.torus_radii()
        u_rate, _ = motion.winding_ratio.rates
        _, _, (r_u, r_v) = self._basis(t, shape, motion)
        return torus_momentum(position, np.asarray(velocity) / u_rate, r_u, r_v,
                              torus_normalization(major))

    def base_unit(self, motion):
        u_rate, _ = motion.winding_ratio.rates
        return u_rate

    def loop_angle(self, t, motion):
        u, _ = curves.torus_angles(t, motion)
        return u

    def trail_angle(self, t, motion):
        u_rate, _ = motion.winding_ratio.rates
        return t * u_rate * motion.spin_direction

    def trail_position(self, position, shape):
        major, minor = shape.torus_radii()
        return curves.constrain_to_torus(position, major, minor)


class LemniscateCPath(PathModel):
    mode = PathMode.LEMNISCATE_C

    def __init__(self):
        self.differentiator = AnalyticDifferentiator(c_curve_velocity)

    def position(self, t, shape, motion):
        return curves.c_curve_position(t, shape, motion)

    def fields(self, t, position, velocity, shape, motion, particle):
        u, _ = curves.viviani_phase(t, motion)
        return rotating_transverse_fields(position, velocity, u, particle)

    def momentum(self, t, position, velocity, shape, motion):
        a, c = curves.spheroid_axes(shape)
        return lemniscate_momentum(position, velocity, lemniscate_normalization(a, c))

    def loop_angle(self, t, motion):
        u, _ = curves.viviani_phase(t, motion)
        return u


class LemniscateSPath(PathModel):
    mode = PathMode.LEMNISCATE_S
    trail_lobes = (LEFT, RIGHT)

    def __init__(self):
        reason = 'reflected two-lobe formula has no maintained closed-form derivative'
        self.differentiators = {
            LEFT: NumericalDifferentiator(curves.s_left_position, reason=reason),
            RIGHT: NumericalDifferentiator(curves.s_right_position, reason=reason),
        }
        self.differentiator = self.differentiators[LEFT]

    def position(self, t, shape, motion):
        return curves.s_curve_position(t, shape, motion)

    def _rotation(self, t, motion):
        if motion.precession == 0:
            return None
        return rot_y(curves.s_precession_angle(curves.s_phase(t, motion), motion.precession))

    def lobe_at(self, t, position, motion):
        """Left for x < 0, right for x >= 0, measured in the unprecessed frame."""
        rotation = self._rotation(t, motion)
        body = position if rotation is None else rotation.T @ position
        return LEFT if body[0] < 0 else RIGHT

    def velocity(self, t, shape, motion):
        lobe = self.lobe_at(t, self.position(t, shape, motion), motion)
        return self.differentiators[lobe].velocity(t, shape, motion)

    def fields(self, t, position, velocity, shape, motion, particle):
        a, c = curves.spheroid_axes(shape)
        lobe = self.lobe_at(t, position, motion)
        center = np.array([-a if lobe == LEFT else a, 0.0, 0.0])
        return spheroid_fields(position, velocity, center, a, c, particle,
                               rotation=self._rotation(t, motion))

    def momentum(self, t, position, velocity, shape, motion):
        a, c = curves.spheroid_axes(shape)
        return lemniscate_momentum(position, velocity, lemniscate_normalization(a, c))

    def loop_angle(self, t, motion):
        return curves.s_phase(t, motion)

    def trail_lobe(self, t, motion):
        return curves.s_lobe_for_phase(curves.s_phase(t, motion))


_MODELS = {
    PathMode.TORUS: TorusPath(),
    PathMode.LEMNISCATE_S: LemniscateSPath(),
    PathMode.LEMNISCATE_C: LemniscateCPath(),
}


def get_path_model(mode) -> PathModel:
    return _MODELS[parse_path_mode(mode)]


# ── Mode-tagged entry points ─────────────────────────────────────────

def position(mode, t, shape, motion):
    return get_path_model(mode).position(t, shape, motion)


def velocity(mode, t, shape, motion):
    return get_path_model(mode).velocity(t, shape, motion)


def fields(mode, t, position, velocity, shape, motion, particle):
    return get_path_model(mode).fields(t, position, velocity, shape, motion, particle)


def momentum(mode, t, position, velocity, shape, motion):
    return get_path_model(mode).momentum(t, position, velocity, shape, motion)
