"""
Curve Parameterization
======================

Closed-form photon paths for the three path families:

    torus          (M + m cos v) cos u, (M + m cos v) sin u, m sin v
    lemniscate-c   Viviani curve on the spheroid x²/a² + y²/c² + z²/a² = 1,
                   precessing about the y (symmetry) axis
    lemniscate-s   two loops on touching spheroids centred at x = ∓a,
                   the right loop the point reflection of the left one
                   traced with its parameter reversed

Every position is evaluated directly from `animation_time`; nothing is
integrated, so the torus and spheroid identities hold to rounding error
no matter how long the animation runs.
"""

import numpy as np

from .vectors import rot_y

TWO_PI = 2 * np.pi
FOUR_PI = 4 * np.pi

# Viviani lap parameter grows at 2·4π per unit time; the factor 2 matches
# the on-screen photon speed to torus mode.
C_LAP_RATE = 2 * FOUR_PI

# One full S pattern (left lobe then right lobe) per unit time.
S_LAP_RATE = FOUR_PI
# Inclination of the S loops out of the xy-plane.
S_TILT = np.pi / 4

LEFT = 'left'
RIGHT = 'right'


# ── Torus ────────────────────────────────────────────────────────────

def torus_angle_rates(motion):
    """(du/dt, dv/dt) including precession and spin direction."""
    u_rate, v_rate = motion.winding_ratio.rates
    s = motion.spin_direction
    p = motion.precession
    return u_rate * (1 + p) * s, v_rate * (1 + 2 * p) * s


def torus_angles(t, motion):
    """Toroidal angle u and poloidal angle v at animation time t."""
    du, dv = torus_angle_rates(motion)
    return t * du, t * dv


def torus_point(u, v, major, minor):
    rho = major + minor * np.cos(v)
    return np.array([rho * np.cos(u), rho * np.sin(u), minor * np.sin(v)])


def torus_tangents(u, v, major, minor):
    """Surface tangent basis (∂r/∂u, ∂r/∂v)."""
    rho = major + minor * np.cos(v)
    r_u = np.array([-rho * np.sin(u), rho * np.cos(u), 0.0])
    r_v = np.array([-minor * np.sin(v) * np.cos(u),
                    -minor * np.sin(v) * np.sin(u),
                    minor * np.cos(v)])
    return r_u, r_v


def torus_position(t, shape, motion):
    major, minor = shape.torus_radii()
    u, v = torus_angles(t, motion)
    return torus_point(u, v, major, minor)


def constrain_to_torus(position, major, minor):
    """Project a point that strayed outside the torus bounds back onto the surface."""
    p = np.array(position, dtype=float)
    rho = np.hypot(p[0], p[1])
    rho_max = major + minor
    rho_min = max(0.0, major - minor)
    if rho_min <= rho <= rho_max and abs(p[2]) <= minor:
        return p

    clamped = min(rho_max, max(rho_min, rho))
    angle = np.arctan2(p[1], p[0])
    p[0] = clamped * np.cos(angle)
    p[1] = clamped * np.sin(angle)
    dist_from_major = abs(clamped - major)
    valid_z = np.sqrt(max(0.0, minor**2 - dist_from_major**2))
    if abs(p[2]) > valid_z:
        p[2] = np.sign(p[2]) * valid_z
    return p


# ── C-type lemniscate (Viviani) ──────────────────────────────────────

def spheroid_axes(shape):
    """(a, c): equatorial semi-axis from the minor axis, polar from the major axis."""
    return shape.minor_axis, shape.major_axis


def viviani_phase(t, motion):
    """
    Signed unbounded curve parameter u and precession angle θ.

    θ = spin · (precession/2) · (2·4π·t), so θ = (precession/2)·u and
    reversing the spin retraces the same precessing path backwards.
    """
    lap = C_LAP_RATE * t
    u = motion.spin_direction * lap
    theta = motion.spin_direction * (motion.precession / 2) * lap
    return u, theta


def viviani_body(u, a, c):
    """Body-frame Viviani point; satisfies x²/a² + y²/c² + z²/a² = 1."""
    uw = u % FOUR_PI
    return np.array([a * (1 + np.cos(uw)) / 2,
                     c * np.sin(uw / 2),
                     a * np.sin(uw) / 2])


def viviani_body_derivative(u, a, c):
    """d(body point)/du."""
    uw = u % FOUR_PI
    return np.array([-a * np.sin(uw) / 2,
                     c * np.cos(uw / 2) / 2,
                     a * np.cos(uw) / 2])


def c_curve_position(t, shape, motion):
    a, c = spheroid_axes(shape)
    u, theta = viviani_phase(t, motion)
    body = viviani_body(u, a, c)
    if motion.precession == 0:
        return body
    return rot_y(theta) @ body


# ── S-type lemniscate ────────────────────────────────────────────────

def s_phase(t, motion):
    """Signed, unbounded S-curve phase."""
    return S_LAP_RATE * t * motion.spin_direction


def s_lap_parameter(phase):
    """Position within the current 4π lap, in [0, 4π)."""
    return phase % FOUR_PI


def s_lobe_for_phase(phase):
    """Lobe whose half of the shared cycle contains `phase`."""
    return LEFT if s_lap_parameter(phase) < TWO_PI else RIGHT


def get_left_base(s, a, c):
    """
    Left loop on the spheroid centred at (-a, 0, 0).

    Starts and ends at the origin (s = 0, 2π), reaches x = -2a at s = π.
    """
    return np.array([-a + a * np.cos(s),
                     c * np.sin(s) * np.cos(S_TILT),
                     a * np.sin(s) * np.sin(S_TILT)])


def get_right_base(s, a, c):
    """Left loop at parameter 4π - s, reflected through the origin."""
    return -get_left_base(FOUR_PI - s, a, c)


def s_precession_angle(phase, precession):
    """
    Precession angle for precession != 0.

    The pattern closes after a super-cycle of 4π/precession (1/precession
    laps); one lap advances θ by 2π·precession, a super-cycle by 2π.
    """
    super_cycle = FOUR_PI / precession
    return precession * (phase % super_cycle) / 2


def get_left_precessed(phase, a, c, precession):
    theta = s_precession_angle(phase, precession)
    return rot_y(theta) @ get_left_base(s_lap_parameter(phase), a, c)


def get_right_precessed(phase, a, c, precession):
    theta = s_precession_angle(phase, precession)
    return rot_y(theta) @ get_right_base(s_lap_parameter(phase), a, c)


def s_lobe_position(lobe, phase, a, c, precession):
    """Position from one lobe's formula regardless of which lobe is active."""
    if precession == 0:
        s = s_lap_parameter(phase)
        return get_left_base(s, a, c) if lobe == LEFT else get_right_base(s, a, c)
    if lobe == LEFT:
        return get_left_precessed(phase, a, c, precession)
    return get_right_precessed(phase, a, c, precession)


def s_curve_position(t, shape, motion):
    a, c = spheroid_axes(shape)
    phase = s_phase(t, motion)
    return s_lobe_position(s_lobe_for_phase(phase), phase, a, c, motion.precession)


def s_left_position(t, shape, motion):
    """Left-lobe formula at time t, whether or not the left lobe is active."""
    a, c = spheroid_axes(shape)
    return s_lobe_position(LEFT, s_phase(t, motion), a, c, motion.precession)


def s_right_position(t, shape, motion):
    a, c = spheroid_axes(shape)
    return s_lobe_position(RIGHT, s_phase(t, motion), a, c, motion.precession)
