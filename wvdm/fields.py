"""
Electric and magnetic field directions at the photon.

Only directions are modelled; every returned vector is unit length.

    torus          E along the surface normal (inward for the electron),
                   B in the tangent plane, perpendicular to the motion
    lemniscate-s   E along the spheroid gradient of the photon's lobe,
                   B = T × E (electron) or E × T (positron)
    lemniscate-c   E rotates in the plane transverse to the motion,
                   one turn per loop; B by the same cross-product rule

The asymmetric B rule for the lemniscates means that switching the
particle type flips E but leaves B unchanged there, while on the torus
both E and B flip.
"""

from dataclasses import dataclass

import numpy as np

from .params import ParticleType
from .vectors import X_AXIS, Y_AXIS, Z_AXIS, is_finite, normalize, reject


@dataclass(frozen=True)
class FieldSample:
    electric: np.ndarray
    magnetic: np.ndarray

    @property
    def is_finite(self) -> bool:
        return is_finite(self.electric) and is_finite(self.magnetic)


def _first_unit(candidates):
    for cand in candidates:
        unit = normalize(cand)
        if unit is not None:
            return unit
    return None


def perpendicular_unit(direction, preferred=()):
    """
    A unit vector perpendicular to `direction`.

    Tries each preferred vector (projected off `direction`), then the z, x
    and y axes; never returns a zero vector.
    """
    if direction is None:
        found = _first_unit(preferred)
        return found if found is not None else X_AXIS.copy()
    options = list(preferred) + [Z_AXIS, X_AXIS, Y_AXIS]
    found = _first_unit(reject(c, direction) for c in options)
    return found if found is not None else X_AXIS.copy()


def _lemniscate_magnetic(electric, velocity, particle):
    tangent = normalize(velocity)
    if tangent is None:
        return perpendicular_unit(electric)
    if particle is ParticleType.ELECTRON:
        b = np.cross(tangent, electric)
    else:
        b = np.cross(electric, tangent)
    unit = normalize(b)
    if unit is None:
        return perpendicular_unit(electric)
    return unit


# ── Torus ────────────────────────────────────────────────────────────

def torus_fields(u, v, r_u, r_v, velocity, particle):
    """
    Fields from the analytic tangent basis (r_u, r_v) at angles (u, v).

    E is the unit normal r_u × r_v, negated for the electron. B starts as
    E × v̂ and is cleaned of any normal component; if that degenerates the
    tangent basis vectors, then fixed axes, are projected off v̂ instead.
    """
    normal = normalize(np.cross(r_u, r_v))
    if normal is None:
        # Tube-radial direction; only reached when the tube crosses the axis.
        normal = np.array([np.cos(u) * np.cos(v), np.sin(u) * np.cos(v), np.sin(v)])

    electric = -normal if particle is ParticleType.ELECTRON else normal.copy()

    vdir = normalize(velocity)
    magnetic = None
    if vdir is not None:
        magnetic = normalize(reject(np.cross(electric, vdir), normal))
    if magnetic is None:
        magnetic = perpendicular_unit(vdir, preferred=(r_u, r_v))

    return FieldSample(electric=electric, magnetic=magnetic)


# ── S lemniscate ─────────────────────────────────────────────────────

def spheroid_fields(position, velocity, center, a, c, particle, rotation=None):
    """
    E along the inward gradient of (x-xc)²/a² + y²/c² + z²/a² = 1.

    `center` is in the body frame; `rotation` maps body to world (None
    for the unrotated pattern).
    """
    body = position if rotation is None else rotation.T @ position
    rel = body - center
    grad = np.array([rel[0] / a**2, rel[1] / c**2, rel[2] / a**2])
    if rotation is not None:
        grad = rotation @ grad

    outward = normalize(grad)
    if outward is None:
        outward = perpendicular_unit(normalize(velocity))
    electric = -outward if particle is ParticleType.ELECTRON else outward

    return FieldSample(electric=electric,
                       magnetic=_lemniscate_magnetic(electric, velocity, particle))


# ── C lemniscate ─────────────────────────────────────────────────────

def transverse_basis(position, velocity):
    """
    Orthonormal (I, J) perpendicular to the motion.

    I is the inward direction (towards the origin) with the tangent part
    removed; if that vanishes, +X and then +Y are tried.
    """
    tangent = normalize(velocity)
    if tangent is None:
        tangent = Z_AXIS.copy()
    inward = -np.asarray(position, dtype=float)
    i_vec = _first_unit(reject(cand, tangent) for cand in (inward, X_AXIS, Y_AXIS))
    j_vec = np.cross(tangent, i_vec)
    return i_vec, j_vec


def rotating_transverse_fields(position, velocity, phase, particle):
    """E = cos(phase)·I + sin(phase)·J, negated for the positron."""
    i_vec, j_vec = transverse_basis(position, velocity)
    electric = np.cos(phase) * i_vec + np.sin(phase) * j_vec
    electric = electric / np.linalg.norm(electric)
    if particle is ParticleType.POSITRON:
        electric = -electric
    return FieldSample(electric=electric,
                       magnetic=_lemniscate_magnetic(electric, velocity, particle))
