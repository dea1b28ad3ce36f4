"""
Line-of-sight test against the displayed solid.

The solid for each mode is given by an implicit function f (f < 0 inside):

    torus         (√(x²+y²) - M)² + z² - m²
    spheroid      (x-xc)²/a² + y²/c² + (z-zc)²/a² - 1
    S pattern     union (min) of the two lobe spheroids

A point is obstructed when the ray from the camera enters the solid
more than `threshold` before reaching the point.  The ray is sampled at
a step below half the thinnest feature, and the entry distance refined
with Brent's method.
"""

import numpy as np
from scipy.optimize import brentq

from . import curves
from .params import PathMode, parse_path_mode
from .vectors import rot_y

OBSTRUCTION_THRESHOLD = 0.2
MAX_RAY_SAMPLES = 4000


class TorusSolid:
    def __init__(self, major, minor):
        self.major = major
        self.minor = minor
        self.min_feature = minor

    def __call__(self, pts):
        pts = np.atleast_2d(pts)
        rho = np.hypot(pts[:, 0], pts[:, 1])
        return (rho - self.major)**2 + pts[:, 2]**2 - self.minor**2


class SpheroidSolid:
    """Spheroid with equatorial semi-axis a (x, z) and polar semi-axis c (y)."""

    def __init__(self, center, a, c):
        self.center = np.asarray(center, dtype=float)
        self.a = a
        self.c = c
        self.min_feature = min(a, c)

    def __call__(self, pts):
        rel = np.atleast_2d(pts) - self.center
        return (rel[:, 0]**2 / self.a**2 + rel[:, 1]**2 / self.c**2
                + rel[:, 2]**2 / self.a**2 - 1.0)


class UnionSolid:
    def __init__(self, parts):
        self.parts = list(parts)
        self.min_feature = min(p.min_feature for p in self.parts)

    def __call__(self, pts):
        return np.min([p(pts) for p in self.parts], axis=0)


def solid_for(mode, shape, motion=None, t=0.0):
    """The solid displayed in `mode` (S-lobe spheroids follow the precession)."""
    mode = parse_path_mode(mode)
    if mode is PathMode.TORUS:
        return TorusSolid(*shape.torus_radii())

    a, c = curves.spheroid_axes(shape)
    if mode is PathMode.LEMNISCATE_C:
        return SpheroidSolid((0.0, 0.0, 0.0), a, c)

    centers = [np.array([-a, 0.0, 0.0]), np.array([a, 0.0, 0.0])]
    if motion is not None and motion.precession != 0:
        theta = curves.s_precession_angle(curves.s_phase(t, motion), motion.precession)
        centers = [rot_y(theta) @ ctr for ctr in centers]
    return UnionSolid(SpheroidSolid(ctr, a, c) for ctr in centers)


def camera_position(distance, elev_deg, azim_deg):
    """Camera location for a view looking at the origin (matplotlib elev/azim)."""
    elev = np.radians(elev_deg)
    azim = np.radians(azim_deg)
    return distance * np.array([np.cos(elev) * np.cos(azim),
                                np.cos(elev) * np.sin(azim),
                                np.sin(elev)])


class OcclusionOracle:
    """is_obstructed(position) -> bool for a fixed solid and camera."""

    def __init__(self, solid, camera, threshold=OBSTRUCTION_THRESHOLD):
        self.solid = solid
        self.camera = np.asarray(camera, dtype=float)
        self.threshold = threshold

    def entry_distance(self, position):
        """Distance along the camera→position ray where it first enters the solid, or None."""
        offset = np.asarray(position, dtype=float) - self.camera
        dist = float(np.linalg.norm(offset))
        if dist == 0.0:
            return None
        direction = offset / dist

        step = max(self.solid.min_feature / 2, 1e-3)
        n = int(min(MAX_RAY_SAMPLES, max(64, np.ceil(dist / step) + 1)))
        ts = np.linspace(0.0, dist, n)
        values = self.solid(self.camera + ts[:, None] * direction)

        inside = np.nonzero(values <= 0)[0]
        if inside.size == 0:
            return None
        i = int(inside[0])
        if i == 0 or values[i] == 0:
            return float(ts[i])

        def along(s):
            return float(self.solid(self.camera + s * direction)[0])

        return float(brentq(along, ts[i - 1], ts[i]))

    def is_obstructed(self, position) -> bool:
        entry = self.entry_distance(position)
        if entry is None:
            return False
        dist = float(np.linalg.norm(np.asarray(position, dtype=float) - self.camera))
        return entry < dist - self.threshold

    __call__ = is_obstructed
