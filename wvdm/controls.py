"""
Parameter input for the photon engine.

Every setter clamps its input and applies the side effects that keep the
accumulated quantities meaningful:

    setter                 clears trails   resets averages
    inner/outer radius          yes              -
    precession                  yes             yes
    winding ratio               yes             yes
    spin direction              yes             yes
    path mode                   yes             yes
    particle type                -              yes
    photon speed                 -               -
    trail length                 -               -
    transparency           recolours trail       -
"""

import numpy as np

from .params import (
    PathMode, TORUS_MIN_GAP, parse_particle_type, parse_path_mode,
    parse_spin_direction, parse_winding_ratio,
)
from .trail import UNLIMITED_ROTATIONS

DEFAULT_TRANSPARENCY = 0.5
DEFAULT_CAMERA_DISTANCE = 12.0
MIN_PHOTON_SPEED = 1e-3
CAMERA_DISTANCE_RANGE = (1.0, 60.0)

# r/R ≈ 1/137: inner 0.1, outer 13.7
FINE_STRUCTURE_PRESET = {'inner_radius': 0.1, 'outer_radius': 13.7, 'camera_distance': 60.0}


def speed_from_slider(value):
    """Log scale: 0 → 0.1, 0.5 → 1.0, 1 → 10."""
    return 10 ** (-1 + 2 * float(value))


def slider_from_speed(speed):
    return (np.log10(speed) + 1) / 2


def trail_rotations_from_slider(value):
    """Log scale: 0 → 0.1, 0.5 → 1.0; 1 → unlimited."""
    value = float(value)
    if value >= 1.0:
        return UNLIMITED_ROTATIONS
    return 0.1 * 10 ** (2 * value)


def slider_from_trail_rotations(rotations):
    if rotations >= UNLIMITED_ROTATIONS:
        return 1.0
    return np.log10(rotations / 0.1) / 2


class Controls:
    def __init__(self, engine, transparency=DEFAULT_TRANSPARENCY,
                 camera_distance=DEFAULT_CAMERA_DISTANCE):
        self.engine = engine
        self.transparency = transparency
        self.camera_distance = camera_distance

    # ── Geometry ─────────────────────────────────────────────────────

    def _torus_mode(self):
        return self.engine.motion.path_mode is PathMode.TORUS

    def _set_shape(self, inner, outer):
        e = self.engine
        e.shape = type(e.shape)(inner_radius=float(inner), outer_radius=float(outer))
        e.clear_trails()

    def set_inner_radius(self, value):
        """In torus mode the outer radius is pushed out to stay above the inner one."""
        inner = float(value)
        outer = self.engine.shape.outer_radius
        if self._torus_mode() and outer <= inner:
            outer = inner + TORUS_MIN_GAP
        self._set_shape(inner, outer)

    def set_outer_radius(self, value):
        """In torus mode the inner radius is pulled in to stay below the outer one."""
        outer = float(value)
        inner = self.engine.shape.inner_radius
        if self._torus_mode() and outer <= inner:
            inner = outer - TORUS_MIN_GAP
        self._set_shape(inner, outer)

    def apply_fine_structure(self):
        preset = FINE_STRUCTURE_PRESET
        self._set_shape(preset['inner_radius'], preset['outer_radius'])
        self.camera_distance = preset['camera_distance']

    def set_camera_distance(self, value):
        lo, hi = CAMERA_DISTANCE_RANGE
        self.camera_distance = min(hi, max(lo, float(value)))

    # ── Motion ───────────────────────────────────────────────────────

    def _set_motion(self, **changes):
        e = self.engine
        e.motion = e.motion.with_changes(**changes)
        e.clear_trails()
        e.reset_accumulators()
        e.sync_trail_settings()

    def set_precession(self, value):
        self._set_motion(precession=max(0.0, float(value)))

    def set_winding_ratio(self, value):
        self._set_motion(winding_ratio=parse_winding_ratio(value))

    def set_spin_direction(self, value):
        self._set_motion(spin_direction=parse_spin_direction(value))

    def set_path_mode(self, value):
        self._set_motion(path_mode=parse_path_mode(value))

    def set_photon_speed(self, value):
        speed = max(MIN_PHOTON_SPEED, float(value))
        self.engine.motion = self.engine.motion.with_changes(photon_speed=speed)

    def set_photon_speed_slider(self, value):
        self.set_photon_speed(speed_from_slider(value))

    # ── Particle, trail, display ─────────────────────────────────────

    def set_particle_type(self, value):
        self.engine.particle = parse_particle_type(value)
        self.engine.reset_accumulators()

    def set_trail_length(self, rotations):
        self.engine.trail_length_rotations = max(0.0, float(rotations))
        self.engine.sync_trail_settings()

    def set_trail_length_slider(self, value):
        self.set_trail_length(trail_rotations_from_slider(value))

    def set_transparency(self, value):
        self.transparency = min(1.0, max(0.0, float(value)))
        for buf in self.engine.trails.values():
            buf.recolor(self.engine.is_obstructed)

    # ── Actions ──────────────────────────────────────────────────────

    def reset_fields(self):
        self.engine.reset_accumulators()

    def reset_momentum(self):
        self.engine.reset_momentum()

    def clear_track(self):
        self.engine.clear_trails()

    def toggle_pause(self):
        self.engine.paused = not self.engine.paused
        return self.engine.paused
