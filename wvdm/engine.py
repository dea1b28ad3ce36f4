"""
Frame loop for the photon model.

One tick advances animation time by BASE_STEP × photon_speed and runs the
whole pipeline synchronously:

    position → velocity → fields → momentum → lap averaging → trail

The engine is single-threaded and owns all mutable state (accumulators,
trail buffers).  Pausing stops time, and with it the pipeline; the host
keeps rendering the last frame.
"""

from dataclasses import dataclass
from typing import Dict, Optional

import numpy as np

from .averaging import FIELD_CHANNELS, MOMENTUM_CHANNELS, CycleAccumulator
from .curves import LEFT, RIGHT
from .display import DisplayThrottle, build_readings
from .fields import FieldSample
from .modes import MAIN, get_path_model
from .momentum import MomentumSample
from .params import MotionParameters, ParticleType, PathMode, ShapeParameters
from .trail import TrailBuffer, TrailPoint

BASE_STEP = 0.001
TRAIL_LOBES = (MAIN, LEFT, RIGHT)


@dataclass
class FrameState:
    """Everything computed for one tick."""
    time: float
    mode: PathMode
    position: np.ndarray
    velocity: np.ndarray
    fields: FieldSample
    momentum: MomentumSample
    obstructed: bool
    loop_angle: float
    cycle_completed: bool
    field_averages: Dict[str, np.ndarray]
    momentum_averages: Dict[str, np.ndarray]
    trail_lobe: str
    trail_point: Optional[TrailPoint] = None


class PhotonEngine:
    def __init__(self, shape=None, motion=None, particle=ParticleType.ELECTRON,
                 trail_length_rotations=1.0, occlusion=None, display=None, throttle=None):
        self.shape = shape or ShapeParameters()
        self.motion = motion or MotionParameters()
        self.particle = particle
        self.trail_length_rotations = trail_length_rotations

        self.occlusion = occlusion      # callable(position) -> bool, or None
        self.display = display          # sink with update(readings), or None
        self.throttle = throttle or DisplayThrottle()

        self.animation_time = 0.0
        self.paused = False
        self.frame_count = 0
        self.last_frame = None

        self.field_accumulator = CycleAccumulator(FIELD_CHANNELS)
        self.momentum_accumulator = CycleAccumulator(MOMENTUM_CHANNELS)
        self.trails = {lobe: TrailBuffer(trail_length_rotations) for lobe in TRAIL_LOBES}
        self.sync_trail_settings()

    @property
    def model(self):
        return get_path_model(self.motion.path_mode)

    def active_trails(self):
        """Trail buffers drawn in the current mode, keyed by lobe."""
        return {lobe: self.trails[lobe] for lobe in self.model.trail_lobes}

    def is_obstructed(self, position) -> bool:
        if self.occlusion is None:
            return False
        return bool(self.occlusion(position))

    # ── State changes ────────────────────────────────────────────────

    def reset_accumulators(self):
        self.field_accumulator.reset()
        self.momentum_accumulator.reset()

    def reset_momentum(self):
        self.momentum_accumulator.reset()

    def clear_trails(self):
        for buf in self.trails.values():
            buf.clear()

    def sync_trail_settings(self):
        base = self.model.base_unit(self.motion)
        for buf in self.trails.values():
            buf.base_unit = base
            buf.trail_length_rotations = self.trail_length_rotations

    # ── Pipeline ─────────────────────────────────────────────────────

    def sample(self, t=None) -> FrameState:
        """Compute one frame at time t without touching accumulators or trails."""
        t = self.animation_time if t is None else t
        model = self.model
        shape, motion = self.shape, self.motion

        position = model.position(t, shape, motion)
        velocity = model.velocity(t, shape, motion)
        fields = model.fields(t, position, velocity, shape, motion, self.particle)
        momentum = model.momentum(t, position, velocity, shape, motion)

        return FrameState(
            time=t,
            mode=motion.path_mode,
            position=position,
            velocity=velocity,
            fields=fields,
            momentum=momentum,
            obstructed=self.is_obstructed(position),
            loop_angle=model.loop_angle(t, motion),
            cycle_completed=False,
            field_averages=dict(self.field_accumulator.averages),
            momentum_averages=dict(self.momentum_accumulator.averages),
            trail_lobe=model.trail_lobe(t, motion),
        )

    def tick(self) -> Optional[FrameState]:
        """Advance one frame; while paused, returns the previous frame unchanged."""
        if self.paused:
            return self.last_frame

        self.animation_time += BASE_STEP * self.motion.photon_speed
        self.frame_count += 1
        t = self.animation_time
        model = self.model
        motion = self.motion

        frame = self.sample(t)

        base = model.base_unit(motion)
        spin = motion.spin_direction
        f = frame.fields
        m = frame.momentum
        fields_done = self.field_accumulator.update(
            frame.loop_angle, spin, base,
            {'electric': f.electric, 'magnetic': f.magnetic})
        momentum_done = self.momentum_accumulator.update(
            frame.loop_angle, spin, base,
            {'linear': m.linear, 'first_angular': m.first_angular,
             'second_angular': m.second_angular, 'total': m.total})
        frame.cycle_completed = fields_done or momentum_done
        frame.field_averages = dict(self.field_accumulator.averages)
        frame.momentum_averages = dict(self.momentum_accumulator.averages)

        trail_pos = model.trail_position(frame.position, self.shape)
        buf = self.trails[frame.trail_lobe]
        buf.base_unit = base
        buf.trail_length_rotations = self.trail_length_rotations
        if trail_pos is frame.position:
            trail_obstructed = frame.obstructed
        else:
            trail_obstructed = self.is_obstructed(trail_pos)
        frame.trail_point = buf.append(trail_pos, trail_obstructed, model.trail_angle(t, motion))

        if self.display is not None and self.throttle.ready():
            self.display.update(build_readings(frame))

        self.last_frame = frame
        return frame

    def run(self, n_frames):
        """Tick n_frames times; returns the last frame."""
        frame = self.last_frame
        for _ in range(n_frames):
            frame = self.tick()
        return frame
