"""
Interactive 3D view of the circulating photon.

Draws the guide surface (torus or spheroid lobes), the photon, its
trail coloured by line of sight, and the E/B arrows, with sliders,
radio buttons and buttons wired to Controls.  The occlusion oracle is
rebuilt every frame from the current solid and camera, so trail colours
follow the view as it is rotated.

Call matplotlib.use('Agg') before importing this module to render
without a display (save_animation does not need one).
"""

import numpy as np
import matplotlib.pyplot as plt
from matplotlib.animation import FuncAnimation, PillowWriter
from matplotlib.widgets import Button, RadioButtons, Slider

from . import curves
from .controls import (
    Controls, slider_from_speed, slider_from_trail_rotations,
)
from .display import TextPanel
from .engine import BASE_STEP, PhotonEngine
from .occlusion import OcclusionOracle, camera_position, solid_for
from .params import PathMode, ParticleType, WindingRatio
from .trail import TrailColor
from .vectors import rot_y

# Colors
CLR_BG = '#060612'
CLR_SURFACE = '#3498db'
CLR_E = '#f1c40f'
CLR_B = '#2ecc71'
CLR_INFO = '#a0a0a0'
TRAIL_VISIBLE = '#ff8888'
TRAIL_OBSTRUCTED = '#663333'
TRAIL_HIDDEN = '#000000'
PHOTON_VISIBLE = '#ff6b6b'
PHOTON_OBSTRUCTED = '#8888ff'

DEFAULT_ELEV = 22.0
DEFAULT_AZIM = 30.0
VIEW_FRACTION = 0.375    # half-width of the axes box per unit camera distance
SLIDER_MAX_RADIUS = 15.0
SLIDER_MAX_PRECESSION = 2.0


def scale_factor(major):
    """Arrow and marker scale relative to the default outer radius."""
    return min(10.0, max(0.5, major / 2.25))


def trail_color(color, transparency):
    if color is TrailColor.VISIBLE:
        return TRAIL_VISIBLE
    return TRAIL_HIDDEN if transparency == 0 else TRAIL_OBSTRUCTED


def photon_color(obstructed):
    return PHOTON_OBSTRUCTED if obstructed else PHOTON_VISIBLE


# ── Surfaces ─────────────────────────────────────────────────────────

def torus_surface(major, minor, n_u=36, n_v=18):
    """Torus surface mesh in standard orientation (axis along z)."""
    u = np.linspace(0, 2 * np.pi, n_u)
    v = np.linspace(0, 2 * np.pi, n_v)
    U, V = np.meshgrid(u, v)
    X = (major + minor * np.cos(V)) * np.cos(U)
    Y = (major + minor * np.cos(V)) * np.sin(U)
    Z = minor * np.sin(V)
    return X, Y, Z


def spheroid_surface(center, a, c, rotation=None, n=24):
    """Spheroid mesh with polar axis along y, optionally rotated about the origin."""
    u = np.linspace(0, 2 * np.pi, n)
    v = np.linspace(0, np.pi, n // 2)
    U, V = np.meshgrid(u, v)
    X = center[0] + a * np.sin(V) * np.cos(U)
    Y = center[1] + c * np.cos(V)
    Z = center[2] + a * np.sin(V) * np.sin(U)
    if rotation is None:
        return X, Y, Z
    pts = rotation @ np.stack([X.ravel(), Y.ravel(), Z.ravel()])
    return pts[0].reshape(X.shape), pts[1].reshape(X.shape), pts[2].reshape(X.shape)


def surfaces_for(mode, shape, motion, t):
    """Meshes for the solid shown in `mode` at time t."""
    if mode is PathMode.TORUS:
        return [torus_surface(*shape.torus_radii())]
    a, c = curves.spheroid_axes(shape)
    if mode is PathMode.LEMNISCATE_C:
        return [spheroid_surface((0.0, 0.0, 0.0), a, c)]
    rotation = None
    if motion.precession != 0:
        rotation = rot_y(curves.s_precession_angle(curves.s_phase(t, motion), motion.precession))
    return [spheroid_surface((-a, 0.0, 0.0), a, c, rotation),
            spheroid_surface((a, 0.0, 0.0), a, c, rotation)]


def trail_runs(buf):
    """Split a trail into (positions, TrailColor) runs of one colour each.

    Consecutive runs share their boundary point so the drawn line has no gaps.
    """
    runs = []
    points = list(buf)
    start = 0
    for i in range(1, len(points) + 1):
        if i == len(points) or points[i].color is not points[start].color:
            end = min(i + 1, len(points))
            runs.append((np.array([p.position for p in points[start:end]]),
                         points[start].color))
            start = i
    return [(pos, color) for pos, color in runs if len(pos) > 1]


# ── Viewer ───────────────────────────────────────────────────────────

class PhotonViewer:
    def __init__(self, engine=None, controls=None, widgets=True,
                 elev=DEFAULT_ELEV, azim=DEFAULT_AZIM, figsize=(12, 9)):
        self.engine = engine or PhotonEngine()
        self.controls = controls or Controls(self.engine)
        self.panel = TextPanel()
        self.engine.display = self.panel
        self.anim = None
        self._syncing = False
        self._view = None

        self.fig = plt.figure(figsize=figsize, facecolor=CLR_BG)
        if widgets:
            self.ax = self.fig.add_axes([0.0, 0.22, 0.62, 0.76], projection='3d')
        else:
            self.ax = self.fig.add_axes([0.0, 0.0, 0.62, 1.0], projection='3d')
        self.ax.view_init(elev=elev, azim=azim)
        self.info_text = self.fig.text(0.64, 0.97, '', fontsize=8, color=CLR_INFO,
                                       family='monospace', verticalalignment='top')
        if widgets:
            self._build_widgets()
        self.fig.canvas.mpl_connect('scroll_event', self._on_scroll)

    # ── Widgets ──────────────────────────────────────────────────────

    def _build_widgets(self):
        fig = self.fig
        e = self.engine
        ctl = self.controls

        def slider(rect, label, lo, hi, init, color):
            return Slider(fig.add_axes(rect), label, lo, hi, valinit=init, color=color)

        self.slider_inner = slider([0.10, 0.17, 0.40, 0.02], 'inner', 0.1,
                                   SLIDER_MAX_RADIUS, e.shape.inner_radius, 'cyan')
        self.slider_outer = slider([0.10, 0.14, 0.40, 0.02], 'outer', 0.1,
                                   SLIDER_MAX_RADIUS, e.shape.outer_radius, 'cyan')
        self.slider_transparency = slider([0.10, 0.11, 0.40, 0.02], 'transparency',
                                          0.0, 1.0, ctl.transparency, 'white')
        self.slider_speed = slider([0.10, 0.08, 0.40, 0.02], 'speed', 0.0, 1.0,
                                   slider_from_speed(e.motion.photon_speed), 'orange')
        self.slider_trail = slider([0.10, 0.05, 0.40, 0.02], 'trail', 0.0, 1.0,
                                   slider_from_trail_rotations(e.trail_length_rotations),
                                   'orange')
        self.slider_precession = slider([0.10, 0.02, 0.40, 0.02], 'precession', 0.0,
                                        SLIDER_MAX_PRECESSION, e.motion.precession, 'green')

        self.slider_inner.on_changed(self._on_inner)
        self.slider_outer.on_changed(self._on_outer)
        self.slider_transparency.on_changed(ctl.set_transparency)
        self.slider_speed.on_changed(ctl.set_photon_speed_slider)
        self.slider_trail.on_changed(ctl.set_trail_length_slider)
        self.slider_precession.on_changed(ctl.set_precession)

        def radio(rect, labels, active):
            ax = fig.add_axes(rect, facecolor='#16213e')
            return RadioButtons(ax, labels, active=active)

        modes = [m.value for m in PathMode]
        ratios = [w.value for w in WindingRatio]
        particles = [p.value for p in ParticleType]
        spins = ['-1', '+1']
        self.radio_mode = radio([0.64, 0.10, 0.12, 0.10], modes,
                                modes.index(e.motion.path_mode.value))
        self.radio_winding = radio([0.77, 0.10, 0.07, 0.10], ratios,
                                   ratios.index(e.motion.winding_ratio.value))
        self.radio_spin = radio([0.85, 0.10, 0.06, 0.10], spins,
                                0 if e.motion.spin_direction < 0 else 1)
        self.radio_particle = radio([0.64, 0.01, 0.12, 0.08], particles,
                                    particles.index(e.particle.value))

        self.radio_mode.on_clicked(ctl.set_path_mode)
        self.radio_winding.on_clicked(ctl.set_winding_ratio)
        self.radio_spin.on_clicked(lambda label: ctl.set_spin_direction(int(label)))
        self.radio_particle.on_clicked(ctl.set_particle_type)

        def button(rect, label, callback):
            btn = Button(fig.add_axes(rect), label, color='#2a2a4a', hovercolor='#4a4a6a')
            btn.on_clicked(callback)
            return btn

        self.btn_pause = button([0.92, 0.17, 0.07, 0.04], 'Pause', self._on_pause)
        self.btn_reset_fields = button([0.92, 0.12, 0.07, 0.04], 'Reset E/B',
                                       lambda event: ctl.reset_fields())
        self.btn_reset_momentum = button([0.92, 0.07, 0.07, 0.04], 'Reset p',
                                         lambda event: ctl.reset_momentum())
        self.btn_clear = button([0.77, 0.03, 0.07, 0.04], 'Clear',
                                lambda event: ctl.clear_track())
        self.btn_alpha = button([0.85, 0.03, 0.14, 0.04], 'r/R = 1/137',
                                self._on_fine_structure)

    def _sync_radius_sliders(self):
        self._syncing = True
        try:
            self.slider_inner.set_val(self.engine.shape.inner_radius)
            self.slider_outer.set_val(self.engine.shape.outer_radius)
        finally:
            self._syncing = False

    def _on_inner(self, val):
        if self._syncing:
            return
        self.controls.set_inner_radius(val)
        self._sync_radius_sliders()

    def _on_outer(self, val):
        if self._syncing:
            return
        self.controls.set_outer_radius(val)
        self._sync_radius_sliders()

    def _on_fine_structure(self, event):
        self.controls.apply_fine_structure()
        self._sync_radius_sliders()

    def _on_scroll(self, event):
        factor = 0.9 if event.button == 'up' else 1.1
        self.controls.set_camera_distance(self.controls.camera_distance * factor)

    def _on_pause(self, event):
        paused = self.controls.toggle_pause()
        self.btn_pause.label.set_text('Play' if paused else 'Pause')

    # ── Drawing ──────────────────────────────────────────────────────

    def camera(self):
        return camera_position(self.controls.camera_distance, self.ax.elev, self.ax.azim)

    def refresh_occlusion(self):
        """
        Rebuild the line-of-sight oracle for the solid at the next tick's time.

        When the view (elevation, azimuth, camera distance) has changed since
        the last frame, stored trail points are re-tested against it.
        """
        e = self.engine
        t = e.animation_time
        if not e.paused:
            t += BASE_STEP * e.motion.photon_speed
        solid = solid_for(e.motion.path_mode, e.shape, e.motion, t)
        e.occlusion = OcclusionOracle(solid, self.camera())

        view = (self.ax.elev, self.ax.azim, self.controls.camera_distance)
        if self._view is not None and view != self._view:
            for buf in e.active_trails().values():
                buf.recolor(e.occlusion)
        self._view = view

    def draw_frame(self, i=None):
        e = self.engine
        self.refresh_occlusion()
        frame = e.tick()
        if frame is None:
            frame = e.sample()

        ax = self.ax
        elev, azim = ax.elev, ax.azim
        ax.cla()
        ax.set_facecolor(CLR_BG)
        lim = VIEW_FRACTION * self.controls.camera_distance
        ax.set_xlim(-lim, lim)
        ax.set_ylim(-lim, lim)
        ax.set_zlim(-lim, lim)
        ax.set_axis_off()
        ax.view_init(elev=elev, azim=azim)

        transparency = self.controls.transparency
        for X, Y, Z in surfaces_for(e.motion.path_mode, e.shape, e.motion, frame.time):
            ax.plot_surface(X, Y, Z, alpha=0.25 * transparency, color=CLR_SURFACE,
                            edgecolor=CLR_SURFACE, linewidth=0.2 * transparency)

        for buf in e.active_trails().values():
            for pos, color in trail_runs(buf):
                ax.plot(pos[:, 0], pos[:, 1], pos[:, 2], '-',
                        color=trail_color(color, transparency), linewidth=1.5)

        major = e.shape.torus_radii()[0] if e.motion.path_mode is PathMode.TORUS \
            else e.shape.major_axis
        scale = scale_factor(major)
        p = frame.position
        ax.plot([p[0]], [p[1]], [p[2]], 'o', color=photon_color(frame.obstructed),
                markersize=5 + 2 * scale, zorder=10)

        arrow = 0.8 * scale
        for vec, color, label in ((frame.fields.electric, CLR_E, 'E'),
                                  (frame.fields.magnetic, CLR_B, 'B')):
            tip = p + arrow * vec
            ax.quiver(p[0], p[1], p[2], arrow * vec[0], arrow * vec[1], arrow * vec[2],
                      color=color, arrow_length_ratio=0.15, linewidth=2.0)
            ax.text(tip[0], tip[1], tip[2], label, color=color, fontsize=11,
                    fontweight='bold')

        header = (f"{e.motion.path_mode.value}  {e.particle.value}  "
                  f"{e.motion.winding_ratio.value}  spin {e.motion.spin_direction:+d}\n"
                  f"t = {frame.time:.3f}  precession = {e.motion.precession:.2f}\n\n")
        self.info_text.set_text(header + self.panel.text())
        return []

    def animate(self, n_frames=None, interval=20):
        """Start the animation loop; n_frames=None runs until the window is closed."""
        self.anim = FuncAnimation(self.fig, self.draw_frame, frames=n_frames,
                                  interval=interval, blit=False,
                                  cache_frame_data=False)
        return self.anim

    def show(self):
        self.animate()
        plt.show()


def save_animation(viewer, path, n_frames=200, fps=20, dpi=100, verbose=True):
    """Render n_frames to a GIF via pillow."""
    if verbose:
        print(f"Rendering {n_frames} frames...")
    anim = viewer.animate(n_frames=n_frames, interval=1000 // fps)
    anim.save(path, writer=PillowWriter(fps=fps), dpi=dpi)
    plt.close(viewer.fig)
    if verbose:
        print(f"Saved: {path}")
    return path
