"""
Self-check suite for the photon model (`python -m wvdm --test`).

Each check samples the model over a few laps and prints PASS/FAIL with
the worst deviation found.
"""

import numpy as np

from . import curves
from .averaging import CycleAccumulator
from .engine import PhotonEngine
from .modes import get_path_model
from .params import MotionParameters, ParticleType, PathMode, ShapeParameters
from .trail import MAX_TRAIL_POINTS, UNLIMITED_ROTATIONS, TrailBuffer

SHAPE = ShapeParameters(inner_radius=1.5, outer_radius=3.0)
TIMES = np.linspace(0.0, 2.0, 401)


def _report(name, passed, detail, verbose):
    if verbose:
        status = "PASS" if passed else "FAIL"
        print(f"  [{name}] {status} ({detail})")
    return passed


def check_torus_surface(verbose: bool = True) -> bool:
    """(√(x²+y²) - M)² + z² = m² at every sample, with precession."""
    major, minor = SHAPE.torus_radii()
    worst = 0.0
    for p in (0.0, 0.3):
        motion = MotionParameters(precession=p)
        for t in TIMES:
            x, y, z = curves.torus_position(t, SHAPE, motion)
            worst = max(worst, abs((np.hypot(x, y) - major)**2 + z**2 - minor**2))
    return _report('torus_surface', worst < 1e-9, f"max residual {worst:.2e}", verbose)


def check_spheroid_surface(verbose: bool = True) -> bool:
    """Unprecessed C-curve stays on x²/a² + y²/c² + z²/a² = 1."""
    a, c = curves.spheroid_axes(SHAPE)
    motion = MotionParameters(path_mode=PathMode.LEMNISCATE_C)
    worst = 0.0
    for t in TIMES:
        x, y, z = curves.c_curve_position(t, SHAPE, motion)
        worst = max(worst, abs(x**2 / a**2 + y**2 / c**2 + z**2 / a**2 - 1))
    return _report('spheroid_surface', worst < 1e-9, f"max residual {worst:.2e}", verbose)


def check_field_orthogonality(verbose: bool = True) -> bool:
    """|E| = |B| = 1 and E·B = 0 in every mode and for both particles."""
    worst = 0.0
    for mode in PathMode:
        model = get_path_model(mode)
        motion = MotionParameters(path_mode=mode, precession=0.25)
        for particle in ParticleType:
            for t in TIMES[::8]:
                pos = model.position(t, SHAPE, motion)
                vel = model.velocity(t, SHAPE, motion)
                f = model.fields(t, pos, vel, SHAPE, motion, particle)
                worst = max(worst,
                            abs(np.linalg.norm(f.electric) - 1),
                            abs(np.linalg.norm(f.magnetic) - 1),
                            abs(np.dot(f.electric, f.magnetic)))
    return _report('field_orthogonality', worst < 1e-6, f"max deviation {worst:.2e}", verbose)


def check_cycle_average(verbose: bool = True) -> bool:
    """Published average of a constant sample equals that sample."""
    acc = CycleAccumulator(('electric',))
    value = np.array([0.3, -0.4, 1.2])
    angle = 0.0
    completed = False
    while not completed:
        angle += 0.05
        completed = acc.update(angle, 1, 4 * np.pi, {'electric': value})
    err = float(np.max(np.abs(acc.averages['electric'] - value)))
    return _report('cycle_average', err < 1e-12, f"error {err:.2e}", verbose)


def check_trail_bounds(verbose: bool = True) -> bool:
    """Angle span stays within the trail length; unlimited trails cap at the point limit."""
    buf = TrailBuffer(trail_length_rotations=1.0, base_unit=4 * np.pi)
    for i in range(2000):
        buf.append(np.zeros(3), False, i * 0.05)
    span_ok = buf.angle_span() <= 4 * np.pi

    unlimited = TrailBuffer(trail_length_rotations=UNLIMITED_ROTATIONS)
    for i in range(MAX_TRAIL_POINTS + 100):
        unlimited.append(np.zeros(3), False, float(i))
    cap_ok = len(unlimited) == MAX_TRAIL_POINTS
    return _report('trail_bounds', span_ok and cap_ok,
                   f"span {buf.angle_span():.3f}, unlimited length {len(unlimited)}", verbose)


def check_engine_run(verbose: bool = True) -> bool:
    """Every mode runs 3000 frames with finite output and at least one completed lap."""
    ok = True
    for mode in PathMode:
        engine = PhotonEngine(motion=MotionParameters(path_mode=mode, precession=0.1))
        frame = engine.run(3000)
        ok = ok and frame.fields.is_finite and frame.momentum.is_finite
        ok = ok and engine.field_accumulator.cycles_completed >= 1
    return _report('engine_run', ok, "3000 frames per mode", verbose)


def run_validation(verbose: bool = True) -> bool:
    """Run all checks."""
    print("=" * 60)
    print("Photon Model Validation Suite")
    print("=" * 60)

    results = [
        ("Torus surface identity", check_torus_surface(verbose)),
        ("Spheroid surface identity", check_spheroid_surface(verbose)),
        ("Unit, orthogonal E and B", check_field_orthogonality(verbose)),
        ("Cycle average of a constant", check_cycle_average(verbose)),
        ("Trail eviction", check_trail_bounds(verbose)),
        ("Engine run, all modes", check_engine_run(verbose)),
    ]

    print("-" * 60)
    n_pass = sum(1 for _, p in results if p)
    n_total = len(results)
    print(f"Results: {n_pass}/{n_total} passed")

    if n_pass == n_total:
        print("ALL TESTS PASSED")
    else:
        print("SOME TESTS FAILED:")
        for name, p in results:
            if not p:
                print(f"  FAIL: {name}")

    return n_pass == n_total
