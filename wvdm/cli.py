"""Command-line entry point: validation, headless runs, GIF export and the live viewer."""

import argparse
import sys

from .controls import Controls, speed_from_slider, trail_rotations_from_slider
from .display import PrintSink, TextPanel, build_readings
from .engine import PhotonEngine
from .params import (
    MotionParameters, ShapeParameters, parse_particle_type, parse_path_mode,
    parse_spin_direction, parse_winding_ratio,
)
from .validation import run_validation


def build_parser():
    parser = argparse.ArgumentParser(
        prog='wvdm',
        description="Photon circulating on a torus or lemniscate: fields, momentum and lap averages")
    parser.add_argument('--mode', default='torus',
                        help='Path mode: torus, lemniscate-s, lemniscate-c (default: torus)')
    parser.add_argument('--inner', type=float, default=1.5,
                        help='Inner radius / minor axis (default: 1.5)')
    parser.add_argument('--outer', type=float, default=3.0,
                        help='Outer radius / major axis (default: 3.0)')
    parser.add_argument('--precession', type=float, default=0.0,
                        help='Precession rate, >= 0 (default: 0)')
    parser.add_argument('--winding', default='1:2',
                        help='Torus winding ratio, 1:2 or 2:1 (default: 1:2)')
    parser.add_argument('--spin', type=int, default=-1,
                        help='Spin direction, -1 or +1 (default: -1)')
    parser.add_argument('--particle', default='electron',
                        help='electron or positron (default: electron)')
    parser.add_argument('--speed', type=float, default=0.5,
                        help='Speed slider position in [0, 1], log scale 0.1..10 (default: 0.5)')
    parser.add_argument('--trail', type=float, default=0.5,
                        help='Trail slider position in [0, 1], 1 = unlimited (default: 0.5)')
    parser.add_argument('--transparency', type=float, default=0.5,
                        help='Surface transparency in [0, 1] (default: 0.5)')
    parser.add_argument('--fine-structure', action='store_true',
                        help='Use the r/R = 1/137 preset (inner 0.1, outer 13.7)')
    parser.add_argument('--frames', type=int, default=0,
                        help='Run this many frames headless and print the readings')
    parser.add_argument('--save', metavar='PATH',
                        help='Render the animation to a GIF')
    parser.add_argument('--fps', type=int, default=20,
                        help='GIF frame rate (default: 20)')
    parser.add_argument('--show', action='store_true',
                        help='Open the interactive viewer')
    parser.add_argument('--test', action='store_true',
                        help='Run validation test suite')
    parser.add_argument('--quiet', action='store_true',
                        help='Suppress progress output')
    return parser


def build_engine(args):
    """Engine and controls from parsed arguments; ValueError on bad tags."""
    motion = MotionParameters(
        precession=max(0.0, args.precession),
        spin_direction=parse_spin_direction(args.spin),
        winding_ratio=parse_winding_ratio(args.winding),
        path_mode=parse_path_mode(args.mode),
        photon_speed=speed_from_slider(args.speed),
    )
    engine = PhotonEngine(
        shape=ShapeParameters(inner_radius=args.inner, outer_radius=args.outer),
        motion=motion,
        particle=parse_particle_type(args.particle),
        trail_length_rotations=trail_rotations_from_slider(args.trail),
    )
    controls = Controls(engine)
    controls.set_transparency(args.transparency)
    if args.fine_structure:
        controls.apply_fine_structure()
    return engine, controls


def run_headless(engine, n_frames, verbose=True):
    """Tick n_frames and print the final readings."""
    engine.display = PrintSink() if verbose else TextPanel()
    frame = engine.run(n_frames)
    panel = TextPanel()
    panel.update(build_readings(frame))
    print(f"mode={engine.motion.path_mode.value}  frames={engine.frame_count}  "
          f"t={engine.animation_time:.3f}  laps={engine.field_accumulator.cycles_completed}")
    print(panel.text())
    return frame


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not (args.test or args.frames or args.save or args.show):
        parser.print_help()
        print("\nQuick start:")
        print("  python -m wvdm --test                        # validation")
        print("  python -m wvdm --frames 2000 --quiet         # headless run")
        print("  python -m wvdm --mode lemniscate-s --show    # interactive viewer")
        print("  python -m wvdm --save photon.gif             # GIF export")
        return 0

    if args.test:
        if not run_validation(verbose=not args.quiet):
            return 1

    try:
        engine, controls = build_engine(args)
    except ValueError as exc:
        parser.error(str(exc))

    if args.frames:
        run_headless(engine, args.frames, verbose=not args.quiet)

    if args.save or args.show:
        import matplotlib
        if not args.show:
            matplotlib.use('Agg')
        from .viewer import PhotonViewer, save_animation

        if args.save:
            viewer = PhotonViewer(engine, controls, widgets=False)
            save_animation(viewer, args.save, n_frames=max(args.frames, 200),
                           fps=args.fps, verbose=not args.quiet)
        if args.show:
            PhotonViewer(engine, controls).show()

    return 0


if __name__ == "__main__":
    sys.exit(main())
