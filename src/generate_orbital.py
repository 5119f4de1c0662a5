import argparse
import logging
import signal
import threading

from orbital_config import SamplerConfig, load_config
from orbital_export import default_filename, save_point_cloud
from orbital_logging import setup_logging
from orbital_sampler import run_sampler


def build_parser():
    parser = argparse.ArgumentParser(
        description="Generate an orbital point cloud by rejection sampling."
    )
    parser.add_argument("--orbital", help="3d_z2, 3d_xy, 3d_xz, 3d_yz, 3d_x2-y2 or hydrogen:n,l,m")
    parser.add_argument("--trials", type=int, help="Number of candidate draws")
    parser.add_argument("--r-max", type=float, help="Radial bound of the sampling box")
    parser.add_argument("--acceptance-scale", type=float, help="Maps density to acceptance probability")
    parser.add_argument("--seed", type=int)
    parser.add_argument("--workers", type=int, help="Parallel sampling workers")
    parser.add_argument("--batch-size", type=int, help="Candidates evaluated per batch")
    parser.add_argument("--config", help="TOML file with a [sampling] table")
    parser.add_argument("--output", help="Output file (.json, .bin or .f32)")
    parser.add_argument("--log-file", help="Also write logs to this file")
    parser.add_argument("--no-progress", action="store_true", help="Disable progress bar output")
    return parser


def resolve_config(args):
    base = load_config(args.config) if args.config else SamplerConfig()
    return base.with_overrides(
        orbital=args.orbital,
        trials=args.trials,
        r_max=args.r_max,
        acceptance_scale=args.acceptance_scale,
        seed=args.seed,
        workers=args.workers,
        batch_size=args.batch_size,
    ).validate()


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_file)

    try:
        cfg = resolve_config(args)
    except (ValueError, OSError) as e:
        parser.error(str(e))

    # Ctrl-C stops at the next batch boundary and keeps what was accepted
    stop = threading.Event()
    previous = signal.getsignal(signal.SIGINT)
    in_main_thread = threading.current_thread() is threading.main_thread()
    if in_main_thread:
        signal.signal(signal.SIGINT, lambda *_: stop.set())

    print("\nGenerating samples... please wait...")
    try:
        cloud, stats = run_sampler(cfg, should_stop=stop.is_set, progress=not args.no_progress)
    finally:
        if in_main_thread:
            signal.signal(signal.SIGINT, previous)

    filename = args.output if args.output else default_filename(cfg.orbital)
    save_point_cloud(
        cloud,
        filename,
        metadata={
            "orbital": str(cfg.orbital),
            "trials": stats.trials,
            "attempted": stats.attempted,
            "r_max": cfg.r_max,
            "acceptance_scale": cfg.acceptance_scale,
            "seed": cfg.seed,
        },
    )
    logging.getLogger(__name__).info(f"Saved {stats.accepted} points to {filename}")

    print(f"\nSaved {stats.accepted} samples to: {filename}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
