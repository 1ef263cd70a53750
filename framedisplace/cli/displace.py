"""CLI for displacing a numbered frame sequence."""

import argparse
import logging
import sys
from pathlib import Path

import yaml

from framedisplace import (
    DisplaceConfig,
    FrameDisplaceError,
    PreconditionViolation,
    STRATEGIES,
    TAIL_POLICIES,
)
from framedisplace.generators import SequenceGenerator


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Rebuild each frame of a sequence from pixels of later frames")
    parser.add_argument("input", type=Path, nargs="?", help="Directory with 0001.png, 0002.png, ...")
    parser.add_argument("-o", "--output", type=Path, help="Output directory (created if missing)")
    parser.add_argument("-c", "--config", type=Path, help="YAML configuration file")
    parser.add_argument("-n", "--frames", type=int, help="Number of frames (default: count files in input)")
    parser.add_argument("-s", "--strategy", choices=STRATEGIES, help="Displacement strategy")
    parser.add_argument("--step", type=int, help="Rows/columns per one-frame displacement")
    parser.add_argument("--tail", choices=TAIL_POLICIES, help="Past the last frame: skip (black) or clamp")
    parser.add_argument("--ext", type=str, help="Frame file extension")
    parser.add_argument("-w", "--workers", type=int, help="Number of parallel workers")
    parser.add_argument("--skip-existing", action="store_true", help="Don't overwrite existing output frames")
    parser.add_argument("--no-progress", action="store_true", help="Disable progress bar")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def config_from_args(args: argparse.Namespace) -> DisplaceConfig:
    """YAML values (if any) overridden by explicit command-line flags."""
    cfg = DisplaceConfig.from_yaml(args.config) if args.config else DisplaceConfig()
    overrides = {
        "input_dir": str(args.input) if args.input else None,
        "output_dir": str(args.output) if args.output else None,
        "frame_count": args.frames,
        "strategy": args.strategy,
        "step": args.step,
        "tail": args.tail,
        "extension": args.ext,
        "num_workers": args.workers,
    }
    d = cfg.to_dict()
    d.update({k: v for k, v in overrides.items() if v is not None})
    return DisplaceConfig.from_dict(d)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = config_from_args(args).validate()
    except (ValueError, TypeError, OSError, yaml.YAMLError) as e:
        parser.error(str(e))

    try:
        gen = SequenceGenerator(cfg)
        results = gen.generate(progress=not args.no_progress, skip_existing=args.skip_existing)
    except PreconditionViolation:
        raise
    except FrameDisplaceError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"\nDisplacement complete:")
    print(f"  Strategy: {cfg.strategy} (step {cfg.step})")
    print(f"  Total frames: {results['total']}")
    print(f"  Processed: {results['processed']}")
    print(f"  Skipped: {results['skipped']}")
    print(f"  Output: {results['output_dir']}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
