"""Command-line interface for realm generation."""

import argparse
import logging
import sys
import time
from pathlib import Path

import structlog

from .presets import list_presets


def main(argv: list[str] | None = None) -> int:
    """CLI entry point for realm generation."""
    parser = argparse.ArgumentParser(description="Generate a hex-tiled fantasy realm")
    parser.add_argument(
        "--shape",
        choices=["hex", "square"],
        default="hex",
        help="Realm shape (default: hex)",
    )
    parser.add_argument(
        "--radius", type=int, default=12, help="Hex realm radius (default: 12)"
    )
    parser.add_argument(
        "--width", type=int, default=12, help="Square realm width (default: 12)"
    )
    parser.add_argument(
        "--height", type=int, default=12, help="Square realm height (default: 12)"
    )
    parser.add_argument(
        "--seed", type=int, default=1, help="Random seed (default: 1)"
    )
    parser.add_argument(
        "--preset",
        choices=list_presets(),
        default=None,
        help="Named generation template applied over the options",
    )
    parser.add_argument(
        "--options",
        type=str,
        default=None,
        help="TOML file with generation options (optional)",
    )
    parser.add_argument(
        "--output",
        "-o",
        type=str,
        default="realm.json",
        help="Output path (default: realm.json)",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Verbose logging"
    )

    args = parser.parse_args(argv)

    # Configure logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%H:%M:%S",
    )
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
    )

    # Import here to avoid slow startup for --help
    from pydantic import ValidationError

    from ..exceptions import InvalidOptionsError
    from .config import GenerationOptions, HexShape, SquareShape, load_options
    from .generator import generate_and_save_realm
    from .presets import apply_preset

    try:
        options = load_options(Path(args.options)) if args.options else GenerationOptions()
    except (FileNotFoundError, InvalidOptionsError, ValidationError) as e:
        print(f"Error loading options: {e}", file=sys.stderr)
        return 1

    if args.preset:
        options = apply_preset(options, args.preset)

    try:
        if args.shape == "hex":
            shape = HexShape(radius=args.radius)
        else:
            shape = SquareShape(width=args.width, height=args.height)
    except ValidationError as e:
        print(f"Invalid realm shape: {e}", file=sys.stderr)
        return 1

    output_path = Path(args.output)
    print(f"Generating {args.shape} realm with seed {args.seed}")
    print(f"Output: {output_path}")
    print()

    start_time = time.time()
    result = generate_and_save_realm(shape, options, args.seed, output_path)
    gen_time = time.time() - start_time

    if not result.passed:
        for error in result.errors:
            print(f"Invalid option {error}", file=sys.stderr)
        return 1

    for warning in result.warnings:
        print(f"Warning: {warning}")

    print()
    print(f"Generation complete in {gen_time:.2f}s")
    print(f"Saved to {output_path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
