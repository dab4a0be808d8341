"""CLI argument parsing and main entry point."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import TYPE_CHECKING

import image_merger.config as im_config
import image_merger.main as im_main
from image_merger.errors import MergeError
from image_merger.logging_utils import logger, set_log_level
from image_merger.runtime import resolve_project_version
from image_merger.type_defs import (
    ALIGN_CHOICES,
    BACKEND_CHOICES,
    GRID_OVERFLOW_CHOICES,
    LAYOUT_CHOICES,
)

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

_EXIT_MERGE_FAILED = 1


def positive_int(text: str) -> int:
    """Argparse type that enforces a strictly positive integer."""
    try:
        value = int(text)
    except ValueError as exc:
        msg = f"must be an integer, got {text!r}"
        raise argparse.ArgumentTypeError(msg) from exc
    if value <= 0:
        msg = f"must be positive, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return value


def build_arg_parser() -> argparse.ArgumentParser:
    """Construct the argument parser for the command-line interface."""
    p = argparse.ArgumentParser(
        prog="image-merger",
        description="Merge images into one lossless PNG",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "image-merger a.png b.png c.png\n"
            "image-merger *.jpg --layout grid --rows 2 --cols 3\n"
            "image-merger a.png b.png --layout vertical --align width\n"
            "image-merger a.png b.png --resize-width 800 -o out.png"
        ),
    )
    p.add_argument("images", nargs="*", type=Path,
                   help="Images to merge, in placement order")

    layout = p.add_argument_group("layout")
    layout.add_argument(
        "--layout", choices=list(LAYOUT_CHOICES),
        help="Layout strategy", default=argparse.SUPPRESS)
    layout.add_argument(
        "--rows", type=positive_int, help="Grid rows",
        default=argparse.SUPPRESS)
    layout.add_argument(
        "--cols", type=positive_int, help="Grid columns",
        default=argparse.SUPPRESS)
    layout.add_argument(
        "--grid-overflow", choices=list(GRID_OVERFLOW_CHOICES),
        help=("What to do with more images than grid cells: reject the "
              "request or extend the grid with extra rows"),
        default=argparse.SUPPRESS)

    sizing = p.add_argument_group("sizing")
    sizing.add_argument(
        "--resize-width", type=positive_int,
        help="Fit every image inside this width (never enlarges)",
        default=argparse.SUPPRESS)
    sizing.add_argument(
        "--resize-height", type=positive_int,
        help="Fit every image inside this height (never enlarges)",
        default=argparse.SUPPRESS)
    sizing.add_argument(
        "--align", choices=list(ALIGN_CHOICES),
        help="Scale all images to the largest width or height",
        default=argparse.SUPPRESS)

    execution = p.add_argument_group("execution")
    execution.add_argument(
        "--backend", choices=list(BACKEND_CHOICES),
        help="Execution backend (auto picks canvas, then codec)",
        default=argparse.SUPPRESS)
    execution.add_argument(
        "--no-fallback", action="store_true",
        help="Do not retry on the codec backend when canvas fails")
    execution.add_argument(
        "--concurrency", type=positive_int,
        help="Parallel decode/resize workers for the codec backend",
        default=argparse.SUPPRESS)
    execution.add_argument(
        "--compress-level", type=int, choices=range(10),
        metavar="{0..9}", help="PNG zlib level for the codec backend",
        default=argparse.SUPPRESS)

    output = p.add_argument_group("output")
    output.add_argument(
        "-o", "--output", type=str,
        help="Output PNG path or directory", default=argparse.SUPPRESS)
    output.add_argument(
        "--progress", action="store_true",
        help="Show progress bars while decoding and resizing")
    output.add_argument(
        "--log-level", type=str, help="Logging level (e.g. DEBUG)",
        default=argparse.SUPPRESS)
    output.add_argument(
        "--version", action="version",
        version=f"%(prog)s {resolve_project_version()}")

    cfg = p.add_argument_group("config")
    cfg.add_argument(
        "--config", type=str, help="Path to config.toml file")
    cfg.add_argument(
        "--validate-config-only", action="store_true",
        help="Validate config file and exit without merging")

    return p


def log_parameters(
    paths: Sequence[Path],
    cfg: im_config.MergerConfig,
    args: argparse.Namespace,
) -> None:
    """Log the effective merge parameters."""
    logger.info("Images: %d", len(paths))
    if getattr(args, "config", None):
        logger.info("Loaded config from: %s", args.config)
    logger.info("Layout: %s", cfg.layout.mode)
    if cfg.layout.mode == "grid":
        logger.info("Grid: %d rows x %d cols (overflow: %s)",
                    cfg.layout.rows, cfg.layout.cols,
                    cfg.layout.grid_overflow)
    logger.info("Resize: %s",
                f"{cfg.resize.width or '-'}x{cfg.resize.height or '-'}"
                if cfg.resize.width or cfg.resize.height else "Disabled")
    logger.info("Align: %s", cfg.resize.align)
    logger.info("Backend: %s (fallback %s)", cfg.execution.backend,
                "Enabled" if cfg.execution.fallback else "Disabled")
    logger.info("Output: %s", cfg.output.output)


def run_from_args(args: argparse.Namespace) -> int:
    """Run a merge from parsed command-line arguments."""
    base_cfg: im_config.MergerConfig | None = None
    if args.config:
        base_cfg = im_config.ConfigLoader.load(args.config)
        if args.validate_config_only:
            logger.info("Config %s validated successfully.", args.config)
            return 0

    cfg = im_config.build_config_from_cli(vars(args), base_config=base_cfg)
    set_log_level(cfg.output.log_level)
    log_parameters(args.images, cfg, args)

    try:
        im_main.merge_files(args.images, cfg, progress=args.progress)
    except MergeError as exc:
        logger.error("Merge failed (%s): %s", exc.kind, exc)
        return _EXIT_MERGE_FAILED
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command-line interface for image merging."""
    arg_parser = build_arg_parser()
    args = arg_parser.parse_args(argv)
    if args.validate_config_only and not args.config:
        arg_parser.error("--validate-config-only requires --config")
    if not args.validate_config_only and not args.images:
        arg_parser.error("the following arguments are required: images")

    try:
        return run_from_args(args)
    except FileNotFoundError as exc:
        arg_parser.error(str(exc))
    return _EXIT_MERGE_FAILED  # pragma: no cover


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
