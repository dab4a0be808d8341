"""Helpers for resolving and writing the merged output file."""

from __future__ import annotations

from pathlib import Path

from image_merger.config_defaults import DEFAULT_OUTPUT_PATH
from image_merger.logging_utils import logger


def ensure_png(path: Path) -> Path:
    """Return a path that ends with ``.png`` for output consistency."""
    return path if path.suffix.lower() == ".png" else path.with_suffix(".png")


def resolve_output_path(output: str | Path | None) -> Path:
    """
    Turn the configured output into a concrete PNG file path.

    A directory (existing, or given with a trailing separator) receives
    the default ``merged-image.png`` name.
    """
    if output is None or str(output) == "":
        return Path(DEFAULT_OUTPUT_PATH)
    text = str(output)
    path = Path(text)
    if path.is_dir() or text.endswith(("/", "\\")):
        return path / DEFAULT_OUTPUT_PATH
    return ensure_png(path)


def write_output(data: bytes, output_path: Path) -> Path:
    """Write PNG bytes, creating parent directories as needed."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(data)
    logger.info("Merged image saved to: %s (%d bytes)", output_path,
                len(data))
    return output_path
