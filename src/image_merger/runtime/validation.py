"""Input validation helpers for runtime file handling."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import TYPE_CHECKING

from image_merger.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable


def validate_input_paths(paths: Iterable[str | Path]) -> list[Path]:
    """Ensure every path points to an existing file."""
    resolved = [Path(p) for p in paths]
    for path in resolved:
        if not path.is_file():
            msg = f"Input image not found: {path}"
            raise FileNotFoundError(msg)
    return resolved


def is_image_path(path: Path) -> bool:
    """Return True when the file extension maps to an ``image/*`` type."""
    mime, _ = mimetypes.guess_type(path.name)
    return mime is not None and mime.startswith("image/")


def filter_image_paths(paths: Iterable[Path]) -> list[Path]:
    """Drop non-image files, warning about each one, keeping order."""
    kept: list[Path] = []
    for path in paths:
        if is_image_path(path):
            kept.append(path)
        else:
            logger.warning("Skipping non-image file: %s", path)
    return kept
