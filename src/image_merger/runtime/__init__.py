"""Runtime utilities for file validation, output, and version helpers."""

from .output import ensure_png, resolve_output_path, write_output
from .validation import (
    filter_image_paths,
    is_image_path,
    validate_input_paths,
)
from .version import resolve_project_version

__all__ = [
    "ensure_png",
    "filter_image_paths",
    "is_image_path",
    "resolve_output_path",
    "resolve_project_version",
    "validate_input_paths",
    "write_output",
]
