"""Public package exports for the image merger."""

from __future__ import annotations

from .config import ConfigLoader, MergerConfig
from .dispatch import MergeOutcome, merge, run_merge
from .errors import (
    CanvasTooLargeError,
    DecodeError,
    EncodeError,
    InvalidInputError,
    MergeError,
)
from .geometry import LayoutMode, ResizeSpec, Size, compute_layout
from .pipeline import MergePipeline, merge_images
from .request import MergeRequest

__all__ = [
    "CanvasTooLargeError",
    "ConfigLoader",
    "DecodeError",
    "EncodeError",
    "InvalidInputError",
    "LayoutMode",
    "MergeError",
    "MergeOutcome",
    "MergePipeline",
    "MergeRequest",
    "MergerConfig",
    "ResizeSpec",
    "Size",
    "compute_layout",
    "merge",
    "merge_images",
    "run_merge",
]
