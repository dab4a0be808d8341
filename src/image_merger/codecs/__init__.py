"""Execution backends implementing the :class:`ImageCodec` protocol."""

from __future__ import annotations

from .base import DecodedImage, ImageCodec
from .canvas_codec import CanvasCodec, source_over
from .pillow_codec import PillowCodec, open_oriented

__all__ = [
    "CanvasCodec",
    "DecodedImage",
    "ImageCodec",
    "PillowCodec",
    "open_oriented",
    "source_over",
]
