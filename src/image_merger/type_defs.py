"""
Defines shared type aliases for the image merger.

Centralizes reusable type hints to improve consistency and readability.
"""
from __future__ import annotations

from typing import Literal

LayoutName = Literal["horizontal", "vertical", "grid"]
AlignDimension = Literal["none", "width", "height"]
BackendName = Literal["auto", "canvas", "codec"]
GridOverflow = Literal["reject", "extend"]
ErrorKind = Literal[
    "invalid_input",
    "decode_failure",
    "canvas_too_large",
    "encode_failure",
]

LAYOUT_CHOICES: tuple[LayoutName, ...] = ("horizontal", "vertical", "grid")
ALIGN_CHOICES: tuple[AlignDimension, ...] = ("none", "width", "height")
BACKEND_CHOICES: tuple[BackendName, ...] = ("auto", "canvas", "codec")
GRID_OVERFLOW_CHOICES: tuple[GridOverflow, ...] = ("reject", "extend")
