"""
Canvas geometry split into core types, sizing, and layouts.

Everything here is pure arithmetic over :class:`Size` values so the same
functions drive both execution backends.
"""

from __future__ import annotations

from . import core, layouts, sizing
from .core import (
    CanvasLayout,
    LayoutMode,
    Placement,
    ResizeSpec,
    Size,
    SizeOverride,
)
from .layouts import (
    compute_layout,
    layout_grid,
    layout_horizontal,
    layout_vertical,
)
from .sizing import (
    fit_inside,
    normalize_dimensions,
    plan_resize,
    plan_sizes,
)

__all__ = [
    "CanvasLayout",
    "LayoutMode",
    "Placement",
    "ResizeSpec",
    "Size",
    "SizeOverride",
    "compute_layout",
    "core",
    "fit_inside",
    "layout_grid",
    "layout_horizontal",
    "layout_vertical",
    "layouts",
    "normalize_dimensions",
    "plan_resize",
    "plan_sizes",
    "sizing",
]
