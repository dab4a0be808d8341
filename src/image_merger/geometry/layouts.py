"""Canvas sizing and placement for strip and grid layouts."""

from __future__ import annotations

from itertools import accumulate
from typing import TYPE_CHECKING

from image_merger.errors import InvalidInputError
from image_merger.geometry.core import CanvasLayout, Placement, Size

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

    from image_merger.geometry.core import LayoutMode


def _require_images(sizes: Sequence[Size]) -> None:
    if not sizes:
        msg = "No images provided"
        raise InvalidInputError(msg)


def layout_horizontal(sizes: Sequence[Size]) -> CanvasLayout:
    """Place images left to right, top aligned."""
    _require_images(sizes)
    offsets = [0, *accumulate(s.width for s in sizes)]
    placements = tuple(
        Placement(i, offsets[i], 0, s.width, s.height)
        for i, s in enumerate(sizes)
    )
    canvas = Size(offsets[-1], max(s.height for s in sizes))
    return CanvasLayout(canvas, placements)


def layout_vertical(sizes: Sequence[Size]) -> CanvasLayout:
    """Place images top to bottom, left aligned."""
    _require_images(sizes)
    offsets = [0, *accumulate(s.height for s in sizes)]
    placements = tuple(
        Placement(i, 0, offsets[i], s.width, s.height)
        for i, s in enumerate(sizes)
    )
    canvas = Size(max(s.width for s in sizes), offsets[-1])
    return CanvasLayout(canvas, placements)


def layout_grid(sizes: Sequence[Size], rows: int, cols: int) -> CanvasLayout:
    """
    Place images row-major into uniform cells sized to the largest image.

    Image count is not checked against ``rows * cols``; images past the
    last cell keep following the same formula and fall outside the canvas.
    """
    _require_images(sizes)
    cell_w = max(s.width for s in sizes)
    cell_h = max(s.height for s in sizes)
    placements = tuple(
        Placement(
            i,
            (i % cols) * cell_w,
            (i // cols) * cell_h,
            s.width,
            s.height,
        )
        for i, s in enumerate(sizes)
    )
    return CanvasLayout(Size(cell_w * cols, cell_h * rows), placements)


def compute_layout(sizes: Sequence[Size], mode: LayoutMode) -> CanvasLayout:
    """Dispatch to the layout helper selected by ``mode``."""
    if mode.name == "horizontal":
        return layout_horizontal(sizes)
    if mode.name == "vertical":
        return layout_vertical(sizes)
    return layout_grid(sizes, mode.rows, mode.cols)
