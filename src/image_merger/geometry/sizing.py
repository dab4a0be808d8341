"""
Dimension normalization and resize planning.

Both helpers are pure functions over :class:`Size` values so the canvas
and codec backends share one sizing policy.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from image_merger.errors import InvalidInputError
from image_merger.geometry.core import ResizeSpec, Size, SizeOverride

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence

    from image_merger.type_defs import AlignDimension


def normalize_dimensions(
    sizes: Sequence[Size],
    align: AlignDimension = "none",
) -> list[SizeOverride | None]:
    """
    Return a per-image alignment override.

    ``"width"`` targets the widest image and ``"height"`` the tallest; the
    orthogonal axis is left to the planner so aspect ratio is kept.
    """
    if align == "none":
        return [None] * len(sizes)
    if not sizes:
        return []
    if align == "width":
        target = max(s.width for s in sizes)
        return [SizeOverride(width=target) for _ in sizes]
    if align == "height":
        target = max(s.height for s in sizes)
        return [SizeOverride(height=target) for _ in sizes]
    msg = f"Unknown alignment '{align}', expected none, width or height"
    raise InvalidInputError(msg)


def _scaled(value: int, scale: float) -> int:
    return max(1, round(value * scale))


def fit_inside(
    natural: Size,
    width: int | None,
    height: int | None,
    *,
    without_enlargement: bool,
) -> Size:
    """
    Scale ``natural`` to fit inside the (possibly open) box.

    The limiting axis lands exactly on the box edge. With
    ``without_enlargement`` a box larger than the image leaves it as is.
    """
    if width is None and height is None:
        return natural

    scale_w = width / natural.width if width is not None else None
    scale_h = height / natural.height if height is not None else None

    if scale_w is not None and (scale_h is None or scale_w <= scale_h):
        scale, limit_axis = scale_w, "width"
    else:
        scale, limit_axis = scale_h, "height"

    if without_enlargement and scale >= 1.0:
        return natural

    if limit_axis == "width":
        return Size(width, _scaled(natural.height, scale))  # type: ignore[arg-type]
    return Size(_scaled(natural.width, scale), height)  # type: ignore[arg-type]


def plan_resize(
    natural: Size,
    resize: ResizeSpec | None = None,
    override: SizeOverride | None = None,
) -> Size:
    """
    Return the final size of one image before layout.

    An explicit resize wins over an alignment override and never enlarges.
    Alignment may enlarge so smaller images grow to the batch maximum.
    """
    if resize is not None and not resize.is_empty:
        return fit_inside(
            natural, resize.width, resize.height, without_enlargement=True,
        )
    if override is not None:
        return fit_inside(
            natural, override.width, override.height,
            without_enlargement=False,
        )
    return natural


def plan_sizes(
    sizes: Sequence[Size],
    resize: ResizeSpec | None = None,
    align: AlignDimension = "none",
) -> list[Size]:
    """Run the normalizer and planner over a whole batch, keeping order."""
    overrides = normalize_dimensions(sizes, align)
    return [
        plan_resize(size, resize, override)
        for size, override in zip(sizes, overrides, strict=True)
    ]
