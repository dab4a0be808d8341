"""Plain-data geometry types shared by the sizing and layout helpers."""

from __future__ import annotations

from dataclasses import dataclass

from image_merger.errors import InvalidInputError
from image_merger.type_defs import LAYOUT_CHOICES, LayoutName


def _require_positive(value: int, what: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{what} must be an integer, got {value!r}"
        raise InvalidInputError(msg)
    if value <= 0:
        msg = f"{what} must be positive, got {value}"
        raise InvalidInputError(msg)


@dataclass(frozen=True, slots=True)
class Size:
    """Pixel dimensions with strictly positive sides."""

    width: int
    height: int

    def __post_init__(self) -> None:
        _require_positive(self.width, "width")
        _require_positive(self.height, "height")

    @property
    def area(self) -> int:
        """Total pixel count."""
        return self.width * self.height

    def as_tuple(self) -> tuple[int, int]:
        """Return (width, height)."""
        return self.width, self.height


@dataclass(frozen=True, slots=True)
class ResizeSpec:
    """
    Explicit resize box requested by the caller.

    Either side may be omitted. With both sides set the image is fitted
    inside the box; with one side set only that axis constrains the scale.
    """

    width: int | None = None
    height: int | None = None

    def __post_init__(self) -> None:
        if self.width is not None:
            _require_positive(self.width, "resize width")
        if self.height is not None:
            _require_positive(self.height, "resize height")

    @property
    def is_empty(self) -> bool:
        """True when neither dimension was given."""
        return self.width is None and self.height is None


@dataclass(frozen=True, slots=True)
class SizeOverride:
    """Alignment target for a single axis; the other axis follows aspect."""

    width: int | None = None
    height: int | None = None

    def __post_init__(self) -> None:
        if (self.width is None) == (self.height is None):
            msg = "SizeOverride needs exactly one of width or height"
            raise InvalidInputError(msg)


@dataclass(frozen=True, slots=True)
class LayoutMode:
    """Layout strategy plus grid shape (rows/cols only matter for grid)."""

    name: LayoutName = "horizontal"
    rows: int = 1
    cols: int = 1

    def __post_init__(self) -> None:
        if self.name not in LAYOUT_CHOICES:
            msg = (f"Unknown layout '{self.name}', expected one of "
                   f"{', '.join(LAYOUT_CHOICES)}")
            raise InvalidInputError(msg)
        _require_positive(self.rows, "grid rows")
        _require_positive(self.cols, "grid cols")

    @classmethod
    def horizontal(cls) -> LayoutMode:
        """Single row strip."""
        return cls("horizontal")

    @classmethod
    def vertical(cls) -> LayoutMode:
        """Single column strip."""
        return cls("vertical")

    @classmethod
    def grid(cls, rows: int, cols: int) -> LayoutMode:
        """Uniform grid with the given shape."""
        return cls("grid", rows=rows, cols=cols)

    @property
    def capacity(self) -> int | None:
        """Number of grid cells, or None for strip layouts."""
        if self.name != "grid":
            return None
        return self.rows * self.cols


@dataclass(frozen=True, slots=True)
class Placement:
    """Where one image lands on the canvas."""

    index: int
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        """Exclusive right edge."""
        return self.x + self.width

    @property
    def bottom(self) -> int:
        """Exclusive bottom edge."""
        return self.y + self.height


@dataclass(frozen=True, slots=True)
class CanvasLayout:
    """Canvas size and ordered placements produced by the layout engine."""

    size: Size
    placements: tuple[Placement, ...]

    @property
    def width(self) -> int:
        """Canvas width."""
        return self.size.width

    @property
    def height(self) -> int:
        """Canvas height."""
        return self.size.height

    def fits(self) -> bool:
        """Return True when no placement extends past the canvas."""
        return all(
            p.right <= self.width and p.bottom <= self.height
            for p in self.placements
        )
