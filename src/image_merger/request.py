"""
Merge request builder.

A :class:`MergeRequest` is assembled once per merge action from whatever
surface collected the user's choices (CLI arguments, a config file, or the
form fields posted by the original web front end) and handed to the
pipeline as plain data.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from image_merger.config_defaults import DEFAULT_GRID_COLS, DEFAULT_GRID_ROWS
from image_merger.constants import (
    FORM_ALIGN_FIELD,
    FORM_COLS_FIELD,
    FORM_IMAGE_PREFIX,
    FORM_LAYOUT_FIELD,
    FORM_RESIZE_HEIGHT_FIELD,
    FORM_RESIZE_WIDTH_FIELD,
    FORM_ROWS_FIELD,
)
from image_merger.errors import InvalidInputError
from image_merger.geometry import LayoutMode, ResizeSpec
from image_merger.type_defs import ALIGN_CHOICES, AlignDimension

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable, Mapping

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(slots=True)
class MergeRequest:
    """Everything one merge needs: image bytes plus layout options."""

    images: list[bytes]
    layout: LayoutMode = field(default_factory=LayoutMode.horizontal)
    resize: ResizeSpec | None = None
    align: AlignDimension = "none"
    names: list[str] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.align not in ALIGN_CHOICES:
            msg = (f"Unknown alignment '{self.align}', expected one of "
                   f"{', '.join(ALIGN_CHOICES)}")
            raise InvalidInputError(msg)
        if self.resize is not None and self.resize.is_empty:
            self.resize = None
        if not self.names:
            self.names = [f"image-{i}" for i in range(len(self.images))]
        elif len(self.names) != len(self.images):
            msg = "names must match images one to one"
            raise InvalidInputError(msg)

    @property
    def needs_resampling(self) -> bool:
        """True when an explicit resize or alignment was requested."""
        return self.resize is not None or self.align != "none"

    @classmethod
    def from_paths(
        cls,
        paths: Iterable[Path | str],
        *,
        layout: LayoutMode | None = None,
        resize: ResizeSpec | None = None,
        align: AlignDimension = "none",
    ) -> MergeRequest:
        """Read image files in the given order."""
        resolved = [Path(p) for p in paths]
        images = [p.read_bytes() for p in resolved]
        return cls(
            images=images,
            layout=layout or LayoutMode.horizontal(),
            resize=resize,
            align=align,
            names=[p.name for p in resolved],
        )

    @classmethod
    def from_form(
        cls,
        fields: Mapping[str, str],
        files: Mapping[str, bytes],
    ) -> MergeRequest:
        """
        Build a request from the web form contract.

        Grid rows and cols fall back to 2 when missing or not numeric.
        Files are taken from ``image-<n>`` keys in submission order.
        """
        layout_name = fields.get(FORM_LAYOUT_FIELD) or "horizontal"
        rows = _parse_int(fields.get(FORM_ROWS_FIELD)) or DEFAULT_GRID_ROWS
        cols = _parse_int(fields.get(FORM_COLS_FIELD)) or DEFAULT_GRID_COLS
        layout = LayoutMode(
            layout_name,  # type: ignore[arg-type]
            rows=rows if layout_name == "grid" else 1,
            cols=cols if layout_name == "grid" else 1,
        )

        width = _optional_dimension(fields, FORM_RESIZE_WIDTH_FIELD)
        height = _optional_dimension(fields, FORM_RESIZE_HEIGHT_FIELD)
        resize = (
            ResizeSpec(width, height)
            if width is not None or height is not None
            else None
        )

        align = fields.get(FORM_ALIGN_FIELD) or "none"

        keys = [k for k in files if k.startswith(FORM_IMAGE_PREFIX)]
        return cls(
            images=[files[k] for k in keys],
            layout=layout,
            resize=resize,
            align=align,  # type: ignore[arg-type]
            names=keys,
        )


def _parse_int(text: str | None) -> int | None:
    """Parse a leading integer the way lenient form handlers do."""
    if text is None:
        return None
    match = _LEADING_INT.match(text)
    return int(match.group(1)) if match else None


def _optional_dimension(fields: Mapping[str, str], key: str) -> int | None:
    raw = fields.get(key)
    if raw is None or raw.strip() == "":
        return None
    value = _parse_int(raw)
    if value is None:
        msg = f"{key} must be an integer, got {raw!r}"
        raise InvalidInputError(msg)
    return value
