"""
Merge orchestration.

Sequences decode, dimension normalization, resize planning, layout,
compositing, and PNG encoding for one request against any
:class:`~image_merger.codecs.ImageCodec`.
"""

from __future__ import annotations

import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import TYPE_CHECKING, TypeVar

from tqdm import tqdm

from image_merger.errors import InvalidInputError
from image_merger.geometry import (
    CanvasLayout,
    LayoutMode,
    compute_layout,
    plan_sizes,
)
from image_merger.logging_utils import logger

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Callable, Iterable, Sequence

    from image_merger.codecs import DecodedImage, ImageCodec
    from image_merger.geometry import Size
    from image_merger.request import MergeRequest
    from image_merger.type_defs import GridOverflow

T = TypeVar("T")
R = TypeVar("R")


@dataclass(frozen=True, slots=True)
class MergeResult:
    """Encoded PNG plus the layout that produced it."""

    data: bytes
    layout: CanvasLayout
    backend: str


def resolve_layout_mode(
    mode: LayoutMode,
    count: int,
    overflow: GridOverflow = "reject",
) -> LayoutMode:
    """
    Apply the grid overflow policy for ``count`` images.

    ``reject`` refuses more images than cells; ``extend`` adds rows until
    every image has a cell.
    """
    capacity = mode.capacity
    if capacity is None or count <= capacity:
        return mode
    if overflow == "reject":
        msg = (f"{count} images do not fit a {mode.rows}x{mode.cols} grid "
               f"({capacity} cells)")
        raise InvalidInputError(msg)
    rows = math.ceil(count / mode.cols)
    logger.info(
        "Grid %dx%d too small for %d images, extending to %d rows",
        mode.rows, mode.cols, count, rows,
    )
    return LayoutMode.grid(rows, mode.cols)


class MergePipeline:
    """Run merge requests against one codec backend."""

    def __init__(
        self,
        codec: ImageCodec,
        *,
        max_workers: int = 1,
        grid_overflow: GridOverflow = "reject",
        progress: bool = False,
    ) -> None:
        if max_workers < 1:
            msg = f"max_workers must be at least 1, got {max_workers}"
            raise InvalidInputError(msg)
        self.codec = codec
        self.max_workers = max_workers
        self.grid_overflow = grid_overflow
        self.progress = progress

    def _map_ordered(
        self,
        fn: Callable[[T], R],
        items: Sequence[T],
        desc: str,
    ) -> list[R]:
        """Run ``fn`` over ``items`` on the pool, keeping input order."""
        workers = min(self.max_workers, len(items))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            results: Iterable[R] = pool.map(fn, items)
            return list(tqdm(
                results,
                total=len(items),
                desc=desc,
                disable=not self.progress,
            ))

    def run(self, request: MergeRequest) -> MergeResult:
        """Merge every image of ``request`` into one PNG."""
        if not request.images:
            msg = "No images provided"
            raise InvalidInputError(msg)
        mode = resolve_layout_mode(
            request.layout, len(request.images), self.grid_overflow,
        )

        decoded = self._map_ordered(
            lambda pair: self.codec.decode(pair[0], pair[1]),
            list(zip(request.images, request.names, strict=True)),
            "Decoding",
        )

        targets = plan_sizes(
            [img.size for img in decoded], request.resize, request.align,
        )
        for img, target in zip(decoded, targets, strict=True):
            if img.size != target:
                logger.debug(
                    "%s: %dx%d -> %dx%d", img.name,
                    img.size.width, img.size.height,
                    target.width, target.height,
                )
        prepared = self._resize_all(decoded, targets)

        layout = compute_layout([img.size for img in prepared], mode)
        logger.info(
            "Canvas %dx%d (%s layout, %d images, %s backend)",
            layout.width, layout.height, mode.name, len(prepared),
            self.codec.name,
        )
        self.codec.check_canvas(layout.size)

        canvas = self.codec.create_canvas(layout.size)
        for placement in layout.placements:
            canvas = self.codec.composite(
                canvas, prepared[placement.index], placement.x, placement.y,
            )
        data = self.codec.encode_png(canvas)
        return MergeResult(data=data, layout=layout, backend=self.codec.name)

    def _resize_all(
        self,
        images: list[DecodedImage],
        targets: list[Size],
    ) -> list[DecodedImage]:
        pending = [
            i for i, (img, target) in enumerate(zip(images, targets,
                                                    strict=True))
            if img.size != target
        ]
        if not pending:
            return images
        if not self.codec.supports_resize:
            msg = (f"The {self.codec.name} backend cannot resize images; "
                   "use the codec backend")
            raise InvalidInputError(msg)
        resized = self._map_ordered(
            lambda i: self.codec.resize(images[i], targets[i]),
            pending,
            "Resizing",
        )
        out = list(images)
        for i, img in zip(pending, resized, strict=True):
            out[i] = img
        return out


def merge_images(
    request: MergeRequest,
    codec: ImageCodec,
    *,
    max_workers: int = 1,
    grid_overflow: GridOverflow = "reject",
) -> bytes:
    """Merge ``request`` with ``codec`` and return PNG bytes."""
    pipeline = MergePipeline(
        codec, max_workers=max_workers, grid_overflow=grid_overflow,
    )
    return pipeline.run(request).data
