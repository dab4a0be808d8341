"""
Fast in-memory canvas backend.

Draws decoded images into a single RGBA numpy buffer, the same way a 2D
drawing canvas does, then exports it as PNG. It does no resampling and
refuses canvases beyond a fixed practical size so callers can fall back to
the Pillow backend.
"""

from __future__ import annotations

import io

import numpy as np
from PIL import Image

from image_merger.codecs.base import DecodedImage
from image_merger.codecs.pillow_codec import (
    image_size,
    lift_pixel_limit,
    open_oriented,
)
from image_merger.constants import (
    CANVAS_MAX_AREA,
    CANVAS_MAX_SIDE,
    PNG_FORMAT,
)
from image_merger.errors import (
    CanvasTooLargeError,
    EncodeError,
    InvalidInputError,
)
from image_merger.geometry import Size

_CHANNELS = 4
_ALPHA_MAX = 255


def source_over(dst: np.ndarray, src: np.ndarray) -> np.ndarray:
    """
    Blend ``src`` over ``dst`` (both straight-alpha RGBA uint8).

    Opaque sources and fully transparent destinations are copied as is so
    pixel values survive unchanged.
    """
    src_alpha = src[..., 3]
    if not dst[..., 3].any() or (src_alpha == _ALPHA_MAX).all():
        return src.copy()

    s = src.astype(np.float32) / _ALPHA_MAX
    d = dst.astype(np.float32) / _ALPHA_MAX
    sa = s[..., 3:4]
    da = d[..., 3:4]
    out_a = sa + da * (1.0 - sa)
    safe_a = np.where(out_a > 0, out_a, 1.0)
    out_rgb = (s[..., :3] * sa + d[..., :3] * da * (1.0 - sa)) / safe_a
    out = np.concatenate([out_rgb, out_a], axis=-1)
    return np.clip(np.rint(out * _ALPHA_MAX), 0, _ALPHA_MAX).astype(np.uint8)


class CanvasCodec:
    """Pixel-buffer backend without resampling support."""

    name = "canvas"
    supports_resize = False

    def __init__(
        self,
        *,
        max_area: int = CANVAS_MAX_AREA,
        max_side: int = CANVAS_MAX_SIDE,
        remove_pixel_limit: bool = True,
    ) -> None:
        self.max_area = max_area
        self.max_side = max_side
        if remove_pixel_limit:
            lift_pixel_limit()

    def decode(self, data: bytes, name: str) -> DecodedImage:
        """Decode to an (H, W, 4) uint8 array."""
        img = open_oriented(data, name)
        size = image_size(img, name)
        try:
            pixels = np.asarray(img)
        except MemoryError as e:
            msg = f"Out of memory while decoding '{name}'"
            raise EncodeError(msg) from e
        return DecodedImage(name=name, size=size, handle=pixels)

    def resize(self, image: DecodedImage, size: Size) -> DecodedImage:
        """Only identity resizes are allowed on this backend."""
        if image.size == size:
            return image
        msg = "The canvas backend cannot resize images; use the codec backend"
        raise InvalidInputError(msg)

    def check_canvas(self, size: Size) -> None:
        """Enforce the area and per-side ceilings."""
        if size.width > self.max_side or size.height > self.max_side:
            raise CanvasTooLargeError(
                size.width, size.height, f"max side {self.max_side}px",
            )
        if size.area > self.max_area:
            raise CanvasTooLargeError(
                size.width, size.height, f"max area {self.max_area}px",
            )

    def create_canvas(self, size: Size) -> np.ndarray:
        """Allocate a zeroed (transparent) RGBA buffer."""
        self.check_canvas(size)
        try:
            return np.zeros((size.height, size.width, _CHANNELS), np.uint8)
        except MemoryError as e:
            msg = f"Could not allocate {size.width}x{size.height} canvas"
            raise EncodeError(msg) from e

    def composite(
        self,
        canvas: np.ndarray,
        image: DecodedImage,
        x: int,
        y: int,
    ) -> np.ndarray:
        """Draw ``image`` at (x, y); parts outside the canvas are clipped."""
        canvas_h, canvas_w = canvas.shape[:2]
        w = min(image.size.width, canvas_w - x)
        h = min(image.size.height, canvas_h - y)
        if w <= 0 or h <= 0:
            return canvas
        region = canvas[y:y + h, x:x + w]
        canvas[y:y + h, x:x + w] = source_over(region, image.handle[:h, :w])
        return canvas

    def encode_png(self, canvas: np.ndarray) -> bytes:
        """Export the buffer with Pillow's default PNG settings."""
        buffer = io.BytesIO()
        try:
            Image.fromarray(canvas).save(buffer, format=PNG_FORMAT)
        except (MemoryError, OSError, ValueError) as e:
            msg = f"PNG encoding failed: {e}"
            raise EncodeError(msg) from e
        return buffer.getvalue()
