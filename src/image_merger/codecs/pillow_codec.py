"""
Pillow backed codec used for the full merge path.

Handles every request shape, including explicit resizing and alignment,
and writes PNG with a configurable zlib level (0 by default, fastest and
fully lossless).
"""

from __future__ import annotations

import io
from typing import TYPE_CHECKING

from PIL import Image, ImageOps, UnidentifiedImageError

from image_merger.codecs.base import DecodedImage
from image_merger.constants import (
    COLOR_MODE_RGBA,
    COLOR_TRANSPARENT,
    PNG_COMPRESS_LEVEL_MAX,
    PNG_COMPRESS_LEVEL_MIN,
    PNG_FORMAT,
)
from image_merger.errors import DecodeError, EncodeError, InvalidInputError
from image_merger.geometry import Size
from image_merger.logging_utils import logger


def open_oriented(data: bytes, name: str) -> Image.Image:
    """
    Decode ``data`` and apply its EXIF orientation.

    Dimensions must be read from the returned image, never from the raw
    header, or portrait photos stored sideways get laid out wrongly.
    Running out of memory is a resource failure, not bad input, and is
    reported as EncodeError.
    """
    try:
        with Image.open(io.BytesIO(data)) as raw:
            raw.load()
            oriented = ImageOps.exif_transpose(raw)
            return oriented.convert(COLOR_MODE_RGBA)
    except MemoryError as e:
        msg = f"Out of memory while decoding '{name}'"
        raise EncodeError(msg) from e
    except Image.DecompressionBombError as e:
        raise DecodeError(name, str(e)) from e
    except UnidentifiedImageError as e:
        raise DecodeError(name, "unsupported or corrupt image data") from e
    except (OSError, ValueError, SyntaxError, EOFError) as e:
        raise DecodeError(name, str(e) or type(e).__name__) from e


def lift_pixel_limit() -> None:
    """Disable Pillow's decompression-bomb pixel limit for the process."""
    if Image.MAX_IMAGE_PIXELS is not None:
        logger.debug("Removing Pillow decompression pixel limit")
        Image.MAX_IMAGE_PIXELS = None


def image_size(img: Image.Image, name: str) -> Size:
    """Wrap Pillow's size, rejecting degenerate images."""
    width, height = img.size
    if width <= 0 or height <= 0:
        raise DecodeError(name, f"image has no pixels ({width}x{height})")
    return Size(width, height)


class PillowCodec:
    """Full-featured backend built on Pillow."""

    name = "codec"
    supports_resize = True

    def __init__(
        self,
        *,
        compress_level: int = 0,
        remove_pixel_limit: bool = True,
    ) -> None:
        if not (
            PNG_COMPRESS_LEVEL_MIN <= compress_level <= PNG_COMPRESS_LEVEL_MAX
        ):
            msg = (f"PNG compress level must be between "
                   f"{PNG_COMPRESS_LEVEL_MIN} and {PNG_COMPRESS_LEVEL_MAX}, "
                   f"got {compress_level}")
            raise InvalidInputError(msg)
        self.compress_level = compress_level
        if remove_pixel_limit:
            lift_pixel_limit()

    def decode(self, data: bytes, name: str) -> DecodedImage:
        """Decode and orient one image."""
        img = open_oriented(data, name)
        return DecodedImage(name=name, size=image_size(img, name), handle=img)

    def resize(self, image: DecodedImage, size: Size) -> DecodedImage:
        """Resample with Lanczos to the planned size."""
        if image.size == size:
            return image
        try:
            resized = image.handle.resize(
                size.as_tuple(), Image.Resampling.LANCZOS,
            )
        except MemoryError as e:
            msg = (f"Out of memory resizing '{image.name}' to "
                   f"{size.width}x{size.height}")
            raise EncodeError(msg) from e
        return DecodedImage(name=image.name, size=size, handle=resized)

    def check_canvas(self, size: Size) -> None:
        """No fixed ceiling; memory is the only limit."""

    def create_canvas(self, size: Size) -> Image.Image:
        """Allocate a transparent RGBA canvas."""
        try:
            return Image.new(
                COLOR_MODE_RGBA, size.as_tuple(), COLOR_TRANSPARENT,
            )
        except (MemoryError, ValueError) as e:
            msg = f"Could not allocate {size.width}x{size.height} canvas: {e}"
            raise EncodeError(msg) from e

    def composite(
        self,
        canvas: Image.Image,
        image: DecodedImage,
        x: int,
        y: int,
    ) -> Image.Image:
        """Alpha composite ``image`` over the canvas at (x, y)."""
        try:
            canvas.alpha_composite(image.handle, dest=(x, y))
        except (MemoryError, ValueError) as e:
            msg = f"Failed to composite '{image.name}' at ({x}, {y}): {e}"
            raise EncodeError(msg) from e
        return canvas

    def encode_png(self, canvas: Image.Image) -> bytes:
        """Write the canvas as PNG bytes."""
        buffer = io.BytesIO()
        try:
            canvas.save(
                buffer,
                format=PNG_FORMAT,
                compress_level=self.compress_level,
            )
        except (MemoryError, OSError, ValueError) as e:
            msg = f"PNG encoding failed: {e}"
            raise EncodeError(msg) from e
        return buffer.getvalue()
