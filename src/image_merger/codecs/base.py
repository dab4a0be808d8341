"""Codec protocol shared by the canvas and Pillow backends."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:  # pragma: no cover
    from image_merger.geometry import Size


@dataclass(frozen=True, slots=True)
class DecodedImage:
    """
    Decoded source image.

    ``handle`` is backend specific (a Pillow image or a numpy array);
    ``size`` is read after orientation normalization.
    """

    name: str
    size: Size
    handle: Any


class ImageCodec(Protocol):
    """Decode, resize, composite, and encode primitives for one backend."""

    name: str
    supports_resize: bool

    def decode(self, data: bytes, name: str) -> DecodedImage:
        """Decode bytes, applying embedded orientation."""

    def resize(self, image: DecodedImage, size: Size) -> DecodedImage:
        """Resample ``image`` to exactly ``size``."""

    def check_canvas(self, size: Size) -> None:
        """Raise CanvasTooLargeError when ``size`` is over the limit."""

    def create_canvas(self, size: Size) -> Any:  # noqa: ANN401
        """Return a fully transparent RGBA canvas."""

    def composite(
        self,
        canvas: Any,  # noqa: ANN401
        image: DecodedImage,
        x: int,
        y: int,
    ) -> Any:  # noqa: ANN401
        """Draw ``image`` onto ``canvas`` with its top left at (x, y)."""

    def encode_png(self, canvas: Any) -> bytes:  # noqa: ANN401
        """Encode the canvas as a lossless PNG."""
