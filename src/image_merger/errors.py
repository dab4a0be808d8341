"""
Error taxonomy for merge requests.

Every failure surfaced by the pipeline is a :class:`MergeError` whose
``kind`` lets callers (and the fallback dispatcher) tell the cases apart
without string matching.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, ClassVar

if TYPE_CHECKING:  # pragma: no cover
    from image_merger.type_defs import ErrorKind


class MergeError(Exception):
    """Base class for all merge failures."""

    kind: ClassVar[ErrorKind]


class InvalidInputError(MergeError, ValueError):
    """Request parameters or image set are unusable."""

    kind = "invalid_input"


class DecodeError(MergeError, OSError):
    """A source buffer could not be decoded as an image."""

    kind = "decode_failure"

    def __init__(self, name: str, reason: str) -> None:
        super().__init__(f"Could not decode image '{name}': {reason}")
        self.name = name
        self.reason = reason


class CanvasTooLargeError(MergeError):
    """Canvas exceeds the execution backend's safe size."""

    kind = "canvas_too_large"

    def __init__(self, width: int, height: int, limit: str) -> None:
        super().__init__(
            f"Canvas {width}x{height} exceeds backend limit ({limit})",
        )
        self.width = width
        self.height = height


class EncodeError(MergeError):
    """Compositing or PNG encoding failed."""

    kind = "encode_failure"


__all__ = [
    "CanvasTooLargeError",
    "DecodeError",
    "EncodeError",
    "InvalidInputError",
    "MergeError",
]
