"""
Test configuration and shared fixtures for image_merger.

Fixtures build in-memory PNG/JPEG buffers, write image files to temporary
directories, and construct MergerConfig instances with section overrides.

Note:
    This file is automatically loaded by pytest and should not be
    renamed.

"""
import io
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from PIL import Image

from image_merger.config import MergerConfig
from image_merger.constants import COLOR_MODE_RGBA
from image_merger.logging_utils import logger

_EXIF_ORIENTATION_TAG = 0x0112

RGBA = tuple[int, int, int, int]


def encode_image(img: Image.Image, fmt: str = "PNG", **params: Any) -> bytes:
    """Serialize a PIL image to bytes."""
    buffer = io.BytesIO()
    img.save(buffer, format=fmt, **params)
    return buffer.getvalue()


def decode_png(data: bytes) -> Image.Image:
    """Open PNG bytes fully loaded."""
    img = Image.open(io.BytesIO(data))
    img.load()
    return img


@pytest.fixture
def make_png() -> Callable[..., bytes]:
    """Factory for solid-color RGBA PNG buffers."""

    def _make(
        width: int,
        height: int,
        color: RGBA = (255, 0, 0, 255),
    ) -> bytes:
        return encode_image(Image.new(COLOR_MODE_RGBA, (width, height), color))

    return _make


@pytest.fixture
def rotated_jpeg() -> bytes:
    """A 40x20 JPEG tagged with EXIF orientation 6 (displays as 20x40)."""
    img = Image.new("RGB", (40, 20), "green")
    exif = Image.Exif()
    exif[_EXIF_ORIENTATION_TAG] = 6
    return encode_image(img, "JPEG", exif=exif.tobytes())


@pytest.fixture
def make_image_file(
    tmp_path: Path,
    make_png: Callable[..., bytes],
) -> Callable[..., Path]:
    """Write a solid PNG to tmp_path and return its path."""

    def _make(
        name: str,
        width: int,
        height: int,
        color: RGBA = (0, 0, 255, 255),
    ) -> Path:
        path = tmp_path / name
        path.write_bytes(make_png(width, height, color))
        return path

    return _make


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., MergerConfig]:
    """
    Build MergerConfig instances with optional section overrides.

    Each config writes to an isolated output path under tmp_path.
    """

    def _build(**sections: dict[str, Any]) -> MergerConfig:
        data: dict[str, Any] = {k: dict(v) for k, v in sections.items()}
        output = data.setdefault("output", {})
        output.setdefault("output", str(tmp_path / "out" / "merged.png"))
        return MergerConfig.model_validate(data)

    return _build


@pytest.fixture(autouse=True)
def enable_logger_propagation(monkeypatch: pytest.MonkeyPatch) -> None:
    """Enable propagation for the merger logger to allow caplog to work."""
    monkeypatch.setattr(logger, "propagate", True)
