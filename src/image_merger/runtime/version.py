"""Version string shown by ``image-merger --version``."""

from __future__ import annotations

import tomllib
from importlib import metadata as importlib_metadata
from pathlib import Path

from image_merger.logging_utils import logger

_DISTRIBUTION_NAMES = ("image-merger", "image_merger")
_UNKNOWN_VERSION = "0.0.0"


def _installed_version() -> str | None:
    for name in _DISTRIBUTION_NAMES:
        try:
            return importlib_metadata.version(name)
        except importlib_metadata.PackageNotFoundError:
            continue
    return None


def _checkout_version(start: Path) -> str | None:
    """Read ``project.version`` from the nearest pyproject.toml that sets it."""
    for directory in start.parents:
        candidate = directory / "pyproject.toml"
        if not candidate.is_file():
            continue
        try:
            with candidate.open("rb") as handle:
                project = tomllib.load(handle).get("project", {})
        except OSError as exc:
            logger.warning("Error reading %s: %s", candidate, exc)
            return None
        version = project.get("version")
        if isinstance(version, str) and version.strip():
            return version.strip()
    return None


def resolve_project_version() -> str:
    """
    Return the merger's version.

    Prefers installed package metadata, then a source checkout's
    pyproject.toml, and reports ``0.0.0`` when neither is available.
    """
    return (
        _installed_version()
        or _checkout_version(Path(__file__).resolve())
        or _UNKNOWN_VERSION
    )
