"""
Backend selection and explicit fallback between execution contexts.

A canvas attempt reports its outcome as a :class:`MergeOutcome` instead of
raising, and :func:`run_merge` inspects it to decide whether the codec
backend should retry the request.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from image_merger.codecs import CanvasCodec, PillowCodec
from image_merger.errors import CanvasTooLargeError, EncodeError, MergeError
from image_merger.logging_utils import logger
from image_merger.pipeline import MergePipeline

if TYPE_CHECKING:  # pragma: no cover
    from image_merger.codecs import ImageCodec
    from image_merger.config import MergerConfig
    from image_merger.geometry import CanvasLayout
    from image_merger.request import MergeRequest

# Failures the other backend may still succeed on
_RETRYABLE: tuple[type[MergeError], ...] = (CanvasTooLargeError, EncodeError)


@dataclass(frozen=True, slots=True)
class MergeOutcome:
    """Result of one merge attempt on a named backend."""

    backend: str
    data: bytes | None = None
    layout: CanvasLayout | None = None
    error: MergeError | None = None
    fallback_from: MergeOutcome | None = None

    @property
    def ok(self) -> bool:
        """True when PNG bytes were produced."""
        return self.error is None

    def unwrap(self) -> bytes:
        """Return the PNG bytes or raise the recorded error."""
        if self.error is not None:
            raise self.error
        return self.data  # type: ignore[return-value]


def build_codec(backend: str, config: MergerConfig) -> ImageCodec:
    """Instantiate the codec for ``backend`` from config."""
    if backend == "canvas":
        return CanvasCodec(
            max_area=config.canvas.max_area,
            max_side=config.canvas.max_side,
            remove_pixel_limit=config.execution.remove_pixel_limit,
        )
    if backend == "codec":
        return PillowCodec(
            compress_level=config.canvas.compress_level,
            remove_pixel_limit=config.execution.remove_pixel_limit,
        )
    msg = f"Unknown backend '{backend}'"
    raise ValueError(msg)


def try_merge(
    request: MergeRequest,
    backend: str,
    config: MergerConfig,
    *,
    progress: bool = False,
) -> MergeOutcome:
    """Attempt the merge on one backend and report, never raise, failures."""
    workers = (
        config.execution.canvas_workers
        if backend == "canvas"
        else config.execution.concurrency
    )
    pipeline = MergePipeline(
        build_codec(backend, config),
        max_workers=workers,
        grid_overflow=config.layout.grid_overflow,
        progress=progress,
    )
    try:
        result = pipeline.run(request)
    except MergeError as exc:
        return MergeOutcome(backend=backend, error=exc)
    return MergeOutcome(backend=backend, data=result.data,
                        layout=result.layout)


def choose_backend(request: MergeRequest, config: MergerConfig) -> str:
    """Pick the first backend to try for ``request``."""
    backend = config.execution.backend
    if backend != "auto":
        return backend
    if request.needs_resampling:
        logger.info(
            "Resize or alignment requested, using codec backend",
        )
        return "codec"
    return "canvas"


def run_merge(
    request: MergeRequest,
    config: MergerConfig,
    *,
    progress: bool = False,
) -> MergeOutcome:
    """
    Merge ``request``, retrying on the codec backend when allowed.

    Fallback only happens in ``auto`` mode, with ``execution.fallback``
    enabled, after a canvas attempt that failed for a size or encoding
    reason. Invalid input and decode failures are returned as is.
    """
    first_backend = choose_backend(request, config)
    outcome = try_merge(request, first_backend, config, progress=progress)
    if outcome.ok:
        return outcome

    can_retry = (
        config.execution.backend == "auto"
        and config.execution.fallback
        and first_backend == "canvas"
        and isinstance(outcome.error, _RETRYABLE)
    )
    if not can_retry:
        return outcome

    logger.warning(
        "Canvas backend failed (%s), falling back to codec backend",
        outcome.error,
    )
    retry = try_merge(request, "codec", config, progress=progress)
    return MergeOutcome(
        backend=retry.backend,
        data=retry.data,
        layout=retry.layout,
        error=retry.error,
        fallback_from=outcome,
    )


def merge(request: MergeRequest, config: MergerConfig) -> bytes:
    """Merge with fallback and return PNG bytes or raise the final error."""
    return run_merge(request, config).unwrap()
