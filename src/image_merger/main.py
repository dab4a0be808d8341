"""Top-level orchestration for merging image files from disk."""

from __future__ import annotations

from typing import TYPE_CHECKING

import image_merger.dispatch as im_dispatch
import image_merger.runtime as im_runtime
from image_merger.errors import InvalidInputError
from image_merger.logging_utils import logger
from image_merger.request import MergeRequest

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Sequence
    from pathlib import Path

    from image_merger.config import MergerConfig


def build_request(paths: Sequence[Path], config: MergerConfig) -> MergeRequest:
    """Read ``paths`` and attach layout and sizing options from config."""
    return MergeRequest.from_paths(
        paths,
        layout=config.layout.to_layout_mode(),
        resize=config.resize.to_resize_spec(),
        align=config.resize.align,
    )


def merge_files(
    paths: Sequence[str | Path],
    config: MergerConfig,
    *,
    progress: bool = False,
) -> Path:
    """
    Merge image files into one PNG and write it to the configured output.

    Non-image files are skipped with a warning; if nothing is left the
    request is rejected before any decoding happens.
    """
    resolved = im_runtime.validate_input_paths(paths)
    images = im_runtime.filter_image_paths(resolved)
    if not images:
        msg = "No images provided"
        raise InvalidInputError(msg)

    request = build_request(images, config)
    outcome = im_dispatch.run_merge(request, config, progress=progress)
    data = outcome.unwrap()
    if outcome.fallback_from is not None:
        logger.info("Merged on %s backend after %s backend failed",
                    outcome.backend, outcome.fallback_from.backend)
    else:
        logger.info("Merged on %s backend", outcome.backend)

    output_path = im_runtime.resolve_output_path(config.output.output)
    return im_runtime.write_output(data, output_path)
