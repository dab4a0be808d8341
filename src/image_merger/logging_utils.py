"""
Logging for the image merger.

Every module logs through the single ``image_merger`` logger created
here; the CLI adjusts its verbosity with :func:`set_log_level`.
"""

import logging

_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"


def setup_logger(
        name: str = __name__,
        level: int = logging.INFO,
        formatter: logging.Formatter | None = None,
        handler: logging.Handler | None = None,
) -> logging.Logger:
    """
    Return the named logger, attaching a handler on first use only.

    Repeated calls never stack handlers, so importing modules can call
    this freely. The logger does not propagate to the root logger.

    Args:
        name: Logger name.
        level: Initial level, e.g. ``logging.DEBUG`` for per-image sizing.
        formatter: Replaces the default ``time [LEVEL] message`` format.
        handler: Replaces the default stderr stream handler.

    """
    log = logging.getLogger(name)
    log.setLevel(level)
    if log.handlers:
        return log
    handler = handler or logging.StreamHandler()
    handler.setFormatter(formatter or logging.Formatter(_DEFAULT_FORMAT))
    log.addHandler(handler)
    log.propagate = False
    return log


def set_log_level(level: str | int) -> None:
    """Adjust the shared logger level from a name such as ``"DEBUG"``."""
    if isinstance(level, str):
        resolved = logging.getLevelName(level.upper())
        if not isinstance(resolved, int):
            msg = f"Unknown log level: {level}"
            raise ValueError(msg)
        level = resolved
    logger.setLevel(level)


# Shared by the pipeline, dispatcher, runtime helpers and CLI
logger = setup_logger("image_merger")
