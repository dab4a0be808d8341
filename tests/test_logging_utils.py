"""Tests logging functions in image_merger."""
import logging

import pytest

import image_merger.logging_utils as im_logging_utils


class TestLoggingUtils:
    def test_logger_singleton_behavior(self) -> None:
        """Test that logger instances are singleton per name."""
        logger1 = im_logging_utils.setup_logger("test_logger")
        logger2 = im_logging_utils.setup_logger("test_logger")
        assert logger1 is logger2
        assert len(logger1.handlers) == 1

    def test_logger_custom_formatter_and_handler(self) -> None:
        """Test custom formatter and handler are applied."""
        formatter = logging.Formatter("[CUSTOM] %(message)s")
        handler = logging.StreamHandler()
        logger = im_logging_utils.setup_logger(
            "custom_logger",
            formatter=formatter,
            handler=handler,
        )
        assert logger.name == "custom_logger"
        assert len(logger.handlers) == 1
        assert logger.handlers[0].formatter._fmt.startswith("[CUSTOM]")

    def test_set_log_level_by_name(self) -> None:
        """Level names are case-insensitive."""
        previous = im_logging_utils.logger.level
        try:
            im_logging_utils.set_log_level("debug")
            assert im_logging_utils.logger.level == logging.DEBUG
        finally:
            im_logging_utils.set_log_level(previous)

    def test_set_log_level_unknown(self) -> None:
        """Unknown names raise ValueError."""
        with pytest.raises(ValueError, match="Unknown log level"):
            im_logging_utils.set_log_level("chatty")

    def test_default_handler_and_format(self) -> None:
        """A fresh logger gets one stream handler and stops propagation."""
        logger = im_logging_utils.setup_logger("default_format_logger")
        assert logger.propagate is False
        assert isinstance(logger.handlers[0], logging.StreamHandler)
        assert logger.handlers[0].formatter._fmt == (
            "%(asctime)s [%(levelname)s] %(message)s")
