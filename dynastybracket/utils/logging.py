"""Logging utilities for the dynasty bracket application."""

import logging

LOG_FILE = "/tmp/dynasty_bracket.log"

# Global state
_console_logging_enabled: bool | None = None
_file_logger: logging.Logger | None = None


def _console_enabled() -> bool:
    """Console output is on unless the TUI switched it off"""
    if _console_logging_enabled is None:
        return True
    return _console_logging_enabled


def set_console_logging(enabled: bool):
    """Explicitly enable/disable console logging"""
    global _console_logging_enabled
    _console_logging_enabled = enabled


def log(message: str):
    """
    Log to the debug file, and to the console unless the TUI owns the terminal.
    """
    global _file_logger

    # Initialize file logger once
    if _file_logger is None:
        _file_logger = logging.getLogger("dynastybracket")
        _file_logger.setLevel(logging.DEBUG)
        file_handler = logging.FileHandler(LOG_FILE)
        file_handler.setFormatter(
            logging.Formatter("%(asctime)s - %(levelname)s - %(message)s")
        )
        _file_logger.addHandler(file_handler)
        _file_logger.propagate = False

    _file_logger.info(message)

    if _console_enabled():
        print(message)
