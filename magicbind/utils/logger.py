#!/usr/bin/env python3
"""
Logging utilities for magicbind
"""

import logging
import sys
from pathlib import Path

import colorlog

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
COLOR_LOG_FORMAT = "%(log_color)s%(levelname)-8s%(reset)s %(name)s: %(message)s"


def setup_logger(
    name: str = "magicbind",
    level: int = logging.INFO,
    log_file: str | Path | None = None,
) -> logging.Logger:
    """Setup logger with a colored console handler and an optional file handler"""

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Avoid duplicate handlers
    if any(not isinstance(handler, logging.NullHandler) for handler in logger.handlers):
        return logger

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level)
    console_handler.setFormatter(colorlog.ColoredFormatter(COLOR_LOG_FORMAT))
    logger.addHandler(console_handler)

    if log_file is not None:
        try:
            log_path = Path(log_file)
            log_path.parent.mkdir(parents=True, exist_ok=True)
            file_handler = logging.FileHandler(log_path)
            file_handler.setLevel(logging.DEBUG)
            file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
            logger.addHandler(file_handler)
        except OSError as e:
            logger.warning(f"Could not open log file {log_file}: {e}")

    return logger


def get_logger(name: str = "magicbind") -> logging.Logger:
    """Get logger instance"""
    return logging.getLogger(name)
