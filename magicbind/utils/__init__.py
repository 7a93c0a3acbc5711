#!/usr/bin/env python3
"""
magicbind Utilities
"""

from .error_output import CapturedOutput, capture_error_output, suppress_error_output
from .logger import get_logger, setup_logger

__all__ = [
    "get_logger",
    "setup_logger",
    "CapturedOutput",
    "capture_error_output",
    "suppress_error_output",
]
