#!/usr/bin/env python3
"""
magicbind Core Package - libmagic session components

This package provides:
- Session: lifecycle, flags, parameters, database loading and classification
- Result shaping for CONTINUE and EXTENSION output

``Magic`` is kept as an alias of ``Session``.

Copyright (C) 2025 Marc Rivero López
Licensed under the GNU General Public License v3.0 (GPLv3)
"""

from .results import (
    CONTINUE_SEPARATOR,
    EXTENSION_SEPARATOR,
    RAW_CONTINUE_SEPARATOR,
    Result,
    shape_result,
    split_matches,
)
from .session import Magic, Session, flatten_paths

__all__ = [
    # Main class
    "Session",
    "Magic",
    # Helpers
    "flatten_paths",
    "shape_result",
    "split_matches",
    "Result",
    # Constants
    "CONTINUE_SEPARATOR",
    "RAW_CONTINUE_SEPARATOR",
    "EXTENSION_SEPARATOR",
]
