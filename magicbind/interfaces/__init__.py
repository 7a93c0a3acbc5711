#!/usr/bin/env python3
"""
magicbind Interfaces Module

Protocol-based contract for the native detection engine. The session only
talks to libmagic through ``EngineInterface``, so tests and alternative
loaders can supply any object with the same shape.

Copyright (C) 2025 Marc Rivero López
Licensed under the GNU General Public License v3.0 (GPLv3)
"""

from .engine import (
    ALL_CAPABILITIES,
    CAP_GETFLAGS,
    CAP_GETPATH,
    CAP_LOAD_BUFFERS,
    CAP_PARAMETERS,
    CAP_VERSION,
    VERSION_UNSUPPORTED,
    Capabilities,
    EngineInterface,
)

__all__ = [
    "ALL_CAPABILITIES",
    "CAP_GETFLAGS",
    "CAP_GETPATH",
    "CAP_LOAD_BUFFERS",
    "CAP_PARAMETERS",
    "CAP_VERSION",
    "VERSION_UNSUPPORTED",
    "Capabilities",
    "EngineInterface",
]
