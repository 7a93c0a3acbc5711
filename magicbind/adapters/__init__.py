#!/usr/bin/env python3
"""
magicbind Adapters Module

Concrete engine implementations behind ``EngineInterface``. The libmagic
adapter binds the shared library through ctypes; importing this package does
not load libmagic until an engine is actually created.

Copyright (C) 2025 Marc Rivero López
Licensed under the GNU General Public License v3.0 (GPLv3)
"""

from .libmagic import LibmagicEngine, get_default_engine, load_libmagic

__all__ = ["LibmagicEngine", "get_default_engine", "load_libmagic"]
