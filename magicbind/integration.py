#!/usr/bin/env python3
"""
Best-effort classification helpers for paths, file objects and bytes

These helpers never raise a magicbind error: a failure is logged at debug
level and reported as ``None``. Type errors for unsupported arguments still
propagate.
"""

import os
from typing import Any

from . import flags as magic_flags
from .core import Result, Session
from .errors import Error
from .utils.logger import get_logger

logger = get_logger(__name__)


def _path_of(value: Any) -> str | bytes | os.PathLike:
    if isinstance(value, (str, bytes, os.PathLike)):
        return value
    name = getattr(value, "name", None)
    if isinstance(name, (str, bytes, os.PathLike)):
        return name
    raise TypeError(f"wrong argument type {type(value).__name__} (expected path or file)")


def _classify_path(value: Any, flags: int) -> Result | None:
    path = _path_of(value)
    try:
        with Session(flags=flags) as session:
            return session.file(path)
    except Error as exc:
        logger.debug(f"Could not classify {os.fsdecode(path)!r}: {exc}")
        return None


def _classify_bytes(data: Any, flags: int) -> Result | None:
    try:
        with Session(flags=flags) as session:
            return session.buffer(data)
    except Error as exc:
        logger.debug(f"Could not classify {len(data)} byte(s): {exc}")
        return None


def path_magic(value: Any) -> Result | None:
    """Describe the file at ``value`` (a path or an object with ``.name``)."""
    return _classify_path(value, magic_flags.NONE)


def path_mime(value: Any) -> Result | None:
    return _classify_path(value, magic_flags.MIME)


def path_type(value: Any) -> Result | None:
    return _classify_path(value, magic_flags.MIME_TYPE)


def bytes_magic(data: bytes | bytearray | memoryview | str) -> Result | None:
    """Describe in-memory content."""
    return _classify_bytes(data, magic_flags.NONE)


def bytes_mime(data: bytes | bytearray | memoryview | str) -> Result | None:
    return _classify_bytes(data, magic_flags.MIME)


def bytes_type(data: bytes | bytearray | memoryview | str) -> Result | None:
    return _classify_bytes(data, magic_flags.MIME_TYPE)


__all__ = [
    "path_magic",
    "path_mime",
    "path_type",
    "bytes_magic",
    "bytes_mime",
    "bytes_type",
]
