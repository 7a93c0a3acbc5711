#!/usr/bin/env python3
"""
Module-level convenience functions

``open``, ``mime``, ``type`` and ``encoding`` hand back a ``Session`` the
caller owns (use it as a context manager). The remaining functions are
one-shot: they open a session, perform a single operation and close the
session again whether or not the operation succeeded.
"""

from typing import Any

from . import flags as magic_flags
from .core import Result, Session


def open(flags: int = magic_flags.NONE, *paths: Any, **kwargs: Any) -> Session:
    """
    Open a new session.

    Example:
        >>> with magicbind.open(magicbind.MIME) as session:
        ...     session.file("/bin/sh")
        'application/x-sharedlib; charset=binary'
    """
    return Session(*paths, flags=flags, **kwargs)


def mime(*paths: Any, **kwargs: Any) -> Session:
    """Open a session that reports MIME type and encoding."""
    return open(magic_flags.MIME, *paths, **kwargs)


def type(*paths: Any, **kwargs: Any) -> Session:
    """Open a session that reports the MIME type only."""
    return open(magic_flags.MIME_TYPE, *paths, **kwargs)


def encoding(*paths: Any, **kwargs: Any) -> Session:
    """Open a session that reports the MIME encoding only."""
    return open(magic_flags.MIME_ENCODING, *paths, **kwargs)


def compile(*paths: Any, **kwargs: Any) -> bool:
    with Session(**kwargs) as session:
        return session.compile(*paths)


def check(*paths: Any, **kwargs: Any) -> bool:
    with Session(**kwargs) as session:
        return session.check(*paths)


def file(path: Any, flags: int = magic_flags.NONE, **kwargs: Any) -> Result:
    """Classify a single path with a throwaway session."""
    with Session(flags=flags, **kwargs) as session:
        return session.file(path)


def buffer(data: Any, flags: int = magic_flags.NONE, **kwargs: Any) -> Result:
    """Classify bytes with a throwaway session."""
    with Session(flags=flags, **kwargs) as session:
        return session.buffer(data)


def descriptor(fd: Any, flags: int = magic_flags.NONE, **kwargs: Any) -> Result:
    """Classify an open descriptor or stream with a throwaway session."""
    with Session(flags=flags, **kwargs) as session:
        return session.descriptor(fd)


def version(**kwargs: Any) -> int:
    return Session.version(**kwargs)


def version_tuple(**kwargs: Any) -> tuple[int, int]:
    return Session.version_tuple(**kwargs)


def version_string(**kwargs: Any) -> str:
    return Session.version_string(**kwargs)


__all__ = [
    "open",
    "mime",
    "type",
    "encoding",
    "compile",
    "check",
    "file",
    "buffer",
    "descriptor",
    "version",
    "version_tuple",
    "version_string",
]
