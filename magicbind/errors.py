#!/usr/bin/env python3
"""
magicbind Error Taxonomy

Typed exceptions raised by the binding layer. Every failure surfaces as one of
the classes below so callers can dispatch on type instead of message text.

Copyright (C) 2025 Marc Rivero López
Licensed under the GNU General Public License v3.0 (GPLv3)

Hierarchy:
    Error
    ├── LibraryError         operation on a closed session, or open failure
    ├── FlagsError           invalid flags value (also a ValueError)
    ├── ParameterError       invalid parameter tag or value (also a ValueError)
    ├── MagicError           libmagic itself reported a failure
    └── NotImplementedError  capability missing from the linked libmagic
"""

import builtins
from enum import Enum
from typing import Any


class ErrorMessage(str, Enum):
    """Stable, display-ready error messages"""

    UNKNOWN = "an unknown error has occurred"
    NOT_ENOUGH_MEMORY = "cannot allocate memory"
    NOT_IMPLEMENTED = "function is not implemented"
    LIBRARY_INITIALIZE = "failed to initialize Magic library"
    LIBRARY_CLOSED = "Magic library is not open"
    LIBRARY_NOT_LOADED = "Magic library is not loaded"
    PARAM_INVALID_TYPE = "unknown or invalid parameter specified"
    PARAM_INVALID_VALUE = "invalid parameter value specified"
    FLAG_NOT_IMPLEMENTED = "flag is not implemented"
    FLAG_INVALID_VALUE = "unknown or invalid flag specified"
    CLOSED_STREAM = "closed stream"

    def __str__(self) -> str:
        return self.value


class Error(Exception):
    """Base class for every magicbind error.

    Attributes:
        message: Human-readable description suitable for display
        errno: Platform error number associated with the failure, if any
    """

    def __init__(self, message: str | ErrorMessage, errno: int | None = None):
        self.message = str(message)
        self.errno = errno
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, errno={self.errno!r})"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization"""
        return {
            "exception_type": type(self).__name__,
            "exception_message": self.message,
            "errno": self.errno,
        }


class LibraryError(Error):
    """The session is closed, or the native handle could not be allocated."""


class FlagsError(Error, ValueError):
    """A flags value outside the known flag universe."""


class ParameterError(Error, ValueError):
    """An unknown parameter tag or an out-of-range parameter value."""


class MagicError(Error):
    """libmagic reported a failure; carries its own message and errno."""


class NotImplementedError(Error, builtins.NotImplementedError):
    """The linked libmagic does not provide the requested function."""


__all__ = [
    "ErrorMessage",
    "Error",
    "LibraryError",
    "FlagsError",
    "ParameterError",
    "MagicError",
    "NotImplementedError",
]
