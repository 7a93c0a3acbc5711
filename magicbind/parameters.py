#!/usr/bin/env python3
"""
libmagic parameter tags and bounds

Parameters are bounded integers (recursion limits, byte budgets) keyed by a
small tag. Tags are validated against what the linked libmagic answers, values
against the ceiling libmagic enforces for each tag.
"""

import ctypes
from errno import EINVAL, EOVERFLOW

from .errors import ErrorMessage, ParameterError

PARAM_INDIR_MAX = 0  # Recursion limit for indirect magic
PARAM_NAME_MAX = 1  # Use count limit for name/use magic
PARAM_ELF_PHNUM_MAX = 2  # Max ELF program sections processed
PARAM_ELF_SHNUM_MAX = 3  # Max ELF sections processed
PARAM_ELF_NOTES_MAX = 4  # Max ELF notes processed
PARAM_REGEX_MAX = 5  # Length limit for regex searches
PARAM_BYTES_MAX = 6  # Max number of bytes to read from file
PARAM_ENCODING_MAX = 7  # Max number of bytes to scan for encoding
PARAM_ELF_SHSIZE_MAX = 8  # Max ELF section size
PARAM_MAGWARN_MAX = 9  # Max number of warnings while parsing magic

PARAMETER_NAMES: dict[int, str] = {
    PARAM_INDIR_MAX: "PARAM_INDIR_MAX",
    PARAM_NAME_MAX: "PARAM_NAME_MAX",
    PARAM_ELF_PHNUM_MAX: "PARAM_ELF_PHNUM_MAX",
    PARAM_ELF_SHNUM_MAX: "PARAM_ELF_SHNUM_MAX",
    PARAM_ELF_NOTES_MAX: "PARAM_ELF_NOTES_MAX",
    PARAM_REGEX_MAX: "PARAM_REGEX_MAX",
    PARAM_BYTES_MAX: "PARAM_BYTES_MAX",
    PARAM_ENCODING_MAX: "PARAM_ENCODING_MAX",
    PARAM_ELF_SHSIZE_MAX: "PARAM_ELF_SHSIZE_MAX",
    PARAM_MAGWARN_MAX: "PARAM_MAGWARN_MAX",
}

# Upper bound (exclusive) of the tag space probed on the engine.
PARAMETER_TAG_LIMIT = 128

# Values are stored by libmagic in 16-bit fields except for byte budgets.
USHRT_MAX = 0xFFFF
SIZE_MAX = (1 << (8 * ctypes.sizeof(ctypes.c_size_t))) - 1

_WIDE_PARAMETERS = frozenset({PARAM_BYTES_MAX, PARAM_ELF_SHSIZE_MAX})


def max_value(tag: int) -> int:
    """Largest value libmagic accepts for ``tag``."""
    return SIZE_MAX if tag in _WIDE_PARAMETERS else USHRT_MAX


def _check_int(value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"wrong argument type {type(value).__name__} (expected int)")
    return value


class ParameterStore:
    """
    Bounded key/value store for libmagic parameters.

    The store validates tags and values before they reach the engine and
    remembers the last value read or written per tag. It holds no reference
    to the native handle; the owning session performs the native calls.

    Attributes:
        supported_tags: Tags the linked engine answers, probed at session open
    """

    def __init__(self, supported_tags: frozenset[int] = frozenset()):
        self.supported_tags = frozenset(
            tag for tag in supported_tags if 0 <= tag < PARAMETER_TAG_LIMIT
        )
        self._values: dict[int, int] = {}

    def check_tag(self, tag: int) -> int:
        _check_int(tag)
        if tag not in self.supported_tags:
            raise ParameterError(ErrorMessage.PARAM_INVALID_TYPE, errno=EINVAL)
        return tag

    def check_value(self, tag: int, value: int) -> int:
        self.check_tag(tag)
        _check_int(value)
        if value < 0 or value > max_value(tag):
            raise ParameterError(ErrorMessage.PARAM_INVALID_VALUE, errno=EOVERFLOW)
        return value

    def remember(self, tag: int, value: int) -> None:
        self._values[tag] = value

    def get(self, tag: int) -> int | None:
        """Last value seen for ``tag``, or None if never read or written."""
        return self._values.get(tag)

    def snapshot(self) -> dict[str, int]:
        """Known values keyed by parameter name"""
        return {
            PARAMETER_NAMES.get(tag, str(tag)): value
            for tag, value in sorted(self._values.items())
        }

    def clear(self) -> None:
        self._values.clear()
