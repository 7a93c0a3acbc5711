#!/usr/bin/env python3
"""
libmagic flag constants and bit-mask helpers

Flags are single bits (plus a few documented composites such as MIME) that
change how libmagic classifies content. Parameter tags live in
``magicbind.parameters`` and are never mixed into this namespace.

Copyright (C) 2025 Marc Rivero López
Licensed under the GNU General Public License v3.0 (GPLv3)
"""

from collections.abc import Iterable
from errno import EINVAL
from functools import reduce
from operator import or_

from .errors import ErrorMessage, FlagsError

# =============================================================================
# Primitive flags (values match magic.h)
# =============================================================================
NONE = 0x0000000  # No special handling
DEBUG = 0x0000001  # Print debugging messages to stderr
SYMLINK = 0x0000002  # Follow symbolic links
COMPRESS = 0x0000004  # Look inside compressed files
DEVICES = 0x0000008  # Look at the contents of devices
MIME_TYPE = 0x0000010  # Return the MIME type
CONTINUE = 0x0000020  # Return all matches, not just the first
CHECK = 0x0000040  # Print warnings to stderr
PRESERVE_ATIME = 0x0000080  # Restore access time on exit
RAW = 0x0000100  # Don't convert unprintable characters
ERROR = 0x0000200  # Handle ENOENT etc as real errors
MIME_ENCODING = 0x0000400  # Return the MIME encoding
APPLE = 0x0000800  # Return the Apple creator/type
NO_CHECK_COMPRESS = 0x0001000  # Don't check for compressed files
NO_CHECK_TAR = 0x0002000  # Don't check for tar files
NO_CHECK_SOFT = 0x0004000  # Don't check magic entries
NO_CHECK_APPTYPE = 0x0008000  # Don't check application type
NO_CHECK_ELF = 0x0010000  # Don't check for elf details
NO_CHECK_TEXT = 0x0020000  # Don't check for text files
NO_CHECK_CDF = 0x0040000  # Don't check for cdf files
NO_CHECK_CSV = 0x0080000  # Don't check for CSV files
NO_CHECK_TOKENS = 0x0100000  # Don't check tokens
NO_CHECK_ENCODING = 0x0200000  # Don't check text encodings
NO_CHECK_JSON = 0x0400000  # Don't check for JSON files
NO_CHECK_SIMH = 0x0800000  # Don't check for SIMH tape files
EXTENSION = 0x1000000  # Return a /-separated list of extensions
COMPRESS_TRANSP = 0x2000000  # Check inside compressed files but not report compression
NO_COMPRESS_FORK = 0x4000000  # Don't allow decompression that needs to fork

# =============================================================================
# Composites and aliases
# =============================================================================
MIME = MIME_TYPE | MIME_ENCODING
NODESC = EXTENSION | MIME | APPLE
NO_CHECK_BUILTIN = (
    NO_CHECK_COMPRESS
    | NO_CHECK_TAR
    | NO_CHECK_APPTYPE
    | NO_CHECK_ELF
    | NO_CHECK_TEXT
    | NO_CHECK_CSV
    | NO_CHECK_CDF
    | NO_CHECK_TOKENS
    | NO_CHECK_ENCODING
    | NO_CHECK_JSON
    | NO_CHECK_SIMH
)
NO_CHECK_ASCII = NO_CHECK_TEXT

# Renamed upstream; kept so old callers keep importing, no effect.
NO_CHECK_FORTRAN = 0x0000000
NO_CHECK_TROFF = 0x0000000

# Single-bit flags only; composites and aliases never appear here.
FLAG_NAMES: dict[int, str] = {
    DEBUG: "DEBUG",
    SYMLINK: "SYMLINK",
    COMPRESS: "COMPRESS",
    DEVICES: "DEVICES",
    MIME_TYPE: "MIME_TYPE",
    CONTINUE: "CONTINUE",
    CHECK: "CHECK",
    PRESERVE_ATIME: "PRESERVE_ATIME",
    RAW: "RAW",
    ERROR: "ERROR",
    MIME_ENCODING: "MIME_ENCODING",
    APPLE: "APPLE",
    NO_CHECK_COMPRESS: "NO_CHECK_COMPRESS",
    NO_CHECK_TAR: "NO_CHECK_TAR",
    NO_CHECK_SOFT: "NO_CHECK_SOFT",
    NO_CHECK_APPTYPE: "NO_CHECK_APPTYPE",
    NO_CHECK_ELF: "NO_CHECK_ELF",
    NO_CHECK_TEXT: "NO_CHECK_TEXT",
    NO_CHECK_CDF: "NO_CHECK_CDF",
    NO_CHECK_CSV: "NO_CHECK_CSV",
    NO_CHECK_TOKENS: "NO_CHECK_TOKENS",
    NO_CHECK_ENCODING: "NO_CHECK_ENCODING",
    NO_CHECK_JSON: "NO_CHECK_JSON",
    NO_CHECK_SIMH: "NO_CHECK_SIMH",
    EXTENSION: "EXTENSION",
    COMPRESS_TRANSP: "COMPRESS_TRANSP",
    NO_COMPRESS_FORK: "NO_COMPRESS_FORK",
}

NONE_NAME = "NONE"

FLAGS_MAX = reduce(or_, FLAG_NAMES, NONE)


def _invalid_flags() -> FlagsError:
    return FlagsError(ErrorMessage.FLAG_INVALID_VALUE, errno=EINVAL)


def validate(value: int) -> int:
    """
    Validate a flags value against the known flag universe.

    Args:
        value: Candidate flags value

    Returns:
        The value unchanged

    Raises:
        TypeError: If value is not an integer
        FlagsError: If value is negative or carries unknown bits
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"wrong argument type {type(value).__name__} (expected int)")
    if value < 0 or value > FLAGS_MAX or value & ~FLAGS_MAX:
        raise _invalid_flags()
    return value


def decompose(value: int) -> list[int]:
    """
    Split a flags value into its single-bit constituents, ascending.

    Zero decomposes to ``[NONE]``.
    """
    validate(value)
    if value == NONE:
        return [NONE]

    bits: list[int] = []
    remaining = value
    while remaining > 0:
        bit = 1 << (remaining.bit_length() - 1)
        remaining -= bit
        bits.insert(0, bit)
    return bits


def decompose_named(value: int) -> list[str]:
    """Names of the bits in ``value``, ascending; ``["NONE"]`` for zero."""
    return [flag_name(bit) for bit in decompose(value)]


def recompose(bits: Iterable[int]) -> int:
    """OR a sequence of flags back into a single value."""
    return validate(reduce(or_, bits, NONE))


def flag_name(bit: int) -> str:
    """Return the constant name for a single flag bit."""
    if bit == NONE:
        return NONE_NAME
    try:
        return FLAG_NAMES[bit]
    except KeyError:
        raise _invalid_flags() from None


class FlagSet:
    """Validated flags value owned by a session"""

    __slots__ = ("_value",)

    def __init__(self, value: int = NONE):
        self._value = validate(value)

    def get(self) -> int:
        return self._value

    def set(self, value: int) -> None:
        self._value = validate(value)

    def decompose(self) -> list[int]:
        return decompose(self._value)

    def decompose_named(self) -> list[str]:
        return decompose_named(self._value)

    def __int__(self) -> int:
        return self._value

    def __contains__(self, flag: int) -> bool:
        return bool(flag) and self._value & flag == flag

    def __eq__(self, other: object) -> bool:
        if isinstance(other, FlagSet):
            return self._value == other._value
        if isinstance(other, int):
            return self._value == other
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __repr__(self) -> str:
        return f"FlagSet({'|'.join(self.decompose_named())})"
