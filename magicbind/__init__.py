#!/usr/bin/env python3
"""
magicbind - libmagic file type detection for Python
Thread-safe sessions over the libmagic C library with typed errors

Author: Marc Rivero (@seifreed)
License: GPL-3.0
"""

import logging

from .__version__ import __author__, __author_email__, __license__, __url__, __version__

__description__ = "libmagic file type detection for Python"

from .config import (
    MagicConfig,
    get_default_auto_load,
    get_default_stop_on_error,
    reset_process_defaults,
    set_default_auto_load,
    set_default_stop_on_error,
)
from .core import Magic, Session
from .errors import (
    Error,
    ErrorMessage,
    FlagsError,
    LibraryError,
    MagicError,
    NotImplementedError,
    ParameterError,
)
from .facade import (
    buffer,
    check,
    compile,
    descriptor,
    encoding,
    file,
    mime,
    open,
    type,
    version,
    version_string,
    version_tuple,
)
from .flags import (
    APPLE,
    CHECK,
    COMPRESS,
    COMPRESS_TRANSP,
    CONTINUE,
    DEBUG,
    DEVICES,
    ERROR,
    EXTENSION,
    FLAGS_MAX,
    MIME,
    MIME_ENCODING,
    MIME_TYPE,
    NO_CHECK_APPTYPE,
    NO_CHECK_ASCII,
    NO_CHECK_BUILTIN,
    NO_CHECK_CDF,
    NO_CHECK_COMPRESS,
    NO_CHECK_CSV,
    NO_CHECK_ELF,
    NO_CHECK_ENCODING,
    NO_CHECK_FORTRAN,
    NO_CHECK_JSON,
    NO_CHECK_SIMH,
    NO_CHECK_SOFT,
    NO_CHECK_TAR,
    NO_CHECK_TEXT,
    NO_CHECK_TOKENS,
    NO_CHECK_TROFF,
    NO_COMPRESS_FORK,
    NODESC,
    NONE,
    PRESERVE_ATIME,
    RAW,
    SYMLINK,
    FlagSet,
)
from .parameters import (
    PARAM_BYTES_MAX,
    PARAM_ELF_NOTES_MAX,
    PARAM_ELF_PHNUM_MAX,
    PARAM_ELF_SHNUM_MAX,
    PARAM_ELF_SHSIZE_MAX,
    PARAM_ENCODING_MAX,
    PARAM_INDIR_MAX,
    PARAM_MAGWARN_MAX,
    PARAM_NAME_MAX,
    PARAM_REGEX_MAX,
)
from .utils.error_output import capture_error_output

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Main class
    "Session",
    "Magic",
    "MagicConfig",
    "FlagSet",
    # Facade
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
    "capture_error_output",
    # Process defaults
    "get_default_auto_load",
    "set_default_auto_load",
    "get_default_stop_on_error",
    "set_default_stop_on_error",
    "reset_process_defaults",
    # Errors
    "Error",
    "ErrorMessage",
    "LibraryError",
    "FlagsError",
    "ParameterError",
    "MagicError",
    "NotImplementedError",
    # Flags
    "NONE",
    "DEBUG",
    "SYMLINK",
    "COMPRESS",
    "DEVICES",
    "MIME_TYPE",
    "CONTINUE",
    "CHECK",
    "PRESERVE_ATIME",
    "RAW",
    "ERROR",
    "MIME_ENCODING",
    "MIME",
    "APPLE",
    "EXTENSION",
    "COMPRESS_TRANSP",
    "NO_COMPRESS_FORK",
    "NODESC",
    "NO_CHECK_COMPRESS",
    "NO_CHECK_TAR",
    "NO_CHECK_SOFT",
    "NO_CHECK_APPTYPE",
    "NO_CHECK_ELF",
    "NO_CHECK_TEXT",
    "NO_CHECK_ASCII",
    "NO_CHECK_CDF",
    "NO_CHECK_CSV",
    "NO_CHECK_TOKENS",
    "NO_CHECK_ENCODING",
    "NO_CHECK_JSON",
    "NO_CHECK_SIMH",
    "NO_CHECK_BUILTIN",
    "NO_CHECK_FORTRAN",
    "NO_CHECK_TROFF",
    "FLAGS_MAX",
    # Parameters
    "PARAM_INDIR_MAX",
    "PARAM_NAME_MAX",
    "PARAM_ELF_PHNUM_MAX",
    "PARAM_ELF_SHNUM_MAX",
    "PARAM_ELF_NOTES_MAX",
    "PARAM_REGEX_MAX",
    "PARAM_BYTES_MAX",
    "PARAM_ENCODING_MAX",
    "PARAM_ELF_SHSIZE_MAX",
    "PARAM_MAGWARN_MAX",
    # Metadata
    "__version__",
    "__author__",
    "__author_email__",
    "__license__",
    "__url__",
    "__description__",
]
