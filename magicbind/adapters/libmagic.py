#!/usr/bin/env python3
"""
ctypes adapter for libmagic

The shared library is located with python-magic's loader (which knows the
per-platform library names and search paths) and reopened with
``use_errno=True`` so that C ``errno`` survives each call. Every foreign call
made through ctypes releases the GIL, so blocking reads inside libmagic do not
stall other threads.

Copyright (C) 2025 Marc Rivero López
Licensed under the GNU General Public License v3.0 (GPLv3)
"""

import ctypes
import os
import threading
from collections.abc import Sequence
from ctypes import POINTER, byref, c_char_p, c_int, c_size_t, c_void_p
from errno import ENOENT
from typing import Any

from ..errors import ErrorMessage, LibraryError
from ..interfaces import (
    CAP_GETFLAGS,
    CAP_GETPATH,
    CAP_LOAD_BUFFERS,
    CAP_PARAMETERS,
    CAP_VERSION,
    VERSION_UNSUPPORTED,
    Capabilities,
)
from ..utils.logger import get_logger

logger = get_logger(__name__)

magic_t = c_void_p

# name -> (restype, argtypes)
REQUIRED_PROTOTYPES: dict[str, tuple[Any, list[Any]]] = {
    "magic_open": (magic_t, [c_int]),
    "magic_close": (None, [magic_t]),
    "magic_error": (c_char_p, [magic_t]),
    "magic_errno": (c_int, [magic_t]),
    "magic_setflags": (c_int, [magic_t, c_int]),
    "magic_load": (c_int, [magic_t, c_char_p]),
    "magic_compile": (c_int, [magic_t, c_char_p]),
    "magic_check": (c_int, [magic_t, c_char_p]),
    "magic_file": (c_char_p, [magic_t, c_char_p]),
    "magic_descriptor": (c_char_p, [magic_t, c_int]),
    "magic_buffer": (c_char_p, [magic_t, c_void_p, c_size_t]),
}

# name -> (restype, argtypes, capability)
OPTIONAL_PROTOTYPES: dict[str, tuple[Any, list[Any], str]] = {
    "magic_getparam": (c_int, [magic_t, c_int, c_void_p], CAP_PARAMETERS),
    "magic_setparam": (c_int, [magic_t, c_int, c_void_p], CAP_PARAMETERS),
    "magic_version": (c_int, [], CAP_VERSION),
    "magic_load_buffers": (
        c_int,
        [magic_t, POINTER(c_void_p), POINTER(c_size_t), c_size_t],
        CAP_LOAD_BUFFERS,
    ),
    "magic_getpath": (c_char_p, [c_char_p, c_int], CAP_GETPATH),
    "magic_getflags": (c_int, [magic_t], CAP_GETFLAGS),
}


def load_libmagic() -> ctypes.CDLL:
    """
    Locate and open libmagic.

    Raises:
        LibraryError: If python-magic is missing or cannot find libmagic
    """
    try:
        from magic import loader
    except ImportError as exc:
        raise LibraryError(ErrorMessage.LIBRARY_INITIALIZE, errno=ENOENT) from exc

    library = loader.load_lib()
    logger.debug(f"Using libmagic from {library._name}")
    return ctypes.CDLL(library._name, use_errno=True)


def _encode_path(path: str | None) -> bytes | None:
    return os.fsencode(path) if path else None


class LibmagicEngine:
    """libmagic bound through ctypes, implementing ``EngineInterface``"""

    def __init__(self, library: Any | None = None):
        self._lib = library if library is not None else load_libmagic()
        self._pinned: dict[int, list[Any]] = {}
        self._pinned_lock = threading.Lock()
        self._capabilities = self._bind()

    def _bind(self) -> Capabilities:
        for name, (restype, argtypes) in REQUIRED_PROTOTYPES.items():
            function = getattr(self._lib, name)
            function.restype = restype
            function.argtypes = argtypes

        features: set[str] = set()
        missing: set[str] = set()
        for name, (restype, argtypes, capability) in OPTIONAL_PROTOTYPES.items():
            function = getattr(self._lib, name, None)
            if function is None:
                missing.add(capability)
                continue
            function.restype = restype
            function.argtypes = argtypes
            features.add(capability)

        # A capability backed by several symbols needs all of them.
        features -= missing
        logger.debug(f"libmagic capabilities: {sorted(features)}")
        return Capabilities(frozenset(features))

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities

    def last_os_error(self) -> int:
        return ctypes.get_errno()

    def open(self, flags: int) -> int | None:
        ctypes.set_errno(0)
        return self._lib.magic_open(flags)

    def close(self, handle: int) -> None:
        self._lib.magic_close(handle)
        with self._pinned_lock:
            self._pinned.pop(handle, None)

    def error(self, handle: int) -> str | None:
        message = self._lib.magic_error(handle)
        if message is None:
            return None
        return message.decode("utf-8", "backslashreplace")

    def errno(self, handle: int) -> int:
        return self._lib.magic_errno(handle)

    def set_flags(self, handle: int, flags: int) -> int:
        ctypes.set_errno(0)
        return self._lib.magic_setflags(handle, flags)

    def get_flags(self, handle: int) -> int:
        if CAP_GETFLAGS not in self._capabilities:
            return -1
        return self._lib.magic_getflags(handle)

    def get_param(self, handle: int, tag: int) -> int | None:
        value = c_size_t()
        ctypes.set_errno(0)
        if self._lib.magic_getparam(handle, tag, byref(value)) < 0:
            return None
        return value.value

    def set_param(self, handle: int, tag: int, value: int) -> int:
        native_value = c_size_t(value)
        ctypes.set_errno(0)
        return self._lib.magic_setparam(handle, tag, byref(native_value))

    def supported_parameters(self, handle: int, limit: int) -> frozenset[int]:
        if not self._capabilities.parameters:
            return frozenset()
        return frozenset(tag for tag in range(limit) if self.get_param(handle, tag) is not None)

    def load(self, handle: int, path: str | None) -> int:
        ctypes.set_errno(0)
        return self._lib.magic_load(handle, _encode_path(path))

    def load_buffers(self, handle: int, buffers: Sequence[bytes]) -> int:
        # libmagic keeps pointers into the buffers, so they stay pinned
        # until the handle is closed.
        count = len(buffers)
        storage = [ctypes.create_string_buffer(bytes(data), len(data)) for data in buffers]
        pointers = (c_void_p * count)(*[ctypes.cast(item, c_void_p) for item in storage])
        sizes = (c_size_t * count)(*[len(data) for data in buffers])
        ctypes.set_errno(0)
        status = self._lib.magic_load_buffers(handle, pointers, sizes, count)
        if status >= 0:
            with self._pinned_lock:
                self._pinned[handle] = [storage, pointers, sizes]
        return status

    def compile(self, handle: int, path: str | None) -> int:
        ctypes.set_errno(0)
        return self._lib.magic_compile(handle, _encode_path(path))

    def check(self, handle: int, path: str | None) -> int:
        ctypes.set_errno(0)
        return self._lib.magic_check(handle, _encode_path(path))

    def classify_path(self, handle: int, path: bytes) -> bytes | None:
        ctypes.set_errno(0)
        return self._lib.magic_file(handle, path)

    def classify_descriptor(self, handle: int, fd: int) -> bytes | None:
        ctypes.set_errno(0)
        return self._lib.magic_descriptor(handle, fd)

    def classify_buffer(self, handle: int, data: bytes) -> bytes | None:
        ctypes.set_errno(0)
        return self._lib.magic_buffer(handle, data, len(data))

    def version(self) -> int:
        if not self._capabilities.version:
            return VERSION_UNSUPPORTED
        return self._lib.magic_version()

    def default_path(self) -> str | None:
        if CAP_GETPATH not in self._capabilities:
            return None
        path = self._lib.magic_getpath(None, 0)
        return os.fsdecode(path) if path else None


_default_engine: LibmagicEngine | None = None
_default_engine_lock = threading.Lock()


def get_default_engine() -> LibmagicEngine:
    """Return the process-wide engine, loading libmagic on first use"""
    global _default_engine
    with _default_engine_lock:
        if _default_engine is None:
            _default_engine = LibmagicEngine()
        return _default_engine
