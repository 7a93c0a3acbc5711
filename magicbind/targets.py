#!/usr/bin/env python3
"""
Classification targets

A target is one of four explicit shapes built at the call boundary: a
filesystem path, an open stream, a raw file descriptor or an in-memory
buffer. Validation that libmagic cannot do safely (embedded NUL bytes in
paths, closed descriptors) happens here, before any native call.
"""

import io
import os
from dataclasses import dataclass
from errno import EBADF
from typing import Any, Protocol, Union, runtime_checkable

from .errors import ErrorMessage


@runtime_checkable
class StreamLike(Protocol):
    def fileno(self) -> int: ...


def _closed_stream() -> OSError:
    return OSError(EBADF, str(ErrorMessage.CLOSED_STREAM))


def _check_descriptor(fd: int) -> int:
    if fd < 0:
        raise _closed_stream()
    try:
        os.fstat(fd)
    except OSError as exc:
        if exc.errno == EBADF:
            raise _closed_stream() from None
        raise
    return fd


@dataclass(frozen=True)
class PathTarget:
    """A filesystem path, already encoded for the C API"""

    path: bytes

    @property
    def display(self) -> str:
        return os.fsdecode(self.path)


@dataclass(frozen=True)
class StreamTarget:
    """An open file object; only its descriptor is handed to libmagic"""

    stream: Any

    def fileno(self) -> int:
        if getattr(self.stream, "closed", False):
            raise _closed_stream()
        try:
            fd = self.stream.fileno()
        except io.UnsupportedOperation:
            raise TypeError(
                f"{type(self.stream).__name__} has no file descriptor (use buffer instead)"
            ) from None
        except ValueError:
            # io raises ValueError for operations on closed files
            raise _closed_stream() from None
        return _check_descriptor(fd)


@dataclass(frozen=True)
class DescriptorTarget:
    """A raw file descriptor owned by the caller"""

    fd: int

    def fileno(self) -> int:
        return _check_descriptor(self.fd)


@dataclass(frozen=True)
class BufferTarget:
    """Bytes classified in memory; NUL bytes are ordinary content"""

    data: bytes


Target = Union[PathTarget, StreamTarget, DescriptorTarget, BufferTarget]
TARGET_TYPES = (PathTarget, StreamTarget, DescriptorTarget, BufferTarget)


def path_target(path: str | bytes | os.PathLike) -> PathTarget:
    """
    Build a path target.

    Raises:
        TypeError: If path is not a str, bytes or path-like object
        ValueError: If the path contains an embedded NUL byte
    """
    if not isinstance(path, (str, bytes, os.PathLike)):
        raise TypeError(f"wrong argument type {type(path).__name__} (expected str)")
    encoded = os.fsencode(path)
    if b"\x00" in encoded:
        raise ValueError("embedded null byte")
    return PathTarget(encoded)


def stream_target(stream: Any) -> StreamTarget:
    if not callable(getattr(stream, "fileno", None)):
        raise TypeError(f"wrong argument type {type(stream).__name__} (expected IO)")
    return StreamTarget(stream)


def descriptor_target(fd: int) -> DescriptorTarget:
    if isinstance(fd, bool) or not isinstance(fd, int):
        raise TypeError(f"wrong argument type {type(fd).__name__} (expected int)")
    return DescriptorTarget(fd)


def buffer_target(data: bytes | bytearray | memoryview | str) -> BufferTarget:
    if isinstance(data, str):
        return BufferTarget(data.encode("utf-8"))
    if not isinstance(data, (bytes, bytearray, memoryview)):
        raise TypeError(f"wrong argument type {type(data).__name__} (expected bytes)")
    return BufferTarget(bytes(data))


def to_target(value: Any) -> Target:
    """
    Convert a caller value into a target.

    ``str`` and path-like objects are paths, ``int`` is a descriptor, objects
    with ``fileno()`` are streams and bytes-like objects are buffers. Use the
    explicit constructors to classify a ``str`` as content or ``bytes`` as a
    path.
    """
    if isinstance(value, TARGET_TYPES):
        return value
    if isinstance(value, (str, os.PathLike)):
        return path_target(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return buffer_target(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return descriptor_target(value)
    if isinstance(value, StreamLike):
        return stream_target(value)
    raise TypeError(
        f"wrong argument type {type(value).__name__} "
        "(expected path, stream, descriptor or bytes)"
    )
