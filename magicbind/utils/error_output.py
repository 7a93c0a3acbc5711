#!/usr/bin/env python3
"""
Native error output redirection

libmagic writes parse diagnostics straight to file descriptor 2, bypassing
``sys.stderr``. These helpers swap the descriptor itself so the output can be
discarded or collected, and always restore the original on exit.

Redirection is process-wide: it is serialized by a module lock, and output
written by other threads while a redirection is active lands in the same
place.
"""

import contextlib
import os
import sys
import tempfile
import threading
from collections.abc import Iterator
from types import TracebackType
from typing import BinaryIO, Literal

from .logger import get_logger

logger = get_logger(__name__)

_REDIRECT_LOCK = threading.RLock()


class CapturedOutput:
    """Text collected from the native error stream"""

    def __init__(self) -> None:
        self.data = b""

    @property
    def text(self) -> str:
        return self.data.decode("utf-8", "backslashreplace")

    @property
    def lines(self) -> list[str]:
        return [line for line in self.text.splitlines() if line.strip()]

    def __bool__(self) -> bool:
        return bool(self.data)


class ErrorOutputRedirector:
    """Context manager pointing file descriptor 2 at another file"""

    def __init__(self, target: BinaryIO, fd: int = 2) -> None:
        self.target = target
        self.fd = fd
        self._saved_fd: int | None = None

    def __enter__(self) -> "ErrorOutputRedirector":
        _REDIRECT_LOCK.acquire()
        try:
            self._flush()
            self._saved_fd = os.dup(self.fd)
            os.dup2(self.target.fileno(), self.fd)
        except OSError:
            if self._saved_fd is not None:
                os.close(self._saved_fd)
                self._saved_fd = None
            _REDIRECT_LOCK.release()
            raise
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> Literal[False]:
        try:
            self._flush()
            if self._saved_fd is not None:
                os.dup2(self._saved_fd, self.fd)
                os.close(self._saved_fd)
                self._saved_fd = None
        finally:
            _REDIRECT_LOCK.release()
        return False

    @staticmethod
    def _flush() -> None:
        for stream in (sys.stderr, sys.__stderr__):
            if stream is None:
                continue
            try:
                stream.flush()
            except (OSError, ValueError):
                pass


@contextlib.contextmanager
def suppress_error_output() -> Iterator[None]:
    """Discard anything written to the native error stream"""
    with open(os.devnull, "wb") as devnull, ErrorOutputRedirector(devnull):
        yield


@contextlib.contextmanager
def capture_error_output() -> Iterator[CapturedOutput]:
    """
    Collect anything written to the native error stream.

    The returned object is filled when the block exits, whether it exits
    normally or by an exception.

    Example:
        >>> with capture_error_output() as captured:
        ...     magic.check("broken.magic")
        >>> captured.lines
        ['broken.magic, 1: Warning: ...']
    """
    captured = CapturedOutput()
    with tempfile.TemporaryFile() as sink:
        try:
            with ErrorOutputRedirector(sink):
                yield captured
        finally:
            sink.seek(0)
            captured.data = sink.read()
            if captured:
                logger.debug(f"Captured {len(captured.data)} bytes of native error output")
