#!/usr/bin/env python3
"""libmagic session lifecycle management."""

import contextlib
import os
import threading
import warnings
import weakref
from collections.abc import Callable, Iterable, Iterator
from errno import EFAULT, EINVAL, ENOMEM, ENOSYS, EOVERFLOW
from types import TracebackType
from typing import Any, Literal

from .. import flags as magic_flags
from ..adapters import get_default_engine
from ..config import MagicConfig, resolve_database_paths
from ..errors import (
    ErrorMessage,
    FlagsError,
    LibraryError,
    MagicError,
    NotImplementedError,
    ParameterError,
)
from ..interfaces import CAP_LOAD_BUFFERS, CAP_PARAMETERS, Capabilities, EngineInterface
from ..parameters import PARAMETER_TAG_LIMIT, ParameterStore
from ..targets import (
    BufferTarget,
    DescriptorTarget,
    PathTarget,
    StreamTarget,
    Target,
    buffer_target,
    descriptor_target,
    path_target,
    stream_target,
    to_target,
)
from ..utils.error_output import suppress_error_output
from ..utils.logger import get_logger
from .results import Result, shape_result

logger = get_logger(__name__)


def flatten_paths(values: Iterable[Any]) -> list[str]:
    """
    Flatten nested path arguments into a list of strings.

    Raises:
        TypeError: If an entry is not a str or path-like object
        ValueError: If a path contains an embedded NUL byte
    """
    result: list[str] = []
    for value in values:
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            result.extend(flatten_paths(value))
            continue
        if not isinstance(value, (str, os.PathLike)):
            raise TypeError(
                f"wrong argument type {type(value).__name__} in arguments list (expected str)"
            )
        path = os.fspath(value)
        if isinstance(path, bytes):
            path = os.fsdecode(path)
        if "\x00" in path:
            raise ValueError("embedded null byte")
        result.append(path)
    return result


class Session:
    """
    Owns one libmagic handle ("cookie") and everything attached to it.

    A session is open from construction until ``close()``; closing is final
    and idempotent. The database is loaded explicitly with ``load()`` or,
    when ``auto_load`` is on, implicitly by the first classification.

    All native calls on the handle are serialized by a per-session lock, and
    ``close()`` waits for an in-flight call to finish. ctypes releases the
    GIL for the duration of each native call, so a long read by one session
    does not block other threads. There is no timeout: bound the input size
    if latency matters.

    Attributes:
        config: Behaviour switches the session was created with
    """

    def __init__(
        self,
        *paths: Any,
        flags: int = magic_flags.NONE,
        config: MagicConfig | None = None,
        engine: EngineInterface | None = None,
        callback: Callable[..., Any] | None = None,
    ):
        """
        Open a new libmagic handle.

        Args:
            *paths: Database paths used by the implicit first load
            flags: Initial flags (validated before the handle is opened)
            config: Behaviour switches; defaults to the process defaults
            engine: Engine implementation; defaults to the shared libmagic engine
            callback: Deprecated and ignored

        Raises:
            FlagsError: If flags is outside the known flag universe
            LibraryError: If libmagic cannot allocate a handle
        """
        if callback is not None:
            name = type(self).__name__
            warnings.warn(
                f"{name}() does not take a callback; use magicbind.open() instead",
                DeprecationWarning,
                stacklevel=2,
            )
            logger.warning(f"Ignoring callback passed to {name}()")

        magic_flags.validate(flags)
        self._database_paths = flatten_paths(paths)

        self.config = config if config is not None else MagicConfig.from_process_defaults()
        self._auto_load = self.config.auto_load
        self._stop_on_error = self.config.stop_on_error

        self._engine = engine if engine is not None else get_default_engine()
        self._lock = threading.RLock()
        self._flags = magic_flags.FlagSet()
        self._loaded = False
        self._closed = False

        self._handle = self._engine.open(magic_flags.NONE)
        if not self._handle:
            raise LibraryError(ErrorMessage.LIBRARY_INITIALIZE, errno=ENOMEM)
        self._finalizer = weakref.finalize(self, self._engine.close, self._handle)
        logger.debug(f"Opened magic session (handle {self._handle})")

        self._capabilities = self._engine.capabilities
        self._parameters = ParameterStore(
            self._engine.supported_parameters(self._handle, PARAMETER_TAG_LIMIT)
        )

        if flags != magic_flags.NONE:
            try:
                self.flags = flags
            except Exception:
                self.close()
                raise

    @classmethod
    def open(cls, flags: int = magic_flags.NONE, *paths: Any, **kwargs: Any) -> "Session":
        """Open a session with ``flags``; use it as a context manager to close it."""
        return cls(*paths, flags=flags, **kwargs)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def close(self) -> None:
        """Release the native handle. Closing twice is a no-op."""
        with self._lock:
            if self._closed:
                return
            self._closed = True
            self._finalizer()
            self._parameters.clear()
            logger.debug(f"Closed magic session (handle {self._handle})")

    @property
    def closed(self) -> bool:
        return self._closed

    def _check_open(self) -> None:
        if self._closed:
            raise LibraryError(ErrorMessage.LIBRARY_CLOSED, errno=EFAULT)

    def __enter__(self) -> "Session":
        """Context manager entry."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> Literal[False]:
        """Context manager exit with cleanup."""
        self.close()
        return False

    def __repr__(self) -> str:
        return f"<{type(self).__name__} at {id(self):#x}{' (closed)' if self._closed else ''}>"

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    @property
    def auto_load(self) -> bool:
        return self._auto_load

    @auto_load.setter
    def auto_load(self, value: bool) -> None:
        if not isinstance(value, bool):
            raise TypeError(f"wrong argument type {type(value).__name__} (expected bool)")
        self._auto_load = value

    @property
    def stop_on_error(self) -> bool:
        return self._stop_on_error

    @stop_on_error.setter
    def stop_on_error(self, value: bool) -> None:
        if not isinstance(value, bool):
            raise TypeError(f"wrong argument type {type(value).__name__} (expected bool)")
        self._stop_on_error = value

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities

    def _require(self, capability: str) -> None:
        if capability not in self._capabilities:
            raise NotImplementedError(ErrorMessage.NOT_IMPLEMENTED, errno=ENOSYS)

    # ------------------------------------------------------------------
    # Flags
    # ------------------------------------------------------------------

    @property
    def flags(self) -> int:
        self._check_open()
        return self._flags.get()

    @flags.setter
    def flags(self, value: int) -> None:
        with self._lock:
            self._check_open()
            magic_flags.validate(value)
            self._apply_flags(value)
            self._flags.set(value)

    @property
    def flags_list(self) -> list[int]:
        """Current flags split into single bits, ascending"""
        return magic_flags.decompose(self.flags)

    @property
    def flags_names(self) -> list[str]:
        """Names of the current flags, ascending"""
        return magic_flags.decompose_named(self.flags)

    def _apply_flags(self, value: int) -> None:
        if self._engine.set_flags(self._handle, value) >= 0:
            return
        local_errno = self._engine.last_os_error()
        if local_errno == EINVAL:
            raise FlagsError(ErrorMessage.FLAG_INVALID_VALUE, errno=EINVAL)
        if local_errno == ENOSYS:
            raise NotImplementedError(ErrorMessage.FLAG_NOT_IMPLEMENTED, errno=ENOSYS)
        raise self._library_error()

    # ------------------------------------------------------------------
    # Parameters
    # ------------------------------------------------------------------

    def get_parameter(self, tag: int) -> int:
        """
        Read a libmagic parameter.

        Raises:
            LibraryError: If the session is closed
            NotImplementedError: If libmagic has no parameter API
            ParameterError: If the tag is unknown to the linked libmagic
        """
        with self._lock:
            self._check_open()
            self._require(CAP_PARAMETERS)
            self._parameters.check_tag(tag)
            value = self._engine.get_param(self._handle, tag)
            if value is None:
                raise self._parameter_error()
            self._parameters.remember(tag, value)
            return value

    def set_parameter(self, tag: int, value: int) -> None:
        """
        Write a libmagic parameter.

        Raises:
            LibraryError: If the session is closed
            NotImplementedError: If libmagic has no parameter API
            ParameterError: If the tag is unknown (EINVAL) or the value is
                negative or above the tag's ceiling (EOVERFLOW)
        """
        with self._lock:
            self._check_open()
            self._require(CAP_PARAMETERS)
            self._parameters.check_value(tag, value)
            if self._engine.set_param(self._handle, tag, value) < 0:
                raise self._parameter_error()
            self._parameters.remember(tag, value)

    @property
    def parameters(self) -> dict[str, int]:
        """Parameter values read or written through this session"""
        self._check_open()
        return self._parameters.snapshot()

    @property
    def supported_parameters(self) -> frozenset[int]:
        self._check_open()
        return self._parameters.supported_tags

    def _parameter_error(self) -> ParameterError:
        if self._engine.last_os_error() == EOVERFLOW:
            return ParameterError(ErrorMessage.PARAM_INVALID_VALUE, errno=EOVERFLOW)
        return ParameterError(ErrorMessage.PARAM_INVALID_TYPE, errno=EINVAL)

    # ------------------------------------------------------------------
    # Database
    # ------------------------------------------------------------------

    @property
    def loaded(self) -> bool:
        self._check_open()
        return self._loaded

    @property
    def paths(self) -> list[str]:
        """Database paths in effect (explicit, ``MAGIC`` or compiled-in default)"""
        self._check_open()
        return resolve_database_paths(self._database_paths, self._engine.default_path())

    def load(self, *paths: Any) -> list[str]:
        """
        Attach the magic database(s) at ``paths`` to this session.

        Without arguments the default database is used: the ``MAGIC``
        environment variable if set, otherwise libmagic's compiled-in path.

        Returns:
            The list of paths that were loaded

        Raises:
            LibraryError: If the session is closed
            MagicError: If libmagic rejects the database; ``loaded`` keeps
                its previous value
        """
        requested = flatten_paths(paths)
        with self._database_section():
            self._check_open()
            resolved = resolve_database_paths(requested, self._engine.default_path())
            if self._stop_on_error or len(resolved) < 2:
                self._attach(lambda handle: self._engine.load(handle, self._join(resolved)))
            else:
                resolved = self._attach_valid_paths(resolved)
            self._database_paths = resolved
            self._loaded = True
            logger.debug(f"Loaded magic database: {resolved or 'libmagic default'}")
            return list(resolved)

    def load_buffers(self, *buffers: bytes | bytearray | memoryview) -> None:
        """
        Attach compiled magic databases held in memory.

        Raises:
            LibraryError: If the session is closed
            NotImplementedError: If libmagic cannot load from buffers
            MagicError: If libmagic rejects a buffer
        """
        data: list[bytes] = []
        for item in buffers:
            if isinstance(item, (list, tuple)):
                data.extend(buffer_target(entry).data for entry in item)
            else:
                data.append(buffer_target(item).data)
        if not data:
            raise ValueError("arguments list cannot be empty (expected bytes)")

        with self._database_section():
            self._check_open()
            self._require(CAP_LOAD_BUFFERS)
            self._attach(lambda handle: self._engine.load_buffers(handle, data))
            self._database_paths = []
            self._loaded = True
            logger.debug(f"Loaded {len(data)} magic database buffer(s)")

    def compile(self, *paths: Any) -> bool:
        """
        Compile magic source files into ``<name>.mgc`` in the working directory.

        The session's own database is left untouched.

        Raises:
            LibraryError: If the session is closed
            MagicError: If a source file is invalid
        """
        requested = flatten_paths(paths)
        with self._database_section():
            self._check_open()
            joined = self._join(requested or self.paths)
            with self._scratch_handle() as scratch:
                status = self._engine.compile(scratch, joined)
                if status < 0:
                    raise self._library_error(scratch)
            logger.debug(f"Compiled magic database: {joined}")
            return True

    def check(self, *paths: Any) -> bool:
        """
        Validate magic source files without attaching them.

        Returns:
            True if libmagic accepts every file, False otherwise

        Raises:
            LibraryError: If the session is closed
        """
        requested = flatten_paths(paths)
        with self._database_section():
            self._check_open()
            joined = self._join(requested or self.paths)
            with self._scratch_handle() as scratch:
                status = self._engine.check(scratch, joined)
            return status >= 0

    def _attach(self, loader: Callable[[Any], int]) -> None:
        # A failed native load leaves the handle with no database.
        if self._loaded:
            with self._scratch_handle() as scratch:
                status = loader(scratch)
                if status < 0:
                    raise self._library_error(scratch)

        status = loader(self._handle)
        if status < 0:
            raise self._library_error()

    def _attach_valid_paths(self, paths: list[str]) -> list[str]:
        try:
            self._attach(lambda handle: self._engine.load(handle, self._join(paths)))
            return paths
        except MagicError as exc:
            first_error = exc

        valid = [path for path in paths if self._is_loadable(path)]
        for path in paths:
            if path not in valid:
                logger.warning(f"Skipping invalid magic database: {path}")
        if not valid:
            raise first_error

        self._attach(lambda handle: self._engine.load(handle, self._join(valid)))
        return valid

    def _is_loadable(self, path: str) -> bool:
        with self._scratch_handle() as scratch:
            return self._engine.load(scratch, path) >= 0

    @contextlib.contextmanager
    def _scratch_handle(self) -> Iterator[Any]:
        handle = self._engine.open(self._flags.get())
        if not handle:
            raise LibraryError(ErrorMessage.LIBRARY_INITIALIZE, errno=ENOMEM)
        try:
            yield handle
        finally:
            self._engine.close(handle)

    def _diagnostics(self) -> contextlib.AbstractContextManager[Any]:
        if self.config.suppress_diagnostics and magic_flags.DEBUG not in self._flags:
            return suppress_error_output()
        return contextlib.nullcontext()

    @contextlib.contextmanager
    def _database_section(self) -> Iterator[None]:
        # The error-stream lock is always taken before the session lock.
        with self._diagnostics(), self._lock:
            yield

    @staticmethod
    def _join(paths: list[str]) -> str | None:
        return os.pathsep.join(paths) or None

    # ------------------------------------------------------------------
    # Classification
    # ------------------------------------------------------------------

    def classify(self, target: Any, flags: int | None = None) -> Result:
        """
        Classify a path, stream, descriptor or bytes buffer.

        Args:
            target: ``str``/path-like (path), ``int`` (descriptor), object with
                ``fileno()`` (stream), bytes-like (buffer) or a Target
            flags: Flags for this call only; the session flags otherwise

        Returns:
            The description, or a list of descriptions when CONTINUE yields
            several matches (or a list of extensions with EXTENSION)

        Raises:
            LibraryError: If the session is closed
            OSError: If a stream or descriptor is closed
            MagicError: If nothing is loaded and auto_load is off, or
                libmagic fails
        """
        return self._classify(to_target(target), flags)

    def file(self, path: str | bytes | os.PathLike, flags: int | None = None) -> Result:
        return self._classify(path_target(path), flags)

    def buffer(self, data: bytes | bytearray | memoryview | str, flags: int | None = None) -> Result:
        return self._classify(buffer_target(data), flags)

    def descriptor(self, fd: Any, flags: int | None = None) -> Result:
        if isinstance(fd, int) and not isinstance(fd, bool):
            return self._classify(descriptor_target(fd), flags)
        return self._classify(stream_target(fd), flags)

    def _classify(self, target: Target, flags: int | None) -> Result:
        if flags is not None:
            magic_flags.validate(flags)

        self._check_open()
        fd = target.fileno() if isinstance(target, (StreamTarget, DescriptorTarget)) else -1
        self._ensure_loaded()

        with self._lock:
            self._check_open()
            current = self._flags.get()
            active = current if flags is None else flags
            if active != current:
                self._apply_flags(active)
            try:
                raw = self._dispatch(target, fd)
                if raw is None:
                    raise self._library_error()
            finally:
                if active != current:
                    self._apply_flags(current)

        return shape_result(raw, active)

    def _dispatch(self, target: Target, fd: int) -> bytes | None:
        if isinstance(target, PathTarget):
            return self._engine.classify_path(self._handle, target.path)
        if isinstance(target, BufferTarget):
            return self._engine.classify_buffer(self._handle, target.data)
        return self._engine.classify_descriptor(self._handle, fd)

    def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        if not self._auto_load:
            raise MagicError(ErrorMessage.LIBRARY_NOT_LOADED, errno=EFAULT)
        with self._database_section():
            if self._loaded:
                return
            logger.debug("Loading magic database on first classification")
            self.load(*self._database_paths)

    def _library_error(self, handle: Any | None = None) -> MagicError:
        handle = self._handle if handle is None else handle
        message = self._engine.error(handle)
        if message:
            return MagicError(message, errno=self._engine.errno(handle))
        return MagicError(ErrorMessage.UNKNOWN, errno=self._engine.last_os_error() or None)

    # ------------------------------------------------------------------
    # Version
    # ------------------------------------------------------------------

    @classmethod
    def version(cls, engine: EngineInterface | None = None) -> int:
        """
        Version of the linked libmagic as an integer (e.g. 545).

        Raises:
            NotImplementedError: If libmagic cannot report its version
        """
        engine = engine if engine is not None else get_default_engine()
        value = engine.version()
        if value < 0:
            raise NotImplementedError(ErrorMessage.NOT_IMPLEMENTED, errno=ENOSYS)
        return value

    @classmethod
    def version_tuple(cls, engine: EngineInterface | None = None) -> tuple[int, int]:
        return divmod(cls.version(engine), 100)

    @classmethod
    def version_string(cls, engine: EngineInterface | None = None) -> str:
        return "%d.%02d" % cls.version_tuple(engine)


Magic = Session

__all__ = ["Magic", "Session", "flatten_paths"]
