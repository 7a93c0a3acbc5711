"""Pytest configuration for shared fixtures."""

from __future__ import annotations

import os
import threading
import time
from errno import EINVAL, ENOENT, ENOSYS
from pathlib import Path

import pytest

import magicbind.core.session as session_module
from magicbind.config import reset_process_defaults
from magicbind.core import Session
from magicbind.flags import CONTINUE, ERROR, EXTENSION, MIME_ENCODING, MIME_TYPE, RAW
from magicbind.interfaces import ALL_CAPABILITIES, CAP_GETPATH, CAP_PARAMETERS, CAP_VERSION, Capabilities

FIXTURES_DIR = Path(__file__).resolve().parent / "fixtures"

DEFAULT_DATABASE = "/usr/share/misc/magic"
DEFAULT_PARAMETERS = {
    0: 15,
    1: 30,
    2: 2048,
    3: 32768,
    4: 256,
    5: 8192,
    6: 7340032,
    7: 65536,
    8: 134217728,
    9: 100,
}

# (prefix, description, mime type, encoding, extensions)
SIGNATURES = [
    (b"RGEM", "Ruby Gem image", "application/x-ruby-gem", "binary", "gem"),
    (b"\xff\xd8\xff", "JPEG image data", "image/jpeg", "binary", "jpeg/jpg/jpe/jfif"),
    (b"%PDF-", "PDF document", "application/pdf", "binary", "pdf"),
]


class FakeHandle:
    def __init__(self, flags: int):
        self.flags = flags
        self.parameters = dict(DEFAULT_PARAMETERS)
        self.database: str | None = None
        self.error: str | None = None
        self.errno = 0
        self.closed = False


class FakeEngine:
    """In-memory stand-in for libmagic, implementing ``EngineInterface``."""

    def __init__(
        self,
        capabilities: frozenset[str] = ALL_CAPABILITIES,
        version: int = 545,
        default_path: str | None = DEFAULT_DATABASE,
    ):
        self._capabilities = Capabilities(frozenset(capabilities))
        self._version = version
        self._default_path = default_path
        self.handles: dict[int, FakeHandle] = {}
        self.calls: list[tuple] = []
        self.invalid_paths: set[str] = set()
        self.unsupported_flags = 0
        self.parameter_tags = frozenset(DEFAULT_PARAMETERS)
        self.fail_open = False
        self.delay = 0.0
        self.overlaps = 0
        self._active: set[int] = set()
        self._active_lock = threading.Lock()
        self._next_handle = 0x1000
        self._os_errno = 0

    # -- helpers -------------------------------------------------------

    def _record(self, name: str, *args) -> None:
        self.calls.append((name, *args))

    def call_names(self) -> list[str]:
        return [call[0] for call in self.calls]

    def open_handles(self) -> list[int]:
        return [handle for handle, state in self.handles.items() if not state.closed]

    def _enter(self, handle: int) -> FakeHandle:
        state = self.handles[handle]
        assert not state.closed, "native call on a closed handle"
        with self._active_lock:
            if handle in self._active:
                self.overlaps += 1
            self._active.add(handle)
        if self.delay:
            time.sleep(self.delay)
        return state

    def _leave(self, handle: int) -> None:
        with self._active_lock:
            self._active.discard(handle)

    def _fail(self, state: FakeHandle, message: str, errno: int = 0) -> int:
        state.error = message
        state.errno = errno
        return -1

    def _bad_path(self, path: str | None) -> str | None:
        for item in (path or "").split(os.pathsep):
            if item in self.invalid_paths:
                return item
        return None

    def describe(self, data: bytes, flags: int) -> bytes:
        description, mime, charset, extensions = "ASCII text", "text/plain", "us-ascii", "???"
        if not data:
            description, mime, charset = "empty", "application/x-empty", "binary"
        for prefix, desc, mime_type, enc, ext in SIGNATURES:
            if data.startswith(prefix):
                description, mime, charset, extensions = desc, mime_type, enc, ext
                break

        if flags & EXTENSION:
            return extensions.encode()
        if flags & MIME_TYPE and flags & MIME_ENCODING:
            return f"{mime}; charset={charset}".encode()
        if flags & MIME_TYPE:
            return mime.encode()
        if flags & MIME_ENCODING:
            return charset.encode()
        if flags & CONTINUE:
            separator = "\n- " if flags & RAW else "\\012- "
            return f"{description}{separator}data{separator}".encode()
        return description.encode()

    def _classify(self, state: FakeHandle, data: bytes) -> bytes | None:
        if state.database is None:
            self._fail(state, "no magic files loaded")
            return None
        return self.describe(data, state.flags)

    # -- EngineInterface -----------------------------------------------

    @property
    def capabilities(self) -> Capabilities:
        return self._capabilities

    def open(self, flags: int) -> int | None:
        self._record("open", flags)
        if self.fail_open:
            return None
        self._next_handle += 1
        self.handles[self._next_handle] = FakeHandle(flags)
        return self._next_handle

    def close(self, handle: int) -> None:
        self._record("close", handle)
        self.handles[handle].closed = True

    def error(self, handle: int) -> str | None:
        return self.handles[handle].error

    def errno(self, handle: int) -> int:
        return self.handles[handle].errno

    def last_os_error(self) -> int:
        return self._os_errno

    def set_flags(self, handle: int, flags: int) -> int:
        self._record("set_flags", handle, flags)
        state = self.handles[handle]
        if flags & self.unsupported_flags:
            self._os_errno = ENOSYS
            return -1
        self._os_errno = 0
        state.flags = flags
        return 0

    def get_param(self, handle: int, tag: int) -> int | None:
        if tag not in self.parameter_tags:
            self._os_errno = EINVAL
            return None
        return self.handles[handle].parameters[tag]

    def set_param(self, handle: int, tag: int, value: int) -> int:
        self._record("set_param", handle, tag, value)
        if tag not in self.parameter_tags:
            self._os_errno = EINVAL
            return -1
        self.handles[handle].parameters[tag] = value
        return 0

    def supported_parameters(self, handle: int, limit: int) -> frozenset[int]:
        if CAP_PARAMETERS not in self._capabilities:
            return frozenset()
        return frozenset(tag for tag in self.parameter_tags if tag < limit)

    def load(self, handle: int, path: str | None) -> int:
        self._record("load", handle, path)
        state = self._enter(handle)
        try:
            state.database = None
            bad = self._bad_path(path)
            if bad is not None:
                os.write(2, f"{bad}, 1: Warning: type `sting' invalid\n".encode())
                return self._fail(state, f"could not find any valid magic files! ({bad})", ENOENT)
            state.database = path or self._default_path or "<builtin>"
            state.error = None
            return 0
        finally:
            self._leave(handle)

    def load_buffers(self, handle: int, buffers) -> int:
        self._record("load_buffers", handle, len(buffers))
        state = self.handles[handle]
        state.database = None
        if any(not data for data in buffers):
            return self._fail(state, "bad magic buffer", EINVAL)
        state.database = "<buffers>"
        return 0

    def compile(self, handle: int, path: str | None) -> int:
        self._record("compile", handle, path)
        state = self.handles[handle]
        state.database = None
        bad = self._bad_path(path)
        if bad is not None:
            os.write(2, f"{bad}, 1: Warning: type `sting' invalid\n".encode())
            return self._fail(state, f"could not compile {bad}", EINVAL)
        return 0

    def check(self, handle: int, path: str | None) -> int:
        self._record("check", handle, path)
        state = self.handles[handle]
        state.database = None
        bad = self._bad_path(path)
        if bad is not None:
            os.write(2, f"{bad}, 1: Warning: type `sting' invalid\n".encode())
            return -1
        return 0

    def classify_path(self, handle: int, path: bytes) -> bytes | None:
        self._record("classify_path", handle, path)
        state = self._enter(handle)
        try:
            try:
                data = Path(os.fsdecode(path)).read_bytes()
            except FileNotFoundError:
                if state.flags & ERROR:
                    self._fail(state, f"cannot stat `{os.fsdecode(path)}'", ENOENT)
                    return None
                return f"cannot open `{os.fsdecode(path)}' (No such file or directory)".encode()
            return self._classify(state, data)
        finally:
            self._leave(handle)

    def classify_descriptor(self, handle: int, fd: int) -> bytes | None:
        self._record("classify_descriptor", handle, fd)
        state = self._enter(handle)
        try:
            return self._classify(state, os.pread(fd, 4096, 0))
        finally:
            self._leave(handle)

    def classify_buffer(self, handle: int, data: bytes) -> bytes | None:
        self._record("classify_buffer", handle, data)
        state = self._enter(handle)
        try:
            return self._classify(state, data)
        finally:
            self._leave(handle)

    def version(self) -> int:
        if CAP_VERSION not in self._capabilities:
            return -1
        return self._version

    def default_path(self) -> str | None:
        if CAP_GETPATH not in self._capabilities:
            return None
        return self._default_path


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line("markers", "requires_libmagic: needs the native libmagic library")


@pytest.fixture(autouse=True)
def clean_process_defaults(monkeypatch):
    """Every test starts from the stock process defaults and no MAGIC override."""
    monkeypatch.delenv("MAGIC", raising=False)
    monkeypatch.delenv("MAGICBIND_AUTO_LOAD", raising=False)
    monkeypatch.delenv("MAGICBIND_STOP_ON_ERROR", raising=False)
    reset_process_defaults()
    yield
    reset_process_defaults()


@pytest.fixture
def engine() -> FakeEngine:
    return FakeEngine()


@pytest.fixture
def default_engine(monkeypatch, engine) -> FakeEngine:
    """Make sessions built without ``engine=`` use the fake engine."""
    monkeypatch.setattr(session_module, "get_default_engine", lambda: engine)
    return engine


@pytest.fixture
def session(engine):
    magic = Session(engine=engine)
    yield magic
    magic.close()


@pytest.fixture
def fixtures_dir() -> Path:
    """Return the path to bundled magic source fixtures."""
    return FIXTURES_DIR
