#!/usr/bin/env python3
"""Native detection engine contract."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

# Optional libmagic entry points, probed when the engine is created.
CAP_PARAMETERS = "parameters"
CAP_VERSION = "version"
CAP_LOAD_BUFFERS = "load_buffers"
CAP_GETPATH = "getpath"
CAP_GETFLAGS = "getflags"

ALL_CAPABILITIES = frozenset(
    {CAP_PARAMETERS, CAP_VERSION, CAP_LOAD_BUFFERS, CAP_GETPATH, CAP_GETFLAGS}
)

# Returned by version() when the engine cannot report one.
VERSION_UNSUPPORTED = -1


@dataclass(frozen=True)
class Capabilities:
    """Optional features the linked engine provides"""

    features: frozenset[str] = frozenset()

    def __contains__(self, feature: str) -> bool:
        return feature in self.features

    @property
    def parameters(self) -> bool:
        return CAP_PARAMETERS in self.features

    @property
    def version(self) -> bool:
        return CAP_VERSION in self.features

    @property
    def load_buffers(self) -> bool:
        return CAP_LOAD_BUFFERS in self.features

    def to_list(self) -> list[str]:
        return sorted(self.features)


@runtime_checkable
class EngineInterface(Protocol):
    """
    Thin, status-returning view of libmagic.

    Handles are opaque. Functions mirror the C API: text results are ``None``
    and status results are ``-1`` on failure, with details available from
    ``error``/``errno`` (engine state) or ``last_os_error`` (C errno of the
    last call on this thread).
    """

    @property
    def capabilities(self) -> Capabilities: ...

    def open(self, flags: int) -> Any | None: ...

    def close(self, handle: Any) -> None: ...

    def error(self, handle: Any) -> str | None: ...

    def errno(self, handle: Any) -> int: ...

    def last_os_error(self) -> int: ...

    def set_flags(self, handle: Any, flags: int) -> int: ...

    def get_param(self, handle: Any, tag: int) -> int | None: ...

    def set_param(self, handle: Any, tag: int, value: int) -> int: ...

    def supported_parameters(self, handle: Any, limit: int) -> frozenset[int]: ...

    def load(self, handle: Any, path: str | None) -> int: ...

    def load_buffers(self, handle: Any, buffers: Sequence[bytes]) -> int: ...

    def compile(self, handle: Any, path: str | None) -> int: ...

    def check(self, handle: Any, path: str | None) -> int: ...

    def classify_path(self, handle: Any, path: bytes) -> bytes | None: ...

    def classify_descriptor(self, handle: Any, fd: int) -> bytes | None: ...

    def classify_buffer(self, handle: Any, data: bytes) -> bytes | None: ...

    def version(self) -> int: ...

    def default_path(self) -> str | None: ...
