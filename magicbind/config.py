#!/usr/bin/env python3
"""
magicbind Configuration

Per-session behaviour is an explicit ``MagicConfig`` value handed to each
``Session``. Sessions built without one snapshot the process-wide defaults
held by ``ProcessDefaults``.

Process defaults are meant to be set once at start-up (directly or through
the ``MAGICBIND_AUTO_LOAD`` / ``MAGICBIND_STOP_ON_ERROR`` environment
variables) and then only read. Reads and writes are lock-protected, but a
session constructed concurrently with a write may observe either value.
"""

import os
import threading
from collections.abc import Iterable
from dataclasses import asdict, dataclass, fields
from typing import Any

DATABASE_PATH_ENV = "MAGIC"
AUTO_LOAD_ENV = "MAGICBIND_AUTO_LOAD"
STOP_ON_ERROR_ENV = "MAGICBIND_STOP_ON_ERROR"

_FALSE_VALUES = {"0", "false", "no", "off"}
_TRUE_VALUES = {"1", "true", "yes", "on"}


def _env_flag(name: str, default: bool) -> bool:
    value = os.environ.get(name, "").strip().lower()
    if value in _FALSE_VALUES:
        return False
    if value in _TRUE_VALUES:
        return True
    return default


@dataclass(frozen=True)
class MagicConfig:
    """Behaviour switches for a single session

    Attributes:
        auto_load: Load the default database on the first classification
            when nothing was loaded explicitly
        stop_on_error: Fail a multi-path load on the first invalid database
            instead of loading the valid ones
        suppress_diagnostics: Silence libmagic's own error stream during
            load/compile/check (ignored while the DEBUG flag is set)
    """

    auto_load: bool = True
    stop_on_error: bool = True
    suppress_diagnostics: bool = True

    def __post_init__(self):
        """Validate configuration values"""
        for item in fields(self):
            if not isinstance(getattr(self, item.name), bool):
                raise TypeError(f"{item.name} must be a boolean")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "MagicConfig":
        """Build from a mapping, ignoring unknown keys"""
        known = {item.name for item in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_process_defaults(cls, **overrides: bool) -> "MagicConfig":
        values = {
            "auto_load": get_default_auto_load(),
            "stop_on_error": get_default_stop_on_error(),
        }
        values.update(overrides)
        return cls(**values)

    def to_dict(self) -> dict[str, bool]:
        return asdict(self)


class ProcessDefaults:
    """Process-wide default switches, guarded by a lock"""

    def __init__(self, auto_load: bool = True, stop_on_error: bool = True):
        self._lock = threading.Lock()
        self._auto_load = auto_load
        self._stop_on_error = stop_on_error

    @property
    def auto_load(self) -> bool:
        with self._lock:
            return self._auto_load

    @auto_load.setter
    def auto_load(self, value: bool) -> None:
        with self._lock:
            self._auto_load = bool(value)

    @property
    def stop_on_error(self) -> bool:
        with self._lock:
            return self._stop_on_error

    @stop_on_error.setter
    def stop_on_error(self, value: bool) -> None:
        with self._lock:
            self._stop_on_error = bool(value)

    def reset(self) -> None:
        """Restore the environment-derived start-up values"""
        with self._lock:
            self._auto_load = _env_flag(AUTO_LOAD_ENV, True)
            self._stop_on_error = _env_flag(STOP_ON_ERROR_ENV, True)


PROCESS_DEFAULTS = ProcessDefaults(
    auto_load=_env_flag(AUTO_LOAD_ENV, True),
    stop_on_error=_env_flag(STOP_ON_ERROR_ENV, True),
)


def get_default_auto_load() -> bool:
    return PROCESS_DEFAULTS.auto_load


def set_default_auto_load(value: bool) -> bool:
    PROCESS_DEFAULTS.auto_load = value
    return PROCESS_DEFAULTS.auto_load


def get_default_stop_on_error() -> bool:
    return PROCESS_DEFAULTS.stop_on_error


def set_default_stop_on_error(value: bool) -> bool:
    PROCESS_DEFAULTS.stop_on_error = value
    return PROCESS_DEFAULTS.stop_on_error


def reset_process_defaults() -> None:
    PROCESS_DEFAULTS.reset()


def split_database_path(value: str | None) -> list[str]:
    """Split a path list as libmagic does (``os.pathsep`` separated)"""
    if not value:
        return []
    return [item for item in value.split(os.pathsep) if item]


def resolve_database_paths(paths: Iterable[str], default: str | None = None) -> list[str]:
    """
    Decide which database files a load should use.

    Precedence: explicit paths, then the ``MAGIC`` environment variable,
    then the engine's compiled-in default.

    Args:
        paths: Paths given by the caller (may be empty)
        default: The engine's compiled-in default path list, if known

    Returns:
        Ordered list of paths; empty means "let libmagic decide"
    """
    explicit = list(paths)
    if explicit:
        return explicit
    from_env = split_database_path(os.environ.get(DATABASE_PATH_ENV))
    if from_env:
        return from_env
    return split_database_path(default)
