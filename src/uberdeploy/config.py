# config.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Dict, Union

from .errors import MissingRequiredConfig


@dataclass(frozen=True)
class Value:
    """A literal config value."""
    value: Any


@dataclass(frozen=True)
class Deferred:
    """A zero-argument producer, evaluated on first access and then memoized."""
    producer: Callable[[], Any]


ConfigValue = Union[Value, Deferred]

_MISSING = object()


class ConfigStore:
    """
    Symbolic keys -> lazily resolved values.

    Callables passed to set() become Deferred producers; anything else is
    stored as a literal. A resolved value never changes for the rest of the
    run unless the key is explicitly set again.
    """

    def __init__(self) -> None:
        self._values: Dict[str, ConfigValue] = {}
        self._resolved: Dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        if isinstance(value, (Value, Deferred)):
            entry = value
        elif callable(value):
            entry = Deferred(value)
        else:
            entry = Value(value)
        self._values[key] = entry
        self._resolved.pop(key, None)

    def set_default(self, key: str, value: Any) -> None:
        if key not in self._values:
            self.set(key, value)

    def required(self, key: str, hint: str | None = None) -> None:
        """Register a key that aborts the run when read without an override."""
        def _fail() -> Any:
            raise MissingRequiredConfig(key=key, hint=hint)

        self.set_default(key, Deferred(_fail))

    def is_set(self, key: str) -> bool:
        return key in self._values

    def get(self, key: str) -> Any:
        if key in self._resolved:
            return self._resolved[key]

        entry = self._values.get(key)
        if entry is None:
            raise MissingRequiredConfig(key=key)

        if isinstance(entry, Value):
            result = entry.value
        else:
            result = entry.producer()
        self._resolved[key] = result
        return result

    def fetch(self, key: str, default: Any = _MISSING) -> Any:
        if default is not _MISSING and key not in self._values:
            return default
        return self.get(key)

    def __getitem__(self, key: str) -> Any:
        return self.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._values


def parse_assignment(text: str) -> tuple[str, str]:
    """Parse a `key=value` command line override."""
    key, sep, value = text.partition("=")
    key = key.strip()
    if not sep or not key:
        raise ValueError(f"expected key=value, got {text!r}")
    return key, value
