"""Access – GlobalPropertyStore port and InMemoryGlobalPropertyStore."""
from __future__ import annotations

import abc


class GlobalPropertyStore(abc.ABC):
    """Port: read (and administratively write) global configuration properties."""

    @abc.abstractmethod
    def get_property(self, name: str) -> str | None: ...

    @abc.abstractmethod
    def set_property(self, name: str, value: str | None) -> None: ...


class InMemoryGlobalPropertyStore(GlobalPropertyStore):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._values: dict[str, str] = dict(initial or {})

    def get_property(self, name: str) -> str | None:
        return self._values.get(name)

    def set_property(self, name: str, value: str | None) -> None:
        if value is None:
            self._values.pop(name, None)
        else:
            self._values[name] = value


def is_explicitly_false(value: str | None) -> bool:
    """Only the literal ``false`` (any case) switches a flag off; anything else, unset included, keeps it on."""
    return value is not None and value.strip().lower() == "false"


__all__ = ["GlobalPropertyStore", "InMemoryGlobalPropertyStore", "is_explicitly_false"]
