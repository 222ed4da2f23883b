"""Config settings – SettingsLoader port and EnvSettingsLoader."""
from __future__ import annotations

import abc
import dataclasses
import os
from collections.abc import Callable
from typing import Any, TypeVar

from datafilter.config.settings.base import Settings
from datafilter.config.validation import ConfigError, MissingRequiredSettingError

T = TypeVar("T", bound=Settings)

_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _to_bool(raw: str) -> bool:
    return raw.strip().lower() in _TRUTHY


def _to_list(raw: str) -> list[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


_SCALARS: dict[Any, Callable[[str], Any]] = {
    bool: _to_bool,
    "bool": _to_bool,
    int: int,
    "int": int,
    float: float,
    "float": float,
}


class SettingsLoader(abc.ABC):
    """Port: build a settings object from an external source."""

    @abc.abstractmethod
    def load(self, settings_class: type[T]) -> T: ...


class EnvSettingsLoader(SettingsLoader):
    """Read ``<PREFIX>_<FIELD>`` environment variables into a settings dataclass.

    Fields without a default must be present.  Values are coerced from
    their annotation, which may be a real type or, under postponed
    evaluation, its string form.
    """

    def __init__(self, environ: dict[str, str] | None = None) -> None:
        self._environ = environ

    def load(self, settings_class: type[T]) -> T:
        environ = os.environ if self._environ is None else self._environ
        prefix = getattr(settings_class, "_prefix", "").upper()
        values: dict[str, Any] = {}

        for field in dataclasses.fields(settings_class):  # type: ignore[arg-type]
            key = f"{prefix}_{field.name}".upper().lstrip("_")
            if key in environ:
                values[field.name] = self._coerce(environ[key], field.type)
            elif field.default is dataclasses.MISSING and field.default_factory is dataclasses.MISSING:
                raise MissingRequiredSettingError(key)

        try:
            return settings_class(**values)
        except ConfigError:
            raise
        except Exception as exc:
            raise ConfigError(f"Failed to load settings: {exc}") from exc

    @staticmethod
    def _coerce(raw: str, annotation: Any) -> Any:
        converter = _SCALARS.get(annotation)
        if converter is not None:
            return converter(raw)
        if getattr(annotation, "__origin__", None) is list:
            return _to_list(raw)
        if isinstance(annotation, str) and annotation.startswith("list"):
            return _to_list(raw)
        return raw


__all__ = ["EnvSettingsLoader", "SettingsLoader"]
