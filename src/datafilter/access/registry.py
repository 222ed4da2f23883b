"""Access – FilterRegistry.

Process-wide table of which entity types take part in which named filter,
and whether each filter is currently enabled.  Reads happen on every load
and never take the lock: they go through immutable snapshots that are
swapped atomically by the (rare) administrative writes.
"""
from __future__ import annotations

import dataclasses
import threading
import types
from collections.abc import Callable, Iterable, Mapping
from typing import Any

from datafilter.access.constants import Dimension
from datafilter.kernel.errors import UnknownFilterError, ValidationError
from datafilter.observability.logging import get_logger

_log = get_logger(__name__)

Condition = Callable[[type, Mapping[str, str]], Any]


@dataclasses.dataclass(frozen=True)
class FilterRegistration:
    """A named filter and the entity types it restricts.

    ``condition`` builds the query-time criteria for one entity type from
    the parameters bound on the session; ``None`` means the filter is only
    enforced at load time.
    """

    name: str
    dimension: Dimension
    entity_types: tuple[type, ...]
    parameter_names: tuple[str, ...] = ()
    condition: Condition | None = dataclasses.field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.name:
            raise ValidationError("Filter registrations need a name")
        if not self.entity_types:
            raise ValidationError(f"Filter '{self.name}' applies to no entity type")


_ClassMap = Mapping[type, frozenset[str]]


class FilterRegistry:
    """Index of filter registrations with per-filter enable flags.

    Example::

        registry = FilterRegistry(schema.registrations())
        registry.set_filter_enabled(FILTER_NAME_OBS, False)
        registry.classes_filtered_by(Dimension.LOCATION)
    """

    def __init__(self, registrations: Iterable[FilterRegistration] = ()) -> None:
        self._lock = threading.Lock()
        self._registrations: Mapping[str, FilterRegistration] = types.MappingProxyType({})
        self._disabled: frozenset[str] = frozenset()
        self._class_maps: Mapping[Dimension, _ClassMap] | None = None
        for registration in registrations:
            self.register(registration)

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def register(self, registration: FilterRegistration) -> None:
        """Add *registration*, replacing any earlier one with the same name."""
        with self._lock:
            updated = dict(self._registrations)
            updated[registration.name] = registration
            self._registrations = types.MappingProxyType(updated)
            self._class_maps = None
        _log.debug(
            "datafilter.filter_registered",
            filter=registration.name,
            dimension=registration.dimension.value,
            entity_types=[t.__name__ for t in registration.entity_types],
        )

    def registration(self, name: str) -> FilterRegistration:
        try:
            return self._registrations[name]
        except KeyError:
            raise UnknownFilterError(name) from None

    def registrations(self, dimension: Dimension | None = None) -> tuple[FilterRegistration, ...]:
        regs = self._registrations.values()
        if dimension is None:
            return tuple(regs)
        return tuple(r for r in regs if r.dimension is dimension)

    def rebuild(self) -> None:
        """Drop the derived class maps; the next read rebuilds them."""
        with self._lock:
            self._class_maps = None

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    def classes_filtered_by(self, dimension: Dimension) -> _ClassMap:
        """Map each entity type filtered along *dimension* to its filter names."""
        maps = self._class_maps
        if maps is None:
            maps = self._build_class_maps()
        return maps.get(dimension, types.MappingProxyType({}))

    def filters_for(self, entity_type: type, dimension: Dimension) -> frozenset[str]:
        """Filter names restricting *entity_type* (or its nearest registered base)."""
        class_map = self.classes_filtered_by(dimension)
        for cls in entity_type.__mro__:
            names = class_map.get(cls)
            if names:
                return names
        return frozenset()

    def all_disabled(self, filter_names: Iterable[str]) -> bool:
        """True when every filter in *filter_names* is disabled (vacuously true when empty)."""
        disabled = self._disabled
        return all(name in disabled for name in filter_names)

    # ------------------------------------------------------------------
    # Enable / disable
    # ------------------------------------------------------------------

    def set_filter_enabled(self, name: str, enabled: bool) -> None:
        """Switch filter *name* on or off; unknown names fail immediately."""
        with self._lock:
            if name not in self._registrations:
                raise UnknownFilterError(name)
            if enabled:
                self._disabled = self._disabled - {name}
            else:
                self._disabled = self._disabled | {name}
        _log.info("datafilter.filter_toggled", filter=name, enabled=enabled)

    def is_enabled(self, name: str) -> bool:
        return name not in self._disabled

    def is_filter_disabled(self, name: str) -> bool:
        return name in self._disabled

    # ------------------------------------------------------------------

    def _build_class_maps(self) -> Mapping[Dimension, _ClassMap]:
        with self._lock:
            if self._class_maps is not None:
                return self._class_maps
            collected: dict[Dimension, dict[type, set[str]]] = {}
            for registration in self._registrations.values():
                by_class = collected.setdefault(registration.dimension, {})
                for entity_type in registration.entity_types:
                    by_class.setdefault(entity_type, set()).add(registration.name)
            maps = types.MappingProxyType({
                dimension: types.MappingProxyType(
                    {cls: frozenset(names) for cls, names in by_class.items()}
                )
                for dimension, by_class in collected.items()
            })
            self._class_maps = maps
            return maps


__all__ = ["Condition", "FilterRegistration", "FilterRegistry"]
