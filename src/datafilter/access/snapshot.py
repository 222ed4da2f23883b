"""Access – EntitySnapshot: the field values of an entity being loaded."""
from __future__ import annotations

import dataclasses
from typing import Any


@dataclasses.dataclass(frozen=True)
class EntitySnapshot:
    """Values of a freshly loaded entity, parallel to ``property_names``.

    The persistence layer decides the order of ``property_names``; values
    are always located by looking the name up, never by a fixed position.
    """

    entity: Any
    entity_id: Any
    property_names: tuple[str, ...]
    state: tuple[Any, ...]

    def __post_init__(self) -> None:
        if len(self.property_names) != len(self.state):
            raise ValueError(
                f"{len(self.property_names)} property names for {len(self.state)} values"
            )

    @property
    def entity_type(self) -> type:
        return type(self.entity)

    def index_of(self, name: str) -> int:
        """Return the position of *name*, or ``-1`` when the entity has no such property."""
        try:
            return self.property_names.index(name)
        except ValueError:
            return -1

    def has(self, name: str) -> bool:
        return self.index_of(name) >= 0

    def value_of(self, name: str, default: Any = None) -> Any:
        index = self.index_of(name)
        if index < 0:
            return default
        return self.state[index]


__all__ = ["EntitySnapshot"]
