"""Access – GrantStore port and InMemoryGrantStore.

A grant assigns a *basis* (a location, a program) to an *entity* (a role,
a user).  Persisting grants is the store's business; the resolver only
queries them.
"""
from __future__ import annotations

import abc
import dataclasses
import threading
from collections.abc import Iterable

from datafilter.access.constants import (
    BASIS_TYPE_LOCATION,
    BASIS_TYPE_PROGRAM,
    ENTITY_TYPE_ROLE,
    ENTITY_TYPE_USER,
)


@dataclasses.dataclass(frozen=True)
class EntityRef:
    """Typed reference to a grantee or a basis, e.g. ``EntityRef("Role", "Nurse")``."""

    type: str
    identifier: str

    def __post_init__(self) -> None:
        object.__setattr__(self, "identifier", str(self.identifier))

    @classmethod
    def role(cls, name: str) -> EntityRef:
        return cls(ENTITY_TYPE_ROLE, name)

    @classmethod
    def user(cls, user_id: object) -> EntityRef:
        return cls(ENTITY_TYPE_USER, str(user_id))

    @classmethod
    def location(cls, location_id: object) -> EntityRef:
        return cls(BASIS_TYPE_LOCATION, str(location_id))

    @classmethod
    def program(cls, program_id: object) -> EntityRef:
        return cls(BASIS_TYPE_PROGRAM, str(program_id))


class GrantStore(abc.ABC):
    """Port: storage of entity-to-basis grants."""

    @abc.abstractmethod
    def basis_ids(self, entities: Iterable[EntityRef], basis_type: str) -> set[str]:
        """Identifiers of every *basis_type* basis granted to any of *entities*."""

    @abc.abstractmethod
    def entity_ids(self, entity_type: str, basis_type: str, basis_ids: Iterable[str] | None = None) -> set[str]:
        """Identifiers of *entity_type* grantees of *basis_type* bases.

        When *basis_ids* is ``None`` every basis of that type counts.
        """

    @abc.abstractmethod
    def grant(self, entity: EntityRef, basis: EntityRef) -> None: ...

    @abc.abstractmethod
    def revoke(self, entity: EntityRef, basis: EntityRef) -> None: ...


class InMemoryGrantStore(GrantStore):
    """Grant store backed by a set; intended for tests and small deployments."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._grants: set[tuple[EntityRef, EntityRef]] = set()

    def basis_ids(self, entities: Iterable[EntityRef], basis_type: str) -> set[str]:
        wanted = set(entities)
        return {
            basis.identifier
            for entity, basis in self._snapshot()
            if entity in wanted and basis.type == basis_type
        }

    def entity_ids(self, entity_type: str, basis_type: str, basis_ids: Iterable[str] | None = None) -> set[str]:
        allowed = None if basis_ids is None else {str(b) for b in basis_ids}
        return {
            entity.identifier
            for entity, basis in self._snapshot()
            if entity.type == entity_type
            and basis.type == basis_type
            and (allowed is None or basis.identifier in allowed)
        }

    def grant(self, entity: EntityRef, basis: EntityRef) -> None:
        with self._lock:
            self._grants.add((entity, basis))

    def revoke(self, entity: EntityRef, basis: EntityRef) -> None:
        with self._lock:
            self._grants.discard((entity, basis))

    def _snapshot(self) -> frozenset[tuple[EntityRef, EntityRef]]:
        with self._lock:
            return frozenset(self._grants)


__all__ = ["EntityRef", "GrantStore", "InMemoryGrantStore"]
