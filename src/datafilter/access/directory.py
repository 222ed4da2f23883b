"""Access – ScopeDirectory port and InMemoryScopeDirectory.

The directory answers the questions about host records the resolver cannot
answer from grants alone: which persons live at a basis, which encounter
types exist and which privilege each of them requires.
"""
from __future__ import annotations

import abc
from collections.abc import Iterable, Mapping
from typing import Any


class ScopeDirectory(abc.ABC):
    """Port: read-only lookups against the host's clinical records."""

    @abc.abstractmethod
    def person_ids_for_basis(self, basis_type: str, basis_ids: Iterable[str]) -> set[str]:
        """Ids of persons attached to any of *basis_ids*."""

    @abc.abstractmethod
    def encounter_type_ids(self) -> set[str]:
        """Ids of every encounter type, restricted or not."""

    @abc.abstractmethod
    def view_privileges(self) -> Mapping[str, str]:
        """Encounter type id to required view privilege, for restricted types only."""

    @abc.abstractmethod
    def view_privilege(self, encounter_type_id: Any) -> str | None: ...

    @abc.abstractmethod
    def encounter_type_id(self, encounter_id: Any) -> Any | None: ...


class InMemoryScopeDirectory(ScopeDirectory):
    def __init__(
        self,
        *,
        person_bases: Mapping[str, Mapping[str, Iterable[str]]] | None = None,
        encounter_type_ids: Iterable[Any] | None = None,
        view_privileges: Mapping[Any, str] | None = None,
        encounter_types: Mapping[Any, Any] | None = None,
    ) -> None:
        # person_bases: basis_type -> person_id -> basis ids
        self._person_bases = {
            basis_type: {str(p): {str(b) for b in bases} for p, bases in persons.items()}
            for basis_type, persons in (person_bases or {}).items()
        }
        self._view_privileges = {str(k): v for k, v in (view_privileges or {}).items()}
        self._encounter_types = {str(k): v for k, v in (encounter_types or {}).items()}
        # restricted types and types referenced by encounters are always known
        self._encounter_type_ids = (
            {str(t) for t in encounter_type_ids or ()}
            | set(self._view_privileges)
            | {str(t) for t in self._encounter_types.values()}
        )

    def person_ids_for_basis(self, basis_type: str, basis_ids: Iterable[str]) -> set[str]:
        wanted = {str(b) for b in basis_ids}
        persons = self._person_bases.get(basis_type, {})
        return {person for person, bases in persons.items() if bases & wanted}

    def encounter_type_ids(self) -> set[str]:
        return set(self._encounter_type_ids)

    def view_privileges(self) -> Mapping[str, str]:
        return dict(self._view_privileges)

    def view_privilege(self, encounter_type_id: Any) -> str | None:
        return self._view_privileges.get(str(encounter_type_id))

    def encounter_type_id(self, encounter_id: Any) -> Any | None:
        return self._encounter_types.get(str(encounter_id))


__all__ = ["InMemoryScopeDirectory", "ScopeDirectory"]
