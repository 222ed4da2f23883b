"""Access – the closed set of entity kinds that take part in filtering.

Each kind knows how to derive the owning person (the location dimension)
and the encounter type (the encounter-type dimension) from an
:class:`~datafilter.access.snapshot.EntitySnapshot`.
"""
from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any

from datafilter.access.snapshot import EntitySnapshot


class EntityKind(str, Enum):
    PERSON = "person"
    PATIENT = "patient"
    VISIT = "visit"
    ENCOUNTER = "encounter"
    OBS = "obs"
    PROVIDER = "provider"


@dataclasses.dataclass(frozen=True)
class PropertyNames:
    """Attribute names the host models use for the properties read here."""

    patient: str = "patient_id"
    person: str = "person_id"
    encounter: str = "encounter_id"
    encounter_type: str = "encounter_type_id"
    encounter_relationship: str = "encounter"
    view_privilege: str = "view_privilege"
    provider_role: str = "role_name"

    def owning_person(self, kind: EntityKind) -> str | None:
        """Name of the property holding the owning person, ``None`` for the entity's own id."""
        if kind in (EntityKind.PERSON, EntityKind.PATIENT):
            return None
        if kind in (EntityKind.VISIT, EntityKind.ENCOUNTER):
            return self.patient
        if kind is EntityKind.OBS:
            return self.person
        raise ValueError(f"{kind.value} records are not owned by a person")


DEFAULT_PROPERTY_NAMES = PropertyNames()


@dataclasses.dataclass(frozen=True)
class EncounterTypeRef:
    """How to find the encounter type governing a loaded record.

    ``encounterless`` marks an obs recorded outside any encounter.  When
    ``encounter_type_id`` is ``None`` and the record is not encounterless the
    type must be looked up from ``encounter_id``.
    """

    encounter_type_id: Any = None
    encounter_id: Any = None
    encounterless: bool = False

    @property
    def needs_lookup(self) -> bool:
        return not self.encounterless and self.encounter_type_id is None


def owning_scope_key(
    kind: EntityKind,
    snapshot: EntitySnapshot,
    names: PropertyNames = DEFAULT_PROPERTY_NAMES,
) -> str | None:
    """Return the owning person id of *snapshot* as a scope key."""
    prop = names.owning_person(kind)
    value = snapshot.entity_id if prop is None else snapshot.value_of(prop)
    return None if value is None else str(value)


def encounter_type_ref(
    kind: EntityKind,
    snapshot: EntitySnapshot,
    names: PropertyNames = DEFAULT_PROPERTY_NAMES,
) -> EncounterTypeRef:
    if kind is EntityKind.ENCOUNTER:
        return EncounterTypeRef(
            encounter_type_id=snapshot.value_of(names.encounter_type),
            encounter_id=snapshot.entity_id,
        )
    if kind is EntityKind.OBS:
        encounter_id = snapshot.value_of(names.encounter)
        if encounter_id is None:
            return EncounterTypeRef(encounterless=True)
        # the encounter may already be attached by an eager load
        encounter = snapshot.value_of(names.encounter_relationship)
        encounter_type_id = getattr(encounter, names.encounter_type, None)
        return EncounterTypeRef(encounter_type_id=encounter_type_id, encounter_id=encounter_id)
    raise ValueError(f"{kind.value} records have no encounter type")


__all__ = [
    "DEFAULT_PROPERTY_NAMES",
    "EncounterTypeRef",
    "EntityKind",
    "PropertyNames",
    "encounter_type_ref",
    "owning_scope_key",
]
