"""SQLAlchemy adapter – ClinicalSchema.

Binds the host application's mapped classes to the entity kinds the
filters understand, and builds the default filter registrations with
their query-time criteria.
"""
from __future__ import annotations

import dataclasses
from collections.abc import Mapping
from typing import Any

from sqlalchemy import ColumnElement, inspect, or_, select

from datafilter.access.constants import (
    FILTER_NAME_ENC_TYPE_PRIV_ENCOUNTER,
    FILTER_NAME_ENC_TYPE_PRIV_OBS,
    FILTER_NAME_ENCOUNTER,
    FILTER_NAME_OBS,
    FILTER_NAME_PATIENT,
    FILTER_NAME_PROGRAM_PROVIDER,
    FILTER_NAME_VISIT,
    FILTER_PARAM_ACCESSIBLE_ROLES,
    FILTER_PARAM_HIDDEN_ENCOUNTER_TYPE_IDS,
    FILTER_PARAM_PATIENT_IDS,
    FILTER_PARAM_PROGRAM_ROLES,
    Dimension,
    split_keys,
)
from datafilter.access.kinds import DEFAULT_PROPERTY_NAMES, EntityKind, PropertyNames
from datafilter.access.registry import FilterRegistration


def primary_key(cls: type) -> Any:
    """The single primary key column attribute of mapped class *cls*."""
    mapper = inspect(cls)
    return getattr(cls, mapper.get_property_by_column(mapper.primary_key[0]).key)


def coerce_keys(column: Any, keys: list[str]) -> list[Any]:
    """Convert string scope keys to the Python type of *column*.

    Keys that do not convert (such as a non-numeric key for an integer
    column) can never match, so they are dropped.
    """
    try:
        python_type = column.type.python_type
    except NotImplementedError:
        return keys
    if python_type is str:
        return keys
    converted = []
    for key in keys:
        try:
            converted.append(python_type(key))
        except (TypeError, ValueError):
            continue
    return converted


@dataclasses.dataclass
class ClinicalSchema:
    """Host classes taking part in filtering.

    Any class left as ``None`` is simply not filtered.  ``person_location``
    is a ``(person_id_column, location_column)`` pair telling which persons
    belong to which location.
    """

    patient: type | None = None
    person: type | None = None
    visit: type | None = None
    encounter: type | None = None
    obs: type | None = None
    encounter_type: type | None = None
    provider: type | None = None
    person_location: tuple[Any, Any] | None = None
    names: PropertyNames = DEFAULT_PROPERTY_NAMES

    def kinds(self) -> dict[type, EntityKind]:
        pairs = [
            (self.person, EntityKind.PERSON),
            (self.patient, EntityKind.PATIENT),
            (self.visit, EntityKind.VISIT),
            (self.encounter, EntityKind.ENCOUNTER),
            (self.obs, EntityKind.OBS),
            (self.provider, EntityKind.PROVIDER),
        ]
        return {cls: kind for cls, kind in pairs if cls is not None}

    def kind_of(self, entity_type: type) -> EntityKind | None:
        kinds = self.kinds()
        for cls in entity_type.__mro__:
            if cls in kinds:
                return kinds[cls]
        return None

    # ------------------------------------------------------------------
    # Query-time criteria
    # ------------------------------------------------------------------

    def _owned_by_accessible_person(self, cls: type, params: Mapping[str, str]) -> ColumnElement[bool]:
        prop = self.names.owning_person(self.kind_of(cls))  # type: ignore[arg-type]
        column = primary_key(cls) if prop is None else getattr(cls, prop)
        return column.in_(coerce_keys(column, split_keys(params.get(FILTER_PARAM_PATIENT_IDS))))

    def _encounter_type_visible(self, cls: type, params: Mapping[str, str]) -> ColumnElement[bool]:
        column = getattr(cls, self.names.encounter_type)
        hidden = coerce_keys(column, split_keys(params.get(FILTER_PARAM_HIDDEN_ENCOUNTER_TYPE_IDS)))
        return column.not_in(hidden)

    def _obs_encounter_type_visible(self, cls: type, params: Mapping[str, str]) -> ColumnElement[bool]:
        encounter = self.encounter
        if encounter is None:
            raise ValueError("Filtering obs by encounter type needs the encounter class")
        # table columns, so the encounter filters are not applied inside the subquery
        mapper = inspect(encounter)
        type_column = mapper.get_property(self.names.encounter_type).columns[0]
        hidden = coerce_keys(type_column, split_keys(params.get(FILTER_PARAM_HIDDEN_ENCOUNTER_TYPE_IDS)))
        hidden_encounters = select(mapper.primary_key[0]).where(type_column.in_(hidden))
        encounter_ref = getattr(cls, self.names.encounter)
        return or_(encounter_ref.is_(None), encounter_ref.not_in(hidden_encounters))

    def _provider_in_accessible_program(self, cls: type, params: Mapping[str, str]) -> ColumnElement[bool]:
        role = getattr(cls, self.names.provider_role)
        return or_(
            role.is_(None),
            role.not_in(split_keys(params.get(FILTER_PARAM_PROGRAM_ROLES))),
            role.in_(split_keys(params.get(FILTER_PARAM_ACCESSIBLE_ROLES))),
        )

    # ------------------------------------------------------------------

    def registrations(self) -> list[FilterRegistration]:
        """Default filter registrations for every class present in the schema."""
        regs: list[FilterRegistration] = []
        patient_types = tuple(c for c in (self.patient, self.person) if c is not None)
        location_filters = [
            (FILTER_NAME_PATIENT, patient_types),
            (FILTER_NAME_VISIT, (self.visit,) if self.visit else ()),
            (FILTER_NAME_ENCOUNTER, (self.encounter,) if self.encounter else ()),
            (FILTER_NAME_OBS, (self.obs,) if self.obs else ()),
        ]
        for name, entity_types in location_filters:
            if entity_types:
                regs.append(FilterRegistration(
                    name=name,
                    dimension=Dimension.LOCATION,
                    entity_types=entity_types,
                    parameter_names=(FILTER_PARAM_PATIENT_IDS,),
                    condition=self._owned_by_accessible_person,
                ))

        if self.encounter_type is not None and self.encounter is not None:
            regs.append(FilterRegistration(
                name=FILTER_NAME_ENC_TYPE_PRIV_ENCOUNTER,
                dimension=Dimension.ENCOUNTER_TYPE,
                entity_types=(self.encounter,),
                parameter_names=(FILTER_PARAM_HIDDEN_ENCOUNTER_TYPE_IDS,),
                condition=self._encounter_type_visible,
            ))
            if self.obs is not None:
                regs.append(FilterRegistration(
                    name=FILTER_NAME_ENC_TYPE_PRIV_OBS,
                    dimension=Dimension.ENCOUNTER_TYPE,
                    entity_types=(self.obs,),
                    parameter_names=(FILTER_PARAM_HIDDEN_ENCOUNTER_TYPE_IDS,),
                    condition=self._obs_encounter_type_visible,
                ))

        if self.provider is not None:
            regs.append(FilterRegistration(
                name=FILTER_NAME_PROGRAM_PROVIDER,
                dimension=Dimension.PROGRAM,
                entity_types=(self.provider,),
                parameter_names=(FILTER_PARAM_PROGRAM_ROLES, FILTER_PARAM_ACCESSIBLE_ROLES),
                condition=self._provider_in_accessible_program,
            ))
        return regs


__all__ = ["ClinicalSchema", "coerce_keys", "primary_key"]
