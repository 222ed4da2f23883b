"""Unit tests for entity snapshots, kinds and scope-key encoding."""

from __future__ import annotations

import types

import pytest

from datafilter.access.constants import NO_ACCESS_KEY, join_keys, split_keys
from datafilter.access.kinds import (
    DEFAULT_PROPERTY_NAMES,
    EntityKind,
    PropertyNames,
    encounter_type_ref,
    owning_scope_key,
)
from datafilter.access.snapshot import EntitySnapshot


class _Obs:
    pass


def _snapshot(entity_id: object = 1, **values: object) -> EntitySnapshot:
    return EntitySnapshot(_Obs(), entity_id, tuple(values), tuple(values.values()))


class TestScopeKeyEncoding:
    def test_join_is_sorted(self) -> None:
        assert join_keys({"3", "1", "2"}) == "1,2,3"

    def test_join_empty_is_no_access(self) -> None:
        assert join_keys(set()) == NO_ACCESS_KEY

    def test_split(self) -> None:
        assert split_keys("1, 2,3") == ["1", "2", "3"]

    @pytest.mark.parametrize("value", [None, "", " , "])
    def test_split_blank_is_no_access(self, value: str | None) -> None:
        assert split_keys(value) == [NO_ACCESS_KEY]


class TestEntitySnapshot:
    def test_lengths_must_match(self) -> None:
        with pytest.raises(ValueError):
            EntitySnapshot(object(), 1, ("a", "b"), (1,))

    def test_lookup_by_name_not_position(self) -> None:
        snap = _snapshot(person_id=5, encounter_id=9)
        reordered = EntitySnapshot(snap.entity, 1, ("encounter_id", "person_id"), (9, 5))
        assert snap.value_of("person_id") == reordered.value_of("person_id") == 5

    def test_missing_property(self) -> None:
        snap = _snapshot(person_id=5)
        assert snap.index_of("nope") == -1
        assert not snap.has("nope")
        assert snap.value_of("nope", "dflt") == "dflt"

    def test_entity_type(self) -> None:
        assert _snapshot().entity_type is _Obs


class TestOwningScopeKey:
    def test_patient_uses_own_id(self) -> None:
        assert owning_scope_key(EntityKind.PATIENT, _snapshot(entity_id=42)) == "42"

    def test_person_uses_own_id(self) -> None:
        assert owning_scope_key(EntityKind.PERSON, _snapshot(entity_id=7)) == "7"

    @pytest.mark.parametrize("kind", [EntityKind.VISIT, EntityKind.ENCOUNTER])
    def test_visit_and_encounter_use_patient(self, kind: EntityKind) -> None:
        assert owning_scope_key(kind, _snapshot(entity_id=1, patient_id=3)) == "3"

    def test_obs_uses_person(self) -> None:
        assert owning_scope_key(EntityKind.OBS, _snapshot(person_id=8)) == "8"

    def test_missing_owner_is_none(self) -> None:
        assert owning_scope_key(EntityKind.OBS, _snapshot()) is None

    def test_custom_property_names(self) -> None:
        names = PropertyNames(person="subject_id")
        assert owning_scope_key(EntityKind.OBS, _snapshot(subject_id=4), names) == "4"

    def test_provider_has_no_owner(self) -> None:
        with pytest.raises(ValueError):
            DEFAULT_PROPERTY_NAMES.owning_person(EntityKind.PROVIDER)


class TestEncounterTypeRef:
    def test_encounter_reads_its_type(self) -> None:
        ref = encounter_type_ref(EntityKind.ENCOUNTER, _snapshot(entity_id=10, encounter_type_id=2))
        assert ref.encounter_type_id == 2
        assert not ref.needs_lookup

    def test_encounter_without_type_needs_lookup(self) -> None:
        ref = encounter_type_ref(EntityKind.ENCOUNTER, _snapshot(entity_id=10, encounter_type_id=None))
        assert ref.needs_lookup
        assert ref.encounter_id == 10

    def test_obs_without_encounter_is_encounterless(self) -> None:
        ref = encounter_type_ref(EntityKind.OBS, _snapshot(encounter_id=None))
        assert ref.encounterless
        assert not ref.needs_lookup

    def test_obs_with_loaded_encounter(self) -> None:
        encounter = types.SimpleNamespace(encounter_type_id=6)
        ref = encounter_type_ref(EntityKind.OBS, _snapshot(encounter_id=3, encounter=encounter))
        assert ref.encounter_type_id == 6
        assert not ref.needs_lookup

    def test_obs_without_loaded_encounter_needs_lookup(self) -> None:
        ref = encounter_type_ref(EntityKind.OBS, _snapshot(encounter_id=3))
        assert ref.needs_lookup
        assert ref.encounter_id == 3

    def test_patient_has_no_encounter_type(self) -> None:
        with pytest.raises(ValueError):
            encounter_type_ref(EntityKind.PATIENT, _snapshot())
