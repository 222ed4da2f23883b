"""Unit tests for FilterRegistry."""

from __future__ import annotations

import threading

import pytest

from datafilter.access.constants import Dimension
from datafilter.access.registry import FilterRegistration, FilterRegistry
from datafilter.kernel.errors import UnknownFilterError, ValidationError


class Patient:
    pass


class ArchivedPatient(Patient):
    pass


class Encounter:
    pass


class Unrelated:
    pass


def _registry() -> FilterRegistry:
    return FilterRegistry([
        FilterRegistration("patientFilter", Dimension.LOCATION, (Patient,)),
        FilterRegistration("encounterFilter", Dimension.LOCATION, (Encounter,)),
        FilterRegistration("encTypeFilter", Dimension.ENCOUNTER_TYPE, (Encounter,)),
    ])


class TestFilterRegistration:
    def test_requires_name(self) -> None:
        with pytest.raises(ValidationError):
            FilterRegistration("", Dimension.LOCATION, (Patient,))

    def test_requires_entity_type(self) -> None:
        with pytest.raises(ValidationError):
            FilterRegistration("f", Dimension.LOCATION, ())


class TestRegistration:
    def test_registrations_by_dimension(self) -> None:
        registry = _registry()
        names = {r.name for r in registry.registrations(Dimension.LOCATION)}
        assert names == {"patientFilter", "encounterFilter"}
        assert len(registry.registrations()) == 3

    def test_same_name_replaces(self) -> None:
        registry = _registry()
        registry.register(FilterRegistration("patientFilter", Dimension.LOCATION, (Unrelated,)))
        assert registry.registration("patientFilter").entity_types == (Unrelated,)
        assert registry.filters_for(Patient, Dimension.LOCATION) == frozenset()
        assert registry.filters_for(Unrelated, Dimension.LOCATION) == {"patientFilter"}

    def test_unknown_registration(self) -> None:
        with pytest.raises(UnknownFilterError):
            _registry().registration("nope")


class TestClassMaps:
    def test_classes_filtered_by(self) -> None:
        class_map = _registry().classes_filtered_by(Dimension.LOCATION)
        assert class_map[Patient] == {"patientFilter"}
        assert class_map[Encounter] == {"encounterFilter"}

    def test_snapshot_is_read_only(self) -> None:
        class_map = _registry().classes_filtered_by(Dimension.LOCATION)
        with pytest.raises(TypeError):
            class_map[Unrelated] = frozenset({"x"})  # type: ignore[index]

    def test_unregistered_dimension_is_empty(self) -> None:
        assert dict(_registry().classes_filtered_by(Dimension.PROGRAM)) == {}

    def test_subclass_inherits_filters(self) -> None:
        assert _registry().filters_for(ArchivedPatient, Dimension.LOCATION) == {"patientFilter"}

    def test_unrelated_type_has_no_filters(self) -> None:
        assert _registry().filters_for(Unrelated, Dimension.LOCATION) == frozenset()

    def test_registration_after_read_is_visible(self) -> None:
        registry = _registry()
        registry.classes_filtered_by(Dimension.LOCATION)
        registry.register(FilterRegistration("other", Dimension.LOCATION, (Unrelated,)))
        assert Unrelated in registry.classes_filtered_by(Dimension.LOCATION)

    def test_rebuild(self) -> None:
        registry = _registry()
        before = registry.classes_filtered_by(Dimension.LOCATION)
        registry.rebuild()
        after = registry.classes_filtered_by(Dimension.LOCATION)
        assert before is not after
        assert dict(before) == dict(after)


class TestEnableDisable:
    def test_enabled_by_default(self) -> None:
        registry = _registry()
        assert registry.is_enabled("patientFilter")
        assert not registry.is_filter_disabled("patientFilter")

    def test_disable_and_reenable(self) -> None:
        registry = _registry()
        registry.set_filter_enabled("patientFilter", False)
        assert registry.is_filter_disabled("patientFilter")
        registry.set_filter_enabled("patientFilter", True)
        assert registry.is_enabled("patientFilter")

    def test_unknown_name_fails_fast(self) -> None:
        with pytest.raises(UnknownFilterError) as exc_info:
            _registry().set_filter_enabled("datafilter_typo", False)
        assert exc_info.value.filter_name == "datafilter_typo"

    def test_all_disabled(self) -> None:
        registry = _registry()
        names = registry.filters_for(Encounter, Dimension.LOCATION)
        assert not registry.all_disabled(names)
        registry.set_filter_enabled("encounterFilter", False)
        assert registry.all_disabled(names)

    def test_all_disabled_vacuous(self) -> None:
        assert _registry().all_disabled(frozenset())

    def test_concurrent_toggles_are_not_lost(self) -> None:
        names = [f"f{i}" for i in range(20)]
        registry = FilterRegistry(FilterRegistration(n, Dimension.LOCATION, (Patient,)) for n in names)
        threads = [
            threading.Thread(target=registry.set_filter_enabled, args=(n, False)) for n in names
        ]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        assert registry.all_disabled(names)
