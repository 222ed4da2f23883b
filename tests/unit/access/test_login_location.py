"""Unit tests for LoginLocationFilter."""

from __future__ import annotations

import pytest

from datafilter.access import (
    AccessResolver,
    EntityRef,
    FilterRegistry,
    InMemoryGlobalPropertyStore,
    InMemoryGrantStore,
    InMemoryScopeDirectory,
    LoginLocationFilter,
)
from datafilter.access.constants import GP_LOGIN_LOCATION_USER_PROPERTY
from datafilter.access.properties import is_explicitly_false
from datafilter.kernel.security import Principal, Role, SecurityContext

NURSE = Principal(subject="nurse", roles=frozenset({Role("Nurse")}))


@pytest.fixture()
def resolver() -> AccessResolver:
    grants = InMemoryGrantStore()
    grants.grant(EntityRef.role("Nurse"), EntityRef.location(10))
    return AccessResolver(FilterRegistry(), grants, InMemoryScopeDirectory())


class TestLoginLocationFilter:
    def test_unset_property_accepts_any_location(self, resolver: AccessResolver) -> None:
        login = LoginLocationFilter(resolver, InMemoryGlobalPropertyStore())
        assert login.accept(99, NURSE)

    def test_blank_property_accepts_any_location(self, resolver: AccessResolver) -> None:
        properties = InMemoryGlobalPropertyStore({GP_LOGIN_LOCATION_USER_PROPERTY: "   "})
        assert LoginLocationFilter(resolver, properties).accept(99, NURSE)

    def test_configured_restricts_to_granted(self, resolver: AccessResolver) -> None:
        properties = InMemoryGlobalPropertyStore({GP_LOGIN_LOCATION_USER_PROPERTY: "defaultLocation"})
        login = LoginLocationFilter(resolver, properties)
        assert login.accept(10, NURSE)
        assert not login.accept(99, NURSE)

    def test_configured_rejects_anonymous(self, resolver: AccessResolver) -> None:
        properties = InMemoryGlobalPropertyStore({GP_LOGIN_LOCATION_USER_PROPERTY: "defaultLocation"})
        assert not LoginLocationFilter(resolver, properties).accept(10)

    def test_super_user_accepts_any(self, resolver: AccessResolver) -> None:
        properties = InMemoryGlobalPropertyStore({GP_LOGIN_LOCATION_USER_PROPERTY: "defaultLocation"})
        root = Principal(subject="root", super_user=True)
        assert LoginLocationFilter(resolver, properties).accept(99, root)

    def test_falls_back_to_current_principal(self, resolver: AccessResolver) -> None:
        properties = InMemoryGlobalPropertyStore({GP_LOGIN_LOCATION_USER_PROPERTY: "defaultLocation"})
        login = LoginLocationFilter(resolver, properties)
        with SecurityContext.authenticated(NURSE):
            assert login.accept("10")


class TestGlobalProperties:
    @pytest.mark.parametrize("value", ["false", "FALSE", " False "])
    def test_explicitly_false(self, value: str) -> None:
        assert is_explicitly_false(value)

    @pytest.mark.parametrize("value", [None, "", "true", "no", "0"])
    def test_anything_else_is_not_false(self, value: str | None) -> None:
        assert not is_explicitly_false(value)

    def test_set_none_removes(self) -> None:
        store = InMemoryGlobalPropertyStore({"a": "1"})
        store.set_property("a", None)
        assert store.get_property("a") is None
