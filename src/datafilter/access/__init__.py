"""Access – resolution of accessible scopes and the filter registry."""
from datafilter.access.constants import (
    NO_ACCESS,
    UNRESTRICTED,
    Dimension,
)
from datafilter.access.context import AccessContext
from datafilter.access.directory import InMemoryScopeDirectory, ScopeDirectory
from datafilter.access.grants import EntityRef, GrantStore, InMemoryGrantStore
from datafilter.access.kinds import (
    EncounterTypeRef,
    EntityKind,
    PropertyNames,
    encounter_type_ref,
    owning_scope_key,
)
from datafilter.access.login_location import LoginLocationFilter
from datafilter.access.properties import GlobalPropertyStore, InMemoryGlobalPropertyStore
from datafilter.access.registry import FilterRegistration, FilterRegistry
from datafilter.access.resolver import AccessResolver
from datafilter.access.snapshot import EntitySnapshot

__all__ = [
    "NO_ACCESS",
    "UNRESTRICTED",
    "AccessContext",
    "AccessResolver",
    "Dimension",
    "EncounterTypeRef",
    "EntityKind",
    "EntityRef",
    "EntitySnapshot",
    "FilterRegistration",
    "FilterRegistry",
    "GlobalPropertyStore",
    "GrantStore",
    "InMemoryGlobalPropertyStore",
    "InMemoryGrantStore",
    "InMemoryScopeDirectory",
    "LoginLocationFilter",
    "PropertyNames",
    "ScopeDirectory",
    "encounter_type_ref",
    "owning_scope_key",
]
