"""Access – AccessResolver.

Resolves, for a principal, the scope keys (person ids, program ids,
encounter type ids) it may read.  Resolution goes principal → effective
roles → granted bases → records, and every lookup it makes against the
stores runs with the resolution marker raised so that the lookups are not
themselves filtered or intercepted.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from datafilter.access.constants import (
    BASIS_TYPE_LOCATION,
    BASIS_TYPE_PROGRAM,
    ENTITY_TYPE_ROLE,
    NO_ACCESS,
    UNRESTRICTED,
    Dimension,
)
from datafilter.access.context import AccessContext
from datafilter.access.directory import ScopeDirectory
from datafilter.access.grants import EntityRef, GrantStore
from datafilter.access.registry import FilterRegistry
from datafilter.kernel.security import Principal
from datafilter.observability.logging import get_logger

_log = get_logger(__name__)


class AccessResolver:
    """Computes accessible scope keys, memoized per unit of work.

    Parameters
    ----------
    registry:
        Filter registry consulted by :meth:`is_filter_disabled`.
    grants:
        Store of role/user to basis grants.
    directory:
        Lookups against the host records (persons per basis, encounter types).
    """

    def __init__(self, registry: FilterRegistry, grants: GrantStore, directory: ScopeDirectory) -> None:
        self._registry = registry
        self._grants = grants
        self._directory = directory

    # ------------------------------------------------------------------
    # Scope keys
    # ------------------------------------------------------------------

    def accessible_scope_keys(
        self,
        principal: Principal | None,
        dimension: Dimension = Dimension.LOCATION,
    ) -> frozenset[str]:
        """Return the keys *principal* may access along *dimension*.

        Never empty: no access is encoded as :data:`NO_ACCESS`.  Super-users
        get :data:`UNRESTRICTED`, although callers are expected to bypass
        them before asking.
        """
        if principal is None:
            return NO_ACCESS
        if principal.is_super_user:
            return UNRESTRICTED

        cache = AccessContext.cache()
        key = ("scope", principal, dimension)
        if cache is not None and key in cache:
            return cache[key]

        with AccessContext.resolving():
            resolved = self._resolve(principal, dimension)
        result = frozenset(resolved) or NO_ACCESS
        if cache is not None:
            cache[key] = result
        _log.debug(
            "datafilter.scope_resolved",
            dimension=dimension.value,
            count=0 if result is NO_ACCESS else len(result),
        )
        return result

    def assigned_basis_ids(self, principal: Principal | None, basis_type: str) -> frozenset[str]:
        """Basis ids (locations, programs) granted to the principal's roles or to the user."""
        if principal is None:
            return frozenset()
        cache = AccessContext.cache()
        key = ("basis", principal, basis_type)
        if cache is not None and key in cache:
            return cache[key]
        with AccessContext.resolving():
            basis_ids = frozenset(self._grants.basis_ids(self._grantees(principal), basis_type))
        if cache is not None:
            cache[key] = basis_ids
        return basis_ids

    def _resolve(self, principal: Principal, dimension: Dimension) -> Iterable[str]:
        if dimension is Dimension.LOCATION:
            locations = self.assigned_basis_ids(principal, BASIS_TYPE_LOCATION)
            if not locations:
                return ()
            return self._directory.person_ids_for_basis(BASIS_TYPE_LOCATION, locations)
        if dimension is Dimension.PROGRAM:
            return self.assigned_basis_ids(principal, BASIS_TYPE_PROGRAM)
        if dimension is Dimension.ENCOUNTER_TYPE:
            hidden = self.hidden_encounter_type_ids(principal)
            return self._directory.encounter_type_ids() - hidden
        raise ValueError(f"Unsupported dimension: {dimension!r}")

    @staticmethod
    def _grantees(principal: Principal) -> list[EntityRef]:
        grantees = [EntityRef.role(name) for name in sorted(principal.role_names())]
        grantees.append(EntityRef.user(principal.user_id or principal.subject))
        return grantees

    # ------------------------------------------------------------------
    # Encounter type privileges
    # ------------------------------------------------------------------

    def view_privilege(self, encounter_type_id: Any) -> str | None:
        """Privilege required to view records of *encounter_type_id*; ``None`` means unrestricted."""
        if encounter_type_id is None:
            return None
        with AccessContext.resolving():
            return self._directory.view_privilege(encounter_type_id)

    def encounter_type_id(self, encounter_id: Any) -> Any | None:
        """Look the encounter type of *encounter_id* up directly in storage."""
        with AccessContext.resolving():
            return self._directory.encounter_type_id(encounter_id)

    def hidden_encounter_type_ids(self, principal: Principal | None) -> frozenset[str]:
        """Encounter types whose view privilege *principal* lacks."""
        if principal is not None and principal.is_super_user:
            return frozenset()
        with AccessContext.resolving():
            privileges = self._directory.view_privileges()
        return frozenset(
            str(type_id)
            for type_id, privilege in privileges.items()
            if privilege and (principal is None or not principal.has_privilege(privilege))
        )

    # ------------------------------------------------------------------
    # Programs
    # ------------------------------------------------------------------

    def program_roles(self) -> frozenset[str]:
        """Names of every role granted access to at least one program."""
        with AccessContext.resolving():
            return frozenset(self._grants.entity_ids(ENTITY_TYPE_ROLE, BASIS_TYPE_PROGRAM))

    def accessible_program_roles(self, principal: Principal | None) -> frozenset[str]:
        """Roles the principal may see providers in: its own, plus roles sharing one of its programs."""
        if principal is None:
            return frozenset()
        programs = self.accessible_scope_keys(principal, Dimension.PROGRAM)
        roles = set(principal.role_names())
        if programs is not NO_ACCESS:
            with AccessContext.resolving():
                roles |= self._grants.entity_ids(ENTITY_TYPE_ROLE, BASIS_TYPE_PROGRAM, programs)
        return frozenset(roles)

    # ------------------------------------------------------------------
    # Registry / administration
    # ------------------------------------------------------------------

    def is_filter_disabled(self, filter_name: str) -> bool:
        return self._registry.is_filter_disabled(filter_name)

    def grant_access(self, entity: EntityRef, basis: EntityRef) -> None:
        """Grant *entity* (role or user) access to *basis*; drops cached resolutions."""
        with AccessContext.resolving():
            self._grants.grant(entity, basis)
        AccessContext.invalidate()
        _log.info("datafilter.access_granted", entity=entity.identifier, basis_type=basis.type, basis=basis.identifier)

    def revoke_access(self, entity: EntityRef, basis: EntityRef) -> None:
        with AccessContext.resolving():
            self._grants.revoke(entity, basis)
        AccessContext.invalidate()
        _log.info("datafilter.access_revoked", entity=entity.identifier, basis_type=basis.type, basis=basis.identifier)


__all__ = ["AccessResolver"]
