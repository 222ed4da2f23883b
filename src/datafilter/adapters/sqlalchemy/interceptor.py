"""SQLAlchemy adapter – LoadInterceptor.

A safety net behind the query-time filters: every entity materialised
from the database is checked again, so records reached by paths the
filters do not cover (an unfiltered session, a join, a stale cache) are
still rejected.  Checks are skipped for daemon contexts and super-users.
Setting the ``datafilter.strictMode`` global property to ``false`` turns
this check off; the query-time filters stay active.
"""
from __future__ import annotations

from collections.abc import Sequence
from typing import Any, NoReturn

from sqlalchemy import inspect, select
from sqlalchemy.orm import InstanceState, Session

from datafilter.access.constants import GP_RUN_IN_STRICT_MODE, Dimension
from datafilter.access.context import AccessContext
from datafilter.access.kinds import EntityKind, encounter_type_ref, owning_scope_key
from datafilter.access.properties import GlobalPropertyStore, is_explicitly_false
from datafilter.access.registry import FilterRegistry
from datafilter.access.resolver import AccessResolver
from datafilter.access.snapshot import EntitySnapshot
from datafilter.adapters.sqlalchemy.schema import ClinicalSchema, primary_key
from datafilter.kernel.errors import RecordAccessDeniedError
from datafilter.kernel.security import Principal, SecurityContext
from datafilter.observability.logging import AuditLogger, get_logger

_log = get_logger(__name__)


def snapshot_of(entity: Any) -> EntitySnapshot:
    """Capture the loaded attribute values of *entity* in mapper order.

    Deferred or unloaded attributes are left out, so a missing property is
    told apart from one whose value is ``None``.
    """
    state = entity if isinstance(entity, InstanceState) else inspect(entity)
    entity = state.obj()
    loaded = state.dict
    names = tuple(name for name in state.mapper.attrs.keys() if name in loaded)
    identity = state.identity
    entity_id = identity[0] if identity is not None and len(identity) == 1 else identity
    return EntitySnapshot(
        entity=entity,
        entity_id=entity_id,
        property_names=names,
        state=tuple(loaded[name] for name in names),
    )


class LoadInterceptor:
    """Rejects loads of records outside the current principal's scope.

    Parameters
    ----------
    strict_by_default:
        Strictness used when the ``datafilter.strictMode`` property is unset.
    """

    def __init__(
        self,
        registry: FilterRegistry,
        resolver: AccessResolver,
        schema: ClinicalSchema,
        properties: GlobalPropertyStore,
        *,
        strict_by_default: bool = True,
        audit: AuditLogger | None = None,
    ) -> None:
        self._registry = registry
        self._resolver = resolver
        self._schema = schema
        self._properties = properties
        self._strict_by_default = strict_by_default
        self._audit = audit or AuditLogger()

    # ------------------------------------------------------------------
    # SQLAlchemy hook
    # ------------------------------------------------------------------

    def on_loaded(self, session: Session, instance: Any) -> None:
        """``loaded_as_persistent`` listener."""
        snapshot = snapshot_of(instance)
        self.on_entity_load(
            snapshot.entity,
            snapshot.entity_id,
            snapshot.state,
            snapshot.property_names,
            session,
        )

    # ------------------------------------------------------------------
    # Decision
    # ------------------------------------------------------------------

    def on_entity_load(
        self,
        entity: Any,
        entity_id: Any,
        state: Sequence[Any],
        property_names: Sequence[str],
        session: Session,
    ) -> None:
        """Allow the load by returning, reject it by raising :class:`RecordAccessDeniedError`."""
        if AccessContext.is_resolving():
            return
        if SecurityContext.is_daemon():
            _log.debug("datafilter.intercept_skipped", reason="daemon")
            return
        principal = SecurityContext.get_current()
        if principal is not None and principal.is_super_user:
            _log.debug("datafilter.intercept_skipped", reason="super_user")
            return

        entity_type = type(entity)
        by_location = self._registry.filters_for(entity_type, Dimension.LOCATION)
        by_encounter_type = self._registry.filters_for(entity_type, Dimension.ENCOUNTER_TYPE)
        check_location = bool(by_location) and not self._registry.all_disabled(by_location)
        check_encounter_type = bool(by_encounter_type) and not self._registry.all_disabled(by_encounter_type)
        if not (check_location or check_encounter_type):
            return

        kind = self._schema.kind_of(entity_type)
        if kind is None:
            return
        snapshot = EntitySnapshot(entity, entity_id, tuple(property_names), tuple(state))

        # lookups below run on the loading session and must not flush it
        with AccessContext.using_session(session), session.no_autoflush:
            if not self._is_strict():
                _log.debug("datafilter.intercept_skipped", reason="permissive_mode")
                return
            snapshot = self._complete(
                snapshot, self._required_properties(kind, check_location, check_encounter_type), session
            )
            if check_location:
                self._check_location(kind, snapshot, principal)
            if check_encounter_type:
                self._check_encounter_type(kind, snapshot, principal)

    def _is_strict(self) -> bool:
        with AccessContext.resolving():
            value = self._properties.get_property(GP_RUN_IN_STRICT_MODE)
        if value is None:
            return self._strict_by_default
        return not is_explicitly_false(value)

    def _required_properties(self, kind: EntityKind, check_location: bool, check_encounter_type: bool) -> list[str]:
        names = self._schema.names
        required: list[str] = []
        if check_location:
            owner = names.owning_person(kind)
            if owner is not None:
                required.append(owner)
        if check_encounter_type:
            if kind is EntityKind.ENCOUNTER:
                required.append(names.encounter_type)
            elif kind is EntityKind.OBS:
                required.append(names.encounter)
        return required

    @staticmethod
    def _complete(snapshot: EntitySnapshot, required: list[str], session: Session) -> EntitySnapshot:
        """Read properties the load left out (``load_only``, ``defer``) by primary key."""
        missing = [name for name in required if not snapshot.has(name)]
        if not missing:
            return snapshot
        entity_type = snapshot.entity_type
        stmt = select(*(getattr(entity_type, name) for name in missing)).where(
            primary_key(entity_type) == snapshot.entity_id
        )
        with AccessContext.resolving():
            row = session.execute(stmt).one_or_none()
        values = (None,) * len(missing) if row is None else tuple(row)
        _log.debug("datafilter.unloaded_properties_read", entity=entity_type.__name__, properties=missing)
        return EntitySnapshot(
            snapshot.entity,
            snapshot.entity_id,
            snapshot.property_names + tuple(missing),
            snapshot.state + values,
        )

    def _check_location(self, kind: EntityKind, snapshot: EntitySnapshot, principal: Principal | None) -> None:
        person_id = owning_scope_key(kind, snapshot, self._schema.names)
        if principal is None or person_id is None:
            self._deny(snapshot, principal, dimension=Dimension.LOCATION)
        accessible = self._resolver.accessible_scope_keys(principal, Dimension.LOCATION)
        if person_id not in accessible:
            self._deny(snapshot, principal, dimension=Dimension.LOCATION)

    def _check_encounter_type(self, kind: EntityKind, snapshot: EntitySnapshot, principal: Principal | None) -> None:
        ref = encounter_type_ref(kind, snapshot, self._schema.names)
        if ref.encounterless:
            return
        encounter_type_id = ref.encounter_type_id
        if ref.needs_lookup:
            encounter_type_id = self._resolver.encounter_type_id(ref.encounter_id)
        privilege = self._resolver.view_privilege(encounter_type_id)
        if privilege and (principal is None or not principal.has_privilege(privilege)):
            self._deny(snapshot, principal, dimension=Dimension.ENCOUNTER_TYPE, privilege=privilege)

    def _deny(
        self,
        snapshot: EntitySnapshot,
        principal: Principal | None,
        *,
        dimension: Dimension,
        privilege: str | None = None,
    ) -> NoReturn:
        self._audit.denied(
            principal,
            f"{snapshot.entity_type.__name__}:{snapshot.entity_id}",
            dimension=dimension.value,
        )
        raise RecordAccessDeniedError(permission=privilege)


__all__ = ["LoadInterceptor", "snapshot_of"]
