"""SQLAlchemy adapter – session filters and the SessionFilterActivator.

A *session filter* is a named, parameterised restriction enabled on one
:class:`~sqlalchemy.orm.Session` (kept in ``session.info``).  The
activator binds the current principal's accessible ids onto those filters
each time the session is acquired; :meth:`SessionFilterActivator.apply_criteria`
turns the enabled filters into ``with_loader_criteria`` options on every
ORM select.
"""
from __future__ import annotations

import dataclasses
from typing import Any

from sqlalchemy.orm import ORMExecuteState, Session, with_loader_criteria

from datafilter.access.constants import (
    FILTER_PARAM_ACCESSIBLE_ROLES,
    FILTER_PARAM_HIDDEN_ENCOUNTER_TYPE_IDS,
    FILTER_PARAM_PATIENT_IDS,
    FILTER_PARAM_PROGRAM_ROLES,
    Dimension,
    join_keys,
)
from datafilter.access.context import AccessContext
from datafilter.access.registry import FilterRegistry
from datafilter.access.resolver import AccessResolver
from datafilter.kernel.security import SecurityContext
from datafilter.observability.logging import get_logger

_log = get_logger(__name__)

_FILTERS_KEY = "datafilter.filters"


@dataclasses.dataclass
class SessionFilter:
    """Handle on a filter enabled for one session."""

    name: str
    parameters: dict[str, str] = dataclasses.field(default_factory=dict)

    def set_parameter(self, name: str, value: str) -> SessionFilter:
        self.parameters[name] = value
        return self


def enabled_filters(session: Session) -> dict[str, SessionFilter]:
    return session.info.setdefault(_FILTERS_KEY, {})


def get_enabled_filter(session: Session, name: str) -> SessionFilter | None:
    return enabled_filters(session).get(name)


def enable_filter(session: Session, name: str) -> SessionFilter:
    """Return the session's filter *name*, enabling it first if needed."""
    filters = enabled_filters(session)
    handle = filters.get(name)
    if handle is None:
        handle = filters[name] = SessionFilter(name)
    return handle


def disable_filter(session: Session, name: str) -> None:
    enabled_filters(session).pop(name, None)


class SessionFilterActivator:
    """Binds the accessible scope of the current principal onto a session."""

    def __init__(self, registry: FilterRegistry, resolver: AccessResolver) -> None:
        self._registry = registry
        self._resolver = resolver

    def bind(self, session: Session) -> Session:
        """Enable and parameterise the session's filters; returns the same session.

        Safe to call on every acquisition: the parameters are recomputed
        each time since the principal behind a pooled session can change.
        """
        if AccessContext.is_resolving():
            _log.debug("datafilter.bind_skipped", reason="resolution_in_progress")
            return session
        if SecurityContext.is_daemon():
            _log.debug("datafilter.bind_skipped", reason="daemon")
            return session

        principal = SecurityContext.get_current()
        if principal is not None and principal.is_super_user:
            enabled_filters(session).clear()
            _log.debug("datafilter.bind_skipped", reason="super_user")
            return session

        patient_ids = join_keys(self._resolver.accessible_scope_keys(principal, Dimension.LOCATION))
        for registration in self._registry.registrations(Dimension.LOCATION):
            self._bind(session, registration.name, {FILTER_PARAM_PATIENT_IDS: patient_ids})

        encounter_type_filters = self._registry.registrations(Dimension.ENCOUNTER_TYPE)
        if encounter_type_filters:
            hidden = join_keys(self._resolver.hidden_encounter_type_ids(principal))
            for registration in encounter_type_filters:
                self._bind(session, registration.name, {FILTER_PARAM_HIDDEN_ENCOUNTER_TYPE_IDS: hidden})

        program_filters = self._registry.registrations(Dimension.PROGRAM)
        if program_filters:
            parameters = {
                FILTER_PARAM_PROGRAM_ROLES: join_keys(self._resolver.program_roles()),
                FILTER_PARAM_ACCESSIBLE_ROLES: join_keys(self._resolver.accessible_program_roles(principal)),
            }
            for registration in program_filters:
                self._bind(session, registration.name, parameters)

        return session

    def _bind(self, session: Session, name: str, parameters: dict[str, str]) -> None:
        if not self._registry.is_enabled(name):
            disable_filter(session, name)
            return
        handle = get_enabled_filter(session, name) or enable_filter(session, name)
        for key, value in parameters.items():
            handle.set_parameter(key, value)

    # ------------------------------------------------------------------
    # do_orm_execute hook
    # ------------------------------------------------------------------

    def apply_criteria(self, orm_execute_state: ORMExecuteState) -> None:
        """``do_orm_execute`` listener adding the enabled filters' criteria to selects."""
        if (
            not orm_execute_state.is_select
            or orm_execute_state.is_column_load
            or orm_execute_state.is_relationship_load
        ):
            return
        if AccessContext.is_resolving() or SecurityContext.is_daemon():
            return

        options: list[Any] = []
        for name, handle in enabled_filters(orm_execute_state.session).items():
            if not self._registry.is_enabled(name):
                continue
            registration = self._registry.registration(name)
            if registration.condition is None:
                continue
            for entity_type in registration.entity_types:
                options.append(
                    with_loader_criteria(
                        entity_type,
                        registration.condition(entity_type, handle.parameters),
                        include_aliases=True,
                    )
                )
        if options:
            orm_execute_state.statement = orm_execute_state.statement.options(*options)


__all__ = [
    "SessionFilter",
    "SessionFilterActivator",
    "disable_filter",
    "enable_filter",
    "enabled_filters",
    "get_enabled_filter",
]
