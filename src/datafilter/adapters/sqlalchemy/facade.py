"""SQLAlchemy adapter – DataFilter.

Wires the registry, stores, resolver, activator and interceptor for one
:class:`ClinicalSchema` and installs them as event listeners on a
``sessionmaker``.

Example::

    data_filter = DataFilter(schema, sessionmaker(engine))
    data_filter.install()
    with SecurityContext.authenticated(principal):
        with data_filter.unit_of_work() as uow:
            patients = uow.session.scalars(select(Patient)).all()
"""
from __future__ import annotations

from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, scoped_session, sessionmaker

from datafilter.access.context import AccessContext
from datafilter.access.login_location import LoginLocationFilter
from datafilter.access.registry import FilterRegistry
from datafilter.access.resolver import AccessResolver
from datafilter.adapters.sqlalchemy.activator import SessionFilterActivator
from datafilter.adapters.sqlalchemy.interceptor import LoadInterceptor
from datafilter.adapters.sqlalchemy.schema import ClinicalSchema
from datafilter.adapters.sqlalchemy.session import DataFilterSessionContext
from datafilter.adapters.sqlalchemy.stores import (
    SqlAlchemyGlobalPropertyStore,
    SqlAlchemyGrantStore,
    SqlAlchemyScopeDirectory,
)
from datafilter.adapters.sqlalchemy.uow import SqlAlchemyUnitOfWork
from datafilter.config.settings import DataFilterSettings
from datafilter.observability.logging import AuditLogger, JsonLoggerFactory, get_logger

_log = get_logger(__name__)


class DataFilter:
    """Record-level access control for the sessions of one ``sessionmaker``.

    Parameters
    ----------
    schema:
        Host classes taking part in filtering.
    session_factory:
        The application's ``sessionmaker``; listeners are attached to it,
        so other factories are left alone.
    settings:
        Startup settings; defaults to :class:`DataFilterSettings` defaults.
    """

    def __init__(
        self,
        schema: ClinicalSchema,
        session_factory: sessionmaker[Session],
        settings: DataFilterSettings | None = None,
    ) -> None:
        self.schema = schema
        self.settings = settings or DataFilterSettings()
        self.session_factory = session_factory
        self.sessions: scoped_session[Session] = scoped_session(session_factory)

        self.registry = FilterRegistry(schema.registrations())
        for name in self.settings.disabled_filters:
            self.registry.set_filter_enabled(name, False)

        provider = self._lookup_session
        self.grants = SqlAlchemyGrantStore(provider)
        self.properties = SqlAlchemyGlobalPropertyStore(provider)
        self.directory = SqlAlchemyScopeDirectory(schema, provider)

        self.resolver = AccessResolver(self.registry, self.grants, self.directory)
        self.activator = SessionFilterActivator(self.registry, self.resolver)
        self.interceptor = LoadInterceptor(
            self.registry,
            self.resolver,
            schema,
            self.properties,
            strict_by_default=self.settings.strict_mode,
            audit=AuditLogger(service=self.settings.audit_service),
        )
        self.session_context = DataFilterSessionContext(self.sessions, self.activator)
        self._installed = False

    @classmethod
    def from_url(
        cls,
        database_url: str,
        schema: ClinicalSchema,
        settings: DataFilterSettings | None = None,
        **engine_kwargs: Any,
    ) -> DataFilter:
        """Build a sync engine and ``sessionmaker`` for *database_url*."""
        engine = create_engine(database_url, **engine_kwargs)
        return cls(schema, sessionmaker(engine, expire_on_commit=False), settings)

    def _lookup_session(self) -> Session:
        # a load check in progress pins its own session
        session = AccessContext.lookup_session()
        if session is not None:
            return session
        return self.session_context.current_session()

    # ------------------------------------------------------------------
    # Listeners
    # ------------------------------------------------------------------

    def install(self) -> DataFilter:
        """Attach the query-time and load-time hooks to the session factory."""
        if self._installed:
            return self
        if self.settings.configure_logging:
            JsonLoggerFactory.configure(self.settings.log_level_number)
        event.listen(self.session_factory, "do_orm_execute", self.activator.apply_criteria)
        event.listen(self.session_factory, "loaded_as_persistent", self.interceptor.on_loaded)
        self._installed = True
        _log.info(
            "datafilter.installed",
            filters=sorted(r.name for r in self.registry.registrations()),
            settings=self.settings.as_dict(),
        )
        return self

    def uninstall(self) -> None:
        if not self._installed:
            return
        event.remove(self.session_factory, "do_orm_execute", self.activator.apply_criteria)
        event.remove(self.session_factory, "loaded_as_persistent", self.interceptor.on_loaded)
        self._installed = False

    @property
    def installed(self) -> bool:
        return self._installed

    # ------------------------------------------------------------------
    # Entry points
    # ------------------------------------------------------------------

    def unit_of_work(self) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(self.session_context)

    def current_session(self) -> Session:
        """The current thread's session with the current principal's filters bound."""
        return self.session_context.current_session()

    def login_location_filter(self) -> LoginLocationFilter:
        return LoginLocationFilter(self.resolver, self.properties)


__all__ = ["DataFilter"]
