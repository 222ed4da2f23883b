"""SQLAlchemy adapter – session filters, load interceptor, stores, UoW."""
from datafilter.adapters.sqlalchemy.schema import ClinicalSchema
from datafilter.adapters.sqlalchemy.stores import (
    DataFilterBase,
    EntityBasisMap,
    GlobalProperty,
    SqlAlchemyGlobalPropertyStore,
    SqlAlchemyGrantStore,
    SqlAlchemyScopeDirectory,
)
from datafilter.adapters.sqlalchemy.activator import SessionFilter, SessionFilterActivator
from datafilter.adapters.sqlalchemy.interceptor import LoadInterceptor
from datafilter.adapters.sqlalchemy.session import DataFilterSessionContext
from datafilter.adapters.sqlalchemy.uow import SqlAlchemyUnitOfWork
from datafilter.adapters.sqlalchemy.facade import DataFilter

__all__ = [
    "ClinicalSchema",
    "DataFilter",
    "DataFilterBase",
    "DataFilterSessionContext",
    "EntityBasisMap",
    "GlobalProperty",
    "LoadInterceptor",
    "SessionFilter",
    "SessionFilterActivator",
    "SqlAlchemyGlobalPropertyStore",
    "SqlAlchemyGrantStore",
    "SqlAlchemyScopeDirectory",
    "SqlAlchemyUnitOfWork",
]
