"""SQLAlchemy adapter – grant store, global property store and scope directory.

Every store takes a zero-argument ``session_provider`` returning the
current :class:`~sqlalchemy.orm.Session`, normally
:meth:`DataFilterSessionContext.current_session`, so lookups share the
caller's transaction.  During a load check the provider returns the
loading session instead.
"""
from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any

from sqlalchemy import String, and_, delete, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column

from datafilter.access.constants import BASIS_TYPE_LOCATION
from datafilter.access.directory import ScopeDirectory
from datafilter.access.grants import EntityRef, GrantStore
from datafilter.access.properties import GlobalPropertyStore
from datafilter.adapters.sqlalchemy.schema import ClinicalSchema, coerce_keys, primary_key
from datafilter.kernel.errors import ConfigurationUnavailableError

SessionProvider = Callable[[], Session]


class DataFilterBase(DeclarativeBase):
    """Declarative base for the tables owned by datafilter."""


class EntityBasisMap(DataFilterBase):
    """One grant: ``entity`` (a role or user) may access ``basis`` (a location or program)."""

    __tablename__ = "datafilter_entity_basis_map"

    entity_identifier: Mapped[str] = mapped_column(String(127), primary_key=True)
    entity_type: Mapped[str] = mapped_column(String(255), primary_key=True)
    basis_identifier: Mapped[str] = mapped_column(String(127), primary_key=True)
    basis_type: Mapped[str] = mapped_column(String(255), primary_key=True)


class GlobalProperty(DataFilterBase):
    __tablename__ = "global_property"

    property: Mapped[str] = mapped_column(String(255), primary_key=True)
    property_value: Mapped[str | None] = mapped_column(String(4000), nullable=True)


# ---------------------------------------------------------------------------
# SqlAlchemyGrantStore
# ---------------------------------------------------------------------------


class SqlAlchemyGrantStore(GrantStore):
    """Grant store backed by the ``datafilter_entity_basis_map`` table."""

    def __init__(self, session_provider: SessionProvider) -> None:
        self._session = session_provider

    def basis_ids(self, entities: Iterable[EntityRef], basis_type: str) -> set[str]:
        pairs = [(e.identifier, e.type) for e in entities]
        if not pairs:
            return set()
        stmt = select(EntityBasisMap.basis_identifier).where(
            EntityBasisMap.basis_type == basis_type,
            or_(*(
                and_(EntityBasisMap.entity_identifier == ident, EntityBasisMap.entity_type == etype)
                for ident, etype in pairs
            )),
        )
        return set(self._session().execute(stmt).scalars())

    def entity_ids(self, entity_type: str, basis_type: str, basis_ids: Iterable[str] | None = None) -> set[str]:
        stmt = select(EntityBasisMap.entity_identifier).where(
            EntityBasisMap.entity_type == entity_type,
            EntityBasisMap.basis_type == basis_type,
        )
        if basis_ids is not None:
            stmt = stmt.where(EntityBasisMap.basis_identifier.in_([str(b) for b in basis_ids]))
        return set(self._session().execute(stmt).scalars())

    def grant(self, entity: EntityRef, basis: EntityRef) -> None:
        session = self._session()
        key = (entity.identifier, entity.type, basis.identifier, basis.type)
        if session.get(EntityBasisMap, key) is None:
            session.add(EntityBasisMap(
                entity_identifier=entity.identifier,
                entity_type=entity.type,
                basis_identifier=basis.identifier,
                basis_type=basis.type,
            ))
            session.flush()

    def revoke(self, entity: EntityRef, basis: EntityRef) -> None:
        session = self._session()
        session.execute(
            delete(EntityBasisMap).where(
                EntityBasisMap.entity_identifier == entity.identifier,
                EntityBasisMap.entity_type == entity.type,
                EntityBasisMap.basis_identifier == basis.identifier,
                EntityBasisMap.basis_type == basis.type,
            )
        )


# ---------------------------------------------------------------------------
# SqlAlchemyGlobalPropertyStore
# ---------------------------------------------------------------------------


class SqlAlchemyGlobalPropertyStore(GlobalPropertyStore):
    """Global properties read from the ``global_property`` table.

    Database failures surface as :class:`ConfigurationUnavailableError`:
    deciding access without knowing the configuration is not an option.
    """

    def __init__(self, session_provider: SessionProvider) -> None:
        self._session = session_provider

    def get_property(self, name: str) -> str | None:
        try:
            return self._session().execute(
                select(GlobalProperty.property_value).where(GlobalProperty.property == name)
            ).scalar_one_or_none()
        except SQLAlchemyError as exc:
            raise ConfigurationUnavailableError(name, cause=exc) from exc

    def set_property(self, name: str, value: str | None) -> None:
        session = self._session()
        existing = session.get(GlobalProperty, name)
        if existing is None:
            session.add(GlobalProperty(property=name, property_value=value))
        else:
            existing.property_value = value
        session.flush()


# ---------------------------------------------------------------------------
# SqlAlchemyScopeDirectory
# ---------------------------------------------------------------------------


class SqlAlchemyScopeDirectory(ScopeDirectory):
    """Lookups against the host tables described by a :class:`ClinicalSchema`."""

    def __init__(self, schema: ClinicalSchema, session_provider: SessionProvider) -> None:
        self._schema = schema
        self._session = session_provider

    def person_ids_for_basis(self, basis_type: str, basis_ids: Iterable[str]) -> set[str]:
        if basis_type != BASIS_TYPE_LOCATION or self._schema.person_location is None:
            return set()
        person_column, location_column = self._schema.person_location
        wanted = coerce_keys(location_column, [str(b) for b in basis_ids])
        if not wanted:
            return set()
        stmt = select(person_column).where(location_column.in_(wanted)).distinct()
        return {str(pid) for pid in self._session().execute(stmt).scalars()}

    def encounter_type_ids(self) -> set[str]:
        encounter_type = self._schema.encounter_type
        if encounter_type is None:
            return set()
        rows = self._session().execute(select(primary_key(encounter_type))).scalars()
        return {str(type_id) for type_id in rows}

    def view_privileges(self) -> Mapping[str, str]:
        encounter_type = self._schema.encounter_type
        if encounter_type is None:
            return {}
        privilege = getattr(encounter_type, self._schema.names.view_privilege)
        rows = self._session().execute(
            select(primary_key(encounter_type), privilege).where(privilege.is_not(None))
        )
        return {str(type_id): priv for type_id, priv in rows}

    def view_privilege(self, encounter_type_id: Any) -> str | None:
        encounter_type = self._schema.encounter_type
        if encounter_type is None:
            return None
        pk = primary_key(encounter_type)
        privilege = getattr(encounter_type, self._schema.names.view_privilege)
        return self._session().execute(
            select(privilege).where(pk == encounter_type_id)
        ).scalar_one_or_none()

    def encounter_type_id(self, encounter_id: Any) -> Any | None:
        encounter = self._schema.encounter
        if encounter is None:
            return None
        type_column = getattr(encounter, self._schema.names.encounter_type)
        return self._session().execute(
            select(type_column).where(primary_key(encounter) == encounter_id)
        ).scalar_one_or_none()


__all__ = [
    "DataFilterBase",
    "EntityBasisMap",
    "GlobalProperty",
    "SqlAlchemyGlobalPropertyStore",
    "SqlAlchemyGrantStore",
    "SqlAlchemyScopeDirectory",
]
