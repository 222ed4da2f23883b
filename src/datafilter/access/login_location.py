"""Access – LoginLocationFilter.

Restricts the locations a user may pick at login to those its roles are
granted, once the ``datafilter.loginLocationUserProperty`` global property
is configured.
"""
from __future__ import annotations

from datafilter.access.constants import BASIS_TYPE_LOCATION, GP_LOGIN_LOCATION_USER_PROPERTY
from datafilter.access.context import AccessContext
from datafilter.access.properties import GlobalPropertyStore
from datafilter.access.resolver import AccessResolver
from datafilter.kernel.security import Principal, SecurityContext


class LoginLocationFilter:
    def __init__(self, resolver: AccessResolver, properties: GlobalPropertyStore) -> None:
        self._resolver = resolver
        self._properties = properties

    def accept(self, location_id: object, principal: Principal | None = None) -> bool:
        """Return whether *location_id* may be used as the login location."""
        with AccessContext.resolving():
            configured = self._properties.get_property(GP_LOGIN_LOCATION_USER_PROPERTY)
        if configured is None or not configured.strip():
            return True
        principal = principal if principal is not None else SecurityContext.get_current()
        if principal is not None and principal.is_super_user:
            return True
        return str(location_id) in self._resolver.assigned_basis_ids(principal, BASIS_TYPE_LOCATION)


__all__ = ["LoginLocationFilter"]
