"""Kernel security – Principal, Roles, Privileges and the SecurityContext."""
from datafilter.kernel.security.principal import SUPERUSER_ROLE, Principal, Privilege, Role
from datafilter.kernel.security.security_context import SecurityContext

__all__ = [
    "SUPERUSER_ROLE",
    "Principal",
    "Privilege",
    "Role",
    "SecurityContext",
]
