"""Kernel – framework-agnostic building blocks (errors, principal, context)."""

from datafilter.kernel.errors import (
    ApplicationError,
    BaseError,
    ConfigurationUnavailableError,
    DomainError,
    ForbiddenError,
    InfrastructureError,
    RecordAccessDeniedError,
    UnauthorizedError,
    UnknownFilterError,
    ValidationError,
)
from datafilter.kernel.security import Principal, Privilege, Role, SecurityContext

__all__ = [
    "ApplicationError",
    "BaseError",
    "ConfigurationUnavailableError",
    "DomainError",
    "ForbiddenError",
    "InfrastructureError",
    "Principal",
    "Privilege",
    "RecordAccessDeniedError",
    "Role",
    "SecurityContext",
    "UnauthorizedError",
    "UnknownFilterError",
    "ValidationError",
]
