"""Kernel error hierarchy – public re-export surface.

Hierarchy::

    BaseError
    ├── DomainError              (domain.py)
    │   └── ValidationError
    │       └── UnknownFilterError
    ├── ApplicationError         (application.py)
    │   ├── UnauthorizedError
    │   └── ForbiddenError
    │       └── RecordAccessDeniedError
    └── InfrastructureError      (infrastructure.py)
        └── ConfigurationUnavailableError
"""

from datafilter.kernel.errors.application import (
    ILLEGAL_RECORD_ACCESS_MESSAGE,
    ApplicationError,
    ForbiddenError,
    RecordAccessDeniedError,
    UnauthorizedError,
)
from datafilter.kernel.errors.base import BaseError
from datafilter.kernel.errors.domain import (
    DomainError,
    UnknownFilterError,
    ValidationError,
)
from datafilter.kernel.errors.infrastructure import (
    ConfigurationUnavailableError,
    InfrastructureError,
)

__all__ = [
    "ILLEGAL_RECORD_ACCESS_MESSAGE",
    "ApplicationError",
    "BaseError",
    "ConfigurationUnavailableError",
    "DomainError",
    "ForbiddenError",
    "InfrastructureError",
    "RecordAccessDeniedError",
    "UnauthorizedError",
    "UnknownFilterError",
    "ValidationError",
]
