"""Application-layer errors – authentication and record access."""

from __future__ import annotations

from typing import Any

from datafilter.kernel.errors.base import BaseError

ILLEGAL_RECORD_ACCESS_MESSAGE = "Illegal Record Access"


class ApplicationError(BaseError):
    """Cross-cutting application-layer concern."""

    default_code = "application_error"


class UnauthorizedError(ApplicationError):
    """Missing or invalid credentials."""

    default_code = "unauthorized"


class ForbiddenError(ApplicationError):
    """Authenticated principal lacks required permission."""

    default_code = "forbidden"

    def __init__(
        self,
        message: str = "Access denied",
        *,
        permission: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.permission = permission


class RecordAccessDeniedError(ForbiddenError):
    """A record outside the principal's accessible scope was loaded.

    The message is fixed so callers cannot tell a missing record from a
    hidden one.
    """

    default_code = "illegal_record_access"

    def __init__(self, *, permission: str | None = None, **kwargs: Any) -> None:
        super().__init__(ILLEGAL_RECORD_ACCESS_MESSAGE, permission=permission, **kwargs)


__all__ = [
    "ILLEGAL_RECORD_ACCESS_MESSAGE",
    "ApplicationError",
    "ForbiddenError",
    "RecordAccessDeniedError",
    "UnauthorizedError",
]
