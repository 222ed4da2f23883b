"""Domain errors – misuse of the filter registration model."""

from __future__ import annotations

from typing import Any

from datafilter.kernel.errors.base import BaseError


class DomainError(BaseError):
    """Raised when a registration rule is violated."""

    default_code = "domain_error"


class ValidationError(DomainError):
    """Input data does not meet validation rules.

    ``errors`` is a list of field-level validation failures.
    """

    default_code = "validation_error"

    def __init__(
        self,
        message: str,
        *,
        errors: list[dict[str, Any]] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message, **kwargs)
        self.errors: list[dict[str, Any]] = errors or []

    def to_dict(self) -> dict[str, Any]:
        base = super().to_dict()
        base["errors"] = self.errors
        return base


class UnknownFilterError(ValidationError):
    """An administrative call named a filter that was never registered."""

    default_code = "unknown_filter"

    def __init__(self, filter_name: str, **kwargs: Any) -> None:
        super().__init__(f"No filter registered with name '{filter_name}'", **kwargs)
        self.filter_name = filter_name


__all__ = [
    "DomainError",
    "UnknownFilterError",
    "ValidationError",
]
