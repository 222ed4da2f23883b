"""Infrastructure errors – I/O failures of collaborators."""

from __future__ import annotations

from typing import Any

from datafilter.kernel.errors.base import BaseError


class InfrastructureError(BaseError):
    """Infrastructure / I/O failure that is not a business rule violation."""

    default_code = "infrastructure_error"


class ConfigurationUnavailableError(InfrastructureError):
    """The global property store could not be read."""

    default_code = "configuration_unavailable"

    def __init__(
        self,
        property_name: str,
        message: str | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(message or f"Could not read global property '{property_name}'", **kwargs)
        self.property_name = property_name


__all__ = ["ConfigurationUnavailableError", "InfrastructureError"]
