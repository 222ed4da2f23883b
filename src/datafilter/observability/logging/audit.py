"""Observability – AuditLogger.

Every rejected record load leaves one ``audit.access`` entry behind.
"""
from __future__ import annotations

import datetime
from enum import Enum
from typing import Any

from datafilter.observability.logging.processors import get_logger


class AuditOutcome(str, Enum):
    SUCCESS = "success"
    DENIED = "denied"


def _principal_id(principal: Any) -> str:
    if principal is None:
        return "anonymous"
    return getattr(principal, "subject", None) or str(principal)


class AuditLogger:
    """Writes access decisions as structured ``WARNING`` events.

    The level is fixed so entries survive a restrictive log level.  Pass
    ``logger`` to route entries somewhere other than the ``audit`` logger.
    """

    def __init__(self, service: str = "datafilter", logger: Any = None) -> None:
        self._service = service
        self._log = logger if logger is not None else get_logger("audit")

    def log_access(
        self,
        principal: Any,
        resource: str,
        action: str,
        outcome: AuditOutcome | str = AuditOutcome.SUCCESS,
        **extra: Any,
    ) -> None:
        """Record that *principal* performed *action* on *resource* (``"Obs:12"``)."""
        self._log.warning(
            "audit.access",
            service=self._service,
            principal_id=_principal_id(principal),
            resource=resource,
            action=action,
            outcome=outcome.value if isinstance(outcome, AuditOutcome) else str(outcome),
            timestamp=datetime.datetime.now(datetime.timezone.utc).isoformat(),
            **extra,
        )

    def denied(self, principal: Any, resource: str, **extra: Any) -> None:
        self.log_access(principal, resource, "load", AuditOutcome.DENIED, **extra)


__all__ = ["AuditLogger", "AuditOutcome"]
