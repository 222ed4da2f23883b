"""Observability – structlog processors and get_logger helper."""
from __future__ import annotations

from typing import Any

import structlog

from datafilter.kernel.security import SecurityContext


class PrincipalProcessor:
    """structlog processor that injects the acting principal into log events.

    Adds ``principal`` (the subject) when a principal is authenticated and
    ``daemon=True`` when the event is emitted from a trusted system context.

    Usage::

        structlog.configure(processors=[PrincipalProcessor(), ...])
    """

    def __call__(
        self,
        logger: Any,           # noqa: ARG002
        method_name: str,      # noqa: ARG002
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        principal = SecurityContext.get_current()
        if principal is not None:
            event_dict.setdefault("principal", principal.subject)
        if SecurityContext.is_daemon():
            event_dict.setdefault("daemon", True)
        return event_dict


def get_logger(name: str | None = None, **initial_values: Any) -> Any:
    """Return a bound structlog logger.

    Parameters
    ----------
    name:
        Logger name (typically ``__name__`` of the calling module).
    **initial_values:
        Key-value pairs to bind on the returned logger.
    """
    logger = structlog.get_logger(name)
    if initial_values:
        logger = logger.bind(**initial_values)
    return logger


__all__ = ["PrincipalProcessor", "get_logger"]
