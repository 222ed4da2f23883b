"""Kernel security – SecurityContext using contextvars."""

from __future__ import annotations

import contextlib
import contextvars
from collections.abc import Iterator

from datafilter.kernel.security.principal import Principal

_VAR: contextvars.ContextVar[Principal | None] = contextvars.ContextVar(
    "_security_context", default=None
)
_DAEMON: contextvars.ContextVar[bool] = contextvars.ContextVar(
    "_security_context_daemon", default=False
)


class SecurityContext:
    """Store and retrieve the current authenticated :class:`Principal` via
    :mod:`contextvars` so each thread and asyncio task has its own isolated
    context.

    Trusted internal work (scheduled tasks, startup) runs inside
    :meth:`daemon`, which makes every access check pass regardless of the
    principal.
    """

    @staticmethod
    def get_current() -> Principal | None:
        """Return the current principal, or ``None`` if absent."""
        return _VAR.get()

    @staticmethod
    def set_current(principal: Principal) -> contextvars.Token[Principal | None]:
        """Set the current principal and return a reset token."""
        return _VAR.set(principal)

    @staticmethod
    def reset(token: contextvars.Token[Principal | None]) -> None:
        _VAR.reset(token)

    @staticmethod
    def clear() -> None:
        """Remove the current principal from context (logout)."""
        _VAR.set(None)

    @staticmethod
    def require() -> Principal:
        """Return the current principal or raise ``UnauthorizedError``."""
        principal = _VAR.get()
        if principal is None:
            from datafilter.kernel.errors import UnauthorizedError

            raise UnauthorizedError("No authenticated principal in context")
        return principal

    @staticmethod
    @contextlib.contextmanager
    def authenticated(principal: Principal | None) -> Iterator[Principal | None]:
        """Run a block as *principal*, restoring the previous one afterwards."""
        token = _VAR.set(principal)
        try:
            yield principal
        finally:
            _VAR.reset(token)

    @staticmethod
    def is_daemon() -> bool:
        return _DAEMON.get()

    @staticmethod
    @contextlib.contextmanager
    def daemon() -> Iterator[None]:
        """Mark the current thread/task as a trusted system context."""
        token = _DAEMON.set(True)
        try:
            yield
        finally:
            _DAEMON.reset(token)


__all__ = ["SecurityContext"]
