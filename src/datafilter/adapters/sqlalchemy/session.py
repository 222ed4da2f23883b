"""SQLAlchemy adapter – DataFilterSessionContext."""
from __future__ import annotations

from sqlalchemy.orm import Session, scoped_session

from datafilter.adapters.sqlalchemy.activator import SessionFilterActivator


class DataFilterSessionContext:
    """Hands out the thread's current session with its filters bound.

    The activator runs on every acquisition; lookups made while resolving
    the accessible scope acquire the session through here too and get it
    back untouched.
    """

    def __init__(self, sessions: scoped_session[Session], activator: SessionFilterActivator) -> None:
        self._sessions = sessions
        self._activator = activator

    def current_session(self) -> Session:
        return self._activator.bind(self._sessions())

    def remove(self) -> None:
        """Close and discard the current thread's session."""
        self._sessions.remove()


__all__ = ["DataFilterSessionContext"]
