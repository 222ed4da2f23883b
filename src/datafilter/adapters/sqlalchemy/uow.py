"""SQLAlchemy adapter – SqlAlchemyUnitOfWork."""
from __future__ import annotations

import contextlib
from typing import Any

from sqlalchemy.orm import Session

from datafilter.access.context import AccessContext
from datafilter.adapters.sqlalchemy.session import DataFilterSessionContext


class SqlAlchemyUnitOfWork:
    """One filtered unit of work.

    Opens a fresh resolution cache, hands out the filter-bound current
    session, commits on success and rolls back on error.  Accessible scopes
    resolved inside never outlive the block.
    """

    def __init__(self, session_context: DataFilterSessionContext) -> None:
        self._context = session_context
        self._stack: contextlib.ExitStack | None = None
        self.session: Any = None

    def __enter__(self) -> SqlAlchemyUnitOfWork:
        stack = contextlib.ExitStack()
        stack.enter_context(AccessContext.unit_of_work())
        try:
            self.session = self._context.current_session()
        except BaseException:
            stack.close()
            raise
        self._stack = stack
        return self

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._context.remove()
            self.session = None
            if self._stack is not None:
                self._stack.close()
                self._stack = None

    @property
    def current(self) -> Session:
        """Re-acquire the session, re-binding filters for the current principal."""
        return self._context.current_session()

    def commit(self) -> None:
        self.session.commit()

    def rollback(self) -> None:
        self.session.rollback()


__all__ = ["SqlAlchemyUnitOfWork"]
