"""Access – per unit-of-work access state held in contextvars.

Three pieces of state are bound to the current thread (and asyncio task):

* the *resolution depth*, raised while accessible scopes are being
  resolved so that nested loads triggered by the resolution itself are
  treated as already authorized instead of re-entering the filters;
* the *resolution cache*, alive for exactly one unit of work;
* the *lookup session*, the session a load check is running in, which
  lookups made during that check must use instead of the thread's own.
"""
from __future__ import annotations

import contextlib
import contextvars
from collections.abc import Iterator
from typing import Any

_DEPTH: contextvars.ContextVar[int] = contextvars.ContextVar(
    "_datafilter_resolution_depth", default=0
)
_CACHE: contextvars.ContextVar[dict[Any, frozenset[str]] | None] = contextvars.ContextVar(
    "_datafilter_resolution_cache", default=None
)
_LOOKUP_SESSION: contextvars.ContextVar[Any] = contextvars.ContextVar(
    "_datafilter_lookup_session", default=None
)


class AccessContext:
    """Explicit-lifecycle holder for the thread-bound access state."""

    @staticmethod
    def is_resolving() -> bool:
        return _DEPTH.get() > 0

    @staticmethod
    @contextlib.contextmanager
    def resolving() -> Iterator[None]:
        """Mark the enclosed block as resolution in progress; always unmarks."""
        token = _DEPTH.set(_DEPTH.get() + 1)
        try:
            yield
        finally:
            _DEPTH.reset(token)

    @staticmethod
    @contextlib.contextmanager
    def unit_of_work() -> Iterator[dict[Any, frozenset[str]]]:
        """Open a fresh resolution cache, discarded when the block exits."""
        cache: dict[Any, frozenset[str]] = {}
        token = _CACHE.set(cache)
        try:
            yield cache
        finally:
            _CACHE.reset(token)

    @staticmethod
    def cache() -> dict[Any, frozenset[str]] | None:
        """Return the current unit of work's cache, ``None`` outside one."""
        return _CACHE.get()

    @staticmethod
    @contextlib.contextmanager
    def using_session(session: Any) -> Iterator[None]:
        """Route lookups made inside the block to *session*."""
        token = _LOOKUP_SESSION.set(session)
        try:
            yield
        finally:
            _LOOKUP_SESSION.reset(token)

    @staticmethod
    def lookup_session() -> Any | None:
        return _LOOKUP_SESSION.get()

    @staticmethod
    def invalidate() -> None:
        cache = _CACHE.get()
        if cache is not None:
            cache.clear()


__all__ = ["AccessContext"]
