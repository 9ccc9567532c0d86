"""Document store interface for session records.

Sessions are stored as camelCase documents keyed by session id.  The
only concurrency guarantee the workflow needs is ``transaction``: an
atomic read-modify-write of a single session document.
"""

from __future__ import annotations

import asyncio
import copy
from collections.abc import Awaitable, Callable
from typing import Protocol

TransactionFn = Callable[[dict | None], Awaitable[dict | None]]


class SessionStore(Protocol):
    async def get(self, session_id: str) -> dict | None: ...

    async def update(self, session_id: str, updates: dict) -> None: ...

    async def transaction(self, session_id: str, fn: TransactionFn) -> dict | None:
        """Run ``fn`` on a snapshot and apply the updates it returns.

        ``fn`` receives a copy of the current document (``None`` if it
        does not exist) and returns top-level field updates, or ``None``
        to write nothing.  Returns the updates that were applied.
        """
        ...


class InMemorySessionStore:
    """Process-local ``SessionStore`` with one lock per session."""

    def __init__(self, documents: dict[str, dict] | None = None) -> None:
        self._documents: dict[str, dict] = dict(documents or {})
        self._locks: dict[str, asyncio.Lock] = {}

    def _lock(self, session_id: str) -> asyncio.Lock:
        return self._locks.setdefault(session_id, asyncio.Lock())

    async def get(self, session_id: str) -> dict | None:
        doc = self._documents.get(session_id)
        return copy.deepcopy(doc) if doc is not None else None

    async def update(self, session_id: str, updates: dict) -> None:
        async with self._lock(session_id):
            self._apply(session_id, updates)

    async def transaction(self, session_id: str, fn: TransactionFn) -> dict | None:
        async with self._lock(session_id):
            snapshot = await self.get(session_id)
            updates = await fn(snapshot)
            if updates:
                self._apply(session_id, updates)
            return updates

    def _apply(self, session_id: str, updates: dict) -> None:
        if session_id not in self._documents:
            raise KeyError(session_id)
        self._documents[session_id].update(copy.deepcopy(updates))
