"""
Per-user persistence: one GitHub token per user plus append-only history.

Tables
------
- tokens:   user_id → TokenRecord            (upsert, last write wins)
- history:  (feature, user_id) → [HistoryRecord, ...]   (append only)

``Store`` is the interface features depend on. ``InMemoryStore`` is the
default backend; it lives for the process lifetime.
"""

from __future__ import annotations

import asyncio
import itertools
from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Protocol


def _now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class TokenRecord:
    user_id: str
    token: str
    updated_at: datetime = field(default_factory=_now)


@dataclass
class HistoryRecord:
    id: int
    user_id: str
    feature: str
    subject: str
    content: str
    created_at: datetime = field(default_factory=_now)


class Store(Protocol):
    async def upsert_token(self, user_id: str, token: str) -> None: ...

    async def get_token(self, user_id: str) -> str | None: ...

    async def delete_token(self, user_id: str) -> None: ...

    async def insert_history(
        self, feature: str, user_id: str, subject: str, content: str
    ) -> HistoryRecord: ...

    async def list_history(self, feature: str, user_id: str) -> list[HistoryRecord]: ...


class InMemoryStore:
    """Async-safe in-memory implementation of ``Store``."""

    def __init__(self) -> None:
        self._tokens: dict[str, TokenRecord] = {}
        self._history: dict[tuple[str, str], list[HistoryRecord]] = defaultdict(list)
        self._ids = itertools.count(1)
        self._lock = asyncio.Lock()

    async def upsert_token(self, user_id: str, token: str) -> None:
        async with self._lock:
            self._tokens[user_id] = TokenRecord(user_id=user_id, token=token)

    async def get_token(self, user_id: str) -> str | None:
        async with self._lock:
            record = self._tokens.get(user_id)
            return record.token if record else None

    async def delete_token(self, user_id: str) -> None:
        async with self._lock:
            self._tokens.pop(user_id, None)

    async def insert_history(
        self, feature: str, user_id: str, subject: str, content: str
    ) -> HistoryRecord:
        async with self._lock:
            record = HistoryRecord(
                id=next(self._ids),
                user_id=user_id,
                feature=feature,
                subject=subject,
                content=content,
            )
            self._history[(feature, user_id)].append(record)
            return record

    async def list_history(self, feature: str, user_id: str) -> list[HistoryRecord]:
        """All records for the user, newest first."""
        async with self._lock:
            records = list(self._history.get((feature, user_id), []))
        # Insertion order breaks timestamp ties
        return sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)
