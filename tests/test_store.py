"""Tests for tools_hub.store — tokens and history."""

from datetime import datetime, timezone

import pytest

from tools_hub.store import InMemoryStore


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


# ── Tokens ─────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_token_upsert_last_write_wins(store):
    await store.upsert_token("u1", "first")
    await store.upsert_token("u1", "second")

    assert await store.get_token("u1") == "second"


@pytest.mark.asyncio
async def test_tokens_are_per_user(store):
    await store.upsert_token("u1", "t1")

    assert await store.get_token("u2") is None


@pytest.mark.asyncio
async def test_delete_token(store):
    await store.upsert_token("u1", "t1")
    await store.delete_token("u1")
    await store.delete_token("never-stored")

    assert await store.get_token("u1") is None


# ── History ────────────────────────────────────────────────────
@pytest.mark.asyncio
async def test_history_newest_first(store):
    await store.insert_history("documentation", "u1", "https://github.com/a/one", "doc 1")
    await store.insert_history("documentation", "u1", "https://github.com/a/two", "doc 2")

    records = await store.list_history("documentation", "u1")

    assert [r.content for r in records] == ["doc 2", "doc 1"]


@pytest.mark.asyncio
async def test_history_equal_timestamps_ordered_by_insertion(store):
    first = await store.insert_history("resume", "u1", "octo", "a")
    second = await store.insert_history("resume", "u1", "octo", "b")
    same = datetime(2024, 1, 1, tzinfo=timezone.utc)
    first.created_at = second.created_at = same

    records = await store.list_history("resume", "u1")

    assert [r.id for r in records] == [second.id, first.id]


@pytest.mark.asyncio
async def test_history_scoped_by_feature_and_user(store):
    await store.insert_history("documentation", "u1", "s", "doc")
    await store.insert_history("resume", "u1", "s", "resume")
    await store.insert_history("documentation", "u2", "s", "other")

    records = await store.list_history("documentation", "u1")

    assert [r.content for r in records] == ["doc"]
    assert await store.list_history("resume", "u3") == []

