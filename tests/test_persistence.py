"""
Tests for the JSON persistence adapter and the SQLite key-value store.

Uses a temporary DB file (in-memory SQLite would use a new DB per connection).
Run with: python -m pytest tests/test_persistence.py -v
"""
from __future__ import annotations

import asyncio
import json
import os
import tempfile
from datetime import date, timedelta, timezone
from pathlib import Path

import pytest

from tasktrack.config import Settings
from tasktrack.constants import STORAGE_KEY
from tasktrack.domain.common.errors import PersistenceError
from tasktrack.infra.db.kv_sqlite import SqliteKeyValueStore
from tasktrack.infra.persistence.json_tasks import JsonTaskPersistence, task_to_dict
from tasktrack.main import build_session

from .fakes import NOW, MemoryKeyValueStore, make_task


def _temp_db_path() -> str:
    fd, path = tempfile.mkstemp(suffix=".db")
    os.close(fd)
    return path


def _collection():
    return [
        make_task(1, "Plain"),
        make_task(2, "Described", description="details", due_date=date(2026, 12, 24)),
        make_task(3, "Done", completed=True, last_modified=NOW + timedelta(hours=1)),
    ]


def test_save_then_load_round_trips():
    async def run():
        kv = MemoryKeyValueStore()
        adapter = JsonTaskPersistence(kv)
        tasks = _collection()
        await adapter.save(tasks)
        assert set(await adapter.load()) == set(tasks)

    asyncio.run(run())


def test_storage_format_field_names():
    kv = MemoryKeyValueStore()
    asyncio.run(JsonTaskPersistence(kv).save(_collection()))
    stored = json.loads(kv.data[STORAGE_KEY])

    assert isinstance(stored, list) and len(stored) == 3
    assert set(stored[0]) == {
        "id", "text", "description", "dueDate", "completed", "createdAt", "lastModified", "completedAt",
    }
    assert stored[0]["dueDate"] is None
    assert stored[0]["completedAt"] is None
    assert stored[1]["dueDate"] == "2026-12-24"
    assert stored[2]["completed"] is True
    assert stored[2]["completedAt"] == stored[2]["lastModified"]


def test_save_overwrites_previous_content():
    async def run():
        kv = MemoryKeyValueStore()
        adapter = JsonTaskPersistence(kv)
        await adapter.save(_collection())
        await adapter.save([make_task(9, "Only")])
        assert [t.id for t in await adapter.load()] == [9]

    asyncio.run(run())


def test_missing_key_loads_empty():
    assert asyncio.run(JsonTaskPersistence(MemoryKeyValueStore()).load()) == []


@pytest.mark.parametrize(
    "payload",
    ["{not json", "", "null", '{"id": 1}', "42", "[" * 200_000],
    ids=["broken", "empty", "null", "object", "number", "deeply-nested"],
)
def test_corrupt_store_loads_empty(payload):
    """Scenario F: an unparsable store is an empty collection, not an error."""
    kv = MemoryKeyValueStore({STORAGE_KEY: payload})
    assert asyncio.run(JsonTaskPersistence(kv).load()) == []


def test_unreadable_store_loads_empty():
    kv = MemoryKeyValueStore()
    kv.fail_reads = True
    assert asyncio.run(JsonTaskPersistence(kv).load()) == []


def test_read_timeout_loads_empty():
    kv = MemoryKeyValueStore({STORAGE_KEY: "[]"})
    kv.delay = 0.2
    assert asyncio.run(JsonTaskPersistence(kv, timeout=0.01).load()) == []


def test_write_timeout_raises_persistence_error():
    kv = MemoryKeyValueStore()
    kv.delay = 0.2
    with pytest.raises(PersistenceError):
        asyncio.run(JsonTaskPersistence(kv, timeout=0.01).save(_collection()))


def test_malformed_entries_are_skipped():
    good = task_to_dict(make_task(1, "Good"))
    entries = [
        good,
        {"id": "x", "text": "bad id", "createdAt": NOW.isoformat()},
        {"id": 2, "text": "   ", "createdAt": NOW.isoformat()},
        {"id": 3, "text": "no created"},
        {"id": 4, "text": "bad due", "dueDate": "soon", "createdAt": NOW.isoformat()},
        "not an object",
        dict(good, text="duplicate id"),
    ]
    kv = MemoryKeyValueStore({STORAGE_KEY: json.dumps(entries)})
    tasks = asyncio.run(JsonTaskPersistence(kv).load())
    assert [(t.id, t.text) for t in tasks] == [(1, "Good")]


def test_load_repairs_invariants():
    created = NOW.isoformat()
    entries = [
        # legacy record: completed without completedAt, Z suffix, no lastModified
        {"id": 1, "text": "Legacy", "completed": True, "createdAt": "2026-10-01T08:00:00.000Z"},
        # completedAt left behind on an open task
        {"id": 2, "text": "Reopened", "completed": False, "createdAt": created,
         "lastModified": created, "completedAt": created},
        # lastModified earlier than createdAt
        {"id": 3, "text": "Skewed", "createdAt": created,
         "lastModified": (NOW - timedelta(days=1)).isoformat()},
    ]
    kv = MemoryKeyValueStore({STORAGE_KEY: json.dumps(entries)})
    legacy, reopened, skewed = asyncio.run(JsonTaskPersistence(kv).load())

    assert legacy.created_at.tzinfo is not None
    assert legacy.created_at.astimezone(timezone.utc).hour == 8
    assert legacy.completed_at == legacy.last_modified == legacy.created_at
    assert legacy.description == ""
    assert reopened.completed_at is None
    assert skewed.last_modified == skewed.created_at


def test_sqlite_store_persists_across_instances():
    async def run():
        path = _temp_db_path()
        try:
            kv = SqliteKeyValueStore(path)
            await kv.init()
            assert await kv.get("todos") is None
            await kv.set("todos", "[1]")
            await kv.set("todos", "[2]")

            reopened = SqliteKeyValueStore(path)
            await reopened.init()
            assert await reopened.get("todos") == "[2]"
            assert await reopened.get("other") is None
        finally:
            for leftover in (path, path + "-wal", path + "-shm"):
                if os.path.exists(leftover):
                    os.unlink(leftover)

    asyncio.run(run())


def test_sqlite_errors_become_persistence_errors():
    async def run():
        with tempfile.TemporaryDirectory() as tmp:
            # the directory itself is not an openable database file
            kv = SqliteKeyValueStore(tmp)
            with pytest.raises(PersistenceError):
                await kv.init()
            with pytest.raises(PersistenceError):
                await kv.set("todos", "[]")
            # load still degrades to empty
            assert await JsonTaskPersistence(kv).load() == []

    asyncio.run(run())


def test_sqlite_rejects_unencodable_value_as_persistence_error():
    async def run():
        with tempfile.TemporaryDirectory() as tmp:
            kv = SqliteKeyValueStore(os.path.join(tmp, "tasks.db"))
            await kv.init()
            await kv.set("todos", "[1]")
            with pytest.raises(PersistenceError):
                await kv.set("todos", "bad \ud800")
            assert await kv.get("todos") == "[1]"

    asyncio.run(run())


def test_build_session_round_trip_through_sqlite():
    async def run():
        with tempfile.TemporaryDirectory() as tmp:
            settings = Settings(
                db_path=Path(tmp) / "nested" / "tasks.db",
                timezone="Europe/Helsinki",
                storage_key="todos",
                store_timeout=5.0,
                log_level="INFO",
            )
            session = await build_session(settings)
            first = await session.create("Persist me", "note", "2026-10-30")
            second = await session.create("Finish me")
            await session.toggle_complete(second.id)

            restarted = await build_session(settings)
            assert set(restarted.list()) == set(session.list())
            summary = restarted.compute_view().summary
            assert (summary.remaining, summary.completed, summary.total) == (1, 1, 2)
            assert restarted.store.get(first.id).due_date == date(2026, 10, 30)

    asyncio.run(run())
