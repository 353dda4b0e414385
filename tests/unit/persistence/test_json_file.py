"""Tests for JsonFilePersistence - the JSON array file store."""

from __future__ import annotations

import asyncio
import json
import time
from pathlib import Path

import pytest

from postbox.core.exceptions import PersistenceError
from postbox.models.message import Message
from postbox.persistence.json_file import JsonFilePersistence
from postbox.protocols.persistence import PersistenceProvider


class SlowReadPersistence(JsonFilePersistence):
    """JSON store whose first reads sleep for the given durations."""

    def __init__(self, path: Path, *delays: float) -> None:
        super().__init__(path)
        self._delays = list(delays)

    def _read_records(self):
        if self._delays:
            time.sleep(self._delays.pop(0))
        return super()._read_records()


@pytest.fixture
def store_path(tmp_path: Path) -> Path:
    return tmp_path / "nested" / "messages.json"


@pytest.fixture
async def store(store_path: Path) -> JsonFilePersistence:
    """Fresh, initialized JSON store in a temp directory."""
    s = JsonFilePersistence(store_path)
    await s.initialize()
    yield s
    await s.close()


# =============================================================================
# Initialization
# =============================================================================


class TestJsonFileInitialize:
    """Tests for store creation."""

    async def test_initialize_creates_empty_array(self, store_path: Path):
        """A missing store becomes an empty JSON array, directories included."""
        s = JsonFilePersistence(store_path)

        await s.initialize()

        assert json.loads(store_path.read_text()) == []

    async def test_initialize_keeps_existing_store(self, store_path: Path):
        """An existing store is left alone."""
        store_path.parent.mkdir(parents=True)
        msg = Message.create("kept", sender="A", recipient="B")
        store_path.write_text(json.dumps([msg.to_record()]))

        s = JsonFilePersistence(store_path)
        await s.initialize()

        assert [m.id for m in await s.load_all()] == [msg.id]

    async def test_save_without_initialize(self, store_path: Path):
        """The first save creates the store on demand."""
        s = JsonFilePersistence(store_path)

        await s.save(Message.create("hi", sender="A", recipient="B"))

        assert len(await s.load_all()) == 1

    def test_implements_protocol(self, store_path: Path):
        assert isinstance(JsonFilePersistence(store_path), PersistenceProvider)


# =============================================================================
# Save / Load
# =============================================================================


class TestJsonFileSave:
    """Tests for upsert semantics."""

    async def test_save_and_load(self, store: JsonFilePersistence):
        msg = Message.create("hi", sender="A", recipient="B")

        await store.save(msg)

        assert await store.load_all() == [msg]

    async def test_save_same_id_overwrites(self, store: JsonFilePersistence):
        """Saving an id twice keeps only the latest state."""
        first = Message(id="m1", content="v1", sender="A", recipient="B", timestamp_sent=1.0)
        second = first.model_copy(update={"content": "v2"})

        await store.save(first)
        await store.save(second)

        loaded = await store.load_all()
        assert len(loaded) == 1
        assert loaded[0].content == "v2"

    async def test_delivery_update_replaces_row(self, store: JsonFilePersistence):
        """The delivered state replaces the queued state for the same id."""
        msg = Message.create("hi", sender="A", recipient="B")

        await store.save(msg)
        await store.save(msg.mark_delivered())

        (loaded,) = await store.load_all()
        assert loaded.timestamp_delivered is not None
        assert loaded.timestamp_delivered >= loaded.timestamp_sent

    async def test_file_layout(self, store: JsonFilePersistence):
        """The store is a JSON array of flat message objects."""
        msg = Message(id="m1", content="hi", sender="A", recipient="B", timestamp_sent=10.0)

        await store.save(msg)

        assert json.loads(store.path.read_text()) == [
            {
                "id": "m1",
                "content": "hi",
                "sender": "A",
                "recipient": "B",
                "timestamp_sent": 10.0,
                "timestamp_delivered": None,
            }
        ]

    async def test_concurrent_saves_lose_nothing(self, store: JsonFilePersistence):
        """Concurrent read-modify-write saves are serialized."""
        messages = [Message.create(f"m{i}", sender="A", recipient="B") for i in range(40)]

        await asyncio.gather(*(store.save(m) for m in messages))

        loaded = await store.load_all()
        assert {m.id for m in loaded} == {m.id for m in messages}

    async def test_cancelled_save_does_not_overlap_next_save(self, store_path: Path):
        """A save cancelled mid-write still finishes before the next one reads."""
        s = SlowReadPersistence(store_path, 0.4, 0.1)
        await s.initialize()
        first = Message.create("first", sender="A", recipient="B")
        second = Message.create("second", sender="A", recipient="B")

        task = asyncio.create_task(s.save(first))
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        await s.save(second)

        loaded = await s.load_all()
        assert {m.id for m in loaded} == {first.id, second.id}


# =============================================================================
# Errors
# =============================================================================


class TestJsonFileErrors:
    """Tests for unreadable stores."""

    async def test_malformed_json(self, store: JsonFilePersistence):
        store.path.write_text("{not json")

        with pytest.raises(PersistenceError, match="Malformed JSON"):
            await store.load_all()

    async def test_not_an_array(self, store: JsonFilePersistence):
        store.path.write_text('{"id": "m1"}')

        with pytest.raises(PersistenceError, match="JSON array"):
            await store.save(Message.create("hi", sender="A", recipient="B"))

    async def test_invalid_record(self, store: JsonFilePersistence):
        store.path.write_text('[{"id": "m1"}]')

        with pytest.raises(PersistenceError, match="Malformed message record"):
            await store.load_all()

    async def test_failed_save_leaves_store_intact(self, store: JsonFilePersistence):
        """A save that fails on read does not clobber the file."""
        store.path.write_text("{not json")

        with pytest.raises(PersistenceError):
            await store.save(Message.create("hi", sender="A", recipient="B"))

        assert store.path.read_text() == "{not json"
