"""Tests for DatabasePersistence - the SQLAlchemy-backed store."""

from __future__ import annotations

from pathlib import Path

import pytest

from postbox.core.exceptions import PersistenceError
from postbox.models.message import Message
from postbox.persistence.database import DatabasePersistence
from postbox.persistence.models import MessageModel


@pytest.fixture
async def store() -> DatabasePersistence:
    """In-memory SQLite store."""
    s = DatabasePersistence()
    await s.initialize()
    yield s
    await s.close()


class TestDatabasePersistence:
    """Tests for save/load_all."""

    async def test_empty_store(self, store: DatabasePersistence):
        assert await store.load_all() == []

    async def test_save_and_load(self, store: DatabasePersistence):
        msg = Message.create("hi", sender="A", recipient="B")

        await store.save(msg)

        assert await store.load_all() == [msg]

    async def test_save_same_id_overwrites(self, store: DatabasePersistence):
        """Upsert by id: no duplicate rows."""
        first = Message(id="m1", content="v1", sender="A", recipient="B", timestamp_sent=1.0)

        await store.save(first)
        await store.save(first.model_copy(update={"content": "v2"}))

        loaded = await store.load_all()
        assert [m.content for m in loaded] == ["v2"]

    async def test_delivery_state_persisted(self, store: DatabasePersistence):
        msg = Message(id="m1", content="hi", sender="A", recipient="B", timestamp_sent=1.0)

        await store.save(msg)
        await store.save(msg.mark_delivered(at=3.0))

        (loaded,) = await store.load_all()
        assert loaded.timestamp_delivered == 3.0

    async def test_initialize_is_idempotent(self, store: DatabasePersistence):
        await store.save(Message.create("hi", sender="A", recipient="B"))

        await store.initialize()

        assert len(await store.load_all()) == 1

    async def test_save_initializes_lazily(self):
        s = DatabasePersistence()

        await s.save(Message.create("hi", sender="A", recipient="B"))

        assert len(await s.load_all()) == 1
        await s.close()

    async def test_sqlite_file_survives_reopen(self, tmp_path: Path):
        """A file database keeps state across provider instances."""
        url = f"sqlite:///{tmp_path / 'messages.db'}"
        msg = Message.create("hi", sender="A", recipient="B")

        first = DatabasePersistence(url)
        await first.initialize()
        await first.save(msg)
        await first.close()

        second = DatabasePersistence(url)
        await second.initialize()
        assert [m.id for m in await second.load_all()] == [msg.id]
        await second.close()

    async def test_malformed_row_raises_persistence_error(self, store: DatabasePersistence):
        """A row that fails Message validation surfaces as PersistenceError."""
        with store.session() as session:
            session.add(
                MessageModel(
                    id="m1",
                    content="hi",
                    sender="A",
                    recipient="B",
                    timestamp_sent=5.0,
                    timestamp_delivered=1.0,
                )
            )

        with pytest.raises(PersistenceError, match="Malformed message row"):
            await store.load_all()
