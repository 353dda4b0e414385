"""Tests for postbox.participants - Producer and Consumer roles."""

from __future__ import annotations

import asyncio

import pytest

from postbox.core.broker import Broker
from postbox.core.config import Settings
from postbox.core.exceptions import PersistenceError
from postbox.delay import constant
from postbox.models.message import Message
from postbox.participants import Consumer, Producer
from postbox.persistence.memory import MemoryPersistence


@pytest.fixture
def broker() -> Broker:
    return Broker(MemoryPersistence(), constant(0), settings=Settings(persistence_mode="memory"))


class TestProducer:
    """Tests for Producer."""

    async def test_send_publishes_from_participant(self, broker: Broker):
        alice = Producer("alice", broker)

        msg = await alice.send("hi", recipient="bob")

        assert msg.sender == "alice"
        assert msg.recipient == "bob"
        assert alice.sent == [msg]
        assert broker.pending_count() == 1

    def test_registers_as_observer(self, broker: Broker):
        Producer("alice", broker)
        Producer("bob", broker, register=False)

        assert broker.observer_count() == 1

    def test_ignores_other_senders(self, broker: Broker):
        """The broadcast includes other senders' messages; they are dropped."""
        alice = Producer("alice", broker)
        foreign = Message.create("x", sender="bob", recipient="alice").mark_delivered()

        alice.notify(foreign, 0.1)

        assert alice.confirmations == []

    async def test_send_failure_not_recorded(self):
        class BrokenStore(MemoryPersistence):
            async def save(self, message: Message) -> None:
                raise PersistenceError("read-only")

        broker = Broker(BrokenStore(), constant(0), settings=Settings(persistence_mode="memory"))
        alice = Producer("alice", broker)

        with pytest.raises(PersistenceError):
            await alice.send("hi", recipient="bob")

        assert alice.sent == []

    def test_close_unregisters(self, broker: Broker):
        alice = Producer("alice", broker)

        alice.close()

        assert broker.observer_count() == 0


class TestConsumer:
    """Tests for Consumer."""

    async def test_consumer_drains_queue(self, broker: Broker):
        alice = Producer("alice", broker)
        bob = Producer("bob", broker)
        consumer = Consumer(broker, worker_id="c1")
        task = consumer.start()

        await alice.send("to bob", recipient="bob")
        await bob.send("to alice", recipient="alice")
        await asyncio.wait_for(broker.join(), timeout=2.0)
        task.cancel()

        assert [m.content for m, _ in alice.confirmations] == ["to bob"]
        assert [m.content for m, _ in bob.confirmations] == ["to alice"]
        assert task.get_name() == "c1"

    def test_default_worker_id(self, broker: Broker):
        assert Consumer(broker).worker_id.startswith("consumer-")
