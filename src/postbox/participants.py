"""Producer and consumer roles.

Producers publish messages through a broker and observe their own
deliveries; consumers drain the broker queue.

Example:
    >>> import asyncio
    >>> from postbox.core.broker import Broker
    >>> from postbox.delay import constant
    >>> from postbox.participants import Consumer, Producer
    >>> from postbox.persistence.memory import MemoryPersistence
    >>> async def example():
    ...     broker = Broker(MemoryPersistence(), constant(0))
    ...     alice = Producer("alice", broker)
    ...     consumer = Consumer(broker)
    ...     task = consumer.start()
    ...     await alice.send("hi", recipient="bob")
    ...     await broker.join()
    ...     task.cancel()
    ...     return [m.content for m, _ in alice.confirmations]
    >>> asyncio.run(example())
    ['hi']
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from postbox.models.message import Message

if TYPE_CHECKING:
    from postbox.core.broker import Broker

logger = logging.getLogger("postbox.participants")


class Producer:
    """Publishes messages and collects delivery confirmations for them.

    The producer registers itself as a broker observer. The broker tells
    every observer about every delivery, so ``notify`` drops messages that
    someone else sent.

    Args:
        participant_id: Sender identity stamped on outgoing messages.
        broker: Broker to publish through.
        register: Register as an observer on construction.
    """

    def __init__(self, participant_id: str, broker: Broker, register: bool = True) -> None:
        self.participant_id = participant_id
        self._broker = broker
        self.sent: list[Message] = []
        self.confirmations: list[tuple[Message, float]] = []
        if register:
            broker.register_observer(self)

    async def send(self, content: str, recipient: str) -> Message:
        """Create a message from this producer and publish it.

        Raises:
            PersistenceError: If the broker could not save the message.
        """
        message = Message.create(content, sender=self.participant_id, recipient=recipient)
        await self._broker.publish(message)
        self.sent.append(message)
        return message

    def notify(self, message: Message, delay_observed: float) -> None:
        if message.sender != self.participant_id:
            return
        self.confirmations.append((message, delay_observed))
        logger.info(
            "%s: message %s delivered to %s after %.2fs",
            self.participant_id,
            message.id,
            message.recipient,
            delay_observed,
        )

    def close(self) -> None:
        """Stop observing deliveries."""
        self._broker.unregister_observer(self)

    def __repr__(self) -> str:
        return f"Producer({self.participant_id!r})"


class Consumer:
    """Drains the broker queue as one worker.

    Args:
        broker: Broker whose queue to drain.
        worker_id: Name used in log lines (default ``consumer-<id>``).
    """

    def __init__(self, broker: Broker, worker_id: str | None = None) -> None:
        self._broker = broker
        self.worker_id = worker_id or f"consumer-{id(self):x}"

    async def run(self) -> None:
        """Process messages until cancelled."""
        await self._broker.run_worker(self.worker_id)

    def start(self) -> asyncio.Task[None]:
        """Run in a background task on the current event loop."""
        return asyncio.create_task(self.run(), name=self.worker_id)
