"""In-memory persistence provider.

Provides a dict-backed implementation of PersistenceProvider,
useful for testing and development. Nothing survives the process.

Example:
    >>> import asyncio
    >>> from postbox.models.message import Message
    >>> from postbox.persistence.memory import MemoryPersistence
    >>> store = MemoryPersistence()
    >>> asyncio.run(store.save(Message.create("hi", sender="A", recipient="B")))
    >>> len(asyncio.run(store.load_all()))
    1
"""

from __future__ import annotations

from postbox.models.message import Message


class MemoryPersistence:
    """In-memory persistence keyed by message id.

    Best for: Testing, development.
    """

    def __init__(self) -> None:
        self._messages: dict[str, Message] = {}

    async def initialize(self) -> None:
        """No-op for memory persistence."""

    async def close(self) -> None:
        """Clear all data."""
        self._messages.clear()

    async def save(self, message: Message) -> None:
        """Upsert the message by id."""
        self._messages[message.id] = message

    async def load_all(self) -> list[Message]:
        """Return all stored messages."""
        return list(self._messages.values())

    async def get(self, message_id: str) -> Message | None:
        """Get a single message state by id."""
        return self._messages.get(message_id)

    def count(self) -> int:
        """Return the number of stored messages."""
        return len(self._messages)
