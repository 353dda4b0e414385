"""Persistence provider protocol.

Defines the interface for stores that record message state transitions.
A provider is keyed by message id: saving the same id again replaces the
previous state.

Example:
    >>> from postbox.protocols.persistence import PersistenceMode, PersistenceProvider
    >>> PersistenceMode.FILE.value
    'file'
    >>> hasattr(PersistenceProvider, "load_all")
    True
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from postbox.models.message import Message


class PersistenceMode(str, Enum):
    """Available persistence providers.

    Example:
        >>> from postbox.protocols.persistence import PersistenceMode
        >>> [m.value for m in PersistenceMode]
        ['file', 'database', 'memory']
    """

    FILE = "file"  # JSON array, rewritten per save
    DATABASE = "database"  # SQLAlchemy
    MEMORY = "memory"  # Not durable


@runtime_checkable
class PersistenceProvider(Protocol):
    """Persistence provider protocol.

    Implementations raise ``PersistenceError`` when the backing store
    cannot be read or written.
    """

    async def save(self, message: Message) -> None:
        """Upsert the message's full state, keyed by id."""
        ...

    async def load_all(self) -> list[Message]:
        """Return every stored message state (order is irrelevant)."""
        ...

    async def initialize(self) -> None:
        """Prepare the backing store."""
        ...

    async def close(self) -> None:
        """Clean up resources."""
        ...
