"""Persistence provider implementations.

Quick Start:
    from postbox.persistence import create_persistence

    store = create_persistence("file", path="./data/messages.json")
    store = create_persistence("database", url="sqlite:///messages.db")
    store = create_persistence("memory")

    await store.initialize()
"""

from postbox.persistence.database import DatabasePersistence
from postbox.persistence.factory import create_persistence
from postbox.persistence.json_file import JsonFilePersistence
from postbox.persistence.memory import MemoryPersistence
from postbox.protocols.persistence import PersistenceMode

__all__ = [
    "DatabasePersistence",
    "JsonFilePersistence",
    "MemoryPersistence",
    "PersistenceMode",
    "create_persistence",
]
