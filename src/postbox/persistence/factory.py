"""
Persistence Factory - resolve a persistence mode to a provider.

The mode is resolved once, when the broker is built; nothing dispatches
on the mode afterwards.

Usage:
    from postbox.persistence import PersistenceMode, create_persistence

    # JSON array on disk
    store = create_persistence(PersistenceMode.FILE, path="./data/messages.json")

    # SQLAlchemy database
    store = create_persistence("database", url="sqlite:///data/messages.db")

    # Memory (for testing)
    store = create_persistence("memory")
"""

from __future__ import annotations

from pathlib import Path

from postbox.core.exceptions import ConfigurationError
from postbox.protocols.persistence import PersistenceMode, PersistenceProvider


def create_persistence(
    mode: PersistenceMode | str,
    *,
    path: str | Path = "./data/messages.json",
    url: str = "sqlite:///:memory:",
    echo_sql: bool = False,
) -> PersistenceProvider:
    """
    Create a persistence provider.

    Args:
        mode: Which provider to build.
        path: Store location for ``FILE``.
        url: SQLAlchemy URL for ``DATABASE``.
        echo_sql: Log SQL statements for ``DATABASE``.

    Returns:
        A provider implementing ``PersistenceProvider``.

    Raises:
        ConfigurationError: If the mode is unknown.

    Example:
        >>> from postbox.persistence.factory import create_persistence
        >>> type(create_persistence("memory")).__name__
        'MemoryPersistence'
    """
    try:
        mode = PersistenceMode(mode)
    except ValueError as e:
        raise ConfigurationError(f"Unknown persistence mode: {mode}") from e

    if mode is PersistenceMode.FILE:
        from postbox.persistence.json_file import JsonFilePersistence

        return JsonFilePersistence(path)

    if mode is PersistenceMode.DATABASE:
        from postbox.persistence.database import DatabasePersistence

        return DatabasePersistence(url, echo=echo_sql)

    from postbox.persistence.memory import MemoryPersistence

    return MemoryPersistence()
