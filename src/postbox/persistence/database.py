"""
SQLAlchemy-based persistence provider.

Stores message state in a ``messages`` table through the SQLAlchemy ORM.
Any SQLAlchemy URL works; the default is a private in-memory SQLite
database that lives as long as the provider.

Usage:
    from postbox.persistence.database import DatabasePersistence

    # Throwaway in-memory database
    store = DatabasePersistence()

    # SQLite file
    store = DatabasePersistence("sqlite:///data/messages.db")

    await store.initialize()  # Creates the table
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any, Iterator

from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from postbox.core.exceptions import PersistenceError
from postbox.models.message import Message

if TYPE_CHECKING:
    from sqlalchemy.engine import Engine
    from sqlalchemy.orm import Session

logger = logging.getLogger("postbox.persistence.database")


class DatabasePersistence:
    """
    Database-backed persistence using SQLAlchemy.

    Args:
        url: SQLAlchemy database URL.
        echo: Log SQL statements.
    """

    def __init__(self, url: str = "sqlite:///:memory:", echo: bool = False) -> None:
        self.url = url
        self.echo = echo
        self._engine: Engine | None = None
        self._initialized = False

    def _get_engine(self) -> Engine:
        """Get or create the SQLAlchemy engine."""
        if self._engine is None:
            from sqlalchemy import create_engine
            from sqlalchemy.pool import StaticPool

            engine_kwargs: dict[str, Any] = {"echo": self.echo}

            # An in-memory SQLite database exists per connection, so every
            # session has to share one.
            if self.url in ("sqlite://", "sqlite:///:memory:"):
                engine_kwargs["poolclass"] = StaticPool
                engine_kwargs["connect_args"] = {"check_same_thread": False}

            self._engine = create_engine(self.url, **engine_kwargs)

        return self._engine

    @contextmanager
    def session(self) -> Iterator[Session]:
        """Context manager for database sessions."""
        from sqlalchemy.orm import Session

        session = Session(bind=self._get_engine(), expire_on_commit=False)
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    async def initialize(self) -> None:
        """Create the messages table. Safe to call multiple times."""
        from postbox.persistence.models import create_all_tables

        try:
            create_all_tables(self._get_engine())
        except SQLAlchemyError as e:
            raise PersistenceError(f"Cannot initialize database {self.url}: {e}") from e

        self._initialized = True
        logger.info("DatabasePersistence initialized (%s)", self.url)

    async def close(self) -> None:
        """Close all connections."""
        if self._engine:
            self._engine.dispose()
            self._engine = None
        self._initialized = False

    async def save(self, message: Message) -> None:
        """Upsert the message row by id."""
        from postbox.persistence.models import MessageModel

        if not self._initialized:
            await self.initialize()

        try:
            with self.session() as session:
                existing = session.get(MessageModel, message.id)
                if existing:
                    existing.apply(message)
                else:
                    session.add(MessageModel.from_message(message))
        except SQLAlchemyError as e:
            raise PersistenceError(f"Cannot save message {message.id}: {e}") from e

    async def load_all(self) -> list[Message]:
        """Load every stored message."""
        from sqlalchemy import select

        from postbox.persistence.models import MessageModel

        if not self._initialized:
            await self.initialize()

        try:
            with self.session() as session:
                rows = session.scalars(select(MessageModel)).all()
                return [row.to_message() for row in rows]
        except SQLAlchemyError as e:
            raise PersistenceError(f"Cannot load messages: {e}") from e
        except ValidationError as e:
            raise PersistenceError(f"Malformed message row in {self.url}: {e}") from e
