"""
Postbox SQLAlchemy models.

Usage:
    from postbox.persistence.models import Base, MessageModel, create_all_tables

    engine = create_engine("sqlite:///data/messages.db")
    create_all_tables(engine)
"""

from __future__ import annotations

from sqlalchemy import Float, Index, String, Text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from postbox.models.message import Message


class Base(DeclarativeBase):
    """Base class for all Postbox models."""


class MessageModel(Base):
    """
    Message state, one row per message id.

    The row is overwritten in place when a message is delivered.
    """

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_sender", "sender"),
        Index("ix_messages_timestamp_sent", "timestamp_sent"),
    )

    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    sender: Mapped[str] = mapped_column(String(256), nullable=False)
    recipient: Mapped[str] = mapped_column(String(256), nullable=False)
    timestamp_sent: Mapped[float] = mapped_column(Float, nullable=False)
    timestamp_delivered: Mapped[float | None] = mapped_column(Float, nullable=True)

    @classmethod
    def from_message(cls, message: Message) -> MessageModel:
        return cls(**message.to_record())

    def apply(self, message: Message) -> None:
        """Overwrite this row with the message's current state."""
        self.content = message.content
        self.sender = message.sender
        self.recipient = message.recipient
        self.timestamp_sent = message.timestamp_sent
        self.timestamp_delivered = message.timestamp_delivered

    def to_message(self) -> Message:
        return Message(
            id=self.id,
            content=self.content,
            sender=self.sender,
            recipient=self.recipient,
            timestamp_sent=self.timestamp_sent,
            timestamp_delivered=self.timestamp_delivered,
        )


def create_all_tables(engine: Engine) -> None:
    """Create all Postbox tables (no-op for tables that exist)."""
    Base.metadata.create_all(engine)


def drop_all_tables(engine: Engine) -> None:
    """Drop all Postbox tables (use with caution!)."""
    Base.metadata.drop_all(engine)
