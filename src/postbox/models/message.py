"""Message model.

A Message is the unit of communication moved through the broker. It is an
immutable value: delivery produces a new instance with
``timestamp_delivered`` stamped, leaving the queued copy untouched.

Example:
    >>> from postbox.models.message import Message
    >>> msg = Message.create("hi", sender="A", recipient="B")
    >>> msg.is_delivered
    False
    >>> delivered = msg.mark_delivered()
    >>> delivered.is_delivered, delivered.id == msg.id
    (True, True)
"""

from __future__ import annotations

import time
from typing import Any
from uuid import uuid4

from pydantic import Field, model_validator

from postbox.core.exceptions import DeliveryError
from postbox.models.base import PostboxModel


class Message(PostboxModel):
    """A message travelling from a sender to a recipient.

    Timestamps are seconds since the epoch, matching the persisted layout.

    Example:
        >>> from postbox.models.message import Message
        >>> m = Message(
        ...     id="m-1",
        ...     content="hello",
        ...     sender="alice",
        ...     recipient="bob",
        ...     timestamp_sent=100.0,
        ... )
        >>> m.timestamp_delivered is None
        True
        >>> m.to_record()["timestamp_sent"]
        100.0
    """

    id: str = Field(default_factory=lambda: str(uuid4()), min_length=1)
    content: str
    sender: str
    recipient: str
    timestamp_sent: float = Field(default_factory=time.time, ge=0)
    timestamp_delivered: float | None = None

    @model_validator(mode="after")
    def _check_delivery_after_send(self) -> Message:
        if self.timestamp_delivered is not None and self.timestamp_delivered < self.timestamp_sent:
            raise ValueError("timestamp_delivered must not precede timestamp_sent")
        return self

    @classmethod
    def create(cls, content: str, sender: str, recipient: str) -> Message:
        """Create a fresh, undelivered message with a new id."""
        return cls(content=content, sender=sender, recipient=recipient)

    @property
    def is_delivered(self) -> bool:
        """Whether the delivery timestamp has been stamped."""
        return self.timestamp_delivered is not None

    def mark_delivered(self, at: float | None = None) -> Message:
        """Return a copy stamped as delivered.

        Args:
            at: Delivery time in epoch seconds (default: now). Clamped so it
                never precedes ``timestamp_sent``.

        Raises:
            DeliveryError: If the message was already delivered.
        """
        if self.timestamp_delivered is not None:
            raise DeliveryError(f"Message {self.id} was already delivered")
        delivered_at = time.time() if at is None else at
        return self.model_copy(
            update={"timestamp_delivered": max(delivered_at, self.timestamp_sent)}
        )

    def to_record(self) -> dict[str, Any]:
        """Convert to the plain JSON record written by persistence providers."""
        return self.model_dump(mode="json")

    @classmethod
    def from_record(cls, record: dict[str, Any]) -> Message:
        """Rebuild a message from a persisted record."""
        return cls.model_validate(record)
