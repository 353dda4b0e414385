"""Observer protocol.

Observers are registered with the broker and told about every delivery,
whoever sent the message. Filtering by sender is the observer's job.

Example:
    >>> from postbox.protocols.observer import NotificationMode
    >>> NotificationMode.BROADCAST.value
    'broadcast'
"""

from __future__ import annotations

from collections.abc import Awaitable
from enum import Enum
from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from postbox.models.message import Message


class NotificationMode(str, Enum):
    """How the broker fans out delivery notifications.

    BROADCAST notifies every registered observer. SENDER_ONLY notifies only
    observers whose ``participant_id`` matches the message sender.

    Example:
        >>> from postbox.protocols.observer import NotificationMode
        >>> list(NotificationMode)
        [<NotificationMode.BROADCAST: 'broadcast'>, <NotificationMode.SENDER_ONLY: 'sender_only'>]
    """

    BROADCAST = "broadcast"
    SENDER_ONLY = "sender_only"


@runtime_checkable
class Observer(Protocol):
    """Delivery observer protocol.

    ``notify`` may be a plain method or a coroutine method.
    """

    def notify(self, message: Message, delay_observed: float) -> Awaitable[None] | None:
        """Handle a delivered message and the delay it waited."""
        ...
