"""Console observer implementation.

Writes one line per delivery to a text stream, useful for demos and
development.

Example:
    >>> from postbox.observer.console import ConsoleObserver
    >>> observer = ConsoleObserver()
    >>> hasattr(observer, 'notify')
    True
"""

from __future__ import annotations

import sys
from datetime import UTC, datetime
from typing import TextIO

from postbox.models.message import Message


class ConsoleObserver:
    """Console observer that prints deliveries to a stream.

    Can be restricted to messages from one sender, which is how a
    producer-side observer ignores the broadcast for other senders.

    Example:
        >>> import io
        >>> from postbox.models.message import Message
        >>> from postbox.observer.console import ConsoleObserver
        >>> out = io.StringIO()
        >>> observer = ConsoleObserver(stream=out, sender="A", show_timestamp=False)
        >>> msg = Message(id="m1", content="hi", sender="B", recipient="A", timestamp_sent=1.0)
        >>> observer.notify(msg.mark_delivered(at=2.0), 1.0)
        False
        >>> out.getvalue()
        ''
    """

    def __init__(
        self,
        stream: TextIO | None = None,
        sender: str | None = None,
        show_timestamp: bool = True,
    ) -> None:
        """Initialize console observer.

        Args:
            stream: Output stream (default sys.stdout).
            sender: Only report messages from this sender (default: all).
            show_timestamp: Include the delivery time in output.
        """
        self._stream = stream or sys.stdout
        self._sender = sender
        self._show_timestamp = show_timestamp

    def notify(self, message: Message, delay_observed: float) -> bool:
        """Print the delivery.

        Returns:
            True if the delivery was printed (passed the sender filter).
        """
        if self._sender is not None and message.sender != self._sender:
            return False

        self._stream.write(self._format(message, delay_observed) + "\n")
        self._stream.flush()
        return True

    def _format(self, message: Message, delay_observed: float) -> str:
        """Format a delivery for display.

        Example:
            >>> from postbox.models.message import Message
            >>> from postbox.observer.console import ConsoleObserver
            >>> o = ConsoleObserver(show_timestamp=False)
            >>> m = Message(id="m1", content="hi", sender="A", recipient="B", timestamp_sent=1.0)
            >>> o._format(m, 0.25)
            'A -> B: hi (m1, delay 0.25s)'
        """
        parts: list[str] = []

        if self._show_timestamp and message.timestamp_delivered is not None:
            ts = datetime.fromtimestamp(message.timestamp_delivered, UTC).strftime(
                "%Y-%m-%d %H:%M:%S"
            )
            parts.append(f"[{ts}]")

        parts.append(f"{message.sender} -> {message.recipient}:")
        parts.append(message.content)
        parts.append(f"({message.id}, delay {delay_observed:.2f}s)")

        return " ".join(parts)
