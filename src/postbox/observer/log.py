"""Logging observer.

Records every delivery through ``logging``, whoever sent it.

Example:
    >>> from postbox.observer.log import LoggingObserver
    >>> LoggingObserver().delivered
    0
"""

from __future__ import annotations

import logging

from postbox.models.message import Message


class LoggingObserver:
    """Log each delivery at a fixed level.

    Args:
        logger: Logger to write to (default ``postbox.deliveries``).
        level: Logging level for delivery lines.
    """

    def __init__(self, logger: logging.Logger | None = None, level: int = logging.INFO) -> None:
        self._logger = logger or logging.getLogger("postbox.deliveries")
        self._level = level
        self.delivered = 0

    def notify(self, message: Message, delay_observed: float) -> None:
        self.delivered += 1
        self._logger.log(
            self._level,
            "Delivered %s from %s to %s after %.2fs",
            message.id,
            message.sender,
            message.recipient,
            delay_observed,
        )
