"""Callback observer.

Adapts a plain function or coroutine function to the Observer protocol.

Example:
    >>> from postbox.observer.callback import CallbackObserver
    >>> seen = []
    >>> observer = CallbackObserver(lambda message, delay: seen.append(delay))
    >>> hasattr(observer, "notify")
    True
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from postbox.models.message import Message

DeliveryCallback = Callable[[Message, float], Awaitable[None] | None]


class CallbackObserver:
    """Forward deliveries to a callback.

    Args:
        callback: Called with ``(message, delay_observed)``. May be async.
        participant_id: Identity used by sender-only routing.
    """

    def __init__(self, callback: DeliveryCallback, participant_id: str | None = None) -> None:
        self._callback = callback
        self.participant_id = participant_id

    def notify(self, message: Message, delay_observed: float) -> Awaitable[None] | None:
        return self._callback(message, delay_observed)

    def __repr__(self) -> str:
        return f"CallbackObserver({self._callback!r}, participant_id={self.participant_id!r})"
