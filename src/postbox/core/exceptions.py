"""Custom exceptions.

Postbox uses a small hierarchy of exceptions so callers can catch
everything raised by the broker with a single ``except PostboxError``:

Example:
    >>> from postbox.core.exceptions import PersistenceError, PostboxError
    >>> isinstance(PersistenceError("disk full"), PostboxError)
    True
    >>> try:
    ...     raise PersistenceError("store unreadable")
    ... except PostboxError as e:
    ...     print(f"Caught: {type(e).__name__}")
    Caught: PersistenceError
"""

from __future__ import annotations

from typing import Any


class PostboxError(Exception):
    """Base exception for Postbox.

    Example:
        >>> from postbox.core.exceptions import PostboxError
        >>> str(PostboxError("something went wrong"))
        'something went wrong'
    """


class PersistenceError(PostboxError):
    """The backing store could not be read or written.

    Example:
        >>> from postbox.core.exceptions import PersistenceError
        >>> raise PersistenceError("malformed store")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        PersistenceError: malformed store
    """


class ObserverNotificationError(PostboxError):
    """An observer raised while being notified of a delivery.

    Example:
        >>> from postbox.core.exceptions import ObserverNotificationError
        >>> err = ObserverNotificationError("boom", observer=None, message_id="m1")
        >>> err.message_id
        'm1'
    """

    def __init__(self, detail: str, *, observer: Any, message_id: str) -> None:
        self.observer = observer
        self.message_id = message_id
        super().__init__(detail)


class DeliveryError(PostboxError):
    """A message was delivered more than once.

    Example:
        >>> from postbox.core.exceptions import DeliveryError
        >>> raise DeliveryError("already delivered")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        DeliveryError: already delivered
    """


class ConfigurationError(PostboxError):
    """Configuration is invalid.

    Example:
        >>> from postbox.core.exceptions import ConfigurationError
        >>> raise ConfigurationError("unknown mode")  # doctest: +IGNORE_EXCEPTION_DETAIL
        Traceback (most recent call last):
        ConfigurationError: unknown mode
    """
