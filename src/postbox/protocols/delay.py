"""Delay strategy protocol.

A delay strategy decides how long a worker waits before it marks a
dequeued message as delivered, simulating variable network latency.

Example:
    >>> from postbox.protocols.delay import DelayMode, DelayStrategy
    >>> hasattr(DelayStrategy, "next_delay")
    True
    >>> DelayMode.CONSTANT.value
    'constant'
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, runtime_checkable


class DelayMode(str, Enum):
    """Available delay strategies.

    Example:
        >>> from postbox.protocols.delay import DelayMode
        >>> DelayMode("uniform")
        <DelayMode.UNIFORM: 'uniform'>
    """

    CONSTANT = "constant"
    UNIFORM = "uniform"


@runtime_checkable
class DelayStrategy(Protocol):
    """Delay strategy protocol."""

    def next_delay(self) -> float:
        """Return the next delay in seconds (never negative)."""
        ...
