"""Constant delay strategy.

Example:
    >>> from postbox.delay.constant import ConstantDelay
    >>> strategy = ConstantDelay(3)
    >>> strategy.next_delay(), strategy.next_delay()
    (3.0, 3.0)
"""

from __future__ import annotations

from dataclasses import dataclass

from postbox.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class ConstantDelay:
    """Always wait the same number of seconds.

    Best for: Tests and deterministic ordering scenarios.
    """

    seconds: float = 0.0

    def __post_init__(self) -> None:
        if self.seconds < 0:
            raise ConfigurationError(f"Delay must be non-negative, got {self.seconds}")

    def next_delay(self) -> float:
        """Return the configured delay."""
        return float(self.seconds)


def constant(seconds: float) -> ConstantDelay:
    """Build a constant delay strategy.

    Example:
        >>> from postbox.delay.constant import constant
        >>> constant(0).next_delay()
        0.0
    """
    return ConstantDelay(seconds)
