"""Uniformly random delay strategy.

Each call draws independently from the continuous uniform distribution
on ``[minimum, maximum]``.

Example:
    >>> from postbox.delay.uniform import UniformRandomDelay
    >>> strategy = UniformRandomDelay(1, 5)
    >>> 1 <= strategy.next_delay() <= 5
    True
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field

from postbox.core.exceptions import ConfigurationError


@dataclass(frozen=True)
class UniformRandomDelay:
    """Wait a random number of seconds within a bounded range.

    Args:
        minimum: Lower bound in seconds.
        maximum: Upper bound in seconds.
        rng: Optional random generator (defaults to the ``random`` module).
    """

    minimum: float
    maximum: float
    rng: random.Random | None = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.minimum < 0 or self.maximum < 0:
            raise ConfigurationError(
                f"Delay bounds must be non-negative, got [{self.minimum}, {self.maximum}]"
            )
        if self.minimum > self.maximum:
            raise ConfigurationError(
                f"Delay minimum {self.minimum} exceeds maximum {self.maximum}"
            )

    def next_delay(self) -> float:
        """Draw the next delay."""
        source = self.rng or random
        return source.uniform(self.minimum, self.maximum)


def uniform_random(minimum: float, maximum: float) -> UniformRandomDelay:
    """Build a uniformly random delay strategy.

    Example:
        >>> from postbox.delay.uniform import uniform_random
        >>> uniform_random(2, 2).next_delay()
        2.0
    """
    return UniformRandomDelay(minimum, maximum)
