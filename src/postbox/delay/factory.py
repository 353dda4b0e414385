"""Delay strategy factory.

Resolves a ``DelayMode`` tag to a concrete strategy once, at broker
construction time.

Usage:
    from postbox.delay import DelayMode, create_delay_strategy

    # Fixed latency
    strategy = create_delay_strategy(DelayMode.CONSTANT, seconds=0.5)

    # Simulated network jitter
    strategy = create_delay_strategy("uniform", minimum=1, maximum=5)
"""

from __future__ import annotations

from postbox.core.exceptions import ConfigurationError
from postbox.delay.constant import ConstantDelay
from postbox.delay.uniform import UniformRandomDelay
from postbox.protocols.delay import DelayMode, DelayStrategy


def create_delay_strategy(
    mode: DelayMode | str,
    *,
    seconds: float = 0.0,
    minimum: float = 1.0,
    maximum: float = 5.0,
) -> DelayStrategy:
    """Create a delay strategy for the given mode.

    Args:
        mode: Which strategy to build.
        seconds: Delay for ``CONSTANT``.
        minimum: Lower bound for ``UNIFORM``.
        maximum: Upper bound for ``UNIFORM``.

    Raises:
        ConfigurationError: If the mode is unknown or the parameters are invalid.

    Example:
        >>> from postbox.delay.factory import create_delay_strategy
        >>> create_delay_strategy("constant", seconds=3).next_delay()
        3.0
    """
    try:
        mode = DelayMode(mode)
    except ValueError as e:
        raise ConfigurationError(f"Unknown delay mode: {mode}") from e

    if mode is DelayMode.CONSTANT:
        return ConstantDelay(seconds)
    return UniformRandomDelay(minimum, maximum)
