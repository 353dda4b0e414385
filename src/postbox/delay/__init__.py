"""Delay strategies."""

from postbox.delay.constant import ConstantDelay, constant
from postbox.delay.factory import create_delay_strategy
from postbox.delay.uniform import UniformRandomDelay, uniform_random
from postbox.protocols.delay import DelayMode

__all__ = [
    "ConstantDelay",
    "DelayMode",
    "UniformRandomDelay",
    "constant",
    "create_delay_strategy",
    "uniform_random",
]
