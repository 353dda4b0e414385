"""Core broker, configuration and errors."""

from postbox.core.broker import Broker, BrokerStats
from postbox.core.config import Settings, get_settings
from postbox.core.exceptions import (
    ConfigurationError,
    DeliveryError,
    ObserverNotificationError,
    PersistenceError,
    PostboxError,
)

__all__ = [
    # Broker
    "Broker",
    "BrokerStats",
    # Configuration
    "Settings",
    "get_settings",
    # Errors
    "ConfigurationError",
    "DeliveryError",
    "ObserverNotificationError",
    "PersistenceError",
    "PostboxError",
]
