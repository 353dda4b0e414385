"""Protocol definitions - all extension points."""

from postbox.protocols.delay import DelayMode, DelayStrategy
from postbox.protocols.observer import NotificationMode, Observer
from postbox.protocols.persistence import PersistenceMode, PersistenceProvider

__all__ = [
    # Delay
    "DelayMode",
    "DelayStrategy",
    # Persistence
    "PersistenceMode",
    "PersistenceProvider",
    # Observer
    "NotificationMode",
    "Observer",
]
