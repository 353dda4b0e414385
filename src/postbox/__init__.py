"""
Postbox - In-process asynchronous message broker.

Postbox queues messages in memory, delivers them through a pool of
concurrent workers after a pluggable delay, records every state change
through a pluggable persistence provider, and notifies observers.

Key Features:
- Protocol-based design (swap delay strategies and stores without code changes)
- Constant or uniformly random delivery delay
- JSON file, SQLAlchemy database, or in-memory persistence
- Broadcast delivery notifications with per-observer failure isolation

Quick Start:
    from postbox import Broker, Message, MemoryPersistence, constant

    async with Broker(MemoryPersistence(), constant(0)) as broker:
        await broker.publish(Message.create("hi", sender="A", recipient="B"))
        await broker.join()

Architecture:
    Delay Strategies: ConstantDelay, UniformRandomDelay
    Persistence: JsonFilePersistence, DatabasePersistence, MemoryPersistence
    Observers: LoggingObserver, ConsoleObserver, CallbackObserver
"""

# Core
from postbox.core.broker import Broker, BrokerStats
from postbox.core.config import Settings, get_settings
from postbox.core.exceptions import (
    ConfigurationError,
    DeliveryError,
    ObserverNotificationError,
    PersistenceError,
    PostboxError,
)

# Delay strategies
from postbox.delay import (
    ConstantDelay,
    UniformRandomDelay,
    constant,
    create_delay_strategy,
    uniform_random,
)

# Models
from postbox.models.message import Message

# Observers
from postbox.observer import CallbackObserver, ConsoleObserver, LoggingObserver
from postbox.participants import Consumer, Producer

# Persistence
from postbox.persistence import (
    DatabasePersistence,
    JsonFilePersistence,
    MemoryPersistence,
    create_persistence,
)

# Protocols
from postbox.protocols import (
    DelayMode,
    DelayStrategy,
    NotificationMode,
    Observer,
    PersistenceMode,
    PersistenceProvider,
)

__version__ = "0.1.0"

__all__ = [
    "__version__",
    # Core
    "Broker",
    "BrokerStats",
    "Settings",
    "get_settings",
    # Errors
    "ConfigurationError",
    "DeliveryError",
    "ObserverNotificationError",
    "PersistenceError",
    "PostboxError",
    # Models
    "Message",
    # Roles
    "Consumer",
    "Producer",
    # Delay
    "ConstantDelay",
    "UniformRandomDelay",
    "constant",
    "create_delay_strategy",
    "uniform_random",
    # Persistence
    "DatabasePersistence",
    "JsonFilePersistence",
    "MemoryPersistence",
    "create_persistence",
    # Observers
    "CallbackObserver",
    "ConsoleObserver",
    "LoggingObserver",
    # Protocols
    "DelayMode",
    "DelayStrategy",
    "NotificationMode",
    "Observer",
    "PersistenceMode",
    "PersistenceProvider",
]
