"""Broker - central coordination point for message delivery.

The Broker persists published messages, queues them, and runs a pool of
workers that wait out a per-message delay, stamp delivery, persist again
and notify observers.

Example:
    >>> import asyncio
    >>> from postbox.core.broker import Broker
    >>> from postbox.delay import constant
    >>> from postbox.models.message import Message
    >>> from postbox.persistence.memory import MemoryPersistence
    >>> async def example():
    ...     store = MemoryPersistence()
    ...     async with Broker(store, constant(0)) as broker:
    ...         await broker.publish(Message.create("hi", sender="A", recipient="B"))
    ...         await broker.join()
    ...     return broker.stats.delivered
    >>> asyncio.run(example())
    1
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from postbox.core.config import Settings
from postbox.core.exceptions import (
    ConfigurationError,
    DeliveryError,
    ObserverNotificationError,
    PersistenceError,
    PostboxError,
)
from postbox.protocols.observer import NotificationMode
from postbox.utils.retry import RetryConfig, with_retry

if TYPE_CHECKING:
    from postbox.models.message import Message
    from postbox.protocols.delay import DelayStrategy
    from postbox.protocols.observer import Observer
    from postbox.protocols.persistence import PersistenceProvider

logger = logging.getLogger("postbox.broker")


@dataclass
class BrokerStats:
    """Counters for broker activity.

    Example:
        >>> from postbox.core.broker import BrokerStats
        >>> stats = BrokerStats(published=3, delivered=2)
        >>> stats.in_flight
        1
    """

    published: int = 0
    delivered: int = 0
    persist_errors: int = 0
    notify_errors: int = 0

    @property
    def in_flight(self) -> int:
        """Messages published but not yet delivered."""
        return self.published - self.delivered


class Broker:
    """In-process message broker.

    Owns an unbounded FIFO queue, a set of observers, one delay strategy
    and one persistence provider. Every queued message is taken by exactly
    one worker; completion order across workers follows their delays, not
    the publish order.

    Args:
        persistence: Where message states are recorded.
        delay_strategy: How long each worker waits before delivering.
        settings: Broker settings (default: ``Settings()``).
        retry: Retry policy for the post-delivery save (default: built
            from ``settings.persist_max_attempts``).

    Example:
        >>> from postbox.core.broker import Broker
        >>> from postbox.delay import constant
        >>> from postbox.persistence.memory import MemoryPersistence
        >>> broker = Broker(MemoryPersistence(), constant(1))
        >>> broker.pending_count(), broker.observer_count()
        (0, 0)
    """

    def __init__(
        self,
        persistence: PersistenceProvider,
        delay_strategy: DelayStrategy,
        *,
        settings: Settings | None = None,
        retry: RetryConfig | None = None,
    ) -> None:
        self._settings = settings or Settings()
        self._persistence = persistence
        self._delay = delay_strategy
        self._retry = retry or RetryConfig(
            max_attempts=self._settings.persist_max_attempts,
            base_delay=self._settings.persist_retry_delay,
            retry_on=(PersistenceError,),
        )
        self._queue: asyncio.Queue[Message] = asyncio.Queue()
        # dict keys give set semantics while keeping registration order
        self._observers: dict[Observer, None] = {}
        self._workers: list[asyncio.Task[None]] = []
        self.stats = BrokerStats()

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> Broker:
        """Build a broker whose provider and strategy come from settings.

        Example:
            >>> from postbox.core.broker import Broker
            >>> from postbox.core.config import Settings
            >>> broker = Broker.from_settings(Settings(persistence_mode="memory"))
            >>> type(broker.persistence).__name__
            'MemoryPersistence'
        """
        from postbox.delay.factory import create_delay_strategy
        from postbox.persistence.factory import create_persistence

        settings = settings or Settings()
        persistence = create_persistence(
            settings.persistence_mode,
            path=settings.persistence_path,
            url=settings.database_url,
        )
        delay = create_delay_strategy(
            settings.delay_mode,
            seconds=settings.delay_seconds,
            minimum=settings.delay_min,
            maximum=settings.delay_max,
        )
        return cls(persistence, delay, settings=settings)

    # --- Properties ---

    @property
    def settings(self) -> Settings:
        """Settings this broker was built with."""
        return self._settings

    @property
    def persistence(self) -> PersistenceProvider:
        """The persistence provider."""
        return self._persistence

    @property
    def delay_strategy(self) -> DelayStrategy:
        """The delay strategy."""
        return self._delay

    @property
    def running(self) -> bool:
        """Whether worker tasks are active."""
        return bool(self._workers)

    # --- Lifecycle ---

    async def initialize(self) -> None:
        """Prepare the persistence provider."""
        await self._persistence.initialize()

    async def close(self) -> None:
        """Release the persistence provider."""
        await self._persistence.close()

    def start(self, worker_count: int | None = None) -> list[asyncio.Task[None]]:
        """Spawn the worker pool on the running event loop.

        Args:
            worker_count: Number of workers (default ``settings.worker_count``).

        Returns:
            The worker tasks.

        Raises:
            PostboxError: If workers are already running.
            ConfigurationError: If ``worker_count`` is below 1.
        """
        if self._workers:
            raise PostboxError("Broker workers are already running")

        count = self._settings.worker_count if worker_count is None else worker_count
        if count < 1:
            raise ConfigurationError(f"worker_count must be at least 1, got {count}")
        for n in range(1, count + 1):
            worker_id = f"worker-{n}"
            self._workers.append(asyncio.create_task(self.run_worker(worker_id), name=worker_id))

        logger.info("Started %d broker workers", count)
        return list(self._workers)

    async def stop(self) -> None:
        """Cancel all workers and wait for them to finish.

        A delay in progress is abandoned; that message is not redelivered.
        """
        if not self._workers:
            return

        workers, self._workers = self._workers, []
        for task in workers:
            task.cancel()
        await asyncio.gather(*workers, return_exceptions=True)
        logger.info("Stopped %d broker workers", len(workers))

    async def join(self) -> None:
        """Wait until every queued message has been processed."""
        await self._queue.join()

    async def __aenter__(self) -> Broker:
        await self.initialize()
        self.start()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.stop()
        await self.close()

    # --- Publishing ---

    async def publish(self, message: Message) -> None:
        """Persist a message, then queue it for delivery.

        Args:
            message: An undelivered message.

        Raises:
            PersistenceError: If the message could not be saved. The message
                is not queued in that case.
            DeliveryError: If the message is already delivered.
        """
        if message.is_delivered:
            raise DeliveryError(f"Message {message.id} was already delivered")

        await self._persistence.save(message)
        self._queue.put_nowait(message)
        self.stats.published += 1
        logger.debug("Published %s from %s to %s", message.id, message.sender, message.recipient)

    # --- Observers ---

    def register_observer(self, observer: Observer) -> None:
        """Add an observer. Registering twice has no extra effect."""
        self._observers[observer] = None

    def unregister_observer(self, observer: Observer) -> None:
        """Remove an observer. Unknown observers are ignored."""
        self._observers.pop(observer, None)

    def observer_count(self) -> int:
        """Return number of registered observers."""
        return len(self._observers)

    # --- Workers ---

    async def run_worker(self, worker_id: str) -> None:
        """Deliver queued messages until cancelled.

        Args:
            worker_id: Name used in log lines.
        """
        logger.debug("Worker %s started", worker_id)
        try:
            while True:
                message = await self._queue.get()
                try:
                    await self._deliver(worker_id, message)
                finally:
                    self._queue.task_done()
        except Exception:
            logger.exception("Worker %s crashed", worker_id)
            raise
        finally:
            logger.debug("Worker %s stopped", worker_id)

    async def _deliver(self, worker_id: str, message: Message) -> None:
        delay = self._delay.next_delay()
        logger.debug("Worker %s holding %s for %.2fs", worker_id, message.id, delay)
        await asyncio.sleep(delay)

        delivered = message.mark_delivered()
        self.stats.delivered += 1

        try:
            await with_retry(lambda: self._persistence.save(delivered), self._retry)
        except PersistenceError:
            self.stats.persist_errors += 1
            logger.exception("Worker %s could not persist delivered %s", worker_id, delivered.id)

        await self._notify_observers(delivered, delay)

    def _recipients(self, message: Message) -> list[Observer]:
        # Snapshot so observers may (un)register while being notified.
        observers = list(self._observers)
        if self._settings.notification_mode is NotificationMode.SENDER_ONLY:
            return [o for o in observers if getattr(o, "participant_id", None) == message.sender]
        return observers

    async def _notify_observers(self, message: Message, delay: float) -> None:
        for observer in self._recipients(message):
            try:
                result = observer.notify(message, delay)
                if inspect.isawaitable(result):
                    await result
            except Exception as e:
                error = ObserverNotificationError(
                    f"Observer {observer!r} failed on {message.id}: {e}",
                    observer=observer,
                    message_id=message.id,
                )
                self.stats.notify_errors += 1
                logger.error("%s", error, exc_info=e)

    # --- Utility Methods ---

    def pending_count(self) -> int:
        """Return number of messages waiting in the queue."""
        return self._queue.qsize()
