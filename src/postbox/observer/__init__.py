"""Delivery observers."""

from postbox.observer.callback import CallbackObserver
from postbox.observer.console import ConsoleObserver
from postbox.observer.log import LoggingObserver

__all__ = ["CallbackObserver", "ConsoleObserver", "LoggingObserver"]
