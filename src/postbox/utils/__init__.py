"""Utility modules for Postbox."""

from postbox.utils.retry import RetryConfig, with_retry

__all__ = ["RetryConfig", "with_retry"]
