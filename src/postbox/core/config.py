"""Postbox configuration.

Broker settings loaded from environment variables with POSTBOX_ prefix.
A Settings value is built explicitly and handed to the broker; nothing is
cached at module level.

Example:
    >>> from postbox.core.config import get_settings
    >>> settings = get_settings(log_level="DEBUG")
    >>> settings.log_level
    'DEBUG'
    >>> settings.worker_count
    2
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from postbox.protocols.delay import DelayMode
from postbox.protocols.observer import NotificationMode
from postbox.protocols.persistence import PersistenceMode


class Settings(BaseSettings):
    """Broker settings.

    Loads from environment variables with POSTBOX_ prefix.

    Example:
        >>> from postbox.core.config import Settings
        >>> s = Settings(delay_mode="constant", delay_seconds=0.5)
        >>> s.delay_mode
        <DelayMode.CONSTANT: 'constant'>
        >>> s.persistence_mode.value
        'file'
    """

    model_config = SettingsConfigDict(
        env_prefix="POSTBOX_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Workers
    worker_count: int = Field(default=2, ge=1, description="Concurrent broker workers")

    # Delay
    delay_mode: DelayMode = Field(default=DelayMode.UNIFORM, description="Delay strategy")
    delay_seconds: float = Field(default=0.0, ge=0.0, description="Delay for constant mode")
    delay_min: float = Field(default=1.0, ge=0.0, description="Lower bound for uniform mode")
    delay_max: float = Field(default=5.0, ge=0.0, description="Upper bound for uniform mode")

    # Persistence
    persistence_mode: PersistenceMode = Field(default=PersistenceMode.FILE)
    persistence_path: Path = Field(
        default=Path("./data/messages.json"), description="Store for file mode"
    )
    database_url: str = Field(default="sqlite:///:memory:", description="URL for database mode")
    persist_max_attempts: int = Field(
        default=1, ge=1, description="Attempts for the post-delivery save"
    )
    persist_retry_delay: float = Field(default=0.5, ge=0.0, description="Base retry backoff")

    # Notification
    notification_mode: NotificationMode = Field(default=NotificationMode.BROADCAST)

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    @model_validator(mode="after")
    def _check_delay_bounds(self) -> Settings:
        if self.delay_min > self.delay_max:
            raise ValueError("delay_min must not exceed delay_max")
        return self


def get_settings(**overrides: Any) -> Settings:
    """Get settings with optional overrides.

    Example:
        >>> from postbox.core.config import get_settings
        >>> s = get_settings(worker_count=4)
        >>> s.worker_count
        4
    """
    return Settings(**overrides)
