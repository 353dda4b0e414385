"""Base model shared by Postbox value types."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PostboxModel(BaseModel):
    """Base model with standard configuration.

    Models are frozen: state changes produce new instances.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        frozen=True,
        extra="forbid",
    )
