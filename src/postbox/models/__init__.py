"""Data models."""

from postbox.models.base import PostboxModel
from postbox.models.message import Message

__all__ = ["Message", "PostboxModel"]
