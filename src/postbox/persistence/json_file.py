"""JSON file persistence provider.

Stores every message as one entry of a single JSON array. Each ``save``
reads the whole array, upserts the entry by id and writes the whole
array back, so concurrent saves from several workers must be serialized.

File layout::

    [
      {
        "id": "2c6f...",
        "content": "hi",
        "sender": "A",
        "recipient": "B",
        "timestamp_sent": 1718000000.12,
        "timestamp_delivered": null
      }
    ]

Example:
    >>> import asyncio
    >>> import tempfile
    >>> from pathlib import Path
    >>> from postbox.models.message import Message
    >>> from postbox.persistence.json_file import JsonFilePersistence
    >>> with tempfile.TemporaryDirectory() as tmpdir:
    ...     store = JsonFilePersistence(Path(tmpdir) / "messages.json")
    ...     asyncio.run(store.save(Message.create("hi", sender="A", recipient="B")))
    ...     len(asyncio.run(store.load_all()))
    1
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Any, Callable, TypeVar

from pydantic import ValidationError

from postbox.core.exceptions import PersistenceError
from postbox.models.message import Message

logger = logging.getLogger("postbox.persistence.json")

T = TypeVar("T")


class JsonFilePersistence:
    """File-backed persistence as a rewritten JSON array.

    The read-modify-write in ``save`` runs in a worker thread and is
    guarded by an ``asyncio.Lock`` so no update is lost when several
    broker workers save at once. The thread side also holds a
    ``threading.Lock``: a cancelled ``save`` releases the asyncio lock
    while its thread is still writing, and the next call must wait for it.

    Best for: Development, single-process deployments with small stores.

    Args:
        path: Location of the JSON store. Parent directories are created.
        indent: JSON indentation (``None`` for compact output).
    """

    def __init__(self, path: str | Path = "./data/messages.json", indent: int | None = 2) -> None:
        self._path = Path(path)
        self._indent = indent
        self._lock = asyncio.Lock()
        self._file_lock = threading.Lock()

    @property
    def path(self) -> Path:
        """Location of the JSON store."""
        return self._path

    async def initialize(self) -> None:
        """Create an empty store if none exists."""
        async with self._lock:
            await asyncio.to_thread(self._locked, self._ensure_store)

    async def close(self) -> None:
        """Nothing to release; the file is closed after every call."""

    async def save(self, message: Message) -> None:
        """Upsert the message into the store.

        Raises:
            PersistenceError: If the store cannot be read or written.
        """
        async with self._lock:
            await asyncio.to_thread(self._locked, self._upsert, message.to_record())
        logger.debug("Saved message %s to %s", message.id, self._path)

    async def load_all(self) -> list[Message]:
        """Load every stored message.

        Raises:
            PersistenceError: If the store is unreadable or malformed.
        """
        async with self._lock:
            records = await asyncio.to_thread(self._locked, self._read_records)
        try:
            return [Message.from_record(record) for record in records]
        except ValidationError as e:
            raise PersistenceError(f"Malformed message record in {self._path}: {e}") from e

    # --- File Operations (run in a worker thread) ---

    def _locked(self, func: Callable[..., T], *args: Any) -> T:
        with self._file_lock:
            return func(*args)

    def _ensure_store(self) -> None:
        if self._path.exists():
            return
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise PersistenceError(f"Cannot create store directory for {self._path}: {e}") from e
        self._write_records([])
        logger.info("Initialized empty message store at %s", self._path)

    def _read_records(self) -> list[dict[str, Any]]:
        self._ensure_store()
        try:
            raw = self._path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Cannot read {self._path}: {e}") from e

        try:
            data = json.loads(raw) if raw.strip() else []
        except json.JSONDecodeError as e:
            raise PersistenceError(f"Malformed JSON in {self._path}: {e}") from e

        if not isinstance(data, list) or not all(isinstance(item, dict) for item in data):
            raise PersistenceError(f"Expected a JSON array of objects in {self._path}")
        return data

    def _write_records(self, records: list[dict[str, Any]]) -> None:
        # Sibling temp file, then an atomic swap over the store.
        try:
            fd, tmp_name = tempfile.mkstemp(
                dir=self._path.parent, prefix=f".{self._path.name}.", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    json.dump(records, fh, indent=self._indent)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Cannot write {self._path}: {e}") from e

    def _upsert(self, record: dict[str, Any]) -> None:
        records = self._read_records()
        for index, existing in enumerate(records):
            if existing.get("id") == record["id"]:
                records[index] = record
                break
        else:
            records.append(record)
        self._write_records(records)
