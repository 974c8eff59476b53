"""
Key-value persistence for account settings records.
"""

import asyncio
import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

import structlog

logger = structlog.get_logger(__name__)


@runtime_checkable
class SettingsStore(Protocol):
    """
    Account-scoped settings persistence.

    Records are plain dicts with the keys ``username``, ``baseURL``,
    ``expiration`` and ``loginHandling``.
    """

    async def get(self, account_id: str) -> dict[str, Any] | None:
        """Return the record for an account, or None if it was never stored."""
        ...

    async def set(self, account_id: str, record: dict[str, Any]) -> None:
        """Replace the record for an account."""
        ...

    async def remove(self, account_id: str) -> None:
        """Delete the record for an account. No-op if absent."""
        ...


class InMemorySettingsStore:
    """Settings store kept in a dict, for embedding hosts and tests."""

    def __init__(self, records: dict[str, dict[str, Any]] | None = None) -> None:
        self._records: dict[str, dict[str, Any]] = {k: dict(v) for k, v in (records or {}).items()}

    async def get(self, account_id: str) -> dict[str, Any] | None:
        record = self._records.get(account_id)
        return dict(record) if record is not None else None

    async def set(self, account_id: str, record: dict[str, Any]) -> None:
        self._records[account_id] = dict(record)

    async def remove(self, account_id: str) -> None:
        self._records.pop(account_id, None)


class JsonFileSettingsStore:
    """
    Settings store backed by a single JSON document mapping account id to record.

    Writes go through a temporary file and an atomic rename so a crash never
    leaves a truncated document behind.
    """

    def __init__(self, path: Path | str) -> None:
        """
        Args:
            path: Location of the JSON document. Created on first write.
        """
        self._path = Path(path)
        self._lock = asyncio.Lock()

    async def get(self, account_id: str) -> dict[str, Any] | None:
        async with self._lock:
            records = await asyncio.to_thread(self._read)
        return records.get(account_id)

    async def set(self, account_id: str, record: dict[str, Any]) -> None:
        async with self._lock:
            records = await asyncio.to_thread(self._read)
            records[account_id] = dict(record)
            await asyncio.to_thread(self._write, records)

    async def remove(self, account_id: str) -> None:
        async with self._lock:
            records = await asyncio.to_thread(self._read)
            if records.pop(account_id, None) is None:
                return
            await asyncio.to_thread(self._write, records)

    def _read(self) -> dict[str, dict[str, Any]]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning(
                "Settings file is not valid JSON, ignoring",
                path=str(self._path),
                error=str(e),
            )
            return {}
        if not isinstance(data, dict):
            logger.warning("Settings file has unexpected layout, ignoring", path=str(self._path))
            return {}
        return data

    def _write(self, records: dict[str, dict[str, Any]]) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self._path.parent, prefix=f".{self._path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(records, f, indent=2, sort_keys=True)
            os.replace(tmp_name, self._path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
