"""
Key-value stores for project snapshots.
"""

from __future__ import annotations

import asyncio
import hashlib
from pathlib import Path
from typing import Dict, Optional

from clprompt.application.ports import KeyValueStoragePort
from clprompt.domain.exceptions import StorageError, StorageQuotaExceededError
from clprompt.infra.config.logging_config import get_logger


class InMemoryKeyValueStore(KeyValueStoragePort):
    """Process-local store with a byte quota over keys plus values."""

    def __init__(self, quota_bytes: Optional[int] = None) -> None:
        self._data: Dict[str, str] = {}
        self.quota_bytes = quota_bytes
        self._log = get_logger("infra.storage.memory")

    def used_bytes(self) -> int:
        return sum(len(k.encode()) + len(v.encode()) for k, v in self._data.items())

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        if self.quota_bytes is not None:
            current = self._data.get(key)
            used = self.used_bytes()
            if current is not None:
                used -= len(key.encode()) + len(current.encode())
            if used + len(key.encode()) + len(value.encode()) > self.quota_bytes:
                self._log.warning("storage.quota_exceeded", key=key, quota=self.quota_bytes)
                raise StorageQuotaExceededError(key, self.quota_bytes)
        self._data[key] = value


class FileKeyValueStore(KeyValueStoragePort):
    """One file per key under ``root``; file names are hashes of the key."""

    def __init__(self, root: str = ".projects") -> None:
        self.root = Path(root)
        self._log = get_logger("infra.storage.file")

    def _path(self, key: str) -> Path:
        digest = hashlib.sha256(key.encode("utf-8")).hexdigest()
        return self.root / f"{digest}.json"

    def _read(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.is_file():
            return None
        return path.read_text(encoding="utf-8")

    def _write(self, key: str, value: str) -> None:
        self.root.mkdir(parents=True, exist_ok=True)
        path = self._path(key)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(value, encoding="utf-8")
        tmp.replace(path)

    async def get(self, key: str) -> Optional[str]:
        try:
            return await asyncio.to_thread(self._read, key)
        except (OSError, UnicodeDecodeError) as e:
            self._log.error("storage.read_failed", key=key, error=str(e))
            raise StorageError(f"Could not read {key}: {e}") from e

    async def set(self, key: str, value: str) -> None:
        try:
            await asyncio.to_thread(self._write, key, value)
        except OSError as e:
            self._log.error("storage.write_failed", key=key, error=str(e))
            raise StorageError(f"Could not write {key}: {e}") from e
