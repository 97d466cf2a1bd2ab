from typing import Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

from clprompt.application.ports import KeyValueStoragePort
from clprompt.domain.exceptions import StorageError
from clprompt.infra.config.logging_config import get_logger


class RedisKeyValueStore(KeyValueStoragePort):
    def __init__(
        self,
        url: str = "redis://localhost:6379/0",
        prefix: str = "clprompt:",
        client: Optional[redis.Redis] = None,
    ) -> None:
        self._r = client or redis.from_url(url, decode_responses=True)
        self._prefix = prefix
        self._log = get_logger("infra.storage.redis")

    def _key(self, key: str) -> str:
        return f"{self._prefix}{key}"

    async def get(self, key: str) -> Optional[str]:
        try:
            raw = await self._r.get(self._key(key))
        except RedisError as e:
            self._log.error("storage.read_failed", key=key, error=str(e))
            raise StorageError(f"Could not read {key}: {e}") from e
        if isinstance(raw, bytes):
            return raw.decode("utf-8")
        return raw

    async def set(self, key: str, value: str) -> None:
        try:
            await self._r.set(self._key(key), value)
        except RedisError as e:
            self._log.error("storage.write_failed", key=key, error=str(e))
            raise StorageError(f"Could not write {key}: {e}") from e

    async def close(self) -> None:
        await self._r.aclose()
