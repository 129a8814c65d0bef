"""Key-value snapshot store shared by the ledger and favorites registries.

One named key per store and scope, holding a JSON snapshot of the whole state.
Unit tests inject any object that conforms to SnapshotStoreProtocol.
"""

import json
from typing import Any, Protocol

import redis.asyncio as aioredis


class SnapshotStoreProtocol(Protocol):
    async def load(self, key: str) -> dict[str, Any] | None: ...

    async def save(self, key: str, snapshot: dict[str, Any]) -> None: ...


class RedisSnapshotStore:
    """Snapshots as JSON strings under plain Redis keys, no expiry."""

    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    async def load(self, key: str) -> dict[str, Any] | None:
        raw = await self._redis.get(key)
        if raw is None:
            return None
        data: dict[str, Any] = json.loads(raw)
        return data

    async def save(self, key: str, snapshot: dict[str, Any]) -> None:
        await self._redis.set(key, json.dumps(snapshot, ensure_ascii=False))
