"""Revoked-token list in Redis, keyed by jti.

Entries expire together with the token they revoke, so the list never
outgrows the set of still-valid tokens.
"""

import redis.asyncio as aioredis

KEY_PREFIX = "banco-tempo-auth:revoked"


class TokenRevocationList:
    def __init__(self, redis: aioredis.Redis) -> None:
        self._redis = redis

    async def revoke(self, jti: str, ttl_seconds: int) -> None:
        await self._redis.set(f"{KEY_PREFIX}:{jti}", "1", ex=ttl_seconds)

    async def is_revoked(self, jti: str) -> bool:
        return bool(await self._redis.exists(f"{KEY_PREFIX}:{jti}"))
