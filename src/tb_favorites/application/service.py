"""FavoritesApplicationService — per-scope favorites with write-through persistence.

Same caching and failure policy as the ledger registry: reads use a bounded
ScopeCache, a toggle re-reads storage under the user's lock, and a failed save
is logged, reported as persisted=False, and kept in memory until a later save.
"""

import logging

from pydantic import BaseModel
from redis.exceptions import RedisError

from src.tb_common.enums import SessionEvent
from src.tb_common.errors import BackendError
from src.tb_common.scope_cache import ScopeCache
from src.tb_favorites.domain.models import Favorites
from src.tb_favorites.domain.repository import FavoritesRepositoryProtocol

logger = logging.getLogger("tb.favorites")


class FavoritesResponse(BaseModel):
    favorites: list[str]


class FavoriteStatusResponse(BaseModel):
    service_id: str
    is_favorite: bool
    persisted: bool = True


class FavoritesApplicationService:
    def __init__(
        self,
        repo: FavoritesRepositoryProtocol,
        cache: ScopeCache[Favorites] | None = None,
    ) -> None:
        self._repo = repo
        self._cache: ScopeCache[Favorites] = (
            cache if cache is not None else ScopeCache(ttl_seconds=1800.0, max_entries=10_000)
        )

    async def _get(self, scope: str) -> Favorites:
        async with self._cache.lock(scope):
            favorites = self._cache.get(scope)
            if favorites is None:
                favorites = await self._load(scope)
                self._cache.put(scope, favorites)
            return favorites

    async def _load(self, scope: str) -> Favorites:
        try:
            return await self._repo.load(scope) or Favorites()
        except (RedisError, OSError) as exc:
            logger.error("favorites load failed scope=%s: %s", scope, exc)
            raise BackendError("Could not load favorites") from exc

    async def list_favorites(self, user_id: str) -> FavoritesResponse:
        favorites = await self._get(user_id)
        return FavoritesResponse(favorites=favorites.items())

    async def is_favorite(self, user_id: str, service_id: str) -> FavoriteStatusResponse:
        favorites = await self._get(user_id)
        return FavoriteStatusResponse(
            service_id=service_id, is_favorite=favorites.is_favorite(service_id)
        )

    async def toggle(self, user_id: str, service_id: str) -> FavoriteStatusResponse:
        async with self._cache.lock(user_id):
            favorites = self._cache.get_unsaved(user_id)
            if favorites is None:
                favorites = await self._load(user_id)
                self._cache.put(user_id, favorites)
            now_favorite = favorites.toggle(service_id)
            persisted = True
            try:
                await self._repo.save(user_id, favorites)
            except (RedisError, OSError) as exc:
                logger.warning("favorites persist failed scope=%s: %s", user_id, exc)
                persisted = False
            self._cache.mark_saved(user_id, persisted)
        return FavoriteStatusResponse(
            service_id=service_id, is_favorite=now_favorite, persisted=persisted
        )

    def on_session_event(self, event: SessionEvent, user_id: str) -> None:
        if event == SessionEvent.SIGNED_OUT:
            self._cache.drop(user_id)
