"""FavoritesRepository — one snapshot per scope under banco-tempo-favorites:<scope>."""

from src.tb_common.snapshot_store import SnapshotStoreProtocol
from src.tb_favorites.domain.models import Favorites

KEY_PREFIX = "banco-tempo-favorites"


class FavoritesRepository:
    def __init__(self, store: SnapshotStoreProtocol) -> None:
        self._store = store

    async def load(self, scope: str) -> Favorites | None:
        snapshot = await self._store.load(f"{KEY_PREFIX}:{scope}")
        return Favorites.from_snapshot(snapshot) if snapshot is not None else None

    async def save(self, scope: str, favorites: Favorites) -> None:
        await self._store.save(f"{KEY_PREFIX}:{scope}", favorites.to_snapshot())
