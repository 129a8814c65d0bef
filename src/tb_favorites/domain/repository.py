from typing import Protocol

from src.tb_favorites.domain.models import Favorites


class FavoritesRepositoryProtocol(Protocol):
    async def load(self, scope: str) -> Favorites | None: ...

    async def save(self, scope: str, favorites: Favorites) -> None: ...
