"""Repository Protocol — dependency inversion for testability."""

from typing import Any, Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_profile.domain.models import Profile


class ProfileRepositoryProtocol(Protocol):
    async def get_profile(self, db: AsyncSession, user_id: str) -> Profile | None: ...

    async def update_profile(
        self, db: AsyncSession, user_id: str, fields: dict[str, Any]
    ) -> Profile | None: ...
