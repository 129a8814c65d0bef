"""ProfileApplicationService — reads the server-authoritative profile."""

from decimal import Decimal

from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_common.errors import ProfileNotFoundError
from src.tb_profile.application.schemas import (
    ProfileResponse,
    PublicProfileResponse,
    UpdateProfileRequest,
)
from src.tb_profile.domain.models import Profile
from src.tb_profile.domain.repository import ProfileRepositoryProtocol
from src.tb_profile.infrastructure.persistence import ProfileRepository


class ProfileApplicationService:
    def __init__(self, repo: ProfileRepositoryProtocol | None = None) -> None:
        self._repo: ProfileRepositoryProtocol = repo or ProfileRepository()

    async def fetch_profile(self, db: AsyncSession, user_id: str) -> Profile:
        profile = await self._repo.get_profile(db, user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return profile

    async def get_time_balance(self, db: AsyncSession, user_id: str) -> Decimal:
        return (await self.fetch_profile(db, user_id)).time_balance

    async def get_own_profile(self, db: AsyncSession, user_id: str) -> ProfileResponse:
        return ProfileResponse.from_domain(await self.fetch_profile(db, user_id))

    async def get_public_profile(self, db: AsyncSession, user_id: str) -> PublicProfileResponse:
        return PublicProfileResponse.from_domain(await self.fetch_profile(db, user_id))

    async def update_profile(
        self, db: AsyncSession, user_id: str, body: UpdateProfileRequest
    ) -> ProfileResponse:
        try:
            profile = await self._repo.update_profile(
                db, user_id, body.model_dump(exclude_unset=True)
            )
            if profile is None:
                raise ProfileNotFoundError(user_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        return ProfileResponse.from_domain(profile)
