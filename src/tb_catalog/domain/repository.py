"""Repository Protocol — dependency inversion for testability."""

from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_catalog.domain.models import Category, Service


class CatalogRepositoryProtocol(Protocol):
    async def list_categories(self, db: AsyncSession) -> list[Category]: ...

    async def get_category(self, db: AsyncSession, category_id: str) -> Category | None: ...

    async def create_service(
        self,
        db: AsyncSession,
        provider_id: str,
        title: str,
        description: str,
        category_id: str,
        time_rate: Decimal,
        tags: list[str],
        availability: str | None,
        location: str | None,
    ) -> Service: ...

    async def list_services(
        self,
        db: AsyncSession,
        category_id: str | None,
        provider_id: str | None,
        pattern: str | None,
        limit: int,
    ) -> list[Service]: ...

    async def get_service(self, db: AsyncSession, service_id: str) -> Service | None: ...
