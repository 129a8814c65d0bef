"""CatalogApplicationService — categories and service listings.

create_service commits; everything else is read-only.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_catalog.application.schemas import (
    CategoryItem,
    CreateServiceRequest,
    ServiceItem,
    ServiceListResponse,
)
from src.tb_catalog.domain.models import Service
from src.tb_catalog.domain.repository import CatalogRepositoryProtocol
from src.tb_catalog.domain.search import search_pattern
from src.tb_catalog.infrastructure.persistence import CatalogRepository
from src.tb_common.errors import CategoryNotFoundError, ServiceNotFoundError

logger = logging.getLogger("tb.catalog")


class CatalogApplicationService:
    def __init__(self, repo: CatalogRepositoryProtocol | None = None) -> None:
        self._repo: CatalogRepositoryProtocol = repo or CatalogRepository()

    async def list_categories(self, db: AsyncSession) -> list[CategoryItem]:
        categories = await self._repo.list_categories(db)
        return [CategoryItem.from_domain(c) for c in categories]

    async def create_service(
        self, db: AsyncSession, provider_id: str, body: CreateServiceRequest
    ) -> ServiceItem:
        category_id = str(body.category_id)
        try:
            if await self._repo.get_category(db, category_id) is None:
                raise CategoryNotFoundError(category_id)
            service = await self._repo.create_service(
                db,
                provider_id=provider_id,
                title=body.title,
                description=body.description,
                category_id=category_id,
                time_rate=body.time_rate,
                tags=body.tags,
                availability=body.availability,
                location=body.location,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("service created id=%s provider=%s", service.id, provider_id)
        return ServiceItem.from_domain(service)

    async def list_services(
        self,
        db: AsyncSession,
        search: str | None,
        category_id: str | None,
        limit: int,
    ) -> ServiceListResponse:
        services = await self._repo.list_services(
            db, category_id, None, search_pattern(search), limit
        )
        return ServiceListResponse(items=[ServiceItem.from_domain(s) for s in services])

    async def list_my_services(
        self, db: AsyncSession, provider_id: str, limit: int = 100
    ) -> ServiceListResponse:
        services = await self._repo.list_services(db, None, provider_id, None, limit)
        return ServiceListResponse(items=[ServiceItem.from_domain(s) for s in services])

    async def get_active_service(self, db: AsyncSession, service_id: str) -> Service:
        """Active service or ServiceNotFoundError; used by the request workflow too."""
        service = await self._repo.get_service(db, service_id)
        if service is None or not service.is_active:
            raise ServiceNotFoundError(service_id)
        return service

    async def get_service(self, db: AsyncSession, service_id: str) -> ServiceItem:
        return ServiceItem.from_domain(await self.get_active_service(db, service_id))
