"""CatalogRepository — concrete implementation of CatalogRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
"""

from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_catalog.domain.models import Category, Service
from src.tb_common.errors import InternalError

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_SERVICE_SELECT = """
    SELECT s.id, s.title, s.description, s.provider_id, s.time_rate, s.is_active,
           s.category_id, s.tags, s.availability, s.location,
           s.created_at, s.updated_at,
           p.name AS provider_name, p.avatar_url AS provider_avatar_url,
           c.name AS category_name, c.icon AS category_icon
    FROM services s
    LEFT JOIN profiles p ON p.id = s.provider_id
    LEFT JOIN service_categories c ON c.id = s.category_id
"""

_LIST_CATEGORIES_SQL = text("""
    SELECT id, name, description, icon
    FROM service_categories
    ORDER BY name
""")

_GET_CATEGORY_SQL = text("""
    SELECT id, name, description, icon
    FROM service_categories
    WHERE id = :category_id
""")

_GET_SERVICE_SQL = text(_SERVICE_SELECT + " WHERE s.id = :service_id")

_LIST_SERVICES_SQL = text(_SERVICE_SELECT + """
    WHERE s.is_active
      AND (CAST(:category_id AS UUID) IS NULL OR s.category_id = CAST(:category_id AS UUID))
      AND (CAST(:provider_id AS UUID) IS NULL OR s.provider_id = CAST(:provider_id AS UUID))
      AND (
          CAST(:pattern AS TEXT) IS NULL
          OR s.title ILIKE CAST(:pattern AS TEXT)
          OR s.description ILIKE CAST(:pattern AS TEXT)
          OR EXISTS (
              SELECT 1 FROM unnest(s.tags) AS t(tag)
              WHERE t.tag ILIKE CAST(:pattern AS TEXT)
          )
      )
    ORDER BY s.created_at DESC, s.id DESC
    LIMIT :limit
""")

_INSERT_SERVICE_SQL = text("""
    INSERT INTO services
        (provider_id, title, description, category_id, time_rate,
         tags, availability, location)
    VALUES
        (:provider_id, :title, :description, :category_id, :time_rate,
         :tags, :availability, :location)
    RETURNING id
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_category(row: object) -> Category:
    return Category(
        id=str(row.id),  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        icon=row.icon,  # type: ignore[attr-defined]
    )


def _row_to_service(row: object) -> Service:
    category_id = row.category_id  # type: ignore[attr-defined]
    return Service(
        id=str(row.id),  # type: ignore[attr-defined]
        title=row.title,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        provider_id=str(row.provider_id),  # type: ignore[attr-defined]
        time_rate=row.time_rate,  # type: ignore[attr-defined]
        is_active=row.is_active,  # type: ignore[attr-defined]
        category_id=str(category_id) if category_id else None,
        tags=list(row.tags or []),  # type: ignore[attr-defined]
        availability=row.availability,  # type: ignore[attr-defined]
        location=row.location,  # type: ignore[attr-defined]
        provider_name=row.provider_name,  # type: ignore[attr-defined]
        provider_avatar_url=row.provider_avatar_url,  # type: ignore[attr-defined]
        category_name=row.category_name,  # type: ignore[attr-defined]
        category_icon=row.category_icon,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CatalogRepository:
    async def list_categories(self, db: AsyncSession) -> list[Category]:
        result = await db.execute(_LIST_CATEGORIES_SQL)
        return [_row_to_category(row) for row in result.fetchall()]

    async def get_category(self, db: AsyncSession, category_id: str) -> Category | None:
        result = await db.execute(_GET_CATEGORY_SQL, {"category_id": category_id})
        row = result.fetchone()
        return _row_to_category(row) if row else None

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
    ) -> Service:
        result = await db.execute(
            _INSERT_SERVICE_SQL,
            {
                "provider_id": provider_id,
                "title": title,
                "description": description,
                "category_id": category_id,
                "time_rate": time_rate,
                # Empty tag list is stored as NULL
                "tags": tags or None,
                "availability": availability,
                "location": location,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Service insert returned no rows — this should never happen")
        service = await self.get_service(db, str(row.id))
        if service is None:
            raise InternalError("Inserted service not readable in the same transaction")
        return service

    async def list_services(
        self,
        db: AsyncSession,
        category_id: str | None,
        provider_id: str | None,
        pattern: str | None,
        limit: int,
    ) -> list[Service]:
        """Active services, newest first. pattern is an ILIKE pattern applied before LIMIT."""
        result = await db.execute(
            _LIST_SERVICES_SQL,
            {
                "category_id": category_id,
                "provider_id": provider_id,
                "pattern": pattern,
                "limit": limit,
            },
        )
        return [_row_to_service(row) for row in result.fetchall()]

    async def get_service(self, db: AsyncSession, service_id: str) -> Service | None:
        result = await db.execute(_GET_SERVICE_SQL, {"service_id": service_id})
        row = result.fetchone()
        return _row_to_service(row) if row else None
