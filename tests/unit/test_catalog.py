"""Unit tests for catalog search and CatalogApplicationService."""

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from pydantic import ValidationError

from src.tb_catalog.application.schemas import CreateServiceRequest
from src.tb_catalog.application.service import CatalogApplicationService
from src.tb_catalog.domain.models import Category, Service
from src.tb_catalog.domain.search import normalize_tags, search_pattern
from src.tb_catalog.infrastructure.persistence import _LIST_SERVICES_SQL
from src.tb_common.errors import CategoryNotFoundError, ServiceNotFoundError

CATEGORY_ID = str(uuid.uuid4())


def _make_service(**kwargs) -> Service:
    defaults = dict(
        id="svc-1", title="Aula de violão", description="Aulas para iniciantes",
        provider_id="user-2", time_rate=Decimal("1.00"), is_active=True,
        category_id=CATEGORY_ID, tags=["música", "Violão"],
        provider_name="Carlos Lima", category_name="Música",
        created_at=datetime(2023, 8, 10, tzinfo=UTC),
    )
    defaults.update(kwargs)
    return Service(**defaults)


class TestSearch:
    def test_pattern_is_substring_match(self) -> None:
        assert search_pattern("  violão ") == "%violão%"

    def test_blank_term_means_no_filter(self) -> None:
        assert search_pattern(None) is None
        assert search_pattern("   ") is None

    def test_like_wildcards_are_escaped(self) -> None:
        assert search_pattern("50%_off") == "%50\\%\\_off%"
        assert search_pattern("a\\b") == "%a\\\\b%"

    def test_query_filters_before_limit(self) -> None:
        sql = _LIST_SERVICES_SQL.text
        limit_at = sql.index("LIMIT")
        assert sql.index("s.title ILIKE") < limit_at
        assert sql.index("s.description ILIKE") < limit_at
        assert sql.index("unnest(s.tags)") < limit_at

    def test_normalize_tags(self) -> None:
        assert normalize_tags([" música ", "", "música", "violão"]) == ["música", "violão"]


class TestCreateServiceSchema:
    def test_defaults(self) -> None:
        req = CreateServiceRequest(
            title="  Aula de violão ", description="Para iniciantes", category_id=CATEGORY_ID
        )
        assert req.title == "Aula de violão"
        assert req.time_rate == Decimal("1")
        assert req.tags == []

    def test_rate_below_one_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateServiceRequest(
                title="x", description="y", category_id=CATEGORY_ID, time_rate=Decimal("0.5")
            )

    def test_blank_title_rejected(self) -> None:
        with pytest.raises(ValidationError):
            CreateServiceRequest(title="   ", description="y", category_id=CATEGORY_ID)


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


class TestCatalogService:
    async def test_create_service(self, db) -> None:
        repo = AsyncMock()
        repo.get_category.return_value = Category(id=CATEGORY_ID, name="Música")
        repo.create_service.return_value = _make_service()
        svc = CatalogApplicationService(repo=repo)
        body = CreateServiceRequest(
            title="Aula de violão", description="Para iniciantes",
            category_id=CATEGORY_ID, tags=["música", "música"],
        )

        result = await svc.create_service(db, "user-2", body)

        kwargs = repo.create_service.await_args.kwargs
        assert kwargs["provider_id"] == "user-2"
        assert kwargs["tags"] == ["música"]
        db.commit.assert_awaited_once()
        assert result.time_rate_display == "1h"

    async def test_create_with_unknown_category(self, db) -> None:
        repo = AsyncMock()
        repo.get_category.return_value = None
        svc = CatalogApplicationService(repo=repo)
        body = CreateServiceRequest(title="x", description="y", category_id=CATEGORY_ID)

        with pytest.raises(CategoryNotFoundError):
            await svc.create_service(db, "user-2", body)

        repo.create_service.assert_not_awaited()
        db.rollback.assert_awaited_once()

    async def test_search_runs_in_query_before_limit(self, db) -> None:
        # The search term reaches the query so LIMIT applies to matches only
        older_match = _make_service(id="old", created_at=datetime(2022, 1, 5, tzinfo=UTC))
        repo = AsyncMock()
        repo.list_services.return_value = [older_match]
        svc = CatalogApplicationService(repo=repo)

        result = await svc.list_services(db, search="Violão", category_id=None, limit=3)

        assert [i.id for i in result.items] == ["old"]
        repo.list_services.assert_awaited_once_with(db, None, None, "%Violão%", 3)

    async def test_list_services_without_search(self, db) -> None:
        repo = AsyncMock()
        repo.list_services.return_value = [_make_service(id="a"), _make_service(id="b")]
        svc = CatalogApplicationService(repo=repo)

        result = await svc.list_services(db, search="  ", category_id=CATEGORY_ID, limit=50)

        assert [i.id for i in result.items] == ["a", "b"]
        repo.list_services.assert_awaited_once_with(db, CATEGORY_ID, None, None, 50)

    async def test_list_my_services(self, db) -> None:
        repo = AsyncMock()
        repo.list_services.return_value = [_make_service()]
        svc = CatalogApplicationService(repo=repo)

        result = await svc.list_my_services(db, "user-2")

        assert len(result.items) == 1
        repo.list_services.assert_awaited_once_with(db, None, "user-2", None, 100)

    async def test_inactive_service_is_not_found(self, db) -> None:
        repo = AsyncMock()
        repo.get_service.return_value = _make_service(is_active=False)
        svc = CatalogApplicationService(repo=repo)

        with pytest.raises(ServiceNotFoundError):
            await svc.get_service(db, "svc-1")

    async def test_missing_service_is_not_found(self, db) -> None:
        repo = AsyncMock()
        repo.get_service.return_value = None
        svc = CatalogApplicationService(repo=repo)

        with pytest.raises(ServiceNotFoundError):
            await svc.get_service(db, "svc-404")

    async def test_list_categories(self, db) -> None:
        repo = AsyncMock()
        repo.list_categories.return_value = [
            Category(id="c1", name="Jardim", icon="flower"),
            Category(id="c2", name="Música", icon="music"),
        ]
        svc = CatalogApplicationService(repo=repo)

        result = await svc.list_categories(db)

        assert [c.name for c in result] == ["Jardim", "Música"]
