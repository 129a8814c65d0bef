"""API tests through the ASGI app with dependency overrides (no DB, no Redis)."""

import uuid
from collections.abc import AsyncIterator
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import ASGITransport, AsyncClient

from src.main import app
from src.tb_common.database import get_db_session
from src.tb_common.errors import InsufficientBalanceError
from src.tb_favorites.application.service import FavoritesApplicationService
from src.tb_favorites.infrastructure.persistence import FavoritesRepository
from src.tb_gateway.auth.dependencies import get_current_user
from src.tb_gateway.user.db_models import UserModel
from src.tb_ledger.application.registry import LedgerRegistry
from src.tb_ledger.infrastructure.persistence import LedgerRepository


def _make_user() -> UserModel:
    user = UserModel()
    user.id = uuid.uuid4()
    user.email = "maria@example.com"
    user.password_hash = "x"
    user.is_active = True
    return user


@pytest.fixture
async def client(memory_store) -> AsyncIterator[AsyncClient]:
    user = _make_user()
    start = Decimal("15")
    app.state.ledger_registry = LedgerRegistry(LedgerRepository(memory_store, start), start)
    app.state.favorites_service = FavoritesApplicationService(FavoritesRepository(memory_store))

    async def _no_db() -> AsyncIterator[AsyncMock]:
        yield AsyncMock()

    app.dependency_overrides[get_current_user] = lambda: user
    app.dependency_overrides[get_db_session] = _no_db
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


async def test_ledger_flow(client: AsyncClient) -> None:
    resp = await client.get("/api/v1/ledger/balance")
    assert resp.json()["data"]["time_balance"] == "15"

    resp = await client.post(
        "/api/v1/ledger/transactions",
        json={
            "id": "t-earned",
            "service": {"title": "Reparo de computador", "category": "Tecnologia"},
            "provider": {"name": "Ana Costa"},
            "hours": "2",
            "type": "earned",
        },
    )
    assert resp.status_code == 201
    body = resp.json()
    assert body["code"] == 0
    assert body["data"]["transaction"]["status"] == "pending"
    assert body["data"]["balance"]["time_balance"] == "15"

    resp = await client.post("/api/v1/ledger/transactions/t-earned/complete")
    data = resp.json()["data"]
    assert data["outcome"] == "applied"
    assert data["balance"]["time_balance_display"] == "17h"
    assert data["persisted"] is True

    resp = await client.post("/api/v1/ledger/transactions/t-earned/cancel")
    data = resp.json()["data"]
    assert data["outcome"] == "already_terminal"
    assert data["transaction"]["status"] == "completed"


async def test_ledger_rejects_zero_hours(client: AsyncClient) -> None:
    resp = await client.post(
        "/api/v1/ledger/transactions",
        json={
            "service": {"title": "Aula", "category": "Música"},
            "provider": {"name": "Carlos"},
            "hours": "0",
            "type": "spent",
        },
    )
    assert resp.status_code == 422
    assert resp.json()["code"] == 5001


async def test_favorites_toggle(client: AsyncClient) -> None:
    resp = await client.post("/api/v1/favorites/svc-1/toggle")
    assert resp.json()["data"]["is_favorite"] is True
    resp = await client.get("/api/v1/favorites/svc-1")
    assert resp.json()["data"]["is_favorite"] is True
    await client.post("/api/v1/favorites/svc-1/toggle")
    resp = await client.get("/api/v1/favorites")
    assert resp.json()["data"]["favorites"] == []


async def test_app_error_envelope(client: AsyncClient, monkeypatch: pytest.MonkeyPatch) -> None:
    fake = AsyncMock()
    fake.create_request.side_effect = InsufficientBalanceError(
        required=Decimal("5.00"), available=Decimal("2.00")
    )
    monkeypatch.setattr("src.tb_exchange.api.router._service", fake)

    resp = await client.post(
        "/api/v1/requests",
        json={"service_id": str(uuid.uuid4()), "requested_hours": "5"},
        headers={"X-Request-ID": "req_client_1234"},
    )

    assert resp.status_code == 422
    body = resp.json()
    assert body["code"] == 2001
    assert body["data"] is None
    assert body["request_id"] == "req_client_1234"
    assert resp.headers["X-Request-ID"] == "req_client_1234"


async def test_invalid_path_uuid(client: AsyncClient) -> None:
    resp = await client.get("/api/v1/services/not-a-uuid")
    assert resp.status_code == 422


def test_auth_routes() -> None:
    paths = {getattr(route, "path", None) for route in app.routes}
    for path in ("signup", "signin", "refresh", "signout", "account"):
        assert f"/api/v1/auth/{path}" in paths
