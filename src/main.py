"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 8000
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import asyncio
import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from redis.exceptions import RedisError
from redis.exceptions import TimeoutError as RedisTimeoutError
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from config.settings import settings
from src.tb_catalog.api.router import router as catalog_router
from src.tb_common.database import engine
from src.tb_common.errors import AppError, BackendError, BackendTimeoutError
from src.tb_common.redis_client import close_redis, get_redis
from src.tb_common.response import error_response
from src.tb_common.scope_cache import ScopeCache
from src.tb_common.snapshot_store import RedisSnapshotStore
from src.tb_exchange.api.router import router as exchange_router
from src.tb_favorites.api.router import router as favorites_router
from src.tb_favorites.application.service import FavoritesApplicationService
from src.tb_favorites.infrastructure.persistence import FavoritesRepository
from src.tb_gateway.api.router import router as auth_router
from src.tb_gateway.auth.revocation import TokenRevocationList
from src.tb_gateway.middleware.request_log import RequestLogMiddleware
from src.tb_gateway.session.events import SessionEventBus
from src.tb_ledger.api.router import router as ledger_router
from src.tb_ledger.application.registry import LedgerRegistry
from src.tb_ledger.infrastructure.persistence import LedgerRepository
from src.tb_profile.api.router import router as profile_router

logger = logging.getLogger("tb.app")


def _scope_cache() -> ScopeCache:
    return ScopeCache(
        ttl_seconds=settings.SCOPE_CACHE_TTL_SECONDS,
        max_entries=settings.SCOPE_CACHE_MAX_ENTRIES,
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: verify DB + Redis, build the per-user registries. Shutdown: dispose."""
    # Startup
    async with engine.connect() as conn:
        await conn.execute(text("SELECT 1"))
    redis = await get_redis()
    await redis.ping()

    store = RedisSnapshotStore(redis)
    ledger_registry = LedgerRegistry(
        LedgerRepository(store, settings.LEDGER_STARTING_BALANCE),
        settings.LEDGER_STARTING_BALANCE,
        seed_demo=settings.LEDGER_SEED_DEMO,
        cache=_scope_cache(),
    )
    favorites_service = FavoritesApplicationService(
        FavoritesRepository(store), cache=_scope_cache()
    )
    session_events = SessionEventBus()
    session_events.subscribe(ledger_registry.on_session_event)
    session_events.subscribe(favorites_service.on_session_event)

    app.state.ledger_registry = ledger_registry
    app.state.favorites_service = favorites_service
    app.state.revocations = TokenRevocationList(redis)
    app.state.session_events = session_events
    yield
    # Shutdown
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.DEBUG,
)


app.add_middleware(RequestLogMiddleware)


def _error_json(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    return _error_json(request, exc)


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    # asyncpg command_timeout surfaces wrapped in a DBAPIError
    if isinstance(exc.__cause__, asyncio.TimeoutError) or isinstance(
        getattr(exc, "orig", None), asyncio.TimeoutError
    ):
        logger.error("database timeout on %s %s", request.method, request.url.path)
        return _error_json(request, BackendTimeoutError("Database request timed out"))
    logger.error("database error on %s %s: %s", request.method, request.url.path, exc)
    return _error_json(request, BackendError("Database unavailable"))


@app.exception_handler(RedisTimeoutError)
async def redis_timeout_handler(request: Request, exc: RedisTimeoutError) -> JSONResponse:
    logger.error("redis timeout on %s %s", request.method, request.url.path)
    return _error_json(request, BackendTimeoutError("Key-value store timed out"))


@app.exception_handler(RedisError)
async def redis_error_handler(request: Request, exc: RedisError) -> JSONResponse:
    logger.error("redis error on %s %s: %s", request.method, request.url.path, exc)
    return _error_json(request, BackendError("Key-value store unavailable"))


@app.exception_handler(asyncio.TimeoutError)
async def timeout_handler(request: Request, exc: asyncio.TimeoutError) -> JSONResponse:
    logger.error("timeout on %s %s", request.method, request.url.path)
    return _error_json(request, BackendTimeoutError())


app.include_router(auth_router, prefix="/api/v1")
app.include_router(profile_router, prefix="/api/v1")
app.include_router(catalog_router, prefix="/api/v1")
app.include_router(exchange_router, prefix="/api/v1")
app.include_router(ledger_router, prefix="/api/v1")
app.include_router(favorites_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "version": "0.1.0"}
