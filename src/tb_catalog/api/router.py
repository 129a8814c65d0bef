"""tb_catalog REST endpoints.

GET  /categories            — all categories, by name
GET  /services              — active services, optional search / category filter
POST /services              — publish a service as the current user
GET  /services/mine         — current user's active services
GET  /services/{service_id} — single active service
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_catalog.application.schemas import CreateServiceRequest
from src.tb_catalog.application.service import CatalogApplicationService
from src.tb_common.database import get_db_session
from src.tb_common.response import ApiResponse, success_response
from src.tb_gateway.auth.dependencies import get_current_user
from src.tb_gateway.user.db_models import UserModel

router = APIRouter(tags=["catalog"])

_service = CatalogApplicationService()


@router.get("/categories")
async def list_categories(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    items = await _service.list_categories(db)
    resp = success_response({"items": [c.model_dump(mode="json") for c in items]})
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/services")
async def list_services(
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
    search: str | None = Query(None, max_length=100),
    category_id: UUID | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    data = await _service.list_services(
        db,
        search=search,
        category_id=str(category_id) if category_id else None,
        limit=limit,
    )
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/services", status_code=status.HTTP_201_CREATED)
async def create_service(
    body: CreateServiceRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_service(db, str(current_user.id), body)
    resp = success_response(data.model_dump(mode="json"), "Service published")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/services/mine")
async def list_my_services(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.list_my_services(db, str(current_user.id))
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/services/{service_id}")
async def get_service(
    service_id: UUID,
    request: Request,
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_service(db, str(service_id))
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
