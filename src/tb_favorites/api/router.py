"""tb_favorites REST endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.tb_common.response import ApiResponse, success_response
from src.tb_favorites.application.service import FavoritesApplicationService
from src.tb_gateway.auth.dependencies import get_current_user
from src.tb_gateway.user.db_models import UserModel

router = APIRouter(prefix="/favorites", tags=["favorites"])


def get_favorites_service(request: Request) -> FavoritesApplicationService:
    service: FavoritesApplicationService = request.app.state.favorites_service
    return service


@router.get("")
async def list_favorites(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    service: Annotated[FavoritesApplicationService, Depends(get_favorites_service)],
) -> ApiResponse:
    data = await service.list_favorites(str(current_user.id))
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{service_id}")
async def is_favorite(
    service_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    service: Annotated[FavoritesApplicationService, Depends(get_favorites_service)],
) -> ApiResponse:
    data = await service.is_favorite(str(current_user.id), service_id)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/{service_id}/toggle")
async def toggle_favorite(
    service_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    service: Annotated[FavoritesApplicationService, Depends(get_favorites_service)],
) -> ApiResponse:
    data = await service.toggle(str(current_user.id), service_id)
    resp = success_response(data.model_dump())
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
