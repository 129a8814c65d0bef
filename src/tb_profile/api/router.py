"""tb_profile REST endpoints.

GET   /profile/me          — own profile with authoritative time balance
PATCH /profile/me          — update name / avatar / zone / phone
GET   /profile/{user_id}   — public view of another user
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_common.database import get_db_session
from src.tb_common.response import ApiResponse, success_response
from src.tb_gateway.auth.dependencies import get_current_user
from src.tb_gateway.user.db_models import UserModel
from src.tb_profile.application.schemas import UpdateProfileRequest
from src.tb_profile.application.service import ProfileApplicationService

router = APIRouter(prefix="/profile", tags=["profile"])

_service = ProfileApplicationService()


@router.get("/me")
async def get_my_profile(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_own_profile(db, str(current_user.id))
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.patch("/me")
async def update_my_profile(
    body: UpdateProfileRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.update_profile(db, str(current_user.id), body)
    resp = success_response(data.model_dump(mode="json"), "Profile updated")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/{user_id}")
async def get_public_profile(
    user_id: UUID,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.get_public_profile(db, str(user_id))
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
