"""Auth API router: signup, signin, refresh, signout, account deletion.

All endpoints return ApiResponse. request_id is read from request.state
(injected by RequestLogMiddleware).
"""

from typing import Any

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.tb_common.database import get_db_session
from src.tb_common.response import ApiResponse, success_response
from src.tb_gateway.auth.dependencies import (
    get_current_user,
    get_revocation_list,
    get_session_events,
    get_token_payload,
)
from src.tb_gateway.auth.revocation import TokenRevocationList
from src.tb_gateway.session.events import SessionEventBus
from src.tb_gateway.user.db_models import UserModel
from src.tb_gateway.user.schemas import (
    RefreshRequest,
    RefreshResponse,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    SignUpResponse,
    UserInfo,
)
from src.tb_gateway.user.service import UserService

router = APIRouter(prefix="/auth", tags=["auth"])
_service = UserService(starting_balance=settings.PROFILE_STARTING_BALANCE)


def _get_request_id(request: Request) -> str:
    """Read request_id injected by RequestLogMiddleware, fallback if absent."""
    return getattr(request.state, "request_id", "req_unknown")


@router.post(
    "/signup",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse,
    summary="User sign-up",
)
async def sign_up(
    request: Request,
    body: SignUpRequest,
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    async with db.begin():
        user = await _service.sign_up(
            body.email,
            body.password,
            {"name": body.name, "cpf": body.cpf, "phone": body.phone},
            db,
        )

    data = SignUpResponse(
        user_id=str(user.id),
        email=user.email,
        name=body.name,
        created_at=user.created_at.isoformat(),
    )
    resp = success_response(data.model_dump(), "User registered successfully")
    resp.request_id = _get_request_id(request)
    return resp


@router.post(
    "/signin",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="User sign-in",
)
async def sign_in(
    request: Request,
    body: SignInRequest,
    db: AsyncSession = Depends(get_db_session),
    events: SessionEventBus = Depends(get_session_events),
) -> ApiResponse:
    user, access_token, refresh_token = await _service.sign_in(
        body.email, body.password, db, events
    )

    data = SignInResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="Bearer",
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
        user=UserInfo(user_id=str(user.id), email=user.email),
    )
    resp = success_response(data.model_dump(), "Login successful")
    resp.request_id = _get_request_id(request)
    return resp


@router.post(
    "/refresh",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Refresh access token",
)
async def refresh_token(
    request: Request,
    body: RefreshRequest,
    revocations: TokenRevocationList = Depends(get_revocation_list),
) -> ApiResponse:
    new_access_token = await _service.refresh(body.refresh_token, revocations)

    data = RefreshResponse(
        access_token=new_access_token,
        expires_in=settings.JWT_EXPIRE_MINUTES * 60,
    )
    resp = success_response(data.model_dump(), "Token refreshed")
    resp.request_id = _get_request_id(request)
    return resp


@router.post(
    "/signout",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Sign out and revoke the current session",
)
async def sign_out(
    request: Request,
    payload: dict[str, Any] = Depends(get_token_payload),
    revocations: TokenRevocationList = Depends(get_revocation_list),
    events: SessionEventBus = Depends(get_session_events),
) -> ApiResponse:
    await _service.sign_out(payload, revocations, events)
    resp = success_response(None, "Signed out")
    resp.request_id = _get_request_id(request)
    return resp


@router.delete(
    "/account",
    status_code=status.HTTP_200_OK,
    response_model=ApiResponse,
    summary="Delete profile and deactivate the account",
)
async def delete_account(
    request: Request,
    current_user: UserModel = Depends(get_current_user),
    payload: dict[str, Any] = Depends(get_token_payload),
    revocations: TokenRevocationList = Depends(get_revocation_list),
    events: SessionEventBus = Depends(get_session_events),
    db: AsyncSession = Depends(get_db_session),
) -> ApiResponse:
    # get_current_user already opened the session's transaction
    try:
        await _service.delete_account(current_user, db)
        await db.commit()
    except Exception:
        await db.rollback()
        raise
    await _service.sign_out(payload, revocations, events)
    resp = success_response(None, "Account deleted")
    resp.request_id = _get_request_id(request)
    return resp
