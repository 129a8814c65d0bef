"""tb_exchange REST endpoints.

POST /requests                         — request a service (balance checked)
GET  /requests/received                — requests for my services
GET  /requests/sent                    — requests I made
POST /requests/{request_id}/respond    — provider accepts or rejects
POST /requests/{request_id}/cancel     — requester withdraws a pending request
POST /requests/{request_id}/complete   — provider completes; moves the hours
GET  /transactions                     — my exchange history
GET  /transactions/stats               — earned / spent / balance
GET  /dashboard                        — summary counters
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_common.database import get_db_session
from src.tb_common.enums import RequestStatus
from src.tb_common.response import ApiResponse, success_response
from src.tb_exchange.application.schemas import CreateServiceRequestBody, RespondRequestBody
from src.tb_exchange.application.service import ExchangeApplicationService
from src.tb_gateway.auth.dependencies import get_current_user
from src.tb_gateway.user.db_models import UserModel

router = APIRouter(tags=["exchange"])

_service = ExchangeApplicationService()


@router.post("/requests", status_code=status.HTTP_201_CREATED)
async def create_request(
    body: CreateServiceRequestBody,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.create_request(db, str(current_user.id), body)
    resp = success_response(data.model_dump(mode="json"), "Request sent")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/requests/received")
async def list_received(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status_filter: RequestStatus | None = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    data = await _service.list_received(db, str(current_user.id), status_filter, limit)
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/requests/sent")
async def list_sent(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    status_filter: RequestStatus | None = Query(None, alias="status"),
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    data = await _service.list_sent(db, str(current_user.id), status_filter, limit)
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/requests/{request_id}/respond")
async def respond_to_request(
    request_id: UUID,
    body: RespondRequestBody,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.respond(db, str(current_user.id), str(request_id), body.action)
    resp = success_response(data.model_dump(mode="json"), f"Request {data.status}")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/requests/{request_id}/cancel")
async def cancel_request(
    request_id: UUID,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.cancel_request(db, str(current_user.id), str(request_id))
    resp = success_response(data.model_dump(mode="json"), "Request cancelled")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("/requests/{request_id}/complete")
async def complete_request(
    request_id: UUID,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.complete_request(db, str(current_user.id), str(request_id))
    resp = success_response(data.model_dump(mode="json"), "Service completed")
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/transactions")
async def list_transactions(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(100, ge=1, le=500),
) -> ApiResponse:
    data = await _service.list_transactions(db, str(current_user.id), limit)
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/transactions/stats")
async def transaction_stats(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.transaction_stats(db, str(current_user.id))
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("/dashboard")
async def dashboard(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    data = await _service.dashboard(db, str(current_user.id))
    resp = success_response(data.model_dump(mode="json"))
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp
