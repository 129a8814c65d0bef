"""tb_ledger REST API — 5 endpoints, all require JWT authentication.

GET  /ledger                                   — transactions + balance
GET  /ledger/balance                           — balance only
POST /ledger/transactions                      — add (inserted at head)
POST /ledger/transactions/{transaction_id}/complete
POST /ledger/transactions/{transaction_id}/cancel
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status

from config.settings import settings
from src.tb_common.response import ApiResponse, success_response
from src.tb_gateway.auth.dependencies import get_current_user
from src.tb_gateway.user.db_models import UserModel
from src.tb_ledger.application.registry import LedgerRegistry
from src.tb_ledger.application.schemas import AddTransactionRequest
from src.tb_ledger.application.service import LedgerApplicationService

router = APIRouter(prefix="/ledger", tags=["ledger"])


def get_ledger_registry(request: Request) -> LedgerRegistry:
    """Registry built in the app lifespan; overridden in tests."""
    registry: LedgerRegistry = request.app.state.ledger_registry
    return registry


def get_ledger_service(
    registry: Annotated[LedgerRegistry, Depends(get_ledger_registry)],
) -> LedgerApplicationService:
    return LedgerApplicationService(registry, strict=settings.LEDGER_STRICT_TRANSITIONS)


def _wrap(request: Request, data: dict, message: str = "success") -> ApiResponse:
    resp = success_response(data, message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.get("")
async def get_ledger(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
) -> ApiResponse:
    data = await service.get_ledger(str(current_user.id))
    return _wrap(request, data.model_dump(mode="json"))


@router.get("/balance")
async def get_balance(
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
) -> ApiResponse:
    data = await service.get_balance(str(current_user.id))
    return _wrap(request, data.model_dump(mode="json"))


@router.post("/transactions", status_code=status.HTTP_201_CREATED)
async def add_transaction(
    body: AddTransactionRequest,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
) -> ApiResponse:
    data = await service.add_transaction(str(current_user.id), body)
    return _wrap(request, data.model_dump(mode="json"), "Transaction added")


@router.post("/transactions/{transaction_id}/complete")
async def complete_transaction(
    transaction_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
) -> ApiResponse:
    data = await service.complete_transaction(str(current_user.id), transaction_id)
    return _wrap(request, data.model_dump(mode="json"))


@router.post("/transactions/{transaction_id}/cancel")
async def cancel_transaction(
    transaction_id: str,
    request: Request,
    current_user: Annotated[UserModel, Depends(get_current_user)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
) -> ApiResponse:
    data = await service.cancel_transaction(str(current_user.id), transaction_id)
    return _wrap(request, data.model_dump(mode="json"))
