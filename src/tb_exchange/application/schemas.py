"""Pydantic schemas for tb_exchange API."""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field

from src.tb_common.enums import RequestAction
from src.tb_common.hours import hours_to_display
from src.tb_exchange.domain.models import Exchange, ServiceRequest

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateServiceRequestBody(BaseModel):
    service_id: UUID
    requested_hours: Decimal = Field(..., gt=0, le=100, decimal_places=2)
    description: str | None = Field(None, max_length=2000)
    scheduled_date: datetime | None = None


class RespondRequestBody(BaseModel):
    action: RequestAction


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class ServiceRequestItem(BaseModel):
    id: str
    service_id: str
    service_title: str | None
    requester_id: str
    requester_name: str | None
    requester_avatar_url: str | None
    provider_id: str
    provider_name: str | None
    provider_avatar_url: str | None
    description: str | None
    requested_hours: Decimal
    total_time_cost: Decimal
    total_time_cost_display: str
    scheduled_date: str | None
    status: str
    created_at: str  # ISO8601 string

    @classmethod
    def from_domain(cls, r: ServiceRequest) -> "ServiceRequestItem":
        return cls(
            id=r.id,
            service_id=r.service_id,
            service_title=r.service_title,
            requester_id=r.requester_id,
            requester_name=r.requester_name,
            requester_avatar_url=r.requester_avatar_url,
            provider_id=r.provider_id,
            provider_name=r.provider_name,
            provider_avatar_url=r.provider_avatar_url,
            description=r.description,
            requested_hours=r.requested_hours,
            total_time_cost=r.total_time_cost,
            total_time_cost_display=hours_to_display(r.total_time_cost),
            scheduled_date=r.scheduled_date.isoformat() if r.scheduled_date else None,
            status=r.status.value,
            created_at=r.created_at.isoformat() if r.created_at else "",
        )


class ServiceRequestListResponse(BaseModel):
    items: list[ServiceRequestItem]


class CompleteRequestResponse(BaseModel):
    request: ServiceRequestItem
    transaction_id: str
    requester_balance: Decimal
    provider_balance: Decimal


class ExchangeItem(BaseModel):
    """A transactions row seen from one user's side."""

    id: str
    direction: str  # "earned" or "spent" relative to the viewer
    counterparty_id: str
    counterparty_name: str | None
    service_title: str | None
    time_amount: Decimal
    time_amount_display: str
    transaction_type: str
    description: str | None
    service_request_id: str | None
    created_at: str

    @classmethod
    def from_domain(cls, e: Exchange, viewer_id: str) -> "ExchangeItem":
        earned = e.to_user_id == viewer_id
        return cls(
            id=e.id,
            direction="earned" if earned else "spent",
            counterparty_id=e.from_user_id if earned else e.to_user_id,
            counterparty_name=e.from_user_name if earned else e.to_user_name,
            service_title=e.service_title,
            time_amount=e.time_amount,
            time_amount_display=hours_to_display(e.time_amount),
            transaction_type=e.transaction_type,
            description=e.description,
            service_request_id=e.service_request_id,
            created_at=e.created_at.isoformat() if e.created_at else "",
        )


class ExchangeListResponse(BaseModel):
    items: list[ExchangeItem]


class TransactionStatsResponse(BaseModel):
    total_earned: Decimal
    total_spent: Decimal
    current_balance: Decimal
    current_balance_display: str
    transaction_count: int


class DashboardResponse(BaseModel):
    time_balance: Decimal
    time_balance_display: str
    total_services: int
    pending_requests: int
    completed_exchanges: int
