"""Domain models for tb_exchange — pure dataclasses, no business logic."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from src.tb_common.enums import RequestStatus


@dataclass
class ServiceRequest:
    id: str
    service_id: str
    requester_id: str
    provider_id: str
    description: str | None
    requested_hours: Decimal
    total_time_cost: Decimal    # requested_hours * time_rate, fixed at creation
    status: RequestStatus
    scheduled_date: datetime | None = None
    # Joined for display
    service_title: str | None = None
    requester_name: str | None = None
    requester_avatar_url: str | None = None
    provider_name: str | None = None
    provider_avatar_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Exchange:
    """One row of the append-only transactions table."""

    id: str
    from_user_id: str
    to_user_id: str
    time_amount: Decimal
    transaction_type: str
    description: str | None
    service_request_id: str | None
    created_at: datetime | None = None
    from_user_name: str | None = None
    to_user_name: str | None = None
    service_title: str | None = None


@dataclass
class ExchangeTotals:
    total_earned: Decimal
    total_spent: Decimal
    count: int


@dataclass
class DashboardCounts:
    active_services: int
    pending_received: int
    completed_exchanges: int
