"""ExchangeRepositoryProtocol — abstract interface for request/transaction persistence.

Balance mutations are guarded UPDATEs: None means the guard rejected the row
(insufficient balance or missing profile). Callers own the DB transaction.
"""

from datetime import datetime
from decimal import Decimal
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_common.enums import RequestStatus
from src.tb_exchange.domain.models import (
    DashboardCounts,
    Exchange,
    ExchangeTotals,
    ServiceRequest,
)


class ExchangeRepositoryProtocol(Protocol):
    async def insert_request(
        self,
        db: AsyncSession,
        service_id: str,
        requester_id: str,
        provider_id: str,
        description: str | None,
        requested_hours: Decimal,
        total_time_cost: Decimal,
        scheduled_date: datetime | None,
    ) -> ServiceRequest: ...

    async def get_request(
        self, db: AsyncSession, request_id: str, for_update: bool = False
    ) -> ServiceRequest | None: ...

    async def update_request_status(
        self,
        db: AsyncSession,
        request_id: str,
        from_status: RequestStatus,
        to_status: RequestStatus,
    ) -> bool: ...

    async def debit_balance(
        self, db: AsyncSession, user_id: str, amount: Decimal
    ) -> Decimal | None: ...

    async def credit_provider(
        self, db: AsyncSession, user_id: str, amount: Decimal, hours: Decimal
    ) -> Decimal | None: ...

    async def insert_exchange(
        self,
        db: AsyncSession,
        from_user_id: str,
        to_user_id: str,
        time_amount: Decimal,
        transaction_type: str,
        description: str | None,
        service_request_id: str,
    ) -> str: ...

    async def list_requests(
        self,
        db: AsyncSession,
        provider_id: str | None,
        requester_id: str | None,
        status: RequestStatus | None,
        limit: int,
    ) -> list[ServiceRequest]: ...

    async def list_exchanges(
        self, db: AsyncSession, user_id: str, limit: int
    ) -> list[Exchange]: ...

    async def exchange_totals(self, db: AsyncSession, user_id: str) -> ExchangeTotals: ...

    async def dashboard_counts(self, db: AsyncSession, user_id: str) -> DashboardCounts: ...
