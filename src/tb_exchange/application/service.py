"""ExchangeApplicationService — the service request workflow.

Balances live in profiles.time_balance and are only moved by
complete_request, inside one DB transaction:

    1. lock the request row, require status accepted
    2. accepted -> completed (guarded on the old status)
    3. debit requester (guarded on time_balance >= cost)
    4. credit provider time_balance and experience_hours
    5. append one transactions row

Any failed step raises and the whole transaction is rolled back.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_catalog.application.service import CatalogApplicationService
from src.tb_common.enums import ExchangeType, RequestAction, RequestStatus
from src.tb_common.errors import (
    InsufficientBalanceError,
    InvalidRequestTransitionError,
    ProfileNotFoundError,
    RequestNotFoundError,
    SelfRequestError,
)
from src.tb_common.hours import calculate_cost, hours_to_display, to_hours
from src.tb_exchange.application.schemas import (
    CompleteRequestResponse,
    CreateServiceRequestBody,
    DashboardResponse,
    ExchangeItem,
    ExchangeListResponse,
    ServiceRequestItem,
    ServiceRequestListResponse,
    TransactionStatsResponse,
)
from src.tb_exchange.domain.models import ServiceRequest
from src.tb_exchange.domain.repository import ExchangeRepositoryProtocol
from src.tb_exchange.domain.transitions import CANCEL, COMPLETE, next_status
from src.tb_exchange.infrastructure.persistence import ExchangeRepository
from src.tb_profile.application.service import ProfileApplicationService

logger = logging.getLogger("tb.exchange")


class ExchangeApplicationService:
    def __init__(
        self,
        repo: ExchangeRepositoryProtocol | None = None,
        catalog: CatalogApplicationService | None = None,
        profiles: ProfileApplicationService | None = None,
    ) -> None:
        self._repo: ExchangeRepositoryProtocol = repo or ExchangeRepository()
        self._catalog = catalog or CatalogApplicationService()
        self._profiles = profiles or ProfileApplicationService()

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def create_request(
        self, db: AsyncSession, requester_id: str, body: CreateServiceRequestBody
    ) -> ServiceRequestItem:
        hours = to_hours(body.requested_hours)
        try:
            service = await self._catalog.get_active_service(db, str(body.service_id))
            if service.provider_id == requester_id:
                raise SelfRequestError()

            cost = calculate_cost(hours, service.time_rate)
            balance = await self._profiles.get_time_balance(db, requester_id)
            if balance < cost:
                raise InsufficientBalanceError(required=cost, available=balance)

            request = await self._repo.insert_request(
                db,
                service_id=service.id,
                requester_id=requester_id,
                provider_id=service.provider_id,
                description=body.description,
                requested_hours=hours,
                total_time_cost=cost,
                scheduled_date=body.scheduled_date,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info(
            "request created id=%s service=%s requester=%s cost=%s",
            request.id, service.id, requester_id, cost,
        )
        return ServiceRequestItem.from_domain(request)

    async def respond(
        self, db: AsyncSession, provider_id: str, request_id: str, action: RequestAction
    ) -> ServiceRequestItem:
        """Provider accepts or rejects a pending request."""
        try:
            request = await self._load_for_party(db, request_id, provider_id=provider_id)
            updated = await self._transition(db, request, action.value)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("request %s id=%s provider=%s", updated.status.value, request_id, provider_id)
        return ServiceRequestItem.from_domain(updated)

    async def cancel_request(
        self, db: AsyncSession, requester_id: str, request_id: str
    ) -> ServiceRequestItem:
        try:
            request = await self._load_for_party(db, request_id, requester_id=requester_id)
            updated = await self._transition(db, request, CANCEL)
            await db.commit()
        except Exception:
            await db.rollback()
            raise
        logger.info("request cancelled id=%s requester=%s", request_id, requester_id)
        return ServiceRequestItem.from_domain(updated)

    async def complete_request(
        self, db: AsyncSession, provider_id: str, request_id: str
    ) -> CompleteRequestResponse:
        try:
            request = await self._load_for_party(db, request_id, provider_id=provider_id)
            updated = await self._transition(db, request, COMPLETE)
            cost = request.total_time_cost

            requester_balance = await self._repo.debit_balance(db, request.requester_id, cost)
            if requester_balance is None:
                available = await self._profiles.get_time_balance(db, request.requester_id)
                raise InsufficientBalanceError(required=cost, available=available)

            provider_balance = await self._repo.credit_provider(
                db, provider_id, cost, request.requested_hours
            )
            if provider_balance is None:
                raise ProfileNotFoundError(provider_id)

            transaction_id = await self._repo.insert_exchange(
                db,
                from_user_id=request.requester_id,
                to_user_id=provider_id,
                time_amount=cost,
                transaction_type=ExchangeType.SERVICE_PAYMENT.value,
                description=request.service_title,
                service_request_id=request.id,
            )
            await db.commit()
        except Exception:
            await db.rollback()
            logger.warning("request completion rolled back id=%s", request_id)
            raise
        logger.info(
            "request completed id=%s tx=%s amount=%s from=%s to=%s",
            request_id, transaction_id, cost, request.requester_id, provider_id,
        )
        return CompleteRequestResponse(
            request=ServiceRequestItem.from_domain(updated),
            transaction_id=transaction_id,
            requester_balance=requester_balance,
            provider_balance=provider_balance,
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    async def list_received(
        self,
        db: AsyncSession,
        provider_id: str,
        status: RequestStatus | None = None,
        limit: int = 100,
    ) -> ServiceRequestListResponse:
        requests = await self._repo.list_requests(db, provider_id, None, status, limit)
        return ServiceRequestListResponse(
            items=[ServiceRequestItem.from_domain(r) for r in requests]
        )

    async def list_sent(
        self,
        db: AsyncSession,
        requester_id: str,
        status: RequestStatus | None = None,
        limit: int = 100,
    ) -> ServiceRequestListResponse:
        requests = await self._repo.list_requests(db, None, requester_id, status, limit)
        return ServiceRequestListResponse(
            items=[ServiceRequestItem.from_domain(r) for r in requests]
        )

    async def list_transactions(
        self, db: AsyncSession, user_id: str, limit: int = 100
    ) -> ExchangeListResponse:
        exchanges = await self._repo.list_exchanges(db, user_id, limit)
        return ExchangeListResponse(
            items=[ExchangeItem.from_domain(e, user_id) for e in exchanges]
        )

    async def transaction_stats(
        self, db: AsyncSession, user_id: str
    ) -> TransactionStatsResponse:
        totals = await self._repo.exchange_totals(db, user_id)
        balance = await self._profiles.get_time_balance(db, user_id)
        return TransactionStatsResponse(
            total_earned=totals.total_earned,
            total_spent=totals.total_spent,
            current_balance=balance,
            current_balance_display=hours_to_display(balance),
            transaction_count=totals.count,
        )

    async def dashboard(self, db: AsyncSession, user_id: str) -> DashboardResponse:
        balance = await self._profiles.get_time_balance(db, user_id)
        counts = await self._repo.dashboard_counts(db, user_id)
        return DashboardResponse(
            time_balance=balance,
            time_balance_display=hours_to_display(balance),
            total_services=counts.active_services,
            pending_requests=counts.pending_received,
            completed_exchanges=counts.completed_exchanges,
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load_for_party(
        self,
        db: AsyncSession,
        request_id: str,
        provider_id: str | None = None,
        requester_id: str | None = None,
    ) -> ServiceRequest:
        """Lock the request row; other users' requests look the same as missing ones."""
        request = await self._repo.get_request(db, request_id, for_update=True)
        if request is None:
            raise RequestNotFoundError(request_id)
        if provider_id is not None and request.provider_id != provider_id:
            raise RequestNotFoundError(request_id)
        if requester_id is not None and request.requester_id != requester_id:
            raise RequestNotFoundError(request_id)
        return request

    async def _transition(
        self, db: AsyncSession, request: ServiceRequest, action: str
    ) -> ServiceRequest:
        target = next_status(request.id, request.status, action)
        if not await self._repo.update_request_status(db, request.id, request.status, target):
            # Status moved between the locked read and the update
            raise InvalidRequestTransitionError(request.id, request.status.value, action)
        request.status = target
        return request
