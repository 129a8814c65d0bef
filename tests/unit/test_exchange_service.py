"""Unit tests for the service request workflow (mocked repository and collaborators)."""

import uuid
from datetime import UTC, datetime
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.tb_catalog.domain.models import Service
from src.tb_common.enums import RequestAction, RequestStatus
from src.tb_common.errors import (
    InsufficientBalanceError,
    InvalidRequestTransitionError,
    ProfileNotFoundError,
    RequestNotFoundError,
    SelfRequestError,
    ServiceNotFoundError,
)
from src.tb_exchange.application.schemas import CreateServiceRequestBody
from src.tb_exchange.application.service import ExchangeApplicationService
from src.tb_exchange.domain.models import (
    DashboardCounts,
    Exchange,
    ExchangeTotals,
    ServiceRequest,
)
from src.tb_exchange.domain.transitions import next_status

REQUESTER = "user-requester"
PROVIDER = "user-provider"
SERVICE_ID = str(uuid.uuid4())


def _make_service(**kwargs) -> Service:
    defaults = dict(
        id=SERVICE_ID, title="Reparo de computador", description="Formatação e limpeza",
        provider_id=PROVIDER, time_rate=Decimal("1.00"), is_active=True,
    )
    defaults.update(kwargs)
    return Service(**defaults)


def _make_request(**kwargs) -> ServiceRequest:
    defaults = dict(
        id="req-1", service_id=SERVICE_ID, requester_id=REQUESTER, provider_id=PROVIDER,
        description="Meu notebook não liga", requested_hours=Decimal("2.00"),
        total_time_cost=Decimal("2.00"), status=RequestStatus.PENDING,
        service_title="Reparo de computador", created_at=datetime(2023, 8, 12, tzinfo=UTC),
    )
    defaults.update(kwargs)
    return ServiceRequest(**defaults)


def _body(hours: str = "2") -> CreateServiceRequestBody:
    return CreateServiceRequestBody(service_id=SERVICE_ID, requested_hours=Decimal(hours))


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


@pytest.fixture
def repo() -> AsyncMock:
    repo = AsyncMock()
    repo.update_request_status.return_value = True
    return repo


@pytest.fixture
def catalog() -> AsyncMock:
    catalog = AsyncMock()
    catalog.get_active_service.return_value = _make_service()
    return catalog


@pytest.fixture
def profiles() -> AsyncMock:
    profiles = AsyncMock()
    profiles.get_time_balance.return_value = Decimal("15.00")
    return profiles


@pytest.fixture
def svc(repo, catalog, profiles) -> ExchangeApplicationService:
    return ExchangeApplicationService(repo=repo, catalog=catalog, profiles=profiles)


class TestStateMachine:
    @pytest.mark.parametrize(
        "current, action, expected",
        [
            (RequestStatus.PENDING, "accept", RequestStatus.ACCEPTED),
            (RequestStatus.PENDING, "reject", RequestStatus.REJECTED),
            (RequestStatus.PENDING, "cancel", RequestStatus.CANCELLED),
            (RequestStatus.ACCEPTED, "complete", RequestStatus.COMPLETED),
        ],
    )
    def test_allowed(self, current, action, expected) -> None:
        assert next_status("r", current, action) == expected

    @pytest.mark.parametrize(
        "current, action",
        [
            (RequestStatus.PENDING, "complete"),
            (RequestStatus.ACCEPTED, "accept"),
            (RequestStatus.ACCEPTED, "cancel"),
            (RequestStatus.COMPLETED, "complete"),
            (RequestStatus.REJECTED, "accept"),
            (RequestStatus.CANCELLED, "cancel"),
        ],
    )
    def test_rejected(self, current, action) -> None:
        with pytest.raises(InvalidRequestTransitionError):
            next_status("r", current, action)


class TestCreateRequest:
    async def test_creates_with_cost_from_rate(self, svc, repo, catalog, db) -> None:
        catalog.get_active_service.return_value = _make_service(time_rate=Decimal("1.5"))
        repo.insert_request.return_value = _make_request(total_time_cost=Decimal("3.00"))

        result = await svc.create_request(db, REQUESTER, _body("2"))

        kwargs = repo.insert_request.await_args.kwargs
        assert kwargs["total_time_cost"] == Decimal("3.00")
        assert kwargs["provider_id"] == PROVIDER
        assert kwargs["requester_id"] == REQUESTER
        db.commit.assert_awaited_once()
        assert result.total_time_cost_display == "3h"

    async def test_insufficient_balance_writes_nothing(self, svc, repo, profiles, db) -> None:
        profiles.get_time_balance.return_value = Decimal("2.00")

        with pytest.raises(InsufficientBalanceError) as exc_info:
            await svc.create_request(db, REQUESTER, _body("5"))

        assert exc_info.value.required == Decimal("5.00")
        assert exc_info.value.available == Decimal("2.00")
        repo.insert_request.assert_not_awaited()
        repo.insert_exchange.assert_not_awaited()
        db.commit.assert_not_awaited()
        db.rollback.assert_awaited_once()

    async def test_exact_balance_is_enough(self, svc, repo, profiles, db) -> None:
        profiles.get_time_balance.return_value = Decimal("2.00")
        repo.insert_request.return_value = _make_request()

        await svc.create_request(db, REQUESTER, _body("2"))

        repo.insert_request.assert_awaited_once()

    async def test_own_service_rejected(self, svc, repo, db) -> None:
        with pytest.raises(SelfRequestError):
            await svc.create_request(db, PROVIDER, _body())
        repo.insert_request.assert_not_awaited()

    async def test_inactive_service(self, svc, repo, catalog, db) -> None:
        catalog.get_active_service.side_effect = ServiceNotFoundError(SERVICE_ID)
        with pytest.raises(ServiceNotFoundError):
            await svc.create_request(db, REQUESTER, _body())
        repo.insert_request.assert_not_awaited()


class TestRespondAndCancel:
    async def test_provider_accepts(self, svc, repo, db) -> None:
        repo.get_request.return_value = _make_request()

        result = await svc.respond(db, PROVIDER, "req-1", RequestAction.ACCEPT)

        repo.update_request_status.assert_awaited_once_with(
            db, "req-1", RequestStatus.PENDING, RequestStatus.ACCEPTED
        )
        assert result.status == "accepted"
        db.commit.assert_awaited_once()

    async def test_provider_rejects(self, svc, repo, db) -> None:
        repo.get_request.return_value = _make_request()
        result = await svc.respond(db, PROVIDER, "req-1", RequestAction.REJECT)
        assert result.status == "rejected"

    async def test_requester_cannot_respond(self, svc, repo, db) -> None:
        repo.get_request.return_value = _make_request()
        with pytest.raises(RequestNotFoundError):
            await svc.respond(db, REQUESTER, "req-1", RequestAction.ACCEPT)
        repo.update_request_status.assert_not_awaited()

    async def test_respond_to_accepted_fails(self, svc, repo, db) -> None:
        repo.get_request.return_value = _make_request(status=RequestStatus.ACCEPTED)
        with pytest.raises(InvalidRequestTransitionError):
            await svc.respond(db, PROVIDER, "req-1", RequestAction.REJECT)
        db.rollback.assert_awaited_once()

    async def test_missing_request(self, svc, repo, db) -> None:
        repo.get_request.return_value = None
        with pytest.raises(RequestNotFoundError):
            await svc.respond(db, PROVIDER, "nope", RequestAction.ACCEPT)

    async def test_concurrent_status_change(self, svc, repo, db) -> None:
        repo.get_request.return_value = _make_request()
        repo.update_request_status.return_value = False
        with pytest.raises(InvalidRequestTransitionError):
            await svc.respond(db, PROVIDER, "req-1", RequestAction.ACCEPT)
        db.commit.assert_not_awaited()

    async def test_requester_cancels_pending(self, svc, repo, db) -> None:
        repo.get_request.return_value = _make_request()
        result = await svc.cancel_request(db, REQUESTER, "req-1")
        assert result.status == "cancelled"

    async def test_provider_cannot_cancel(self, svc, repo, db) -> None:
        repo.get_request.return_value = _make_request()
        with pytest.raises(RequestNotFoundError):
            await svc.cancel_request(db, PROVIDER, "req-1")

    async def test_cannot_cancel_accepted(self, svc, repo, db) -> None:
        repo.get_request.return_value = _make_request(status=RequestStatus.ACCEPTED)
        with pytest.raises(InvalidRequestTransitionError):
            await svc.cancel_request(db, REQUESTER, "req-1")


class TestCompleteRequest:
    async def test_moves_hours_and_records_transaction(self, svc, repo, db) -> None:
        repo.get_request.return_value = _make_request(status=RequestStatus.ACCEPTED)
        repo.debit_balance.return_value = Decimal("13.00")
        repo.credit_provider.return_value = Decimal("17.00")
        repo.insert_exchange.return_value = "tx-1"

        result = await svc.complete_request(db, PROVIDER, "req-1")

        repo.get_request.assert_awaited_once_with(db, "req-1", for_update=True)
        repo.update_request_status.assert_awaited_once_with(
            db, "req-1", RequestStatus.ACCEPTED, RequestStatus.COMPLETED
        )
        repo.debit_balance.assert_awaited_once_with(db, REQUESTER, Decimal("2.00"))
        repo.credit_provider.assert_awaited_once_with(
            db, PROVIDER, Decimal("2.00"), Decimal("2.00")
        )
        exchange = repo.insert_exchange.await_args.kwargs
        assert exchange["from_user_id"] == REQUESTER
        assert exchange["to_user_id"] == PROVIDER
        assert exchange["time_amount"] == Decimal("2.00")
        assert exchange["transaction_type"] == "service_payment"
        db.commit.assert_awaited_once()
        assert result.transaction_id == "tx-1"
        assert result.request.status == "completed"
        assert result.requester_balance == Decimal("13.00")
        assert result.provider_balance == Decimal("17.00")

    async def test_debit_guard_rolls_back_everything(self, svc, repo, profiles, db) -> None:
        repo.get_request.return_value = _make_request(status=RequestStatus.ACCEPTED)
        repo.debit_balance.return_value = None
        profiles.get_time_balance.return_value = Decimal("1.00")

        with pytest.raises(InsufficientBalanceError):
            await svc.complete_request(db, PROVIDER, "req-1")

        repo.credit_provider.assert_not_awaited()
        repo.insert_exchange.assert_not_awaited()
        db.commit.assert_not_awaited()
        db.rollback.assert_awaited_once()

    async def test_missing_provider_profile_rolls_back(self, svc, repo, db) -> None:
        repo.get_request.return_value = _make_request(status=RequestStatus.ACCEPTED)
        repo.debit_balance.return_value = Decimal("13.00")
        repo.credit_provider.return_value = None

        with pytest.raises(ProfileNotFoundError):
            await svc.complete_request(db, PROVIDER, "req-1")

        repo.insert_exchange.assert_not_awaited()
        db.rollback.assert_awaited_once()

    @pytest.mark.parametrize(
        "status",
        [RequestStatus.PENDING, RequestStatus.COMPLETED, RequestStatus.REJECTED, RequestStatus.CANCELLED],
    )
    async def test_only_accepted_can_complete(self, svc, repo, db, status) -> None:
        repo.get_request.return_value = _make_request(status=status)

        with pytest.raises(InvalidRequestTransitionError):
            await svc.complete_request(db, PROVIDER, "req-1")

        repo.update_request_status.assert_not_awaited()
        repo.debit_balance.assert_not_awaited()
        repo.insert_exchange.assert_not_awaited()
        db.commit.assert_not_awaited()

    async def test_requester_cannot_complete(self, svc, repo, db) -> None:
        repo.get_request.return_value = _make_request(status=RequestStatus.ACCEPTED)
        with pytest.raises(RequestNotFoundError):
            await svc.complete_request(db, REQUESTER, "req-1")
        repo.debit_balance.assert_not_awaited()


class TestQueries:
    async def test_list_received_and_sent(self, svc, repo, db) -> None:
        repo.list_requests.return_value = [_make_request()]

        received = await svc.list_received(db, PROVIDER, RequestStatus.PENDING)
        sent = await svc.list_sent(db, REQUESTER)

        assert repo.list_requests.await_args_list[0].args == (
            db, PROVIDER, None, RequestStatus.PENDING, 100
        )
        assert repo.list_requests.await_args_list[1].args == (db, None, REQUESTER, None, 100)
        assert received.items[0].service_title == "Reparo de computador"
        assert len(sent.items) == 1

    async def test_transactions_seen_from_each_side(self, svc, repo, db) -> None:
        exchange = Exchange(
            id="tx-1", from_user_id=REQUESTER, to_user_id=PROVIDER,
            time_amount=Decimal("2.00"), transaction_type="service_payment",
            description=None, service_request_id="req-1",
            from_user_name="Ana Costa", to_user_name="Carlos Lima",
            service_title="Reparo de computador",
        )
        repo.list_exchanges.return_value = [exchange]

        provider_view = (await svc.list_transactions(db, PROVIDER)).items[0]
        requester_view = (await svc.list_transactions(db, REQUESTER)).items[0]

        assert provider_view.direction == "earned"
        assert provider_view.counterparty_name == "Ana Costa"
        assert requester_view.direction == "spent"
        assert requester_view.counterparty_name == "Carlos Lima"

    async def test_transaction_stats(self, svc, repo, profiles, db) -> None:
        repo.exchange_totals.return_value = ExchangeTotals(
            total_earned=Decimal("4.00"), total_spent=Decimal("1.50"), count=3
        )
        profiles.get_time_balance.return_value = Decimal("17.50")

        stats = await svc.transaction_stats(db, REQUESTER)

        assert stats.total_earned == Decimal("4.00")
        assert stats.total_spent == Decimal("1.50")
        assert stats.current_balance_display == "17.5h"
        assert stats.transaction_count == 3

    async def test_dashboard(self, svc, repo, profiles, db) -> None:
        repo.dashboard_counts.return_value = DashboardCounts(
            active_services=2, pending_received=1, completed_exchanges=5
        )

        dashboard = await svc.dashboard(db, PROVIDER)

        assert dashboard.time_balance == Decimal("15.00")
        assert dashboard.total_services == 2
        assert dashboard.pending_requests == 1
        assert dashboard.completed_exchanges == 5
