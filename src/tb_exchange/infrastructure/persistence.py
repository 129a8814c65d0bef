"""ExchangeRepository — concrete implementation of ExchangeRepositoryProtocol.

Balance-mutating operations use atomic PostgreSQL UPDATE ... RETURNING.
A result of 0 rows means a business constraint was violated (insufficient
balance, missing profile, or the request changed status underneath us).

Transaction ownership: the application service commits or rolls back.
"""

from datetime import datetime
from decimal import Decimal

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_common.enums import RequestStatus
from src.tb_common.errors import InternalError
from src.tb_exchange.domain.models import (
    DashboardCounts,
    Exchange,
    ExchangeTotals,
    ServiceRequest,
)

# ---------------------------------------------------------------------------
# SQL: service_requests
# ---------------------------------------------------------------------------

_REQUEST_SELECT = """
    SELECT r.id, r.service_id, r.requester_id, r.provider_id, r.description,
           r.requested_hours, r.total_time_cost, r.scheduled_date, r.status,
           r.created_at, r.updated_at,
           s.title AS service_title,
           rp.name AS requester_name, rp.avatar_url AS requester_avatar_url,
           pp.name AS provider_name, pp.avatar_url AS provider_avatar_url
    FROM service_requests r
    LEFT JOIN services s ON s.id = r.service_id
    LEFT JOIN profiles rp ON rp.id = r.requester_id
    LEFT JOIN profiles pp ON pp.id = r.provider_id
"""

_GET_REQUEST_SQL = text(_REQUEST_SELECT + " WHERE r.id = :request_id")

# Row lock on the request only; joined rows are read without locking
_GET_REQUEST_FOR_UPDATE_SQL = text(
    _REQUEST_SELECT + " WHERE r.id = :request_id FOR UPDATE OF r"
)

_LIST_REQUESTS_SQL = text(_REQUEST_SELECT + """
    WHERE (CAST(:provider_id AS UUID) IS NULL OR r.provider_id = CAST(:provider_id AS UUID))
      AND (CAST(:requester_id AS UUID) IS NULL OR r.requester_id = CAST(:requester_id AS UUID))
      AND (CAST(:status AS TEXT) IS NULL OR r.status = CAST(:status AS TEXT))
    ORDER BY r.created_at DESC, r.id DESC
    LIMIT :limit
""")

_INSERT_REQUEST_SQL = text("""
    INSERT INTO service_requests
        (service_id, requester_id, provider_id, description,
         requested_hours, total_time_cost, scheduled_date, status)
    VALUES
        (:service_id, :requester_id, :provider_id, :description,
         :requested_hours, :total_time_cost, :scheduled_date, 'pending')
    RETURNING id
""")

_UPDATE_REQUEST_STATUS_SQL = text("""
    UPDATE service_requests
    SET status = :to_status,
        updated_at = NOW()
    WHERE id = :request_id AND status = :from_status
    RETURNING id
""")

# ---------------------------------------------------------------------------
# SQL: profiles balance mutations
# ---------------------------------------------------------------------------

_DEBIT_BALANCE_SQL = text("""
    UPDATE profiles
    SET time_balance = time_balance - :amount,
        updated_at = NOW()
    WHERE id = :user_id AND time_balance >= :amount
    RETURNING time_balance
""")

_CREDIT_PROVIDER_SQL = text("""
    UPDATE profiles
    SET time_balance = time_balance + :amount,
        experience_hours = experience_hours + :hours,
        updated_at = NOW()
    WHERE id = :user_id
    RETURNING time_balance
""")

# ---------------------------------------------------------------------------
# SQL: transactions (append-only)
# ---------------------------------------------------------------------------

_INSERT_EXCHANGE_SQL = text("""
    INSERT INTO transactions
        (from_user_id, to_user_id, time_amount, transaction_type,
         description, service_request_id)
    VALUES
        (:from_user_id, :to_user_id, :time_amount, :transaction_type,
         :description, :service_request_id)
    RETURNING id
""")

_LIST_EXCHANGES_SQL = text("""
    SELECT t.id, t.from_user_id, t.to_user_id, t.time_amount, t.transaction_type,
           t.description, t.service_request_id, t.created_at,
           fp.name AS from_user_name, tp.name AS to_user_name,
           s.title AS service_title
    FROM transactions t
    LEFT JOIN profiles fp ON fp.id = t.from_user_id
    LEFT JOIN profiles tp ON tp.id = t.to_user_id
    LEFT JOIN service_requests r ON r.id = t.service_request_id
    LEFT JOIN services s ON s.id = r.service_id
    WHERE t.from_user_id = :user_id OR t.to_user_id = :user_id
    ORDER BY t.created_at DESC, t.id DESC
    LIMIT :limit
""")

_EXCHANGE_TOTALS_SQL = text("""
    SELECT
        COALESCE(SUM(time_amount) FILTER (WHERE to_user_id = :user_id), 0)   AS total_earned,
        COALESCE(SUM(time_amount) FILTER (WHERE from_user_id = :user_id), 0) AS total_spent,
        COUNT(*)                                                             AS count
    FROM transactions
    WHERE from_user_id = :user_id OR to_user_id = :user_id
""")

_DASHBOARD_COUNTS_SQL = text("""
    SELECT
        (SELECT COUNT(*) FROM services
          WHERE provider_id = :user_id AND is_active)               AS active_services,
        (SELECT COUNT(*) FROM service_requests
          WHERE provider_id = :user_id AND status = 'pending')      AS pending_received,
        (SELECT COUNT(*) FROM transactions
          WHERE from_user_id = :user_id OR to_user_id = :user_id)   AS completed_exchanges
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_request(row: object) -> ServiceRequest:
    return ServiceRequest(
        id=str(row.id),  # type: ignore[attr-defined]
        service_id=str(row.service_id),  # type: ignore[attr-defined]
        requester_id=str(row.requester_id),  # type: ignore[attr-defined]
        provider_id=str(row.provider_id),  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        requested_hours=row.requested_hours,  # type: ignore[attr-defined]
        total_time_cost=row.total_time_cost,  # type: ignore[attr-defined]
        status=RequestStatus(row.status),  # type: ignore[attr-defined]
        scheduled_date=row.scheduled_date,  # type: ignore[attr-defined]
        service_title=row.service_title,  # type: ignore[attr-defined]
        requester_name=row.requester_name,  # type: ignore[attr-defined]
        requester_avatar_url=row.requester_avatar_url,  # type: ignore[attr-defined]
        provider_name=row.provider_name,  # type: ignore[attr-defined]
        provider_avatar_url=row.provider_avatar_url,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


def _row_to_exchange(row: object) -> Exchange:
    request_id = row.service_request_id  # type: ignore[attr-defined]
    return Exchange(
        id=str(row.id),  # type: ignore[attr-defined]
        from_user_id=str(row.from_user_id),  # type: ignore[attr-defined]
        to_user_id=str(row.to_user_id),  # type: ignore[attr-defined]
        time_amount=row.time_amount,  # type: ignore[attr-defined]
        transaction_type=row.transaction_type,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        service_request_id=str(request_id) if request_id else None,
        created_at=row.created_at,  # type: ignore[attr-defined]
        from_user_name=row.from_user_name,  # type: ignore[attr-defined]
        to_user_name=row.to_user_name,  # type: ignore[attr-defined]
        service_title=row.service_title,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class ExchangeRepository:
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
    ) -> ServiceRequest:
        result = await db.execute(
            _INSERT_REQUEST_SQL,
            {
                "service_id": service_id,
                "requester_id": requester_id,
                "provider_id": provider_id,
                "description": description,
                "requested_hours": requested_hours,
                "total_time_cost": total_time_cost,
                "scheduled_date": scheduled_date,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Service request insert returned no rows — this should never happen")
        request = await self.get_request(db, str(row.id))
        if request is None:
            raise InternalError("Inserted service request not readable in the same transaction")
        return request

    async def get_request(
        self, db: AsyncSession, request_id: str, for_update: bool = False
    ) -> ServiceRequest | None:
        sql = _GET_REQUEST_FOR_UPDATE_SQL if for_update else _GET_REQUEST_SQL
        result = await db.execute(sql, {"request_id": request_id})
        row = result.fetchone()
        return _row_to_request(row) if row else None

    async def update_request_status(
        self,
        db: AsyncSession,
        request_id: str,
        from_status: RequestStatus,
        to_status: RequestStatus,
    ) -> bool:
        result = await db.execute(
            _UPDATE_REQUEST_STATUS_SQL,
            {
                "request_id": request_id,
                "from_status": from_status.value,
                "to_status": to_status.value,
            },
        )
        return result.fetchone() is not None

    async def debit_balance(
        self, db: AsyncSession, user_id: str, amount: Decimal
    ) -> Decimal | None:
        result = await db.execute(_DEBIT_BALANCE_SQL, {"user_id": user_id, "amount": amount})
        row = result.fetchone()
        return row.time_balance if row else None

    async def credit_provider(
        self, db: AsyncSession, user_id: str, amount: Decimal, hours: Decimal
    ) -> Decimal | None:
        result = await db.execute(
            _CREDIT_PROVIDER_SQL, {"user_id": user_id, "amount": amount, "hours": hours}
        )
        row = result.fetchone()
        return row.time_balance if row else None

    async def insert_exchange(
        self,
        db: AsyncSession,
        from_user_id: str,
        to_user_id: str,
        time_amount: Decimal,
        transaction_type: str,
        description: str | None,
        service_request_id: str,
    ) -> str:
        result = await db.execute(
            _INSERT_EXCHANGE_SQL,
            {
                "from_user_id": from_user_id,
                "to_user_id": to_user_id,
                "time_amount": time_amount,
                "transaction_type": transaction_type,
                "description": description,
                "service_request_id": service_request_id,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Transaction insert returned no rows — this should never happen")
        return str(row.id)

    async def list_requests(
        self,
        db: AsyncSession,
        provider_id: str | None,
        requester_id: str | None,
        status: RequestStatus | None,
        limit: int,
    ) -> list[ServiceRequest]:
        result = await db.execute(
            _LIST_REQUESTS_SQL,
            {
                "provider_id": provider_id,
                "requester_id": requester_id,
                "status": status.value if status else None,
                "limit": limit,
            },
        )
        return [_row_to_request(row) for row in result.fetchall()]

    async def list_exchanges(
        self, db: AsyncSession, user_id: str, limit: int
    ) -> list[Exchange]:
        result = await db.execute(_LIST_EXCHANGES_SQL, {"user_id": user_id, "limit": limit})
        return [_row_to_exchange(row) for row in result.fetchall()]

    async def exchange_totals(self, db: AsyncSession, user_id: str) -> ExchangeTotals:
        result = await db.execute(_EXCHANGE_TOTALS_SQL, {"user_id": user_id})
        row = result.fetchone()
        if row is None:
            return ExchangeTotals(total_earned=Decimal("0"), total_spent=Decimal("0"), count=0)
        return ExchangeTotals(
            total_earned=Decimal(row.total_earned),
            total_spent=Decimal(row.total_spent),
            count=int(row.count),
        )

    async def dashboard_counts(self, db: AsyncSession, user_id: str) -> DashboardCounts:
        result = await db.execute(_DASHBOARD_COUNTS_SQL, {"user_id": user_id})
        row = result.fetchone()
        if row is None:
            return DashboardCounts(active_services=0, pending_received=0, completed_exchanges=0)
        return DashboardCounts(
            active_services=int(row.active_services),
            pending_received=int(row.pending_received),
            completed_exchanges=int(row.completed_exchanges),
        )
