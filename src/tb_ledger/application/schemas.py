"""Pydantic schemas for tb_ledger API."""

from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from src.tb_common.enums import TransactionStatus, TransactionType, TransitionOutcome
from src.tb_common.hours import hours_to_display
from src.tb_ledger.domain.ledger import TransactionLedger
from src.tb_ledger.domain.models import Transaction

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class ServiceSnapshotIn(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)


class ProviderSnapshotIn(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    avatar_url: str | None = None


class AddTransactionRequest(BaseModel):
    # Omitted id → server generates one
    id: str | None = Field(None, min_length=1, max_length=64)
    service: ServiceSnapshotIn
    provider: ProviderSnapshotIn
    hours: Decimal = Field(..., max_digits=8, decimal_places=2)
    date: datetime | None = None
    status: TransactionStatus = TransactionStatus.PENDING
    type: TransactionType


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class TransactionItem(BaseModel):
    id: str
    service_title: str
    service_category: str
    provider_name: str
    provider_avatar_url: str | None
    hours: Decimal
    hours_display: str
    date: str  # ISO8601 string
    status: TransactionStatus
    type: TransactionType

    @classmethod
    def from_domain(cls, tx: Transaction) -> "TransactionItem":
        return cls(
            id=tx.id,
            service_title=tx.service.title,
            service_category=tx.service.category,
            provider_name=tx.provider.name,
            provider_avatar_url=tx.provider.avatar_url,
            hours=tx.hours,
            hours_display=hours_to_display(tx.hours),
            date=tx.date.isoformat(),
            status=tx.status,
            type=tx.type,
        )


class BalanceResponse(BaseModel):
    time_balance: Decimal
    time_balance_display: str
    total_earned: Decimal
    total_spent: Decimal
    pending_count: int

    @classmethod
    def from_ledger(cls, ledger: TransactionLedger) -> "BalanceResponse":
        balance = ledger.get_time_balance()
        return cls(
            time_balance=balance,
            time_balance_display=hours_to_display(balance),
            total_earned=ledger.total_earned(),
            total_spent=ledger.total_spent(),
            pending_count=ledger.pending_count(),
        )


class LedgerResponse(BaseModel):
    items: list[TransactionItem]
    balance: BalanceResponse

    @classmethod
    def from_ledger(cls, ledger: TransactionLedger) -> "LedgerResponse":
        return cls(
            items=[TransactionItem.from_domain(tx) for tx in ledger],
            balance=BalanceResponse.from_ledger(ledger),
        )


class TransactionMutationResponse(BaseModel):
    transaction: TransactionItem | None
    outcome: TransitionOutcome
    balance: BalanceResponse
    # False when the snapshot write failed; the change still holds for this session
    persisted: bool
