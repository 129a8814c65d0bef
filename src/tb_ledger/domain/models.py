"""Domain models for tb_ledger — pure dataclasses, no persistence dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Any

from src.tb_common.datetime_utils import parse_utc
from src.tb_common.enums import TransactionStatus, TransactionType
from src.tb_common.hours import to_hours


@dataclass(frozen=True)
class ServiceSnapshot:
    """Copy of the service at request time; never follows later edits."""

    title: str
    category: str


@dataclass(frozen=True)
class ProviderSnapshot:
    name: str
    avatar_url: str | None = None


@dataclass(frozen=True)
class Transaction:
    id: str
    service: ServiceSnapshot
    provider: ProviderSnapshot
    hours: Decimal
    date: datetime
    status: TransactionStatus
    type: TransactionType

    @property
    def is_terminal(self) -> bool:
        return self.status != TransactionStatus.PENDING

    @property
    def signed_hours(self) -> Decimal:
        """+hours when earned, -hours when spent."""
        return self.hours if self.type == TransactionType.EARNED else -self.hours

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "service": {"title": self.service.title, "category": self.service.category},
            "provider": {"name": self.provider.name, "avatar_url": self.provider.avatar_url},
            "hours": str(self.hours),
            "date": self.date.isoformat(),
            "status": self.status.value,
            "type": self.type.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Transaction":
        return cls(
            id=data["id"],
            service=ServiceSnapshot(**data["service"]),
            provider=ProviderSnapshot(**data["provider"]),
            hours=to_hours(data["hours"]),
            date=parse_utc(data["date"]),
            status=TransactionStatus(data["status"]),
            type=TransactionType(data["type"]),
        )
