"""Domain models for tb_profile — pure dataclasses, no SQLAlchemy dependency."""

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal


@dataclass
class Profile:
    id: str
    name: str
    time_balance: Decimal       # hours, server-authoritative
    experience_hours: Decimal   # hours of service provided
    user_role: str              # UserRole value
    avatar_url: str | None = None
    zone: str | None = None
    cpf: str | None = None
    phone: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
