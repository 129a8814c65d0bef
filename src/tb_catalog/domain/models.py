"""Domain models for tb_catalog — pure dataclasses, no business logic."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal


@dataclass
class Category:
    id: str
    name: str
    description: str | None = None
    icon: str | None = None


@dataclass
class Service:
    id: str
    title: str
    description: str
    provider_id: str
    time_rate: Decimal          # hours charged per requested hour
    is_active: bool
    category_id: str | None = None
    tags: list[str] = field(default_factory=list)
    availability: str | None = None
    location: str | None = None
    # Joined for display, not owned by the service row
    provider_name: str | None = None
    provider_avatar_url: str | None = None
    category_name: str | None = None
    category_icon: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
