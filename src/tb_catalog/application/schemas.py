"""Pydantic schemas for tb_catalog API."""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from src.tb_catalog.domain.models import Category, Service
from src.tb_catalog.domain.search import normalize_tags
from src.tb_common.hours import hours_to_display

# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateServiceRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: str = Field(..., min_length=1, max_length=5000)
    category_id: UUID
    time_rate: Decimal = Field(Decimal("1"), ge=1, le=24, decimal_places=2)
    tags: list[str] = Field(default_factory=list, max_length=20)
    availability: str | None = Field(None, max_length=200)
    location: str | None = Field(None, max_length=200)

    @field_validator("title", "description")
    @classmethod
    def not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Field is required")
        return v

    @field_validator("tags")
    @classmethod
    def clean_tags(cls, v: list[str]) -> list[str]:
        return normalize_tags(v)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class CategoryItem(BaseModel):
    id: str
    name: str
    description: str | None
    icon: str | None

    @classmethod
    def from_domain(cls, c: Category) -> "CategoryItem":
        return cls(id=c.id, name=c.name, description=c.description, icon=c.icon)


class ServiceItem(BaseModel):
    id: str
    title: str
    description: str
    provider_id: str
    provider_name: str | None
    provider_avatar_url: str | None
    category_id: str | None
    category_name: str | None
    category_icon: str | None
    time_rate: Decimal
    time_rate_display: str
    tags: list[str]
    availability: str | None
    location: str | None
    created_at: str  # ISO8601 string

    @classmethod
    def from_domain(cls, s: Service) -> "ServiceItem":
        return cls(
            id=s.id,
            title=s.title,
            description=s.description,
            provider_id=s.provider_id,
            provider_name=s.provider_name,
            provider_avatar_url=s.provider_avatar_url,
            category_id=s.category_id,
            category_name=s.category_name,
            category_icon=s.category_icon,
            time_rate=s.time_rate,
            time_rate_display=hours_to_display(s.time_rate),
            tags=s.tags,
            availability=s.availability,
            location=s.location,
            created_at=s.created_at.isoformat() if s.created_at else "",
        )


class ServiceListResponse(BaseModel):
    items: list[ServiceItem]
