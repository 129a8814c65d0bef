"""Pydantic schemas for tb_profile API."""

from decimal import Decimal

from pydantic import BaseModel, Field

from src.tb_common.cpf import mask_cpf
from src.tb_common.hours import hours_to_display
from src.tb_profile.domain.models import Profile


class UpdateProfileRequest(BaseModel):
    name: str | None = Field(None, min_length=1, max_length=120)
    avatar_url: str | None = Field(None, max_length=500)
    zone: str | None = Field(None, max_length=60)
    phone: str | None = Field(None, max_length=20)


class ProfileResponse(BaseModel):
    """Own profile. CPF is always masked."""

    user_id: str
    name: str
    avatar_url: str | None
    time_balance: Decimal
    time_balance_display: str
    experience_hours: Decimal
    zone: str | None
    cpf_masked: str | None
    phone: str | None
    user_role: str

    @classmethod
    def from_domain(cls, p: Profile) -> "ProfileResponse":
        return cls(
            user_id=p.id,
            name=p.name,
            avatar_url=p.avatar_url,
            time_balance=p.time_balance,
            time_balance_display=hours_to_display(p.time_balance),
            experience_hours=p.experience_hours,
            zone=p.zone,
            cpf_masked=mask_cpf(p.cpf),
            phone=p.phone,
            user_role=p.user_role,
        )


class PublicProfileResponse(BaseModel):
    """What other users see on a service page."""

    user_id: str
    name: str
    avatar_url: str | None
    time_balance: Decimal
    experience_hours: Decimal
    zone: str | None

    @classmethod
    def from_domain(cls, p: Profile) -> "PublicProfileResponse":
        return cls(
            user_id=p.id,
            name=p.name,
            avatar_url=p.avatar_url,
            time_balance=p.time_balance,
            experience_hours=p.experience_hours,
            zone=p.zone,
        )
