"""Unit tests for ProfileApplicationService using a mock repository."""

from decimal import Decimal
from unittest.mock import AsyncMock

import pytest

from src.tb_common.errors import ProfileNotFoundError
from src.tb_profile.application.schemas import UpdateProfileRequest
from src.tb_profile.application.service import ProfileApplicationService
from src.tb_profile.domain.models import Profile


def _make_profile(**kwargs) -> Profile:
    defaults = dict(
        id="user-1", name="Maria Silva", time_balance=Decimal("15.00"),
        experience_hours=Decimal("0.00"), user_role="standard",
        avatar_url=None, zone="Zona Sul", cpf="52998224725", phone=None,
    )
    defaults.update(kwargs)
    return Profile(**defaults)


@pytest.fixture
def db() -> AsyncMock:
    return AsyncMock()


class TestFetch:
    async def test_own_profile_masks_cpf(self, db) -> None:
        repo = AsyncMock()
        repo.get_profile.return_value = _make_profile()
        svc = ProfileApplicationService(repo=repo)

        result = await svc.get_own_profile(db, "user-1")

        assert result.cpf_masked == "***.982.247-**"
        assert result.time_balance == Decimal("15.00")
        assert result.time_balance_display == "15h"

    async def test_public_profile_has_no_cpf(self, db) -> None:
        repo = AsyncMock()
        repo.get_profile.return_value = _make_profile()
        svc = ProfileApplicationService(repo=repo)

        result = await svc.get_public_profile(db, "user-1")

        assert "cpf_masked" not in result.model_dump()
        assert "phone" not in result.model_dump()

    async def test_missing_profile(self, db) -> None:
        repo = AsyncMock()
        repo.get_profile.return_value = None
        svc = ProfileApplicationService(repo=repo)

        with pytest.raises(ProfileNotFoundError):
            await svc.get_time_balance(db, "ghost")


class TestUpdate:
    async def test_only_sent_fields_are_written(self, db) -> None:
        repo = AsyncMock()
        repo.update_profile.return_value = _make_profile(zone="Centro")
        svc = ProfileApplicationService(repo=repo)

        result = await svc.update_profile(db, "user-1", UpdateProfileRequest(zone="Centro"))

        repo.update_profile.assert_awaited_once_with(db, "user-1", {"zone": "Centro"})
        db.commit.assert_awaited_once()
        assert result.zone == "Centro"

    async def test_missing_profile_rolls_back(self, db) -> None:
        repo = AsyncMock()
        repo.update_profile.return_value = None
        svc = ProfileApplicationService(repo=repo)

        with pytest.raises(ProfileNotFoundError):
            await svc.update_profile(db, "ghost", UpdateProfileRequest(name="X"))

        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()
