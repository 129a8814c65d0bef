"""ProfileRepository — raw SQL over the profiles table.

time_balance is never written here; only request completion moves it
(see tb_exchange.infrastructure.persistence).
"""

from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_profile.domain.models import Profile

_COLUMNS = """
    id, name, avatar_url, time_balance, zone, cpf, phone,
    user_role, experience_hours, created_at, updated_at
"""

_GET_PROFILE_SQL = text(f"SELECT {_COLUMNS} FROM profiles WHERE id = :user_id")

# Only these columns may be set through update_profile
UPDATABLE_FIELDS = ("name", "avatar_url", "zone", "phone")


def _row_to_profile(row: object) -> Profile:
    return Profile(
        id=str(row.id),  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        avatar_url=row.avatar_url,  # type: ignore[attr-defined]
        time_balance=row.time_balance,  # type: ignore[attr-defined]
        zone=row.zone,  # type: ignore[attr-defined]
        cpf=row.cpf,  # type: ignore[attr-defined]
        phone=row.phone,  # type: ignore[attr-defined]
        user_role=row.user_role,  # type: ignore[attr-defined]
        experience_hours=row.experience_hours,  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        updated_at=row.updated_at,  # type: ignore[attr-defined]
    )


class ProfileRepository:
    async def get_profile(self, db: AsyncSession, user_id: str) -> Profile | None:
        result = await db.execute(_GET_PROFILE_SQL, {"user_id": user_id})
        row = result.fetchone()
        return _row_to_profile(row) if row else None

    async def update_profile(
        self, db: AsyncSession, user_id: str, fields: dict[str, Any]
    ) -> Profile | None:
        updates = {k: v for k, v in fields.items() if k in UPDATABLE_FIELDS}
        if not updates:
            return await self.get_profile(db, user_id)
        assignments = ", ".join(f"{column} = :{column}" for column in updates)
        sql = text(
            f"UPDATE profiles SET {assignments}, updated_at = NOW() "
            f"WHERE id = :user_id RETURNING {_COLUMNS}"
        )
        result = await db.execute(sql, {**updates, "user_id": user_id})
        row = result.fetchone()
        return _row_to_profile(row) if row else None
