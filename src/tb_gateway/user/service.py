"""User domain service: sign-up, sign-in, refresh, sign-out, account deletion.

All DB operations use the injected AsyncSession. Transactions are managed
by the caller (router layer) via `async with db.begin()`.
"""

import logging
from decimal import Decimal
from typing import Any

from sqlalchemy import select, text
from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_common.enums import SessionEvent, UserRole
from src.tb_common.errors import (
    AccountDisabledError,
    EmailExistsError,
    InvalidCredentialsError,
    InvalidRefreshTokenError,
)
from src.tb_gateway.auth.jwt_handler import (
    create_access_token,
    create_refresh_token,
    decode_token,
    new_session_id,
    refresh_lifetime_seconds,
    seconds_until_expiry,
)
from src.tb_gateway.auth.password import hash_password, verify_password
from src.tb_gateway.auth.revocation import TokenRevocationList
from src.tb_gateway.session.events import SessionEventBus
from src.tb_gateway.user.db_models import UserModel

logger = logging.getLogger("tb.auth")

_INSERT_PROFILE_SQL = text("""
    INSERT INTO profiles (id, name, cpf, phone, time_balance, user_role)
    VALUES (:id, :name, :cpf, :phone, :time_balance, :user_role)
""")

_DELETE_PROFILE_SQL = text("DELETE FROM profiles WHERE id = :id")

_DEACTIVATE_SERVICES_SQL = text("""
    UPDATE services SET is_active = FALSE WHERE provider_id = :id AND is_active
""")


class UserService:
    """Stateless service — instantiate once, reuse across requests."""

    def __init__(self, starting_balance: Decimal) -> None:
        self._starting_balance = starting_balance

    async def sign_up(
        self,
        email: str,
        password: str,
        profile_fields: dict[str, Any],
        db: AsyncSession,
    ) -> UserModel:
        """Create a user and its profile row in the caller's transaction.

        profile_fields: name (required), cpf and phone (optional).
        """
        email = email.lower()
        result = await db.execute(select(UserModel).where(UserModel.email == email))
        if result.scalar_one_or_none() is not None:
            raise EmailExistsError()

        user = UserModel(
            email=email,
            password_hash=hash_password(password),
            is_active=True,
        )
        db.add(user)
        await db.flush()  # Get user.id without committing

        await db.execute(
            _INSERT_PROFILE_SQL,
            {
                "id": user.id,
                "name": profile_fields["name"],
                "cpf": profile_fields.get("cpf"),
                "phone": profile_fields.get("phone"),
                "time_balance": self._starting_balance,
                "user_role": UserRole.STANDARD.value,
            },
        )
        logger.info("sign_up user=%s", user.id)
        return user

    async def sign_in(
        self,
        email: str,
        password: str,
        db: AsyncSession,
        events: SessionEventBus | None = None,
    ) -> tuple[UserModel, str, str]:
        """Authenticate and return (user, access_token, refresh_token).

        Unknown email and wrong password raise the same InvalidCredentialsError
        so the response does not reveal which emails are registered.
        """
        result = await db.execute(select(UserModel).where(UserModel.email == email.lower()))
        user = result.scalar_one_or_none()

        if user is None or not verify_password(password, user.password_hash):
            raise InvalidCredentialsError()

        if not user.is_active:
            raise AccountDisabledError()

        user_id = str(user.id)
        if events is not None:
            events.publish(SessionEvent.SIGNED_IN, user_id)
        session_id = new_session_id()
        return (
            user,
            create_access_token(user_id, session_id),
            create_refresh_token(user_id, session_id),
        )

    async def refresh(self, refresh_token: str, revocations: TokenRevocationList) -> str:
        """Validate refresh token and return a new access token in the same session."""
        payload = decode_token(refresh_token, expected_type="refresh")
        session_id = str(payload["jti"])
        if await revocations.is_revoked(session_id):
            raise InvalidRefreshTokenError()
        return create_access_token(str(payload["sub"]), session_id)

    async def sign_out(
        self,
        payload: dict[str, Any],
        revocations: TokenRevocationList,
        events: SessionEventBus,
    ) -> None:
        """Revoke the presented access token and its session, then notify listeners.

        Revoking the session (the refresh token's jti) stops the refresh token
        from minting new access tokens.
        """
        await revocations.revoke(str(payload["jti"]), seconds_until_expiry(payload))
        session_id = payload.get("sid")
        if session_id:
            await revocations.revoke(str(session_id), refresh_lifetime_seconds())
        events.publish(SessionEvent.SIGNED_OUT, str(payload["sub"]))

    async def delete_account(self, user: UserModel, db: AsyncSession) -> None:
        """Delete the profile, unlist its services and deactivate the login.

        The users row stays (deactivated) because transactions and service
        requests reference it as history.
        """
        await db.execute(_DEACTIVATE_SERVICES_SQL, {"id": user.id})
        await db.execute(_DELETE_PROFILE_SQL, {"id": user.id})
        user.is_active = False
        logger.info("delete_account user=%s", user.id)
