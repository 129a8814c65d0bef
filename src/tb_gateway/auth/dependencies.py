"""FastAPI dependencies: get_current_user and friends.

Usage in any protected router:
    from src.tb_gateway.auth.dependencies import get_current_user

    @router.get("/protected")
    async def protected(user: UserModel = Depends(get_current_user)):
        ...
"""

from typing import Any

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.tb_common.database import get_db_session
from src.tb_common.errors import AccountDisabledError, InvalidCredentialsError
from src.tb_gateway.auth.jwt_handler import decode_token
from src.tb_gateway.auth.revocation import TokenRevocationList
from src.tb_gateway.session.events import SessionEventBus
from src.tb_gateway.user.db_models import UserModel

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/signin")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


def get_revocation_list(request: Request) -> TokenRevocationList:
    revocations: TokenRevocationList = request.app.state.revocations
    return revocations


def get_session_events(request: Request) -> SessionEventBus:
    bus: SessionEventBus = request.app.state.session_events
    return bus


async def get_token_payload(
    token: str = Depends(oauth2_scheme),
    revocations: TokenRevocationList = Depends(get_revocation_list),
) -> dict[str, Any]:
    """Decode the Bearer access token and reject it if signed out."""
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    jti = payload.get("jti")
    if not jti or await revocations.is_revoked(str(jti)):
        raise _CREDENTIALS_EXCEPTION
    # Signing out revokes the whole session, not just the token presented
    sid = payload.get("sid")
    if sid and await revocations.is_revoked(str(sid)):
        raise _CREDENTIALS_EXCEPTION
    return payload


async def get_current_user(
    payload: dict[str, Any] = Depends(get_token_payload),
    db: AsyncSession = Depends(get_db_session),
) -> UserModel:
    """Return the UserModel behind a valid access token.

    Raises HTTP 401 if the token is missing, invalid, expired or revoked.
    Raises HTTP 403 (AccountDisabledError) if the user account is disabled.
    """
    result = await db.execute(select(UserModel).where(UserModel.id == payload["sub"]))
    user = result.scalar_one_or_none()
    if user is None:
        raise _CREDENTIALS_EXCEPTION

    if not user.is_active:
        raise AccountDisabledError()

    return user
