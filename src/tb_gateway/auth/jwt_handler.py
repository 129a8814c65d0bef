"""JWT token creation and verification.

HS256 (symmetric HMAC) with the shared JWT_SECRET. Every token carries a
``jti`` so sign-out can revoke it before expiry (see auth/revocation.py).
The refresh token's jti doubles as the session id: access tokens minted
from it carry it as ``sid``, so revoking the session stops further refreshes.
"""

import uuid
from datetime import UTC, datetime, timedelta
from typing import Any, NoReturn

from jose import JWTError, jwt

from config.settings import settings
from src.tb_common.errors import InvalidCredentialsError, InvalidRefreshTokenError

_ALGORITHM = settings.JWT_ALGORITHM
_ACCESS_EXPIRE = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
_REFRESH_EXPIRE = timedelta(days=settings.JWT_REFRESH_EXPIRE_DAYS)


def new_session_id() -> str:
    return uuid.uuid4().hex


def _issue(
    user_id: str, token_type: str, lifetime: timedelta, extra: dict[str, Any] | None = None
) -> str:
    now = datetime.now(UTC)
    payload = {
        "sub": user_id,
        "type": token_type,
        "jti": uuid.uuid4().hex,
        "iat": now,
        "exp": now + lifetime,
        **(extra or {}),
    }
    return str(jwt.encode(payload, settings.JWT_SECRET, algorithm=_ALGORITHM))


def create_access_token(user_id: str, session_id: str | None = None) -> str:
    """Issue a short-lived access token (default: 30 min)."""
    extra = {"sid": session_id} if session_id else None
    return _issue(user_id, "access", _ACCESS_EXPIRE, extra)


def create_refresh_token(user_id: str, session_id: str | None = None) -> str:
    """Issue a long-lived refresh token (default: 7 days). Not rotated on use.

    session_id becomes the token's jti.
    """
    extra = {"jti": session_id} if session_id else None
    return _issue(user_id, "refresh", _REFRESH_EXPIRE, extra)


def refresh_lifetime_seconds() -> int:
    return int(_REFRESH_EXPIRE.total_seconds())


def decode_token(token: str, expected_type: str) -> dict[str, Any]:
    """Decode and validate a JWT token.

    Args:
        token: Raw JWT string.
        expected_type: "access" or "refresh". Enforced so one kind of token
                       cannot stand in for the other.

    Returns:
        Decoded payload with at least "sub", "type", "jti" and "exp".

    Raises:
        InvalidCredentialsError: bad access token.
        InvalidRefreshTokenError: bad refresh token.
    """
    try:
        payload: dict[str, Any] = jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[_ALGORITHM],
        )
    except JWTError:
        _raise_auth_error(expected_type)

    if payload.get("type") != expected_type or not payload.get("sub"):
        _raise_auth_error(expected_type)

    return payload


def seconds_until_expiry(payload: dict[str, Any]) -> int:
    """Remaining lifetime of a decoded token, never below 1 second."""
    remaining = int(payload["exp"]) - int(datetime.now(UTC).timestamp())
    return max(remaining, 1)


def _raise_auth_error(expected_type: str) -> NoReturn:
    if expected_type == "access":
        raise InvalidCredentialsError()
    raise InvalidRefreshTokenError()
