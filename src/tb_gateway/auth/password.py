"""Password hashing utilities using bcrypt.

Uses the ``bcrypt`` library directly (>=4.0), no passlib wrapper.
bcrypt only looks at the first 72 bytes of its input and recent releases
refuse longer input outright, so length is checked in bytes up front.
"""

import bcrypt

MAX_PASSWORD_BYTES = 72


def password_fits(plain: str) -> bool:
    """True when the utf-8 encoded password is within bcrypt's input limit."""
    return len(plain.encode("utf-8")) <= MAX_PASSWORD_BYTES


def hash_password(plain: str) -> str:
    """Hash a plain-text password with bcrypt. Returns a utf-8 hash string."""
    if not password_fits(plain):
        raise ValueError(f"Password longer than {MAX_PASSWORD_BYTES} bytes")
    return bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Verify a plain-text password against a bcrypt hash. Over-long input never matches."""
    if not password_fits(plain):
        return False
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))
