"""Password hashing and JWT helpers for admin sessions."""

from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
from jose import JWTError, jwt

from ayambil.core.config import get_settings

ADMIN_TOKEN_TYPE = "admin"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(plain_password.encode(), hashed_password.encode())
    except (ValueError, TypeError):  # malformed hash
        return False


def get_password_hash(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def create_access_token(
    subject: str,
    *,
    role: str,
    username: str,
    expires_delta: timedelta | None = None,
) -> str:
    """Sign an admin bearer token valid for ``ACCESS_TOKEN_EXPIRE_MINUTES``."""
    settings = get_settings()
    issued_at = datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    claims: dict[str, Any] = {
        "sub": subject,
        "typ": ADMIN_TOKEN_TYPE,
        "role": role,
        "username": username,
        "iat": issued_at,
        "exp": issued_at + lifetime,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict[str, Any]:
    """Return the claims of a valid admin token.

    Raises ``JWTError`` for bad signatures, expiry, or tokens minted for
    another purpose.
    """
    settings = get_settings()
    claims = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    if claims.get("typ") != ADMIN_TOKEN_TYPE or not claims.get("sub"):
        raise JWTError("Not an admin access token")
    return claims
