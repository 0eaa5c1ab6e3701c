"""Authentication for the bookkeeping API.

Provides:
- Password verification (passlib/bcrypt) against the configured demo user
- JWT creation / validation
- ``get_current_user()`` dependency guarding authenticated routes
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone
from functools import lru_cache
from typing import Any
from uuid import uuid4

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from passlib.context import CryptContext

from bookkeeper.config import settings

# ---------------------------------------------------------------------------
# Password hashing
# ---------------------------------------------------------------------------

_pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def verify_password(plain: str, hashed: str) -> bool:
    """Compare a plain-text password against a bcrypt hash."""
    return _pwd_context.verify(plain, hashed)


def hash_password(plain: str) -> str:
    """Return the bcrypt hash of a plain-text password."""
    return _pwd_context.hash(plain)


@lru_cache(maxsize=1)
def _demo_password_hash() -> str:
    return hash_password(settings.DEMO_PASSWORD)


def demo_user() -> dict[str, Any]:
    """The single account the demo deployment knows about."""
    return {
        "id": "demo-user",
        "username": settings.DEMO_USERNAME,
        "name": "Demo User",
        "email": "demo@bookkeeping.com",
        "role": "admin",
        "organizationId": settings.DEMO_ORG_ID,
    }


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Return the user dict for valid credentials, ``None`` otherwise."""
    if username != settings.DEMO_USERNAME:
        return None
    if not verify_password(password, _demo_password_hash()):
        return None
    return demo_user()


# ---------------------------------------------------------------------------
# JWT helpers
# ---------------------------------------------------------------------------


def new_session_id() -> str:
    return f"session-{uuid4()}"


def create_access_token(user: dict[str, Any], session_id: str | None = None) -> str:
    """Create a signed JWT containing *sub* (username), *role*, *sid* and *exp*."""
    expire = datetime.now(timezone.utc) + timedelta(minutes=settings.JWT_EXPIRY_MINUTES)
    payload = {
        "sub": user["username"],
        "role": user["role"],
        "user_id": user["id"],
        "organization_id": user["organizationId"],
        "sid": session_id or new_session_id(),
        "exp": expire,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])


# ---------------------------------------------------------------------------
# Current-user dependency
# ---------------------------------------------------------------------------

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    """Decode the bearer JWT and return a dict describing the user.

    Raises ``HTTPException(401)`` when the header is missing, the token is
    invalid or expired, or it names an unknown user.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None:
        raise credentials_exception

    try:
        payload = decode_access_token(credentials.credentials)
    except JWTError:
        raise credentials_exception

    if payload.get("sub") != settings.DEMO_USERNAME:
        raise credentials_exception

    return {
        "user_id": payload.get("user_id"),
        "username": payload["sub"],
        "role": payload.get("role"),
        "organization_id": payload.get("organization_id"),
        "session_id": payload.get("sid"),
    }


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any] | None:
    """Like ``get_current_user`` but yields ``None`` for anonymous callers."""
    if credentials is None:
        return None
    return await get_current_user(credentials)
