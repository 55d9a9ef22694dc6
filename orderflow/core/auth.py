# orderflow/core/auth.py
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
from fastapi import Depends, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from pydantic import ValidationError as PydanticValidationError

from orderflow.core.config import get_settings
from orderflow.core.errors import AuthenticationError
from orderflow.models.user import User
from orderflow.schemas.user import Actor

settings = get_settings()

# HTTP Bearer scheme:
# - auto_error=False => a missing Authorization header does not raise
#   FastAPI's own 403; get_current_actor answers with our 401 envelope.
bearer_scheme = HTTPBearer(auto_error=False)


# -------- Passwords --------


def hash_password(password: str) -> str:
    """Return a bcrypt hash (utf-8 text) for storage in users.password_hash."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        # Malformed hash in the database
        return False


# -------- Tokens --------


def create_access_token(user: User, expires_delta: timedelta | None = None) -> str:
    """
    Issue a signed access token carrying the user's id, username and role.

    Validity defaults to ACCESS_TOKEN_EXPIRE_HOURS.
    """
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(hours=settings.ACCESS_TOKEN_EXPIRE_HOURS)
    )
    claims = {
        "sub": str(user.id),
        "id": user.id,
        "username": user.username,
        "role": user.role,
        "exp": expire,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALG)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify an access token.

    Verification:
      - signature (JWT_ALG using JWT_SECRET)
      - expiration time (exp)

    Raises:
        AuthenticationError(403): if token is invalid/expired.
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALG],
        )
    except JWTError:
        raise AuthenticationError(
            "Invalid token",
            status_code=status.HTTP_403_FORBIDDEN,
        )


def get_current_actor(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> Actor:
    """
    Single authorization gate for protected routes.

    Flow:
      1. No Authorization header => 401.
      2. Decode JWT => 403 if signature/expiry check fails.
      3. Build the Actor from the id/username/role claims => 403 if malformed.

    The role is taken from the token as issued at login; it is not
    re-read from the database for the token's lifetime.
    """
    if credentials is None:
        raise AuthenticationError("Access token required")

    payload = decode_access_token(credentials.credentials)

    try:
        return Actor(
            id=payload["id"],
            username=payload["username"],
            role=payload["role"],
        )
    except (KeyError, PydanticValidationError):
        raise AuthenticationError(
            "Invalid token",
            status_code=status.HTTP_403_FORBIDDEN,
        )
