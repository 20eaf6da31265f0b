"""
Credential primitives: bcrypt password hashing and JWT bearer tokens.

Token payload
-------------
::

    {
        "id": 42,                   # user primary key
        "username": "jake",
        "email": "jake@jake.jake",
        "exp": 1234567890           # issue time + JWT_EXPIRE_DAYS
    }

``decode_token`` raises ``jwt.ExpiredSignatureError`` for expired tokens and
``jwt.InvalidTokenError`` for every other verification failure; the auth
dependencies translate both into 401 responses.
"""
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from conduit.config import settings


def hash_password(password: str) -> str:
    """Hash *password* with a freshly generated bcrypt salt."""
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))


def create_access_token(user_id: int, username: str, email: str) -> str:
    expire = datetime.now(timezone.utc) + timedelta(days=settings.JWT_EXPIRE_DAYS)
    payload: dict[str, Any] = {
        "id": user_id,
        "username": username,
        "email": email,
        "exp": expire,
    }
    return jwt.encode(payload, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> dict[str, Any]:
    return jwt.decode(
        token,
        settings.JWT_SECRET_KEY,
        algorithms=[settings.JWT_ALGORITHM],
        options={"require": ["exp", "id"]},
    )
