import logging
from datetime import datetime, timedelta, timezone

import jwt

from backend.core import config

logger = logging.getLogger(__name__)

REQUIRED_CLAIMS = ("sub", "email", "role", "exp")


def create_access_token(user_id: int, email: str, role: str, expires_days: int | None = None) -> str:
    expire_days = expires_days or config.JWT_EXPIRES_DAYS
    issued_at = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "email": email,
        "role": role,
        "iat": issued_at,
        "exp": issued_at + timedelta(days=expire_days),
    }
    return jwt.encode(payload, config.JWT_SECRET_KEY, algorithm=config.JWT_ALGORITHM)


def decode_access_token(token: str) -> dict | None:
    """Return the token claims, or None for any expired, forged or malformed token."""
    try:
        payload = jwt.decode(
            token,
            config.JWT_SECRET_KEY,
            algorithms=[config.JWT_ALGORITHM],
            options={"require": list(REQUIRED_CLAIMS)},
        )
    except jwt.PyJWTError as exc:
        logger.debug("Rejected access token: %s", exc)
        return None

    try:
        payload["user_id"] = int(payload["sub"])
    except (TypeError, ValueError):
        return None
    return payload
