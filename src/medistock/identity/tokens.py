"""Signed access tokens (HS256 JWTs) carrying the user's id and role."""

from datetime import datetime, timedelta, timezone

import jwt

from medistock.domain import medistock
from medistock.exceptions import NotAuthenticatedError

ALGORITHM = "HS256"


def _secret() -> str:
    return medistock.config["secret_key"]


def issue_token(user_id: str, role: str, now: datetime | None = None) -> str:
    """A token for ``user_id`` that expires after ``TOKEN_TTL_HOURS``."""
    issued_at = now or datetime.now(timezone.utc)
    payload = {
        "user": {"id": str(user_id), "role": role},
        "iat": issued_at,
        "exp": issued_at + timedelta(hours=medistock.TOKEN_TTL_HOURS),
    }
    return jwt.encode(payload, _secret(), algorithm=ALGORITHM)


def decode_token(token: str) -> dict:
    """The ``user`` claim of a valid token.

    Raises ``NotAuthenticatedError`` for an expired, tampered or malformed token.
    """
    try:
        payload = jwt.decode(
            token,
            _secret(),
            algorithms=[ALGORITHM],
            options={"require": ["exp", "iat"]},
        )
    except jwt.ExpiredSignatureError:
        raise NotAuthenticatedError("Token has expired") from None
    except jwt.InvalidTokenError:
        raise NotAuthenticatedError("Token is not valid") from None

    claim = payload.get("user")
    if not isinstance(claim, dict) or not claim.get("id") or not claim.get("role"):
        raise NotAuthenticatedError("Token is not valid")
    return claim
