from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

import jwt

from expense_tracker.errors import TokenExpired, TokenInvalid, TokenMalformed

logger = logging.getLogger(__name__)

ALGORITHM = "HS256"
DEFAULT_TTL_HOURS = 24


def _require_secret(secret: str) -> str:
    if not secret:
        raise ValueError("JWT secret is not configured")
    return secret


def issue_token(
    user_id: int,
    secret: str,
    ttl_hours: int = DEFAULT_TTL_HOURS,
    now: datetime | None = None,
) -> str:
    """Sign a session token for ``user_id`` that expires after ``ttl_hours``."""
    issued = now or datetime.now(timezone.utc)
    payload = {
        "id": user_id,
        "iat": issued,
        "exp": issued + timedelta(hours=ttl_hours),
    }
    return jwt.encode(payload, _require_secret(secret), algorithm=ALGORITHM)


def verify_token(token: str, secret: str) -> int:
    """Return the user id carried by ``token``.

    The signature is checked before any claim, so a tampered token is
    ``TokenInvalid`` regardless of its payload.
    """
    _require_secret(secret)
    try:
        payload = jwt.decode(
            token,
            secret,
            algorithms=[ALGORITHM],
            options={"require": ["id", "iat", "exp"]},
        )
    except jwt.ExpiredSignatureError as exc:
        raise TokenExpired() from exc
    except jwt.InvalidSignatureError as exc:
        logger.info("Rejected token with bad signature")
        raise TokenInvalid() from exc
    except (jwt.DecodeError, jwt.MissingRequiredClaimError) as exc:
        raise TokenMalformed() from exc
    except jwt.InvalidTokenError as exc:
        logger.info("Rejected token: %s", exc)
        raise TokenInvalid() from exc

    user_id = payload["id"]
    if not isinstance(user_id, int) or isinstance(user_id, bool):
        raise TokenMalformed()
    return user_id
