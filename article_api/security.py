"""
Bearer token issuance and verification.

Tokens are HS256 JWTs carrying the caller's email in ``email`` and an
``exp`` claim ``TOKEN_EXPIRE_DAYS`` after issuance.  Verification never
raises: it returns either ``TokenClaims`` or ``TokenRejected`` so the
caller has to decide explicitly what a rejection means for the request.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import jwt

from article_api.config import settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TokenClaims:
    email: str
    expires_at: datetime


@dataclass(frozen=True)
class TokenRejected:
    reason: str


def create_access_token(email: str, expires_delta: timedelta | None = None) -> str:
    """Sign a token asserting *email*, valid for ``TOKEN_EXPIRE_DAYS`` by default."""
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=settings.TOKEN_EXPIRE_DAYS)
    )
    payload = {"email": email, "exp": expire}
    return jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> TokenClaims | TokenRejected:
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp"]},
        )
    except jwt.ExpiredSignatureError:
        return TokenRejected("Token has expired")
    except jwt.PyJWTError as exc:
        logger.debug("Token rejected: %s", exc)
        return TokenRejected("Invalid token")

    email = payload.get("email")
    if not isinstance(email, str) or not email:
        return TokenRejected("Token carries no email claim")

    return TokenClaims(
        email=email,
        expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
    )
