"""Authenticated principal from a bearer JWT.

Identity is owned by an external provider; this module only verifies its
tokens and turns the ``sub`` claim into a user id.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime, timedelta, timezone

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from ironlog.core.config import get_settings
from ironlog.core.errors import Unauthenticated

logger = logging.getLogger(__name__)

bearer_scheme = HTTPBearer(auto_error=False)


def create_access_token(user_id: uuid.UUID | str, expires_in: timedelta = timedelta(hours=1)) -> str:
    """Issue a token for ``user_id`` (tooling and tests; production tokens come from the provider)."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    claims = {"sub": str(user_id), "iat": now, "exp": now + expires_in}
    if settings.auth_audience:
        claims["aud"] = settings.auth_audience
    return jwt.encode(claims, settings.auth_secret_key, algorithm=settings.auth_algorithm)


def decode_principal(token: str) -> uuid.UUID | None:
    """Return the user id in ``token``, or None if the token is invalid, expired or malformed."""
    settings = get_settings()
    options = {"verify_aud": settings.auth_audience is not None}
    try:
        claims = jwt.decode(
            token,
            settings.auth_secret_key,
            algorithms=[settings.auth_algorithm],
            audience=settings.auth_audience,
            options=options,
        )
    except JWTError as e:
        logger.info("Rejected bearer token: %s", e)
        return None
    sub = claims.get("sub")
    if not sub:
        return None
    try:
        return uuid.UUID(str(sub))
    except ValueError:
        logger.info("Bearer token subject is not a user id")
        return None


async def get_principal(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> uuid.UUID | None:
    """Dependency: the authenticated user id, or None when the request carries no valid token."""
    if credentials is None:
        return None
    return decode_principal(credentials.credentials)


async def require_principal(principal: uuid.UUID | None = Depends(get_principal)) -> uuid.UUID:
    """Dependency: the authenticated user id; 401 otherwise."""
    if principal is None:
        raise Unauthenticated()
    return principal
