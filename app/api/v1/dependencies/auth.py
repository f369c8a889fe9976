"""Caller authentication from the bearer token (composition root)."""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.dtos.user import AuthenticatedUser
from app.domain.exceptions import AuthenticationException
from app.infrastructure.security.jwt import verify_token

logger = logging.getLogger(__name__)

_http_bearer = HTTPBearer(auto_error=False)


async def get_current_user_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> AuthenticatedUser | None:
    """Return the caller from the JWT if present and valid; else None."""
    if not credentials:
        return None
    try:
        payload = verify_token(credentials.credentials)
    except ValueError as e:
        logger.info("Rejected bearer token: %s", e)
        return None
    return AuthenticatedUser(id=str(payload["sub"]), email=payload.get("email"))


async def get_current_user(
    current_user: Annotated[
        AuthenticatedUser | None, Depends(get_current_user_optional)
    ],
) -> AuthenticatedUser:
    """Return the caller from the JWT; raise AuthenticationException (401) if missing or invalid."""
    if current_user is None:
        raise AuthenticationException("Not authenticated")
    return current_user
