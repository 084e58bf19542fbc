"""Caller identity and role dependencies.

Tokens are issued by the external auth service; here they are only verified
and turned into a CallerIdentity.
"""

from __future__ import annotations

import logging
from typing import Annotated

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from taskflow.application.dtos.identity import CallerIdentity
from taskflow.domain.enums import UserRole
from taskflow.domain.exceptions import AuthenticationException, AuthorizationException
from taskflow.infrastructure.security.jwt import CallerTokenCodec

logger = logging.getLogger(__name__)

_http_bearer = HTTPBearer(auto_error=False)


async def get_caller_optional(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(_http_bearer)],
) -> CallerIdentity | None:
    """Return caller identity from the bearer JWT if present and valid; else None."""
    if not credentials:
        return None
    try:
        return CallerTokenCodec.from_settings().decode(credentials.credentials)
    except AuthenticationException as e:
        logger.debug("Rejected bearer token: %s", e.message)
        return None


async def get_caller(
    caller: Annotated[CallerIdentity | None, Depends(get_caller_optional)],
) -> CallerIdentity:
    """Return caller identity; raise 401 if the token is missing or invalid."""
    if caller is None:
        raise HTTPException(
            status_code=401,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return caller


def require_role(*roles: UserRole, resource: str, action: str):
    """Dependency factory: require an authenticated caller holding one of roles."""

    async def _require(
        caller: Annotated[CallerIdentity, Depends(get_caller)],
    ) -> CallerIdentity:
        if not caller.has_role(*roles):
            raise AuthorizationException(resource, action)
        return caller

    return _require
