"""Bearer tokens as caller identities.

The external auth service signs tokens with the shared SECRET_KEY. A token
carries ``sub`` (user id), ``role`` (admin, user or client), ``exp`` and, for
client users, ``client_id``. Decoding yields a CallerIdentity or raises
AuthenticationException; nothing downstream sees raw claims.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from jose import JWTError, jwt

from taskflow.application.dtos.identity import CallerIdentity
from taskflow.core.config import Settings, get_settings
from taskflow.domain.enums import UserRole
from taskflow.domain.exceptions import AuthenticationException


class CallerTokenCodec:
    """Signs and verifies caller tokens with one key and algorithm."""

    def __init__(self, secret: str, algorithm: str, default_ttl: timedelta) -> None:
        self._secret = secret
        self._algorithm = algorithm
        self._default_ttl = default_ttl

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> CallerTokenCodec:
        settings = settings or get_settings()
        return cls(
            settings.secret_key.get_secret_value(),
            settings.algorithm,
            timedelta(minutes=settings.access_token_expire_minutes),
        )

    def decode(self, token: str) -> CallerIdentity:
        """Verify signature and expiry, then build the caller.

        Raises:
            AuthenticationException: Bad signature, expired, unknown role, or a
                client token without client_id.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require_exp": True, "require_sub": True},
            )
        except JWTError as e:
            raise AuthenticationException(f"Invalid token: {e!s}") from e

        try:
            role = UserRole(claims.get("role"))
        except ValueError as e:
            raise AuthenticationException("Token carries no valid role") from e
        client_id = claims.get("client_id") or None
        if role == UserRole.CLIENT and client_id is None:
            raise AuthenticationException("Client token carries no client_id")
        return CallerIdentity(user_id=str(claims["sub"]), role=role, client_id=client_id)

    def encode(self, caller: CallerIdentity, ttl: timedelta | None = None) -> str:
        """Sign a token for caller. Used by local tooling; production tokens come from the auth service."""
        claims: dict[str, str | datetime] = {
            "sub": caller.user_id,
            "role": caller.role.value,
            "exp": datetime.now(UTC) + (ttl if ttl is not None else self._default_ttl),
        }
        if caller.client_id:
            claims["client_id"] = caller.client_id
        return str(jwt.encode(claims, self._secret, algorithm=self._algorithm))
