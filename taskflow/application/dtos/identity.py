"""Caller identity decoded from the bearer token (no dependency on ORM)."""

from __future__ import annotations

from dataclasses import dataclass

from taskflow.domain.enums import UserRole


@dataclass(frozen=True)
class CallerIdentity:
    """Who is calling: user id, role and, for client callers, the client they belong to."""

    user_id: str
    role: UserRole
    client_id: str | None = None

    def has_role(self, *roles: UserRole) -> bool:
        """Return True when the caller holds any of the given roles."""
        return self.role in roles

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    @property
    def is_client(self) -> bool:
        return self.role == UserRole.CLIENT

    def owns_client(self, client_id: str | None) -> bool:
        """Return True when the caller is the client the task belongs to."""
        return self.is_client and client_id is not None and self.client_id == client_id
