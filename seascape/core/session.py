"""Caller session threaded through services and ledger calls."""

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    """Application roles."""

    GUEST = "guest"
    OWNER = "owner"
    STAFF = "staff"
    ADMIN = "admin"


@dataclass(frozen=True)
class Session:
    """Authenticated caller.

    Built once per request from the bearer token and passed explicitly to
    every operation that needs the caller's identity.
    """

    user_id: str
    access_token: str
    email: str | None = None
    roles: frozenset[Role] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles

    @property
    def is_staff(self) -> bool:
        return bool(self.roles & {Role.STAFF, Role.ADMIN})

    @property
    def is_owner(self) -> bool:
        return Role.OWNER in self.roles

    def with_roles(self, roles: list[str]) -> "Session":
        """Return a copy carrying the given role names (unknown names ignored)."""
        known = {r.value for r in Role}
        return Session(
            user_id=self.user_id,
            access_token=self.access_token,
            email=self.email,
            roles=frozenset(Role(r) for r in roles if r in known),
        )
