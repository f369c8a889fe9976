"""DTOs for the authenticated caller (no dependency on ORM)."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthenticatedUser:
    """Caller identity taken from a verified bearer token.

    Users live in the external identity provider; only the id is needed here.
    """

    id: str
    email: str | None = None
