"""Domain models for authentication."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class AuthUser:
    """Authenticated user identity."""

    id: UUID
    email: str | None


@dataclass(frozen=True)
class AuthSession:
    """Session tokens issued by the auth provider."""

    access_token: str
    refresh_token: str | None
    expires_at: int | None
    user: AuthUser
