"""Supabase Auth adapter."""

from dataclasses import dataclass
from typing import Any
from uuid import UUID

from supabase import Client

from macro_tracker.domain.auth import AuthSession, AuthUser
from macro_tracker.services.auth import (
    AuthError,
    AuthGateway,
    AuthListener,
    AuthSubscription,
)


@dataclass
class SupabaseAuthGateway(AuthGateway):
    """Auth gateway backed by the Supabase auth client."""

    client: Client

    def get_user(self, access_token: str) -> AuthUser | None:
        """Resolve an access token to its user."""
        try:
            response = self.client.auth.get_user(access_token)
        except Exception as exc:
            raise AuthError(str(exc)) from exc
        if response is None or response.user is None:
            return None
        return _to_user(response.user)

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""
        try:
            response = self.client.auth.sign_in_with_password(
                {"email": email, "password": password}
            )
        except Exception as exc:
            raise AuthError(str(exc)) from exc
        session = _to_session(response.session)
        if session is None:
            raise AuthError("Sign in returned no session")
        return session

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Register a new account."""
        try:
            response = self.client.auth.sign_up(
                {"email": email, "password": password}
            )
        except Exception as exc:
            raise AuthError(str(exc)) from exc
        return _to_session(response.session)

    def sign_out(self, access_token: str) -> None:
        """Revoke every session of the token's user."""
        try:
            self.client.auth.admin.sign_out(access_token)
        except Exception as exc:
            raise AuthError(str(exc)) from exc

    def on_auth_state_change(self, listener: AuthListener) -> AuthSubscription:
        """Subscribe a listener to Supabase auth events."""

        def _callback(event: object, session: Any) -> None:
            listener(str(event), _to_session(session))

        return self.client.auth.on_auth_state_change(_callback)


def _to_user(user: Any) -> AuthUser:
    return AuthUser(id=UUID(str(user.id)), email=getattr(user, "email", None))


def _to_session(session: Any) -> AuthSession | None:
    if session is None:
        return None
    return AuthSession(
        access_token=session.access_token,
        refresh_token=getattr(session, "refresh_token", None),
        expires_at=getattr(session, "expires_at", None),
        user=_to_user(session.user),
    )
