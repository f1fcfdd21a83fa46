"""Authentication service over the hosted auth provider."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Protocol

from macro_tracker.domain.auth import AuthSession, AuthUser

AuthListener = Callable[[str, AuthSession | None], None]

_logger = logging.getLogger(__name__)


class AuthError(RuntimeError):
    """Raised when the auth provider rejects a request."""


class AuthSubscription(Protocol):
    """Handle for an auth-state subscription."""

    def unsubscribe(self) -> None:
        """Stop receiving auth events."""


class AuthGateway(Protocol):
    """Interface for the hosted auth provider."""

    def get_user(self, access_token: str) -> AuthUser | None:
        """Resolve an access token to a user."""

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in with email and password."""

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Register a user; no session until the email is confirmed."""

    def sign_out(self, access_token: str) -> None:
        """Revoke the session behind an access token."""

    def on_auth_state_change(self, listener: AuthListener) -> AuthSubscription:
        """Subscribe to auth events."""


@dataclass
class AuthService:
    """Service for sign-in flows and session lookups."""

    gateway: AuthGateway

    def get_user(self, access_token: str) -> AuthUser | None:
        """Return the user for an access token, or None if it is invalid."""
        if not access_token:
            return None
        try:
            return self.gateway.get_user(access_token)
        except AuthError as exc:
            _logger.info("Rejected access token: %s", exc)
            return None

    def sign_in(self, email: str, password: str) -> AuthSession:
        """Sign in and return the new session."""
        try:
            return self.gateway.sign_in(email, password)
        except AuthError:
            _logger.exception("Sign in failed")
            raise

    def sign_up(self, email: str, password: str) -> AuthSession | None:
        """Register a new account."""
        try:
            return self.gateway.sign_up(email, password)
        except AuthError:
            _logger.exception("Sign up failed")
            raise

    def sign_out(self, access_token: str) -> None:
        """Sign out the session behind an access token."""
        self.gateway.sign_out(access_token)

    @contextmanager
    def subscription(self, listener: AuthListener) -> Iterator[AuthSubscription]:
        """Subscribe to auth events for the duration of the block."""
        handle = self.gateway.on_auth_state_change(listener)
        try:
            yield handle
        finally:
            handle.unsubscribe()


def log_auth_event(event: str, session: AuthSession | None) -> None:
    """Auth listener that logs events."""
    _logger.info(
        "Auth event: %s, session: %s", event, "exists" if session else "null"
    )
