"""
auth/sessions.py -- v2 registration, login, refresh and logout flows.

SessionManager wires the password verifier, the credential directory, the
token issuer/verifier and the refresh registry together. It raises the typed
errors from auth/errors.py; api/routes/v2/auth.py only translates HTTP bodies.

register() and login() run bcrypt. Call them from sync route handlers (or a
worker thread), never directly on the event loop.
"""

from __future__ import annotations

import logging

from auth.errors import BadRequestError, ConflictError, ForbiddenError, TokenError, UnauthorizedError
from auth.models import Role, User
from auth.passwords import check_password_length, hash_password, verify_password
from auth.registry import RefreshTokenRegistry
from auth.store import CredentialDirectory
from auth.tokens import (
    create_access_token,
    create_refresh_token,
    create_refreshed_access_token,
    decode_refresh_token,
)

logger = logging.getLogger("fleetgate.auth")


class SessionManager:
    def __init__(self, directory: CredentialDirectory, registry: RefreshTokenRegistry) -> None:
        self.directory = directory
        self.registry = registry

    def register(self, username: str | None, password: str | None) -> User:
        """Create a User-role account with a bcrypt password and no vehicles.

        The early exists() check skips hashing for an obvious duplicate; the
        authoritative check is inside directory.insert(), so concurrent
        registrations of one username still yield exactly one success.
        """
        if not username or not password:
            raise BadRequestError("Missing required fields")
        check_password_length(password)
        if self.directory.exists(username):
            raise ConflictError("User already exists")
        user = User(username=username, password=hash_password(password), role=Role.USER, vehicles=[])
        user.id = self.directory.insert(user)
        return user

    def login(self, username: str | None, password: str | None) -> tuple[str, str]:
        """Check the password and return (access_token, refresh_token)."""
        if not username or not password:
            raise BadRequestError("Missing username or password")
        check_password_length(password)
        user = self.directory.find(username)
        if user is None:
            raise UnauthorizedError("Unauthorized: User not found")
        if not verify_password(password, user.password):
            logger.info("Failed v2 login for %s", username)
            raise UnauthorizedError("Unauthorized: Invalid password")

        access_token = create_access_token(user.username, user.role.value)
        refresh_token = create_refresh_token(user.username, user.role.value)
        self.registry.record(refresh_token)
        logger.info("v2 login for %s (role=%s)", user.username, user.role.value)
        return access_token, refresh_token

    def refresh(self, refresh_token: str | None) -> str:
        """Mint a new (1h) access token from a registered refresh token.

        The refresh token itself is not rotated; it stays valid until it
        expires or is logged out.
        """
        if not refresh_token:
            raise UnauthorizedError("No refresh token provided")
        if not self.registry.is_valid(refresh_token):
            raise ForbiddenError("Invalid or expired refresh token")
        try:
            claims = decode_refresh_token(refresh_token)
        except TokenError as exc:
            logger.info("Refresh token rejected (%s)", exc.kind.value)
            raise ForbiddenError("Invalid refresh token") from exc
        return create_refreshed_access_token(claims.username, claims.role)

    def logout(self, refresh_token: str | None) -> None:
        if not refresh_token:
            raise BadRequestError("No refresh token provided")
        self.registry.revoke(refresh_token)
