"""
auth/dependencies.py -- FastAPI Depends() helpers for the v1 and v2 routes.

Each helper pulls one shared, lifespan-owned object off app.state or pulls a
raw credential off the request. None of them verify anything: verification
belongs to LegacyAuthenticator and AuthorizationGate so it can be unit tested
without a request.

bearer_token() accepts any scheme word before the token: the token is
whatever follows the first space in the Authorization header.

Layer rule: may import from fastapi because this module is part of the FastAPI
dependency injection system.
"""

from __future__ import annotations

from fastapi import Request

from auth.errors import BadRequestError
from auth.gate import AuthorizationGate
from auth.legacy import HEADER_NAME, LegacyAuthenticator
from auth.sessions import SessionManager


def get_session_manager(request: Request) -> SessionManager:
    return request.app.state.sessions


def get_gate(request: Request) -> AuthorizationGate:
    return request.app.state.gate


def get_legacy_authenticator(request: Request) -> LegacyAuthenticator:
    return request.app.state.legacy


def legacy_header(request: Request) -> str | None:
    """Return the raw X-API-Auth header value, or None if absent."""
    return request.headers.get(HEADER_NAME)


def bearer_token(request: Request) -> str:
    """Extract the token from "Authorization: Bearer <token>".

    Raises BadRequestError (400) if the header is absent or carries no token.
    """
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        raise BadRequestError("No authorization header provided")
    _scheme, _sep, token = auth_header.strip().partition(" ")
    token = token.strip()
    if not token:
        raise BadRequestError("No access token provided")
    return token
