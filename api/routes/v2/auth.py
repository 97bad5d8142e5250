"""
api/routes/v2/auth.py -- Token-based registration and session endpoints.

Routes:
  POST /v2/register  -- create a User-role account (bcrypt password); 201
  POST /v2/auth      -- password login; returns access + refresh tokens
  POST /v2/refresh   -- mint a new 1h access token from a registered refresh token
  POST /v2/logout    -- revoke one refresh token

register and auth run bcrypt, so they are sync handlers (threadpool).
refresh and logout only sign/verify HS256 and touch the in-memory registry,
so they are async.

Security:
  [T1] Cache-Control: no-store on every response that carries a token.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from api.models import CredentialsRequest, LoginResponse, MessageResponse, RefreshResponse, RefreshTokenRequest
from auth.dependencies import get_session_manager
from auth.sessions import SessionManager

# Auth policy: all four routes are public -- they are how a client gets
# (or gives up) credentials in the first place.
router = APIRouter()


@router.post("/register", response_model=MessageResponse, status_code=201)
def register(
    body: CredentialsRequest | None = None,
    sessions: SessionManager = Depends(get_session_manager),
) -> MessageResponse:
    """Register a new account. Duplicate usernames are rejected with 400."""
    body = body or CredentialsRequest()
    sessions.register(body.username, body.password)
    return MessageResponse(message="User registered successfully")


@router.post("/auth", response_model=LoginResponse)
def login(
    response: Response,
    body: CredentialsRequest | None = None,
    sessions: SessionManager = Depends(get_session_manager),
) -> LoginResponse:
    """Authenticate with username and password; return both tokens.

    The refresh token is recorded in the registry before it is returned.
    """
    body = body or CredentialsRequest()
    access_token, refresh_token = sessions.login(body.username, body.password)
    response.headers["Cache-Control"] = "no-store"  # [T1]
    return LoginResponse(access_token=access_token, refresh_token=refresh_token)


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    response: Response,
    body: RefreshTokenRequest | None = None,
    sessions: SessionManager = Depends(get_session_manager),
) -> RefreshResponse:
    """Exchange a live refresh token for a new access token."""
    access_token = sessions.refresh(body.refresh_token if body else None)
    response.headers["Cache-Control"] = "no-store"  # [T1]
    return RefreshResponse(access_token=access_token)


@router.post("/logout", response_model=MessageResponse)
async def logout(
    body: RefreshTokenRequest | None = None,
    sessions: SessionManager = Depends(get_session_manager),
) -> MessageResponse:
    """Revoke the presented refresh token. Access tokens simply expire."""
    sessions.logout(body.refresh_token if body else None)
    return MessageResponse(message="Logged out successfully")
