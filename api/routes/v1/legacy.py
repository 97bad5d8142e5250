"""
api/routes/v1/legacy.py -- v1 endpoints authenticated by the X-API-Auth header.

Routes:
  GET /v1/auth      -- echo role and username for a valid credential pair
  GET /v1/userdata  -- list the user's vehicles in display form

Every call re-validates base64("username:password") from scratch; no token is
issued. Both handlers are sync so a bcrypt check (registered accounts) runs
in Starlette's threadpool.

Errors (raised by LegacyAuthenticator, mapped in api/main.py):
  400 -- header missing
  401 -- header undecodable, unknown user or wrong password
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.models import LegacyAuthResponse, LegacyUserDataResponse
from auth.dependencies import get_legacy_authenticator, legacy_header
from auth.legacy import LegacyAuthenticator

# Auth policy: both routes authenticate inline via the X-API-Auth header.
router = APIRouter()


@router.get("/auth", response_model=LegacyAuthResponse)
def legacy_auth(
    header_value: str | None = Depends(legacy_header),
    authenticator: LegacyAuthenticator = Depends(get_legacy_authenticator),
) -> LegacyAuthResponse:
    """Return {role, username} for the credential pair in X-API-Auth."""
    user = authenticator.authenticate(header_value)
    return LegacyAuthResponse(role=user.role.value, username=user.username)


@router.get("/userdata", response_model=LegacyUserDataResponse)
def legacy_userdata(
    header_value: str | None = Depends(legacy_header),
    authenticator: LegacyAuthenticator = Depends(get_legacy_authenticator),
) -> LegacyUserDataResponse:
    """Return the authenticated user's vehicles; users without any get []."""
    return LegacyUserDataResponse(vehicles=authenticator.list_vehicles(header_value))
