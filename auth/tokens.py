"""
auth/tokens.py -- JWT issuance and verification for access and refresh tokens.

Security design decisions:
  JWT: python-jose with HS256. Every token carries username, role, a random
       jti, iat and exp. The jti keeps two tokens minted in the same second for
       the same user distinct, which matters because the refresh registry is
       keyed by the raw token string.

  Two keys [K1]: access tokens are signed with SECRET_KEY, refresh tokens with
       REFRESH_SECRET_KEY. A token signed with one key never verifies under the
       other, so a leaked access key cannot mint refresh tokens.

  Lifetimes: access 2h at login, 1h when reissued through refresh, refresh
       7d. All three come from Settings.

  Verification: decode_token() raises TokenError with the precise kind
       (expired / malformed / bad signature). Signature and expiry are checked
       together inside jwt.decode(); an invalid iat or nbf claim counts as
       malformed. Callers collapse every kind into a single 403 and only
       log the kind.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta, timezone
from enum import Enum

from jose import ExpiredSignatureError, JWTError, jwt
from jose.exceptions import JWTClaimsError

from auth.errors import TokenError, TokenErrorKind
from auth.models import TokenClaims
from core.config import get_settings

logger = logging.getLogger("fleetgate.auth")

# ---------------------------------------------------------------------------
# Config -- read once at module load via the lru_cache singleton
# ---------------------------------------------------------------------------

_settings = get_settings()

_ALGORITHM = "HS256"


class TokenClass(str, Enum):
    ACCESS = "access"
    REFRESH = "refresh"


def _signing_key(token_class: TokenClass) -> str:
    if token_class is TokenClass.REFRESH:
        return _settings.refresh_secret_key
    return _settings.secret_key


# ---------------------------------------------------------------------------
# Issuer
# ---------------------------------------------------------------------------


def issue_token(username: str, role: str, token_class: TokenClass, expire_seconds: int) -> str:
    """Encode a signed JWT for the given identity.

    Args:
        username:       Stored as the "username" claim.
        role:           Stored as the "role" claim ("Admin", "User", ...).
        token_class:    Selects the signing key.
        expire_seconds: Lifetime from now. May be negative in tests to mint
                        an already-expired token.
    """
    now = datetime.now(timezone.utc)
    payload = {
        "username": username,
        "role": role,
        "jti": secrets.token_hex(16),
        "iat": now,
        "exp": now + timedelta(seconds=expire_seconds),
    }
    return jwt.encode(payload, _signing_key(token_class), algorithm=_ALGORITHM)


def create_access_token(username: str, role: str, expire_seconds: int = 0) -> str:
    """Mint an access token. expire_seconds=0 uses the login lifetime (2h)."""
    duration = expire_seconds if expire_seconds > 0 else _settings.access_token_expire_seconds
    return issue_token(username, role, TokenClass.ACCESS, duration)


def create_refreshed_access_token(username: str, role: str) -> str:
    """Mint the shorter-lived (1h) access token handed out by /v2/refresh."""
    return issue_token(username, role, TokenClass.ACCESS, _settings.refreshed_access_token_expire_seconds)


def create_refresh_token(username: str, role: str) -> str:
    return issue_token(username, role, TokenClass.REFRESH, _settings.refresh_token_expire_seconds)


# ---------------------------------------------------------------------------
# Verifier
# ---------------------------------------------------------------------------


def decode_token(token: str, token_class: TokenClass) -> TokenClaims:
    """Verify signature and expiry and return the claims.

    Raises TokenError(EXPIRED | MALFORMED | BAD_SIGNATURE).
    """
    try:
        jwt.get_unverified_header(token)
    except JWTError as exc:
        raise TokenError(TokenErrorKind.MALFORMED, str(exc)) from exc

    try:
        payload = jwt.decode(token, _signing_key(token_class), algorithms=[_ALGORITHM])
    except ExpiredSignatureError as exc:
        raise TokenError(TokenErrorKind.EXPIRED, str(exc)) from exc
    except JWTClaimsError as exc:
        raise TokenError(TokenErrorKind.MALFORMED, str(exc)) from exc
    except JWTError as exc:
        raise TokenError(TokenErrorKind.BAD_SIGNATURE, str(exc)) from exc

    username = payload.get("username")
    role = payload.get("role")
    if not isinstance(username, str) or not isinstance(role, str):
        raise TokenError(TokenErrorKind.MALFORMED, "missing username or role claim")
    return TokenClaims(username=username, role=role, jti=payload.get("jti"), exp=payload.get("exp"))


def decode_access_token(token: str) -> TokenClaims:
    return decode_token(token, TokenClass.ACCESS)


def decode_refresh_token(token: str) -> TokenClaims:
    return decode_token(token, TokenClass.REFRESH)
