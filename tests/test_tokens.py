"""
tests/test_tokens.py -- Issuer and verifier for access and refresh tokens.

Covers:
  - claims round-trip for both token classes
  - key-class separation (a refresh-signed token is not an access token)
  - expired / malformed / bad-signature kinds (bad nbf counts as malformed)
  - login vs refreshed access-token lifetimes
"""

from __future__ import annotations

import time
from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from auth.errors import TokenError, TokenErrorKind
from auth.tokens import (
    TokenClass,
    create_access_token,
    create_refresh_token,
    create_refreshed_access_token,
    decode_access_token,
    decode_refresh_token,
    issue_token,
)
from core.config import get_settings


def test_access_token_claims() -> None:
    claims = decode_access_token(create_access_token("dog76@aol.com", "User"))
    assert claims.username == "dog76@aol.com"
    assert claims.role == "User"
    assert claims.jti


def test_refresh_token_claims() -> None:
    claims = decode_refresh_token(create_refresh_token("rat76@aol.com", "Affiliate"))
    assert claims.username == "rat76@aol.com"
    assert claims.role == "Affiliate"


def test_tokens_minted_together_are_distinct() -> None:
    assert create_refresh_token("a@b.com", "User") != create_refresh_token("a@b.com", "User")


def test_refresh_signed_token_rejected_as_access() -> None:
    token = issue_token("dog76@aol.com", "User", TokenClass.REFRESH, 3600)
    with pytest.raises(TokenError) as excinfo:
        decode_access_token(token)
    assert excinfo.value.kind is TokenErrorKind.BAD_SIGNATURE


def test_access_token_rejected_as_refresh() -> None:
    with pytest.raises(TokenError) as excinfo:
        decode_refresh_token(create_access_token("dog76@aol.com", "User"))
    assert excinfo.value.kind is TokenErrorKind.BAD_SIGNATURE


def test_expired_token() -> None:
    token = issue_token("dog76@aol.com", "User", TokenClass.ACCESS, -60)
    with pytest.raises(TokenError) as excinfo:
        decode_access_token(token)
    assert excinfo.value.kind is TokenErrorKind.EXPIRED


@pytest.mark.parametrize("garbage", ["", "not-a-jwt", "a.b", "a.b.c"])
def test_malformed_token(garbage: str) -> None:
    with pytest.raises(TokenError) as excinfo:
        decode_access_token(garbage)
    assert excinfo.value.kind is TokenErrorKind.MALFORMED


def test_missing_identity_claims_is_malformed() -> None:
    exp = datetime.now(timezone.utc) + timedelta(minutes=5)
    token = jwt.encode({"sub": "someone", "exp": exp}, get_settings().secret_key, algorithm="HS256")
    with pytest.raises(TokenError) as excinfo:
        decode_access_token(token)
    assert excinfo.value.kind is TokenErrorKind.MALFORMED


def test_not_yet_valid_token_is_malformed() -> None:
    now = datetime.now(timezone.utc)
    claims = {
        "username": "dog76@aol.com",
        "role": "User",
        "nbf": now + timedelta(hours=1),
        "exp": now + timedelta(hours=2),
    }
    token = jwt.encode(claims, get_settings().secret_key, algorithm="HS256")
    with pytest.raises(TokenError) as excinfo:
        decode_access_token(token)
    assert excinfo.value.kind is TokenErrorKind.MALFORMED


def test_lifetimes() -> None:
    now = int(time.time())
    login_exp = decode_access_token(create_access_token("a@b.com", "User")).exp
    refreshed_exp = decode_access_token(create_refreshed_access_token("a@b.com", "User")).exp
    refresh_exp = decode_refresh_token(create_refresh_token("a@b.com", "User")).exp
    assert abs(login_exp - (now + 2 * 3600)) <= 5
    assert abs(refreshed_exp - (now + 3600)) <= 5
    assert abs(refresh_exp - (now + 7 * 24 * 3600)) <= 5


def test_explicit_access_lifetime() -> None:
    now = int(time.time())
    exp = decode_access_token(create_access_token("a@b.com", "User", expire_seconds=60)).exp
    assert abs(exp - (now + 60)) <= 5
