"""
tests/test_config.py -- Startup validation of the two signing keys.

Settings(...) kwargs override the environment set in conftest.py, so each
case can describe exactly one misconfiguration.
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from core.config import Settings

_ACCESS = "a" * 40
_REFRESH = "r" * 40


def test_valid_keys_accepted() -> None:
    s = Settings(secret_key=_ACCESS, refresh_secret_key=_REFRESH, _env_file=None)
    assert s.access_token_expire_seconds == 7200
    assert s.refreshed_access_token_expire_seconds == 3600
    assert s.refresh_token_expire_seconds == 7 * 24 * 3600


@pytest.mark.parametrize(
    ("access", "refresh", "message"),
    [
        ("", _REFRESH, "SECRET_KEY is required"),
        (_ACCESS, "", "REFRESH_SECRET_KEY is required"),
        ("short", _REFRESH, "at least 32 characters"),
        (_ACCESS, _ACCESS, "must be different"),
    ],
)
def test_bad_keys_fail_at_startup(access: str, refresh: str, message: str) -> None:
    with pytest.raises(ValidationError, match=message):
        Settings(secret_key=access, refresh_secret_key=refresh, _env_file=None)


def test_bcrypt_rounds_bounded() -> None:
    with pytest.raises(ValidationError, match="BCRYPT_ROUNDS"):
        Settings(secret_key=_ACCESS, refresh_secret_key=_REFRESH, bcrypt_rounds=2, _env_file=None)
