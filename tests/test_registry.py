"""Unit tests for auth/registry.py -- refresh-token membership set."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from auth.errors import NotFoundError
from auth.registry import RefreshTokenRegistry


def test_record_and_revoke(registry: RefreshTokenRegistry) -> None:
    registry.record("tok-1")
    assert registry.is_valid("tok-1")
    registry.revoke("tok-1")
    assert not registry.is_valid("tok-1")
    assert len(registry) == 0


def test_revoke_unknown_raises(registry: RefreshTokenRegistry) -> None:
    with pytest.raises(NotFoundError):
        registry.revoke("never-recorded")


def test_revoke_twice_raises(registry: RefreshTokenRegistry) -> None:
    registry.record("tok-1")
    registry.revoke("tok-1")
    with pytest.raises(NotFoundError):
        registry.revoke("tok-1")


def test_multiple_tokens_are_independent(registry: RefreshTokenRegistry) -> None:
    """Two devices for one user: logging out one leaves the other valid."""
    registry.record("phone")
    registry.record("laptop")
    registry.revoke("phone")
    assert registry.is_valid("laptop")
    assert len(registry) == 1


def test_concurrent_revoke_has_one_winner(registry: RefreshTokenRegistry) -> None:
    registry.record("shared")

    def attempt(_: int) -> bool:
        try:
            registry.revoke("shared")
            return True
        except NotFoundError:
            return False

    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(attempt, range(16)))
    assert results.count(True) == 1
