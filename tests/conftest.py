"""
tests/conftest.py -- Shared test fixtures for FleetGate.

This module provides:
  - directory / registry: fresh in-memory stores, seeded with the demo users
  - sessions / gate / legacy: the core objects built on those stores
  - client: TestClient over the real FastAPI app with a patched lifespan that
    wires the fixture stores into app.state

Both signing keys must be set before any auth/core import, because
auth/tokens.py reads Settings at module load and Settings refuses to start
without them. BCRYPT_ROUNDS is lowered so registration tests stay fast.
"""

from __future__ import annotations

import os
from collections.abc import Generator
from contextlib import asynccontextmanager

# CRITICAL: set before any auth/core import.
os.environ.setdefault("SECRET_KEY", "test-access-signing-key-0123456789abcdef")
os.environ.setdefault("REFRESH_SECRET_KEY", "test-refresh-signing-key-0123456789abcdef")
os.environ.setdefault("BCRYPT_ROUNDS", "4")

import pytest
from fastapi.testclient import TestClient

from api.main import app, build_state
from auth.gate import AuthorizationGate
from auth.legacy import LegacyAuthenticator
from auth.registry import RefreshTokenRegistry
from auth.seed import demo_users
from auth.sessions import SessionManager
from auth.store import CredentialDirectory

# ---------------------------------------------------------------------------
# Core fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def directory() -> Generator[CredentialDirectory, None, None]:
    """In-memory directory holding the four demo users.

    Each call gets its own engine + StaticPool connection, so tests never
    see each other's registrations or vehicles.
    """
    d = CredentialDirectory()
    d.seed(demo_users())
    yield d
    d.close()


@pytest.fixture
def registry() -> RefreshTokenRegistry:
    return RefreshTokenRegistry()


@pytest.fixture
def sessions(directory: CredentialDirectory, registry: RefreshTokenRegistry) -> SessionManager:
    return SessionManager(directory, registry)


@pytest.fixture
def gate(directory: CredentialDirectory) -> AuthorizationGate:
    return AuthorizationGate(directory)


@pytest.fixture
def legacy(directory: CredentialDirectory) -> LegacyAuthenticator:
    return LegacyAuthenticator(directory)


# ---------------------------------------------------------------------------
# HTTP fixtures
# ---------------------------------------------------------------------------


def _patch_lifespan(directory: CredentialDirectory, registry: RefreshTokenRegistry):
    """Return an async context manager that replaces the real lifespan.

    Wires the fixture stores into app.state so TestClient routes and the test
    body share the same directory and registry.
    """

    @asynccontextmanager
    async def test_lifespan(app):
        build_state(app, directory, registry)
        yield

    return test_lifespan


@pytest.fixture
def client(
    directory: CredentialDirectory, registry: RefreshTokenRegistry
) -> Generator[TestClient, None, None]:
    """TestClient over the real app, backed by the fixture stores."""
    app.router.lifespan_context = _patch_lifespan(directory, registry)
    with TestClient(app, raise_server_exceptions=True) as c:
        yield c
