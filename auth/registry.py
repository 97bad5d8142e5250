"""
auth/registry.py -- In-memory set of currently valid refresh tokens.

A refresh token is valid for /v2/refresh only while it is a member of this
set AND its own signature and expiry still verify. Membership is recorded at
login and removed at logout; the registry never prunes expired entries, so
an expired token that is still a member fails later at decode time.

The set is flat (not keyed by user): one user can hold several live refresh
tokens, one per device, and logout revokes exactly the one presented.

Concurrency: every method takes the same lock. Concurrent logout of one
token therefore has exactly one winner; the loser sees NotFoundError.
"""

from __future__ import annotations

import logging
import threading

from auth.errors import NotFoundError

logger = logging.getLogger("fleetgate.auth")


class RefreshTokenRegistry:
    """Usage:
    registry = RefreshTokenRegistry()
    registry.record(token)
    registry.is_valid(token)   # True
    registry.revoke(token)
    """

    def __init__(self) -> None:
        self._tokens: set[str] = set()
        self._lock = threading.Lock()

    def record(self, token: str) -> None:
        with self._lock:
            self._tokens.add(token)

    def is_valid(self, token: str) -> bool:
        """Pure membership test -- says nothing about the token's own expiry."""
        with self._lock:
            return token in self._tokens

    def revoke(self, token: str) -> None:
        """Remove token. Raises NotFoundError if it is not a member."""
        with self._lock:
            try:
                self._tokens.remove(token)
            except KeyError:
                raise NotFoundError("Refresh token not found") from None
        logger.info("Refresh token revoked (%d still active)", len(self))

    def __len__(self) -> int:
        with self._lock:
            return len(self._tokens)
