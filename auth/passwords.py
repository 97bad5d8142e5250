"""
auth/passwords.py -- Password hashing and verification over two representations.

Security design decisions:
  Representations: a StoredPassword is either PLAIN (seed accounts kept for
       the legacy v1 scheme) or BCRYPT (every account created through
       registration). verify_password() dispatches on the explicit scheme tag
       and never inspects the value to decide which comparison to run.

  PLAIN comparison: hmac.compare_digest over UTF-8 bytes. Constant time in the
       length of the input, so a partial match does not return faster.

  BCRYPT: bcrypt used directly (no passlib wrapper). bcrypt only reads the
       first 72 bytes of a password and newer releases refuse longer input
       with ValueError. check_password_length() rejects such passwords as a
       client error before they reach bcrypt. hash_password() reclassifies
       any remaining library fault as InternalError so the route returns 500
       instead of crashing the worker.

  CPU cost: bcrypt is intentionally slow. Callers run it from sync FastAPI
       routes, which Starlette executes in its threadpool, so hashing never
       blocks the event loop.

Layer rule: no imports from api/. Import from core/ is allowed.
"""

from __future__ import annotations

import hmac
import logging

import bcrypt

from auth.errors import BadRequestError, InternalError
from auth.models import PasswordScheme, StoredPassword
from core.config import get_settings

logger = logging.getLogger("fleetgate.auth")

MAX_PASSWORD_BYTES = 72


def plain_password(value: str) -> StoredPassword:
    """Wrap a plaintext password for storage (seed accounts only)."""
    return StoredPassword(scheme=PasswordScheme.PLAIN, value=value)


def check_password_length(plain: str) -> None:
    """Raise BadRequestError if plain is longer than bcrypt accepts."""
    if len(plain.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise BadRequestError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")


def hash_password(plain: str, rounds: int = 0) -> StoredPassword:
    """Return a bcrypt-tagged StoredPassword for the given plaintext.

    rounds=0 uses Settings.bcrypt_rounds. Raises InternalError if bcrypt
    refuses the input.
    """
    cost = rounds if rounds > 0 else get_settings().bcrypt_rounds
    try:
        hashed = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt(rounds=cost))
    except (ValueError, TypeError) as exc:
        logger.error("Password hashing failed: %s", exc)
        raise InternalError("Internal server error") from exc
    return StoredPassword(scheme=PasswordScheme.BCRYPT, value=hashed.decode("utf-8"))


def verify_password(candidate: str, stored: StoredPassword) -> bool:
    """Return True if candidate matches the stored credential."""
    if stored.scheme is PasswordScheme.PLAIN:
        return hmac.compare_digest(candidate.encode("utf-8"), stored.value.encode("utf-8"))
    if stored.scheme is PasswordScheme.BCRYPT:
        try:
            return bcrypt.checkpw(candidate.encode("utf-8"), stored.value.encode("utf-8"))
        except ValueError as exc:
            logger.warning("bcrypt rejected a stored hash or candidate: %s", exc)
            return False
    logger.error("Unknown password scheme %r", stored.scheme)
    return False
