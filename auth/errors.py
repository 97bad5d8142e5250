"""
auth/errors.py -- Typed failures raised by the credential and token core.

Every core operation either returns its result or raises one of these. The
core never builds HTTP responses: api/main.py owns the class -> status code
mapping and the JSON error envelope.

TokenError is deliberately NOT a FleetGateError. It carries the precise reason
a token failed (expired, malformed, bad signature) for logging, and callers in
auth/gate.py and auth/sessions.py collapse it into a ForbiddenError before it
can reach the boundary.

Layer rule: stdlib only.
"""

from __future__ import annotations

from enum import Enum


class FleetGateError(Exception):
    """Base class for failures surfaced to the HTTP boundary."""

    code = "error"
    default_message = "Request failed."

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class BadRequestError(FleetGateError):
    code = "bad_request"
    default_message = "Malformed or missing input."


class UnauthorizedError(FleetGateError):
    code = "unauthorized"
    default_message = "Unauthorized"


class ForbiddenError(FleetGateError):
    code = "forbidden"
    default_message = "Invalid or expired token"


class NotFoundError(FleetGateError):
    code = "not_found"
    default_message = "Not found."


class ConflictError(FleetGateError):
    code = "conflict"
    default_message = "User already exists"


class InternalError(FleetGateError):
    code = "internal_error"
    default_message = "Internal server error"


class TokenErrorKind(str, Enum):
    EXPIRED = "expired"
    MALFORMED = "malformed"
    BAD_SIGNATURE = "bad_signature"


class TokenError(Exception):
    """A token failed verification. ``kind`` says why."""

    def __init__(self, kind: TokenErrorKind, detail: str = "") -> None:
        self.kind = kind
        self.detail = detail
        super().__init__(f"{kind.value}: {detail}" if detail else kind.value)
