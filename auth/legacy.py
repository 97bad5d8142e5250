"""
auth/legacy.py -- v1 credential check from the X-API-Auth header.

The header value is base64("username:password"). Nothing is issued: every v1
request decodes the header and re-checks the pair against the directory.

Outcomes:
  header missing or empty             -> BadRequestError
  not base64 / not UTF-8 / no ":"     -> UnauthorizedError
  no record with that username whose
  password verifies                   -> UnauthorizedError

The username is split at the FIRST ":" so passwords may themselves contain
colons. Because the seed data holds two records for one username, every
record with the username is tried in order and the first whose password
verifies wins.
"""

from __future__ import annotations

import base64
import binascii
import logging

from auth.errors import BadRequestError, UnauthorizedError
from auth.models import User
from auth.passwords import verify_password
from auth.store import CredentialDirectory

logger = logging.getLogger("fleetgate.auth")

HEADER_NAME = "X-API-Auth"


def decode_credentials(header_value: str) -> tuple[str, str]:
    """Return (username, password) from a base64 "user:pass" header value.

    Raises UnauthorizedError if the value cannot be decoded or has no ":".
    """
    try:
        decoded = base64.b64decode(header_value.strip(), validate=True).decode("utf-8")
    except (binascii.Error, ValueError) as exc:
        logger.info("Rejected %s header: not valid base64 credentials", HEADER_NAME)
        raise UnauthorizedError() from exc
    username, sep, password = decoded.partition(":")
    if not sep or not username:
        logger.info("Rejected %s header: no username:password separator", HEADER_NAME)
        raise UnauthorizedError()
    return username, password


class LegacyAuthenticator:
    def __init__(self, directory: CredentialDirectory) -> None:
        self.directory = directory

    def authenticate(self, header_value: str | None) -> User:
        """Return the user matching the header's credential pair."""
        if not header_value:
            raise BadRequestError(f"No {HEADER_NAME.lower()} header provided")
        username, password = decode_credentials(header_value)
        for candidate in self.directory.find_all(username):
            if verify_password(password, candidate.password):
                return candidate
        raise UnauthorizedError()

    def list_vehicles(self, header_value: str | None) -> list[str]:
        """Authenticate, then return the user's vehicles in display form.

        A user without vehicles (Admin, Affiliate) gets an empty list.
        """
        user = self.authenticate(header_value)
        return [v.display() for v in user.vehicles]
