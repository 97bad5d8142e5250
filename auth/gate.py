"""
auth/gate.py -- Bearer-token authorization for the v2 vehicle endpoints.

Order is fixed: the access token is verified BEFORE the directory is touched.
A token that fails verification never causes a lookup.

Outcomes beyond success:
  token fails verification (any kind) -> ForbiddenError
  token valid, username not in directory -> NotFoundError
    (claims can outlive the user within the token's lifetime)
"""

from __future__ import annotations

import logging

from auth.errors import BadRequestError, ForbiddenError, NotFoundError, TokenError
from auth.models import Trim, User, Vehicle, VehicleInput
from auth.store import CredentialDirectory
from auth.tokens import decode_access_token

logger = logging.getLogger("fleetgate.auth")


class AuthorizationGate:
    def __init__(self, directory: CredentialDirectory) -> None:
        self.directory = directory

    def authorize(self, token: str) -> User:
        """Verify an access token and return the user it names."""
        try:
            claims = decode_access_token(token)
        except TokenError as exc:
            logger.info("Access token rejected (%s)", exc.kind.value)
            raise ForbiddenError("Invalid or expired token") from exc

        user = self.directory.find(claims.username)
        if user is None:
            logger.info("Access token for unknown user %s", claims.username)
            raise NotFoundError("User not found")
        return user

    def list_vehicles(self, token: str) -> tuple[str, list[str]]:
        """Return (username, vehicles in display form) for the token's user."""
        user = self.authorize(token)
        return user.username, [v.display() for v in user.vehicles]

    def add_vehicle(self, token: str, vehicle_input: VehicleInput | None) -> list[Vehicle]:
        """Append one vehicle to the token user's list and return the new list.

        Every field must be present and non-empty. Identical vehicles are not
        deduplicated: each call adds exactly one entry.
        """
        user = self.authorize(token)
        vehicle = _complete_vehicle(vehicle_input)
        vehicles = self.directory.append_vehicle(user.username, vehicle)
        logger.info("Vehicle added for %s (%d total)", user.username, len(vehicles))
        return vehicles


def _complete_vehicle(vehicle_input: VehicleInput | None) -> Vehicle:
    if vehicle_input is None or not all(
        (
            vehicle_input.year,
            vehicle_input.make,
            vehicle_input.model,
            vehicle_input.trim_name,
            vehicle_input.trim_gid,
        )
    ):
        raise BadRequestError("Missing vehicle information")
    return Vehicle(
        year=vehicle_input.year,
        make=vehicle_input.make,
        model=vehicle_input.model,
        trim=Trim(name=vehicle_input.trim_name, gid=vehicle_input.trim_gid),
    )
