"""
Unit tests for auth/gate.py -- verify-then-lookup authorization.

Covers:
  - token user's vehicles listed in display form
  - any verification failure -> ForbiddenError, without a directory lookup
  - valid token for a user absent from the directory -> NotFoundError
  - add_vehicle field completeness and append-per-call semantics
"""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from auth.errors import BadRequestError, ForbiddenError, NotFoundError
from auth.gate import AuthorizationGate
from auth.models import VehicleInput
from auth.tokens import TokenClass, create_access_token, create_refresh_token, issue_token


def _full_input(**overrides) -> VehicleInput:
    fields = dict(year=2022, make="HONDA", model="CIVIC", trim_name="Sport", trim_gid=777)
    fields.update(overrides)
    return VehicleInput(**fields)


def test_list_vehicles(gate: AuthorizationGate) -> None:
    username, vehicles = gate.list_vehicles(create_access_token("dog76@aol.com", "User"))
    assert username == "dog76@aol.com"
    assert vehicles == ["2024 BMW X3 330i xDrive", "2025 AUDI A4 40 Premium Plus"]


def test_list_vehicles_defaults_to_empty(gate: AuthorizationGate) -> None:
    _, vehicles = gate.list_vehicles(create_access_token("rat76@aol.com", "Affiliate"))
    assert vehicles == []


@pytest.mark.parametrize(
    "token",
    [
        "garbage",
        create_refresh_token("dog76@aol.com", "User"),
        issue_token("dog76@aol.com", "User", TokenClass.ACCESS, -5),
    ],
    ids=["malformed", "refresh-key", "expired"],
)
def test_bad_token_is_forbidden_before_lookup(token: str) -> None:
    directory = MagicMock()
    gate = AuthorizationGate(directory)
    with pytest.raises(ForbiddenError):
        gate.authorize(token)
    directory.find.assert_not_called()


def test_valid_token_for_missing_user(gate: AuthorizationGate) -> None:
    with pytest.raises(NotFoundError):
        gate.authorize(create_access_token("ghost@example.com", "User"))


def test_add_vehicle_appends_each_call(gate: AuthorizationGate) -> None:
    token = create_access_token("dog76@aol.com", "User")
    first = gate.add_vehicle(token, _full_input())
    second = gate.add_vehicle(token, _full_input())
    assert len(first) == 3
    assert len(second) == 4
    assert second[-1].display() == "2022 HONDA CIVIC Sport"


@pytest.mark.parametrize(
    "vehicle_input",
    [
        None,
        _full_input(year=None),
        _full_input(make=""),
        _full_input(model=None),
        _full_input(trim_name=None),
        _full_input(trim_gid=None),
    ],
)
def test_add_vehicle_requires_every_field(gate: AuthorizationGate, vehicle_input) -> None:
    token = create_access_token("dog76@aol.com", "User")
    with pytest.raises(BadRequestError, match="Missing vehicle information"):
        gate.add_vehicle(token, vehicle_input)
    _, vehicles = gate.list_vehicles(token)
    assert len(vehicles) == 2


def test_add_vehicle_checks_token_before_fields(gate: AuthorizationGate) -> None:
    with pytest.raises(ForbiddenError):
        gate.add_vehicle("garbage", None)
