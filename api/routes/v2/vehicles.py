"""
api/routes/v2/vehicles.py -- Vehicle endpoints behind a Bearer access token.

Routes:
  POST /v2/add-vehicle  -- append one vehicle to the caller's list
  GET  /v2/userdata     -- the caller's username and vehicles in display form

Errors:
  400 -- Authorization header missing / no token / incomplete vehicle
  403 -- token fails verification
  404 -- token valid but the user is no longer in the directory
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from api.models import AddVehicleRequest, AddVehicleResponse, UserDataResponse, VehicleOut
from auth.dependencies import bearer_token, get_gate
from auth.gate import AuthorizationGate

# Auth policy: both routes require a Bearer access token (bearer_token + gate).
router = APIRouter()


@router.post("/add-vehicle", response_model=AddVehicleResponse)
async def add_vehicle(
    body: AddVehicleRequest | None = None,
    token: str = Depends(bearer_token),
    gate: AuthorizationGate = Depends(get_gate),
) -> AddVehicleResponse:
    """Add a vehicle. The token is verified before the body is validated."""
    vehicle_input = body.vehicle.to_input() if body and body.vehicle else None
    vehicles = gate.add_vehicle(token, vehicle_input)
    return AddVehicleResponse(vehicles=[VehicleOut.from_vehicle(v) for v in vehicles])


@router.get("/userdata", response_model=UserDataResponse)
async def userdata(
    token: str = Depends(bearer_token),
    gate: AuthorizationGate = Depends(get_gate),
) -> UserDataResponse:
    username, vehicles = gate.list_vehicles(token)
    return UserDataResponse(username=username, vehicles=vehicles)
