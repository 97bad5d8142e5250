"""
API request and response models for FleetGate REST endpoints.

These Pydantic v2 models define the HTTP transport contract for the API layer.
They are intentionally separate from the dataclasses in auth/models.py, which
own the internal domain representation. Route handlers map between the two.

Field names are snake_case in Python and camelCase on the wire
(accessToken, refreshToken) to stay compatible with existing clients.

Request fields the contract treats as "missing -> 400" are Optional here, so a
missing field reaches the route and the core raises BadRequestError instead of
pydantic answering 422.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from auth.models import Vehicle, VehicleInput

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class CredentialsRequest(BaseModel):
    """Request body for POST /v2/register and POST /v2/auth."""

    username: Optional[str] = Field(default=None, max_length=255)
    password: Optional[str] = Field(default=None, max_length=255)


class RefreshTokenRequest(BaseModel):
    """Request body for POST /v2/refresh and POST /v2/logout."""

    model_config = _CAMEL

    refresh_token: Optional[str] = None


class TrimBody(BaseModel):
    name: Optional[str] = None
    gid: Optional[int] = None


class VehicleBody(BaseModel):
    year: Optional[int] = None
    make: Optional[str] = None
    model: Optional[str] = None
    trim: Optional[TrimBody] = None

    def to_input(self) -> VehicleInput:
        return VehicleInput(
            year=self.year,
            make=self.make,
            model=self.model,
            trim_name=self.trim.name if self.trim else None,
            trim_gid=self.trim.gid if self.trim else None,
        )


class AddVehicleRequest(BaseModel):
    """Request body for POST /v2/add-vehicle."""

    vehicle: Optional[VehicleBody] = None


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class LegacyAuthResponse(BaseModel):
    """Response for GET /v1/auth."""

    model_config = ConfigDict(frozen=True)

    role: str
    username: str


class LegacyUserDataResponse(BaseModel):
    """Response for GET /v1/userdata."""

    model_config = ConfigDict(frozen=True)

    vehicles: list[str]


class LoginResponse(BaseModel):
    """Response for POST /v2/auth."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    message: str = "Authentication successful"
    access_token: str
    refresh_token: str


class RefreshResponse(BaseModel):
    """Response for POST /v2/refresh."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    access_token: str


class TrimOut(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    gid: int


class VehicleOut(BaseModel):
    model_config = ConfigDict(frozen=True)

    year: int
    make: str
    model: str
    trim: TrimOut

    @classmethod
    def from_vehicle(cls, vehicle: Vehicle) -> "VehicleOut":
        return cls(
            year=vehicle.year,
            make=vehicle.make,
            model=vehicle.model,
            trim=TrimOut(name=vehicle.trim.name, gid=vehicle.trim.gid),
        )


class AddVehicleResponse(BaseModel):
    """Response for POST /v2/add-vehicle."""

    model_config = ConfigDict(frozen=True)

    message: str = "Vehicle added successfully"
    vehicles: list[VehicleOut]


class UserDataResponse(BaseModel):
    """Response for GET /v2/userdata."""

    model_config = ConfigDict(frozen=True)

    username: str
    vehicles: list[str]


class ErrorDetail(BaseModel):
    """Machine-readable error payload."""

    model_config = ConfigDict(frozen=True)

    code: str
    message: str
    detail: Optional[str] = None


class ErrorResponse(BaseModel):
    """Top-level error envelope returned on 4xx/5xx responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorDetail


class HealthResponse(BaseModel):
    """Response for GET /health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
