"""
auth/models.py -- Domain dataclasses for users, vehicles and token claims.

Pattern: Data class (pure data container, almost zero logic). Stores and
routes do the work; the only behaviour here is Vehicle.display(), which owns
the one fixed display template so every listing formats vehicles the same way.

Layer rule: no imports from api/ or core/.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    ADMIN = "Admin"
    USER = "User"
    AFFILIATE = "Affiliate"


class PasswordScheme(str, Enum):
    PLAIN = "plain"
    BCRYPT = "bcrypt"


@dataclass(frozen=True)
class StoredPassword:
    """A stored credential tagged with how it is represented.

    Seed accounts carry PLAIN passwords, registered accounts carry BCRYPT
    hashes. The scheme is an explicit tag so the verifier never has to guess
    from the shape of the value.
    """

    scheme: PasswordScheme
    value: str

    def __repr__(self) -> str:
        return f"StoredPassword(scheme={self.scheme.value!r}, value='***')"


@dataclass
class Trim:
    name: str
    gid: int


@dataclass
class Vehicle:
    year: int
    make: str
    model: str
    trim: Trim

    def display(self) -> str:
        """Return the listing form: "<year> <make> <model> <trim name>"."""
        return f"{self.year} {self.make} {self.model} {self.trim.name}"


@dataclass
class VehicleInput:
    """Unvalidated vehicle fields as supplied by a client.

    Any field may be missing. AuthorizationGate.add_vehicle() turns a complete
    input into a Vehicle and rejects an incomplete one.
    """

    year: int | None = None
    make: str | None = None
    model: str | None = None
    trim_name: str | None = None
    trim_gid: int | None = None


@dataclass
class User:
    """An identity in the credential directory.

    username is NOT unique across seed records (see auth/seed.py); lookups
    return the first match by id. vehicles is always a list -- a user who
    never owned a vehicle simply has an empty one.
    """

    username: str
    password: StoredPassword
    role: Role
    vehicles: list[Vehicle] = field(default_factory=list)
    id: int | None = None
    created_at: str | None = None


@dataclass(frozen=True)
class TokenClaims:
    """Identity payload recovered from a verified token."""

    username: str
    role: str
    jti: str | None = None
    exp: int | None = None
