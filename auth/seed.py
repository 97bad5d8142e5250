"""
auth/seed.py -- Demo accounts loaded into the directory at startup.

These accounts use PLAIN passwords so the legacy v1 scheme has something to
authenticate against. They also work for v2 login, because the verifier
dispatches on the stored scheme.

Known data anomaly: "chris@google.com" appears twice with different passwords
and roles. Both records are kept. v2 lookups see the first (Admin) record;
the v1 scheme matches on username AND password, so "Womp!889" still reaches
the second (User) record and its vehicles.
"""

from __future__ import annotations

from auth.models import Role, Trim, User, Vehicle
from auth.passwords import plain_password


def demo_users() -> list[User]:
    """Return fresh User objects for the demo accounts (safe to mutate)."""
    return [
        User(
            username="chris@google.com",
            password=plain_password("mysecretpassword"),
            role=Role.ADMIN,
        ),
        User(
            username="dog76@aol.com",
            password=plain_password("password123"),
            role=Role.USER,
            vehicles=[
                Vehicle(year=2024, make="BMW", model="X3", trim=Trim(name="330i xDrive", gid=13332)),
                Vehicle(year=2025, make="AUDI", model="A4", trim=Trim(name="40 Premium Plus", gid=12245)),
            ],
        ),
        User(
            username="rat76@aol.com",
            password=plain_password("chris@google.com"),
            role=Role.AFFILIATE,
        ),
        User(
            username="chris@google.com",
            password=plain_password("Womp!889"),
            role=Role.USER,
            vehicles=[
                Vehicle(year=2024, make="JEEP", model="WRANGLER UNLIMITED", trim=Trim(name="4XE", gid=24455)),
                Vehicle(
                    year=2025,
                    make="MERCEDES-BENZ",
                    model="GLS",
                    trim=Trim(name="4D WAGON GLS450 4WD", gid=55544),
                ),
            ],
        ),
    ]
