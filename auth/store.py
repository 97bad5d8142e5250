"""
auth/store.py -- SQLAlchemy Core credential directory for users and vehicles.

Pattern: Repository + Data Mapper.
CredentialDirectory is the repository; _row_to_user / _row_to_vehicle are the
mappers. Route and gate code never touches SQL directly.

Storage: the default URL is "sqlite://", an in-memory database bound to one
connection through StaticPool. Users and their vehicles live exactly as long
as the process; a file URL may be passed for local debugging.

Uniqueness:
  username has NO unique constraint. The seed data deliberately contains two
  records for the same username, and seed() inserts them as-is. Registration
  goes through insert(), which checks and inserts under one lock so that of
  several concurrent registrations for one username exactly one wins.
  Lookups by username return the first match by id.

Concurrency:
  Every public method holds self._lock for its whole body. The single shared
  connection behind StaticPool must never be used by two threads at once, and
  check-then-write sequences (insert, append_vehicle) must be atomic.

Security:
  All queries use bound parameters. No f-strings in SQL.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Iterable

from sqlalchemy import Column, ForeignKey, Integer, MetaData, String, Table, Text, create_engine, func, select
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from auth.errors import ConflictError, NotFoundError
from auth.models import PasswordScheme, Role, StoredPassword, Trim, User, Vehicle

logger = logging.getLogger("fleetgate.auth")

_DEFAULT_DB_URL = "sqlite://"

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(255), nullable=False, index=True),  # not unique, see module docstring
    Column("password_scheme", String(16), nullable=False),  # "plain" | "bcrypt"
    Column("password_value", Text, nullable=False),
    Column("role", String(30), nullable=False),
    Column("created_at", String(32), nullable=False),
)

_vehicles = Table(
    "vehicles",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),  # insertion order
    Column("user_id", Integer, ForeignKey("users.id"), nullable=False, index=True),
    Column("year", Integer, nullable=False),
    Column("make", String(100), nullable=False),
    Column("model", String(100), nullable=False),
    Column("trim_name", String(100), nullable=False),
    Column("trim_gid", Integer, nullable=False),
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _is_memory_url(db_url: str) -> bool:
    return db_url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in db_url


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class CredentialDirectory:
    """Repository for User and Vehicle records.

    Usage:
        directory = CredentialDirectory()
        directory.insert(User(username="a@b.com", password=hash_password("pw"), role=Role.USER))
        user = directory.find("a@b.com")
        directory.append_vehicle("a@b.com", vehicle)
        directory.close()
    """

    def __init__(self, db_url: str = _DEFAULT_DB_URL) -> None:
        engine_kwargs: dict = {}
        if db_url.startswith("sqlite"):
            engine_kwargs["connect_args"] = {"check_same_thread": False}
            if _is_memory_url(db_url):
                engine_kwargs["poolclass"] = StaticPool
        self.engine: Engine = create_engine(db_url, **engine_kwargs)
        self._lock = threading.RLock()
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def find(self, username: str) -> User | None:
        """Return the first user (lowest id) with this username, or None."""
        with self._lock, self.engine.connect() as conn:
            row = conn.execute(
                _users.select().where(_users.c.username == username).order_by(_users.c.id).limit(1)
            ).fetchone()
            return _load_user(conn, row) if row is not None else None

    def find_all(self, username: str) -> list[User]:
        """Return every user with this username, in insertion order."""
        with self._lock, self.engine.connect() as conn:
            rows = conn.execute(
                _users.select().where(_users.c.username == username).order_by(_users.c.id)
            ).fetchall()
            return [_load_user(conn, r) for r in rows]

    def exists(self, username: str) -> bool:
        with self._lock, self.engine.connect() as conn:
            return _count_username(conn, username) > 0

    def count(self) -> int:
        with self._lock, self.engine.connect() as conn:
            return conn.execute(select(func.count()).select_from(_users)).scalar() or 0

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def insert(self, user: User) -> int:
        """Insert a new user and return its id.

        Raises ConflictError if any record already uses the username. The
        check and the insert run under the same lock.
        """
        with self._lock, self.engine.connect() as conn:
            if _count_username(conn, user.username) > 0:
                raise ConflictError("User already exists")
            user_id = _insert_user(conn, user)
            conn.commit()
        logger.info("Registered user %s (id=%d, role=%s)", user.username, user_id, user.role.value)
        return user_id

    def seed(self, users: Iterable[User]) -> int:
        """Bulk-insert users without any uniqueness check. Returns the count."""
        inserted = 0
        with self._lock, self.engine.connect() as conn:
            for user in users:
                _insert_user(conn, user)
                inserted += 1
            conn.commit()
        return inserted

    def append_vehicle(self, username: str, vehicle: Vehicle) -> list[Vehicle]:
        """Append vehicle to the first user with this username and return the full list.

        Raises NotFoundError if no such user exists.
        """
        with self._lock, self.engine.connect() as conn:
            user_id = conn.execute(
                select(_users.c.id).where(_users.c.username == username).order_by(_users.c.id).limit(1)
            ).scalar()
            if user_id is None:
                raise NotFoundError("User not found")
            _insert_vehicle(conn, user_id, vehicle)
            conn.commit()
            return _load_vehicles(conn, user_id)

    def close(self) -> None:
        self.engine.dispose()


# ---------------------------------------------------------------------------
# Connection-level helpers (caller holds the lock)
# ---------------------------------------------------------------------------


def _count_username(conn: Connection, username: str) -> int:
    return conn.execute(select(func.count()).select_from(_users).where(_users.c.username == username)).scalar() or 0


def _insert_user(conn: Connection, user: User) -> int:
    result = conn.execute(
        _users.insert().values(
            username=user.username,
            password_scheme=user.password.scheme.value,
            password_value=user.password.value,
            role=user.role.value,
            created_at=user.created_at or _now_iso(),
        )
    )
    user_id = result.inserted_primary_key[0]
    for vehicle in user.vehicles:
        _insert_vehicle(conn, user_id, vehicle)
    return user_id


def _insert_vehicle(conn: Connection, user_id: int, vehicle: Vehicle) -> None:
    conn.execute(
        _vehicles.insert().values(
            user_id=user_id,
            year=vehicle.year,
            make=vehicle.make,
            model=vehicle.model,
            trim_name=vehicle.trim.name,
            trim_gid=vehicle.trim.gid,
        )
    )


def _load_vehicles(conn: Connection, user_id: int) -> list[Vehicle]:
    rows = conn.execute(
        _vehicles.select().where(_vehicles.c.user_id == user_id).order_by(_vehicles.c.id)
    ).fetchall()
    return [_row_to_vehicle(r) for r in rows]


def _load_user(conn: Connection, row) -> User:
    user = _row_to_user(row)
    user.vehicles = _load_vehicles(conn, row.id)
    return user


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _row_to_user(row) -> User:
    return User(
        id=row.id,
        username=row.username,
        password=StoredPassword(scheme=PasswordScheme(row.password_scheme), value=row.password_value),
        role=Role(row.role),
        created_at=row.created_at,
    )


def _row_to_vehicle(row) -> Vehicle:
    return Vehicle(
        year=row.year,
        make=row.make,
        model=row.model,
        trim=Trim(name=row.trim_name, gid=row.trim_gid),
    )
