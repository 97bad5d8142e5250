"""
core/config.py -- Centralized application configuration via pydantic-settings.

All environment variable reads for FleetGate happen here. No module should
call os.getenv() or os.environ.get() directly -- import get_settings() instead.

Design patterns used:
  Singleton via lru_cache: get_settings() instantiates Settings once at first
      call and returns the cached instance on every subsequent call. This is
      the official FastAPI dependency injection pattern for config.

  BaseSettings (pydantic-settings): Reads values from environment variables
      and an optional .env file automatically. Field names map to env var names
      (e.g. refresh_secret_key -> REFRESH_SECRET_KEY).

  @model_validator(mode="after"): Runs cross-field validation after all fields
      are resolved from environment. Both signing keys are checked here so a
      misconfigured process fails at startup, never on the first request.

Security notes:
  [K1] SECRET_KEY signs access tokens, REFRESH_SECRET_KEY signs refresh
       tokens. A leaked access key must not be able to forge refresh tokens,
       so the two keys are required to differ.

  [K2] Keys shorter than 32 chars are rejected outright. HS256 signing relies
       on key entropy -- a short key weakens every token.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

import logging
from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger("fleetgate.config")

_MIN_KEY_LENGTH = 32


class Settings(BaseSettings):
    """Application settings loaded from environment variables and .env file.

    Every field except the two signing keys has a default. The keys have an
    empty-string sentinel so the model_validator can produce one clear startup
    error instead of pydantic's generic "field required".
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Signing keys
    # ------------------------------------------------------------------

    secret_key: str = ""
    refresh_secret_key: str = ""

    # ------------------------------------------------------------------
    # Token lifetimes
    # ------------------------------------------------------------------

    access_token_expire_seconds: int = 2 * 3600
    # Access tokens minted through /v2/refresh live half as long as the
    # ones minted at login.
    refreshed_access_token_expire_seconds: int = 3600
    refresh_token_expire_seconds: int = 7 * 24 * 3600

    # ------------------------------------------------------------------
    # Credential directory
    # ------------------------------------------------------------------

    bcrypt_rounds: int = 10
    seed_demo_users: bool = True
    # In-memory SQLite: users live exactly as long as the process.
    database_url: str = "sqlite://"

    # ------------------------------------------------------------------
    # Server
    # ------------------------------------------------------------------

    host: str = "127.0.0.1"
    port: int = 3000
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    # ------------------------------------------------------------------
    # Validators
    # ------------------------------------------------------------------

    @model_validator(mode="after")
    def validate_signing_keys(self) -> "Settings":
        """Refuse to start without two distinct, long-enough signing keys [K1][K2]."""
        for env_name, value in (
            ("SECRET_KEY", self.secret_key),
            ("REFRESH_SECRET_KEY", self.refresh_secret_key),
        ):
            if not value:
                raise ValueError(
                    f"{env_name} is required. " f"Set {env_name} in your environment or .env file."
                )
            if len(value) < _MIN_KEY_LENGTH:
                raise ValueError(f"{env_name} must be at least {_MIN_KEY_LENGTH} characters.")
        if self.secret_key == self.refresh_secret_key:
            raise ValueError("SECRET_KEY and REFRESH_SECRET_KEY must be different.")
        if not 4 <= self.bcrypt_rounds <= 31:
            raise ValueError("BCRYPT_ROUNDS must be between 4 and 31.")
        return self


@lru_cache
def get_settings() -> Settings:
    """Return the application Settings singleton.

    In tests: call get_settings.cache_clear() between test cases if you need
    to inject different environment variables.
    """
    settings = Settings()
    logger.debug(
        "Settings loaded (access_ttl=%ds, refreshed_access_ttl=%ds, refresh_ttl=%ds)",
        settings.access_token_expire_seconds,
        settings.refreshed_access_token_expire_seconds,
        settings.refresh_token_expire_seconds,
    )
    return settings
