"""Mini README: Runtime configuration for spendlog.

Structure:
    * SpendlogSettings - Pydantic settings model read from the environment.
    * get_settings - cached accessor used by the web interface and CLI.

Every field can be overridden with a ``SPENDLOG_`` prefixed environment
variable or a local ``.env`` file. Validation happens once per process.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field, validator
from pydantic_settings import BaseSettings


class SpendlogSettings(BaseSettings):
    """Runtime configuration for the expense tracker service."""

    environment: str = Field(
        "development",
        description="Environment label; anything but 'production' enables auto-reload.",
    )
    interface_host: str = Field(
        "0.0.0.0",
        description="Network interface the web service binds to.",
    )
    interface_port: int = Field(
        5000,
        description="Port the web service listens on.",
        ge=1,
        le=65535,
    )
    log_level: str = Field(
        "INFO",
        description="Root logging level passed to configure_root_logger.",
    )
    session_cookie_name: str = Field(
        "spendlog_session",
        description="Cookie carrying the session identifier.",
    )
    session_ttl_seconds: int = Field(
        7 * 24 * 60 * 60,
        description="Lifetime of an idle session before it is treated as expired.",
        ge=1,
    )
    session_check_period_seconds: int = Field(
        24 * 60 * 60,
        description="Interval between sweeps that drop expired sessions.",
        ge=1,
    )
    demo_password: str = Field(
        "password",
        description="Plain-text password for the seeded 'demo' account.",
    )

    class Config:
        env_prefix = "SPENDLOG_"
        env_file = ".env"
        case_sensitive = False

    @validator("environment", "log_level", pre=True)
    def _normalise_label(cls, value: object) -> str:
        """Trim labels so environment comparisons stay predictable."""

        return str(value).strip()

    @property
    def is_production(self) -> bool:
        return self.environment.lower() == "production"


@lru_cache()
def get_settings() -> SpendlogSettings:
    """Return cached settings shared across modules."""

    return SpendlogSettings()
