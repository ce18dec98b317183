"""Settings for the user service.

Values come from ``USERTX_``-prefixed environment variables or a local
``.env`` file; the defaults give a SQLite database in the working directory.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """Pydantic settings container for the service layer."""

    model_config = SettingsConfigDict(env_prefix="USERTX_", env_file=".env", extra="ignore")

    database_url: str = Field(
        default="sqlite:///usertx.db",
        description="SQLAlchemy URL of the user database.",
    )
    echo_sql: bool = Field(
        default=False,
        description="Log every SQL statement emitted by the engine.",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level passed to logging.basicConfig.",
    )
    log_count_for_silver: int = Field(
        default=50,
        ge=1,
        description="Logins a BASIC user needs before moving to SILVER.",
    )
    rec_count_for_gold: int = Field(
        default=30,
        ge=1,
        description="Recommendations a SILVER user needs before moving to GOLD.",
    )
    mail_sender_address: str | None = Field(
        default=None,
        description="From address used for upgrade notifications.",
    )


__all__ = ["AppSettings"]
