"""Configuration schema and validation using Pydantic.

This module defines the settings schema that validates and coerces configuration
values from the environment, an optional ``.env`` file and programmatic
overrides into the correct types with proper defaults.
"""

from typing import Any, Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

FIELD_NAMES: tuple[str, ...] = (
    "cache_ttl_seconds",
    "sweep_interval_seconds",
    "navigation_ownership",
    "telemetry_enabled",
)

# Platforms stop accepting edits to a reply after 15 minutes.
REPLY_EDIT_WINDOW_SECONDS = 15 * 60


class RendezvousSettings(BaseSettings):
    """Pydantic settings schema for rendezvous.

    Integrates with environment variables using the RENDEZVOUS_ prefix.
    """

    model_config = SettingsConfigDict(
        env_prefix="RENDEZVOUS_",
        env_file=None,  # Only used when explicitly requested
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    cache_ttl_seconds: int = Field(
        default=14 * 60,
        description="Lifetime of a cached paginated interaction in seconds",
        ge=1,
        lt=REPLY_EDIT_WINDOW_SECONDS,
    )

    sweep_interval_seconds: int = Field(
        default=60,
        description="Interval between background sweeps of expired interactions",
        ge=1,
    )

    navigation_ownership: Literal["owner_only", "anyone"] = Field(
        default="owner_only",
        description="Who may page through a cached reply",
    )

    telemetry_enabled: bool = Field(
        default=False,
        description="Record per-stage timings with the configured reporters",
    )

    @field_validator("navigation_ownership", mode="before")
    @classmethod
    def normalize_ownership(cls, v: Any) -> Any:
        """Accept enum members and any letter case."""
        value = getattr(v, "value", v)
        if isinstance(value, str):
            return value.strip().lower().replace("-", "_")
        return value

    def to_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in FIELD_NAMES}
