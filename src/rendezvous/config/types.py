"""Core configuration data types.

Configuration is resolved once, frozen, and then handed to the services that
need it.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Literal, NamedTuple

# --- Source Tracking Types ---

ConfigOrigin = Literal["programmatic", "env", "default"]
SourceMap = Mapping[str, ConfigOrigin]


class ResolvedConfig(NamedTuple):
    """Configuration after resolution from all sources, before freezing.

    Carries audit metadata recording where each value came from.
    """

    cache_ttl_seconds: int
    sweep_interval_seconds: int
    navigation_ownership: str
    telemetry_enabled: bool

    origin: SourceMap

    def to_frozen(self) -> "FrozenConfig":
        """Convert to the immutable configuration, dropping audit metadata."""
        return FrozenConfig(
            cache_ttl_seconds=self.cache_ttl_seconds,
            sweep_interval_seconds=self.sweep_interval_seconds,
            navigation_ownership=self.navigation_ownership,
            telemetry_enabled=self.telemetry_enabled,
        )

    def audit(self) -> str:
        """Return one ``field: origin:value`` line per field."""
        lines = []
        for field in ("cache_ttl_seconds", "sweep_interval_seconds",
                      "navigation_ownership", "telemetry_enabled"):
            origin = self.origin.get(field, "default")
            value = getattr(self, field)
            if origin == "env":
                lines.append(f"{field}: env:RENDEZVOUS_{field.upper()}={value}")
            else:
                lines.append(f"{field}: {origin}:{value}")
        return "\n".join(lines)


@dataclass(frozen=True)
class FrozenConfig:
    """Immutable configuration handed to services.

    Any attempt to modify this object raises an exception.
    """

    cache_ttl_seconds: int = 14 * 60
    sweep_interval_seconds: int = 60
    navigation_ownership: str = "owner_only"
    telemetry_enabled: bool = False
