"""Public API for configuration resolution."""

import logging
import os
from pathlib import Path
from typing import Any

from dotenv import dotenv_values
from pydantic import ValidationError as PydanticValidationError

from rendezvous.core.exceptions import ConfigurationError

from .schema import FIELD_NAMES, RendezvousSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig

log = logging.getLogger(__name__)


def _env_var(field: str) -> str:
    return f"RENDEZVOUS_{field.upper()}"


def resolve_config(
    programmatic: dict[str, Any] | None = None,
    *,
    use_env_file: str | Path | None = None,
) -> ResolvedConfig:
    """Resolve configuration from all sources with proper precedence.

    Precedence: Programmatic > Environment (process, then ``.env`` file) > Defaults

    Args:
        programmatic: Overrides with the highest precedence. Unknown fields
            are ignored.
        use_env_file: Optional ``.env`` file read for RENDEZVOUS_* values;
            process environment variables win over the file.

    Returns:
        ResolvedConfig with merged values and per-field origins.

    Raises:
        ConfigurationError: If the env file is missing or a value is invalid.

    Example:
        config = resolve_config({"cache_ttl_seconds": 300}).to_frozen()
    """
    overrides = {k: v for k, v in (programmatic or {}).items() if k in FIELD_NAMES}
    ignored = set(programmatic or {}) - set(overrides)
    if ignored:
        log.debug("Ignoring unknown configuration fields: %s", sorted(ignored))

    file_values: dict[str, str | None] = {}
    if use_env_file is not None:
        env_path = Path(use_env_file)
        if not env_path.is_file():
            raise ConfigurationError(f"Environment file not found: {env_path}")
        file_values = dotenv_values(env_path)

    try:
        settings = RendezvousSettings(
            _env_file=str(use_env_file) if use_env_file is not None else None,  # type: ignore[call-arg]
            **overrides,
        )
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid rendezvous configuration: {e}") from e

    origin: dict[str, ConfigOrigin] = {}
    for field in FIELD_NAMES:
        if field in overrides:
            origin[field] = "programmatic"
        elif _env_var(field) in os.environ or any(
            key.upper() == _env_var(field) for key in file_values
        ):
            origin[field] = "env"
        else:
            origin[field] = "default"

    return ResolvedConfig(**settings.to_dict(), origin=origin)


def load_config(programmatic: dict[str, Any] | None = None) -> FrozenConfig:
    """Resolve and freeze configuration in one step."""
    return resolve_config(programmatic).to_frozen()
