"""Configuration management for rendezvous.

Resolve once, freeze, then pass the `FrozenConfig` to the services built
from it:

- RendezvousSettings: pydantic-settings schema (``RENDEZVOUS_`` prefix)
- ResolvedConfig: post-resolution values with per-field origins
- FrozenConfig: immutable values handed to services
"""

from .api import load_config, resolve_config
from .schema import RendezvousSettings
from .types import ConfigOrigin, FrozenConfig, ResolvedConfig, SourceMap

__all__ = [
    "ConfigOrigin",
    "FrozenConfig",
    "RendezvousSettings",
    "ResolvedConfig",
    "SourceMap",
    "load_config",
    "resolve_config",
]
