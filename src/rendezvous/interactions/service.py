"""The interaction cache service and the cacher that fills it.

The service is an explicitly constructed object handed to the commands that
cache and to the navigator that reads; nothing here is reachable globally.
Entries live for a fixed TTL (14 minutes by default), which must stay shorter
than the platform's window for editing a delivered reply so an entry never
outlives the ability to act on it.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
import logging
import time
import typing
from typing import Any, Protocol

from rendezvous.core.types import CacheParams
from rendezvous.interactions.cached import CachedInteraction
from rendezvous.interactions.expiring import ExpiringMap

if typing.TYPE_CHECKING:
    from rendezvous.config import FrozenConfig
    from rendezvous.core.outcome import OutcomeBase
    from rendezvous.descriptions import Describer
    from rendezvous.pipeline.cache_stage import Cacher
    from rendezvous.pipeline.solver_stage import Solver

log = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 14 * 60


class InteractionCacheService(Protocol):
    """Minimal store surface used by cachers and navigation handlers."""

    def cache_interaction(
        self, response_id: str, interaction: CachedInteraction[Any, Any]
    ) -> None:
        """Store ``interaction`` under the identity of its delivered reply."""
        ...

    def get_cached_interaction(
        self, response_id: str
    ) -> CachedInteraction[Any, Any] | None:
        """Return the live interaction for ``response_id``, if any."""
        ...


class InMemoryInteractionCacheService:
    """Process-local interaction cache backed by an `ExpiringMap`.

    Each entry is written by the pipeline run that created it and afterwards
    only has its page updated by navigation; no locking is applied.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        *,
        clock: Callable[[], float] = time.monotonic,
        sweep_interval_seconds: float = 60,
    ) -> None:
        self.sweep_interval_seconds = sweep_interval_seconds
        self._interactions: ExpiringMap[str, CachedInteraction[Any, Any]] = (
            ExpiringMap(ttl_seconds, clock=clock)
        )

    @classmethod
    def from_config(
        cls, config: FrozenConfig, *, clock: Callable[[], float] = time.monotonic
    ) -> InMemoryInteractionCacheService:
        return cls(
            config.cache_ttl_seconds,
            clock=clock,
            sweep_interval_seconds=config.sweep_interval_seconds,
        )

    @property
    def ttl_seconds(self) -> float:
        return self._interactions.ttl_seconds

    def cache_interaction(
        self, response_id: str, interaction: CachedInteraction[Any, Any]
    ) -> None:
        self._interactions.set(response_id, interaction)

    def get_cached_interaction(
        self, response_id: str
    ) -> CachedInteraction[Any, Any] | None:
        return self._interactions.get(response_id)

    def sweep(self) -> int:
        """Drop expired interactions; return how many were dropped."""
        dropped = self._interactions.sweep()
        if dropped:
            log.debug("Swept %d expired interaction(s)", dropped)
        return dropped

    async def run_sweeper(self, interval_seconds: float | None = None) -> None:
        """Sweep every ``interval_seconds`` until cancelled.

        Defaults to the configured ``sweep_interval_seconds``. Reads already
        ignore expired entries; the sweeper only bounds memory. Run it as a
        task and cancel the task on shutdown.
        """
        interval = self.sweep_interval_seconds if interval_seconds is None else interval_seconds
        while True:
            await asyncio.sleep(interval)
            self.sweep()

    def __len__(self) -> int:
        return len(self._interactions)


def interaction_cacher[S, O: OutcomeBase](
    cache: InteractionCacheService,
    *,
    solver: Solver[S, O],
    describer: Describer[O],
) -> Cacher[S]:
    """Return a cacher that stores paginated replies in ``cache``.

    The stored interaction re-solves with ``solver`` and renders with
    ``describer``, the same pair the command itself uses.
    """

    def cache_reply(params: CacheParams[S]) -> None:
        cache.cache_interaction(
            params.response_id,
            CachedInteraction(
                params.response_id,
                params.sender_id,
                params.solver_params,
                params.total_pages,
                solver=solver,
                describer=describer,
            ),
        )

    return cache_reply
