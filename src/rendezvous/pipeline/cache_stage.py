"""Hand navigable state of a paginated reply to the command's cacher.

The stage is a no-op unless every condition for caching holds: the command
has a cacher, its kind allows caching, the outcome is paginated and the
transport returned the reply's identity. When it does cache, it passes the
solver parameters exactly as validated (page included) so a later navigation
event can re-solve with only the page replaced.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import dataclasses
import logging
from typing import Any

from rendezvous.core.outcome import is_paginated
from rendezvous.core.types import (
    CacheParams,
    CommandKind,
    Failure,
    RepliedRequest,
    Result,
    Success,
)
from rendezvous.pipeline.base import BaseAsyncHandler, resolve_awaitable

log = logging.getLogger(__name__)

type Cacher[S] = Callable[[CacheParams[S]], Awaitable[None] | None]


class CacheStage(BaseAsyncHandler[RepliedRequest, RepliedRequest, Exception]):
    def __init__(
        self, cacher: Cacher[Any] | None, *, kind: CommandKind = CommandKind.SLASH
    ) -> None:
        self.cacher = cacher
        self.kind = kind

    def _should_cache(self, state: RepliedRequest) -> bool:
        return (
            self.cacher is not None
            and self.kind is CommandKind.SLASH
            and state.response is not None
            and state.described.solved.validated.passed
            and is_paginated(state.outcome)
        )

    async def handle(self, state: RepliedRequest) -> Result[RepliedRequest, Exception]:
        if not self._should_cache(state):
            return Success(state)
        assert self.cacher is not None  # noqa: S101 - narrowed by _should_cache
        assert state.response is not None  # noqa: S101

        validated = state.described.solved.validated
        request = validated.received.request
        try:
            params = CacheParams(
                response_id=state.response.id,
                sender_id=request.sender_id if request is not None else "",
                solver_params=validated.solver_params,
                total_pages=state.outcome.pagination.total_pages,  # type: ignore[attr-defined]
            )
            await resolve_awaitable(self.cacher(params))
        except Exception as e:
            return Failure(e)
        log.debug(
            "Cached paginated reply %s (%d pages)", params.response_id, params.total_pages
        )
        return Success(dataclasses.replace(state, cached=True))
