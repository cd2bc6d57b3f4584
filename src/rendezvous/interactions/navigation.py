"""Page navigation for cached paginated replies.

A navigation event names the delivered reply, the actor and a direction. The
navigator looks the reply up, re-solves it at the target page, edits the reply
in place and only then records the new page on the cached entry. Missing or
expired entries are terminal for that reply: the actor is told it expired and
must run the command again.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
from enum import StrEnum
import logging
from typing import TYPE_CHECKING, Any

from rendezvous.core.outcome import Pagination
from rendezvous.core.types import Presentation
from rendezvous.descriptions import (
    EXPIRED_INTERACTION,
    NOT_INTERACTION_OWNER,
    describe_unknown_failure,
)

if TYPE_CHECKING:
    from rendezvous.config import FrozenConfig
    from rendezvous.interactions.service import InteractionCacheService
    from rendezvous.transport import Transport

log = logging.getLogger(__name__)


class NavigationDirection(StrEnum):
    FIRST = "first"
    PREVIOUS = "previous"
    NEXT = "next"
    LAST = "last"


class OwnershipPolicy(StrEnum):
    """Who may page through a cached reply."""

    OWNER_ONLY = "owner_only"
    ANYONE = "anyone"


class NavigationStatus(StrEnum):
    UPDATED = "UPDATED"
    EXPIRED = "EXPIRED"
    FORBIDDEN = "FORBIDDEN"
    FAILED = "FAILED"


def target_page(direction: NavigationDirection, current: int, total_pages: int) -> int:
    """Return the page a navigation lands on, clamped to ``[0, total_pages)``.

    Moving past either end is a no-op in that direction.
    """
    last = total_pages - 1
    match direction:
        case NavigationDirection.FIRST:
            return 0
        case NavigationDirection.LAST:
            return last
        case NavigationDirection.NEXT:
            return min(current + 1, last)
        case NavigationDirection.PREVIOUS:
            return max(current - 1, 0)
    raise ValueError(f"Unknown navigation direction: {direction!r}")


def page_controls(pagination: Pagination) -> tuple[Mapping[str, Any], ...]:
    """Build first/previous/next/last controls for a paginated presentation.

    First and previous are disabled on the first page; next and last on the
    last page.
    """
    return tuple(
        {
            "custom_id": direction.value,
            "label": direction.value.capitalize(),
            "disabled": pagination.is_first
            if direction in (NavigationDirection.FIRST, NavigationDirection.PREVIOUS)
            else pagination.is_last,
        }
        for direction in NavigationDirection
    )


@dataclasses.dataclass(frozen=True, slots=True)
class NavigationEvent:
    """A request to move a delivered reply to another page.

    Attributes:
        response_id: Identity of the reply being navigated.
        actor_id: The member who triggered the navigation.
        direction: Where to move.
        raw: Transport event to answer with rejections; the event itself if None.
    """

    response_id: str
    actor_id: str
    direction: NavigationDirection
    raw: Any = None


@dataclasses.dataclass(frozen=True, slots=True)
class NavigationResult:
    status: NavigationStatus
    presentation: Presentation
    page: int | None = None


class PaginationNavigator:
    """Handles navigation events against an interaction cache."""

    def __init__(
        self,
        cache: InteractionCacheService,
        transport: Transport,
        *,
        ownership: OwnershipPolicy = OwnershipPolicy.OWNER_ONLY,
    ) -> None:
        self.cache = cache
        self.transport = transport
        self.ownership = ownership

    @classmethod
    def from_config(
        cls,
        config: FrozenConfig,
        cache: InteractionCacheService,
        transport: Transport,
    ) -> PaginationNavigator:
        return cls(cache, transport, ownership=OwnershipPolicy(config.navigation_ownership))

    async def navigate(self, event: NavigationEvent) -> NavigationResult:
        """Move the reply named by ``event`` to the target page.

        Returns:
            The `NavigationResult`; only `UPDATED` changes the reply and the
            cached page.
        """
        reply_target = event.raw if event.raw is not None else event
        cached = self.cache.get_cached_interaction(event.response_id)
        if cached is None:
            log.info("Navigation on expired reply %s", event.response_id)
            await self.transport.send_reply(reply_target, EXPIRED_INTERACTION)
            return NavigationResult(NavigationStatus.EXPIRED, EXPIRED_INTERACTION)

        if (
            self.ownership is OwnershipPolicy.OWNER_ONLY
            and event.actor_id != cached.sender_id
        ):
            log.info(
                "Member %s may not navigate reply %s owned by %s",
                event.actor_id,
                event.response_id,
                cached.sender_id,
            )
            await self.transport.send_reply(reply_target, NOT_INTERACTION_OWNER)
            return NavigationResult(NavigationStatus.FORBIDDEN, NOT_INTERACTION_OWNER)

        page = target_page(event.direction, cached.page, cached.total_pages)
        try:
            presentation = await cached.solve_again_and_describe(page)
        except Exception as e:
            log.error(
                "Re-solving reply %s at page %d failed: %s",
                event.response_id,
                page,
                e,
                exc_info=(type(e), e, e.__traceback__),
            )
            failure = describe_unknown_failure()
            await self.transport.send_reply(reply_target, failure)
            return NavigationResult(NavigationStatus.FAILED, failure)

        await self.transport.edit_reply(cached.response_id, presentation)
        cached.set_page(page)
        return NavigationResult(NavigationStatus.UPDATED, presentation, page)
