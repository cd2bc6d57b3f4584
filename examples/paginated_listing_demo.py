#!/usr/bin/env python3
"""Paginated listing demo for rendezvous.

Runs a leaderboard command through the pipeline with a console transport,
then pages through the cached reply the way button presses would.
"""

import asyncio
import dataclasses
import itertools
import math
from typing import Any, ClassVar

from rendezvous import (
    DescribedOutcome,
    EmbedDescribedOutcome,
    InMemoryInteractionCacheService,
    LimitedMember,
    LimitedRequest,
    LimitedUser,
    NavigationDirection,
    NavigationEvent,
    OutcomeBase,
    Pagination,
    PaginationNavigator,
    RendezvousCommand,
    ResponseRef,
    TelemetryReporter,
    load_config,
)
from rendezvous.interactions import page_controls

SCORES = {f"player{i:02d}": 1000 - i * 37 for i in range(1, 12)}
PAGE_SIZE = 4


@dataclasses.dataclass(frozen=True, slots=True)
class LeaderboardPage(OutcomeBase):
    status: ClassVar[str] = "SUCCESS_LEADERBOARD"

    rows: tuple[tuple[str, int], ...]
    pagination: Pagination


@dataclasses.dataclass(frozen=True, slots=True)
class LeaderboardParams:
    guild_id: str
    page: int = 0


class ConsoleTransport:
    """Prints replies and edits instead of talking to a platform."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)

    async def send_reply(self, target: Any, presentation: Any) -> ResponseRef:
        response = ResponseRef(f"msg-{next(self._ids)}")
        print(f"[reply {response.id}]\n{render(presentation)}\n")
        return response

    async def edit_reply(self, response_id: str, presentation: Any) -> None:
        print(f"[edit {response_id}]\n{render(presentation)}\n")


class PrintReporter(TelemetryReporter):
    def record_timing(self, scope: str, duration: float, **metadata: Any) -> None:
        print(f"[TIMING] {scope} {metadata.get('stage', '')}: {duration * 1000:.2f}ms")

    def record_metric(self, scope: str, value: Any, **metadata: Any) -> None:
        print(f"[METRIC] {scope}: {value} (metadata: {metadata})")


def render(presentation: Any) -> str:
    if isinstance(presentation, DescribedOutcome):
        return presentation.message
    embed = presentation.embeds[0]
    buttons = " ".join(
        f"[{c['label']}]" if not c["disabled"] else f"({c['label']})"
        for c in presentation.components
    )
    return f"{embed['title']}\n{embed['description']}\n{embed['footer']}  {buttons}"


def validate(request: LimitedRequest) -> LeaderboardParams:
    return LeaderboardParams(guild_id=request.guild_id or "")


def solve(params: LeaderboardParams) -> LeaderboardPage:
    ranked = sorted(SCORES.items(), key=lambda item: -item[1])
    start = params.page * PAGE_SIZE
    return LeaderboardPage(
        rows=tuple(ranked[start : start + PAGE_SIZE]),
        pagination=Pagination(params.page, math.ceil(len(ranked) / PAGE_SIZE)),
    )


def describe(outcome: OutcomeBase) -> EmbedDescribedOutcome:
    page: LeaderboardPage = outcome  # type: ignore[assignment]
    offset = page.pagination.page * PAGE_SIZE
    return EmbedDescribedOutcome(
        embeds=(
            {
                "title": "Leaderboard",
                "description": "\n".join(
                    f"{offset + i + 1}. {name} ({score})"
                    for i, (name, score) in enumerate(page.rows)
                ),
                "footer": f"Page {page.pagination.page + 1}/{page.pagination.total_pages}",
            },
        ),
        components=page_controls(page.pagination),
        ephemeral=False,
    )


async def main() -> None:
    config = load_config({"telemetry_enabled": True})
    cache = InMemoryInteractionCacheService.from_config(config)
    transport = ConsoleTransport()
    command = RendezvousCommand.simple(
        name="leaderboard",
        descriptions={LeaderboardPage.status: describe},
        validator=validate,
        solver=solve,
        transport=transport,
        cache=cache,
        reporters=(PrintReporter(),),
        config=config,
    )
    navigator = PaginationNavigator.from_config(config, cache, transport)

    member = LimitedMember(id="42", user=LimitedUser(id="42"))
    run = await command.execute(
        LimitedRequest(id="req-1", command_id="leaderboard", guild_id="guild-1", member=member)
    )
    assert run.response is not None

    for direction in ("next", "next", "next", "first"):
        await navigator.navigate(
            NavigationEvent(
                response_id=run.response.id,
                actor_id=member.user.id,
                direction=NavigationDirection(direction),
            )
        )


if __name__ == "__main__":
    asyncio.run(main())
