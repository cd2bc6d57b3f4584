"""A paginated listing from first request to expiry.

Runs the tournament catalogue command through the full pipeline with the
in-memory cache and transport, then pages through the delivered reply.
"""

import pytest

import rendezvous
from rendezvous import (
    InMemoryInteractionCacheService,
    NavigationDirection,
    NavigationEvent,
    PaginationNavigator,
    load_config,
)
from rendezvous.interactions import NavigationStatus
from tests.fixtures.catalogue import CatalogueParams, build_catalogue_command
from tests.fixtures.requests import MEMBER_ID, OTHER_MEMBER_ID, make_request, string_option

pytestmark = pytest.mark.integration


def _titles(presentation):
    return presentation.embeds[0]["description"].splitlines()


def _footer(presentation):
    return presentation.embeds[0]["footer"]


@pytest.mark.asyncio
async def test_listing_is_cached_and_paged(catalogue, transport, cache):
    command = build_catalogue_command(catalogue, transport, cache=cache)
    navigator = PaginationNavigator(cache, transport)

    run = await command.execute(make_request())
    response_id = run.response.id  # type: ignore[union-attr]

    assert run.cached
    assert _titles(run.presentation) == ["Opening Gambit", "Endgame Study"]
    assert _footer(run.presentation) == "Page 1 of 3"

    def move(direction, actor=MEMBER_ID):
        return navigator.navigate(
            NavigationEvent(response_id=response_id, actor_id=actor, direction=direction)
        )

    result = await move(NavigationDirection.NEXT)
    assert result.status is NavigationStatus.UPDATED
    assert _titles(result.presentation) == ["Ladder Drill", "Blitz Round"]

    result = await move(NavigationDirection.LAST)
    assert _titles(result.presentation) == ["Ko Fight"]
    assert _footer(result.presentation) == "Page 3 of 3"
    assert [c["disabled"] for c in result.presentation.components] == [False, False, True, True]

    result = await move(NavigationDirection.NEXT)
    assert result.page == 2

    result = await move(NavigationDirection.FIRST, actor=OTHER_MEMBER_ID)
    assert result.status is NavigationStatus.FORBIDDEN

    assert [edited for edited, _ in transport.edits] == [response_id] * 3
    assert catalogue.solved == [
        CatalogueParams(guild_id="guild-1", tournament="Spring Cup", page=page)
        for page in (0, 1, 2, 2)
    ]


@pytest.mark.asyncio
async def test_filtered_listing_keeps_its_filter_across_pages(catalogue, transport, cache):
    command = build_catalogue_command(catalogue, transport, cache=cache)
    navigator = PaginationNavigator(cache, transport)

    run = await command.execute(
        make_request([string_option("tournament", "Spring Cup"), string_option("game", "chess")])
    )
    result = await navigator.navigate(
        NavigationEvent(
            response_id=run.response.id,  # type: ignore[union-attr]
            actor_id=MEMBER_ID,
            direction=NavigationDirection.NEXT,
        )
    )

    assert _titles(result.presentation) == ["Blitz Round"]
    assert {params.game for params in catalogue.solved} == {"chess"}


@pytest.mark.asyncio
async def test_navigation_after_expiry_requires_a_new_command(catalogue, transport, clock):
    config = load_config({"cache_ttl_seconds": 60})
    cache = InMemoryInteractionCacheService.from_config(config, clock=clock)
    command = build_catalogue_command(catalogue, transport, cache=cache)
    navigator = PaginationNavigator.from_config(config, cache, transport)

    run = await command.execute(make_request())
    clock.advance(60)
    result = await navigator.navigate(
        NavigationEvent(
            response_id=run.response.id,  # type: ignore[union-attr]
            actor_id=MEMBER_ID,
            direction=NavigationDirection.NEXT,
        )
    )

    assert result.status is NavigationStatus.EXPIRED
    assert transport.last_sent.message == "This interaction has expired."  # type: ignore[union-attr]
    assert transport.edits == []
    assert len(cache) == 0

    rerun = await command.execute(make_request())
    assert rerun.cached
    assert rerun.response != run.response


@pytest.mark.asyncio
async def test_validation_rejection_is_never_cached(catalogue, transport, cache):
    command = build_catalogue_command(catalogue, transport, cache=cache)

    run = await command.execute(make_request([string_option("game", "checkers")]))

    assert run.outcome.status == rendezvous.OutcomeStatus.FAIL_VALIDATION  # type: ignore[union-attr]
    assert not run.cached
    assert len(cache) == 0


def test_package_exposes_version():
    assert isinstance(rendezvous.__version__, str)
