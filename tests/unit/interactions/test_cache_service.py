import asyncio
import dataclasses

import pytest

from rendezvous.config import FrozenConfig
from rendezvous.core.outcome import Pagination
from rendezvous.core.types import CacheParams, DescribedOutcome
from rendezvous.interactions import (
    DEFAULT_TTL_SECONDS,
    CachedInteraction,
    InMemoryInteractionCacheService,
    interaction_cacher,
    page_of,
    with_page,
)
from tests.fixtures.catalogue import CatalogueDetails, CatalogueParams

pytestmark = pytest.mark.unit


def _details(params):
    return CatalogueDetails(
        tournament=params.tournament,
        challenges=(f"page-{params.page}",),
        pagination=Pagination(params.page, 4),
    )


def _describe(outcome):
    return DescribedOutcome(outcome.challenges[0])


def _interaction(params=None, *, response_id="r-1", solver=_details):
    return CachedInteraction(
        response_id,
        "member-100",
        params or CatalogueParams(guild_id="g", tournament="Spring Cup"),
        4,
        solver=solver,
        describer=_describe,
    )


# --- Solver parameter paging ---


def test_with_page_replaces_only_the_page_of_a_dataclass():
    params = CatalogueParams(guild_id="g", tournament="T", game="chess", page=0)
    moved = with_page(params, 2)
    assert moved == dataclasses.replace(params, page=2)
    assert params.page == 0


def test_with_page_copies_mappings():
    params = {"tournament": "T", "page": 0}
    assert with_page(params, 3) == {"tournament": "T", "page": 3}
    assert params["page"] == 0
    assert page_of({"page": 1}) == 1


def test_with_page_rejects_other_types():
    with pytest.raises(TypeError, match="page"):
        with_page(("T", 0), 1)


# --- CachedInteraction ---


@pytest.mark.asyncio
async def test_solve_again_changes_only_the_page():
    seen = []

    def solver(params):
        seen.append(params)
        return _details(params)

    params = CatalogueParams(guild_id="g", tournament="Spring Cup", game="go", page=1)
    interaction = _interaction(params, solver=solver)

    presentation = await interaction.solve_again_and_describe(3)

    assert presentation == DescribedOutcome("page-3")
    assert seen == [dataclasses.replace(params, page=3)]
    assert interaction.page == 1


@pytest.mark.asyncio
async def test_solve_again_awaits_async_solvers():
    async def solver(params):
        return _details(params)

    outcome = await _interaction(solver=solver).solve_again(2)
    assert outcome.challenges == ("page-2",)


def test_set_page_is_bounded():
    interaction = _interaction()
    interaction.set_page(3)
    assert interaction.page == 3
    with pytest.raises(ValueError, match="page"):
        interaction.set_page(4)


def test_interaction_requires_pages():
    with pytest.raises(ValueError, match="total_pages"):
        CachedInteraction(
            "r", "m", {"page": 0}, 0, solver=_details, describer=_describe
        )


# --- InMemoryInteractionCacheService ---


def test_cached_interaction_expires_after_ttl(clock):
    cache = InMemoryInteractionCacheService(60, clock=clock)
    interaction = _interaction()
    cache.cache_interaction("r-1", interaction)

    clock.advance(59)
    assert cache.get_cached_interaction("r-1") is interaction
    clock.advance(1)
    assert cache.get_cached_interaction("r-1") is None


def test_default_ttl_is_fourteen_minutes(cache):
    assert cache.ttl_seconds == DEFAULT_TTL_SECONDS == 840


def test_from_config_uses_configured_ttl(clock):
    cache = InMemoryInteractionCacheService.from_config(
        FrozenConfig(cache_ttl_seconds=120, sweep_interval_seconds=5), clock=clock
    )
    assert cache.ttl_seconds == 120
    assert cache.sweep_interval_seconds == 5


def test_sweep_bounds_memory(cache, clock):
    cache.cache_interaction("r-1", _interaction(response_id="r-1"))
    clock.advance(DEFAULT_TTL_SECONDS)
    cache.cache_interaction("r-2", _interaction(response_id="r-2"))

    assert len(cache) == 2
    assert cache.sweep() == 1
    assert len(cache) == 1


@pytest.mark.asyncio
async def test_run_sweeper_sweeps_until_cancelled(cache, clock, monkeypatch):
    sweeps = []
    monkeypatch.setattr(cache, "sweep", lambda: sweeps.append(clock.now) or 0)

    task = asyncio.create_task(cache.run_sweeper(0.001))
    while len(sweeps) < 2:
        await asyncio.sleep(0.001)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert len(sweeps) >= 2


def test_interaction_cacher_stores_rebuildable_interaction(cache):
    cacher = interaction_cacher(cache, solver=_details, describer=_describe)
    params = CatalogueParams(guild_id="g", tournament="Spring Cup")

    cacher(CacheParams(response_id="r-7", sender_id="member-100", solver_params=params, total_pages=4))

    stored = cache.get_cached_interaction("r-7")
    assert stored is not None
    assert stored.solver_params == params
    assert stored.total_pages == 4
    assert stored.sender_id == "member-100"
