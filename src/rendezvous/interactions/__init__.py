"""Paginated interaction cache and page navigation."""

from rendezvous.interactions.cached import CachedInteraction, page_of, with_page
from rendezvous.interactions.expiring import ExpiringMap
from rendezvous.interactions.navigation import (
    NavigationDirection,
    NavigationEvent,
    NavigationResult,
    NavigationStatus,
    OwnershipPolicy,
    PaginationNavigator,
    page_controls,
    target_page,
)
from rendezvous.interactions.service import (
    DEFAULT_TTL_SECONDS,
    InMemoryInteractionCacheService,
    InteractionCacheService,
    interaction_cacher,
)

__all__ = [
    "DEFAULT_TTL_SECONDS",
    "CachedInteraction",
    "ExpiringMap",
    "InMemoryInteractionCacheService",
    "InteractionCacheService",
    "NavigationDirection",
    "NavigationEvent",
    "NavigationResult",
    "NavigationStatus",
    "OwnershipPolicy",
    "PaginationNavigator",
    "interaction_cacher",
    "page_controls",
    "page_of",
    "target_page",
    "with_page",
]
