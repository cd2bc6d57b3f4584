"""Stored state that lets a paginated reply be re-solved at another page.

Solver parameters of paginated commands carry a ``page`` field, either as a
dataclass attribute or as a mapping key. Re-solving replaces that field and
nothing else.
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
import typing

from rendezvous.core.outcome import OutcomeBase
from rendezvous.core.types import Presentation
from rendezvous.pipeline.base import resolve_awaitable

if typing.TYPE_CHECKING:
    from rendezvous.descriptions import Describer
    from rendezvous.pipeline.solver_stage import Solver


def page_of(solver_params: object) -> int:
    """Return the ``page`` field of paginated solver parameters."""
    if isinstance(solver_params, Mapping):
        return int(solver_params["page"])
    return int(getattr(solver_params, "page"))


def with_page[S](solver_params: S, page: int) -> S:
    """Return a copy of ``solver_params`` with only ``page`` replaced.

    Raises:
        TypeError: If the parameters are neither a dataclass nor a mapping.
    """
    if dataclasses.is_dataclass(solver_params) and not isinstance(solver_params, type):
        return dataclasses.replace(solver_params, page=page)  # type: ignore[return-value]
    if isinstance(solver_params, Mapping):
        return typing.cast("S", {**solver_params, "page": page})
    raise TypeError(
        f"Paginated solver params must be a dataclass or mapping with a 'page' "
        f"field, got {type(solver_params).__name__}"
    )


class CachedInteraction[S, O: OutcomeBase]:
    """A delivered paginated reply that can be moved to another page.

    Attributes:
        response_id: Identity of the delivered reply (the cache key).
        sender_id: The requester who ran the original command.
        total_pages: Page count reported by the original outcome.
    """

    def __init__(
        self,
        response_id: str,
        sender_id: str,
        solver_params: S,
        total_pages: int,
        *,
        solver: Solver[S, O],
        describer: Describer[O],
    ) -> None:
        if total_pages < 1:
            raise ValueError(f"total_pages: must be >= 1, got {total_pages!r}")
        page_of(solver_params)  # fail early on params without a page field
        self.response_id = response_id
        self.sender_id = sender_id
        self.total_pages = total_pages
        self._solver_params = solver_params
        self._solver = solver
        self._describer = describer

    @property
    def solver_params(self) -> S:
        return self._solver_params

    @property
    def page(self) -> int:
        return page_of(self._solver_params)

    def set_page(self, page: int) -> None:
        """Record ``page`` as the current page of the delivered reply."""
        if not 0 <= page < self.total_pages:
            raise ValueError(f"page: must be in [0, {self.total_pages}), got {page!r}")
        self._solver_params = with_page(self._solver_params, page)

    async def solve_again(self, page: int) -> O:
        """Re-run the solver with the stored parameters at ``page``."""
        return await resolve_awaitable(
            self._solver(with_page(self._solver_params, page))
        )

    async def solve_again_and_describe(self, page: int) -> Presentation:
        """Re-run the solver at ``page`` and describe the fresh outcome."""
        return self._describer(await self.solve_again(page))

    def __repr__(self) -> str:
        return (
            f"CachedInteraction(response_id={self.response_id!r}, "
            f"sender_id={self.sender_id!r}, page={self.page}, "
            f"total_pages={self.total_pages})"
        )
