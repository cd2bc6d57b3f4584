"""Render the outcome into a presentation."""

from __future__ import annotations

from typing import Any

from rendezvous.core.types import (
    DescribedRequest,
    Failure,
    Result,
    SolvedRequest,
    Success,
)
from rendezvous.descriptions import Describer
from rendezvous.pipeline.base import BaseAsyncHandler


class DescriberStage(BaseAsyncHandler[SolvedRequest, DescribedRequest, Exception]):
    def __init__(self, describer: Describer[Any]) -> None:
        self.describer = describer

    async def handle(self, state: SolvedRequest) -> Result[DescribedRequest, Exception]:
        try:
            presentation = self.describer(state.outcome)
        except Exception as e:
            return Failure(e)
        return Success(DescribedRequest(solved=state, presentation=presentation))
