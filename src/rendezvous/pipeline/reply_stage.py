"""Deliver the presentation through the transport."""

from __future__ import annotations

from rendezvous.core.types import (
    DescribedRequest,
    Failure,
    RepliedRequest,
    Result,
    Success,
)
from rendezvous.pipeline.base import BaseAsyncHandler
from rendezvous.transport import Replyer


class ReplyStage(BaseAsyncHandler[DescribedRequest, RepliedRequest, Exception]):
    def __init__(self, replyer: Replyer) -> None:
        self.replyer = replyer

    async def handle(self, state: DescribedRequest) -> Result[RepliedRequest, Exception]:
        raw = state.solved.validated.received.raw
        try:
            response = await self.replyer(raw, state.presentation)
        except Exception as e:
            return Failure(e)
        return Success(RepliedRequest(described=state, response=response))
