"""Seams to the external transport that delivers replies.

The pipeline never talks to a platform directly: replyers and navigation
handlers go through an object satisfying `Transport`.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from rendezvous.core.types import Presentation, ResponseRef

type Replyer = Callable[[Any, Presentation], Awaitable[ResponseRef | None]]


class Transport(Protocol):
    """Send-new-reply and edit-existing-reply operations."""

    async def send_reply(
        self, target: Any, presentation: Presentation
    ) -> ResponseRef | None:
        """Reply to ``target`` (an inbound request or event) and return the reply's identity."""
        ...

    async def edit_reply(self, response_id: str, presentation: Presentation) -> None:
        """Replace the content of a reply delivered earlier."""
        ...


def simple_replyer(transport: Transport) -> Replyer:
    """Return a replyer that sends the presentation as a new reply."""

    async def reply(raw: Any, presentation: Presentation) -> ResponseRef | None:
        return await transport.send_reply(raw, presentation)

    return reply
