"""In-memory transport that records every reply and edit."""

import itertools
from typing import Any

from rendezvous.core.types import Presentation, ResponseRef


class RecordingTransport:
    """Satisfies `rendezvous.transport.Transport` without any platform.

    Attributes:
        sent: ``(target, presentation, response_id)`` for every new reply.
        edits: ``(response_id, presentation)`` for every edited reply.
        fail_send: Raise on the next sends, to simulate a transport outage.
        return_ids: When False, replies are delivered without an identity.
    """

    def __init__(self, *, return_ids: bool = True) -> None:
        self.sent: list[tuple[Any, Presentation, str | None]] = []
        self.edits: list[tuple[str, Presentation]] = []
        self.fail_send = False
        self.return_ids = return_ids
        self._ids = itertools.count(1)

    async def send_reply(self, target: Any, presentation: Presentation) -> ResponseRef | None:
        if self.fail_send:
            raise ConnectionError("transport unavailable")
        response_id = f"response-{next(self._ids)}" if self.return_ids else None
        self.sent.append((target, presentation, response_id))
        return ResponseRef(response_id) if response_id is not None else None

    async def edit_reply(self, response_id: str, presentation: Presentation) -> None:
        self.edits.append((response_id, presentation))

    @property
    def last_sent(self) -> Presentation:
        return self.sent[-1][1]

    @property
    def last_response_id(self) -> str | None:
        return self.sent[-1][2]
