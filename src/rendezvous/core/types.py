"""Core data types that flow through the command pipeline.

This module defines the immutable data structures that represent a request
as it moves through the stages of one command invocation. Each stage turns
one state into the next, so a stage can only see what earlier stages
produced.
"""

from __future__ import annotations

import dataclasses
from enum import StrEnum
import typing

if typing.TYPE_CHECKING:
    from rendezvous.core.outcome import FailedValidation, OutcomeBase
    from rendezvous.core.request import LimitedRequest

# --- Result Monad for Robust Error Handling ---
# Stage handlers report unexpected errors as values so the orchestrator can
# decide how to render them instead of wrapping every stage in try/except.

TSuccess = typing.TypeVar("TSuccess")
TFailure = typing.TypeVar("TFailure", bound=Exception)


@dataclasses.dataclass(frozen=True, slots=True)
class Success[TSuccess]:
    """A successful result in the pipeline."""

    value: TSuccess


@dataclasses.dataclass(frozen=True, slots=True)
class Failure[TFailure]:
    """A failure in the pipeline, containing the error."""

    error: TFailure


Result = Success[TSuccess] | Failure[TFailure]


# --- Presentation ---


@dataclasses.dataclass(frozen=True, slots=True)
class DescribedOutcome:
    """Plain-text rendering of an outcome."""

    message: str
    ephemeral: bool = True


@dataclasses.dataclass(frozen=True, slots=True)
class EmbedDescribedOutcome:
    """Rich rendering: embeds plus interactive components (e.g. page controls)."""

    embeds: tuple[typing.Mapping[str, typing.Any], ...]
    components: tuple[typing.Mapping[str, typing.Any], ...] = ()
    ephemeral: bool = True


Presentation = DescribedOutcome | EmbedDescribedOutcome


def is_embed_described(
    presentation: Presentation,
) -> typing.TypeGuard[EmbedDescribedOutcome]:
    return isinstance(presentation, EmbedDescribedOutcome)


# --- Transport references and cache parameters ---


@dataclasses.dataclass(frozen=True, slots=True)
class ResponseRef:
    """Identity of a reply delivered by the transport."""

    id: str


@dataclasses.dataclass(frozen=True, slots=True)
class CacheParams[S]:
    """Everything needed to re-solve a paginated reply later."""

    response_id: str
    sender_id: str
    solver_params: S
    total_pages: int


class CommandKind(StrEnum):
    SLASH = "SLASH"
    MESSAGE = "MESSAGE"  # acts on LimitedRequest.target_message


# --- Pipeline states ---


@dataclasses.dataclass(frozen=True, slots=True)
class ReceivedRequest:
    """The inbound request, before and after reduction."""

    raw: typing.Any
    request: LimitedRequest | None = None


@dataclasses.dataclass(frozen=True, slots=True)
class ValidatedRequest:
    """Validator output: either solver parameters or a validation failure."""

    received: ReceivedRequest
    solver_params: typing.Any = None
    rejection: FailedValidation[typing.Any] | None = None

    @property
    def passed(self) -> bool:
        return self.rejection is None


@dataclasses.dataclass(frozen=True, slots=True)
class SolvedRequest:
    validated: ValidatedRequest
    outcome: OutcomeBase


@dataclasses.dataclass(frozen=True, slots=True)
class DescribedRequest:
    solved: SolvedRequest
    presentation: Presentation


@dataclasses.dataclass(frozen=True, slots=True)
class RepliedRequest:
    """The state after delivery; `response` is None when the transport gave no id."""

    described: DescribedRequest
    response: ResponseRef | None
    cached: bool = False

    @property
    def outcome(self) -> OutcomeBase:
        return self.described.solved.outcome


@dataclasses.dataclass(frozen=True, slots=True)
class PipelineRun:
    """Summary of one command invocation.

    Note: `durations` is filled in by the orchestrator and is not part of the
    immutability guarantees of the surrounding dataclass.
    """

    command_name: str
    outcome: OutcomeBase | None
    presentation: Presentation | None
    response: ResponseRef | None
    cached: bool
    durations: dict[str, float] = dataclasses.field(default_factory=dict)
    error: BaseException | None = None
