"""The primary entry point: one declared business command and its pipeline.

A `RendezvousCommand` is built once from its parts (validator, solver,
describer, replyer and optional cacher) and then executed for every inbound
request. Execution is strictly sequential:

    validate -> solve -> describe -> reply -> cache

Defects never escape `execute`. An unexpected error in the first three stages
is logged and replaced by the FAIL_UNKNOWN rendering, which is still
delivered. A failed reply ends the run without caching. A failed cache write
is logged and leaves the reply untouched.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import dataclasses
import logging
from time import perf_counter
from typing import TYPE_CHECKING, Any

from rendezvous.core.exceptions import InvariantViolationError, PipelineError
from rendezvous.core.outcome import FailedUnknown, OutcomeBase
from rendezvous.core.request import limit_request
from rendezvous.core.types import (
    CommandKind,
    DescribedRequest,
    Failure,
    PipelineRun,
    ReceivedRequest,
    RepliedRequest,
    Result,
    SolvedRequest,
    Success,
    ValidatedRequest,
)
from rendezvous.descriptions import (
    Describer,
    DescriptionMap,
    describe_unknown_failure,
    describer_for,
)
from rendezvous.pipeline.base import stage_name
from rendezvous.pipeline.cache_stage import Cacher, CacheStage
from rendezvous.pipeline.describer_stage import DescriberStage
from rendezvous.pipeline.reply_stage import ReplyStage
from rendezvous.pipeline.solver_stage import Solver, SolverStage
from rendezvous.pipeline.validation_stage import Reducer, ValidationStage, Validator
from rendezvous.telemetry import TelemetryContext, TelemetryReporter
from rendezvous.transport import Replyer, Transport, simple_replyer

if TYPE_CHECKING:
    from rendezvous.config import FrozenConfig
    from rendezvous.interactions.service import InteractionCacheService
    from rendezvous.pipeline.base import BaseAsyncHandler
    from rendezvous.telemetry import TelemetryContextProtocol

log = logging.getLogger(__name__)

type Deferrer = Callable[[Any], Awaitable[None]]


@dataclasses.dataclass(frozen=True, slots=True, kw_only=True)
class RendezvousCommand[O: OutcomeBase, S]:
    """A declared business command.

    Attributes:
        name: Command name, used in logs and telemetry.
        validator: Maps the reduced request to solver params or a `FailedValidation`.
        solver: Performs the business operation; returns exactly one outcome.
        describer: Renders an outcome into a presentation.
        replyer: Delivers the presentation; returns the reply's identity if known.
        cacher: Stores navigable state of paginated replies (slash commands only).
        reducer: Reduces the raw request; defaults to `limit_request`.
        deferrer: Optional acknowledgement sent before validation starts.
        kind: `CommandKind.SLASH` or `CommandKind.MESSAGE`.
        reporters: Telemetry sinks for stage timings and defect counts.
        telemetry_enabled: Force telemetry on or off; None defers to
            ``RENDEZVOUS_TELEMETRY``.
    """

    name: str
    validator: Validator[S]
    solver: Solver[S, O]
    describer: Describer[O]
    replyer: Replyer
    cacher: Cacher[S] | None = None
    reducer: Reducer = limit_request
    deferrer: Deferrer | None = None
    kind: CommandKind = CommandKind.SLASH
    reporters: tuple[TelemetryReporter, ...] = ()
    telemetry_enabled: bool | None = None

    def __post_init__(self) -> None:
        """Validate the command definition."""
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("name: must be a non-empty str")
        for field in ("validator", "solver", "describer", "replyer", "reducer"):
            if not callable(getattr(self, field)):
                raise TypeError(f"{field}: must be callable")
        if self.cacher is not None and self.kind is not CommandKind.SLASH:
            raise ValueError("cacher: only slash commands can cache replies")

    @classmethod
    def simple(
        cls,
        *,
        name: str,
        descriptions: DescriptionMap[O] | None,
        validator: Validator[S],
        solver: Solver[S, O],
        transport: Transport,
        cache: InteractionCacheService | None = None,
        config: FrozenConfig | None = None,
        **kwargs: Any,
    ) -> RendezvousCommand[O, S]:
        """Build a command that describes outcomes from a status map.

        Outcomes whose status is missing from ``descriptions`` fall back to
        the default descriptions. When ``cache`` is given, paginated replies
        are cached there for navigation. ``config`` supplies the telemetry
        toggle unless ``telemetry_enabled`` is passed explicitly.
        """
        if config is not None:
            kwargs.setdefault("telemetry_enabled", config.telemetry_enabled)
        describer = describer_for(descriptions)
        cacher = None
        if cache is not None:
            from rendezvous.interactions.service import interaction_cacher

            cacher = interaction_cacher(cache, solver=solver, describer=describer)
        return cls(
            name=name,
            validator=validator,
            solver=solver,
            describer=describer,
            replyer=simple_replyer(transport),
            cacher=cacher,
            **kwargs,
        )

    @property
    def stages(self) -> tuple[BaseAsyncHandler[Any, Any, Exception], ...]:
        """Return the stage handlers in execution order."""
        return (
            ValidationStage(self.reducer, self.validator),
            SolverStage(self.solver),
            DescriberStage(self.describer),
            ReplyStage(self.replyer),
            CacheStage(self.cacher, kind=self.kind),
        )

    async def execute(self, raw: Any) -> PipelineRun:
        """Run one inbound request through the pipeline.

        Args:
            raw: The inbound request as delivered by the transport.

        Returns:
            A `PipelineRun` summarising the invocation.

        Raises:
            InvariantViolationError: If a stage returns a non-Result value.
        """
        ctx = TelemetryContext(*self.reporters, enabled=self.telemetry_enabled)
        durations: dict[str, float] = {}
        error: PipelineError | None = None

        if self.deferrer is not None:
            try:
                await self.deferrer(raw)
            except Exception as e:
                log.error("Command %r could not defer its reply: %s", self.name, e)

        *front, reply_stage, cache_stage = self.stages
        state: Any = ReceivedRequest(raw=raw)
        for handler in front:
            result = await self._run(handler, state, ctx, durations)
            if isinstance(result, Failure):
                error = self._defect(handler, result.error, ctx)
                state = self._unknown_failure(state)
                break
            state = result.value
        described: DescribedRequest = state

        result = await self._run(reply_stage, described, ctx, durations)
        if isinstance(result, Failure):
            return PipelineRun(
                command_name=self.name,
                outcome=described.solved.outcome,
                presentation=described.presentation,
                response=None,
                cached=False,
                durations=durations,
                error=self._defect(reply_stage, result.error, ctx),
            )
        replied: RepliedRequest = result.value

        result = await self._run(cache_stage, replied, ctx, durations)
        if isinstance(result, Failure):
            error = self._defect(cache_stage, result.error, ctx)
        else:
            replied = result.value

        return PipelineRun(
            command_name=self.name,
            outcome=replied.outcome,
            presentation=described.presentation,
            response=replied.response,
            cached=replied.cached,
            durations=durations,
            error=error,
        )

    async def _run(
        self,
        handler: BaseAsyncHandler[Any, Any, Exception],
        state: Any,
        ctx: TelemetryContextProtocol,
        durations: dict[str, float],
    ) -> Result[Any, Exception]:
        name = stage_name(handler)
        with ctx("pipeline.stage", stage=name, command=self.name):
            start = perf_counter()
            result = await handler.handle(state)
            durations[name] = perf_counter() - start

        # Guard: handlers must return Success|Failure
        if not isinstance(result, Success | Failure):
            ctx.count("pipeline.invariant_violation", stage=name)
            raise InvariantViolationError(
                "Handler returned a non-Result value; expected Success|Failure.",
                stage_name=name,
            )
        return result

    def _defect(
        self,
        handler: object,
        exc: BaseException,
        ctx: TelemetryContextProtocol,
    ) -> PipelineError:
        name = stage_name(handler)
        ctx.count("pipeline.defect", stage=name)
        log.error(
            "Command %r failed in %s: %s",
            self.name,
            name,
            exc,
            exc_info=(type(exc), exc, exc.__traceback__),
        )
        return PipelineError(str(exc), name, exc)

    @staticmethod
    def _unknown_failure(state: Any) -> DescribedRequest:
        match state:
            case SolvedRequest(validated=validated):
                pass
            case ValidatedRequest():
                validated = state
            case _:
                validated = ValidatedRequest(received=state)
        outcome = FailedUnknown()
        return DescribedRequest(
            solved=SolvedRequest(validated=validated, outcome=outcome),
            presentation=describe_unknown_failure(outcome),
        )
