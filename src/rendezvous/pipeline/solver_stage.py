"""Run the command's solver on validated parameters."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any

from rendezvous.core.exceptions import InvariantViolationError
from rendezvous.core.outcome import OutcomeBase, is_outcome
from rendezvous.core.types import (
    Failure,
    Result,
    SolvedRequest,
    Success,
    ValidatedRequest,
)
from rendezvous.pipeline.base import BaseAsyncHandler, resolve_awaitable

type Solver[S, O: OutcomeBase] = Callable[[S], Awaitable[O] | O]


class SolverStage(BaseAsyncHandler[ValidatedRequest, SolvedRequest, Exception]):
    """Produce the invocation's outcome.

    A rejected request short-circuits: its `FailedValidation` becomes the
    outcome and the solver is never called. Solvers translate anticipated
    failures into FAIL_* outcomes themselves, so anything they raise is a
    defect.
    """

    def __init__(self, solver: Solver[Any, OutcomeBase]) -> None:
        self.solver = solver

    async def handle(self, state: ValidatedRequest) -> Result[SolvedRequest, Exception]:
        if state.rejection is not None:
            return Success(SolvedRequest(validated=state, outcome=state.rejection))
        try:
            outcome = await resolve_awaitable(self.solver(state.solver_params))
        except Exception as e:
            return Failure(e)
        if not is_outcome(outcome):
            return Failure(
                InvariantViolationError(
                    f"Solver returned {type(outcome).__name__}; expected an outcome variant.",
                    stage_name=type(self).__name__,
                )
            )
        return Success(SolvedRequest(validated=state, outcome=outcome))
