"""Reduce the inbound request and run the command's validator."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
import logging
from typing import Any

from rendezvous.core.exceptions import ValidationError
from rendezvous.core.outcome import FailedValidation, is_validation_failure
from rendezvous.core.request import LimitedRequest
from rendezvous.core.types import (
    Failure,
    ReceivedRequest,
    Result,
    Success,
    ValidatedRequest,
)
from rendezvous.pipeline.base import BaseAsyncHandler, resolve_awaitable
from rendezvous.validation import validation_failure

log = logging.getLogger(__name__)

type Reducer = Callable[[Any], LimitedRequest]
type Validator[S] = Callable[
    [LimitedRequest],
    Awaitable[S | FailedValidation[Any]] | S | FailedValidation[Any],
]


class ValidationStage(BaseAsyncHandler[ReceivedRequest, ValidatedRequest, Exception]):
    """Turn a raw request into solver parameters or a validation failure.

    A `ValidationError` escaping the validator is treated the same as a
    returned `FailedValidation`. Any other exception is a defect and is
    reported as `Failure`.
    """

    def __init__(self, reducer: Reducer, validator: Validator[Any]) -> None:
        self.reducer = reducer
        self.validator = validator

    async def handle(
        self, state: ReceivedRequest
    ) -> Result[ValidatedRequest, Exception]:
        try:
            request = self.reducer(state.raw)
            received = ReceivedRequest(raw=state.raw, request=request)
            try:
                params = await resolve_awaitable(self.validator(request))
            except ValidationError as e:
                params = validation_failure(e)
        except Exception as e:
            return Failure(e)

        if is_validation_failure(params):
            log.debug(
                "Request %s rejected on %s (%s)",
                request.id,
                params.field,
                params.constraint.category,
            )
            return Success(ValidatedRequest(received=received, rejection=params))
        return Success(ValidatedRequest(received=received, solver_params=params))
