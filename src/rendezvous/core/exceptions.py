"""Exceptions raised by the command pipeline and its collaborators.

Anticipated business failures never show up here; solvers report those as
outcome values. Exceptions are reserved for the validation short-circuit and
for defects.
"""

from __future__ import annotations

import typing

if typing.TYPE_CHECKING:
    from rendezvous.validation import Constraint


class RendezvousError(Exception):
    """Base exception for rendezvous errors"""  # noqa: D415


class ValidationError(RendezvousError):
    """Raised by the constraint engine on the first violated constraint.

    Only `validate_constraints` constructs this; business code reads it or
    converts it with `validation_failure`.
    """

    def __init__(self, constraint: Constraint[typing.Any], field: str, value: object):
        self.constraint = constraint
        self.field = field
        self.value = value
        super().__init__(
            f"Validation failed: check {constraint.category} on {field} "
            f"failed for value {value}."
        )


class UnsupportedOptionKindError(RendezvousError):
    """Raised when an option's kind has no comparable value to validate"""  # noqa: D415

    def __init__(self, option_name: str, kind: object):
        self.option_name = option_name
        self.kind = kind
        super().__init__(
            f"Option {option_name!r} has unsupported kind {kind!s} for validation."
        )


class InvalidRequestError(RendezvousError):
    """Raised when an inbound request cannot be reduced to a workspace request"""  # noqa: D415


class MissingOptionError(RendezvousError):
    """Raised when a required option is absent from the request"""  # noqa: D415


class ConfigurationError(RendezvousError):
    """Raised when settings cannot be resolved or fail validation"""  # noqa: D415


class PipelineError(RendezvousError):
    """A stage failed with an unexpected error.

    Attributes:
        stage_name: Name of the stage handler that failed.
        underlying_error: The exception the stage reported.
    """

    def __init__(
        self, message: str, stage_name: str, underlying_error: BaseException
    ):
        self.stage_name = stage_name
        self.underlying_error = underlying_error
        super().__init__(f"Pipeline stage {stage_name!r} failed: {message}")


class InvariantViolationError(RendezvousError):
    """Raised when a stage breaks the pipeline contract"""  # noqa: D415

    def __init__(self, message: str, *, stage_name: str | None = None):
        self.stage_name = stage_name
        super().__init__(message)
