"""Outcome variants returned by every solver.

Each variant is a frozen dataclass whose class carries the status code, so the
status determines the body shape and a body field can only be read from the
variant that defines it. The generic variants below are shared by every
command; a command adds its own statuses in a separate `StrEnum` and its own
variants as further `OutcomeBase` subclasses, then types its solver as
``GenericOutcome | ItsVariants``.

Example:
    class ListingStatus(StrEnum):
        SUCCESS_DETAILS = "SUCCESS_DETAILS"

    @dataclasses.dataclass(frozen=True, slots=True)
    class ListingDetails(OutcomeBase):
        status: typing.ClassVar[str] = ListingStatus.SUCCESS_DETAILS
        rows: tuple[str, ...]
        pagination: Pagination

    type ListingOutcome = GenericOutcome[str] | ListingDetails
"""

from __future__ import annotations

from collections.abc import Mapping
import dataclasses
from enum import StrEnum
from types import MappingProxyType
import typing

if typing.TYPE_CHECKING:
    from rendezvous.validation import Constraint


class OutcomeStatus(StrEnum):
    """Generic status codes understood by the default descriptions."""

    SUCCESS = "SUCCESS"  # generic success
    SUCCESS_NO_CHANGE = "SUCCESS_NO_CHANGE"  # trivial success with no change
    SUCCESS_MONO = "SUCCESS_MONO"
    SUCCESS_DUO = "SUCCESS_DUO"
    FAIL = "FAIL"
    FAIL_VALIDATION = "FAIL_VALIDATION"  # rejected before solving
    FAIL_DNE_MONO = "FAIL_DNE_MONO"  # the target does not exist
    FAIL_DNE_DUO = "FAIL_DNE_DUO"  # the joint target does not exist
    FAIL_UNKNOWN = "FAIL_UNKNOWN"


@dataclasses.dataclass(frozen=True, slots=True)
class Pagination:
    """Current page and page count of a paginated outcome."""

    page: int
    total_pages: int

    def __post_init__(self) -> None:
        """Validate that the page lies inside the page range."""
        if not isinstance(self.total_pages, int) or self.total_pages < 1:
            raise ValueError(f"total_pages: must be an int >= 1, got {self.total_pages!r}")
        if not isinstance(self.page, int) or not 0 <= self.page < self.total_pages:
            raise ValueError(
                f"page: must be in [0, {self.total_pages}), got {self.page!r}"
            )

    @property
    def is_first(self) -> bool:
        return self.page == 0

    @property
    def is_last(self) -> bool:
        return self.page == self.total_pages - 1


class OutcomeBase:
    """Common base of every outcome variant."""

    __slots__ = ()

    status: typing.ClassVar[str]

    @property
    def body(self) -> Mapping[str, typing.Any]:
        """Return the status-shaped body as a read-only mapping.

        Pagination metadata is not part of the body.
        """
        return MappingProxyType(
            {
                f.name: getattr(self, f.name)
                for f in dataclasses.fields(typing.cast("typing.Any", self))
                if f.name != "pagination"
            }
        )


# --- Generic variants ---


@dataclasses.dataclass(frozen=True, slots=True)
class Succeeded(OutcomeBase):
    status: typing.ClassVar[str] = OutcomeStatus.SUCCESS


@dataclasses.dataclass(frozen=True, slots=True)
class SucceededMono[T](OutcomeBase):
    status: typing.ClassVar[str] = OutcomeStatus.SUCCESS_MONO

    data: T
    context: str


@dataclasses.dataclass(frozen=True, slots=True)
class SucceededDuo[T](OutcomeBase):
    status: typing.ClassVar[str] = OutcomeStatus.SUCCESS_DUO

    data1: T
    context1: str
    data2: T
    context2: str


@dataclasses.dataclass(frozen=True, slots=True)
class SucceededNoChange[T1, T2](OutcomeBase):
    """Success where some of the requested operations changed nothing."""

    status: typing.ClassVar[str] = OutcomeStatus.SUCCESS_NO_CHANGE

    data1: tuple[T1, ...]
    context1: str
    data2: tuple[T2, ...]
    context2: str


@dataclasses.dataclass(frozen=True, slots=True)
class Failed(OutcomeBase):
    status: typing.ClassVar[str] = OutcomeStatus.FAIL


@dataclasses.dataclass(frozen=True, slots=True)
class FailedUnknown(OutcomeBase):
    status: typing.ClassVar[str] = OutcomeStatus.FAIL_UNKNOWN


@dataclasses.dataclass(frozen=True, slots=True)
class FailedValidation[T](OutcomeBase):
    """Validation rejected the request; the solver never ran."""

    status: typing.ClassVar[str] = OutcomeStatus.FAIL_VALIDATION

    constraint: Constraint[typing.Any]
    field: str
    value: T
    context: str


@dataclasses.dataclass(frozen=True, slots=True)
class FailedDneMono[T](OutcomeBase):
    status: typing.ClassVar[str] = OutcomeStatus.FAIL_DNE_MONO

    data: T
    context: str


@dataclasses.dataclass(frozen=True, slots=True)
class FailedDneDuo[T](OutcomeBase):
    status: typing.ClassVar[str] = OutcomeStatus.FAIL_DNE_DUO

    data1: T
    context1: str
    data2: T
    context2: str


type GenericOutcome[T1 = typing.Any, T2 = typing.Any] = (
    Succeeded
    | SucceededMono[T1]
    | SucceededDuo[T1]
    | SucceededNoChange[T1, T2]
    | Failed
    | FailedUnknown
    | FailedValidation[T1]
    | FailedDneMono[T1]
    | FailedDneDuo[T1]
)

GENERIC_OUTCOME_TYPES: tuple[type[OutcomeBase], ...] = (
    Succeeded,
    SucceededMono,
    SucceededDuo,
    SucceededNoChange,
    Failed,
    FailedUnknown,
    FailedValidation,
    FailedDneMono,
    FailedDneDuo,
)


def is_outcome(value: object) -> typing.TypeGuard[OutcomeBase]:
    return isinstance(value, OutcomeBase)


def is_validation_failure(value: object) -> typing.TypeGuard[FailedValidation[typing.Any]]:
    return isinstance(value, FailedValidation)


def is_paginated(outcome: object) -> bool:
    """Return True when the outcome carries `Pagination` metadata."""
    return isinstance(getattr(outcome, "pagination", None), Pagination)
