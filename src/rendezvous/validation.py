"""Fail-fast constraint engine for command requests.

Validators describe what must hold about a request as ordered groups of
`Constraint`s: one set keyed by metadata fields of the `LimitedRequest`, one
keyed by supplied options. `validate_constraints` scans metadata groups, then
option groups, in the order given and raises `ValidationError` for the first
predicate that returns False. Nothing after that constraint is checked.

Option groups have two special keys:

- ``None``: the requester omitted the option, so there is nothing to check.
  The group is skipped. Validators usually write ``request.options.get(name)``
  as the key, which is None exactly when the option was omitted.
- `ALWAYS`: the group runs unconditionally, for preconditions that do not
  belong to one option's value (e.g. a defaultable target must resolve even
  when the option was omitted).

Groups may be given as a mapping or as an explicit sequence of
``(key, constraints)`` pairs. The sequence form makes the scan order part of
the call and allows repeated keys, so prefer it.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Iterable, Mapping, Sequence
import dataclasses
from enum import StrEnum
import inspect
import logging
import typing

from rendezvous.core.exceptions import UnsupportedOptionKindError, ValidationError
from rendezvous.core.outcome import FailedValidation
from rendezvous.core.request import (
    SCALAR_OPTION_KINDS,
    LimitedRequest,
    OptionKind,
    RequestOption,
)

log = logging.getLogger(__name__)


class ValidationCategory(StrEnum):
    """Why a constraint rejected a request; used to pick the user message."""

    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    TARGET_USER_BOT = "TARGET_USER_BOT"
    NUMBER_BEYOND_RANGE = "NUMBER_BEYOND_RANGE"
    OPTION_DNE = "OPTION_DNE"
    OPTION_DUPLICATE = "OPTION_DUPLICATE"
    OPTION_INVALID = "OPTION_INVALID"
    OPTION_TOO_LONG = "OPTION_TOO_LONG"
    OPTION_UNDEFAULTABLE = "OPTION_UNDEFAULTABLE"


type Predicate[T] = Callable[[T], bool | Awaitable[bool]]


@dataclasses.dataclass(frozen=True, slots=True)
class Constraint[T]:
    """A failure category plus the predicate that must hold.

    The predicate may be a plain function or a coroutine function. It should
    return a bool; an exception it raises is treated as a defect and is not
    turned into a validation failure.
    """

    category: ValidationCategory
    predicate: Predicate[T]

    async def holds(self, value: T) -> bool:
        result = self.predicate(value)
        if inspect.isawaitable(result):
            result = await result
        return bool(result)


class _Always:
    """Key for option constraints not tied to a single option."""

    __slots__ = ()
    _instance: typing.ClassVar[_Always | None] = None

    def __new__(cls) -> _Always:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ALWAYS"

    def __reduce__(self) -> str:
        return "ALWAYS"


ALWAYS: typing.Final = _Always()

type OptionKey = RequestOption | _Always | None
type ConstraintGroups[K] = (
    Mapping[K, Sequence[Constraint[typing.Any]]]
    | Iterable[tuple[K, Sequence[Constraint[typing.Any]]]]
)


def _iter_groups[K](
    groups: ConstraintGroups[K] | None,
) -> Iterable[tuple[K, Sequence[Constraint[typing.Any]]]]:
    if groups is None:
        return ()
    if isinstance(groups, Mapping):
        return groups.items()
    return groups


def resolve_option_value(option: RequestOption) -> typing.Any:
    """Return the value constraints compare against for ``option``.

    Users resolve to the user reference; channels and roles to their ids;
    scalar kinds to the supplied value.

    Raises:
        UnsupportedOptionKindError: For kinds without a comparable value.
    """
    if option.kind is OptionKind.USER:
        return option.user
    if option.kind is OptionKind.CHANNEL:
        return option.channel.id if option.channel is not None else None
    if option.kind is OptionKind.ROLE:
        return option.role.id if option.role is not None else None
    if option.kind in SCALAR_OPTION_KINDS:
        return option.value
    raise UnsupportedOptionKindError(option.name, option.kind)


async def _run_group(
    constraints: Sequence[Constraint[typing.Any]], field: str, value: typing.Any
) -> None:
    for constraint in constraints:
        if not await constraint.holds(value):
            error = ValidationError(constraint, field, value)
            log.debug("%s", error)
            raise error


async def validate_constraints(
    request: LimitedRequest,
    metadata_constraints: ConstraintGroups[str] | None,
    option_constraints: ConstraintGroups[OptionKey] | None,
) -> None:
    """Run every constraint group against the request, stopping at the first failure.

    Args:
        request: The reduced request being validated.
        metadata_constraints: Groups keyed by a `LimitedRequest` attribute name.
        option_constraints: Groups keyed by a supplied option, ``None`` or `ALWAYS`.

    Raises:
        ValidationError: On the first predicate that returns False.
        UnsupportedOptionKindError: If a keyed option has an unsupported kind.
    """
    for field, constraints in _iter_groups(metadata_constraints):
        await _run_group(constraints, field, getattr(request, field))

    for option, constraints in _iter_groups(option_constraints):
        if option is None:
            continue
        if option is ALWAYS:
            await _run_group(constraints, repr(ALWAYS), ALWAYS)
            continue
        option = typing.cast("RequestOption", option)
        await _run_group(constraints, option.name, resolve_option_value(option))


def validation_failure(error: ValidationError) -> FailedValidation[typing.Any]:
    """Convert a `ValidationError` into the outcome validators return."""
    return FailedValidation(
        constraint=error.constraint,
        field=error.field,
        value=error.value,
        context=str(error),
    )


async def check_constraints(
    request: LimitedRequest,
    metadata_constraints: ConstraintGroups[str] | None,
    option_constraints: ConstraintGroups[OptionKey] | None,
) -> FailedValidation[typing.Any] | None:
    """Like `validate_constraints`, but return the failure as an outcome.

    Returns:
        None when every constraint holds, otherwise the `FailedValidation`.
    """
    try:
        await validate_constraints(request, metadata_constraints, option_constraints)
    except ValidationError as e:
        return validation_failure(e)
    return None
