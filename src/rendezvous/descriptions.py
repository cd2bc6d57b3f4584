"""Default outcome descriptions and the three-tier describer lookup.

`DEFAULT_DESCRIPTIONS` covers every generic status and reads only generic
body fields, so any outcome a command does not describe itself still renders.
`describe_outcome` tries the command's own map, then the defaults, then the
FAIL_UNKNOWN description.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from types import MappingProxyType
import typing

from rendezvous.core.outcome import (
    FailedDneDuo,
    FailedDneMono,
    FailedValidation,
    OutcomeBase,
    OutcomeStatus,
)
from rendezvous.core.types import DescribedOutcome, Presentation
from rendezvous.validation import ValidationCategory

type Describer[O] = Callable[[O], Presentation]
type DescriptionMap[O] = Mapping[str, Describer[O]]


def _fixed(message: str) -> Describer[OutcomeBase]:
    def describe(_: OutcomeBase) -> Presentation:
        return DescribedOutcome(message=message, ephemeral=True)

    return describe


def _describe_validation(outcome: OutcomeBase) -> Presentation:
    o = typing.cast("FailedValidation[typing.Any]", outcome)
    match o.constraint.category:
        case ValidationCategory.INSUFFICIENT_PERMISSIONS:
            message = "❌ You do not have permission to use this command."
        case ValidationCategory.TARGET_USER_BOT:
            message = f"❌ {o.value} is a bot, so you cannot use this command on them."
        case ValidationCategory.NUMBER_BEYOND_RANGE:
            message = (
                f"❌ The number you provided for **{o.field}**, *{o.value}*, "
                "is outside the required range."
            )
        case ValidationCategory.OPTION_DNE:
            message = (
                f"❌ The value you provided for **{o.field}**, *{o.value}*, "
                "was not found."
            )
        case _:
            message = "❌ This command failed due to a validation error."
    return DescribedOutcome(message=message, ephemeral=True)


def _describe_dne_mono(outcome: OutcomeBase) -> Presentation:
    o = typing.cast("FailedDneMono[typing.Any]", outcome)
    return DescribedOutcome(
        message=f"❌ This command failed because the data {o.data} could not be found.",
        ephemeral=True,
    )


def _describe_dne_duo(outcome: OutcomeBase) -> Presentation:
    o = typing.cast("FailedDneDuo[typing.Any]", outcome)
    return DescribedOutcome(
        message=(
            f"❌ This command failed because {o.data1} and {o.data2} "
            "do not exist together."
        ),
        ephemeral=True,
    )


_describe_unknown = _fixed("❌ This command failed for an unknown reason.")

DEFAULT_DESCRIPTIONS: Mapping[str, Describer[OutcomeBase]] = MappingProxyType(
    {
        OutcomeStatus.SUCCESS: _fixed("✅ Success!"),
        OutcomeStatus.SUCCESS_MONO: _fixed(
            "✅ Success! (default response, 1 data point omitted)"
        ),
        OutcomeStatus.SUCCESS_DUO: _fixed(
            "✅ Success! (default response, 2 data points omitted)"
        ),
        OutcomeStatus.SUCCESS_NO_CHANGE: _fixed(
            "✅ Success! However, certain operations made no changes."
        ),
        OutcomeStatus.FAIL: _fixed("❌ This command failed."),
        OutcomeStatus.FAIL_VALIDATION: _describe_validation,
        OutcomeStatus.FAIL_DNE_MONO: _describe_dne_mono,
        OutcomeStatus.FAIL_DNE_DUO: _describe_dne_duo,
        OutcomeStatus.FAIL_UNKNOWN: _describe_unknown,
    }
)

# Navigation responses that do not come from an outcome.
EXPIRED_INTERACTION = DescribedOutcome(
    message="This interaction has expired.", ephemeral=True
)
NOT_INTERACTION_OWNER = DescribedOutcome(
    message="❌ Only the member who ran this command can change its page.",
    ephemeral=True,
)


def describe_unknown_failure(outcome: OutcomeBase | None = None) -> Presentation:
    """Render the unconditional fallback description."""
    return _describe_unknown(outcome)  # type: ignore[arg-type]


def describe_outcome[O: OutcomeBase](
    outcome: O, descriptions: DescriptionMap[O] | None = None
) -> Presentation:
    """Render ``outcome`` using the three-tier lookup.

    Args:
        outcome: Any outcome variant.
        descriptions: Command-specific map from status to describer.

    Returns:
        The command's rendering if it has one for this status, else the
        default for the status, else the FAIL_UNKNOWN rendering.
    """
    if descriptions is not None:
        specific = descriptions.get(outcome.status)
        if specific is not None:
            return specific(outcome)
    default = DEFAULT_DESCRIPTIONS.get(outcome.status)
    if default is not None:
        return default(outcome)
    return _describe_unknown(outcome)


def describer_for[O: OutcomeBase](
    descriptions: DescriptionMap[O] | None,
) -> Describer[O]:
    """Bind a description map into a describer callable."""

    def describe(outcome: O) -> Presentation:
        return describe_outcome(outcome, descriptions)

    return describe
