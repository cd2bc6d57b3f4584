import pytest

from rendezvous.core.outcome import (
    GENERIC_OUTCOME_TYPES,
    FailedDneDuo,
    FailedDneMono,
    FailedUnknown,
    FailedValidation,
    OutcomeBase,
    OutcomeStatus,
    Succeeded,
    SucceededDuo,
    SucceededMono,
)
from rendezvous.core.types import DescribedOutcome
from rendezvous.descriptions import (
    DEFAULT_DESCRIPTIONS,
    describe_outcome,
    describer_for,
)
from rendezvous.validation import Constraint, ValidationCategory

pytestmark = pytest.mark.unit


class _Unregistered(OutcomeBase):
    __slots__ = ()
    status = "SUCCESS_SOMETHING_NEW"


def _validation_failure(category, field="game", value="poker"):
    return FailedValidation(
        constraint=Constraint(category, lambda _: False),
        field=field,
        value=value,
        context="ctx",
    )


def test_defaults_cover_every_generic_status():
    assert set(DEFAULT_DESCRIPTIONS) == set(OutcomeStatus)
    assert len(GENERIC_OUTCOME_TYPES) == len(DEFAULT_DESCRIPTIONS)


def test_unregistered_generic_status_falls_back_to_default():
    outcome = SucceededDuo(
        data1="ChallengeA",
        context1="challengeName",
        data2="TournamentX",
        context2="tournamentName",
    )

    presentation = describe_outcome(outcome, {"SUCCESS_DETAILS": lambda _: DescribedOutcome("x")})

    assert isinstance(presentation, DescribedOutcome)
    assert presentation.message
    assert presentation.message == "✅ Success! (default response, 2 data points omitted)"
    assert presentation.ephemeral


def test_command_description_wins_over_default():
    specific = DescribedOutcome("Challenge created.", ephemeral=False)
    presentation = describe_outcome(
        SucceededMono(data="A", context="challengeName"),
        {OutcomeStatus.SUCCESS_MONO: lambda _: specific},
    )
    assert presentation is specific


def test_unknown_status_renders_fail_unknown():
    assert describe_outcome(_Unregistered()) == describe_outcome(FailedUnknown())
    assert describe_outcome(FailedUnknown()).message == (  # type: ignore[union-attr]
        "❌ This command failed for an unknown reason."
    )


def test_describer_for_binds_the_map():
    describer = describer_for({OutcomeStatus.SUCCESS: lambda _: DescribedOutcome("done")})
    assert describer(Succeeded()) == DescribedOutcome("done")
    assert describer(FailedUnknown()).message.startswith("❌")  # type: ignore[union-attr]


@pytest.mark.parametrize(
    ("category", "expected"),
    [
        (ValidationCategory.INSUFFICIENT_PERMISSIONS, "❌ You do not have permission to use this command."),
        (
            ValidationCategory.OPTION_DNE,
            "❌ The value you provided for **game**, *poker*, was not found.",
        ),
        (
            ValidationCategory.NUMBER_BEYOND_RANGE,
            "❌ The number you provided for **game**, *poker*, is outside the required range.",
        ),
        (ValidationCategory.OPTION_TOO_LONG, "❌ This command failed due to a validation error."),
    ],
)
def test_validation_failures_are_described_by_category(category, expected):
    presentation = describe_outcome(_validation_failure(category))
    assert presentation == DescribedOutcome(expected, ephemeral=True)


def test_bot_target_names_the_value():
    presentation = describe_outcome(
        _validation_failure(ValidationCategory.TARGET_USER_BOT, field="target", value="<@42>")
    )
    assert "<@42> is a bot" in presentation.message  # type: ignore[union-attr]


def test_dne_descriptions_name_the_missing_data():
    mono = describe_outcome(FailedDneMono(data="Winter Cup", context="tournamentName"))
    duo = describe_outcome(
        FailedDneDuo(data1="A", context1="challenge", data2="B", context2="tournament")
    )
    assert "Winter Cup" in mono.message  # type: ignore[union-attr]
    assert "A and B" in duo.message  # type: ignore[union-attr]


def test_default_descriptions_are_read_only():
    with pytest.raises(TypeError):
        DEFAULT_DESCRIPTIONS["SUCCESS"] = lambda _: DescribedOutcome("x")  # type: ignore[index]
