import dataclasses

import pytest

from rendezvous.core.outcome import (
    GENERIC_OUTCOME_TYPES,
    Failed,
    FailedDneMono,
    FailedUnknown,
    FailedValidation,
    OutcomeStatus,
    Pagination,
    Succeeded,
    SucceededDuo,
    SucceededMono,
    SucceededNoChange,
    is_outcome,
    is_paginated,
    is_validation_failure,
)
from rendezvous.validation import Constraint, ValidationCategory
from tests.fixtures.catalogue import CatalogueDetails, CatalogueStatus

pytestmark = pytest.mark.unit


def test_every_generic_status_has_exactly_one_variant():
    statuses = [variant.status for variant in GENERIC_OUTCOME_TYPES]
    assert sorted(statuses) == sorted(OutcomeStatus)


def test_status_is_fixed_by_variant():
    assert Succeeded().status == OutcomeStatus.SUCCESS
    assert FailedUnknown().status == OutcomeStatus.FAIL_UNKNOWN
    assert SucceededMono(data=1, context="x").status == OutcomeStatus.SUCCESS_MONO
    assert FailedDneMono(data="x", context="y").status == OutcomeStatus.FAIL_DNE_MONO


def test_body_exposes_only_variant_fields():
    outcome = SucceededDuo(data1="a", context1="first", data2="b", context2="second")
    assert dict(outcome.body) == {
        "data1": "a",
        "context1": "first",
        "data2": "b",
        "context2": "second",
    }
    assert dict(Failed().body) == {}
    with pytest.raises(AttributeError):
        outcome.data  # type: ignore[attr-defined]  # noqa: B018


def test_body_is_read_only():
    outcome = SucceededMono(data=3, context="count")
    with pytest.raises(TypeError):
        outcome.body["data"] = 4  # type: ignore[index]


def test_outcomes_are_immutable():
    outcome = SucceededMono(data=3, context="count")
    with pytest.raises(dataclasses.FrozenInstanceError):
        outcome.data = 4  # type: ignore[misc]


def test_no_change_carries_both_partitions():
    outcome = SucceededNoChange(
        data1=("a",), context1="added", data2=("b", "c"), context2="unchanged"
    )
    assert outcome.body["data2"] == ("b", "c")


def test_command_specific_variant_extends_generic_set():
    details = CatalogueDetails(
        tournament="Spring Cup", challenges=("A",), pagination=Pagination(0, 1)
    )
    assert details.status == CatalogueStatus.SUCCESS_DETAILS
    assert is_outcome(details)
    assert "pagination" not in details.body
    assert is_paginated(details)


def test_pagination_validates_page_range():
    assert Pagination(0, 1).is_first
    assert Pagination(0, 1).is_last
    assert Pagination(2, 3).is_last
    with pytest.raises(ValueError, match="page"):
        Pagination(3, 3)
    with pytest.raises(ValueError, match="page"):
        Pagination(-1, 3)
    with pytest.raises(ValueError, match="total_pages"):
        Pagination(0, 0)


def test_unpaginated_outcome_is_not_paginated():
    assert not is_paginated(Succeeded())
    assert not is_paginated(object())


def test_validation_failure_guard():
    failure = FailedValidation(
        constraint=Constraint(ValidationCategory.OPTION_DNE, lambda _: False),
        field="game",
        value="poker",
        context="ctx",
    )
    assert is_validation_failure(failure)
    assert not is_validation_failure(Failed())
    assert failure.status == OutcomeStatus.FAIL_VALIDATION
