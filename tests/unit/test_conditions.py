"""Tests for advanced permission condition parsing and evaluation."""

from unittest.mock import AsyncMock

from authcore.application.services.condition_evaluator import ConditionEvaluator
from authcore.domain.conditions import (
    OwnedBySelf,
    SameCompany,
    UnrecognizedCondition,
    conditions_to_json,
    parse_conditions,
)


def test_parse_conditions_known_keys() -> None:
    assert parse_conditions({"ownedBy": "self", "companyId": "same"}) == (
        OwnedBySelf(),
        SameCompany(),
    )


def test_parse_conditions_unknown_pairs_are_kept_as_unrecognized() -> None:
    assert parse_conditions({"companyId": "any", "region": "eu"}) == (
        UnrecognizedCondition("companyId", "any"),
        UnrecognizedCondition("region", "eu"),
    )


def test_parse_conditions_non_object_yields_nothing() -> None:
    assert parse_conditions(None) == ()
    assert parse_conditions(["ownedBy"]) == ()
    assert parse_conditions("self") == ()


def test_conditions_to_json_inverts_parse() -> None:
    raw = {"ownedBy": "self", "companyId": "same", "region": "eu"}
    assert conditions_to_json(parse_conditions(raw)) == raw


async def test_empty_conditions_hold(person_repo) -> None:
    assert await ConditionEvaluator(person_repo).evaluate((), "p-1", None)


async def test_owned_by_self(person_repo) -> None:
    person_repo.add("p-1", "t-1")
    evaluator = ConditionEvaluator(person_repo)
    assert await evaluator.evaluate((OwnedBySelf(),), "p-1", "p-1")
    assert not await evaluator.evaluate((OwnedBySelf(),), "p-1", "p-2")
    assert not await evaluator.evaluate((OwnedBySelf(),), "p-1", None)


async def test_owned_by_self_requires_existing_person(person_repo) -> None:
    assert not await ConditionEvaluator(person_repo).evaluate(
        (OwnedBySelf(),), "ghost", "ghost"
    )


async def test_same_company(person_repo) -> None:
    person_repo.add("p-1", "t-1", company_id="c-1")
    person_repo.add("p-2", "t-1", company_id="c-1")
    person_repo.add("p-3", "t-1", company_id="c-2")
    person_repo.add("p-4", "t-1")
    evaluator = ConditionEvaluator(person_repo)
    assert await evaluator.evaluate((SameCompany(),), "p-1", "p-2")
    assert not await evaluator.evaluate((SameCompany(),), "p-1", "p-3")
    assert not await evaluator.evaluate((SameCompany(),), "p-1", "p-4")
    assert not await evaluator.evaluate((SameCompany(),), "p-1", "missing")


async def test_all_conditions_must_hold(person_repo) -> None:
    person_repo.add("p-1", "t-1", company_id="c-1")
    evaluator = ConditionEvaluator(person_repo)
    assert await evaluator.evaluate(
        (OwnedBySelf(), SameCompany(), UnrecognizedCondition("x", 1)), "p-1", "p-1"
    )
    assert not await evaluator.evaluate((SameCompany(), OwnedBySelf()), "p-1", "p-9")


async def test_unrecognized_condition_holds(person_repo) -> None:
    assert await ConditionEvaluator(person_repo).evaluate(
        (UnrecognizedCondition("companyId", "any"),), "p-1", "r-1"
    )


async def test_lookup_failure_is_false_not_an_error() -> None:
    repo = AsyncMock()
    repo.get_by_id.side_effect = RuntimeError("connection lost")
    assert not await ConditionEvaluator(repo).evaluate((OwnedBySelf(),), "p-1", "p-1")
