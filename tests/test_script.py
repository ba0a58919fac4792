from __future__ import annotations

import pytest

from crs_interview.errors import MalformedInputError, ScriptConfigurationError
from crs_interview.models import Profile
from crs_interview.script import (
    END,
    INTERVIEW_SCRIPT,
    Option,
    Step,
    StepKind,
    mark_partner_accompanying,
    parse_count,
    parse_text,
    validate_script,
)


def _statement(step_id: str, **kwargs) -> Step:
    return Step(id=step_id, text=step_id, kind=StepKind.STATEMENT, **kwargs)


def _problems(steps) -> list[str]:
    with pytest.raises(ScriptConfigurationError) as info:
        validate_script(steps)
    return info.value.problems


def test_default_script_is_valid():
    validate_script(INTERVIEW_SCRIPT)
    assert INTERVIEW_SCRIPT[-1].next == END


def test_empty_script_is_rejected():
    assert _problems(()) == ["script has no steps"]


def test_missing_target_is_reported():
    steps = (
        Step(
            id="ask",
            text="?",
            kind=StepKind.CHOICE,
            options=(Option("Yes", True, goto="nowhere"), Option("No", False)),
        ),
    )
    problems = _problems(steps)
    assert any("nowhere" in p for p in problems)


def test_field_and_mutation_together_are_rejected():
    steps = (_statement("only", field="age", mutate=mark_partner_accompanying),)
    assert any("both a field and a mutation" in p for p in _problems(steps))


def test_unknown_profile_field_is_rejected():
    steps = (_statement("only", field="shoe_size"),)
    assert any("shoe_size" in p for p in _problems(steps))


def test_duplicate_ids_are_rejected():
    steps = (_statement("same"), _statement("same"))
    assert any("duplicate" in p for p in _problems(steps))


def test_reserved_end_id_is_rejected():
    steps = (_statement(END),)
    assert any("reserved" in p for p in _problems(steps))


def test_kinds_need_their_parts():
    steps = (
        Step(id="choose", text="?", kind=StepKind.CHOICE),
        Step(id="type", text="?", kind=StepKind.INPUT, field="age"),
    )
    problems = _problems(steps)
    assert any("no options" in p for p in problems)
    assert any("no parser" in p for p in problems)


def test_unreachable_steps_are_reported():
    steps = (
        _statement("start", next=END),
        _statement("orphan"),
    )
    assert _problems(steps) == ["unreachable steps: ['orphan']"]


def test_graph_without_end_is_reported():
    steps = (
        _statement("a", next="b"),
        _statement("b", next="a"),
    )
    assert _problems(steps) == ["the interview never reaches its end"]


def test_parse_count():
    assert parse_count(0) == 0
    assert parse_count("12") == 12
    assert parse_count(" 4 ") == 4
    for bad in (-1, "abc", "1.5", None, False, 3.0, "\u00b2", "\u0663", "9" * 5000, "1000"):
        with pytest.raises(MalformedInputError):
            parse_count(bad)


def test_parse_text():
    assert parse_text("  UBC ") == "UBC"
    for bad in ("", "   ", None, 42):
        with pytest.raises(MalformedInputError):
            parse_text(bad)


def test_mutation_routines_do_not_touch_the_profile():
    profile = Profile()
    delta = mark_partner_accompanying(profile, None)
    assert delta == {"partner_accompanying": True}
    assert profile.partner_accompanying is False


def _wear_hat(profile: Profile, answer) -> dict:
    return {"hat_size": answer}


def test_mutation_writing_unknown_field_is_rejected():
    steps = (
        Step(
            id="hat",
            text="?",
            kind=StepKind.CHOICE,
            options=(Option("Small", 1), Option("Large", 2)),
            mutate=_wear_hat,
        ),
    )
    assert any("hat_size" in p for p in _problems(steps))
