"""
Interview step graph.

The interview is an ordered, immutable tuple of ``Step`` nodes keyed by
symbolic ids. A step moves to the ``goto`` of the chosen option, else to its
own ``next``, else to the step authored right after it. ``END`` marks a
finished interview.

Steps never touch the profile themselves. A step either names a plain
profile ``field`` that receives the answer, or carries a ``mutate`` routine
that maps ``(profile, answer)`` to a dict of field changes.
"""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Sequence

from crs_interview.errors import MalformedInputError, ScriptConfigurationError
from crs_interview.models import (
    CanadianEducation,
    Ease,
    EducationLevel,
    FirstLanguage,
    Fluency,
    LanguageScores,
    MaritalStatus,
    Profile,
)

END = "__end__"

# counts are ages and years; anything longer is a typo
MAX_COUNT_DIGITS = 3

Mutation = Callable[[Profile, Any], dict[str, Any]]
Parser = Callable[[Any], Any]


class StepKind(str, Enum):
    STATEMENT = "statement"
    CHOICE = "choice"
    INPUT = "input"


@dataclass(frozen=True)
class Option:
    label: str
    value: Any
    goto: str | None = None


@dataclass(frozen=True)
class Step:
    id: str
    text: str
    kind: StepKind
    field: str | None = None
    options: tuple[Option, ...] = ()
    mutate: Mutation | None = None
    next: str | None = None
    parse: Parser | None = None


# --- answer parsers ---


def parse_count(answer: Any) -> int:
    """Non-negative whole number, given as an int or a string of digits."""
    if isinstance(answer, bool):
        raise MalformedInputError(None, answer, "a whole number")
    if isinstance(answer, int):
        value = answer
    elif isinstance(answer, str):
        text = answer.strip()
        # isdigit() alone lets through superscripts and other non-ASCII digits
        if not (text.isascii() and text.isdigit()) or len(text) > MAX_COUNT_DIGITS:
            raise MalformedInputError(None, answer, "a whole number")
        try:
            value = int(text)
        except ValueError:
            raise MalformedInputError(None, answer, "a whole number") from None
    else:
        raise MalformedInputError(None, answer, "a whole number")
    if value < 0:
        raise MalformedInputError(None, answer, "a non-negative number")
    return value


def parse_text(answer: Any) -> str:
    if not isinstance(answer, str) or not answer.strip():
        raise MalformedInputError(None, answer, "some text")
    return answer.strip()


# --- mutation routines ---


def set_partner_fluency(profile: Profile, answer: Any) -> dict[str, Any]:
    return {"partner_language": LanguageScores.uniform(Fluency(answer).clb)}


def set_primary_fluency(profile: Profile, answer: Any) -> dict[str, Any]:
    return {"primary_language": LanguageScores.uniform(Fluency(answer).clb)}


def set_secondary_ease(profile: Profile, answer: Any) -> dict[str, Any]:
    return {"secondary_language": LanguageScores.uniform(Ease(answer).clb)}


def mark_partner_accompanying(profile: Profile, answer: Any) -> dict[str, Any]:
    # only reachable after the partner questions, so the partner is coming
    return {"partner_accompanying": True}


YES_NO = (Option("Yes", True), Option("No", False))


def _fluency_options(*levels: Fluency) -> tuple[Option, ...]:
    labels = {Fluency.NOT: "Not Very"}
    return tuple(Option(labels.get(level, level.value), level) for level in levels)


def _ease_options() -> tuple[Option, ...]:
    return tuple(Option(ease.value, ease) for ease in Ease)


INTERVIEW_SCRIPT: tuple[Step, ...] = (
    Step(
        id="intro",
        text=(
            "Hello, I am Officer Gagnon. You're interested in becoming a PR in Canada? "
            "Let me ask you some questions, and we'll see if you stand a chance."
        ),
        kind=StepKind.STATEMENT,
    ),
    Step(
        id="category",
        text="Are you a skilled tradesperson, a manager, or are you in the general pool of workers?",
        kind=StepKind.CHOICE,
        field="category",
        options=(
            Option("Skilled Trades", "Trades"),
            Option("Manager / Professional", "General"),
            Option("General Worker", "General"),
            Option("Healthcare Worker", "Healthcare"),
        ),
    ),
    Step(
        id="marital_status",
        text="Are you married or single?",
        kind=StepKind.CHOICE,
        field="marital_status",
        options=(
            Option("Single", MaritalStatus.SINGLE, goto="first_language"),
            Option("Married", MaritalStatus.MARRIED),
            Option("Common-Law", MaritalStatus.COMMON_LAW),
        ),
    ),
    Step(
        id="partner_canadian",
        text="Is your partner Canadian?",
        kind=StepKind.CHOICE,
        field="partner_canadian",
        # a Canadian partner is scored as if the applicant were single
        options=(Option("Yes", True, goto="first_language"), Option("No", False)),
    ),
    Step(
        id="partner_work",
        text="How many years of work experience do they have IN Canada?",
        kind=StepKind.INPUT,
        field="partner_canadian_work_years",
        parse=parse_count,
    ),
    Step(
        id="partner_first_language",
        text="Do they speak English or French as their first language?",
        kind=StepKind.CHOICE,
        options=(Option("English", FirstLanguage.ENGLISH), Option("French", FirstLanguage.FRENCH)),
    ),
    Step(
        id="partner_fluency",
        text="How fluent are they in their first language?",
        kind=StepKind.CHOICE,
        options=_fluency_options(Fluency.EXTREMELY, Fluency.MOSTLY, Fluency.SOMEWHAT, Fluency.NOT),
        mutate=set_partner_fluency,
    ),
    Step(
        id="partner_second_language",
        text="Do they speak the other official language (English/French) as a second language?",
        kind=StepKind.CHOICE,
        options=(Option("Yes", True), Option("No", False, goto="partner_done")),
    ),
    Step(
        id="partner_ease",
        text=(
            "How easily would they be able to live by themselves in a country "
            "only using their second language?"
        ),
        kind=StepKind.CHOICE,
        options=_ease_options(),
    ),
    Step(
        id="partner_done",
        text="I see. Let's move on to you.",
        kind=StepKind.STATEMENT,
        mutate=mark_partner_accompanying,
    ),
    Step(
        id="first_language",
        text="What is your first language?",
        kind=StepKind.CHOICE,
        field="first_language",
        options=tuple(Option(lang.value, lang) for lang in FirstLanguage),
    ),
    Step(
        id="first_language_confidence",
        text="How confident are you in your first official language (English or French)?",
        kind=StepKind.CHOICE,
        options=_fluency_options(Fluency.EXTREMELY, Fluency.MOSTLY, Fluency.SOMEWHAT),
        mutate=set_primary_fluency,
    ),
    Step(
        id="second_language",
        text="Is your second language (if you have one), English or French?",
        kind=StepKind.CHOICE,
        options=(Option("Yes", True), Option("No", False, goto="age")),
    ),
    Step(
        id="second_language_ease",
        text="How easily would you be able to live by yourself in a country only using your second language?",
        kind=StepKind.CHOICE,
        options=_ease_options(),
        mutate=set_secondary_ease,
    ),
    Step(
        id="language_exam_remark",
        text=(
            "You know, simply saying you speak it isn't enough. You must take a licensed "
            "language exam and pay out of your own pocket to prove it."
        ),
        kind=StepKind.STATEMENT,
    ),
    Step(
        id="age",
        text="Now, how old are you?",
        kind=StepKind.INPUT,
        field="age",
        parse=parse_count,
    ),
    Step(
        id="education",
        text="What is your highest level of education?",
        kind=StepKind.CHOICE,
        field="education",
        options=tuple(Option(level.label, level) for level in EducationLevel),
    ),
    Step(
        id="institution",
        text="And what specific institution did you study at?",
        kind=StepKind.INPUT,
        parse=parse_text,
    ),
    Step(
        id="canadian_education",
        text="Did you complete any post-secondary education in Canada?",
        kind=StepKind.CHOICE,
        field="canadian_education",
        options=(
            Option("Yes, credential of 3 years or longer (30 pts)", CanadianEducation.THREE_YEAR_OR_MORE),
            Option("Yes, credential of 1 or 2 years (15 pts)", CanadianEducation.ONE_OR_TWO_YEAR),
            Option("No (0 pts)", CanadianEducation.NONE),
        ),
    ),
    Step(
        id="diploma_mill_remark",
        text=(
            "Hmph. It doesn't matter where you went to school in Canada. The only thing that "
            "matters is the length and field. Your application gets the same points if you're "
            "from UofT or from a diploma mill college."
        ),
        kind=StepKind.STATEMENT,
    ),
    Step(
        id="canadian_work",
        text="How many years of skilled work experience do you have INSIDE Canada?",
        kind=StepKind.INPUT,
        field="canadian_work_years",
        parse=parse_count,
    ),
    Step(
        id="foreign_work",
        text="How many years of skilled work experience do you have OUTSIDE Canada?",
        kind=StepKind.INPUT,
        field="foreign_work_years",
        parse=parse_count,
    ),
    Step(
        id="work_remark",
        text=(
            "Just so you know, almost all applicants can't even get more than three years of "
            "experience counted. And full-time work during studies, like co-op? Doesn't count at all."
        ),
        kind=StepKind.STATEMENT,
    ),
    Step(
        id="sibling",
        text="Almost done. Do you have a sibling who is a citizen or PR living in Canada?",
        kind=StepKind.CHOICE,
        field="sibling_in_canada",
        options=(Option("Yes (15 pts)", True), Option("No (0 pts)", False)),
    ),
    Step(
        id="nomination",
        text="Do you have a Provincial Nomination Certificate? (This is worth 600 points!)",
        kind=StepKind.CHOICE,
        field="provincial_nomination",
        options=YES_NO,
    ),
    Step(
        id="trade_certificate",
        text="Do you have a Certificate of Qualification in a trade issued by a Canadian province?",
        kind=StepKind.CHOICE,
        field="certificate_of_qualification",
        options=YES_NO,
        next=END,
    ),
)


def default_next(steps: Sequence[Step], index: int) -> str:
    """Where step ``index`` goes when no option overrides it."""
    step = steps[index]
    if step.next is not None:
        return step.next
    if index + 1 < len(steps):
        return steps[index + 1].id
    return END


def _targets(steps: Sequence[Step], index: int) -> list[str]:
    step = steps[index]
    fallback = default_next(steps, index)
    if step.kind is StepKind.CHOICE and step.options:
        return [option.goto or fallback for option in step.options]
    return [fallback]


def validate_script(steps: Sequence[Step]) -> None:
    """Check the step graph once, before any interview runs on it.

    Every defect is collected and reported together in a
    ``ScriptConfigurationError``.
    """
    if not steps:
        raise ScriptConfigurationError(["script has no steps"])

    problems: list[str] = []
    ids = [step.id for step in steps]
    known = set(ids)
    duplicates = sorted({step_id for step_id in ids if ids.count(step_id) > 1})
    if duplicates:
        problems.append(f"duplicate step ids: {duplicates}")
    if END in known:
        problems.append(f"{END!r} is reserved for the end of the interview")

    profile_fields = Profile.field_names()
    for index, step in enumerate(steps):
        if step.field is not None and step.mutate is not None:
            problems.append(f"step {step.id!r} has both a field and a mutation routine")
        if step.field is not None and step.field not in profile_fields:
            problems.append(f"step {step.id!r} writes unknown profile field {step.field!r}")
        if step.kind is StepKind.CHOICE and not step.options:
            problems.append(f"choice step {step.id!r} has no options")
        if step.kind is StepKind.INPUT and step.parse is None:
            problems.append(f"input step {step.id!r} has no parser")
        if step.mutate is not None and step.kind is StepKind.CHOICE:
            for option in step.options:
                unknown = sorted(set(step.mutate(Profile.default(), option.value)) - profile_fields)
                if unknown:
                    problems.append(f"step {step.id!r} mutates unknown profile fields {unknown}")
                    break
        for target in _targets(steps, index):
            if target != END and target not in known:
                problems.append(f"step {step.id!r} points at missing step {target!r}")

    if problems:
        raise ScriptConfigurationError(problems)

    positions = {step.id: index for index, step in enumerate(steps)}
    seen = {steps[0].id}
    queue = deque([steps[0].id])
    reaches_end = False
    while queue:
        index = positions[queue.popleft()]
        for target in _targets(steps, index):
            if target == END:
                reaches_end = True
            elif target not in seen:
                seen.add(target)
                queue.append(target)

    unreachable = [step_id for step_id in ids if step_id not in seen]
    if unreachable:
        problems.append(f"unreachable steps: {unreachable}")
    if not reaches_end:
        problems.append("the interview never reaches its end")
    if problems:
        raise ScriptConfigurationError(problems)
