from __future__ import annotations

import logging
from typing import Any, NamedTuple, Sequence

from crs_interview.errors import InvalidCursorError, MalformedInputError, ScriptConfigurationError, UnmappedOptionError
from crs_interview.models import Profile
from crs_interview.script import END, INTERVIEW_SCRIPT, Option, Step, StepKind, default_next, validate_script

logger = logging.getLogger(__name__)


class Transition(NamedTuple):
    cursor: str
    delta: dict[str, Any]


def _matches(option: Option, answer: Any) -> bool:
    # True == 1 in Python, but a yes/no option must not accept a count
    if isinstance(option.value, bool) != isinstance(answer, bool):
        return False
    return option.value == answer


class Interpreter:
    """Walks a validated step graph.

    The interpreter holds no interview state of its own. Callers pass the
    cursor and profile in and get the next cursor and a field delta back.
    """

    def __init__(self, steps: Sequence[Step] = INTERVIEW_SCRIPT):
        validate_script(steps)
        self.steps = tuple(steps)
        self._positions = {step.id: index for index, step in enumerate(self.steps)}

    @property
    def entry(self) -> str:
        return self.steps[0].id

    def is_complete(self, cursor: str) -> bool:
        return cursor == END

    def current_step(self, cursor: str) -> Step | None:
        if cursor == END:
            return None
        index = self._positions.get(cursor)
        if index is None:
            raise InvalidCursorError(cursor)
        return self.steps[index]

    def select_option(self, step: Step, answer: Any) -> Option:
        for option in step.options:
            if _matches(option, answer):
                return option
        raise UnmappedOptionError(step.id, answer)

    def advance(self, cursor: str, answer: Any, profile: Profile) -> Transition:
        step = self.current_step(cursor)
        if step is None:
            raise InvalidCursorError(cursor)

        option: Option | None = None
        value: Any = answer
        try:
            if step.kind is StepKind.CHOICE:
                option = self.select_option(step, answer)
                value = option.value
            elif step.kind is StepKind.INPUT:
                value = step.parse(answer)
        except (UnmappedOptionError, MalformedInputError) as exc:
            if isinstance(exc, MalformedInputError) and exc.step_id is None:
                exc.step_id = step.id
            logger.info("Rejected answer %r at step %s: %s", answer, step.id, exc)
            raise

        if step.mutate is not None:
            delta = dict(step.mutate(profile, value))
            unknown = sorted(set(delta) - Profile.field_names())
            if unknown:
                raise ScriptConfigurationError([f"step {step.id!r} mutates unknown profile fields {unknown}"])
        elif step.field is not None:
            delta = {step.field: value}
        else:
            delta = {}

        if option is not None and option.goto is not None:
            target = option.goto
        else:
            target = default_next(self.steps, self._positions[step.id])

        logger.debug("Step %s -> %s with %s", step.id, target, delta)
        return Transition(target, delta)

    def apply(self, profile: Profile, delta: dict[str, Any]) -> Profile:
        return profile.with_changes(delta)

    def restart(self) -> tuple[str, Profile]:
        return self.entry, Profile.default()
