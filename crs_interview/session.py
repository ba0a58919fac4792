"""
One applicant's run through the interview.

The session is what the presentation layer keeps between user actions. It
moves through the scenes intro -> interview -> thinking -> result, and
``restart`` puts every piece of state back at once.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Sequence

from crs_interview.errors import InvalidCursorError, SessionStateError
from crs_interview.interpreter import Interpreter
from crs_interview.models import DrawRecord, Profile, ScoreBreakdown, ThresholdVerdict
from crs_interview.script import Step
from crs_interview.scoring import score_profile
from crs_interview.thresholds import compare_against_thresholds

logger = logging.getLogger(__name__)


class Scene(str, Enum):
    INTRO = "intro"
    INTERVIEW = "interview"
    THINKING = "thinking"
    RESULT = "result"


class Stamp(str, Enum):
    PASS = "PASS"
    FAIL = "FAIL"


class InterviewSession:
    def __init__(self, interpreter: Interpreter | None = None):
        self.interpreter = interpreter or Interpreter()
        self.scene = Scene.INTRO
        self.cursor = self.interpreter.entry
        self.profile = Profile.default()
        self.stamp: Stamp | None = None
        self.breakdown: ScoreBreakdown | None = None
        self.verdict: ThresholdVerdict | None = None

    def _require(self, scene: Scene) -> None:
        if self.scene is not scene:
            raise SessionStateError(f"Expected scene {scene.value!r}, session is in {self.scene.value!r}")

    def start(self) -> Step:
        self._require(Scene.INTRO)
        self.scene = Scene.INTERVIEW
        self.cursor = self.interpreter.entry
        return self.step()

    def step(self) -> Step | None:
        try:
            return self.interpreter.current_step(self.cursor)
        except InvalidCursorError:
            logger.warning("Session cursor %r is invalid, restarting", self.cursor)
            self.restart()
            raise

    def submit(self, answer: Any) -> Step | None:
        """Record an answer for the current step and move on.

        Rejected answers leave the session untouched so the caller can ask
        again. Returns the next step, or ``None`` once the interview is over.
        """
        self._require(Scene.INTERVIEW)
        try:
            cursor, delta = self.interpreter.advance(self.cursor, answer, self.profile)
        except InvalidCursorError:
            logger.warning("Session cursor %r is invalid, restarting", self.cursor)
            self.restart()
            raise
        self.profile = self.interpreter.apply(self.profile, delta)
        self.cursor = cursor
        if self.interpreter.is_complete(cursor):
            logger.info("Interview complete")
            self.scene = Scene.THINKING
            return None
        return self.step()

    def finish(self, history: Sequence[DrawRecord]) -> ScoreBreakdown:
        self._require(Scene.THINKING)
        breakdown = score_profile(self.profile)
        verdict = compare_against_thresholds(breakdown, self.profile, history)
        self.breakdown = breakdown
        self.verdict = verdict
        self.stamp = Stamp.PASS if verdict.passed else Stamp.FAIL
        self.scene = Scene.RESULT
        return breakdown

    def restart(self) -> None:
        cursor, profile = self.interpreter.restart()
        self.scene = Scene.INTRO
        self.cursor = cursor
        self.profile = profile
        self.stamp = None
        self.breakdown = None
        self.verdict = None
