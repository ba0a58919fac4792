from __future__ import annotations

import pytest

from crs_interview.errors import InvalidCursorError, MalformedInputError, SessionStateError, UnmappedOptionError
from crs_interview.models import (
    CanadianEducation,
    EducationLevel,
    FirstLanguage,
    Fluency,
    MaritalStatus,
    Profile,
)
from crs_interview.script import END
from crs_interview.session import InterviewSession, Scene, Stamp
from crs_interview.thresholds import load_draw_history


def _answers(nominated: bool = False) -> list:
    return [
        None,
        "General",
        MaritalStatus.SINGLE,
        FirstLanguage.ENGLISH,
        Fluency.EXTREMELY,
        False,
        "29",
        EducationLevel.THREE_YEAR,
        "University of Toronto",
        CanadianEducation.NONE,
        None,
        "3",
        "0",
        None,
        False,
        nominated,
        False,
    ]


def _run(session: InterviewSession, answers) -> None:
    session.start()
    for answer in answers:
        session.submit(answer)


def _assert_initial(session: InterviewSession) -> None:
    assert session.scene is Scene.INTRO
    assert session.cursor == session.interpreter.entry
    assert session.profile == Profile.default()
    assert session.stamp is None
    assert session.breakdown is None
    assert session.verdict is None


def test_new_session_is_at_intro():
    _assert_initial(InterviewSession())


def test_full_interview_fails_without_nomination():
    session = InterviewSession()
    _run(session, _answers())
    assert session.scene is Scene.THINKING
    assert session.cursor == END
    breakdown = session.finish(load_draw_history())
    assert breakdown.total == 455
    assert session.scene is Scene.RESULT
    assert session.stamp is Stamp.FAIL
    assert {d.category for d in session.verdict.eligible} == {"General", "CEC"}


def test_full_interview_passes_with_nomination():
    session = InterviewSession()
    _run(session, _answers(nominated=True))
    breakdown = session.finish(load_draw_history())
    assert breakdown.total == 1055
    assert session.stamp is Stamp.PASS
    assert "PNP" in {d.category for d in session.verdict.eligible}


def test_rejected_answers_leave_session_unchanged():
    session = InterviewSession()
    session.start()
    session.submit(None)
    session.submit("General")
    before = (session.cursor, session.profile)
    with pytest.raises(UnmappedOptionError):
        session.submit("Divorced")
    assert (session.cursor, session.profile) == before
    session.submit(MaritalStatus.SINGLE)
    session.submit(FirstLanguage.ENGLISH)
    session.submit(Fluency.SOMEWHAT)
    session.submit(False)
    assert session.cursor == "age"
    with pytest.raises(MalformedInputError):
        session.submit("twenty-nine")
    assert session.cursor == "age"
    assert session.scene is Scene.INTERVIEW


def test_restart_resets_everything_after_any_progress():
    history = load_draw_history()
    answers = _answers(nominated=True)
    for stop in (0, 1, 5, 12, len(answers)):
        session = InterviewSession()
        _run(session, answers[:stop])
        if stop == len(answers):
            session.finish(history)
            assert session.stamp is Stamp.PASS
        session.restart()
        _assert_initial(session)
        session.restart()
        _assert_initial(session)


def test_invalid_cursor_forces_restart():
    session = InterviewSession()
    _run(session, _answers()[:4])
    session.cursor = "lost"
    with pytest.raises(InvalidCursorError):
        session.submit(None)
    _assert_initial(session)


def test_operations_require_the_right_scene():
    session = InterviewSession()
    with pytest.raises(SessionStateError):
        session.submit(None)
    with pytest.raises(SessionStateError):
        session.finish(load_draw_history())
    session.start()
    with pytest.raises(SessionStateError):
        session.start()
