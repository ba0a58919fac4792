from __future__ import annotations

from streamlit.testing.v1 import AppTest

from crs_interview.session import Scene

LOST_PLACE = "The interview lost its place and has been restarted."


def _app() -> AppTest:
    at = AppTest.from_file("../app.py", default_timeout=30)
    at.run()
    return at


def _click(at: AppTest, label: str) -> None:
    next(b for b in at.button if b.label == label).click().run()


def test_lost_place_goes_back_to_intro_with_a_notice():
    at = _app()
    session = at.session_state["session"]
    session.start()
    session.cursor = "lost"
    at.session_state["input_error"] = "stale complaint"
    at.run()

    assert session.scene is Scene.INTRO
    assert [w.value for w in at.warning] == [LOST_PLACE]
    assert at.session_state["input_error"] is None


def test_starting_again_clears_old_messages():
    at = _app()
    at.session_state["notice"] = LOST_PLACE
    at.session_state["input_error"] = "stale complaint"
    at.run()
    _click(at, "Start Interview")

    assert at.session_state["session"].scene is Scene.INTERVIEW
    assert len(at.warning) == 0
    assert len(at.error) == 0
