from __future__ import annotations

import json
import logging
import time

import pandas as pd
import streamlit as st

from crs_interview.config import Settings
from crs_interview.errors import InvalidCursorError, MalformedInputError, UnmappedOptionError
from crs_interview.scoring import MAX_ADDITIONAL, MAX_CORE, MAX_PARTNER_FACTORS, MAX_TOTAL, MAX_TRANSFERABILITY
from crs_interview.session import InterviewSession, Scene, Stamp
from crs_interview.script import StepKind
from crs_interview.thresholds import cleared_draws, load_draw_history

APP_TITLE = "Immigrate to Canada 2025"
APP_SUBTITLE = "Would you qualify for Permanent Residency?"
OFFICER = "Officer Gagnon"
LOST_PLACE = "The interview lost its place and has been restarted."

settings = Settings.from_env()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(name)s %(levelname)s %(message)s")


@st.cache_data
def load_history(path: str):
    return load_draw_history(path)


def ensure_state():
    if "session" not in st.session_state:
        st.session_state["session"] = InterviewSession()
    st.session_state.setdefault("input_error", None)
    st.session_state.setdefault("notice", None)


def inject_styles():
    st.markdown(
        """
        <style>
        .intro-card {
            background: #ffffff;
            border-top: 8px solid #b91c1c;
            border-radius: 4px;
            padding: 28px;
            color: #111827;
            margin-bottom: 18px;
        }
        .officer-name { color: #b91c1c; font-weight: 700; letter-spacing: 0.15em; text-transform: uppercase; }
        .stamp { font-size: 4rem; font-weight: 900; transform: rotate(-12deg); display: inline-block; padding: 8px 24px; }
        .stamp-pass { border: 8px solid #16a34a; color: #16a34a; }
        .stamp-fail { border: 8px solid #dc2626; color: #dc2626; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def export_payload(session: InterviewSession) -> dict:
    profile = session.profile
    return {
        "profile": {
            "marital_status": profile.marital_status.value,
            "age": profile.age,
            "education": profile.education.value,
            "canadian_education": profile.canadian_education.value,
            "primary_language": profile.primary_language.skills(),
            "secondary_language": profile.secondary_language.skills(),
            "canadian_work_years": profile.canadian_work_years,
            "foreign_work_years": profile.foreign_work_years,
            "provincial_nomination": profile.provincial_nomination,
            "sibling_in_canada": profile.sibling_in_canada,
            "category": profile.category,
        },
        "score": session.breakdown.as_dict() if session.breakdown else None,
        "stamp": session.stamp.value if session.stamp else None,
        "eligible_draws": [
            {"stream": d.stream, "score": d.score, "date": d.date, "category": d.category}
            for d in (session.verdict.eligible if session.verdict else [])
        ],
    }


def render_intro(session: InterviewSession):
    notice = st.session_state.get("notice")
    if notice:
        st.warning(notice)
    st.markdown(
        """
        <div class="intro-card">
          <p><em>"If you were born and raised in Canada, you've probably never interacted with the
          immigration system. You might have heard in school that Canada's immigration system is fair,
          and brings in people from across the world that are ready to contribute most to the country."</em></p>
          <p><strong>"Let's pretend you're an immigrant to Canada in 2025. Would you be able to qualify
          for a Permanent Residency?"</strong></p>
        </div>
        """,
        unsafe_allow_html=True,
    )
    if st.button("Start Interview", type="primary", use_container_width=True):
        session.start()
        st.session_state["input_error"] = None
        st.session_state["notice"] = None
        st.rerun()


def submit_answer(session: InterviewSession, answer):
    try:
        session.submit(answer)
    except (UnmappedOptionError, MalformedInputError) as exc:
        st.session_state["input_error"] = str(exc)
        return
    except InvalidCursorError:
        st.session_state["input_error"] = None
        st.session_state["notice"] = LOST_PLACE
        st.rerun()
    st.session_state["input_error"] = None
    st.rerun()


def render_interview(session: InterviewSession):
    try:
        step = session.step()
    except InvalidCursorError:
        st.session_state["input_error"] = None
        st.session_state["notice"] = LOST_PLACE
        st.rerun()
    if step is None:
        return
    st.markdown(f'<div class="officer-name">{OFFICER}</div>', unsafe_allow_html=True)
    st.markdown(f"### {step.text}")

    error = st.session_state.get("input_error")
    if error:
        st.error(error)

    if step.kind is StepKind.STATEMENT:
        if st.button("Continue", key=f"continue_{step.id}"):
            submit_answer(session, None)
    elif step.kind is StepKind.CHOICE:
        cols = st.columns(2)
        for i, option in enumerate(step.options):
            with cols[i % 2]:
                if st.button(option.label, key=f"{step.id}_{i}", use_container_width=True):
                    submit_answer(session, option.value)
    else:
        with st.form(f"input_{step.id}", clear_on_submit=True):
            raw = st.text_input("Your answer", placeholder="Enter your answer...")
            if st.form_submit_button("Submit"):
                submit_answer(session, raw)


def render_thinking(session: InterviewSession, history):
    with st.spinner(f"{OFFICER} is reviewing your file..."):
        time.sleep(settings.processing_delay)
        session.finish(history)
    st.rerun()


def render_result(session: InterviewSession):
    breakdown = session.breakdown
    verdict = session.verdict
    mode_column = breakdown.mode.column

    c1, c2 = st.columns([2, 1])
    c1.metric("CRS Score", f"{breakdown.total} / {MAX_TOTAL}")
    stamp_class = "stamp-pass" if session.stamp is Stamp.PASS else "stamp-fail"
    c2.markdown(f'<span class="stamp {stamp_class}">{session.stamp.value}</span>', unsafe_allow_html=True)

    left, right = st.columns(2)
    with left:
        st.markdown("#### CRS Score Breakdown")
        rows = pd.DataFrame(
            [
                {"Section": "A. Core Human Capital", "Factor": "Age", "Points": breakdown.age},
                {"Section": "A. Core Human Capital", "Factor": "Education", "Points": breakdown.education},
                {"Section": "A. Core Human Capital", "Factor": "Language Skills", "Points": breakdown.language},
                {"Section": "A. Core Human Capital", "Factor": "Cdn Work Experience", "Points": breakdown.canadian_work},
                {"Section": "B. Spouse/Partner Factors", "Factor": "Spouse/Partner", "Points": breakdown.partner_factors},
                {"Section": "C. Transferability", "Factor": "Transferability", "Points": breakdown.transferability},
                {"Section": "D. Additional Points", "Factor": "PNP", "Points": breakdown.nomination},
                {"Section": "D. Additional Points", "Factor": "Canadian Education", "Points": breakdown.canadian_education},
                {"Section": "D. Additional Points", "Factor": "French Language Bonus", "Points": breakdown.french_bonus},
                {"Section": "D. Additional Points", "Factor": "Sibling in Canada", "Points": breakdown.sibling},
            ]
        )
        st.dataframe(rows, hide_index=True, use_container_width=True)
        subtotals = pd.DataFrame(
            [
                {"Subtotal": "Core Human Capital", "Points": breakdown.core_human_capital, "Max": MAX_CORE[mode_column]},
                {"Subtotal": "Spouse/Partner", "Points": breakdown.partner_factors, "Max": MAX_PARTNER_FACTORS},
                {"Subtotal": "Transferability", "Points": breakdown.transferability, "Max": MAX_TRANSFERABILITY},
                {"Subtotal": "Additional", "Points": breakdown.additional, "Max": MAX_ADDITIONAL},
                {"Subtotal": "TOTAL CRS SCORE", "Points": breakdown.total, "Max": MAX_TOTAL},
            ]
        )
        st.dataframe(subtotals, hide_index=True, use_container_width=True)

    with right:
        st.markdown("#### Eligible Streams & Past Draws")
        if verdict.eligible:
            cleared = set(cleared_draws(breakdown, verdict.eligible))
            draws = pd.DataFrame(
                [
                    {
                        "Date": d.date,
                        "Category": d.category,
                        "Cutoff": d.score,
                        "Result": "PASSED" if d in cleared else "",
                    }
                    for d in verdict.eligible
                ]
            )
            st.dataframe(draws, hide_index=True, use_container_width=True)
        else:
            st.warning("You are not eligible for any recent draw.")

        st.markdown("**Officer's Notes:**")
        st.write(f"Current CRS: {breakdown.total}")
        if session.stamp is Stamp.PASS:
            st.write("Applicant meets criteria for current Express Entry rounds.")
        else:
            st.write("Applicant does not meet recent Express Entry draw scores.")

    st.caption(breakdown.disclaimer)
    st.download_button(
        "Download Result JSON",
        data=json.dumps(export_payload(session), indent=2),
        file_name="crs_result.json",
        mime="application/json",
    )


st.set_page_config(page_title=APP_TITLE, layout="wide")
inject_styles()
st.title(APP_TITLE)
st.caption(APP_SUBTITLE)

ensure_state()
session: InterviewSession = st.session_state["session"]
history = load_history(str(settings.draw_history_path))

with st.sidebar:
    st.markdown("### Session")
    st.write(f"Scene: {session.scene.value}")
    if st.button("Restart Interview"):
        session.restart()
        st.session_state["input_error"] = None
        st.session_state["notice"] = None
        st.rerun()

if session.scene is Scene.INTRO:
    render_intro(session)
elif session.scene is Scene.INTERVIEW:
    render_interview(session)
elif session.scene is Scene.THINKING:
    render_thinking(session, history)
else:
    render_result(session)
    if st.button("Restart Interview", key="restart_result", type="primary"):
        session.restart()
        st.session_state["input_error"] = None
        st.rerun()
