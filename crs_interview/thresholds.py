from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Callable, Iterable, Sequence

from crs_interview.config import DEFAULT_DRAW_HISTORY_PATH
from crs_interview.models import DrawRecord, Profile, ScoreBreakdown, ThresholdVerdict

logger = logging.getLogger(__name__)

GENERAL_CATEGORY = "General"
FRENCH_SPEAKING_CLB = 7

# Specialized rounds a profile can enter regardless of its declared category.
UNLOCKED_BY: dict[str, Callable[[Profile], bool]] = {
    "CEC": lambda p: p.canadian_work_years >= 1,
    "PNP": lambda p: bool(p.provincial_nomination),
    "French": lambda p: p.secondary_language.speak >= FRENCH_SPEAKING_CLB,
}


def load_draw_history(path: str | Path | None = None) -> tuple[DrawRecord, ...]:
    source = Path(path) if path else DEFAULT_DRAW_HISTORY_PATH
    with source.open("r", encoding="utf-8") as f:
        raw = json.load(f)
    history = tuple(
        DrawRecord(
            stream=item["stream"],
            score=int(item["score"]),
            date=item["date"],
            category=item["category"],
        )
        for item in raw
    )
    logger.debug("Loaded %d draws from %s", len(history), source)
    return history


def _total(score: ScoreBreakdown | int) -> int:
    return score.total if isinstance(score, ScoreBreakdown) else int(score)


def is_eligible(draw: DrawRecord, profile: Profile) -> bool:
    if draw.category == GENERAL_CATEGORY:
        return True
    if draw.category == profile.category:
        return True
    unlocked = UNLOCKED_BY.get(draw.category)
    return bool(unlocked and unlocked(profile))


def cleared_draws(score: ScoreBreakdown | int, draws: Iterable[DrawRecord]) -> list[DrawRecord]:
    total = _total(score)
    return [draw for draw in draws if total >= draw.score]


def compare_against_thresholds(
    score: ScoreBreakdown | int,
    profile: Profile,
    history: Sequence[DrawRecord],
) -> ThresholdVerdict:
    eligible = [draw for draw in history if is_eligible(draw, profile)]
    passed = bool(cleared_draws(score, eligible))
    logger.info(
        "Score %d against %d eligible draws: %s",
        _total(score),
        len(eligible),
        "PASS" if passed else "FAIL",
    )
    return ThresholdVerdict(eligible=eligible, passed=passed)
