from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parents[1]
DEFAULT_DRAW_HISTORY_PATH = ROOT_DIR / "data" / "draw_history.json"
DEFAULT_PROCESSING_DELAY = 3.0
DEFAULT_LOG_LEVEL = "INFO"

logger = logging.getLogger(__name__)


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r, expected a number", name, raw)
        return default
    return max(0.0, value)


@dataclass(frozen=True)
class Settings:
    draw_history_path: Path = DEFAULT_DRAW_HISTORY_PATH
    processing_delay: float = DEFAULT_PROCESSING_DELAY
    log_level: str = DEFAULT_LOG_LEVEL

    @classmethod
    def from_env(cls) -> Settings:
        history = os.getenv("CRS_DRAW_HISTORY_PATH")
        return cls(
            draw_history_path=Path(history) if history else DEFAULT_DRAW_HISTORY_PATH,
            processing_delay=_float_env("CRS_PROCESSING_DELAY", DEFAULT_PROCESSING_DELAY),
            log_level=(os.getenv("CRS_LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper(),
        )
