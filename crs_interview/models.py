from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, field, fields, replace
from enum import Enum
from typing import Any, NamedTuple

logger = logging.getLogger(__name__)

CLB_MIN = 0
CLB_MAX = 10

DISCLAIMER = (
    "This tool is for general guidance only. Official IRCC system results govern. "
    "See Canada.ca Express Entry CRS calculator. Not legal advice."
)


class MaritalStatus(str, Enum):
    SINGLE = "Single"
    MARRIED = "Married"
    COMMON_LAW = "Common-Law"


class EducationLevel(str, Enum):
    NONE = "None"
    SECONDARY = "Secondary"
    ONE_YEAR = "OneYear"
    TWO_YEAR = "TwoYear"
    THREE_YEAR = "ThreeYear"
    TWO_OR_MORE = "TwoOrMore"
    MASTERS = "Masters"
    PHD = "PhD"

    @property
    def label(self) -> str:
        return EDUCATION_LABELS[self]


EDUCATION_LABELS = {
    EducationLevel.NONE: "Less than secondary school",
    EducationLevel.SECONDARY: "Secondary diploma",
    EducationLevel.ONE_YEAR: "One-year degree/diploma",
    EducationLevel.TWO_YEAR: "Two-year degree/diploma",
    EducationLevel.THREE_YEAR: "Bachelor's OR 3+ year program",
    EducationLevel.TWO_OR_MORE: "Two or more certificates (one 3+ years)",
    EducationLevel.MASTERS: "Master's degree",
    EducationLevel.PHD: "Doctoral level (Ph.D.)",
}


class CanadianEducation(str, Enum):
    NONE = "None"
    ONE_OR_TWO_YEAR = "1or2Year"
    THREE_YEAR_OR_MORE = "3YearOrMore"


class FirstLanguage(str, Enum):
    ENGLISH = "English"
    FRENCH = "French"
    NEITHER = "Neither"


class Fluency(str, Enum):
    EXTREMELY = "Extremely"
    MOSTLY = "Mostly"
    SOMEWHAT = "Somewhat"
    NOT = "Not"

    @property
    def clb(self) -> int:
        return {"Extremely": 9, "Mostly": 8, "Somewhat": 6, "Not": 4}[self.value]


class Ease(str, Enum):
    VERY_EASILY = "Very Easily"
    EASILY = "Easily"
    SOMEWHAT_EASILY = "Somewhat Easily"
    NOT_EASILY = "Not Easily"

    @property
    def clb(self) -> int:
        # CLB 7 is the usual "good" benchmark
        return {"Very Easily": 9, "Easily": 7, "Somewhat Easily": 5, "Not Easily": 0}[self.value]


class ScoringMode(str, Enum):
    SINGLE = "single"
    WITH_PARTNER = "with_partner"

    @property
    def column(self) -> int:
        """Column of a ``(single, with_partner)`` table cell."""
        return 0 if self is ScoringMode.SINGLE else 1


def _clamp_clb(value: Any) -> int:
    return max(CLB_MIN, min(CLB_MAX, int(value)))


@dataclass(frozen=True)
class LanguageScores:
    speak: int = 0
    listen: int = 0
    read: int = 0
    write: int = 0

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, _clamp_clb(getattr(self, f.name)))

    @classmethod
    def uniform(cls, clb: int) -> LanguageScores:
        return cls(speak=clb, listen=clb, read=clb, write=clb)

    def skills(self) -> tuple[int, int, int, int]:
        return (self.speak, self.listen, self.read, self.write)

    def all_at_least(self, level: int) -> bool:
        return all(value >= level for value in self.skills())

    def all_at_most(self, level: int) -> bool:
        return all(value <= level for value in self.skills())


@dataclass
class Profile:
    marital_status: MaritalStatus = MaritalStatus.SINGLE
    partner_accompanying: bool = False
    partner_canadian: bool = False
    age: int = 25
    education: EducationLevel = EducationLevel.THREE_YEAR
    canadian_education: CanadianEducation = CanadianEducation.NONE
    primary_language: LanguageScores = field(default_factory=LanguageScores)
    secondary_language: LanguageScores = field(default_factory=LanguageScores)
    first_language: FirstLanguage = FirstLanguage.NEITHER
    canadian_work_years: int = 0
    foreign_work_years: int = 0
    certificate_of_qualification: bool = False
    provincial_nomination: bool = False
    sibling_in_canada: bool = False
    category: str = "General"

    partner_education: EducationLevel = EducationLevel.NONE
    partner_canadian_work_years: int = 0
    partner_language: LanguageScores = field(default_factory=LanguageScores)

    def __post_init__(self):
        # accept raw values such as "Married"; unrecognized ones are kept and score zero
        for name, enum_cls in _PROFILE_ENUMS.items():
            value = getattr(self, name)
            if isinstance(value, enum_cls):
                continue
            try:
                setattr(self, name, enum_cls(value))
            except (ValueError, TypeError):
                logger.debug("Keeping unrecognized %s value %r", name, value)

    @classmethod
    def default(cls) -> Profile:
        return cls()

    @classmethod
    def field_names(cls) -> frozenset[str]:
        return frozenset(f.name for f in fields(cls))

    def with_changes(self, delta: dict[str, Any]) -> Profile:
        unknown = set(delta) - self.field_names()
        if unknown:
            raise KeyError(f"Unknown profile fields: {sorted(unknown)}")
        return replace(self, **delta)


_PROFILE_ENUMS = {
    "marital_status": MaritalStatus,
    "education": EducationLevel,
    "canadian_education": CanadianEducation,
    "first_language": FirstLanguage,
    "partner_education": EducationLevel,
}


@dataclass
class ScoreBreakdown:
    total: int
    core_human_capital: int
    partner_factors: int
    transferability: int
    additional: int

    age: int
    education: int
    language: int
    canadian_work: int
    french_bonus: int
    canadian_education: int
    nomination: int
    sibling: int

    mode: ScoringMode = ScoringMode.SINGLE
    disclaimer: str = DISCLAIMER

    def as_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["mode"] = self.mode.value
        return data


@dataclass(frozen=True)
class DrawRecord:
    stream: str
    score: int
    date: str
    category: str


class ThresholdVerdict(NamedTuple):
    eligible: list[DrawRecord]
    passed: bool
