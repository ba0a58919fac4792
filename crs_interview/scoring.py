from __future__ import annotations

from crs_interview.models import (
    CanadianEducation,
    EducationLevel,
    MaritalStatus,
    Profile,
    ScoreBreakdown,
    ScoringMode,
)

MAX_TOTAL = 1200
MAX_CORE = (500, 460)
MAX_PARTNER_FACTORS = 40
MAX_TRANSFERABILITY = 100
MAX_ADDITIONAL = 600

# Table cells are (single, with_partner) pairs, picked by ScoringMode.column.

MIN_AGE = 18
AGE_FLOOR = 45
PRIME_AGES = range(20, 30)
PRIME_AGE_POINTS = (110, 100)
AGE_POINTS = {
    18: (99, 90),
    19: (105, 95),
    30: (105, 95),
    31: (99, 90),
    32: (94, 85),
    33: (88, 80),
    34: (83, 75),
    35: (77, 70),
    40: (50, 45),
    44: (6, 5),
    AGE_FLOOR: (0, 0),
}

EDUCATION_POINTS = {
    EducationLevel.NONE: (0, 0),
    EducationLevel.SECONDARY: (30, 28),
    EducationLevel.ONE_YEAR: (90, 84),
    EducationLevel.TWO_YEAR: (98, 91),
    EducationLevel.THREE_YEAR: (120, 112),
    EducationLevel.TWO_OR_MORE: (128, 119),
    EducationLevel.MASTERS: (135, 126),
    EducationLevel.PHD: (150, 140),
}

# (minimum CLB, points per skill), highest tier first
LANGUAGE_TIERS = (
    (9, (34, 32)),
    (8, (23, 22)),
    (7, (17, 16)),
    (6, (9, 8)),
)
TOP_LANGUAGE_TIER = LANGUAGE_TIERS[0][0]

MAX_COUNTED_WORK_YEARS = 5
CANADIAN_WORK_POINTS = ((0, 0), (40, 35), (53, 46), (64, 56), (72, 63), (80, 70))

# Stand-in for the partner education/language/work sub-scores.
PARTNER_FACTOR_POINTS = 20

ADVANCED_EDUCATION = frozenset(
    {EducationLevel.TWO_OR_MORE, EducationLevel.MASTERS, EducationLevel.PHD}
)
TRANSFER_EDUCATION_POINTS = (25, 50)
TRANSFER_FOREIGN_WORK_POINTS = (25, 50)
TRANSFER_LONG_FOREIGN_WORK_YEARS = 3

NOMINATION_POINTS = 600
SIBLING_POINTS = 15
CANADIAN_EDUCATION_POINTS = {
    CanadianEducation.NONE: 0,
    CanadianEducation.ONE_OR_TWO_YEAR: 15,
    CanadianEducation.THREE_YEAR_OR_MORE: 30,
}
FRENCH_STRONG_CLB = 7
FRENCH_BONUS_STRONG_ENGLISH = 50
FRENCH_BONUS_WEAK_ENGLISH = 25
ENGLISH_MODERATE_CLB = 5
ENGLISH_WEAK_CLB = 4


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def scoring_mode(profile: Profile) -> ScoringMode:
    with_partner = (
        profile.marital_status != MaritalStatus.SINGLE
        and profile.partner_accompanying
        and not profile.partner_canadian
    )
    return ScoringMode.WITH_PARTNER if with_partner else ScoringMode.SINGLE


def _age_points(age: int, mode: ScoringMode) -> int:
    if age < MIN_AGE or age >= AGE_FLOOR:
        return 0
    if age in PRIME_AGES:
        return PRIME_AGE_POINTS[mode.column]
    if age in AGE_POINTS:
        return AGE_POINTS[age][mode.column]
    # between two table ages: straight line from the nearer one below to the one above
    lower = max(a for a in AGE_POINTS if a < age)
    upper = min(a for a in AGE_POINTS if a > age)
    low_pts = AGE_POINTS[lower][mode.column]
    high_pts = AGE_POINTS[upper][mode.column]
    interpolated = low_pts + (high_pts - low_pts) * (age - lower) / (upper - lower)
    return max(0, int(round(interpolated)))


def _education_points(level: EducationLevel, mode: ScoringMode) -> int:
    cell = EDUCATION_POINTS.get(level)
    return cell[mode.column] if cell else 0


def _skill_points(clb: int, mode: ScoringMode) -> int:
    for minimum, cell in LANGUAGE_TIERS:
        if clb >= minimum:
            return cell[mode.column]
    return 0


def _language_points(profile: Profile, mode: ScoringMode) -> int:
    return sum(_skill_points(clb, mode) for clb in profile.primary_language.skills())


def _canadian_work_points(years: int, mode: ScoringMode) -> int:
    return CANADIAN_WORK_POINTS[_clamp(years, 0, MAX_COUNTED_WORK_YEARS)][mode.column]


def _transferability(profile: Profile) -> int:
    if not profile.primary_language.all_at_least(TOP_LANGUAGE_TIER):
        return 0
    points = 0
    if profile.education in ADVANCED_EDUCATION:
        points += TRANSFER_EDUCATION_POINTS[1]
    elif isinstance(profile.education, EducationLevel) and profile.education is not EducationLevel.NONE:
        points += TRANSFER_EDUCATION_POINTS[0]
    if profile.foreign_work_years >= TRANSFER_LONG_FOREIGN_WORK_YEARS:
        points += TRANSFER_FOREIGN_WORK_POINTS[1]
    elif profile.foreign_work_years >= 1:
        points += TRANSFER_FOREIGN_WORK_POINTS[0]
    return min(points, MAX_TRANSFERABILITY)


def _french_bonus(profile: Profile) -> int:
    if not profile.secondary_language.all_at_least(FRENCH_STRONG_CLB):
        return 0
    if profile.primary_language.all_at_least(ENGLISH_MODERATE_CLB):
        return FRENCH_BONUS_STRONG_ENGLISH
    if profile.primary_language.all_at_most(ENGLISH_WEAK_CLB):
        return FRENCH_BONUS_WEAK_ENGLISH
    return 0


def score_profile(profile: Profile) -> ScoreBreakdown:
    mode = scoring_mode(profile)

    age = _age_points(profile.age, mode)
    education = _education_points(profile.education, mode)
    language = _language_points(profile, mode)
    canadian_work = _canadian_work_points(profile.canadian_work_years, mode)
    core = min(age + education + language + canadian_work, MAX_CORE[mode.column])

    partner = PARTNER_FACTOR_POINTS if mode is ScoringMode.WITH_PARTNER else 0
    partner = min(partner, MAX_PARTNER_FACTORS)

    transferability = _transferability(profile)

    nomination = NOMINATION_POINTS if profile.provincial_nomination else 0
    sibling = SIBLING_POINTS if profile.sibling_in_canada else 0
    canadian_education = CANADIAN_EDUCATION_POINTS.get(profile.canadian_education, 0)
    french_bonus = _french_bonus(profile)
    additional = min(nomination + sibling + canadian_education + french_bonus, MAX_ADDITIONAL)

    total = min(core + partner + transferability + additional, MAX_TOTAL)

    return ScoreBreakdown(
        total=total,
        core_human_capital=core,
        partner_factors=partner,
        transferability=transferability,
        additional=additional,
        age=age,
        education=education,
        language=language,
        canadian_work=canadian_work,
        french_bonus=french_bonus,
        canadian_education=canadian_education,
        nomination=nomination,
        sibling=sibling,
        mode=mode,
    )
