"""School fit score: four capped dimensions summed to 0-100, then tiered.

Dimension caps: athletic 40, academic 25, opportunity 20, personal 15.
Tiers: match >= 70, reach >= 50, otherwise unlikely. Each dimension can be
scored from raw athlete and school data with the calculate_*_fit helpers.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

# (dimension name, input key, max points), in reporting order
FIT_DIMENSIONS: tuple[tuple[str, str, int], ...] = (
    ("athletic", "athletic_fit", 40),
    ("academic", "academic_fit", 25),
    ("opportunity", "opportunity_fit", 20),
    ("personal", "personal_fit", 15),
)

FIT_THRESHOLD_MATCH = 70
FIT_THRESHOLD_REACH = 50

PORTFOLIO_MIN_SCHOOLS = 5


@dataclass
class FitScoreResult:
    score: int
    tier: str
    breakdown: dict[str, float]
    missing_dimensions: list[str] = field(default_factory=list)


@dataclass
class PortfolioHealth:
    reaches: int
    matches: int
    safeties: int
    unlikelies: int
    total: int
    warnings: list[str]
    status: str  # not_started | healthy | needs_attention


def _clamp(value: float | None, upper: int) -> float:
    return max(0, min(upper, value or 0))


def get_fit_tier(score: float) -> str:
    """Map a 0-100 score to match / reach / unlikely."""
    if score >= FIT_THRESHOLD_MATCH:
        return "match"
    if score >= FIT_THRESHOLD_REACH:
        return "reach"
    return "unlikely"


def calculate_fit_score(inputs: Mapping[str, Any] | None = None) -> FitScoreResult:
    """Compute the composite fit score from partial dimension inputs.

    Absent dimensions count as 0 and are reported in ``missing_dimensions``.
    Out-of-range values are clamped to the dimension's cap.

    Example:
        calculate_fit_score({"athletic_fit": 40, "academic_fit": 25,
                             "opportunity_fit": 20, "personal_fit": 15})
        -> score=100, tier="match", missing_dimensions=[]
    """
    inputs = inputs or {}
    breakdown: dict[str, float] = {}
    missing: list[str] = []
    for name, key, cap in FIT_DIMENSIONS:
        value = _clamp(inputs.get(key), cap)
        breakdown[key] = value
        if value == 0:
            missing.append(name)

    total = sum(breakdown.values())
    return FitScoreResult(
        score=round(total),
        tier=get_fit_tier(total),
        breakdown=breakdown,
        missing_dimensions=missing,
    )


# ── Dimension calculators ───────────────────────────────────────────────

COACH_INTEREST_POINTS: dict[str, int] = {"high": 10, "medium": 6, "low": 2}
SCHOLARSHIP_POINTS: dict[str, int] = {"high": 4, "medium": 2, "low": 1}

# campus size preference -> (student population midpoint, tolerance)
CAMPUS_SIZE_BANDS: dict[str, tuple[int, int]] = {
    "small": (5000, 3000),
    "medium": (15000, 5000),
    "large": (25000, 10000),
}


def calculate_athletic_fit(
    position: str | None,
    height: float | None,
    weight: float | None,
    velo: float | None,
    school_position_needs: Sequence[str] = (),
    coach_interest: str = "low",
    roster_depth: float = 50,
) -> int:
    """Athletic fit (0-40) from position need, coach interest, size and velo.

    ``height`` is in inches and ``weight`` in pounds. ``roster_depth`` does
    not affect the score.
    """
    score = 0

    if position and school_position_needs:
        if position in school_position_needs:
            score += 10
        elif any("OF" in p and "OF" in position for p in school_position_needs):
            score += 7
        elif any("IF" in p and "IF" in position for p in school_position_needs):
            score += 7
        else:
            score += 3

    score += COACH_INTEREST_POINTS.get(coach_interest, 0)

    if height and weight:
        if 69 <= height <= 76 and 180 <= weight <= 220:
            score += 8
        elif 67 <= height <= 78 and 160 <= weight <= 240:
            score += 5
        else:
            score += 2

    if velo:
        if velo >= 88:
            score += 10
        elif velo >= 85:
            score += 8
        elif velo >= 82:
            score += 5
        else:
            score += 2

    return min(40, score)


def calculate_academic_fit(
    gpa: float | None,
    sat: int | None,
    act: int | None,
    school_avg_gpa: float | None,
    school_avg_sat: int | None,
    school_avg_act: int | None,
    target_major: str | None = None,
    offered_majors: Sequence[str] = (),
) -> int:
    """Academic fit (0-25). SAT is compared when both sides have it, else ACT."""
    score = 0

    if gpa and school_avg_gpa:
        gap = school_avg_gpa - gpa
        if gap <= 0.2:
            score += 10
        elif gap <= 0.5:
            score += 8
        elif gap <= 1.0:
            score += 5
        else:
            score += 2
    elif gpa:
        if gpa >= 3.5:
            score += 9
        elif gpa >= 3.0:
            score += 7
        elif gpa >= 2.5:
            score += 5
        else:
            score += 2

    if sat and school_avg_sat:
        gap = school_avg_sat - sat
        score += 8 if gap <= 50 else 5 if gap <= 150 else 2
    elif act and school_avg_act:
        gap = school_avg_act - act
        score += 8 if gap <= 2 else 5 if gap <= 4 else 2

    if target_major and offered_majors:
        wanted = target_major.lower()
        score += 5 if any(wanted in m.lower() for m in offered_majors) else 2

    # academic support, assumed everywhere
    score += 2

    return min(25, score)


def calculate_opportunity_fit(
    position_roster_depth: float = 50,
    years_to_graduate: float = 3,
    scholarship_availability: str = "medium",
    walk_on_history: bool = False,
) -> int:
    """Opportunity fit (0-20). Thinner rosters and sooner graduations score higher."""
    score = 0

    if position_roster_depth <= 60:
        score += 7
    elif position_roster_depth <= 75:
        score += 5
    elif position_roster_depth <= 90:
        score += 3
    else:
        score += 1

    if years_to_graduate <= 2:
        score += 5
    elif years_to_graduate <= 3:
        score += 4
    elif years_to_graduate <= 4:
        score += 2
    else:
        score += 1

    score += SCHOLARSHIP_POINTS.get(scholarship_availability, 0)
    score += 3 if walk_on_history else 1

    return min(20, score)


def _campus_size_score(preference: str, population: float) -> int:
    band = CAMPUS_SIZE_BANDS.get(preference)
    if band is None:
        return 0
    midpoint, tolerance = band
    return 3 if abs(population - midpoint) <= tolerance else 1


def calculate_personal_fit(
    athlete_state: str | None,
    school_state: str | None,
    campus_size_preference: str = "medium",
    school_campus_size: float = 10000,
    cost_sensitivity: str = "medium",
    school_cost: float = 30000,
    is_priority_school: bool = False,
    major_strength_rating: float = 5,
) -> int:
    """Personal fit (0-15) from home state, campus size, cost and priority."""
    score = 0

    if athlete_state and school_state:
        score += 4 if athlete_state == school_state else 1

    score += _campus_size_score(campus_size_preference, school_campus_size)

    if cost_sensitivity == "high":
        score += 4 if school_cost <= 20000 else 2 if school_cost <= 35000 else 0
    elif cost_sensitivity == "medium":
        score += 3 if school_cost <= 30000 else 2 if school_cost <= 45000 else 1
    else:
        score += 4

    if is_priority_school:
        score += 2

    if major_strength_rating >= 7:
        score += 2
    elif major_strength_rating >= 4:
        score += 1

    return min(15, score)


# ── Portfolio ───────────────────────────────────────────────────────────


def calculate_portfolio_health(schools: Iterable[Any] = ()) -> PortfolioHealth:
    """Summarize balance of the athlete's school list by fit tier.

    Each school may be a mapping or an object exposing ``fit_score`` and an
    optional ``fit_tier``; an explicit tier wins over the score-derived one.
    """
    schools = list(schools)
    if not schools:
        return PortfolioHealth(
            reaches=0,
            matches=0,
            safeties=0,
            unlikelies=0,
            total=0,
            warnings=["You haven't added any schools yet. Start building your college list!"],
            status="not_started",
        )

    counts = {"reach": 0, "match": 0, "safety": 0, "unlikely": 0}
    for school in schools:
        if isinstance(school, Mapping):
            score = school.get("fit_score") or 0
            tier = school.get("fit_tier")
        else:
            score = getattr(school, "fit_score", None) or 0
            tier = getattr(school, "fit_tier", None)
        tier = tier or get_fit_tier(score)
        if tier in counts:
            counts[tier] += 1

    total = len(schools)
    warnings: list[str] = []
    if counts["safety"] == 0:
        warnings.append("Add at least 2-3 safety schools to ensure you have options.")
    if counts["match"] == 0:
        warnings.append("Consider adding match schools where you have a realistic chance.")
    if counts["reach"] > counts["match"] + counts["safety"]:
        warnings.append(
            "You have more reach schools than match and safety combined. Balance your list."
        )
    if total < PORTFOLIO_MIN_SCHOOLS:
        warnings.append("Consider adding more schools to diversify your options.")

    return PortfolioHealth(
        reaches=counts["reach"],
        matches=counts["match"],
        safeties=counts["safety"],
        unlikelies=counts["unlikely"],
        total=total,
        warnings=warnings,
        status="needs_attention" if warnings else "healthy",
    )


def get_fit_score_recommendation(score: int, tier: str) -> str:
    if tier == "match":
        return "Excellent fit! This school aligns well with your profile."
    if tier == "safety":
        return "Good fit! You have a strong chance at this school."
    if tier == "reach":
        return (
            f"Possible fit with some growth. Score: {score}/100. "
            "Focus on the missing dimensions."
        )
    return "Not a strong fit based on current data. Work on improving key dimensions."
