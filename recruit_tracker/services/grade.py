"""Grade level from graduation year."""

from __future__ import annotations

from datetime import date

# School year starts July 1: from July the "current" year counts toward the next class.
SCHOOL_YEAR_START_MONTH = 7
MIN_GRADE = 9
MAX_GRADE = 12


def calculate_current_grade(graduation_year: int | None, today: date | None = None) -> int | None:
    """Return the high-school grade (9-12) for a class of ``graduation_year``.

    A senior graduates in the spring of ``graduation_year``; from July 1 the
    school year rolls over. Values outside 9-12 are clamped. Returns None
    when the graduation year is unknown.
    """
    if graduation_year is None:
        return None
    today = today or date.today()
    school_year_end = today.year + 1 if today.month >= SCHOOL_YEAR_START_MONTH else today.year
    grade = MAX_GRADE - (graduation_year - school_year_end)
    return max(MIN_GRADE, min(MAX_GRADE, grade))
