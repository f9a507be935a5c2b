"""NCAA dead-period calendar used to hold back coach-contact suggestions.

Periods come from SUGGESTION_DEAD_PERIODS (``DIV:YYYY-MM-DD:YYYY-MM-DD,...``);
both ends are inclusive.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date

from recruit_tracker.schemas.rule_context import RuleContext

logger = logging.getLogger(__name__)

_DIVISION_ALIASES = {"D1": "DI", "D2": "DII", "D3": "DIII"}


@dataclass(frozen=True)
class DeadPeriod:
    division: str
    start: date
    end: date

    def contains(self, day: date) -> bool:
        return self.start <= day <= self.end


def normalize_division(value: str | None) -> str | None:
    """Canonical division label: D1/DI -> DI, D2/DII -> DII, D3/DIII -> DIII."""
    if not value:
        return None
    label = value.strip().upper()
    return _DIVISION_ALIASES.get(label, label)


def parse_dead_periods(entries: Iterable[tuple[str, str, str]]) -> list[DeadPeriod]:
    """Build DeadPeriod objects from (division, start, end) string triples.

    Malformed entries are logged and skipped.
    """
    periods: list[DeadPeriod] = []
    for division, start, end in entries:
        try:
            start_date = date.fromisoformat(start)
            end_date = date.fromisoformat(end)
        except ValueError:
            logger.warning("Ignoring malformed dead period %s:%s:%s", division, start, end)
            continue
        if end_date < start_date:
            logger.warning("Ignoring dead period with end before start: %s:%s:%s", division, start, end)
            continue
        periods.append(DeadPeriod(normalize_division(division) or division, start_date, end_date))
    return periods


def is_in_dead_period(division: str | None, day: date, periods: Iterable[DeadPeriod]) -> bool:
    label = normalize_division(division)
    if label is None:
        return False
    return any(p.division == label and p.contains(day) for p in periods)


def all_schools_in_dead_period(context: RuleContext, periods: Iterable[DeadPeriod]) -> bool:
    """True when the athlete tracks schools and every one is in a dead period today."""
    periods = list(periods)
    if not periods or not context.schools:
        return False
    today = context.as_of.date()
    return all(is_in_dead_period(s.division, today, periods) for s in context.schools)
