"""Rule contract and shared helpers for suggestion rules.

A rule inspects a read-only RuleContext and returns one SuggestionData, a
list of them, or None. ``evaluate`` may be a plain method or a coroutine.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TYPE_CHECKING, Any, Union

from recruit_tracker.schemas.rule_context import RuleContext, SchoolRecord
from recruit_tracker.schemas.suggestion import SuggestionData
from recruit_tracker.services.suggestions.constants import (
    CONTACT_RULE_IDS,
    NO_CONTACT_DAYS,
    PRIORITY_TIERS,
)

if TYPE_CHECKING:
    from recruit_tracker.models.suggestion import Suggestion

RuleResult = Union[SuggestionData, list[SuggestionData], None]


class Rule(ABC):
    """Base class for suggestion rules.

    Subclasses set ``id``, ``name`` and ``description`` and implement
    ``evaluate``. Re-evaluation of dismissed suggestions is opt-in: the
    defaults never re-raise and record no snapshot.
    """

    id: str = ""
    name: str = ""
    description: str = ""
    # Contact rules nudge the athlete to reach out to coaches and are
    # skipped while every tracked school is in an NCAA dead period.
    is_contact_rule: bool = False

    @abstractmethod
    def evaluate(self, context: RuleContext) -> RuleResult | Awaitable[RuleResult]:
        """Return candidate suggestion(s) or None when the rule does not fire."""

    def should_re_evaluate(self, dismissed: Suggestion, context: RuleContext) -> bool:
        return False

    def create_condition_snapshot(
        self, context: RuleContext, related_school_id: str | None = None
    ) -> dict[str, Any] | None:
        return None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} id={self.id!r}>"


class FunctionRule(Rule):
    """Wrap a plain function or coroutine function as a Rule.

    ``is_contact_rule`` defaults to whether ``rule_id`` is one of the known
    contact rule ids.
    """

    def __init__(
        self,
        rule_id: str,
        func: Callable[[RuleContext], Any],
        name: str = "",
        description: str = "",
        is_contact_rule: bool | None = None,
    ) -> None:
        self.id = rule_id
        self.name = name or rule_id
        self.description = description
        if is_contact_rule is None:
            is_contact_rule = rule_id in CONTACT_RULE_IDS
        self.is_contact_rule = is_contact_rule
        self._func = func

    def evaluate(self, context: RuleContext) -> Any:
        return self._func(context)


# ── Helpers ─────────────────────────────────────────────────────────────


def days_between(earlier: datetime, later: datetime) -> int:
    """Whole days from ``earlier`` to ``later`` (floored)."""
    return (later - earlier).days


def last_contact_at(context: RuleContext, school_id: str) -> datetime | None:
    """Most recent dated interaction with ``school_id``, or None."""
    dates = [
        i.interaction_date
        for i in context.interactions
        if i.school_id == school_id and i.interaction_date is not None
    ]
    return max(dates) if dates else None


def days_since_contact(context: RuleContext, school_id: str) -> int | None:
    """Days since the last interaction with a school.

    NO_CONTACT_DAYS when the school has no interactions at all. None when it
    has interactions but none of them is dated, so the gap is unknown.
    """
    last = last_contact_at(context, school_id)
    if last is None:
        if any(i.school_id == school_id for i in context.interactions):
            return None
        return NO_CONTACT_DAYS
    return days_between(last, context.as_of)


def is_priority_school(school: SchoolRecord) -> bool:
    return (school.priority or "").upper() in PRIORITY_TIERS


def find_school(context: RuleContext, school_id: str | None) -> SchoolRecord | None:
    if school_id is None:
        return None
    return next((s for s in context.schools if s.id == school_id), None)
