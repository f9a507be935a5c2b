"""Grade-driven rules: milestones expected at a given point in high school."""

from __future__ import annotations

import calendar
from datetime import datetime

from recruit_tracker.schemas.rule_context import RuleContext
from recruit_tracker.schemas.suggestion import SuggestionData
from recruit_tracker.services.suggestions.constants import (
    ACTION_LOG_INTERACTION,
    FORMAL_OUTREACH_AVG_DAYS,
    FORMAL_OUTREACH_MAX_DAYS,
    GRADE_JUNIOR,
    GRADE_SENIOR,
    GRADE_SOPHOMORE,
    NCAA_REGISTRATION_TASK_ID,
    NCAA_SCHOLARSHIP_DIVISIONS,
    OFFICIAL_VISIT_KEYWORDS,
    OFFICIAL_VISIT_MIN_COUNT,
    SHOWCASE_MAX_AGE_MONTHS,
)
from recruit_tracker.services.suggestions.rules.base import (
    Rule,
    days_since_contact,
    is_priority_school,
)


def subtract_months(moment: datetime, months: int) -> datetime:
    """Same day-of-month ``months`` earlier, clamped to the month's last day."""
    month_index = moment.year * 12 + (moment.month - 1) - months
    year, month = divmod(month_index, 12)
    month += 1
    day = min(moment.day, calendar.monthrange(year, month)[1])
    return moment.replace(year=year, month=month, day=day)


class ShowcaseAttendanceRule(Rule):
    id = "showcase-attendance"
    name = "Showcase Attendance"
    description = "Sophomores should attend a showcase at least every 6 months"

    def evaluate(self, context: RuleContext) -> SuggestionData | None:
        if context.grade_level != GRADE_SOPHOMORE:
            return None
        dated = [e.event_date for e in context.events if e.event_date is not None]
        if dated:
            cutoff = subtract_months(context.as_of, SHOWCASE_MAX_AGE_MONTHS)
            if max(dated) >= cutoff:
                return None
        return SuggestionData(
            rule_type=self.id,
            urgency="medium",
            message="Register for a showcase or camp to get in front of college coaches.",
            action_type=ACTION_LOG_INTERACTION,
        )


class NcaaRegistrationRule(Rule):
    id = "ncaa-registration"
    name = "NCAA Eligibility Registration"
    description = "Juniors targeting D1/D2 schools must register with the NCAA"

    def evaluate(self, context: RuleContext) -> SuggestionData | None:
        if context.grade_level != GRADE_JUNIOR:
            return None
        targets_scholarship_division = any(
            (s.division or "").strip().upper() in NCAA_SCHOLARSHIP_DIVISIONS
            for s in context.schools
        )
        if not targets_scholarship_division:
            return None
        registered = any(
            t.task_id == NCAA_REGISTRATION_TASK_ID and t.status == "completed"
            for t in context.athlete_tasks
        )
        if registered:
            return None
        return SuggestionData(
            rule_type=self.id,
            urgency="high",
            message=(
                "Register with the NCAA Eligibility Center so D1 and D2 coaches "
                "can recruit you."
            ),
            action_type=ACTION_LOG_INTERACTION,
            related_task_id=NCAA_REGISTRATION_TASK_ID,
        )


class FormalOutreachRule(Rule):
    id = "formal-outreach"
    name = "Formal Outreach Needed"
    description = "Upperclassmen should keep regular contact with priority schools"

    def evaluate(self, context: RuleContext) -> SuggestionData | None:
        grade = context.grade_level
        if grade < GRADE_JUNIOR:
            return None
        gaps = [days_since_contact(context, s.id) for s in context.schools if is_priority_school(s)]
        if not gaps or None in gaps:
            return None
        average = sum(gaps) / len(gaps)
        if average <= FORMAL_OUTREACH_AVG_DAYS and max(gaps) <= FORMAL_OUTREACH_MAX_DAYS:
            return None
        return SuggestionData(
            rule_type=self.id,
            urgency="high" if grade >= GRADE_SENIOR else "medium",
            message=(
                "Coaches at your top schools haven't heard from you lately. "
                "Send an update with your latest stats and schedule."
            ),
            action_type=ACTION_LOG_INTERACTION,
        )


class OfficialVisitRule(Rule):
    id = "official-visit"
    name = "Official Visits"
    description = "Upperclassmen should plan official visits to priority schools"

    def evaluate(self, context: RuleContext) -> SuggestionData | None:
        grade = context.grade_level
        if grade < GRADE_JUNIOR:
            return None
        if not any(is_priority_school(s) for s in context.schools):
            return None
        visits = sum(
            1
            for i in context.interactions
            if any(k in (i.interaction_type or "").lower() for k in OFFICIAL_VISIT_KEYWORDS)
        )
        if visits >= OFFICIAL_VISIT_MIN_COUNT:
            return None
        return SuggestionData(
            rule_type=self.id,
            urgency="high" if grade >= GRADE_SENIOR else "medium",
            message="Plan official visits with your top schools before decision time.",
            action_type=ACTION_LOG_INTERACTION,
        )
