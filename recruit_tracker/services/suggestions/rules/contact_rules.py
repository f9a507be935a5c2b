"""Contact rules: nudges to reach out to coaches at tracked schools.

All three scan in list order and return on the first qualifying item, so at
most one suggestion per rule is produced each cycle.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from recruit_tracker.schemas.rule_context import RuleContext
from recruit_tracker.schemas.suggestion import SuggestionData
from recruit_tracker.services.suggestions.constants import (
    ACTION_LOG_INTERACTION,
    ACTIVE_SCHOOL_STATUSES,
    EVENT_FOLLOW_UP_WINDOW_DAYS,
    INTERACTION_GAP_DAYS,
    PRIORITY_REMINDER_DAYS,
    REEVALUATE_GAP_GROWTH_DAYS,
)
from recruit_tracker.services.suggestions.rules.base import (
    Rule,
    days_between,
    days_since_contact,
    find_school,
    is_priority_school,
)

if TYPE_CHECKING:
    from recruit_tracker.models.suggestion import Suggestion


class InteractionGapRule(Rule):
    id = "interaction-gap"
    name = "Interaction Gap Detected"
    description = "Priority school has not been contacted in 21+ days"
    is_contact_rule = True

    def _qualifies(self, school) -> bool:
        return is_priority_school(school) and school.status in ACTIVE_SCHOOL_STATUSES

    def evaluate(self, context: RuleContext) -> SuggestionData | None:
        for school in context.schools:
            if not self._qualifies(school):
                continue
            days = days_since_contact(context, school.id)
            if days is not None and days >= INTERACTION_GAP_DAYS:
                return SuggestionData(
                    rule_type=self.id,
                    urgency="high",
                    message=(
                        f"It's been {days} days since you contacted {school.name}. "
                        "Stay on their radar!"
                    ),
                    action_type=ACTION_LOG_INTERACTION,
                    related_school_id=school.id,
                )
        return None

    def create_condition_snapshot(
        self, context: RuleContext, related_school_id: str | None = None
    ) -> dict[str, Any] | None:
        school = find_school(context, related_school_id)
        if school is None:
            return None
        return {
            "days_since_contact": days_since_contact(context, school.id),
            "school_priority": school.priority,
            "school_status": school.status,
        }

    def should_re_evaluate(self, dismissed: Suggestion, context: RuleContext) -> bool:
        """Re-raise when the gap grew by 14+ days or the school's priority changed."""
        school = find_school(context, dismissed.related_school_id)
        if school is None or not self._qualifies(school):
            return False
        days = days_since_contact(context, school.id)
        if days is None or days < INTERACTION_GAP_DAYS:
            return False

        snapshot = dismissed.condition_snapshot or {}
        if not snapshot:
            return True
        if snapshot.get("school_priority") != school.priority:
            return True
        previous_days = snapshot.get("days_since_contact")
        if previous_days is None:
            return True
        return days - previous_days >= REEVALUATE_GAP_GROWTH_DAYS


class PrioritySchoolReminderRule(Rule):
    id = "priority-school-reminder"
    name = "Priority School Check-In"
    description = "Top priority school needs attention"
    is_contact_rule = True

    def evaluate(self, context: RuleContext) -> SuggestionData | None:
        for school in context.schools:
            if (school.priority or "").upper() != "A":
                continue
            days = days_since_contact(context, school.id)
            if days is not None and days >= PRIORITY_REMINDER_DAYS:
                return SuggestionData(
                    rule_type=self.id,
                    urgency="high",
                    message=f"{school.name} is your top priority. Check in with coaches this week.",
                    action_type=ACTION_LOG_INTERACTION,
                    related_school_id=school.id,
                )
        return None

    def create_condition_snapshot(
        self, context: RuleContext, related_school_id: str | None = None
    ) -> dict[str, Any] | None:
        if find_school(context, related_school_id) is None:
            return None
        return {"days_since_contact": days_since_contact(context, related_school_id)}

    def should_re_evaluate(self, dismissed: Suggestion, context: RuleContext) -> bool:
        school = find_school(context, dismissed.related_school_id)
        if school is None or (school.priority or "").upper() != "A":
            return False
        days = days_since_contact(context, school.id)
        if days is None or days < PRIORITY_REMINDER_DAYS:
            return False
        previous_days = (dismissed.condition_snapshot or {}).get("days_since_contact")
        if previous_days is None:
            return True
        return days - previous_days >= REEVALUATE_GAP_GROWTH_DAYS


class EventFollowUpRule(Rule):
    id = "event-follow-up"
    name = "Event Follow-Up Needed"
    description = "Attended event but no follow-up interaction logged"
    is_contact_rule = True

    def evaluate(self, context: RuleContext) -> SuggestionData | None:
        for event in context.events:
            if not event.attended or event.event_date is None:
                continue
            if days_between(event.event_date, context.as_of) > EVENT_FOLLOW_UP_WINDOW_DAYS:
                continue

            has_follow_up = any(
                (event.id is not None and i.related_event_id == event.id)
                or (i.interaction_date is not None and i.interaction_date > event.event_date)
                for i in context.interactions
            )
            if not has_follow_up:
                return SuggestionData(
                    rule_type=self.id,
                    urgency="medium",
                    message=(
                        f"Follow up on {event.name} with a thank-you email to coaches you met"
                    ),
                    action_type=ACTION_LOG_INTERACTION,
                    related_school_id=event.school_id,
                )
        return None
