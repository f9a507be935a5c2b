"""Contact rule tests: interaction-gap, priority-school-reminder, event-follow-up."""

from __future__ import annotations

from datetime import timedelta
from types import SimpleNamespace

from recruit_tracker.schemas.rule_context import (
    AthleteSnapshot,
    EventRecord,
    InteractionRecord,
    RuleContext,
    SchoolRecord,
)
from recruit_tracker.services.suggestions.rules import (
    EventFollowUpRule,
    InteractionGapRule,
    PrioritySchoolReminderRule,
)
from tests.test_constants import TEST_AS_OF, TEST_ATHLETE_ID


def _context(schools=(), interactions=(), events=(), grade=10) -> RuleContext:
    return RuleContext(
        athlete_id=TEST_ATHLETE_ID,
        athlete=AthleteSnapshot(grade_level=grade),
        schools=tuple(schools),
        interactions=tuple(interactions),
        events=tuple(events),
        as_of=TEST_AS_OF,
    )


def _school(school_id: str, priority: str | None = "A", status: str | None = "interested", **kw):
    return SchoolRecord(id=school_id, name=kw.pop("name", f"School {school_id}"),
                        priority=priority, status=status, **kw)


def _contact(school_id: str, days_ago: int, **kw) -> InteractionRecord:
    return InteractionRecord(
        school_id=school_id, interaction_date=TEST_AS_OF - timedelta(days=days_ago), **kw
    )


def _dismissed(school_id: str, snapshot: dict | None):
    return SimpleNamespace(
        id="sug-1",
        rule_type="interaction-gap",
        related_school_id=school_id,
        condition_snapshot=snapshot,
    )


# ── interaction-gap ─────────────────────────────────────────────────────


class TestInteractionGapRule:
    def test_fires_at_21_days(self) -> None:
        """Priority A school contacted exactly 21 days ago → high, tagged to school."""
        ctx = _context([_school("s1", name="Vanderbilt")], [_contact("s1", 21)])
        result = InteractionGapRule().evaluate(ctx)

        assert result is not None
        assert result.rule_type == "interaction-gap"
        assert result.urgency == "high"
        assert result.action_type == "log_interaction"
        assert result.related_school_id == "s1"
        assert result.message == (
            "It's been 21 days since you contacted Vanderbilt. Stay on their radar!"
        )

    def test_does_not_fire_at_20_days(self) -> None:
        ctx = _context([_school("s1")], [_contact("s1", 20)])
        assert InteractionGapRule().evaluate(ctx) is None

    def test_no_interactions_counts_as_999_days(self) -> None:
        result = InteractionGapRule().evaluate(_context([_school("s1", priority="B")]))
        assert result is not None
        assert "999 days" in result.message

    def test_uses_most_recent_interaction(self) -> None:
        """An old contact followed by a recent one does not fire."""
        ctx = _context([_school("s1")], [_contact("s1", 60), _contact("s1", 3)])
        assert InteractionGapRule().evaluate(ctx) is None

    def test_undated_interactions_leave_gap_unknown(self) -> None:
        """Interactions exist but none is dated: the gap is unknown, not 999 days."""
        ctx = _context([_school("s1")], [InteractionRecord(school_id="s1", interaction_date=None)])
        assert InteractionGapRule().evaluate(ctx) is None
        assert PrioritySchoolReminderRule().evaluate(ctx) is None

    def test_undated_interaction_ignored_when_a_dated_one_exists(self) -> None:
        ctx = _context(
            [_school("s1")],
            [InteractionRecord(school_id="s1", interaction_date=None), _contact("s1", 30)],
        )
        result = InteractionGapRule().evaluate(ctx)
        assert result is not None
        assert "30 days" in result.message

    def test_ignores_low_priority_and_inactive_status(self) -> None:
        schools = [
            _school("s1", priority="C"),
            _school("s2", priority=None),
            _school("s3", status="declined"),
            _school("s4", status=None),
        ]
        assert InteractionGapRule().evaluate(_context(schools)) is None

    def test_returns_first_qualifying_school_only(self) -> None:
        """Two overdue schools → one suggestion for the first in list order."""
        ctx = _context([_school("s1"), _school("s2")])
        result = InteractionGapRule().evaluate(ctx)
        assert not isinstance(result, list)
        assert result.related_school_id == "s1"

    def test_condition_snapshot(self) -> None:
        ctx = _context([_school("s1", priority="A", status="contacted")], [_contact("s1", 25)])
        snapshot = InteractionGapRule().create_condition_snapshot(ctx, "s1")
        assert snapshot == {
            "days_since_contact": 25,
            "school_priority": "A",
            "school_status": "contacted",
        }

    def test_condition_snapshot_unknown_school_is_none(self) -> None:
        assert InteractionGapRule().create_condition_snapshot(_context(), "missing") is None

    def test_re_evaluate_when_gap_grew_14_days(self) -> None:
        ctx = _context([_school("s1")], [_contact("s1", 35)])
        dismissed = _dismissed("s1", {"days_since_contact": 21, "school_priority": "A"})
        assert InteractionGapRule().should_re_evaluate(dismissed, ctx) is True

    def test_no_re_evaluate_when_gap_grew_less_than_14_days(self) -> None:
        ctx = _context([_school("s1")], [_contact("s1", 30)])
        dismissed = _dismissed("s1", {"days_since_contact": 21, "school_priority": "A"})
        assert InteractionGapRule().should_re_evaluate(dismissed, ctx) is False

    def test_re_evaluate_when_priority_changed(self) -> None:
        ctx = _context([_school("s1", priority="B")], [_contact("s1", 30)])
        dismissed = _dismissed("s1", {"days_since_contact": 21, "school_priority": "A"})
        assert InteractionGapRule().should_re_evaluate(dismissed, ctx) is True

    def test_no_re_evaluate_once_contact_resumed(self) -> None:
        """Priority changed but the school was contacted recently → no re-raise."""
        ctx = _context([_school("s1", priority="B")], [_contact("s1", 2)])
        dismissed = _dismissed("s1", {"days_since_contact": 21, "school_priority": "A"})
        assert InteractionGapRule().should_re_evaluate(dismissed, ctx) is False

    def test_no_re_evaluate_when_school_removed(self) -> None:
        dismissed = _dismissed("s1", {"days_since_contact": 21, "school_priority": "A"})
        assert InteractionGapRule().should_re_evaluate(dismissed, _context()) is False


# ── priority-school-reminder ────────────────────────────────────────────


class TestPrioritySchoolReminderRule:
    def test_fires_for_priority_a_at_14_days(self) -> None:
        ctx = _context([_school("s1", name="LSU")], [_contact("s1", 14)])
        result = PrioritySchoolReminderRule().evaluate(ctx)

        assert result is not None
        assert result.urgency == "high"
        assert result.related_school_id == "s1"
        assert result.message == "LSU is your top priority. Check in with coaches this week."

    def test_ignores_priority_b(self) -> None:
        ctx = _context([_school("s1", priority="B")], [_contact("s1", 40)])
        assert PrioritySchoolReminderRule().evaluate(ctx) is None

    def test_status_does_not_matter(self) -> None:
        ctx = _context([_school("s1", status="declined")])
        assert PrioritySchoolReminderRule().evaluate(ctx) is not None

    def test_does_not_fire_at_13_days(self) -> None:
        ctx = _context([_school("s1")], [_contact("s1", 13)])
        assert PrioritySchoolReminderRule().evaluate(ctx) is None

    def test_twenty_day_gap_fires_reminder_but_not_interaction_gap(self) -> None:
        """20 days since contact: 14-day reminder fires, 21-day gap rule does not."""
        ctx = _context([_school("s1")], [_contact("s1", 20)])

        results = [
            r
            for r in (InteractionGapRule().evaluate(ctx), PrioritySchoolReminderRule().evaluate(ctx))
            if r is not None
        ]
        assert len(results) == 1
        assert results[0].rule_type == "priority-school-reminder"
        assert results[0].related_school_id == "s1"


# ── event-follow-up ─────────────────────────────────────────────────────


def _event(event_id: str, days_ago: int, attended: bool = True, **kw) -> EventRecord:
    return EventRecord(
        id=event_id,
        name=kw.pop("name", "Perfect Game Showcase"),
        event_date=TEST_AS_OF - timedelta(days=days_ago),
        attended=attended,
        **kw,
    )


class TestEventFollowUpRule:
    def test_fires_for_recent_attended_event_without_follow_up(self) -> None:
        ctx = _context(events=[_event("e1", 3, school_id="s1")])
        result = EventFollowUpRule().evaluate(ctx)

        assert result is not None
        assert result.urgency == "medium"
        assert result.action_type == "log_interaction"
        assert result.related_school_id == "s1"
        assert result.message == (
            "Follow up on Perfect Game Showcase with a thank-you email to coaches you met"
        )

    def test_linked_interaction_counts_as_follow_up(self) -> None:
        ctx = _context(
            interactions=[_contact("s9", 10, related_event_id="e1")],
            events=[_event("e1", 3)],
        )
        assert EventFollowUpRule().evaluate(ctx) is None

    def test_any_later_interaction_counts_as_follow_up(self) -> None:
        ctx = _context(interactions=[_contact("s9", 1)], events=[_event("e1", 3)])
        assert EventFollowUpRule().evaluate(ctx) is None

    def test_ignores_unattended_old_and_undated_events(self) -> None:
        events = [
            _event("e1", 3, attended=False),
            _event("e2", 8),
            EventRecord(id="e3", name="TBD", attended=True),
        ]
        assert EventFollowUpRule().evaluate(_context(events=events)) is None

    def test_seven_days_is_inside_window(self) -> None:
        assert EventFollowUpRule().evaluate(_context(events=[_event("e1", 7)])) is not None


def test_contact_rules_are_flagged() -> None:
    """All three contact rules are subject to dead-period filtering."""
    assert InteractionGapRule.is_contact_rule is True
    assert PrioritySchoolReminderRule.is_contact_rule is True
    assert EventFollowUpRule.is_contact_rule is True
