"""Rule engine tests: evaluation order, fault isolation, persistence and re-evaluation."""

from __future__ import annotations

import asyncio
from datetime import timedelta
from unittest.mock import patch

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

from recruit_tracker.models.suggestion import Suggestion
from recruit_tracker.schemas.rule_context import (
    AthleteSnapshot,
    InteractionRecord,
    RuleContext,
    SchoolRecord,
)
from recruit_tracker.schemas.suggestion import SuggestionData
from recruit_tracker.services.suggestions.dead_period import DeadPeriod
from recruit_tracker.services.suggestions.engine import RuleEngine, escalate_urgency
from recruit_tracker.services.suggestions.rules import (
    FunctionRule,
    InteractionGapRule,
    MissingVideoRule,
    PrioritySchoolReminderRule,
    default_rules,
)
from tests.test_constants import TEST_AS_OF, TEST_ATHLETE_ID


def _suggestion(rule_type: str, school_id: str | None = None, urgency: str = "medium"):
    return SuggestionData(
        rule_type=rule_type,
        urgency=urgency,
        message=f"{rule_type} message",
        action_type="log_interaction",
        related_school_id=school_id,
    )


def _context(**kw) -> RuleContext:
    return RuleContext(athlete_id=TEST_ATHLETE_ID, as_of=TEST_AS_OF, **kw)


def _raises(_ctx):
    raise RuntimeError("boom")


# ── evaluate_all ────────────────────────────────────────────────────────


class TestEvaluateAll:
    @pytest.mark.asyncio
    async def test_empty_when_no_rule_fires(self) -> None:
        """Default rules on a freshman with nothing tracked produce nothing."""
        engine = RuleEngine(default_rules())
        assert await engine.evaluate_all(_context(athlete=AthleteSnapshot(grade_level=9))) == []

    @pytest.mark.asyncio
    async def test_failing_rule_does_not_stop_later_rules(self) -> None:
        engine = RuleEngine(
            [
                FunctionRule("first", lambda ctx: _suggestion("first")),
                FunctionRule("broken", _raises),
                FunctionRule("none", lambda ctx: None),
                FunctionRule("last", lambda ctx: _suggestion("last")),
            ]
        )
        with patch("recruit_tracker.services.suggestions.engine.logger") as mock_logger:
            results = await engine.evaluate_all(_context())

        assert [s.rule_type for s in results] == ["first", "last"]
        mock_logger.exception.assert_called_once()
        assert "broken" in mock_logger.exception.call_args[0]

    @pytest.mark.asyncio
    async def test_list_results_are_flattened_in_order(self) -> None:
        engine = RuleEngine(
            [
                FunctionRule("a", lambda ctx: _suggestion("a")),
                FunctionRule("many", lambda ctx: [_suggestion("m1"), _suggestion("m2"), _suggestion("m3")]),
                FunctionRule("z", lambda ctx: _suggestion("z")),
            ]
        )
        results = await engine.evaluate_all(_context())
        assert [s.rule_type for s in results] == ["a", "m1", "m2", "m3", "z"]

    @pytest.mark.asyncio
    async def test_async_rules_keep_registration_order(self) -> None:
        """A slow coroutine rule registered first still comes first."""

        async def slow(ctx):
            await asyncio.sleep(0.05)
            return _suggestion("slow")

        async def failing(ctx):
            raise ValueError("rejected")

        engine = RuleEngine(
            [
                FunctionRule("slow", slow),
                FunctionRule("failing", failing),
                FunctionRule("fast", lambda ctx: _suggestion("fast")),
            ]
        )
        results = await engine.evaluate_all(_context())
        assert [s.rule_type for s in results] == ["slow", "fast"]

    @pytest.mark.asyncio
    async def test_add_rule_appends(self) -> None:
        engine = RuleEngine()
        engine.add_rule(FunctionRule("one", lambda ctx: _suggestion("one")))
        engine.add_rule(FunctionRule("two", lambda ctx: _suggestion("two")))
        results = await engine.evaluate_all(_context())
        assert [s.rule_type for s in results] == ["one", "two"]

    @pytest.mark.asyncio
    async def test_dict_results_are_validated(self) -> None:
        """A malformed candidate is treated as a rule fault."""
        engine = RuleEngine(
            [
                FunctionRule("ok", lambda ctx: {"rule_type": "ok", "urgency": "low", "message": "m"}),
                FunctionRule("bad", lambda ctx: {"rule_type": "bad", "urgency": "urgent", "message": "m"}),
            ]
        )
        results = await engine.evaluate_all(_context())
        assert [s.rule_type for s in results] == ["ok"]

    @pytest.mark.asyncio
    async def test_contact_rules_skipped_in_dead_period(self) -> None:
        schools = (SchoolRecord(id="s1", name="S1", priority="A", status="interested", division="D1"),)
        period = DeadPeriod("DI", TEST_AS_OF.date() - timedelta(days=1), TEST_AS_OF.date())
        ctx = _context(athlete=AthleteSnapshot(grade_level=10), schools=schools)

        rules = [InteractionGapRule(), MissingVideoRule(), PrioritySchoolReminderRule()]
        quiet = await RuleEngine(rules, dead_periods=[period]).evaluate_all(ctx)
        normal = await RuleEngine(rules).evaluate_all(ctx)

        assert [s.rule_type for s in quiet] == ["missing-video"]
        assert [s.rule_type for s in normal] == [
            "interaction-gap",
            "missing-video",
            "priority-school-reminder",
        ]

    @pytest.mark.asyncio
    async def test_function_rule_with_contact_id_skipped_in_dead_period(self) -> None:
        """A contact rule id marks a FunctionRule as a contact rule unless overridden."""
        schools = (SchoolRecord(id="s1", name="S1", division="D1"),)
        period = DeadPeriod("DI", TEST_AS_OF.date(), TEST_AS_OF.date())
        candidate = {"rule_type": "interaction-gap", "urgency": "high", "message": "m"}
        gap = FunctionRule("interaction-gap", lambda ctx: candidate)
        forced = FunctionRule(
            "custom-nudge",
            lambda ctx: {**candidate, "rule_type": "custom-nudge"},
            is_contact_rule=True,
        )
        plain = FunctionRule("plain", lambda ctx: {**candidate, "rule_type": "plain"})

        assert gap.is_contact_rule is True
        assert plain.is_contact_rule is False
        opted_out = FunctionRule("event-follow-up", lambda ctx: None, is_contact_rule=False)
        assert opted_out.is_contact_rule is False

        results = await RuleEngine([gap, forced, plain], dead_periods=[period]).evaluate_all(
            _context(schools=schools)
        )
        assert [s.rule_type for s in results] == ["plain"]


def test_default_rules_registration_order() -> None:
    assert [r.id for r in default_rules()] == [
        "ncaa-registration",
        "school-list-building",
        "official-visit",
        "formal-outreach",
        "showcase-attendance",
        "interaction-gap",
        "missing-video",
        "event-follow-up",
        "video-link-health",
        "portfolio-health",
        "priority-school-reminder",
    ]


@pytest.mark.parametrize(
    ("urgency", "expected"),
    [("low", "medium"), ("medium", "high"), ("high", "critical"), ("critical", "critical")],
)
def test_escalate_urgency(urgency: str, expected: str) -> None:
    assert escalate_urgency(urgency) == expected


# ── generate_suggestions ────────────────────────────────────────────────


class TestGenerateSuggestions:
    @pytest.mark.asyncio
    async def test_inserts_pending_rows_and_returns_count(self, db: Session) -> None:
        engine = RuleEngine(
            [
                FunctionRule("a", lambda ctx: _suggestion("a", "s1", "high")),
                FunctionRule("b", lambda ctx: _suggestion("b")),
            ]
        )
        count = await engine.generate_suggestions(db, TEST_ATHLETE_ID, _context())

        assert count == 2
        rows = db.query(Suggestion).order_by(Suggestion.rule_type).all()
        assert [r.rule_type for r in rows] == ["a", "b"]
        assert all(r.pending_surface for r in rows)
        assert all(r.surfaced_at is None for r in rows)
        assert rows[0].related_school_id == "s1"
        assert rows[0].urgency == "high"

    @pytest.mark.asyncio
    async def test_duplicates_are_not_counted(self, db: Session) -> None:
        engine = RuleEngine([FunctionRule("a", lambda ctx: _suggestion("a", "s1"))])

        assert await engine.generate_suggestions(db, TEST_ATHLETE_ID, _context()) == 1
        assert await engine.generate_suggestions(db, TEST_ATHLETE_ID, _context()) == 0
        assert db.query(Suggestion).count() == 1

    @pytest.mark.asyncio
    async def test_condition_snapshot_attached(self, db: Session) -> None:
        ctx = _context(
            athlete=AthleteSnapshot(grade_level=10),
            schools=(SchoolRecord(id="s1", name="S1", priority="A", status="visited"),),
            interactions=(
                InteractionRecord(school_id="s1", interaction_date=TEST_AS_OF - timedelta(days=30)),
            ),
        )
        count = await RuleEngine([InteractionGapRule()]).generate_suggestions(
            db, TEST_ATHLETE_ID, ctx
        )

        assert count == 1
        row = db.query(Suggestion).one()
        assert row.condition_snapshot == {
            "days_since_contact": 30,
            "school_priority": "A",
            "school_status": "visited",
        }

    @pytest.mark.asyncio
    async def test_insert_fault_is_skipped_and_not_counted(self, db: Session) -> None:
        engine = RuleEngine(
            [
                FunctionRule("a", lambda ctx: _suggestion("a")),
                FunctionRule("b", lambda ctx: _suggestion("b")),
            ]
        )
        real_commit = db.commit
        calls = {"n": 0}

        def flaky_commit():
            calls["n"] += 1
            if calls["n"] == 1:
                raise OperationalError("INSERT", {}, Exception("disk I/O error"))
            real_commit()

        with patch.object(db, "commit", side_effect=flaky_commit):
            count = await engine.generate_suggestions(db, TEST_ATHLETE_ID, _context())

        assert count == 1
        assert [r.rule_type for r in db.query(Suggestion).all()] == ["b"]


# ── re-evaluation of dismissed suggestions ──────────────────────────────


def _seed_dismissed(db: Session, days_ago: int, snapshot: dict, urgency: str = "high") -> Suggestion:
    row = Suggestion(
        athlete_id=TEST_ATHLETE_ID,
        rule_type="interaction-gap",
        urgency=urgency,
        message="old",
        action_type="log_interaction",
        related_school_id="s1",
        pending_surface=False,
        surfaced_at=TEST_AS_OF - timedelta(days=days_ago + 1),
        dismissed=True,
        dismissed_at=TEST_AS_OF - timedelta(days=days_ago),
        condition_snapshot=snapshot,
        created_at=TEST_AS_OF - timedelta(days=days_ago + 1),
    )
    db.add(row)
    db.commit()
    return row


def _gap_context(days_since_contact: int) -> RuleContext:
    return _context(
        athlete=AthleteSnapshot(grade_level=10),
        schools=(
            SchoolRecord(id="s2", name="Other", priority="A", status="interested"),
            SchoolRecord(id="s1", name="Rice", priority="A", status="interested"),
        ),
        interactions=(
            InteractionRecord(school_id="s2", interaction_date=TEST_AS_OF - timedelta(days=1)),
            InteractionRecord(
                school_id="s1", interaction_date=TEST_AS_OF - timedelta(days=days_since_contact)
            ),
        ),
    )


class TestReEvaluation:
    @pytest.mark.asyncio
    async def test_reappears_with_escalated_urgency(self, db: Session) -> None:
        dismissed = _seed_dismissed(db, days_ago=20, snapshot={"days_since_contact": 21, "school_priority": "A"})

        count = await RuleEngine([InteractionGapRule()]).generate_suggestions(
            db, TEST_ATHLETE_ID, _gap_context(40)
        )

        assert count == 1
        new = db.query(Suggestion).filter(Suggestion.reappeared.is_(True)).one()
        assert new.previous_suggestion_id == dismissed.id
        assert new.urgency == "critical"
        assert new.related_school_id == "s1"
        assert new.pending_surface is True
        assert new.condition_snapshot["days_since_contact"] == 40

    @pytest.mark.asyncio
    async def test_recently_dismissed_is_left_alone(self, db: Session) -> None:
        """Dismissed 5 days ago: too soon to re-evaluate, and still inside the duplicate window."""
        _seed_dismissed(db, days_ago=5, snapshot={"days_since_contact": 10, "school_priority": "A"})

        count = await RuleEngine([InteractionGapRule()]).generate_suggestions(
            db, TEST_ATHLETE_ID, _gap_context(40)
        )

        assert count == 0
        assert db.query(Suggestion).count() == 1

    @pytest.mark.asyncio
    async def test_reappears_only_once(self, db: Session) -> None:
        _seed_dismissed(db, days_ago=20, snapshot={"days_since_contact": 21, "school_priority": "A"})
        engine = RuleEngine([InteractionGapRule()])

        first = await engine.generate_suggestions(db, TEST_ATHLETE_ID, _gap_context(40))
        second = await engine.generate_suggestions(db, TEST_ATHLETE_ID, _gap_context(40))

        assert first == 1
        assert second == 0
        assert db.query(Suggestion).filter(Suggestion.reappeared.is_(True)).count() == 1

    @pytest.mark.asyncio
    async def test_small_gap_growth_does_not_reappear(self, db: Session) -> None:
        _seed_dismissed(db, days_ago=20, snapshot={"days_since_contact": 30, "school_priority": "A"})

        await RuleEngine([InteractionGapRule()]).generate_suggestions(
            db, TEST_ATHLETE_ID, _gap_context(40)
        )

        assert db.query(Suggestion).filter(Suggestion.reappeared.is_(True)).count() == 0
