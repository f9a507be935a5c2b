"""Rule engine: evaluate rules over a context and persist new suggestions.

Rules run concurrently; output is flattened in rule-registration order. A
failing rule is logged and contributes nothing.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Iterable
from datetime import timedelta

from sqlalchemy import exists
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, aliased

from recruit_tracker.models.suggestion import Suggestion
from recruit_tracker.schemas.rule_context import RuleContext
from recruit_tracker.schemas.suggestion import SuggestionData
from recruit_tracker.services.suggestions.constants import URGENCY_LEVELS
from recruit_tracker.services.suggestions.dead_period import (
    DeadPeriod,
    all_schools_in_dead_period,
)
from recruit_tracker.services.suggestions.dedup import (
    DEFAULT_DUPLICATE_WINDOW_DAYS,
    is_duplicate_suggestion,
)
from recruit_tracker.services.suggestions.rules.base import Rule

logger = logging.getLogger(__name__)

DEFAULT_REEVALUATE_AFTER_DAYS = 14


def escalate_urgency(urgency: str) -> str:
    """One tier up from ``urgency``, capped at critical."""
    if urgency not in URGENCY_LEVELS:
        return "medium"
    idx = URGENCY_LEVELS.index(urgency)
    return URGENCY_LEVELS[min(idx + 1, len(URGENCY_LEVELS) - 1)]


def _as_candidates(result) -> list[SuggestionData]:
    if result is None:
        return []
    items = result if isinstance(result, (list, tuple)) else [result]
    return [
        item if isinstance(item, SuggestionData) else SuggestionData.model_validate(item)
        for item in items
        if item is not None
    ]


async def _maybe_await(value):
    if inspect.isawaitable(value):
        return await value
    return value


class RuleEngine:
    """Ordered collection of rules plus the generate/persist cycle."""

    def __init__(
        self,
        rules: Iterable[Rule] | None = None,
        *,
        dead_periods: Iterable[DeadPeriod] = (),
        duplicate_window_days: int = DEFAULT_DUPLICATE_WINDOW_DAYS,
        reevaluate_after_days: int = DEFAULT_REEVALUATE_AFTER_DAYS,
    ) -> None:
        self.rules: list[Rule] = list(rules or [])
        self.dead_periods: list[DeadPeriod] = list(dead_periods)
        self.duplicate_window_days = duplicate_window_days
        self.reevaluate_after_days = reevaluate_after_days

    def add_rule(self, rule: Rule) -> None:
        self.rules.append(rule)

    def _active_rules(self, context: RuleContext) -> list[Rule]:
        if not all_schools_in_dead_period(context, self.dead_periods):
            return list(self.rules)
        skipped = [r.id for r in self.rules if r.is_contact_rule]
        if skipped:
            logger.info(
                "Dead period for athlete %s; skipping contact rules %s",
                context.athlete_id,
                ", ".join(skipped),
            )
        return [r for r in self.rules if not r.is_contact_rule]

    async def _evaluate_rule(self, rule: Rule, context: RuleContext) -> list[SuggestionData]:
        try:
            return _as_candidates(await _maybe_await(rule.evaluate(context)))
        except Exception:
            logger.exception("Rule %s failed during evaluation", rule.id)
            return []

    async def _evaluate_with_rules(
        self, context: RuleContext
    ) -> list[tuple[Rule, SuggestionData]]:
        rules = self._active_rules(context)
        batches = await asyncio.gather(*(self._evaluate_rule(r, context) for r in rules))
        return [(rule, s) for rule, batch in zip(rules, batches) for s in batch]

    async def evaluate_all(self, context: RuleContext) -> list[SuggestionData]:
        """Run every rule; return candidates flattened in registration order."""
        return [s for _, s in await self._evaluate_with_rules(context)]

    def _snapshot(
        self, rule: Rule, context: RuleContext, related_school_id: str | None
    ) -> dict | None:
        try:
            return rule.create_condition_snapshot(context, related_school_id)
        except Exception:
            logger.exception("Rule %s failed to build condition snapshot", rule.id)
            return None

    def _insert(
        self,
        db: Session,
        athlete_id: str,
        candidate: SuggestionData,
        snapshot: dict | None,
    ) -> bool:
        row = Suggestion(
            athlete_id=athlete_id,
            rule_type=candidate.rule_type,
            urgency=candidate.urgency,
            message=candidate.message,
            action_type=candidate.action_type,
            related_school_id=candidate.related_school_id,
            related_task_id=candidate.related_task_id,
            pending_surface=True,
            condition_snapshot=candidate.condition_snapshot or snapshot,
            reappeared=candidate.reappeared,
            previous_suggestion_id=candidate.previous_suggestion_id,
        )
        try:
            db.add(row)
            db.commit()
        except SQLAlchemyError:
            db.rollback()
            logger.exception(
                "Failed to insert suggestion rule=%s athlete=%s",
                candidate.rule_type,
                athlete_id,
            )
            return False
        return True

    def _persist(
        self,
        db: Session,
        athlete_id: str,
        rule: Rule,
        candidate: SuggestionData,
        context: RuleContext,
    ) -> bool:
        if is_duplicate_suggestion(
            db,
            athlete_id,
            candidate,
            window_days=self.duplicate_window_days,
            as_of=context.as_of,
        ):
            logger.debug(
                "Skipping duplicate suggestion rule=%s school=%s athlete=%s",
                candidate.rule_type,
                candidate.related_school_id,
                athlete_id,
            )
            return False
        snapshot = self._snapshot(rule, context, candidate.related_school_id)
        return self._insert(db, athlete_id, candidate, snapshot)

    def _dismissed_for_review(
        self, db: Session, athlete_id: str, context: RuleContext
    ) -> list[Suggestion]:
        cutoff = context.as_of - timedelta(days=self.reevaluate_after_days)
        follow_up = aliased(Suggestion)
        try:
            return (
                db.query(Suggestion)
                .filter(
                    Suggestion.athlete_id == athlete_id,
                    Suggestion.dismissed.is_(True),
                    Suggestion.completed.is_(False),
                    Suggestion.dismissed_at.is_not(None),
                    Suggestion.dismissed_at <= cutoff,
                    ~exists().where(follow_up.previous_suggestion_id == Suggestion.id),
                )
                .order_by(Suggestion.dismissed_at.asc())
                .all()
            )
        except SQLAlchemyError:
            logger.exception("Failed to load dismissed suggestions for athlete %s", athlete_id)
            db.rollback()
            return []

    async def re_evaluate_dismissed(
        self, db: Session, athlete_id: str, context: RuleContext
    ) -> int:
        """Re-raise dismissed suggestions whose rule asks for it.

        The rule is re-run on a context narrowed to the dismissed row's school;
        a matching candidate is stored with ``reappeared=True``, a link to the
        dismissed row and urgency escalated one tier. Returns rows inserted.
        """
        rules_by_id = {r.id: r for r in self._active_rules(context)}
        inserted = 0
        for dismissed in self._dismissed_for_review(db, athlete_id, context):
            rule = rules_by_id.get(dismissed.rule_type)
            if rule is None:
                continue
            try:
                wanted = await _maybe_await(rule.should_re_evaluate(dismissed, context))
            except Exception:
                logger.exception("Rule %s failed in should_re_evaluate", rule.id)
                continue
            if not wanted:
                continue

            narrowed = context
            if dismissed.related_school_id:
                narrowed = context.model_copy(
                    update={
                        "schools": tuple(
                            s for s in context.schools if s.id == dismissed.related_school_id
                        )
                    }
                )
            candidate = next(
                (
                    c
                    for c in await self._evaluate_rule(rule, narrowed)
                    if c.related_school_id == dismissed.related_school_id
                ),
                None,
            )
            if candidate is None:
                continue

            candidate = candidate.model_copy(
                update={
                    "urgency": escalate_urgency(dismissed.urgency),
                    "reappeared": True,
                    "previous_suggestion_id": dismissed.id,
                }
            )
            if self._persist(db, athlete_id, rule, candidate, context):
                logger.info(
                    "Re-raised dismissed suggestion %s (rule=%s) for athlete %s",
                    dismissed.id,
                    rule.id,
                    athlete_id,
                )
                inserted += 1
        return inserted

    async def generate_suggestions(
        self, db: Session, athlete_id: str, context: RuleContext
    ) -> int:
        """Evaluate, suppress duplicates and persist; return rows actually inserted."""
        inserted = await self.re_evaluate_dismissed(db, athlete_id, context)

        for rule, candidate in await self._evaluate_with_rules(context):
            if self._persist(db, athlete_id, rule, candidate, context):
                inserted += 1

        logger.info("Generated %d suggestion(s) for athlete %s", inserted, athlete_id)
        return inserted
