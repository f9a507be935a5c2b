"""Suggestion trigger: one generate-and-surface cycle for an athlete.

Called when profile data changes, when an interaction is logged and by the
daily refresh job. Foreground and caller-awaited: context or engine failures
are logged and re-raised.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy.orm import Session

from recruit_tracker.config import Settings, get_settings
from recruit_tracker.models.user_preference import UserPreference
from recruit_tracker.services.suggestions.constants import (
    REASON_DAILY_REFRESH,
    REASON_INTERACTION_LOGGED,
    TRIGGER_REASONS,
)
from recruit_tracker.services.suggestions.context import (
    PLAYER_PREFERENCE_CATEGORY,
    assemble_rule_context,
)
from recruit_tracker.services.suggestions.dead_period import parse_dead_periods
from recruit_tracker.services.suggestions.engine import RuleEngine
from recruit_tracker.services.suggestions.lifecycle import complete_log_interaction_suggestions
from recruit_tracker.services.suggestions.rules import default_rules
from recruit_tracker.services.suggestions.staggering import surface_pending_suggestions

logger = logging.getLogger(__name__)


@dataclass
class TriggerUpdateResult:
    generated: int
    surfaced: int
    reason: str


def build_default_engine(settings: Settings | None = None) -> RuleEngine:
    """RuleEngine with every rule registered and thresholds from settings."""
    settings = settings or get_settings()
    return RuleEngine(
        default_rules(),
        dead_periods=parse_dead_periods(settings.suggestion_dead_periods),
        duplicate_window_days=settings.suggestion_duplicate_window_days,
        reevaluate_after_days=settings.suggestion_reevaluate_after_days,
    )


async def trigger_suggestion_update(
    session_factory: Callable[[], Session],
    athlete_id: str,
    reason: str,
    options: Mapping[str, Any] | None = None,
    *,
    engine: RuleEngine | None = None,
    as_of: datetime | None = None,
) -> TriggerUpdateResult:
    """Re-evaluate suggestions for ``athlete_id`` and surface pending ones.

    Args:
        session_factory: Callable returning a new Session (e.g. SessionLocal).
        athlete_id: Athlete to evaluate.
        reason: profile_change | interaction_logged | daily_refresh.
        options: For interaction_logged, ``interaction_school_id`` and/or
            ``interaction_coach_id`` of the interaction just logged.
        engine: RuleEngine to use; defaults to every rule.
        as_of: Reference time for rule evaluation; defaults to now.

    Raises:
        ValueError: reason is not one of the known trigger reasons.
    """
    if reason not in TRIGGER_REASONS:
        raise ValueError(f"Invalid trigger reason: {reason}")

    settings = get_settings()
    options = options or {}

    try:
        context = await assemble_rule_context(session_factory, athlete_id, as_of=as_of)
    except Exception:
        logger.exception("Suggestion context assembly failed for athlete %s", athlete_id)
        raise

    engine = engine or build_default_engine(settings)

    db = session_factory()
    try:
        school_id = options.get("interaction_school_id")
        coach_id = options.get("interaction_coach_id")
        if reason == REASON_INTERACTION_LOGGED and (school_id or coach_id):
            complete_log_interaction_suggestions(
                db,
                athlete_id,
                school_id=school_id,
                strict=settings.suggestion_autocomplete_strict,
            )

        generated = await engine.generate_suggestions(db, athlete_id, context)
        surfaced = surface_pending_suggestions(
            db, athlete_id, limit=settings.suggestion_surface_limit
        )
    except Exception:
        logger.exception("Suggestion update failed for athlete %s (reason=%s)", athlete_id, reason)
        raise
    finally:
        db.close()

    logger.info(
        "Suggestion update athlete=%s reason=%s generated=%d surfaced=%d",
        athlete_id,
        reason,
        generated,
        surfaced,
    )
    return TriggerUpdateResult(generated=generated, surfaced=surfaced, reason=reason)


def _list_athlete_ids(session_factory: Callable[[], Session]) -> list[str]:
    db = session_factory()
    try:
        rows = (
            db.query(UserPreference.user_id)
            .filter(UserPreference.category == PLAYER_PREFERENCE_CATEGORY)
            .order_by(UserPreference.user_id)
            .distinct()
            .all()
        )
        return [r[0] for r in rows]
    finally:
        db.close()


async def run_daily_refresh(
    session_factory: Callable[[], Session],
    *,
    as_of: datetime | None = None,
) -> dict[str, Any]:
    """Run the daily_refresh trigger for every athlete with a player profile.

    A failing athlete is logged and counted; the batch continues.
    """
    athlete_ids = _list_athlete_ids(session_factory)
    engine = build_default_engine()

    processed = 0
    failed = 0
    generated = 0
    surfaced = 0
    for athlete_id in athlete_ids:
        try:
            result = await trigger_suggestion_update(
                session_factory,
                athlete_id,
                REASON_DAILY_REFRESH,
                engine=engine,
                as_of=as_of,
            )
        except Exception:
            logger.exception("Daily suggestion refresh failed for athlete %s", athlete_id)
            failed += 1
            continue
        processed += 1
        generated += result.generated
        surfaced += result.surfaced

    status = "completed" if failed == 0 else "completed_with_errors"
    logger.info(
        "Daily suggestion refresh %s: athletes=%d failed=%d generated=%d surfaced=%d",
        status,
        processed,
        failed,
        generated,
        surfaced,
    )
    return {
        "status": status,
        "athletes_processed": processed,
        "athletes_failed": failed,
        "suggestions_generated": generated,
        "suggestions_surfaced": surfaced,
    }
