"""Suggestion lifecycle: dismiss and complete.

Both states are terminal. A dismissed or completed row is never reopened;
the rule engine may create a new row later instead.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from recruit_tracker.models.suggestion import Suggestion
from recruit_tracker.services.suggestions.constants import ACTION_LOG_INTERACTION

logger = logging.getLogger(__name__)


def _get_owned(db: Session, athlete_id: str, suggestion_id: str) -> Suggestion | None:
    return (
        db.query(Suggestion)
        .filter(Suggestion.id == suggestion_id, Suggestion.athlete_id == athlete_id)
        .first()
    )


def dismiss_suggestion(
    db: Session,
    athlete_id: str,
    suggestion_id: str,
    as_of: datetime | None = None,
) -> Suggestion | None:
    """Dismiss an open suggestion. No-op on terminal rows; None if not found."""
    suggestion = _get_owned(db, athlete_id, suggestion_id)
    if suggestion is None:
        return None
    if not suggestion.is_open:
        return suggestion

    suggestion.dismissed = True
    suggestion.dismissed_at = as_of or datetime.now(UTC)
    db.commit()
    db.refresh(suggestion)
    logger.info("Suggestion %s dismissed by athlete %s", suggestion_id, athlete_id)
    return suggestion


def complete_suggestion(
    db: Session,
    athlete_id: str,
    suggestion_id: str,
    as_of: datetime | None = None,
) -> Suggestion | None:
    """Complete an open suggestion. No-op on terminal rows; None if not found."""
    suggestion = _get_owned(db, athlete_id, suggestion_id)
    if suggestion is None:
        return None
    if not suggestion.is_open:
        return suggestion

    suggestion.completed = True
    suggestion.completed_at = as_of or datetime.now(UTC)
    db.commit()
    db.refresh(suggestion)
    logger.info("Suggestion %s completed by athlete %s", suggestion_id, athlete_id)
    return suggestion


def complete_log_interaction_suggestions(
    db: Session,
    athlete_id: str,
    school_id: str | None = None,
    strict: bool = False,
    as_of: datetime | None = None,
) -> int:
    """Complete open log_interaction suggestions after an interaction is logged.

    By default every open log_interaction suggestion for the athlete is
    completed, whichever school it concerns. With ``strict`` only those
    tagged to ``school_id`` are. Returns the number completed.
    """
    query = db.query(Suggestion).filter(
        Suggestion.athlete_id == athlete_id,
        Suggestion.action_type == ACTION_LOG_INTERACTION,
        Suggestion.completed.is_(False),
        Suggestion.dismissed.is_(False),
    )
    if strict:
        if not school_id:
            return 0
        query = query.filter(Suggestion.related_school_id == school_id)

    rows = query.all()
    if not rows:
        return 0

    completed_at = as_of or datetime.now(UTC)
    for row in rows:
        row.completed = True
        row.completed_at = completed_at
    db.commit()

    logger.info(
        "Auto-completed %d log_interaction suggestion(s) for athlete %s (strict=%s)",
        len(rows),
        athlete_id,
        strict,
    )
    return len(rows)
