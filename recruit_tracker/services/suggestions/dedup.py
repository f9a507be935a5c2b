"""Duplicate suppression for suggestion candidates."""

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from recruit_tracker.models.suggestion import Suggestion
from recruit_tracker.schemas.suggestion import SuggestionData

logger = logging.getLogger(__name__)

DEFAULT_DUPLICATE_WINDOW_DAYS = 7


def is_duplicate_suggestion(
    db: Session,
    athlete_id: str,
    candidate: SuggestionData,
    window_days: int = DEFAULT_DUPLICATE_WINDOW_DAYS,
    as_of: datetime | None = None,
) -> bool:
    """Return True if an equivalent suggestion was created inside the window.

    Equivalent means same athlete and rule_type, and the same
    related_school_id when the candidate carries one. Rows count regardless
    of their lifecycle state, so a dismissed nudge is not re-raised inside
    the window.

    Query failures are logged and treated as "not a duplicate" (fail-open).
    """
    as_of = as_of or datetime.now(UTC)
    if as_of.tzinfo is None:
        as_of = as_of.replace(tzinfo=UTC)
    cutoff = as_of - timedelta(days=window_days)

    try:
        query = db.query(Suggestion.id).filter(
            Suggestion.athlete_id == athlete_id,
            Suggestion.rule_type == candidate.rule_type,
            Suggestion.created_at >= cutoff,
        )
        if candidate.related_school_id:
            query = query.filter(Suggestion.related_school_id == candidate.related_school_id)
        return query.first() is not None
    except SQLAlchemyError:
        logger.exception(
            "Duplicate check failed for athlete=%s rule=%s; allowing candidate",
            athlete_id,
            candidate.rule_type,
        )
        db.rollback()
        return False
