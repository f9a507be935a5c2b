"""Staggered surfacing: promote a few pending suggestions at a time.

Pending rows are promoted highest urgency first, oldest first within an
urgency, so long-standing nudges are not starved by newer ones.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime

from sqlalchemy import case, func
from sqlalchemy.orm import Session

from recruit_tracker.models.suggestion import Suggestion
from recruit_tracker.services.suggestions.constants import (
    LOCATION_LIMITS,
    LOCATION_SCHOOL_DETAIL,
    URGENCY_RANK,
)

logger = logging.getLogger(__name__)

DEFAULT_SURFACE_LIMIT = 3


def urgency_rank():
    """SQL expression ranking urgency (critical highest, unknown lowest)."""
    return case(URGENCY_RANK, value=Suggestion.urgency, else_=-1)


def _open_filters(athlete_id: str) -> tuple:
    return (
        Suggestion.athlete_id == athlete_id,
        Suggestion.dismissed.is_(False),
        Suggestion.completed.is_(False),
    )


def surface_pending_suggestions(
    db: Session,
    athlete_id: str,
    limit: int = DEFAULT_SURFACE_LIMIT,
    as_of: datetime | None = None,
) -> int:
    """Promote up to ``limit`` pending suggestions to surfaced.

    Returns the number surfaced (0 when nothing is pending).
    """
    if limit <= 0:
        return 0

    rows = (
        db.query(Suggestion)
        .filter(*_open_filters(athlete_id), Suggestion.pending_surface.is_(True))
        .order_by(urgency_rank().desc(), Suggestion.created_at.asc(), Suggestion.id.asc())
        .limit(limit)
        .all()
    )
    if not rows:
        return 0

    surfaced_at = as_of or datetime.now(UTC)
    for row in rows:
        row.pending_surface = False
        row.surfaced_at = surfaced_at
    db.commit()

    logger.info("Surfaced %d suggestion(s) for athlete %s", len(rows), athlete_id)
    return len(rows)


def get_surfaced_suggestions(
    db: Session,
    athlete_id: str,
    location: str,
    school_id: str | None = None,
) -> list[Suggestion]:
    """Open surfaced suggestions for a UI location.

    "dashboard" returns at most 3; "school_detail" returns at most 2 tagged
    to ``school_id``, or nothing when no school is given. Raises ValueError
    for any other location.
    """
    if location not in LOCATION_LIMITS:
        raise ValueError(f"Unknown suggestion location: {location}")
    if location == LOCATION_SCHOOL_DETAIL and not school_id:
        return []

    query = db.query(Suggestion).filter(
        *_open_filters(athlete_id), Suggestion.pending_surface.is_(False)
    )
    if location == LOCATION_SCHOOL_DETAIL:
        query = query.filter(Suggestion.related_school_id == school_id)

    return (
        query.order_by(urgency_rank().desc(), Suggestion.surfaced_at.desc())
        .limit(LOCATION_LIMITS[location])
        .all()
    )


def get_pending_suggestion_count(db: Session, athlete_id: str) -> int:
    """Number of open suggestions still waiting to be surfaced."""
    return (
        db.query(func.count(Suggestion.id))
        .filter(*_open_filters(athlete_id), Suggestion.pending_surface.is_(True))
        .scalar()
        or 0
    )
