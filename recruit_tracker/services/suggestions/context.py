"""Assemble the RuleContext for an athlete.

The seven reads are independent; each runs on a worker thread with its own
Session and the caller waits for all of them. Any failed read fails the
whole assembly.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from datetime import UTC, datetime
from typing import Any, TypeVar

from sqlalchemy.orm import Session

from recruit_tracker.models.event import Event
from recruit_tracker.models.interaction import Interaction
from recruit_tracker.models.school import School
from recruit_tracker.models.task import AthleteTask, Task
from recruit_tracker.models.user_preference import UserPreference
from recruit_tracker.models.video import Video
from recruit_tracker.schemas.rule_context import (
    AthleteSnapshot,
    AthleteTaskRecord,
    EventRecord,
    InteractionRecord,
    RuleContext,
    SchoolRecord,
    TaskRecord,
    VideoRecord,
)
from recruit_tracker.services.grade import calculate_current_grade

logger = logging.getLogger(__name__)

PLAYER_PREFERENCE_CATEGORY = "player"

T = TypeVar("T")


def _read_player_preferences(db: Session, athlete_id: str) -> dict[str, Any]:
    pref = (
        db.query(UserPreference)
        .filter(
            UserPreference.user_id == athlete_id,
            UserPreference.category == PLAYER_PREFERENCE_CATEGORY,
        )
        .first()
    )
    return dict(pref.data or {}) if pref is not None else {}


def _read_schools(db: Session, athlete_id: str) -> list[SchoolRecord]:
    rows = db.query(School).filter(School.user_id == athlete_id).all()
    return [SchoolRecord.model_validate(r) for r in rows]


def _read_interactions(db: Session, athlete_id: str) -> list[InteractionRecord]:
    rows = db.query(Interaction).filter(Interaction.logged_by == athlete_id).all()
    return [InteractionRecord.model_validate(r) for r in rows]


def _read_tasks(db: Session, athlete_id: str) -> list[TaskRecord]:
    return [TaskRecord.model_validate(r) for r in db.query(Task).all()]


def _read_athlete_tasks(db: Session, athlete_id: str) -> list[AthleteTaskRecord]:
    rows = db.query(AthleteTask).filter(AthleteTask.athlete_id == athlete_id).all()
    return [AthleteTaskRecord.model_validate(r) for r in rows]


def _read_events(db: Session, athlete_id: str) -> list[EventRecord]:
    rows = db.query(Event).filter(Event.user_id == athlete_id).all()
    return [EventRecord.model_validate(r) for r in rows]


def _read_videos(db: Session, athlete_id: str) -> list[VideoRecord]:
    rows = db.query(Video).filter(Video.athlete_id == athlete_id).all()
    return [VideoRecord.model_validate(r) for r in rows]


def _run_read(
    session_factory: Callable[[], Session],
    read: Callable[[Session, str], T],
    athlete_id: str,
) -> T:
    db = session_factory()
    try:
        return read(db, athlete_id)
    finally:
        db.close()


def build_athlete_snapshot(preferences: dict[str, Any], as_of: datetime) -> AthleteSnapshot:
    """Athlete facts from the player preference blob; grade derives from graduation_year."""
    base = AthleteSnapshot.model_validate(
        {k: v for k, v in preferences.items() if k != "grade_level"}
    )
    grade = calculate_current_grade(base.graduation_year, today=as_of.date())
    return base.model_copy(update={"grade_level": grade})


async def assemble_rule_context(
    session_factory: Callable[[], Session],
    athlete_id: str,
    as_of: datetime | None = None,
) -> RuleContext:
    """Fetch athlete data concurrently and build a validated RuleContext."""
    as_of = as_of or datetime.now(UTC)
    if as_of.tzinfo is None:
        as_of = as_of.replace(tzinfo=UTC)

    reads = (
        _read_player_preferences,
        _read_schools,
        _read_interactions,
        _read_tasks,
        _read_athlete_tasks,
        _read_events,
        _read_videos,
    )
    (
        preferences,
        schools,
        interactions,
        tasks,
        athlete_tasks,
        events,
        videos,
    ) = await asyncio.gather(
        *(asyncio.to_thread(_run_read, session_factory, read, athlete_id) for read in reads)
    )

    context = RuleContext(
        athlete_id=athlete_id,
        athlete=build_athlete_snapshot(preferences, as_of),
        schools=tuple(schools),
        interactions=tuple(interactions),
        tasks=tuple(tasks),
        athlete_tasks=tuple(athlete_tasks),
        videos=tuple(videos),
        events=tuple(events),
        as_of=as_of,
    )
    logger.debug(
        "Assembled context for athlete %s: grade=%d schools=%d interactions=%d events=%d",
        athlete_id,
        context.grade_level,
        len(schools),
        len(interactions),
        len(events),
    )
    return context
