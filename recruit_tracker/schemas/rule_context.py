"""Rule context schemas: the validated, read-only snapshot rules evaluate.

Upstream rows are validated once when the context is assembled so that rules
can rely on typed fields instead of re-checking loosely-typed records.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def _as_utc(value: datetime | None) -> datetime | None:
    """Naive datetimes (e.g. from SQLite) are treated as UTC."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


class _Record(BaseModel):
    model_config = ConfigDict(
        from_attributes=True,
        frozen=True,
        extra="ignore",
        populate_by_name=True,
    )


class AthleteSnapshot(BaseModel):
    """Athlete facts rules need; grade_level is derived from graduation year."""

    model_config = ConfigDict(frozen=True, extra="allow")

    grade_level: int | None = None
    graduation_year: int | None = None


class SchoolRecord(_Record):
    id: str
    name: str = ""
    priority: str | None = None
    status: str | None = None
    division: str | None = None
    fit_score: float | None = None


class InteractionRecord(_Record):
    id: str | None = None
    school_id: str | None = None
    coach_id: str | None = None
    interaction_date: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("interaction_date", "occurred_at"),
    )
    interaction_type: str | None = Field(
        default=None,
        validation_alias=AliasChoices("interaction_type", "type"),
    )
    related_event_id: str | None = None

    @field_validator("interaction_date")
    @classmethod
    def normalize_interaction_date(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class TaskRecord(_Record):
    id: str
    title: str = ""
    grade_level: int | None = None


class AthleteTaskRecord(_Record):
    task_id: str
    status: str | None = None


class VideoRecord(_Record):
    id: str | None = None
    title: str = ""
    health_status: str | None = None


class EventRecord(_Record):
    id: str | None = None
    name: str = ""
    event_date: datetime | None = None
    attended: bool = False
    school_id: str | None = None

    @field_validator("event_date")
    @classmethod
    def normalize_event_date(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value)


class RuleContext(BaseModel):
    """Snapshot of athlete facts for one evaluation cycle.

    Collections are tuples and default to empty, never None. ``as_of`` is the
    reference "now" so rule output depends only on the context.
    """

    model_config = ConfigDict(frozen=True)

    athlete_id: str
    athlete: AthleteSnapshot = Field(default_factory=AthleteSnapshot)
    schools: tuple[SchoolRecord, ...] = ()
    interactions: tuple[InteractionRecord, ...] = ()
    tasks: tuple[TaskRecord, ...] = ()
    athlete_tasks: tuple[AthleteTaskRecord, ...] = ()
    videos: tuple[VideoRecord, ...] = ()
    events: tuple[EventRecord, ...] = ()
    as_of: datetime = Field(default_factory=lambda: datetime.now(UTC))

    @field_validator("as_of")
    @classmethod
    def normalize_as_of(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @property
    def grade_level(self) -> int:
        """Athlete grade, defaulting to 9 (freshman) when unknown."""
        return self.athlete.grade_level or 9
