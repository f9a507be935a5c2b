"""Suggestion model - rule-generated nudges and their surfacing lifecycle."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import JSON, Boolean, DateTime, ForeignKey, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from recruit_tracker.db.session import Base


class Suggestion(Base):
    """Suggestion generated by the rule engine.

    Created pending (pending_surface=True), promoted by the staggering policy
    (surfaced_at set), then terminated by dismissed or completed.
    """

    __tablename__ = "suggestions"
    __table_args__ = (
        Index("ix_suggestions_athlete_rule_created", "athlete_id", "rule_type", "created_at"),
        Index("ix_suggestions_athlete_pending", "athlete_id", "pending_surface"),
    )

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    athlete_id: Mapped[str] = mapped_column(String(36), nullable=False)
    rule_type: Mapped[str] = mapped_column(String(64), nullable=False)
    urgency: Mapped[str] = mapped_column(String(16), nullable=False)
    message: Mapped[str] = mapped_column(Text, nullable=False)
    action_type: Mapped[str | None] = mapped_column(String(32), nullable=True)
    related_school_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    related_task_id: Mapped[str | None] = mapped_column(String(64), nullable=True)

    pending_surface: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    surfaced_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    dismissed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    dismissed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    # Re-evaluation of dismissed suggestions
    condition_snapshot: Mapped[dict | None] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"), nullable=True
    )
    reappeared: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    previous_suggestion_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("suggestions.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
    updated_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), onupdate=lambda: datetime.now(UTC), nullable=True
    )

    @property
    def is_open(self) -> bool:
        """True while neither dismissed nor completed."""
        return not self.dismissed and not self.completed
