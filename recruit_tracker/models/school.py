"""School model - a school on an athlete's recruiting list."""

from __future__ import annotations

import uuid
from datetime import UTC, datetime

from sqlalchemy import DateTime, Float, String
from sqlalchemy.orm import Mapped, mapped_column

from recruit_tracker.db.session import Base


class School(Base):
    """School the athlete is tracking, with priority tier and fit score."""

    __tablename__ = "schools"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    user_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    priority: Mapped[str | None] = mapped_column(String(8), nullable=True)  # A, B, C
    status: Mapped[str | None] = mapped_column(String(32), nullable=True)
    division: Mapped[str | None] = mapped_column(String(16), nullable=True)
    fit_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        nullable=False,
    )
