"""Video model - highlight videos linked from the athlete profile."""

from __future__ import annotations

import uuid

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from recruit_tracker.db.session import Base


class Video(Base):
    """Highlight video with the result of the last link health check."""

    __tablename__ = "videos"

    id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=lambda: str(uuid.uuid4())
    )
    athlete_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    url: Mapped[str | None] = mapped_column(String(2048), nullable=True)
    health_status: Mapped[str | None] = mapped_column(String(32), nullable=True)  # ok, broken
