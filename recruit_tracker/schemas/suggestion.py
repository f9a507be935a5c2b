"""Suggestion schemas: rule candidates, API reads and trigger bodies."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

Urgency = Literal["low", "medium", "high", "critical"]
ActionType = Literal["log_interaction", "add_video", "add_school", "update_video", "update_task"]
TriggerReason = Literal["profile_change", "interaction_logged", "daily_refresh"]


class SuggestionData(BaseModel):
    """Candidate suggestion produced by a rule, before persistence."""

    model_config = ConfigDict(frozen=True)

    rule_type: str
    urgency: Urgency
    message: str
    action_type: ActionType | None = None
    related_school_id: str | None = None
    related_task_id: str | None = None

    # Set only when a dismissed suggestion is re-raised
    reappeared: bool = False
    previous_suggestion_id: str | None = None
    condition_snapshot: dict[str, Any] | None = None


class SuggestionRead(BaseModel):
    """Persisted suggestion as returned by the API."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    athlete_id: str
    rule_type: str
    urgency: str
    message: str
    action_type: str | None = None
    related_school_id: str | None = None
    related_task_id: str | None = None
    pending_surface: bool
    surfaced_at: datetime | None = None
    dismissed: bool = False
    completed: bool = False
    reappeared: bool = False
    created_at: datetime


class TriggerSuggestionRequest(BaseModel):
    """Body for POST /internal/suggestions/trigger."""

    athlete_id: str = Field(..., min_length=1)
    reason: TriggerReason
    interaction_school_id: str | None = None
    interaction_coach_id: str | None = None


class TriggerSuggestionResponse(BaseModel):
    generated: int
    surfaced: int
    reason: str
