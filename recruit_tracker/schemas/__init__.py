"""Pydantic schemas."""

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
from recruit_tracker.schemas.suggestion import (
    SuggestionData,
    SuggestionRead,
    TriggerSuggestionRequest,
    TriggerSuggestionResponse,
)

__all__ = [
    "AthleteSnapshot",
    "AthleteTaskRecord",
    "EventRecord",
    "InteractionRecord",
    "RuleContext",
    "SchoolRecord",
    "SuggestionData",
    "SuggestionRead",
    "TaskRecord",
    "TriggerSuggestionRequest",
    "TriggerSuggestionResponse",
    "VideoRecord",
]
