"""Suggestion engine: rules, duplicate suppression, staggered surfacing and triggers."""

from recruit_tracker.services.suggestions.dedup import is_duplicate_suggestion
from recruit_tracker.services.suggestions.engine import RuleEngine, escalate_urgency
from recruit_tracker.services.suggestions.lifecycle import (
    complete_log_interaction_suggestions,
    complete_suggestion,
    dismiss_suggestion,
)
from recruit_tracker.services.suggestions.staggering import (
    get_pending_suggestion_count,
    get_surfaced_suggestions,
    surface_pending_suggestions,
)
from recruit_tracker.services.suggestions.trigger import (
    TriggerUpdateResult,
    build_default_engine,
    run_daily_refresh,
    trigger_suggestion_update,
)

__all__ = [
    "RuleEngine",
    "TriggerUpdateResult",
    "build_default_engine",
    "complete_log_interaction_suggestions",
    "complete_suggestion",
    "dismiss_suggestion",
    "escalate_urgency",
    "get_pending_suggestion_count",
    "get_surfaced_suggestions",
    "is_duplicate_suggestion",
    "run_daily_refresh",
    "surface_pending_suggestions",
    "trigger_suggestion_update",
]
