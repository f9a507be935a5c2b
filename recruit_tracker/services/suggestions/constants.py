"""Suggestion engine constants and thresholds.

Deterministic rule thresholds. No ML.
"""

from __future__ import annotations

# ── Urgency ──────────────────────────────────────────────────────────────

URGENCY_LEVELS: tuple[str, ...] = ("low", "medium", "high", "critical")
URGENCY_RANK: dict[str, int] = {level: i for i, level in enumerate(URGENCY_LEVELS)}

# ── Actions ──────────────────────────────────────────────────────────────

ACTION_LOG_INTERACTION = "log_interaction"
ACTION_ADD_VIDEO = "add_video"
ACTION_ADD_SCHOOL = "add_school"
ACTION_UPDATE_VIDEO = "update_video"
ACTION_UPDATE_TASK = "update_task"

# ── Trigger reasons ──────────────────────────────────────────────────────

REASON_PROFILE_CHANGE = "profile_change"
REASON_INTERACTION_LOGGED = "interaction_logged"
REASON_DAILY_REFRESH = "daily_refresh"
TRIGGER_REASONS: frozenset[str] = frozenset(
    {REASON_PROFILE_CHANGE, REASON_INTERACTION_LOGGED, REASON_DAILY_REFRESH}
)

# ── Surfacing locations ──────────────────────────────────────────────────

LOCATION_DASHBOARD = "dashboard"
LOCATION_SCHOOL_DETAIL = "school_detail"
LOCATION_LIMITS: dict[str, int] = {LOCATION_DASHBOARD: 3, LOCATION_SCHOOL_DETAIL: 2}

# ── Rule thresholds ──────────────────────────────────────────────────────

NO_CONTACT_DAYS: int = 999  # days-since-contact when a school has no interactions
CONTACT_RULE_IDS: frozenset[str] = frozenset(
    {"interaction-gap", "priority-school-reminder", "event-follow-up"}
)
PRIORITY_TIERS: frozenset[str] = frozenset({"A", "B"})
ACTIVE_SCHOOL_STATUSES: frozenset[str] = frozenset({"interested", "contacted", "visited"})

INTERACTION_GAP_DAYS: int = 21
PRIORITY_REMINDER_DAYS: int = 14
REEVALUATE_GAP_GROWTH_DAYS: int = 14  # gap growth that re-raises a dismissed contact nudge

EVENT_FOLLOW_UP_WINDOW_DAYS: int = 7
PORTFOLIO_STRONG_FIT_SCORE: float = 50
TARGET_SCHOOL_LIST_SIZE: int = 20
SHOWCASE_MAX_AGE_MONTHS: int = 6

FORMAL_OUTREACH_AVG_DAYS: int = 30
FORMAL_OUTREACH_MAX_DAYS: int = 45
OFFICIAL_VISIT_MIN_COUNT: int = 2
OFFICIAL_VISIT_KEYWORDS: tuple[str, ...] = ("official", "visit")

NCAA_REGISTRATION_TASK_ID = "task-11-a3"
NCAA_SCHOLARSHIP_DIVISIONS: frozenset[str] = frozenset({"D1", "DI", "D2", "DII"})

# ── Grades ───────────────────────────────────────────────────────────────

GRADE_FRESHMAN = 9
GRADE_SOPHOMORE = 10
GRADE_JUNIOR = 11
GRADE_SENIOR = 12
