"""Suggestion rules and the default registration order."""

from recruit_tracker.services.suggestions.rules.base import FunctionRule, Rule, RuleResult
from recruit_tracker.services.suggestions.rules.contact_rules import (
    EventFollowUpRule,
    InteractionGapRule,
    PrioritySchoolReminderRule,
)
from recruit_tracker.services.suggestions.rules.phase_rules import (
    FormalOutreachRule,
    NcaaRegistrationRule,
    OfficialVisitRule,
    ShowcaseAttendanceRule,
)
from recruit_tracker.services.suggestions.rules.profile_rules import (
    MissingVideoRule,
    PortfolioHealthRule,
    SchoolListSizeRule,
    VideoLinkHealthRule,
)


def default_rules() -> list[Rule]:
    """Fresh instances of every rule, in registration order."""
    return [
        NcaaRegistrationRule(),
        SchoolListSizeRule(),
        OfficialVisitRule(),
        FormalOutreachRule(),
        ShowcaseAttendanceRule(),
        InteractionGapRule(),
        MissingVideoRule(),
        EventFollowUpRule(),
        VideoLinkHealthRule(),
        PortfolioHealthRule(),
        PrioritySchoolReminderRule(),
    ]


__all__ = [
    "EventFollowUpRule",
    "FormalOutreachRule",
    "FunctionRule",
    "InteractionGapRule",
    "MissingVideoRule",
    "NcaaRegistrationRule",
    "OfficialVisitRule",
    "PortfolioHealthRule",
    "PrioritySchoolReminderRule",
    "Rule",
    "RuleResult",
    "SchoolListSizeRule",
    "ShowcaseAttendanceRule",
    "VideoLinkHealthRule",
    "default_rules",
]
