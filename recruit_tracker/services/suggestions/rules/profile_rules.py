"""Profile rules: videos and the shape of the school list."""

from __future__ import annotations

from recruit_tracker.schemas.rule_context import RuleContext
from recruit_tracker.schemas.suggestion import SuggestionData
from recruit_tracker.services.suggestions.constants import (
    ACTION_ADD_SCHOOL,
    ACTION_ADD_VIDEO,
    ACTION_UPDATE_VIDEO,
    GRADE_JUNIOR,
    GRADE_SOPHOMORE,
    PORTFOLIO_STRONG_FIT_SCORE,
    TARGET_SCHOOL_LIST_SIZE,
)
from recruit_tracker.services.suggestions.rules.base import Rule


class MissingVideoRule(Rule):
    id = "missing-video"
    name = "Missing Highlight Video"
    description = "Athlete is sophomore or beyond without highlight video"

    def evaluate(self, context: RuleContext) -> SuggestionData | None:
        if context.grade_level >= GRADE_SOPHOMORE and not context.videos:
            return SuggestionData(
                rule_type=self.id,
                urgency="medium",
                message="Create a highlight video to showcase your skills to coaches",
                action_type=ACTION_ADD_VIDEO,
            )
        return None


class VideoLinkHealthRule(Rule):
    id = "video-link-health"
    name = "Broken Video Link"
    description = "Video URL is not accessible"

    def evaluate(self, context: RuleContext) -> SuggestionData | None:
        for video in context.videos:
            if video.health_status == "broken":
                return SuggestionData(
                    rule_type=self.id,
                    urgency="high",
                    message=f'Your video "{video.title}" link is broken. Update it immediately.',
                    action_type=ACTION_UPDATE_VIDEO,
                )
        return None


class PortfolioHealthRule(Rule):
    id = "portfolio-health"
    name = "Portfolio Health Issue"
    description = "All schools are unlikely fits"

    def evaluate(self, context: RuleContext) -> SuggestionData | None:
        if not context.schools:
            return None
        if all((s.fit_score or 0) < PORTFOLIO_STRONG_FIT_SCORE for s in context.schools):
            return SuggestionData(
                rule_type=self.id,
                urgency="high",
                message=(
                    "Your school list has no strong matches. "
                    "Add schools that align better with your profile."
                ),
                action_type=ACTION_ADD_SCHOOL,
            )
        return None


class SchoolListSizeRule(Rule):
    id = "school-list-building"
    name = "School List Too Small"
    description = "Sophomores and juniors should track at least 20 schools"

    def evaluate(self, context: RuleContext) -> SuggestionData | None:
        grade = context.grade_level
        if grade not in (GRADE_SOPHOMORE, GRADE_JUNIOR):
            return None
        count = len(context.schools)
        if count >= TARGET_SCHOOL_LIST_SIZE:
            return None
        return SuggestionData(
            rule_type=self.id,
            urgency="high" if grade == GRADE_JUNIOR else "medium",
            message=(
                f"You're tracking {count} schools. Aim for at least "
                f"{TARGET_SCHOOL_LIST_SIZE} to keep your options open."
            ),
            action_type=ACTION_ADD_SCHOOL,
        )
