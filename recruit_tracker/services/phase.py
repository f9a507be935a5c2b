"""Recruiting phase from completed milestone tasks.

Phases run freshman -> sophomore -> junior -> senior -> committed. Each
transition has a fixed set of milestone task ids.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

PHASE_SEQUENCE: tuple[str, ...] = ("freshman", "sophomore", "junior", "senior", "committed")

PHASE_MILESTONES: dict[str, tuple[str, ...]] = {
    "freshman_to_sophomore": (
        "understand-academic-requirements",
        "establish-development-routine",
        "play-travel-ball",
        "research-division-levels",
    ),
    "sophomore_to_junior": (
        "create-highlight-video",
        "maintain-strong-gpa-10",
        "build-target-school-list-20",
        "send-first-introductory-emails",
    ),
    "junior_to_senior": (
        "register-with-ncaa-eligibility",
        "peak-athletic-performance-11",
        "increase-coach-communication",
        "film-multiple-game-performances",
    ),
    "senior_to_committed": ("sign-nli",),
}

# Milestones that must be completed to leave a phase
_EXIT_MILESTONES: dict[str, str] = {
    "freshman": "freshman_to_sophomore",
    "sophomore": "sophomore_to_junior",
    "junior": "junior_to_senior",
    "senior": "senior_to_committed",
}


@dataclass
class MilestoneProgress:
    phase: str
    required: list[str] = field(default_factory=list)
    completed: list[str] = field(default_factory=list)
    remaining: list[str] = field(default_factory=list)
    percent_complete: float = 0.0


def _all_done(milestone_key: str, done: set[str]) -> bool:
    return all(task_id in done for task_id in PHASE_MILESTONES[milestone_key])


def calculate_phase(completed_task_ids: Iterable[str], has_signed_nli: bool) -> str:
    """Return the highest phase whose entry milestones are all complete.

    Tiers are checked from the top down, so completing only the junior-year
    milestones yields "senior" even if earlier tiers are incomplete.
    """
    if has_signed_nli:
        return "committed"

    done = set(completed_task_ids)
    if _all_done("junior_to_senior", done):
        return "senior"
    if _all_done("sophomore_to_junior", done):
        return "junior"
    if _all_done("freshman_to_sophomore", done):
        return "sophomore"
    return "freshman"


def get_milestone_progress(phase: str, completed_task_ids: Iterable[str]) -> MilestoneProgress:
    """Progress toward leaving ``phase``; committed is always 100%."""
    if phase == "committed":
        return MilestoneProgress(phase="committed", percent_complete=100.0)
    if phase not in _EXIT_MILESTONES:
        raise ValueError(f"Unknown phase: {phase}")

    done = set(completed_task_ids)
    required = list(PHASE_MILESTONES[_EXIT_MILESTONES[phase]])
    completed = [t for t in required if t in done]
    remaining = [t for t in required if t not in done]
    percent = (len(completed) / len(required)) * 100 if required else 0.0
    return MilestoneProgress(
        phase=phase,
        required=required,
        completed=completed,
        remaining=remaining,
        percent_complete=percent,
    )


def can_advance_phase(current_phase: str, completed_task_ids: Iterable[str]) -> bool:
    milestone_key = _EXIT_MILESTONES.get(current_phase)
    if milestone_key is None:
        return False
    return _all_done(milestone_key, set(completed_task_ids))


def get_next_phase(current_phase: str) -> str | None:
    if current_phase not in PHASE_SEQUENCE:
        return None
    idx = PHASE_SEQUENCE.index(current_phase)
    if idx == len(PHASE_SEQUENCE) - 1:
        return None
    return PHASE_SEQUENCE[idx + 1]


def get_previous_phase(current_phase: str) -> str | None:
    if current_phase not in PHASE_SEQUENCE:
        return None
    idx = PHASE_SEQUENCE.index(current_phase)
    if idx == 0:
        return None
    return PHASE_SEQUENCE[idx - 1]
