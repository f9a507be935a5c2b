"""SQLAlchemy models."""

from recruit_tracker.models.event import Event
from recruit_tracker.models.interaction import Interaction
from recruit_tracker.models.school import School
from recruit_tracker.models.suggestion import Suggestion
from recruit_tracker.models.task import AthleteTask, Task
from recruit_tracker.models.user_preference import UserPreference
from recruit_tracker.models.video import Video

__all__ = [
    "AthleteTask",
    "Event",
    "Interaction",
    "School",
    "Suggestion",
    "Task",
    "UserPreference",
    "Video",
]
