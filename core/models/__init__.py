"""Core models package."""

from .user import Profile
from .goal_space import GoalSpace
from .goal import Goal, Milestone
from .goal_bank import GoalTemplate
from .notification import Notification

__all__ = [
    "Profile",
    "GoalSpace",
    "Goal",
    "Milestone",
    "GoalTemplate",
    "Notification",
]
