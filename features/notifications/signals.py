import logging
from typing import List, Tuple

from django.dispatch import receiver

from core.models import Notification
from features.crud.users.service import display_name, get_admins, get_manager
from features.workflow.signals import goal_transitioned
from .service import create_notification

logger = logging.getLogger(__name__)

SUCCESS = Notification.Type.SUCCESS
INFO = Notification.Type.INFO
WARNING = Notification.Type.WARNING
ERROR = Notification.Type.ERROR

# (recipient id, title, message, type)
Message = Tuple[int, str, str, str]


def _created(goal, actor, **kwargs) -> List[Message]:
    return [(actor.id, "Goal Created", f"You created a new goal: {goal.title}", SUCCESS)]


def _deleted(goal, actor, title="", **kwargs) -> List[Message]:
    return [(actor.id, "Goal Deleted", f'Goal "{title or goal.title}" has been deleted', INFO)]


def _sent_for_approval(goal, actor, **kwargs) -> List[Message]:
    messages = [
        (
            actor.id,
            "Goal Sent for Approval",
            f"You've sent your goal for approval: {goal.title}",
            SUCCESS,
        )
    ]
    manager = get_manager(actor)
    if manager:
        messages.append(
            (
                manager.id,
                "Goal Awaiting Approval",
                f"{display_name(actor)} has sent a goal for your approval: {goal.title}",
                INFO,
            )
        )
    return messages


def _submitted(goal, actor, **kwargs) -> List[Message]:
    messages = [
        (actor.id, "Goal Submitted", f"You've submitted your goal: {goal.title}", SUCCESS)
    ]
    # Members without a manager are reviewed by the admins
    manager = get_manager(actor)
    reviewers = [manager] if manager else get_admins()
    for reviewer in reviewers:
        if reviewer.id == actor.id:
            continue
        messages.append(
            (
                reviewer.id,
                "Goal Submitted for Review",
                f"{display_name(actor)} has submitted a goal for your review: {goal.title}",
                INFO,
            )
        )
    return messages


def _approved(goal, actor, feedback="", **kwargs) -> List[Message]:
    suffix = ". See feedback for details." if feedback else ""
    return [
        (
            goal.user_id,
            "Goal Approved",
            f'Your goal "{goal.title}" has been approved{suffix}',
            SUCCESS,
        ),
        (actor.id, "Goal Approved", f"You've approved the goal: {goal.title}", SUCCESS),
    ]


def _final_approved(goal, actor, feedback="", **kwargs) -> List[Message]:
    suffix = ". See feedback for details." if feedback else ""
    return [
        (
            goal.user_id,
            "Goal Final Approved",
            f'Your goal "{goal.title}" has received final approval{suffix}',
            SUCCESS,
        ),
        (
            actor.id,
            "Goal Final Approved",
            f"You've given final approval to the goal: {goal.title}",
            SUCCESS,
        ),
    ]


def _rejected(goal, actor, **kwargs) -> List[Message]:
    return [
        (
            goal.user_id,
            "Goal Rejected",
            f'Your goal "{goal.title}" has been rejected. Please check the feedback.',
            ERROR,
        ),
        (actor.id, "Goal Rejected", f"You've rejected the goal: {goal.title}", INFO),
    ]


def _returned(goal, actor, **kwargs) -> List[Message]:
    return [
        (
            goal.user_id,
            "Goal Needs Revision",
            f'Your goal "{goal.title}" requires revision. Please check the feedback.',
            WARNING,
        ),
        (
            actor.id,
            "Goal Returned for Revision",
            f"You've returned the goal for revision: {goal.title}",
            INFO,
        ),
    ]


TRANSITION_MESSAGES = {
    "created": _created,
    "deleted": _deleted,
    "sent_for_approval": _sent_for_approval,
    "submitted": _submitted,
    "approved": _approved,
    "final_approved": _final_approved,
    "rejected": _rejected,
    "returned": _returned,
}


@receiver(goal_transitioned)
def notify_goal_transition(sender, goal, actor, transition, **kwargs):
    """
    Fan out notifications for a goal transition.
    - The acting user always gets a confirmation
    - The owner hears about reviewer decisions
    - The manager (or every admin) hears about submissions
    """
    build = TRANSITION_MESSAGES.get(transition)
    if build is None:
        logger.warning("No notifications defined for goal transition '%s'", transition)
        return

    # Deleted goals have no row left to point at
    target_id = goal.id if transition != "deleted" else None
    for user_id, title, message, notification_type in build(goal, actor, **kwargs):
        create_notification(
            user_id,
            title,
            message,
            notification_type,
            target_type="goal" if target_id else None,
            target_id=target_id,
        )
