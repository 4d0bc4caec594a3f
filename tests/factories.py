"""Shared builders for the test suite."""

from datetime import date, timedelta
from typing import Optional

from django.contrib.auth.models import User
from django.utils import timezone

from core.models import Goal, GoalSpace, Profile


def make_user(
    username: str,
    role: str = Profile.Role.MEMBER,
    manager: Optional[User] = None,
    password: str = "password123",
) -> User:
    user = User.objects.create_user(
        username=username,
        email=f"{username}@example.com",
        password=password,
        first_name=username.capitalize(),
    )
    Profile.objects.create(user=user, role=role, manager=manager)
    return user


def make_space(
    name: str = "Cycle",
    start: Optional[date] = None,
    submission: Optional[date] = None,
    review: Optional[date] = None,
    is_active: bool = True,
) -> GoalSpace:
    """By default the space is open for goal edits today."""
    today = timezone.localdate()
    start = start or today - timedelta(days=5)
    submission = submission or today + timedelta(days=5)
    review = review or submission + timedelta(days=10)
    return GoalSpace.objects.create(
        name=name,
        start_date=start,
        submission_deadline=submission,
        review_deadline=review,
        is_active=is_active,
    )


def review_space(name: str = "Review cycle") -> GoalSpace:
    """A space past its submission deadline with review still open."""
    today = timezone.localdate()
    return make_space(
        name,
        start=today - timedelta(days=20),
        submission=today - timedelta(days=1),
        review=today + timedelta(days=10),
    )


def make_goal(
    user: User,
    space: Optional[GoalSpace],
    title: str = "Goal",
    status: str = Goal.Status.DRAFT,
    weightage: int = 0,
) -> Goal:
    return Goal.objects.create(
        user=user, space=space, title=title, status=status, weightage=weightage
    )
