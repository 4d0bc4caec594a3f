"""Demo roster, goal bank templates and an open goal space."""

import logging
from datetime import date, timedelta
from typing import Dict, List, Optional

from django.contrib.auth.models import User
from django.db import transaction
from django.utils import timezone

from core.models import GoalSpace, GoalTemplate, Profile
from core.utils.config import get_setting

logger = logging.getLogger(__name__)

# (key, full name, email, role, manager key)
DEMO_USERS = [
    ("admin-1", "Admin User", "admin@ezdanny.com", Profile.Role.ADMIN, None),
    ("manager-1", "Darahas", "darahas@ezdanny.com", Profile.Role.MANAGER, "admin-1"),
    ("manager-2", "Ashok", "ashok@ezdanny.com", Profile.Role.MANAGER, "admin-1"),
    ("emp-1", "Hema", "hema@ezdanny.com", Profile.Role.MEMBER, "manager-1"),
    ("emp-2", "Babloo", "babloo@ezdanny.com", Profile.Role.MEMBER, "manager-1"),
    ("emp-3", "Chitti Naidu", "chitti@ezdanny.com", Profile.Role.MEMBER, "manager-1"),
    ("emp-4", "Tarun", "tarun@ezdanny.com", Profile.Role.MEMBER, "manager-2"),
    ("emp-5", "Rishi", "rishi@ezdanny.com", Profile.Role.MEMBER, "manager-2"),
    ("emp-6", "Babu Garu", "babu@ezdanny.com", Profile.Role.MEMBER, "manager-2"),
]

DEMO_TEMPLATES = [
    {
        "title": "Improve Technical Skills in React",
        "description": "Complete an advanced React course and build a sample project showcasing new skills",
        "category": "Technical Skills",
        "milestones": [
            {"title": "Finish the course", "description": None},
            {"title": "Ship the sample project", "description": None},
        ],
    },
    {
        "title": "Enhance Leadership Abilities",
        "description": "Lead a team project and organize bi-weekly team building activities",
        "category": "Leadership",
        "milestones": [],
    },
    {
        "title": "Professional Development Certification",
        "description": "Obtain a professional certification relevant to current role",
        "category": "Professional Development",
        "milestones": [],
    },
    {
        "title": "Create an Innovative Solution",
        "description": "Develop a new approach or tool to address a business challenge",
        "category": "Innovation",
        "milestones": [],
    },
    {
        "title": "Mentor Junior Teammates",
        "description": "Provide mentorship to at least two junior team members through regular 1:1 sessions",
        "category": "Leadership",
        "target_audience": Profile.Role.MANAGER,
        "milestones": [],
    },
]


def _split_name(full_name: str):
    first, _, last = full_name.partition(" ")
    return first, last


def upsert_user(
    email: str,
    full_name: str,
    role: str,
    manager: Optional[User] = None,
    password: Optional[str] = None,
) -> User:
    """Create or refresh a user and its profile, keyed by email."""
    first_name, last_name = _split_name(full_name)
    user = User.objects.filter(email__iexact=email).first()
    if user is None:
        user = User(username=email.split("@")[0], email=email)
        user.set_password(password or get_setting().EZPMS_DEMO_PASSWORD)
    user.first_name = first_name
    user.last_name = last_name
    user.save()

    profile, _ = Profile.objects.get_or_create(user=user)
    profile.role = role
    profile.manager = manager
    profile.updated_at = timezone.now()
    profile.save()
    return user


def seed_users(password: Optional[str] = None) -> Dict[str, User]:
    """Load the demo roster. Managers always precede their reports."""
    users: Dict[str, User] = {}
    for key, name, email, role, manager_key in DEMO_USERS:
        users[key] = upsert_user(
            email, name, role, manager=users.get(manager_key), password=password
        )
    return users


def seed_goal_templates(created_by: Optional[User] = None) -> List[GoalTemplate]:
    templates = []
    for data in DEMO_TEMPLATES:
        template, _ = GoalTemplate.objects.update_or_create(
            title=data["title"],
            defaults={
                "description": data["description"],
                "category": data["category"],
                "target_audience": data.get("target_audience", "all"),
                "milestones": data["milestones"],
                "is_active": True,
                "created_by": created_by,
            },
        )
        templates.append(template)
    return templates


def seed_goal_space(
    created_by: Optional[User] = None, today: Optional[date] = None
) -> GoalSpace:
    """An active space open for submissions from today."""
    today = today or timezone.localdate()
    name = f"Goal Cycle {today.year}"
    space = GoalSpace.objects.filter(name=name).first()
    if space is not None:
        return space
    return GoalSpace.objects.create(
        name=name,
        description="Annual goal setting and review",
        start_date=today,
        submission_deadline=today + timedelta(days=30),
        review_deadline=today + timedelta(days=60),
        is_active=True,
        created_by=created_by,
    )


def load_seed_data(password: Optional[str] = None) -> Dict[str, int]:
    with transaction.atomic():
        users = seed_users(password)
        admin = users["admin-1"]
        templates = seed_goal_templates(admin)
        seed_goal_space(admin)

    logger.info("Seeded %s users and %s goal templates", len(users), len(templates))
    return {"users": len(users), "templates": len(templates), "spaces": 1}
