import logging
from typing import Any, Dict, List, Optional

from django.contrib.auth.models import User
from django.db import transaction
from django.utils import timezone

from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from core.models import Profile

logger = logging.getLogger(__name__)


# =============================================================================
# Role helpers
# =============================================================================


def get_profile(user: User) -> Profile:
    """Return the user's profile, creating a member profile if missing."""
    profile, _ = Profile.objects.get_or_create(user=user)
    return profile


def get_role(user: Optional[User]) -> Optional[str]:
    if user is None:
        return None
    return get_profile(user).role


def is_admin(user: Optional[User]) -> bool:
    return get_role(user) == Profile.Role.ADMIN


def is_reviewer(user: Optional[User]) -> bool:
    return get_role(user) in (Profile.Role.MANAGER, Profile.Role.ADMIN)


def require_admin(user: Optional[User], action: str) -> None:
    if not is_admin(user):
        raise PermissionDeniedError(f"Only admins can {action}")


def require_reviewer(user: Optional[User], action: str) -> None:
    if not is_reviewer(user):
        raise PermissionDeniedError(f"Only managers and admins can {action}")


def get_manager(user: User) -> Optional[User]:
    return get_profile(user).manager


def get_admins() -> List[User]:
    return list(
        User.objects.filter(profile__role=Profile.Role.ADMIN, is_active=True).order_by(
            "id"
        )
    )


def get_team_member_ids(user: User) -> List[int]:
    """IDs of the users reporting directly to ``user``."""
    return list(
        Profile.objects.filter(manager=user).order_by("user_id").values_list(
            "user_id", flat=True
        )
    )


def display_name(user: User) -> str:
    return user.get_full_name() or user.username


# =============================================================================
# Roster
# =============================================================================


def format_user(user: User) -> Dict[str, Any]:
    """Format a user with role and reporting line for JSON response."""
    profile = get_profile(user)
    return {
        "id": user.id,
        "name": display_name(user),
        "email": user.email,
        "role": profile.role,
        "manager_id": profile.manager_id,
        "photo_url": profile.photo_url,
        "team_members": get_team_member_ids(user),
    }


def get_user(user_id: int) -> User:
    user = User.objects.filter(id=user_id).first()
    if user is None:
        raise NotFoundError("User not found")
    return user


def get_all_users() -> List[Dict[str, Any]]:
    users = User.objects.filter(is_active=True).select_related("profile").order_by("id")
    return [format_user(u) for u in users]


def _reporting_chain(user: User) -> List[int]:
    """Walk up the manager links starting at ``user``."""
    chain = []
    current = user
    while current is not None and current.id not in chain:
        chain.append(current.id)
        current = get_manager(current)
    return chain


def update_user_manager(actor: User, user_id: int, manager_id: Optional[int]) -> User:
    """
    Move a user under a new manager.

    Team membership is derived from the manager link, so this also removes
    the user from the previous manager's team. Reassignments that would
    create a reporting cycle are rejected.
    """
    require_admin(actor, "reassign managers")
    user = get_user(user_id)

    manager = None
    if manager_id is not None:
        manager = get_user(manager_id)
        if manager.id == user.id:
            raise ValidationError("A user cannot manage themselves")
        if user.id in _reporting_chain(manager):
            raise ValidationError(
                f"{display_name(manager)} already reports to {display_name(user)}"
            )

    with transaction.atomic():
        profile = get_profile(user)
        previous = profile.manager_id
        profile.manager = manager
        profile.updated_at = timezone.now()
        profile.save(update_fields=["manager", "updated_at"])

    logger.info(
        "User %s moved from manager %s to %s by %s",
        user.id,
        previous,
        manager_id,
        actor.id,
    )
    return user
