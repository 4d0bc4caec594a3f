"""User profile model (role and reporting line)."""

from django.db import models
from django.contrib.auth.models import User


class Profile(models.Model):
    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        MANAGER = "manager", "Manager"
        MEMBER = "member", "Member"

    user = models.OneToOneField(User, models.CASCADE, related_name="profile")
    role = models.TextField(choices=Role.choices, default=Role.MEMBER)
    # Single-parent reporting tree; cycles are rejected by the users service.
    manager = models.ForeignKey(
        User,
        models.SET_NULL,
        blank=True,
        null=True,
        related_name="reports",
    )
    photo_url = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        app_label = "core"

    @property
    def is_reviewer(self) -> bool:
        return self.role in (self.Role.MANAGER, self.Role.ADMIN)

    def __str__(self):
        return f"{self.user.get_full_name() or self.user.username} ({self.role})"
