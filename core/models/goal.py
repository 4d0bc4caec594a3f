"""Goal and milestone models."""

from django.db import models
from django.contrib.auth.models import User


class Goal(models.Model):
    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PENDING_APPROVAL = "pending_approval", "Pending approval"
        APPROVED = "approved", "Approved"
        REJECTED = "rejected", "Rejected"
        SUBMITTED = "submitted", "Submitted"
        UNDER_REVIEW = "under_review", "Under review"
        FINAL_APPROVED = "final_approved", "Final approved"

    class Priority(models.TextChoices):
        HIGH = "high", "High"
        MEDIUM = "medium", "Medium"
        LOW = "low", "Low"

    user = models.ForeignKey(User, models.CASCADE, related_name="goals")
    space = models.ForeignKey(
        "core.GoalSpace", models.SET_NULL, blank=True, null=True, related_name="goals"
    )
    title = models.TextField()
    description = models.TextField(blank=True, default="")
    category = models.TextField(blank=True, default="")
    priority = models.TextField(choices=Priority.choices, default=Priority.MEDIUM)
    weightage = models.PositiveSmallIntegerField(default=0)
    target_date = models.DateField(blank=True, null=True)
    status = models.TextField(choices=Status.choices, default=Status.DRAFT)
    feedback = models.TextField(blank=True, default="")
    reviewer = models.ForeignKey(
        User,
        models.SET_NULL,
        blank=True,
        null=True,
        related_name="reviewed_goals",
    )
    rating = models.PositiveSmallIntegerField(blank=True, null=True)
    rating_comment = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        app_label = "core"
        ordering = ["created_at", "id"]

    def __str__(self):
        return f"{self.title} [{self.status}]"


class Milestone(models.Model):
    goal = models.ForeignKey(Goal, models.CASCADE, related_name="milestones")
    title = models.TextField()
    description = models.TextField(blank=True, null=True)
    completed = models.BooleanField(default=False)
    target_date = models.DateField(blank=True, null=True)
    completion_comment = models.TextField(blank=True, null=True)
    position = models.PositiveSmallIntegerField(default=0)

    class Meta:
        app_label = "core"
        ordering = ["position", "id"]
