"""Goal bank (template) model."""

from django.db import models
from django.contrib.auth.models import User


class GoalTemplate(models.Model):
    title = models.TextField()
    description = models.TextField(blank=True, default="")
    category = models.TextField(blank=True, default="")
    target_audience = models.TextField(blank=True, default="all")
    created_by = models.ForeignKey(User, models.SET_NULL, blank=True, null=True)
    is_active = models.BooleanField(default=True)
    # [{"title": ..., "description": ...}] - copied into Milestone rows on use
    milestones = models.JSONField(default=list, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(blank=True, null=True)

    class Meta:
        app_label = "core"

    def __str__(self):
        return self.title
