"""Goal space model."""

from django.db import models
from django.contrib.auth.models import User


class GoalSpace(models.Model):
    """
    A time-boxed goal cycle.

    Windows, by local date:
    - before start_date: not open yet
    - [start_date, submission_deadline]: goals can be created and edited
    - (submission_deadline, review_deadline]: review only
    - after review_deadline: read-only
    """

    name = models.TextField()
    description = models.TextField(blank=True, null=True)
    start_date = models.DateField()
    submission_deadline = models.DateField()
    review_deadline = models.DateField()
    is_active = models.BooleanField(default=True)
    created_by = models.ForeignKey(User, models.SET_NULL, blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        app_label = "core"

    def __str__(self):
        return self.name
