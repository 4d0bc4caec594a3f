"""Admin configuration for core models."""

from django.contrib import admin
from .models import (
    Profile,
    GoalSpace,
    Goal,
    Milestone,
    GoalTemplate,
    Notification,
)


class MilestoneInline(admin.TabularInline):
    model = Milestone
    extra = 0


@admin.register(Goal)
class GoalAdmin(admin.ModelAdmin):
    list_display = ("title", "user", "space", "status", "weightage", "updated_at")
    list_filter = ("status", "space", "priority")
    search_fields = ("title", "user__username", "user__email")
    inlines = [MilestoneInline]


@admin.register(GoalSpace)
class GoalSpaceAdmin(admin.ModelAdmin):
    list_display = ("name", "start_date", "submission_deadline", "review_deadline", "is_active")


# Register models
admin.site.register(Profile)
admin.site.register(GoalTemplate)
admin.site.register(Notification)
