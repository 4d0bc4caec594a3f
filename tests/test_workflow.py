from datetime import date, timedelta
from unittest import mock

from django.test import TestCase
from django.utils import timezone

from core.exceptions import (
    DeadlineError,
    InvalidTransitionError,
    PermissionDeniedError,
    ValidationError,
    WeightageError,
)
from core.models import Goal, Notification, Profile
from features.workflow import service
from tests.factories import make_goal, make_space, make_user, review_space


def statuses(*goals):
    return [Goal.objects.get(id=g.id).status for g in goals]


class SendForApprovalTests(TestCase):
    def setUp(self):
        self.manager = make_user("manager", Profile.Role.MANAGER)
        self.member = make_user("member", manager=self.manager)
        self.space = make_space()

    def test_draft_goes_to_pending_and_notifies_manager(self):
        goal = make_goal(self.member, self.space, "Grow")
        service.send_for_approval(self.member, goal.id)

        self.assertEqual(statuses(goal), [Goal.Status.PENDING_APPROVAL])
        owner_note = Notification.objects.get(user=self.member)
        manager_note = Notification.objects.get(user=self.manager)
        self.assertEqual(owner_note.notification_type, Notification.Type.SUCCESS)
        self.assertEqual(manager_note.title, "Goal Awaiting Approval")
        self.assertEqual(manager_note.notification_type, Notification.Type.INFO)

    def test_rejected_goal_can_be_resent(self):
        goal = make_goal(self.member, self.space, status=Goal.Status.REJECTED)
        service.send_for_approval(self.member, goal.id)
        self.assertEqual(statuses(goal), [Goal.Status.PENDING_APPROVAL])

    def test_returned_goal_can_be_resent_during_review(self):
        goal = make_goal(self.member, review_space(), status=Goal.Status.UNDER_REVIEW)
        service.send_for_approval(self.member, goal.id)
        self.assertEqual(statuses(goal), [Goal.Status.PENDING_APPROVAL])

    def test_draft_cannot_be_sent_after_submission_deadline(self):
        goal = make_goal(self.member, review_space())
        with self.assertRaises(DeadlineError):
            service.send_for_approval(self.member, goal.id)
        self.assertEqual(statuses(goal), [Goal.Status.DRAFT])

    def test_bulk_send_is_all_or_nothing(self):
        draft = make_goal(self.member, self.space, "Draft")
        approved = make_goal(self.member, self.space, "Approved", status=Goal.Status.APPROVED)
        with self.assertRaises(InvalidTransitionError):
            service.send_goals_for_approval(self.member, [draft.id, approved.id])
        self.assertEqual(statuses(draft, approved), [Goal.Status.DRAFT, Goal.Status.APPROVED])
        self.assertFalse(Notification.objects.exists())

    def test_only_owner_can_send(self):
        goal = make_goal(self.member, self.space)
        with self.assertRaises(PermissionDeniedError):
            service.send_for_approval(self.manager, goal.id)

    def test_empty_selection_is_rejected(self):
        with self.assertRaises(ValidationError):
            service.send_goals_for_approval(self.member, [])


class SubmitTests(TestCase):
    def setUp(self):
        self.admin = make_user("admin", Profile.Role.ADMIN)
        self.manager = make_user("manager", Profile.Role.MANAGER, manager=self.admin)
        self.member = make_user("member", manager=self.manager)
        self.space = make_space()

    def test_submit_when_weightage_totals_100(self):
        first = make_goal(self.member, self.space, "A", Goal.Status.APPROVED, 60)
        second = make_goal(self.member, self.space, "B", Goal.Status.APPROVED, 40)
        service.submit_goals(self.member, [first.id, second.id])

        self.assertEqual(statuses(first, second), [Goal.Status.SUBMITTED] * 2)
        self.assertEqual(
            Notification.objects.filter(
                user=self.manager, title="Goal Submitted for Review"
            ).count(),
            2,
        )

    def test_weightage_short_of_100_blocks_every_goal(self):
        first = make_goal(self.member, self.space, "A", Goal.Status.APPROVED, 50)
        second = make_goal(self.member, self.space, "B", Goal.Status.APPROVED, 20)
        with self.assertRaises(WeightageError) as ctx:
            service.submit_goals(self.member, [first.id, second.id])

        self.assertEqual(ctx.exception.total, 70)
        self.assertIn("Current total: 70%", str(ctx.exception))
        self.assertEqual(statuses(first, second), [Goal.Status.APPROVED] * 2)
        self.assertFalse(Notification.objects.exists())

    def test_weightage_ignores_goals_already_submitted(self):
        make_goal(self.member, self.space, "Done", Goal.Status.SUBMITTED, 40)
        goal = make_goal(self.member, self.space, "Last", Goal.Status.APPROVED, 60)
        with self.assertRaises(WeightageError) as ctx:
            service.submit_goal(self.member, goal.id)
        self.assertEqual(ctx.exception.total, 60)
        self.assertEqual(statuses(goal), [Goal.Status.APPROVED])

    def test_weightage_ignores_final_approved_goals(self):
        make_goal(self.member, self.space, "Closed", Goal.Status.FINAL_APPROVED, 50)
        first = make_goal(self.member, self.space, "A", Goal.Status.APPROVED, 60)
        second = make_goal(self.member, self.space, "B", Goal.Status.APPROVED, 40)
        service.submit_goals(self.member, [first.id, second.id])
        self.assertEqual(statuses(first, second), [Goal.Status.SUBMITTED] * 2)

    def test_weightage_is_counted_per_space(self):
        other = make_space("Other")
        make_goal(self.member, other, "Elsewhere", Goal.Status.APPROVED, 50)
        goal = make_goal(self.member, self.space, "Here", Goal.Status.APPROVED, 50)
        with self.assertRaises(WeightageError):
            service.submit_goal(self.member, goal.id)

    def test_only_approved_goals_can_be_submitted(self):
        goal = make_goal(self.member, self.space, weightage=100)
        with self.assertRaises(InvalidTransitionError):
            service.submit_goal(self.member, goal.id)
        self.assertEqual(statuses(goal), [Goal.Status.DRAFT])

    def test_submission_without_manager_notifies_admins(self):
        loner = make_user("loner")
        goal = make_goal(loner, self.space, "Solo", Goal.Status.APPROVED, 100)
        service.submit_goal(loner, goal.id)

        self.assertTrue(
            Notification.objects.filter(
                user=self.admin, title="Goal Submitted for Review"
            ).exists()
        )

    def test_submit_after_deadline_is_blocked(self):
        space = make_space(
            "Past",
            start=date(2025, 1, 1),
            submission=date(2025, 1, 10),
            review=date(2025, 1, 20),
        )
        goal = make_goal(self.member, space, "Ready", Goal.Status.APPROVED, 100)

        with mock.patch("django.utils.timezone.localdate", return_value=date(2025, 1, 11)):
            with self.assertRaises(DeadlineError):
                service.submit_goal(self.member, goal.id)

        self.assertEqual(statuses(goal), [Goal.Status.APPROVED])
        notifications = Notification.objects.filter(user=self.member)
        self.assertEqual(notifications.count(), 1)
        self.assertEqual(notifications.get().notification_type, Notification.Type.ERROR)
        self.assertFalse(Notification.objects.exclude(user=self.member).exists())

    def test_submit_on_deadline_day_is_allowed(self):
        space = make_space(
            "Due today",
            start=date(2025, 1, 1),
            submission=date(2025, 1, 10),
            review=date(2025, 1, 20),
        )
        goal = make_goal(self.member, space, "Ready", Goal.Status.APPROVED, 100)
        with mock.patch("django.utils.timezone.localdate", return_value=date(2025, 1, 10)):
            service.submit_goal(self.member, goal.id)
        self.assertEqual(statuses(goal), [Goal.Status.SUBMITTED])

    @mock.patch("features.workflow.service.get_setting")
    def test_required_weightage_is_configurable(self, get_setting):
        get_setting.return_value.EZPMS_REQUIRED_WEIGHTAGE = 80
        goal = make_goal(self.member, self.space, "A", Goal.Status.APPROVED, 80)
        service.submit_goal(self.member, goal.id)
        self.assertEqual(statuses(goal), [Goal.Status.SUBMITTED])


class ReviewTests(TestCase):
    def setUp(self):
        self.admin = make_user("admin", Profile.Role.ADMIN)
        self.manager = make_user("manager", Profile.Role.MANAGER, manager=self.admin)
        self.member = make_user("member", manager=self.manager)
        self.peer = make_user("peer", manager=self.manager)
        self.space = make_space()

    def test_member_cannot_approve(self):
        goal = make_goal(self.member, self.space, status=Goal.Status.PENDING_APPROVAL)
        with self.assertRaises(PermissionDeniedError):
            service.approve_goal(self.peer, goal.id)
        self.assertEqual(statuses(goal), [Goal.Status.PENDING_APPROVAL])

    def test_approve_pending_goal(self):
        goal = make_goal(self.member, self.space, "Grow", Goal.Status.PENDING_APPROVAL)
        service.approve_goal(self.manager, goal.id, feedback="Nice")

        goal.refresh_from_db()
        self.assertEqual(goal.status, Goal.Status.APPROVED)
        self.assertEqual(goal.reviewer, self.manager)
        self.assertEqual(goal.feedback, "Nice")

        owner_note = Notification.objects.get(user=self.member)
        self.assertEqual(owner_note.title, "Goal Approved")
        self.assertEqual(
            owner_note.message, 'Your goal "Grow" has been approved. See feedback for details.'
        )
        self.assertTrue(Notification.objects.filter(user=self.manager).exists())

    def test_final_approval_records_rating(self):
        goal = make_goal(self.member, self.space, status=Goal.Status.SUBMITTED)
        service.approve_goal(self.admin, goal.id, rating=4, rating_comment="Solid")

        goal.refresh_from_db()
        self.assertEqual(goal.status, Goal.Status.FINAL_APPROVED)
        self.assertEqual(goal.rating, 4)
        self.assertEqual(goal.rating_comment, "Solid")

    def test_rating_out_of_range(self):
        goal = make_goal(self.member, self.space, status=Goal.Status.SUBMITTED)
        with self.assertRaises(ValidationError):
            service.approve_goal(self.manager, goal.id, rating=9)
        self.assertEqual(statuses(goal), [Goal.Status.SUBMITTED])

    def test_draft_cannot_be_approved(self):
        goal = make_goal(self.member, self.space)
        with self.assertRaises(InvalidTransitionError):
            service.approve_goal(self.manager, goal.id)

    def test_reject_goal(self):
        goal = make_goal(self.member, self.space, status=Goal.Status.APPROVED)
        service.reject_goal(self.manager, goal.id, "Out of scope")

        goal.refresh_from_db()
        self.assertEqual(goal.status, Goal.Status.REJECTED)
        self.assertEqual(goal.feedback, "Out of scope")
        note = Notification.objects.get(user=self.member)
        self.assertEqual(note.notification_type, Notification.Type.ERROR)

    def test_final_approved_goal_cannot_be_rejected(self):
        goal = make_goal(self.member, self.space, status=Goal.Status.FINAL_APPROVED)
        with self.assertRaises(InvalidTransitionError):
            service.reject_goal(self.manager, goal.id, "No")

    def test_return_for_revision(self):
        goal = make_goal(self.member, self.space, status=Goal.Status.SUBMITTED)
        service.return_goal_for_revision(self.manager, goal.id, "Add detail")

        self.assertEqual(statuses(goal), [Goal.Status.UNDER_REVIEW])
        note = Notification.objects.get(user=self.member)
        self.assertEqual(note.title, "Goal Needs Revision")
        self.assertEqual(note.notification_type, Notification.Type.WARNING)

    def test_draft_cannot_be_returned(self):
        goal = make_goal(self.member, self.space)
        with self.assertRaises(InvalidTransitionError):
            service.return_goal_for_revision(self.manager, goal.id, "Why")

    def test_review_after_review_deadline_is_blocked(self):
        today = timezone.localdate()
        closed = make_space(
            "Closed",
            start=today - timedelta(days=30),
            submission=today - timedelta(days=20),
            review=today - timedelta(days=1),
        )
        goal = make_goal(self.member, closed, status=Goal.Status.SUBMITTED)
        with self.assertRaises(DeadlineError):
            service.approve_goal(self.manager, goal.id)

        self.assertEqual(statuses(goal), [Goal.Status.SUBMITTED])
        note = Notification.objects.get(user=self.manager)
        self.assertEqual(note.title, "Goal Review Failed")
        self.assertFalse(Notification.objects.filter(user=self.member).exists())
