from datetime import date, timedelta

from django.test import TestCase
from django.utils import timezone

from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from core.models import GoalSpace, Notification, Profile
from features.crud.goal_spaces import service
from tests.factories import make_goal, make_space, make_user


class SpaceWindowTests(TestCase):
    def setUp(self):
        self.space = make_space(
            "Cycle",
            start=date(2025, 1, 1),
            submission=date(2025, 1, 10),
            review=date(2025, 1, 20),
        )

    def test_edit_window_is_inclusive(self):
        for day, expected in [
            (date(2024, 12, 31), False),
            (date(2025, 1, 1), True),
            (date(2025, 1, 10), True),
            (date(2025, 1, 11), False),
        ]:
            with self.subTest(day=day):
                self.assertEqual(
                    service.can_create_or_edit_goals(self.space.id, today=day), expected
                )

    def test_review_window_is_inclusive(self):
        self.assertTrue(service.can_review_goals(self.space.id, today=date(2025, 1, 11)))
        self.assertTrue(service.can_review_goals(self.space.id, today=date(2025, 1, 20)))
        self.assertFalse(service.can_review_goals(self.space.id, today=date(2025, 1, 21)))

    def test_inactive_space_is_closed(self):
        self.space.is_active = False
        self.space.save()
        self.assertFalse(service.can_create_or_edit_goals(self.space.id, today=date(2025, 1, 5)))
        self.assertFalse(service.can_review_goals(self.space.id, today=date(2025, 1, 5)))

    def test_missing_space_is_closed(self):
        self.assertFalse(service.can_create_or_edit_goals(9999))
        self.assertFalse(service.can_create_or_edit_goals(None))
        self.assertTrue(service.is_space_read_only(9999))

    def test_read_only_after_submission_deadline(self):
        self.assertFalse(service.is_space_read_only(self.space.id, today=date(2025, 1, 10)))
        self.assertTrue(service.is_space_read_only(self.space.id, today=date(2025, 1, 11)))

    def test_admins_are_never_read_only(self):
        self.assertFalse(
            service.is_space_read_only(self.space.id, is_admin=True, today=date(2025, 2, 1))
        )

    def test_inactive_space_is_read_only(self):
        self.space.is_active = False
        self.space.save()
        self.assertTrue(service.is_space_read_only(self.space.id, today=date(2025, 1, 5)))


class SpaceQueryTests(TestCase):
    def setUp(self):
        today = timezone.localdate()
        self.open = make_space("Open")
        self.reviewing = make_space(
            "Reviewing",
            start=today - timedelta(days=20),
            submission=today - timedelta(days=2),
            review=today + timedelta(days=5),
        )
        self.finished = make_space(
            "Finished",
            start=today - timedelta(days=60),
            submission=today - timedelta(days=40),
            review=today - timedelta(days=30),
        )
        self.disabled = make_space("Disabled", is_active=False)

    def test_available_spaces(self):
        self.assertEqual(service.get_available_spaces(), [self.open])

    def test_spaces_for_review(self):
        self.assertEqual(service.get_spaces_for_review(), [self.reviewing])

    def test_active_space(self):
        self.assertIn(service.get_active_space(), [self.open, self.reviewing])

    def test_all_spaces_lists_active_first(self):
        spaces = service.get_all_spaces()
        self.assertEqual(len(spaces), 4)
        self.assertEqual(spaces[-1], self.disabled)


class SpaceAdminTests(TestCase):
    def setUp(self):
        self.admin = make_user("admin", Profile.Role.ADMIN)
        self.manager = make_user("manager", Profile.Role.MANAGER)

    def test_admin_creates_space_and_is_notified(self):
        space = service.create_goal_space(
            self.admin,
            "  FY25  ",
            date(2025, 1, 1),
            date(2025, 1, 31),
            date(2025, 2, 28),
        )
        self.assertEqual(space.name, "FY25")
        self.assertTrue(space.is_active)
        note = Notification.objects.get(user=self.admin)
        self.assertEqual(note.title, "Goal Space Created")
        self.assertEqual(note.target_id, str(space.id))

    def test_manager_cannot_create_space(self):
        with self.assertRaises(PermissionDeniedError):
            service.create_goal_space(
                self.manager, "FY25", date(2025, 1, 1), date(2025, 1, 31), date(2025, 2, 28)
            )

    def test_out_of_order_dates_are_rejected(self):
        with self.assertRaises(ValidationError):
            service.create_goal_space(
                self.admin, "FY25", date(2025, 1, 31), date(2025, 1, 1), date(2025, 2, 28)
            )
        with self.assertRaises(ValidationError):
            service.create_goal_space(
                self.admin, "FY25", date(2025, 1, 1), date(2025, 2, 1), date(2025, 1, 15)
            )

    def test_update_checks_merged_dates(self):
        space = make_space(
            "Cycle",
            start=date(2025, 1, 1),
            submission=date(2025, 1, 10),
            review=date(2025, 1, 20),
        )
        with self.assertRaises(ValidationError):
            service.update_goal_space(
                self.admin, space.id, {"submission_deadline": date(2025, 1, 25)}
            )
        space.refresh_from_db()
        self.assertEqual(space.submission_deadline, date(2025, 1, 10))

        service.update_goal_space(
            self.admin, space.id, {"review_deadline": date(2025, 2, 1), "is_active": False}
        )
        space.refresh_from_db()
        self.assertEqual(space.review_deadline, date(2025, 2, 1))
        self.assertFalse(space.is_active)

    def test_delete_space_keeps_goals(self):
        space = make_space()
        member = make_user("member")
        goal = make_goal(member, space)
        service.delete_goal_space(self.admin, space.id)

        self.assertFalse(GoalSpace.objects.filter(id=space.id).exists())
        goal.refresh_from_db()
        self.assertIsNone(goal.space)

    def test_missing_space(self):
        with self.assertRaises(NotFoundError):
            service.update_goal_space(self.admin, 9999, {"name": "x"})
