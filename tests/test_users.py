from django.contrib.auth.models import User
from django.test import TestCase

from core.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from core.models import Profile
from features.crud.users import service
from tests.factories import make_user


class UserRosterTests(TestCase):
    def setUp(self):
        self.admin = make_user("admin", Profile.Role.ADMIN)
        self.manager = make_user("manager", Profile.Role.MANAGER, manager=self.admin)
        self.member = make_user("member", manager=self.manager)

    def test_format_user_lists_team_members(self):
        data = service.format_user(self.manager)
        self.assertEqual(data["role"], Profile.Role.MANAGER)
        self.assertEqual(data["manager_id"], self.admin.id)
        self.assertEqual(data["team_members"], [self.member.id])

    def test_missing_profile_defaults_to_member(self):
        bare = User.objects.create_user(username="bare", password="x")
        self.assertEqual(service.get_role(bare), Profile.Role.MEMBER)
        self.assertFalse(service.is_reviewer(bare))

    def test_role_helpers(self):
        self.assertTrue(service.is_admin(self.admin))
        self.assertTrue(service.is_reviewer(self.manager))
        self.assertFalse(service.is_reviewer(self.member))
        with self.assertRaises(PermissionDeniedError):
            service.require_admin(self.manager, "do admin things")

    def test_get_all_users(self):
        self.assertEqual(len(service.get_all_users()), 3)

    def test_get_missing_user(self):
        with self.assertRaises(NotFoundError):
            service.get_user(9999)


class ManagerReassignmentTests(TestCase):
    def setUp(self):
        self.admin = make_user("admin", Profile.Role.ADMIN)
        self.first = make_user("first", Profile.Role.MANAGER, manager=self.admin)
        self.second = make_user("second", Profile.Role.MANAGER, manager=self.admin)
        self.member = make_user("member", manager=self.first)

    def test_reassignment_moves_user_between_teams(self):
        service.update_user_manager(self.admin, self.member.id, self.second.id)

        self.assertEqual(service.get_team_member_ids(self.first), [])
        self.assertEqual(service.get_team_member_ids(self.second), [self.member.id])
        self.assertEqual(service.get_manager(self.member), self.second)

    def test_manager_can_be_cleared(self):
        service.update_user_manager(self.admin, self.member.id, None)
        self.assertIsNone(service.get_manager(self.member))

    def test_only_admin_can_reassign(self):
        with self.assertRaises(PermissionDeniedError):
            service.update_user_manager(self.first, self.member.id, self.second.id)

    def test_self_management_is_rejected(self):
        with self.assertRaises(ValidationError):
            service.update_user_manager(self.admin, self.member.id, self.member.id)

    def test_cycles_are_rejected(self):
        with self.assertRaises(ValidationError):
            service.update_user_manager(self.admin, self.first.id, self.member.id)
        self.assertEqual(service.get_manager(self.first), self.admin)
