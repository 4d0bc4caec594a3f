import json

from django.test import TestCase, Client

from core.models import Goal, Notification, Profile
from features.auth.utils import create_token_pair
from tests.factories import make_goal, make_space, make_user


class EndpointTests(TestCase):
    """
    API tests through the full URL configuration.
    Every service error comes back as an error envelope carrying its code.
    """

    def setUp(self):
        self.client = Client()
        self.manager = make_user("manager", Profile.Role.MANAGER)
        self.member = make_user("member", manager=self.manager)
        self.space = make_space()

    def auth(self, user):
        token = create_token_pair(user)["access"]
        return {"HTTP_AUTHORIZATION": f"Bearer {token}"}

    def post(self, url, payload, user):
        return self.client.post(
            url, data=json.dumps(payload), content_type="application/json", **self.auth(user)
        )

    def test_login_returns_tokens_and_role(self):
        response = self.client.post(
            "/api/auth/login",
            data=json.dumps({"email": "manager@example.com", "password": "password123"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 200)
        data = response.json()
        self.assertIn("access", data)
        self.assertEqual(data["role"], Profile.Role.MANAGER)

    def test_login_with_wrong_password(self):
        response = self.client.post(
            "/api/auth/login",
            data=json.dumps({"email": "manager@example.com", "password": "nope"}),
            content_type="application/json",
        )
        self.assertEqual(response.status_code, 401)
        self.assertEqual(response.json()["status"], "error")

    def test_requests_without_token_are_rejected(self):
        response = self.client.get("/api/goals/")
        self.assertEqual(response.status_code, 401)

    def test_create_and_list_goals(self):
        response = self.post(
            "/api/goals/",
            {"space_id": self.space.id, "title": "Learn Django", "weightage": 50},
            self.member,
        )
        body = response.json()
        self.assertEqual(body["status"], "success")
        self.assertEqual(body["data"]["status"], "draft")

        response = self.client.get("/api/goals/", **self.auth(self.member))
        body = response.json()
        self.assertEqual(body["count"], 1)
        self.assertEqual(body["data"][0]["title"], "Learn Django")

    def test_member_cannot_approve(self):
        goal = make_goal(self.member, self.space, status=Goal.Status.PENDING_APPROVAL)
        response = self.post(f"/api/workflow/goals/{goal.id}/approve", {}, self.member)
        body = response.json()
        self.assertEqual(body["status"], "error")
        self.assertEqual(body["code"], 403)

    def test_manager_approves_goal(self):
        goal = make_goal(self.member, self.space, status=Goal.Status.PENDING_APPROVAL)
        response = self.post(
            f"/api/workflow/goals/{goal.id}/approve", {"feedback": "Good"}, self.manager
        )
        body = response.json()
        self.assertEqual(body["status"], "success")
        self.assertEqual(body["data"]["status"], "approved")

    def test_weightage_block_is_reported(self):
        goal = make_goal(self.member, self.space, status=Goal.Status.APPROVED, weightage=30)
        response = self.post(f"/api/workflow/goals/{goal.id}/submit", {}, self.member)
        body = response.json()
        self.assertEqual(body["code"], 409)
        self.assertIn("Current total: 30%", body["message"])

    def test_notifications_flow(self):
        Notification.objects.create(user=self.member, title="Hi", message="there")

        response = self.client.get("/api/notifications/unread-count", **self.auth(self.member))
        self.assertEqual(response.json()["data"]["unread"], 1)

        response = self.client.put("/api/notifications/read-all", **self.auth(self.member))
        self.assertEqual(response.json()["status"], "success")
        self.assertFalse(Notification.objects.filter(is_read=False).exists())

    def test_space_access(self):
        response = self.client.get(
            f"/api/goal-spaces/{self.space.id}/access", **self.auth(self.member)
        )
        data = response.json()["data"]
        self.assertTrue(data["can_create_or_edit_goals"])
        self.assertFalse(data["is_read_only"])

    def test_current_user(self):
        response = self.client.get("/api/users/me", **self.auth(self.manager))
        data = response.json()["data"]
        self.assertEqual(data["role"], "manager")
        self.assertEqual(data["team_members"], [self.member.id])
