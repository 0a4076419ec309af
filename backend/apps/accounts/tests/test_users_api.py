from rest_framework import status
from rest_framework.test import APITestCase

from apps.accounts.models import User
from apps.projects.models import Project
from apps.purchasing.tests.helpers import make_order, make_project, make_user


class UserApiTests(APITestCase):
    def setUp(self):
        self.admin = make_user(name="Park Jiwoo", role=User.Role.ADMIN, email="admin@orderdesk.example")
        self.user = make_user(name="Kim Minjun", email="minjun@orderdesk.example")
        self.act_as(self.admin)

    def act_as(self, user):
        self.client.credentials(HTTP_X_API_KEY="dev-api-key", HTTP_X_USER_ID=str(user.id))

    def test_list_users_returns_200_for_any_actor(self):
        self.act_as(self.user)

        response = self.client.get("/api/v1/users/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual([user["name"] for user in response.json()], ["Kim Minjun", "Park Jiwoo"])

    def test_admin_creates_user(self):
        payload = {"name": "Jung Hana", "email": "hana@orderdesk.example", "role": "order_manager"}

        response = self.client.post("/api/v1/users/", payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(User.objects.get(name="Jung Hana").role, User.Role.ORDER_MANAGER)

    def test_non_admin_cannot_create_user(self):
        self.act_as(self.user)

        response = self.client.post("/api/v1/users/", {"name": "Jung Hana"}, format="json")

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(response.json()["detail"], "Admin access required.")

    def test_unknown_actor_returns_401(self):
        self.client.credentials(
            HTTP_X_API_KEY="dev-api-key",
            HTTP_X_USER_ID="7d6a3f7e-0d55-4c55-9a54-3a1f1b9f0c11",
        )

        response = self.client.get("/api/v1/users/")

        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_toggle_active_flips_flag(self):
        response = self.client.patch(f"/api/v1/users/{self.user.id}/toggle-active/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.json()["is_active"])
        self.user.refresh_from_db()
        self.assertFalse(self.user.is_active)

    def test_cannot_delete_own_account(self):
        response = self.client.delete(f"/api/v1/users/{self.admin.id}/")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertTrue(User.objects.filter(pk=self.admin.pk).exists())

    def test_delete_unreferenced_user_returns_204(self):
        response = self.client.delete(f"/api/v1/users/{self.user.id}/")

        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)
        self.assertFalse(User.objects.filter(pk=self.user.pk).exists())

    def test_delete_user_with_orders_returns_409_with_references(self):
        order = make_order(self.user, make_project())

        response = self.client.delete(f"/api/v1/users/{self.user.id}/")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(response.json()["code"], "invariant_violation")
        self.assertEqual(
            response.json()["field_errors"]["orders"],
            [{"id": str(order.id), "order_number": order.order_number}],
        )

    def test_references_endpoint_reports_project_manager(self):
        project = make_project(project_manager=self.user)

        response = self.client.get(f"/api/v1/users/{self.user.id}/references/")

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertFalse(response.json()["can_delete"])
        self.assertEqual(
            response.json()["references"]["projects"],
            [{"id": str(project.id), "name": project.project_name, "type": "project_manager"}],
        )

    def test_reassign_then_delete(self):
        make_project(project_manager=self.user)

        reassigned = self.client.post(
            f"/api/v1/users/{self.user.id}/reassign/", {"to_user": str(self.admin.id)}, format="json"
        )
        deleted = self.client.delete(f"/api/v1/users/{self.user.id}/")

        self.assertEqual(reassigned.status_code, status.HTTP_200_OK)
        self.assertTrue(reassigned.json()["can_delete"])
        self.assertEqual(deleted.status_code, status.HTTP_204_NO_CONTENT)
        self.assertEqual(Project.objects.get().project_manager, self.admin)

    def test_reassign_user_with_orders_returns_409(self):
        project = make_project(project_manager=self.user)
        make_order(self.user, project)

        response = self.client.post(
            f"/api/v1/users/{self.user.id}/reassign/", {"to_user": str(self.admin.id)}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertEqual(Project.objects.get().project_manager, self.user)

    def test_reassign_requires_admin(self):
        self.act_as(self.user)

        response = self.client.post(
            f"/api/v1/users/{self.admin.id}/reassign/", {"to_user": str(self.user.id)}, format="json"
        )

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
