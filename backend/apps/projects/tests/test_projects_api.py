from rest_framework import status
from rest_framework.test import APITestCase

from apps.projects.models import Project, ProjectHistory, ProjectMember
from apps.purchasing.tests.helpers import make_order, make_project, make_user


class ProjectApiTests(APITestCase):
    def setUp(self):
        self.user = make_user()
        self.manager = make_user(name="Song Dahye")
        self.client.credentials(HTTP_X_API_KEY="dev-api-key", HTTP_X_USER_ID=str(self.user.id))

    def test_create_project_returns_201(self):
        payload = {
            "project_name": "Pangyo Data Center",
            "project_code": "PRJ-2026-014",
            "client_name": "Pangyo Cloud",
            "start_date": "2026-03-01",
            "end_date": "2026-12-31",
            "project_manager": str(self.manager.id),
        }

        response = self.client.post("/api/v1/projects/", payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(response.json()["project_manager_name"], "Song Dahye")
        self.assertEqual(response.json()["status"], Project.Status.ACTIVE)

    def test_end_date_before_start_date_returns_400(self):
        payload = {
            "project_name": "Pangyo Data Center",
            "project_code": "PRJ-2026-014",
            "start_date": "2026-03-01",
            "end_date": "2026-02-01",
        }

        response = self.client.post("/api/v1/projects/", payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("end_date", response.json()["field_errors"])

    def test_update_records_history_of_tracked_fields(self):
        project = make_project()

        response = self.client.patch(
            f"/api/v1/projects/{project.id}/",
            {"status": "on_hold", "description": "waiting on permits", "change_reason": "permit delay"},
            format="json",
        )

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        entry = ProjectHistory.objects.get()
        self.assertEqual((entry.field_name, entry.old_value, entry.new_value), ("status", "active", "on_hold"))
        self.assertEqual(entry.changed_by, self.user)
        self.assertEqual(entry.change_reason, "permit delay")

        history = self.client.get(f"/api/v1/projects/{project.id}/history/")
        self.assertEqual(len(history.json()), 1)

    def test_delete_project_with_orders_returns_409(self):
        project = make_project()
        make_order(self.user, project)

        response = self.client.delete(f"/api/v1/projects/{project.id}/")

        self.assertEqual(response.status_code, status.HTTP_409_CONFLICT)
        self.assertTrue(Project.objects.filter(pk=project.pk).exists())


class ProjectMemberApiTests(APITestCase):
    def setUp(self):
        self.user = make_user()
        self.member = make_user(name="Song Dahye")
        self.project = make_project()
        self.client.credentials(HTTP_X_API_KEY="dev-api-key", HTTP_X_USER_ID=str(self.user.id))

    def test_add_member_stamps_assigned_by(self):
        payload = {"project": str(self.project.id), "user": str(self.member.id), "role": "site engineer"}

        response = self.client.post("/api/v1/project-members/", payload, format="json")

        self.assertEqual(response.status_code, status.HTTP_201_CREATED)
        self.assertEqual(ProjectMember.objects.get().assigned_by, self.user)

    def test_list_members_filters_by_project(self):
        other_project = make_project(code="PRJ-002", name="Incheon Warehouse")
        ProjectMember.objects.create(project=self.project, user=self.member, role="qa")
        ProjectMember.objects.create(project=other_project, user=self.member, role="qa")

        response = self.client.get("/api/v1/project-members/", {"project": str(self.project.id)})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(len(response.json()), 1)
        self.assertEqual(response.json()[0]["user_name"], "Song Dahye")
