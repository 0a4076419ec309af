from django.test import TestCase

from apps.accounts.models import User
from apps.accounts.services import user_deletion
from apps.accounts.services.user_deletion import DeletionStep, UserDeletion
from apps.core.api.exceptions import InvariantViolation
from apps.projects.models import Project, ProjectHistory, ProjectMember
from apps.purchasing.tests.helpers import make_order, make_project, make_user


class CheckReferencesTests(TestCase):
    def setUp(self):
        self.user = make_user(name="Han Seoyeon")
        self.other = make_user(name="Oh Jihoon")
        self.project = make_project()

    def test_user_without_references_can_be_deleted(self):
        result = user_deletion.check_references(self.user)

        self.assertEqual(result, {"can_delete": True, "references": {"projects": [], "orders": []}})

    def test_project_references_are_typed(self):
        self.project.project_manager = self.user
        self.project.save()
        ProjectMember.objects.create(project=self.project, user=self.user, role="engineer", assigned_by=self.other)
        ProjectMember.objects.create(project=self.project, user=self.other, role="site lead", assigned_by=self.user)
        ProjectHistory.objects.create(project=self.project, field_name="status", changed_by=self.user)

        result = user_deletion.check_references(self.user)

        self.assertFalse(result["can_delete"])
        self.assertEqual(
            sorted(reference["type"] for reference in result["references"]["projects"]),
            ["assigned_by", "history_changed_by", "project_manager", "project_member"],
        )

    def test_orders_are_listed_by_number(self):
        make_order(self.user, self.project, number="PO-2026-002")
        make_order(self.user, self.project, number="PO-2026-001")

        result = user_deletion.check_references(self.user)

        self.assertEqual(
            [order["order_number"] for order in result["references"]["orders"]],
            ["PO-2026-001", "PO-2026-002"],
        )


class ReassignProjectsTests(TestCase):
    def setUp(self):
        self.user = make_user(name="Han Seoyeon")
        self.other = make_user(name="Oh Jihoon")
        self.project = make_project(project_manager=self.user)

    def test_reassign_moves_references_and_drops_memberships(self):
        member = ProjectMember.objects.create(project=self.project, user=self.other, role="qa", assigned_by=self.user)
        ProjectMember.objects.create(project=self.project, user=self.user, role="engineer")
        entry = ProjectHistory.objects.create(project=self.project, field_name="status", changed_by=self.user)

        result = user_deletion.reassign_projects(self.user, self.other)

        self.assertTrue(result["can_delete"])
        self.assertEqual(Project.objects.get().project_manager, self.other)
        member.refresh_from_db()
        entry.refresh_from_db()
        self.assertEqual(member.assigned_by, self.other)
        self.assertEqual(entry.changed_by, self.other)
        self.assertFalse(ProjectMember.objects.filter(user=self.user).exists())

    def test_reassign_to_inactive_user_is_refused(self):
        self.other.is_active = False
        self.other.save()

        with self.assertRaises(InvariantViolation):
            user_deletion.reassign_projects(self.user, self.other)

        self.assertEqual(Project.objects.get().project_manager, self.user)

    def test_reassign_is_refused_for_user_with_orders(self):
        make_order(self.user, self.project)

        with self.assertRaises(InvariantViolation) as ctx:
            user_deletion.reassign_projects(self.user, self.other)

        self.assertEqual(len(ctx.exception.field_errors["orders"]), 1)
        self.assertEqual(Project.objects.get().project_manager, self.user)


class UserDeletionWizardTests(TestCase):
    def setUp(self):
        self.user = make_user(name="Han Seoyeon")
        self.other = make_user(name="Oh Jihoon")

    def test_unreferenced_user_goes_straight_to_confirm(self):
        deletion = UserDeletion(self.user)

        deletion.check()
        self.assertEqual(deletion.step, DeletionStep.CONFIRM)
        deletion.confirm_delete()

        self.assertEqual(deletion.step, DeletionStep.DELETED)
        self.assertFalse(User.objects.filter(pk=self.user.pk).exists())

    def test_user_with_orders_is_blocked(self):
        project = make_project()
        make_order(self.user, project, number="PO-2026-001")
        make_order(self.user, project, number="PO-2026-002")
        deletion = UserDeletion(self.user)

        deletion.check()

        self.assertEqual(deletion.step, DeletionStep.WARNING)
        self.assertTrue(deletion.blocked)
        self.assertEqual(len(deletion.references["orders"]), 2)
        with self.assertRaises(InvariantViolation):
            deletion.begin_reassign()
        with self.assertRaises(InvariantViolation):
            deletion.confirm_delete()
        self.assertEqual(deletion.step, DeletionStep.WARNING)
        self.assertTrue(User.objects.filter(pk=self.user.pk).exists())

    def test_project_manager_is_reassigned_then_deleted(self):
        make_project(project_manager=self.user)
        deletion = UserDeletion(self.user)

        deletion.check()
        self.assertEqual(deletion.step, DeletionStep.WARNING)
        self.assertFalse(deletion.blocked)
        deletion.begin_reassign()
        self.assertEqual(deletion.step, DeletionStep.REASSIGN)
        deletion.reassign(self.other)
        self.assertEqual(deletion.step, DeletionStep.CONFIRM)
        deletion.confirm_delete()

        self.assertEqual(Project.objects.get().project_manager, self.other)
        self.assertFalse(User.objects.filter(pk=self.user.pk).exists())

    def test_steps_cannot_be_skipped(self):
        deletion = UserDeletion(self.user)

        with self.assertRaises(InvariantViolation):
            deletion.confirm_delete()
        with self.assertRaises(InvariantViolation):
            deletion.reassign(self.other)

        self.assertEqual(deletion.step, DeletionStep.CHECKING)

    def test_delete_user_refuses_referenced_user(self):
        make_project(project_manager=self.user)

        with self.assertRaises(InvariantViolation) as ctx:
            user_deletion.delete_user(self.user)

        self.assertEqual(ctx.exception.field_errors["projects"][0]["type"], "project_manager")
