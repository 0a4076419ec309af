"""Safe user deletion.

A user can only be removed once nothing refers to them any more. Orders are
permanent records, so a user who created orders can never be deleted. Project
references (management, membership, assignments and history) can be moved to
another user first.
"""
import enum
import logging

from django.db import transaction

from apps.accounts.models import User
from apps.core.api.exceptions import InvariantViolation
from apps.projects.models import Project, ProjectHistory, ProjectMember
from apps.purchasing.models import PurchaseOrder

logger = logging.getLogger(__name__)

PROJECT_MANAGER = "project_manager"
PROJECT_MEMBER = "project_member"
ASSIGNED_BY = "assigned_by"
HISTORY_CHANGED_BY = "history_changed_by"


def _project_references(user: User) -> list[dict]:
    references = []
    seen = set()

    def add(project_id, project_name, reference_type):
        if (project_id, reference_type) in seen:
            return
        seen.add((project_id, reference_type))
        references.append({"id": str(project_id), "name": project_name, "type": reference_type})

    for project in Project.objects.filter(project_manager=user).only("id", "project_name"):
        add(project.id, project.project_name, PROJECT_MANAGER)
    for member in ProjectMember.objects.filter(user=user).select_related("project"):
        add(member.project_id, member.project.project_name, PROJECT_MEMBER)
    for member in ProjectMember.objects.filter(assigned_by=user).select_related("project"):
        add(member.project_id, member.project.project_name, ASSIGNED_BY)
    for entry in ProjectHistory.objects.filter(changed_by=user).select_related("project"):
        add(entry.project_id, entry.project.project_name, HISTORY_CHANGED_BY)
    return references


def check_references(user: User) -> dict:
    orders = [
        {"id": str(order_id), "order_number": order_number}
        for order_id, order_number in PurchaseOrder.objects.filter(user=user)
        .order_by("order_number")
        .values_list("id", "order_number")
    ]
    projects = _project_references(user)
    return {
        "can_delete": not orders and not projects,
        "references": {"projects": projects, "orders": orders},
    }


@transaction.atomic
def reassign_projects(user: User, to_user: User) -> dict:
    if to_user.pk == user.pk:
        raise InvariantViolation(
            "Projects must be reassigned to a different user.",
            field_errors={"to_user": "Choose a different user."},
        )
    if not to_user.is_active:
        raise InvariantViolation(
            "Projects can only be reassigned to an active user.",
            field_errors={"to_user": "This user is inactive."},
        )
    if PurchaseOrder.objects.filter(user=user).exists():
        logger.warning("Refused project reassignment for user %s with orders", user.pk)
        raise InvariantViolation(
            "Users with orders cannot be reassigned or deleted.",
            field_errors=check_references(user)["references"],
        )

    managed = Project.objects.filter(project_manager=user).update(project_manager=to_user)
    assigned = ProjectMember.objects.filter(assigned_by=user).update(assigned_by=to_user)
    changed = ProjectHistory.objects.filter(changed_by=user).update(changed_by=to_user)
    removed, _ = ProjectMember.objects.filter(user=user).delete()
    logger.info(
        "Reassigned user %s to %s: %d projects, %d assignments, %d history rows, %d memberships removed",
        user.pk,
        to_user.pk,
        managed,
        assigned,
        changed,
        removed,
    )
    return check_references(user)


@transaction.atomic
def delete_user(user: User) -> None:
    result = check_references(user)
    if not result["can_delete"]:
        logger.warning("Refused deletion of referenced user %s", user.pk)
        raise InvariantViolation(
            "The user is still referenced and cannot be deleted.",
            field_errors=result["references"],
        )
    user_id = user.pk
    user.delete()
    logger.info("Deleted user %s", user_id)


class DeletionStep(str, enum.Enum):
    CHECKING = "checking"
    WARNING = "warning"
    REASSIGN = "reassign"
    CONFIRM = "confirm"
    DELETED = "deleted"


class UserDeletion:
    """Step-by-step deletion of one user.

    ``checking -> confirm`` when nothing refers to the user, otherwise
    ``checking -> warning``. From ``warning`` the project references can be
    reassigned, unless the user has orders, in which case the deletion is
    ``blocked`` for good. ``confirm -> deleted`` removes the user.
    """

    def __init__(self, user: User):
        self.user = user
        self.step = DeletionStep.CHECKING
        self.blocked = False
        self.references = None

    def _expect(self, step: DeletionStep) -> None:
        if self.step != step:
            raise InvariantViolation(f"Deletion is at step {self.step.value}, expected {step.value}.")

    def check(self) -> dict:
        self._expect(DeletionStep.CHECKING)
        result = check_references(self.user)
        self.references = result["references"]
        self.blocked = bool(self.references["orders"])
        self.step = DeletionStep.CONFIRM if result["can_delete"] else DeletionStep.WARNING
        return result

    def begin_reassign(self) -> None:
        self._expect(DeletionStep.WARNING)
        if self.blocked:
            raise InvariantViolation(
                "Users with orders cannot be reassigned or deleted.",
                field_errors=self.references,
            )
        self.step = DeletionStep.REASSIGN

    def reassign(self, to_user: User) -> dict:
        self._expect(DeletionStep.REASSIGN)
        result = reassign_projects(self.user, to_user)
        self.references = result["references"]
        if result["can_delete"]:
            self.step = DeletionStep.CONFIRM
        return result

    def confirm_delete(self) -> None:
        self._expect(DeletionStep.CONFIRM)
        delete_user(self.user)
        self.step = DeletionStep.DELETED
