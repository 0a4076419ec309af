import uuid

from django.db import models

from apps.accounts.models import User


class Project(models.Model):
    class Status(models.TextChoices):
        PLANNING = "planning", "planning"
        ACTIVE = "active", "active"
        ON_HOLD = "on_hold", "on_hold"
        COMPLETED = "completed", "completed"
        CANCELLED = "cancelled", "cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project_name = models.CharField(max_length=255)
    project_code = models.CharField(max_length=100, unique=True)
    client_name = models.CharField(max_length=255, blank=True, null=True)
    project_type = models.CharField(max_length=100, blank=True, null=True)
    location = models.TextField(blank=True, null=True)
    start_date = models.DateField(blank=True, null=True)
    end_date = models.DateField(blank=True, null=True)
    status = models.CharField(max_length=16, choices=Status.choices, default=Status.ACTIVE)
    total_budget = models.DecimalField(max_digits=15, decimal_places=2, blank=True, null=True)
    project_manager = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="managed_projects",
        blank=True,
        null=True,
    )
    order_manager = models.ForeignKey(
        User,
        on_delete=models.SET_NULL,
        related_name="order_managed_projects",
        blank=True,
        null=True,
    )
    description = models.TextField(blank=True, null=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "projects_project"
        ordering = ["project_name"]
        indexes = [
            models.Index(fields=["status"], name="idx_projects_status"),
        ]

    def __str__(self) -> str:
        return f"{self.project_name} ({self.project_code})"


class ProjectMember(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="members")
    user = models.ForeignKey(User, on_delete=models.CASCADE, related_name="project_memberships")
    role = models.CharField(max_length=50)
    assigned_by = models.ForeignKey(
        User,
        on_delete=models.PROTECT,
        related_name="assigned_project_memberships",
        blank=True,
        null=True,
    )
    assigned_at = models.DateTimeField(auto_now_add=True)
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = "projects_project_member"
        ordering = ["project", "role"]
        constraints = [
            models.UniqueConstraint(
                fields=["project", "user"],
                name="uq_projects_member_project_user",
            )
        ]

    def __str__(self) -> str:
        return f"{self.project.project_code} - {self.user.name} ({self.role})"


class ProjectHistory(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    project = models.ForeignKey(Project, on_delete=models.CASCADE, related_name="history")
    field_name = models.CharField(max_length=100)
    old_value = models.TextField(blank=True, null=True)
    new_value = models.TextField(blank=True, null=True)
    changed_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name="project_changes")
    changed_at = models.DateTimeField(auto_now_add=True)
    change_reason = models.TextField(blank=True, null=True)

    class Meta:
        db_table = "projects_project_history"
        ordering = ["-changed_at"]

    def __str__(self) -> str:
        return f"{self.project.project_code}.{self.field_name}"
