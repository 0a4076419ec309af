from django.db import transaction
from rest_framework import mixins, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from apps.accounts.models import User
from apps.core.api.mixins import ProtectedDestroyMixin
from apps.projects.api.v1.serializers import (
    ProjectHistorySerializer,
    ProjectMemberSerializer,
    ProjectSerializer,
)
from apps.projects.models import Project, ProjectHistory, ProjectMember

TRACKED_FIELDS = (
    "project_name",
    "status",
    "project_manager",
    "order_manager",
    "start_date",
    "end_date",
    "total_budget",
)


def _as_text(value):
    if value is None:
        return None
    if hasattr(value, "pk"):
        return str(value.pk)
    return str(value)


class ProjectViewSet(ProtectedDestroyMixin, viewsets.ModelViewSet):
    serializer_class = ProjectSerializer
    protected_message = "Project is referenced by purchase orders and cannot be deleted."

    def get_queryset(self):
        queryset = Project.objects.select_related("project_manager").order_by("project_name")
        status_filter = self.request.query_params.get("status")
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        query = (self.request.query_params.get("q") or "").strip()
        if query:
            queryset = queryset.filter(project_name__icontains=query)
        return queryset

    @transaction.atomic
    def perform_update(self, serializer):
        project = serializer.instance
        before = {field: _as_text(getattr(project, field)) for field in TRACKED_FIELDS}
        project = serializer.save()

        actor = self.request.user
        if not isinstance(actor, User):
            return
        reason = self.request.data.get("change_reason") if hasattr(self.request.data, "get") else None
        ProjectHistory.objects.bulk_create(
            [
                ProjectHistory(
                    project=project,
                    field_name=field,
                    old_value=before[field],
                    new_value=_as_text(getattr(project, field)),
                    changed_by=actor,
                    change_reason=reason,
                )
                for field in TRACKED_FIELDS
                if before[field] != _as_text(getattr(project, field))
            ]
        )

    @action(detail=True, methods=["get"])
    def history(self, request, pk=None):
        project = self.get_object()
        return Response(ProjectHistorySerializer(project.history.all(), many=True).data)


class ProjectMemberViewSet(
    mixins.ListModelMixin,
    mixins.CreateModelMixin,
    mixins.DestroyModelMixin,
    viewsets.GenericViewSet,
):
    serializer_class = ProjectMemberSerializer

    def get_queryset(self):
        queryset = ProjectMember.objects.select_related("user", "project")
        project_id = self.request.query_params.get("project")
        if project_id:
            queryset = queryset.filter(project_id=project_id)
        return queryset

    def perform_create(self, serializer):
        actor = self.request.user
        serializer.save(assigned_by=actor if isinstance(actor, User) else None)
