from rest_framework import serializers

from apps.projects.models import Project, ProjectHistory, ProjectMember


class ProjectSerializer(serializers.ModelSerializer):
    project_manager_name = serializers.CharField(source="project_manager.name", read_only=True, default=None)

    class Meta:
        model = Project
        fields = (
            "id",
            "project_name",
            "project_code",
            "client_name",
            "project_type",
            "location",
            "start_date",
            "end_date",
            "status",
            "total_budget",
            "project_manager",
            "project_manager_name",
            "order_manager",
            "description",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "created_at", "updated_at")

    def validate(self, attrs):
        start_date = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end_date = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start_date and end_date and end_date < start_date:
            raise serializers.ValidationError({"end_date": "end_date cannot be before start_date."})
        return attrs


class ProjectMemberSerializer(serializers.ModelSerializer):
    user_name = serializers.CharField(source="user.name", read_only=True)

    class Meta:
        model = ProjectMember
        fields = (
            "id",
            "project",
            "user",
            "user_name",
            "role",
            "assigned_by",
            "assigned_at",
            "is_active",
            "created_at",
            "updated_at",
        )
        read_only_fields = ("id", "assigned_by", "assigned_at", "created_at", "updated_at")


class ProjectHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = ProjectHistory
        fields = (
            "id",
            "project",
            "field_name",
            "old_value",
            "new_value",
            "changed_by",
            "changed_at",
            "change_reason",
        )
        read_only_fields = fields
