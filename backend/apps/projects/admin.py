from django.contrib import admin

from apps.projects.models import Project, ProjectHistory, ProjectMember


class ProjectMemberInline(admin.TabularInline):
    model = ProjectMember
    fk_name = "project"
    extra = 0


@admin.register(Project)
class ProjectAdmin(admin.ModelAdmin):
    list_display = ("project_name", "project_code", "status", "project_manager", "is_active")
    list_filter = ("status", "is_active")
    search_fields = ("project_name", "project_code", "client_name")
    inlines = (ProjectMemberInline,)


@admin.register(ProjectHistory)
class ProjectHistoryAdmin(admin.ModelAdmin):
    list_display = ("project", "field_name", "changed_by", "changed_at")
    search_fields = ("project__project_code", "field_name")
