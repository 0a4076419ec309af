from rest_framework.routers import SimpleRouter

from apps.projects.api.v1.views import ProjectMemberViewSet, ProjectViewSet


router = SimpleRouter()
router.register("projects", ProjectViewSet, basename="project")
router.register("project-members", ProjectMemberViewSet, basename="project-member")

urlpatterns = router.urls
