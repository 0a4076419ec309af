from rest_framework.routers import SimpleRouter

from apps.catalog.api.v1.views import ItemViewSet, VendorViewSet


router = SimpleRouter()
router.register("vendors", VendorViewSet, basename="vendor")
router.register("items", ItemViewSet, basename="item")

urlpatterns = router.urls
