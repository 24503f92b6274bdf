from rest_framework.routers import SimpleRouter

from .api import TourViewSet

router = SimpleRouter()
router.register(r"", TourViewSet, basename="tour")

urlpatterns = router.urls
