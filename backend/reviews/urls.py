from rest_framework.routers import SimpleRouter

from .api import ReviewViewSet

router = SimpleRouter()
router.register(r"", ReviewViewSet, basename="review")

urlpatterns = router.urls
