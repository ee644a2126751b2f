# ===========================================================
# goals/urls.py
# ===========================================================
from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import StaffGoalViewSet

app_name = "goals"

router = SimpleRouter()
router.register(r"", StaffGoalViewSet, basename="goal")

urlpatterns = [
    path("", include(router.urls)),
]
