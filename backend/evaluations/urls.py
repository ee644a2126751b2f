# ===========================================================
# evaluations/urls.py
# ===========================================================
from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import (
    EvaluationCategoryViewSet,
    EvaluationCycleViewSet,
    EvaluationItemMasterViewSet,
    EvaluationItemsView,
    EvaluationViewSet,
    PeriodInfoView,
    RankSettingViewSet,
    StaffEvaluationView,
)

app_name = "evaluations"

router = DefaultRouter()
router.register(r"records", EvaluationViewSet, basename="evaluation")
router.register(r"settings/cycles", EvaluationCycleViewSet, basename="cycle")
router.register(r"settings/categories", EvaluationCategoryViewSet, basename="category")
router.register(r"settings/items", EvaluationItemMasterViewSet, basename="item")
router.register(r"settings/ranks", RankSettingViewSet, basename="rank")

urlpatterns = [
    path("", include(router.urls)),

    # Admin scoring of one staff member for one month
    path("staff/<int:staff_id>/", StaffEvaluationView.as_view(), name="staff_evaluation"),

    # Reference data
    path("items/", EvaluationItemsView.as_view(), name="evaluation_items"),
    path("periods/", PeriodInfoView.as_view(), name="periods"),
]
