# ===========================================================
# feedback/urls.py
# ===========================================================
from django.urls import path, include
from rest_framework.routers import SimpleRouter

from .views import CommentDetailView, EvaluationQuestionViewSet, MyCommentsView, StaffCommentsView

app_name = "feedback"

router = SimpleRouter()
router.register(r"questions", EvaluationQuestionViewSet, basename="question")

urlpatterns = [
    path("comments/staff/<int:staff_id>/", StaffCommentsView.as_view(), name="staff-comments"),
    path("comments/mine/", MyCommentsView.as_view(), name="my-comments"),
    path("comments/<int:pk>/", CommentDetailView.as_view(), name="comment-detail"),
    path("", include(router.urls)),
]
