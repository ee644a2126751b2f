# ===========================================================
# feedback/views.py
# ===========================================================
import logging

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied, ValidationError
from rest_framework.response import Response
from rest_framework.views import APIView

from notifications.models import Notification
from notifications.services import notify
from users.permissions import IsCompanyAdmin, IsCompanyMember, IsCompanyStaff
from .models import AdminComment, EvaluationQuestion
from .permissions import IsThreadParticipant
from .serializers import AdminCommentSerializer, AnswerSerializer, EvaluationQuestionSerializer

logger = logging.getLogger(__name__)

User = get_user_model()


# ===========================================================
# ADMIN COMMENTS
# ===========================================================
class StaffCommentsView(APIView):
    """
    GET  /api/feedback/comments/staff/<staff_id>/?period=YYYY-MM
    POST /api/feedback/comments/staff/<staff_id>/   {"evaluation": id, "comment": "..."}
    """

    permission_classes = [IsCompanyAdmin]

    def get_staff(self, request, staff_id):
        return get_object_or_404(User, pk=staff_id, company=request.user.company, role=User.ROLE_STAFF)

    def get(self, request, staff_id):
        staff = self.get_staff(request, staff_id)
        qs = AdminComment.objects.filter(evaluation__staff=staff).select_related("admin", "evaluation")

        period = request.query_params.get("period")
        if period:
            qs = qs.filter(evaluation__evaluation_period=period)

        return Response(AdminCommentSerializer(qs, many=True).data)

    def post(self, request, staff_id):
        staff = self.get_staff(request, staff_id)
        serializer = AdminCommentSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)

        evaluation = serializer.validated_data["evaluation"]
        if evaluation.staff_id != staff.id:
            raise ValidationError({"evaluation": "Evaluation does not belong to this staff member."})

        comment = serializer.save(admin=request.user)
        logger.info(f"Comment {comment.pk} added by {request.user.email} on {evaluation.evaluation_period}")

        notify(
            staff,
            f"{request.user.full_name} commented on your {evaluation.evaluation_period} evaluation.",
            category=Notification.CATEGORY_COMMENT,
            link="/my-evaluation",
        )
        return Response(
            {"message": "Comment added.", "data": AdminCommentSerializer(comment).data},
            status=status.HTTP_201_CREATED,
        )


class MyCommentsView(APIView):
    """GET /api/feedback/comments/mine/?period=YYYY-MM"""

    permission_classes = [IsCompanyStaff]

    def get(self, request):
        qs = AdminComment.objects.filter(
            evaluation__staff=request.user,
            evaluation__status="completed",
        ).select_related("admin", "evaluation")

        period = request.query_params.get("period")
        if period:
            qs = qs.filter(evaluation__evaluation_period=period)

        return Response(AdminCommentSerializer(qs, many=True).data)


class CommentDetailView(APIView):
    """DELETE /api/feedback/comments/<pk>/ (author only)"""

    permission_classes = [IsCompanyAdmin]

    def delete(self, request, pk):
        comment = get_object_or_404(AdminComment, pk=pk, evaluation__staff__company=request.user.company)
        if comment.admin_id != request.user.id:
            raise PermissionDenied("You can only delete your own comments.")
        comment.delete()
        logger.info(f"Comment {pk} deleted by {request.user.email}")
        return Response({"message": "Comment deleted."})


# ===========================================================
# EVALUATION QUESTIONS
# ===========================================================
class EvaluationQuestionViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    mixins.CreateModelMixin,
    viewsets.GenericViewSet,
):
    """
    Staff ask questions about their completed evaluations; admins answer.

    Query params: answered (true/false), period (YYYY-MM), staff (admin)
    """

    serializer_class = EvaluationQuestionSerializer
    permission_classes = [IsCompanyMember, IsThreadParticipant]
    pagination_class = None

    def get_queryset(self):
        user = self.request.user
        qs = EvaluationQuestion.objects.select_related("staff", "admin", "evaluation", "evaluation__staff")
        if user.is_admin:
            qs = qs.filter(staff__company=user.company)
        else:
            qs = qs.filter(staff=user)

        params = self.request.query_params
        answered = params.get("answered")
        if answered == "true":
            qs = qs.filter(answered_at__isnull=False)
        elif answered == "false":
            qs = qs.filter(answered_at__isnull=True)
        if params.get("period"):
            qs = qs.filter(evaluation__evaluation_period=params["period"])
        if user.is_admin and params.get("staff", "").isdigit():
            qs = qs.filter(staff_id=int(params["staff"]))
        return qs

    def create(self, request, *args, **kwargs):
        if not request.user.is_staff_member:
            raise PermissionDenied("Only staff members can ask questions.")

        serializer = self.get_serializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        question = serializer.save(staff=request.user)
        logger.info(f"Question {question.pk} asked by {request.user.email}")

        for admin in request.user.company.admins:
            notify(
                admin,
                f"{request.user.full_name} asked a question about the "
                f"{question.evaluation.evaluation_period} evaluation.",
                category=Notification.CATEGORY_QUESTION,
                link=f"/evaluation/questions/{question.pk}",
            )

        return Response(
            {"message": "Question submitted.", "data": self.get_serializer(question).data},
            status=status.HTTP_201_CREATED,
        )

    @action(detail=True, methods=["post"], permission_classes=[IsCompanyAdmin])
    def answer(self, request, pk=None):
        question = self.get_object()
        serializer = AnswerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        question.record_answer(request.user, serializer.validated_data["answer"])
        logger.info(f"Question {question.pk} answered by {request.user.email}")

        notify(
            question.staff,
            f"Your question about the {question.evaluation.evaluation_period} evaluation was answered.",
            category=Notification.CATEGORY_QUESTION,
            link="/my-evaluation",
        )
        return Response({"message": "Answer saved.", "data": self.get_serializer(question).data})
