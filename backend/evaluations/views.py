# ===========================================================
# evaluations/views.py
# ===========================================================
import logging

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import filters, status, viewsets
from rest_framework.pagination import PageNumberPagination
from rest_framework.response import Response
from rest_framework.views import APIView

from staffeval_backend.utils import to_int
from users.permissions import IsCompanyAdmin, IsCompanyAdminOrReadOnly, IsCompanyMember
from .calculator import rank_table
from .models import (
    Evaluation,
    EvaluationCategory,
    EvaluationCycle,
    EvaluationItemMaster,
    RankSetting,
)
from .periods import calculate_period, get_all_periods, get_period_months, get_quarterly_groups
from .serializers import (
    EvaluationCategorySerializer,
    EvaluationCycleSerializer,
    EvaluationItemMasterSerializer,
    EvaluationResponseSerializer,
    EvaluationSerializer,
    EvaluationSubmitSerializer,
    RankSettingSerializer,
)
from .services import (
    company_items,
    company_rank_settings,
    get_admin_evaluation,
    required_evaluator_count,
    submit_evaluation,
)

logger = logging.getLogger(__name__)

User = get_user_model()


class EvaluationPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100


# ===========================================================
# COMPANY SETTINGS (cycles / categories / items / ranks)
# ===========================================================
class CompanyScopedViewSet(viewsets.ModelViewSet):
    """Members read their company's rows; admins create, update and delete them."""

    permission_classes = [IsCompanyAdminOrReadOnly]
    pagination_class = None

    def get_queryset(self):
        return self.queryset.filter(company=self.request.user.company)

    def perform_create(self, serializer):
        instance = serializer.save(company=self.request.user.company)
        logger.info(f"{instance.__class__.__name__} {instance.pk} created by {self.request.user.email}")

    def perform_destroy(self, instance):
        logger.info(f"{instance.__class__.__name__} {instance.pk} deleted by {self.request.user.email}")
        instance.delete()


class EvaluationCycleViewSet(CompanyScopedViewSet):
    queryset = EvaluationCycle.objects.all()
    serializer_class = EvaluationCycleSerializer


class EvaluationCategoryViewSet(CompanyScopedViewSet):
    queryset = EvaluationCategory.objects.all()
    serializer_class = EvaluationCategorySerializer


class EvaluationItemMasterViewSet(CompanyScopedViewSet):
    queryset = EvaluationItemMaster.objects.all()
    serializer_class = EvaluationItemMasterSerializer


class RankSettingViewSet(CompanyScopedViewSet):
    queryset = RankSetting.objects.all()
    serializer_class = RankSettingSerializer


# ===========================================================
# EVALUATION ITEMS (what staff are scored on)
# ===========================================================
class EvaluationItemsView(APIView):
    """GET /api/evaluations/items/ — categories with their items and the rank table."""
    permission_classes = [IsCompanyMember]

    def get(self, request):
        company = request.user.company
        items = company_items(company)
        categories = EvaluationCategory.objects.filter(company=company, is_active=True)

        grouped = [
            {
                "category_key": category.category_key,
                "category_label": category.category_label,
                "description": category.description,
                "items": [
                    {
                        "item_key": item.item_key,
                        "item_name": item.item_name,
                        "min_score": item.min_score,
                        "max_score": item.max_score,
                        "description": item.description,
                    }
                    for item in items
                    if item.category == category.category_key
                ],
            }
            for category in categories
        ]

        return Response(
            {"categories": grouped, "ranks": rank_table(company_rank_settings(company))},
            status=status.HTTP_200_OK,
        )


# ===========================================================
# COMPANY PERIODS
# ===========================================================
class PeriodInfoView(APIView):
    """GET /api/evaluations/periods/?period=N — fiscal periods counted from establishment."""
    permission_classes = [IsCompanyMember]

    def get(self, request):
        company = request.user.company
        if not company.establishment_date:
            return Response(
                {"error": "Company establishment date is not set."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        today = timezone.localdate()
        if company.establishment_date > today:
            return Response(
                {"error": "Company establishment date is in the future."},
                status=status.HTTP_400_BAD_REQUEST,
            )

        current = calculate_period(company.establishment_date, today)
        number = to_int(request.query_params.get("period"), "period", minimum=1, default=current.period_number)

        return Response(
            {
                "current": vars(current),
                "period_number": number,
                "months": get_period_months(company.establishment_date, number),
                "quarters": get_quarterly_groups(company.establishment_date, number),
                "periods": [vars(p) for p in get_all_periods(company.establishment_date, today=today)],
            },
            status=status.HTTP_200_OK,
        )


# ===========================================================
# EVALUATION LIST / DETAIL
# ===========================================================
class EvaluationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    Admin: every evaluation in the company.
    Staff: own completed evaluations only.

    Query params: year, month, status, staff
    """

    serializer_class = EvaluationSerializer
    permission_classes = [IsCompanyMember]
    pagination_class = EvaluationPagination
    filter_backends = [filters.OrderingFilter]
    ordering_fields = ["evaluation_year", "evaluation_month", "total_score", "rank"]
    ordering = ["-evaluation_year", "-evaluation_month"]

    def get_queryset(self):
        user = self.request.user
        qs = Evaluation.objects.for_company(user.company).select_related("staff", "cycle")

        if not user.is_admin:
            qs = qs.filter(staff=user).completed()

        params = self.request.query_params
        if params.get("year"):
            qs = qs.filter(evaluation_year=to_int(params["year"], "year"))
        if params.get("month"):
            qs = qs.filter(evaluation_month=to_int(params["month"], "month", minimum=1, maximum=12))
        if params.get("status") in dict(Evaluation.STATUS_CHOICES):
            qs = qs.filter(status=params["status"])
        if params.get("staff") and user.is_admin:
            qs = qs.filter(staff_id=to_int(params["staff"], "staff"))
        return qs

    def get_serializer_context(self):
        context = super().get_serializer_context()
        context["rank_settings"] = company_rank_settings(self.request.user.company)
        return context

    def retrieve(self, request, *args, **kwargs):
        evaluation = self.get_object()
        data = self.get_serializer(evaluation).data

        if request.user.is_admin:
            own = evaluation.responses.filter(admin=request.user).prefetch_related("items").first()
            data["my_response"] = EvaluationResponseSerializer(own).data if own else None
            data["submitted_count"] = evaluation.responses.counted().count()
            data["total_required"] = required_evaluator_count(request.user.company)

        return Response(data, status=status.HTTP_200_OK)


# ===========================================================
# STAFF EVALUATION (per admin scoring)
# ===========================================================
class StaffEvaluationView(APIView):
    """
    GET  /api/evaluations/staff/<staff_id>/?year=&month=
         The month's evaluation with the requesting admin's own response.
    POST /api/evaluations/staff/<staff_id>/
         Save (draft) or submit the requesting admin's scores.
    """

    permission_classes = [IsCompanyAdmin]

    def get_staff(self, request, staff_id):
        return get_object_or_404(User, pk=staff_id, company=request.user.company, role=User.ROLE_STAFF)

    def get(self, request, staff_id):
        staff = self.get_staff(request, staff_id)
        today = timezone.localdate()
        year = to_int(request.query_params.get("year"), "year", default=today.year)
        month = to_int(request.query_params.get("month"), "month", minimum=1, maximum=12, default=today.month)

        evaluation, response = get_admin_evaluation(request.user, staff, year, month)
        rank_settings = company_rank_settings(request.user.company)
        required = required_evaluator_count(request.user.company)

        return Response(
            {
                "staff": {"id": staff.id, "full_name": staff.full_name, "email": staff.email, "department": staff.department},
                "evaluation_year": year,
                "evaluation_month": month,
                "evaluation": EvaluationSerializer(evaluation, context={"rank_settings": rank_settings}).data if evaluation else None,
                "my_response": EvaluationResponseSerializer(response).data if response else None,
                "submitted_count": evaluation.responses.counted().count() if evaluation else 0,
                "total_required": required,
            },
            status=status.HTTP_200_OK,
        )

    def post(self, request, staff_id):
        staff = self.get_staff(request, staff_id)
        serializer = EvaluationSubmitSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        evaluation, response, newly_completed = submit_evaluation(
            admin=request.user,
            staff=staff,
            year=data["evaluation_year"],
            month=data["evaluation_month"],
            scores=data["scores"],
            comments=data["comments"],
            is_draft=data["is_draft"],
        )

        rank_settings = company_rank_settings(request.user.company)
        message = "Evaluation saved as draft." if data["is_draft"] else "Evaluation submitted."
        if newly_completed:
            message = "Evaluation submitted. All evaluators have finished; the evaluation is completed."

        return Response(
            {
                "message": message,
                "data": {
                    "evaluation": EvaluationSerializer(evaluation, context={"rank_settings": rank_settings}).data,
                    "my_response": EvaluationResponseSerializer(response).data,
                    "submitted_count": evaluation.responses.counted().count(),
                    "total_required": required_evaluator_count(request.user.company),
                },
            },
            status=status.HTTP_200_OK,
        )
