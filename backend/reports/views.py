# ===============================================
# reports/views.py
# ===============================================
# Handles:
# - Admin / staff dashboards
# - Monthly, quarterly and annual (per cycle) overviews
# - Quarterly report and annual evaluation generation
# - Analytics
# - Productivity data and summary
# - Excel export (monthly) / PDF export (annual)
# ===============================================
import logging

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from django.utils import timezone
from django_filters.rest_framework import DjangoFilterBackend
from rest_framework import generics, status
from rest_framework.exceptions import NotFound, PermissionDenied
from rest_framework.response import Response
from rest_framework.views import APIView

from evaluations.models import Evaluation, EvaluationCycle
from evaluations.periods import quarter_of_month
from staffeval_backend.utils import to_int
from users.permissions import IsCompanyAdmin, IsCompanyMember, IsCompanyStaff
from .filters import AnnualEvaluationFilter, ProductivityDataFilter, QuarterlyReportFilter
from .models import AnnualEvaluation, ProductivityData, QuarterlyReport
from .serializers import (
    AnnualEvaluationSerializer,
    GenerateAnnualSerializer,
    GenerateQuarterlySerializer,
    ProductivityDataSerializer,
    QuarterlyReportSerializer,
)
from .services import (
    admin_dashboard,
    analytics,
    annual_overview,
    generate_annual_evaluation,
    generate_quarterly_report,
    monthly_overview,
    productivity_summary,
    quarterly_overview,
    staff_dashboard,
)
from .utils_export import generate_annual_pdf, generate_monthly_excel

logger = logging.getLogger(__name__)

User = get_user_model()


def _company_staff(request, staff_id):
    return get_object_or_404(User, pk=staff_id, company=request.user.company, role=User.ROLE_STAFF)


def _year_month(request):
    today = timezone.localdate()
    params = request.query_params
    year = to_int(params.get("year"), "year", minimum=2000, maximum=2100, default=today.year)
    month = to_int(params.get("month"), "month", minimum=1, maximum=12, default=today.month)
    return year, month


# ===========================================================
# DASHBOARDS
# ===========================================================
class AdminDashboardView(APIView):
    permission_classes = [IsCompanyAdmin]

    def get(self, request):
        return Response(admin_dashboard(request.user), status=status.HTTP_200_OK)


class StaffDashboardView(APIView):
    permission_classes = [IsCompanyStaff]

    def get(self, request):
        return Response(staff_dashboard(request.user), status=status.HTTP_200_OK)


class AnalyticsView(APIView):
    permission_classes = [IsCompanyAdmin]

    def get(self, request):
        return Response(analytics(request.user), status=status.HTTP_200_OK)


# ===========================================================
# OVERVIEWS
# ===========================================================
class MonthlyOverviewView(APIView):
    """GET /api/reports/monthly/?year=&month= — evaluation progress for every staff member."""
    permission_classes = [IsCompanyAdmin]

    def get(self, request):
        year, month = _year_month(request)
        return Response(monthly_overview(request.user, year, month), status=status.HTTP_200_OK)


class QuarterlyOverviewView(APIView):
    """GET /api/reports/quarterly/?year=&quarter="""
    permission_classes = [IsCompanyAdmin]

    def get(self, request):
        today = timezone.localdate()
        year = to_int(request.query_params.get("year"), "year", minimum=2000, maximum=2100, default=today.year)
        quarter = to_int(
            request.query_params.get("quarter"), "quarter", minimum=1, maximum=4,
            default=quarter_of_month(today.month),
        )
        return Response(quarterly_overview(request.user, year, quarter), status=status.HTTP_200_OK)


class AnnualOverviewView(APIView):
    """GET /api/reports/annual/?cycle_id= — defaults to the active cycle, else the latest one."""
    permission_classes = [IsCompanyAdmin]

    def get(self, request):
        cycle = None
        cycle_id = request.query_params.get("cycle_id")
        if cycle_id:
            cycle = get_object_or_404(
                EvaluationCycle, pk=to_int(cycle_id, "cycle_id"), company=request.user.company
            )

        data = annual_overview(request.user, cycle)
        if data is None:
            raise NotFound("No evaluation cycles have been set up yet.")
        data["cycles"] = list(
            EvaluationCycle.objects.filter(company=request.user.company)
            .order_by("-start_date")
            .values("id", "cycle_name", "start_date", "end_date", "status")
        )
        return Response(data, status=status.HTTP_200_OK)


# ===========================================================
# QUARTERLY REPORTS / ANNUAL EVALUATIONS
# ===========================================================
class QuarterlyReportListView(generics.ListAPIView):
    """Admin: company reports. Staff: own reports. Filters: year, quarter, staff."""

    serializer_class = QuarterlyReportSerializer
    permission_classes = [IsCompanyMember]
    filter_backends = [DjangoFilterBackend]
    filterset_class = QuarterlyReportFilter

    def get_queryset(self):
        user = self.request.user
        qs = QuarterlyReport.objects.select_related("staff")
        if user.is_admin:
            return qs.filter(staff__company=user.company)
        return qs.filter(staff=user)


class GenerateQuarterlyReportView(APIView):
    permission_classes = [IsCompanyAdmin]

    def post(self, request):
        serializer = GenerateQuarterlySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        staff = _company_staff(request, data["staff_id"])
        report = generate_quarterly_report(staff, data["year"], data["quarter"])
        return Response(
            {"message": "Quarterly report generated.", "data": QuarterlyReportSerializer(report).data},
            status=status.HTTP_200_OK,
        )


class AnnualEvaluationListView(generics.ListAPIView):
    """Admin: company annual evaluations. Staff: own. Filters: year, rank, staff."""

    serializer_class = AnnualEvaluationSerializer
    permission_classes = [IsCompanyMember]
    filter_backends = [DjangoFilterBackend]
    filterset_class = AnnualEvaluationFilter

    def get_queryset(self):
        user = self.request.user
        qs = AnnualEvaluation.objects.select_related("staff")
        if user.is_admin:
            return qs.filter(staff__company=user.company)
        return qs.filter(staff=user)


class GenerateAnnualEvaluationView(APIView):
    permission_classes = [IsCompanyAdmin]

    def post(self, request):
        serializer = GenerateAnnualSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        staff = _company_staff(request, data["staff_id"])
        annual = generate_annual_evaluation(staff, data["year"])
        return Response(
            {"message": "Annual evaluation generated.", "data": AnnualEvaluationSerializer(annual).data},
            status=status.HTTP_200_OK,
        )


# ===========================================================
# PRODUCTIVITY
# ===========================================================
class ProductivityDataListCreateView(generics.ListCreateAPIView):
    """
    Staff: list and record own productivity rows.
    Admin: list company rows (filter with ?staff=).
    Filters: date_from, date_to, staff, source
    """

    serializer_class = ProductivityDataSerializer
    permission_classes = [IsCompanyMember]
    filter_backends = [DjangoFilterBackend]
    filterset_class = ProductivityDataFilter

    def get_queryset(self):
        user = self.request.user
        qs = ProductivityData.objects.select_related("staff")
        if user.is_admin:
            return qs.filter(staff__company=user.company)
        return qs.filter(staff=user)

    def perform_create(self, serializer):
        if not self.request.user.is_staff_member:
            raise PermissionDenied("Only staff members can record productivity data.")
        row = serializer.save(staff=self.request.user)
        logger.info(f"Productivity row {row.pk} ({row.date}) recorded by {self.request.user.email}")


class ProductivitySummaryView(APIView):
    """GET /api/reports/productivity/summary/?staff= (staff= for admins)"""
    permission_classes = [IsCompanyMember]

    def get(self, request):
        if request.user.is_admin:
            staff = _company_staff(request, to_int(request.query_params.get("staff"), "staff"))
        else:
            staff = request.user
        return Response(productivity_summary(staff), status=status.HTTP_200_OK)


# ===========================================================
# EXPORTS
# ===========================================================
class MonthlyExcelExportView(APIView):
    """GET /api/reports/export/monthly/?year=&month= (xlsx)"""
    permission_classes = [IsCompanyAdmin]

    def get(self, request):
        year, month = _year_month(request)
        evaluations = (
            Evaluation.objects.for_company(request.user.company)
            .filter(evaluation_year=year, evaluation_month=month)
            .select_related("staff")
            .order_by("staff__full_name")
        )
        logger.info(f"Monthly export {year}-{month:02d} by {request.user.email}")
        return generate_monthly_excel(evaluations, year, month)


class AnnualPdfExportView(APIView):
    """GET /api/reports/export/annual/<staff_id>/?year= (pdf). Staff may export their own."""
    permission_classes = [IsCompanyMember]

    def get(self, request, staff_id):
        user = request.user
        if not user.is_admin and user.id != staff_id:
            raise PermissionDenied("You can only export your own evaluation report.")

        staff = _company_staff(request, staff_id)
        year = to_int(
            request.query_params.get("year"), "year", minimum=2000, maximum=2100,
            default=timezone.localdate().year,
        )
        evaluations = (
            Evaluation.objects.completed()
            .filter(staff=staff, evaluation_year=year)
            .order_by("evaluation_month")
        )
        annual = AnnualEvaluation.objects.filter(staff=staff, year=year).first()

        logger.info(f"Annual PDF {year} for {staff.email} exported by {user.email}")
        return generate_annual_pdf(staff, year, evaluations, annual)
