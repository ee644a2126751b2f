# ===============================================
# reports/urls.py
# ===============================================
from django.urls import path

from .views import (
    AdminDashboardView,
    AnalyticsView,
    AnnualEvaluationListView,
    AnnualOverviewView,
    AnnualPdfExportView,
    GenerateAnnualEvaluationView,
    GenerateQuarterlyReportView,
    MonthlyExcelExportView,
    MonthlyOverviewView,
    ProductivityDataListCreateView,
    ProductivitySummaryView,
    QuarterlyOverviewView,
    QuarterlyReportListView,
    StaffDashboardView,
)

app_name = "reports"

# ===========================================================
# ROUTE SUMMARY
# ===========================================================
"""
Reporting & Analytics Endpoints:
-------------------------------------------------------------
🔹 /api/reports/dashboard/admin/            → Admin dashboard (current month)
🔹 /api/reports/dashboard/staff/            → Staff dashboard (current fiscal year)
🔹 /api/reports/analytics/                  → Fiscal-year analytics
🔹 /api/reports/monthly/                    → Monthly evaluation progress
🔹 /api/reports/quarterly/                  → Quarterly overview
🔹 /api/reports/quarterly/reports/          → Stored quarterly reports
🔹 /api/reports/quarterly/generate/         → Generate a quarterly report
🔹 /api/reports/annual/                     → Annual overview by cycle
🔹 /api/reports/annual/records/             → Stored annual evaluations
🔹 /api/reports/annual/generate/            → Generate an annual evaluation
🔹 /api/reports/productivity/               → Productivity rows (list / create)
🔹 /api/reports/productivity/summary/       → Productivity summary (last 30 days)
🔹 /api/reports/export/monthly/             → Monthly Excel export (.xlsx)
🔹 /api/reports/export/annual/<staff_id>/   → Annual PDF report
-------------------------------------------------------------
"""

urlpatterns = [
    path("dashboard/admin/", AdminDashboardView.as_view(), name="admin_dashboard"),
    path("dashboard/staff/", StaffDashboardView.as_view(), name="staff_dashboard"),
    path("analytics/", AnalyticsView.as_view(), name="analytics"),

    path("monthly/", MonthlyOverviewView.as_view(), name="monthly_overview"),
    path("quarterly/", QuarterlyOverviewView.as_view(), name="quarterly_overview"),
    path("quarterly/reports/", QuarterlyReportListView.as_view(), name="quarterly_reports"),
    path("quarterly/generate/", GenerateQuarterlyReportView.as_view(), name="quarterly_generate"),
    path("annual/", AnnualOverviewView.as_view(), name="annual_overview"),
    path("annual/records/", AnnualEvaluationListView.as_view(), name="annual_evaluations"),
    path("annual/generate/", GenerateAnnualEvaluationView.as_view(), name="annual_generate"),

    path("productivity/", ProductivityDataListCreateView.as_view(), name="productivity"),
    path("productivity/summary/", ProductivitySummaryView.as_view(), name="productivity_summary"),

    path("export/monthly/", MonthlyExcelExportView.as_view(), name="export_monthly_excel"),
    path("export/annual/<int:staff_id>/", AnnualPdfExportView.as_view(), name="export_annual_pdf"),
]
