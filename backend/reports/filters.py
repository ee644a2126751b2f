# ===========================================================
# reports/filters.py
# ===========================================================
import django_filters

from .models import AnnualEvaluation, ProductivityData, QuarterlyReport


class ProductivityDataFilter(django_filters.FilterSet):
    date_from = django_filters.DateFilter(field_name="date", lookup_expr="gte")
    date_to = django_filters.DateFilter(field_name="date", lookup_expr="lte")
    staff = django_filters.NumberFilter(field_name="staff_id")
    source = django_filters.CharFilter(field_name="external_source", lookup_expr="iexact")

    class Meta:
        model = ProductivityData
        fields = ["date_from", "date_to", "staff", "source"]


class QuarterlyReportFilter(django_filters.FilterSet):
    staff = django_filters.NumberFilter(field_name="staff_id")

    class Meta:
        model = QuarterlyReport
        fields = ["year", "quarter", "staff"]


class AnnualEvaluationFilter(django_filters.FilterSet):
    staff = django_filters.NumberFilter(field_name="staff_id")

    class Meta:
        model = AnnualEvaluation
        fields = ["year", "rank", "staff"]
