# ===========================================================
# reports/serializers.py
# ===========================================================
from rest_framework import serializers

from evaluations.calculator import calculate_annual_reward, get_reward_display
from users.serializers import UserSummarySerializer
from .models import AnnualEvaluation, ProductivityData, QuarterlyReport


class QuarterlyReportSerializer(serializers.ModelSerializer):
    staff = UserSummarySerializer(read_only=True)

    class Meta:
        model = QuarterlyReport
        fields = ["id", "staff", "year", "quarter", "average_score", "evaluation_count", "updated_at"]
        read_only_fields = fields


class AnnualEvaluationSerializer(serializers.ModelSerializer):
    staff = UserSummarySerializer(read_only=True)
    annual_reward = serializers.SerializerMethodField()
    reward_display = serializers.SerializerMethodField()

    class Meta:
        model = AnnualEvaluation
        fields = [
            "id",
            "staff",
            "year",
            "average_score",
            "rank",
            "evaluation_count",
            "annual_reward",
            "reward_display",
            "updated_at",
        ]
        read_only_fields = fields

    def get_annual_reward(self, obj):
        return calculate_annual_reward(obj.rank) if obj.rank else 0

    def get_reward_display(self, obj):
        return get_reward_display(self.get_annual_reward(obj))


class GenerateQuarterlySerializer(serializers.Serializer):
    staff_id = serializers.IntegerField()
    year = serializers.IntegerField(min_value=2000, max_value=2100)
    quarter = serializers.IntegerField(min_value=1, max_value=4)


class GenerateAnnualSerializer(serializers.Serializer):
    staff_id = serializers.IntegerField()
    year = serializers.IntegerField(min_value=2000, max_value=2100)


class ProductivityDataSerializer(serializers.ModelSerializer):
    staff_name = serializers.CharField(source="staff.full_name", read_only=True)

    class Meta:
        model = ProductivityData
        fields = [
            "id",
            "staff_name",
            "date",
            "sales_amount",
            "contracts_count",
            "tasks_completed",
            "attendance_rate",
            "external_source",
            "created_at",
        ]
        read_only_fields = ["id", "staff_name", "created_at"]

    def validate_sales_amount(self, value):
        if value < 0:
            raise serializers.ValidationError("Sales amount cannot be negative.")
        return value
