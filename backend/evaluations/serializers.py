# ===========================================================
# evaluations/serializers.py
# ===========================================================
from rest_framework import serializers

from users.serializers import UserSummarySerializer
from .calculator import get_reward_display, calculate_reward
from .models import (
    Evaluation,
    EvaluationCategory,
    EvaluationCycle,
    EvaluationItemMaster,
    EvaluationResponse,
    EvaluationResponseItem,
    RankSetting,
)


# ===========================================================
# COMPANY SETTINGS
# ===========================================================
class CompanyScopedSerializer(serializers.ModelSerializer):
    """Checks a company-unique field against the requesting user's company."""

    unique_field = None

    def validate(self, attrs):
        attrs = super().validate(attrs)
        field = self.unique_field
        if field and field in attrs:
            company = self.context["request"].user.company
            qs = self.Meta.model.objects.filter(company=company, **{field: attrs[field]})
            if self.instance is not None:
                qs = qs.exclude(pk=self.instance.pk)
            if qs.exists():
                raise serializers.ValidationError({field: "This value is already used in your company."})
        return attrs


class EvaluationCycleSerializer(CompanyScopedSerializer):
    class Meta:
        model = EvaluationCycle
        fields = [
            "id",
            "cycle_name",
            "start_date",
            "end_date",
            "trial_date",
            "implementation_date",
            "final_date",
            "status",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def validate(self, attrs):
        attrs = super().validate(attrs)
        start = attrs.get("start_date", getattr(self.instance, "start_date", None))
        end = attrs.get("end_date", getattr(self.instance, "end_date", None))
        if start and end and end < start:
            raise serializers.ValidationError({"end_date": "End date must be on or after the start date."})
        return attrs


class EvaluationCategorySerializer(CompanyScopedSerializer):
    unique_field = "category_key"

    class Meta:
        model = EvaluationCategory
        fields = ["id", "category_key", "category_label", "display_order", "description", "is_active"]
        read_only_fields = ["id"]


class EvaluationItemMasterSerializer(CompanyScopedSerializer):
    unique_field = "item_key"

    class Meta:
        model = EvaluationItemMaster
        fields = [
            "id",
            "item_key",
            "category",
            "item_name",
            "min_score",
            "max_score",
            "description",
            "display_order",
            "is_active",
        ]
        read_only_fields = ["id"]

    def validate(self, attrs):
        attrs = super().validate(attrs)
        min_score = attrs.get("min_score", getattr(self.instance, "min_score", 0))
        max_score = attrs.get("max_score", getattr(self.instance, "max_score", None))
        if max_score is not None and min_score > max_score:
            raise serializers.ValidationError({"max_score": "Max score must be greater than or equal to min score."})

        category = attrs.get("category")
        if category:
            company = self.context["request"].user.company
            if not EvaluationCategory.objects.filter(company=company, category_key=category).exists():
                raise serializers.ValidationError({"category": "Unknown category for your company."})
        return attrs


class RankSettingSerializer(CompanyScopedSerializer):
    unique_field = "rank_name"
    reward_display = serializers.SerializerMethodField()

    class Meta:
        model = RankSetting
        fields = ["id", "rank_name", "min_score", "amount", "reward_display", "display_order"]
        read_only_fields = ["id", "reward_display"]

    def get_reward_display(self, obj):
        return get_reward_display(obj.amount)


# ===========================================================
# RESPONSES
# ===========================================================
class EvaluationResponseItemSerializer(serializers.ModelSerializer):
    class Meta:
        model = EvaluationResponseItem
        fields = ["item_key", "category", "item_name", "score", "min_score", "max_score", "comment"]


class EvaluationResponseSerializer(serializers.ModelSerializer):
    admin = UserSummarySerializer(read_only=True)
    items = EvaluationResponseItemSerializer(many=True, read_only=True)
    is_submitted = serializers.BooleanField(read_only=True)

    class Meta:
        model = EvaluationResponse
        fields = [
            "id",
            "admin",
            "total_score",
            "performance_score",
            "behavior_score",
            "growth_score",
            "is_submitted",
            "submitted_at",
            "items",
            "updated_at",
        ]


# ===========================================================
# EVALUATIONS
# ===========================================================
class EvaluationSerializer(serializers.ModelSerializer):
    staff = UserSummarySerializer(read_only=True)
    cycle_name = serializers.CharField(source="cycle.cycle_name", read_only=True, default=None)
    reward = serializers.SerializerMethodField()
    reward_display = serializers.SerializerMethodField()

    class Meta:
        model = Evaluation
        fields = [
            "id",
            "staff",
            "cycle",
            "cycle_name",
            "evaluation_year",
            "evaluation_month",
            "evaluation_period",
            "status",
            "total_score",
            "average_score",
            "performance_score",
            "behavior_score",
            "growth_score",
            "rank",
            "reward",
            "reward_display",
            "completed_at",
            "updated_at",
        ]
        read_only_fields = fields

    def _reward(self, obj):
        if not obj.rank:
            return None
        rank_settings = self.context.get("rank_settings")
        return calculate_reward(obj.rank, rank_settings)

    def get_reward(self, obj):
        return self._reward(obj)

    def get_reward_display(self, obj):
        reward = self._reward(obj)
        return None if reward is None else get_reward_display(reward)


class EvaluationSubmitSerializer(serializers.Serializer):
    evaluation_year = serializers.IntegerField(min_value=2000, max_value=2100)
    evaluation_month = serializers.IntegerField(min_value=1, max_value=12)
    scores = serializers.DictField(child=serializers.FloatField())
    comments = serializers.DictField(
        child=serializers.CharField(allow_blank=True, allow_null=True),
        required=False,
        default=dict,
    )
    is_draft = serializers.BooleanField(required=False, default=False)
