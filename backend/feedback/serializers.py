# ===========================================================
# feedback/serializers.py
# ===========================================================
from rest_framework import serializers

from evaluations.models import Evaluation
from .models import AdminComment, EvaluationQuestion


class AdminCommentSerializer(serializers.ModelSerializer):
    admin_name = serializers.CharField(source="admin.full_name", read_only=True, default=None)
    evaluation_period = serializers.CharField(source="evaluation.evaluation_period", read_only=True)
    evaluation = serializers.PrimaryKeyRelatedField(queryset=Evaluation.objects.all())

    class Meta:
        model = AdminComment
        fields = ["id", "evaluation", "evaluation_period", "admin_name", "comment", "created_at", "updated_at"]
        read_only_fields = ["id", "evaluation_period", "admin_name", "created_at", "updated_at"]

    def validate_comment(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Comment cannot be empty.")
        return value


class EvaluationQuestionSerializer(serializers.ModelSerializer):
    staff_name = serializers.CharField(source="staff.full_name", read_only=True)
    admin_name = serializers.CharField(source="admin.full_name", read_only=True, default=None)
    evaluation_period = serializers.CharField(source="evaluation.evaluation_period", read_only=True)
    evaluation = serializers.PrimaryKeyRelatedField(queryset=Evaluation.objects.all())
    is_answered = serializers.BooleanField(read_only=True)

    class Meta:
        model = EvaluationQuestion
        fields = [
            "id",
            "evaluation",
            "evaluation_period",
            "staff_name",
            "question",
            "answer",
            "admin_name",
            "is_answered",
            "answered_at",
            "created_at",
        ]
        read_only_fields = ["id", "evaluation_period", "staff_name", "answer", "admin_name", "answered_at", "created_at"]

    def validate_question(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Question cannot be empty.")
        return value

    def validate_evaluation(self, evaluation):
        user = self.context["request"].user
        if evaluation.staff_id != user.id:
            raise serializers.ValidationError("You can only ask about your own evaluations.")
        if not evaluation.is_completed:
            raise serializers.ValidationError("Questions can be asked once the evaluation is completed.")
        return evaluation


class AnswerSerializer(serializers.Serializer):
    answer = serializers.CharField()

    def validate_answer(self, value):
        value = value.strip()
        if not value:
            raise serializers.ValidationError("Answer cannot be empty.")
        return value
