# ===========================================================
# users/serializers.py
# ===========================================================
import logging

from django.contrib.auth import get_user_model, password_validation
from django.contrib.auth.tokens import default_token_generator
from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import transaction
from django.utils import timezone
from django.utils.encoding import force_str
from django.utils.http import urlsafe_base64_decode
from rest_framework import serializers
from rest_framework_simplejwt.serializers import TokenObtainPairSerializer

from evaluations.services import seed_company_defaults
from .models import Company

logger = logging.getLogger(__name__)

User = get_user_model()


# ===========================================================
# SHARED HELPERS
# ===========================================================
def validate_establishment_date(value):
    if value and value > timezone.localdate():
        raise serializers.ValidationError("Establishment date cannot be in the future.")
    return value


def validate_new_password(password, confirm, user=None, field="password_confirm"):
    if password != confirm:
        raise serializers.ValidationError({field: "Passwords do not match."})
    try:
        password_validation.validate_password(password, user=user)
    except DjangoValidationError as exc:
        raise serializers.ValidationError({"password": exc.messages[0]})


# ===========================================================
# READ SERIALIZERS
# ===========================================================
class CompanySerializer(serializers.ModelSerializer):
    class Meta:
        model = Company
        fields = ["id", "company_code", "company_name", "establishment_date", "is_active", "settings", "created_at"]
        read_only_fields = ["id", "company_code", "is_active", "created_at"]

    def validate_establishment_date(self, value):
        return validate_establishment_date(value)


class UserSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["id", "email", "full_name", "role", "department", "position"]


class ProfileSerializer(serializers.ModelSerializer):
    company = CompanySerializer(read_only=True)
    is_admin = serializers.BooleanField(read_only=True)

    class Meta:
        model = User
        fields = [
            "id",
            "email",
            "full_name",
            "role",
            "is_admin",
            "company",
            "department",
            "position",
            "hire_date",
            "avatar_url",
            "is_active",
            "last_login",
            "created_at",
        ]
        read_only_fields = fields


class ProfileUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["full_name", "email", "department", "position", "avatar_url"]

    def validate_email(self, value):
        value = value.lower()
        if User.objects.exclude(pk=self.instance.pk).filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already exists.")
        return value


# ===========================================================
# 1. LOGIN SERIALIZER (email + password)
# ===========================================================
class CustomTokenObtainPairSerializer(TokenObtainPairSerializer):
    """Issues a JWT pair and returns the profile used by the frontend."""

    @classmethod
    def get_token(cls, user):
        token = super().get_token(user)
        token["role"] = user.role
        token["company_id"] = user.company_id
        return token

    def validate(self, attrs):
        if attrs.get(self.username_field):
            attrs[self.username_field] = attrs[self.username_field].lower()

        data = super().validate(attrs)

        company = self.user.company
        if company is not None and not company.is_active:
            raise serializers.ValidationError({"detail": "Your company account is inactive."})

        data["user"] = ProfileSerializer(self.user).data
        return data


# ===========================================================
# 2. REGISTER COMPANY (creates the first admin)
# ===========================================================
class RegisterCompanySerializer(serializers.Serializer):
    company_name = serializers.CharField(max_length=255)
    establishment_date = serializers.DateField(required=False, allow_null=True)
    full_name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    password = serializers.CharField(write_only=True)
    password_confirm = serializers.CharField(write_only=True)

    def validate_establishment_date(self, value):
        return validate_establishment_date(value)

    def validate_email(self, value):
        value = value.lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already exists.")
        return value

    def validate(self, attrs):
        validate_new_password(attrs["password"], attrs["password_confirm"])
        return attrs

    @transaction.atomic
    def create(self, validated_data):
        company = Company.objects.create(
            company_name=validated_data["company_name"].strip(),
            establishment_date=validated_data.get("establishment_date"),
        )
        admin = User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            full_name=validated_data["full_name"].strip(),
            role=User.ROLE_ADMIN,
            company=company,
        )
        seed_company_defaults(company)
        logger.info(f"Company {company.company_code} registered by {admin.email}")
        return admin


# ===========================================================
# 3. REGISTER USER (staff joins with a company code)
# ===========================================================
class RegisterUserSerializer(serializers.Serializer):
    company_code = serializers.CharField(max_length=12)
    full_name = serializers.CharField(max_length=150)
    email = serializers.EmailField()
    department = serializers.CharField(max_length=100, required=False, allow_blank=True)
    position = serializers.CharField(max_length=100, required=False, allow_blank=True)
    password = serializers.CharField(write_only=True)
    password_confirm = serializers.CharField(write_only=True)

    def validate_company_code(self, value):
        company = Company.objects.filter(company_code=value.strip().upper(), is_active=True).first()
        if company is None:
            raise serializers.ValidationError("Invalid company code.")
        return company

    def validate_email(self, value):
        value = value.lower()
        if User.objects.filter(email__iexact=value).exists():
            raise serializers.ValidationError("Email already exists.")
        return value

    def validate(self, attrs):
        validate_new_password(attrs["password"], attrs["password_confirm"])
        return attrs

    def create(self, validated_data):
        user = User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            full_name=validated_data["full_name"].strip(),
            role=User.ROLE_STAFF,
            company=validated_data["company_code"],
            department=validated_data.get("department", ""),
            position=validated_data.get("position", ""),
        )
        logger.info(f"User {user.email} joined company {user.company.company_code}")
        return user


# ===========================================================
# 4. PASSWORDS
# ===========================================================
class ChangePasswordSerializer(serializers.Serializer):
    old_password = serializers.CharField(write_only=True)
    new_password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)

    def validate_old_password(self, value):
        if not self.context["request"].user.check_password(value):
            raise serializers.ValidationError("Old password is incorrect.")
        return value

    def validate(self, attrs):
        if attrs["old_password"] == attrs["new_password"]:
            raise serializers.ValidationError({"new_password": "New password cannot be the same as the old password."})
        validate_new_password(
            attrs["new_password"],
            attrs["confirm_password"],
            user=self.context["request"].user,
            field="confirm_password",
        )
        return attrs


class ForgotPasswordSerializer(serializers.Serializer):
    email = serializers.EmailField()


class ResetPasswordSerializer(serializers.Serializer):
    uid = serializers.CharField()
    token = serializers.CharField()
    new_password = serializers.CharField(write_only=True)
    confirm_password = serializers.CharField(write_only=True)

    def validate(self, attrs):
        try:
            user_id = force_str(urlsafe_base64_decode(attrs["uid"]))
            user = User.objects.get(pk=user_id, is_active=True)
        except (TypeError, ValueError, OverflowError, User.DoesNotExist):
            raise serializers.ValidationError({"uid": "Invalid reset link."})

        if not default_token_generator.check_token(user, attrs["token"]):
            raise serializers.ValidationError({"token": "Reset link is invalid or has expired."})

        validate_new_password(attrs["new_password"], attrs["confirm_password"], user=user, field="confirm_password")
        attrs["user"] = user
        return attrs


# ===========================================================
# 5. ADMIN USER MANAGEMENT
# ===========================================================
class AdminUserUpdateSerializer(serializers.ModelSerializer):
    class Meta:
        model = User
        fields = ["role", "department", "position", "hire_date", "is_active"]

    def validate(self, attrs):
        request = self.context["request"]
        if self.instance == request.user:
            if attrs.get("role", User.ROLE_ADMIN) != User.ROLE_ADMIN:
                raise serializers.ValidationError({"role": "You cannot remove your own admin role."})
            if attrs.get("is_active") is False:
                raise serializers.ValidationError({"is_active": "You cannot deactivate your own account."})
        return attrs
