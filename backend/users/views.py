# ===========================================================
# users/views.py
# ===========================================================
import logging

from django.conf import settings
from django.contrib.auth import get_user_model
from django.contrib.auth.tokens import default_token_generator
from django.core.mail import send_mail
from django.shortcuts import get_object_or_404
from django.utils.encoding import force_bytes
from django.utils.http import urlsafe_base64_encode
from rest_framework import generics, status, filters
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.views import TokenObtainPairView, TokenRefreshView

from .permissions import IsCompanyAdmin, IsCompanyMember
from .serializers import (
    AdminUserUpdateSerializer,
    ChangePasswordSerializer,
    CompanySerializer,
    CustomTokenObtainPairSerializer,
    ForgotPasswordSerializer,
    ProfileSerializer,
    ProfileUpdateSerializer,
    RegisterCompanySerializer,
    RegisterUserSerializer,
    ResetPasswordSerializer,
)

logger = logging.getLogger(__name__)

User = get_user_model()


# ===========================================================
# 1. LOGIN / REFRESH
# ===========================================================
class ObtainTokenPairView(TokenObtainPairView):
    """POST /api/users/login/ — email + password, returns JWT pair and profile."""
    serializer_class = CustomTokenObtainPairSerializer
    permission_classes = [AllowAny]


class RefreshTokenView(TokenRefreshView):
    permission_classes = [AllowAny]


# ===========================================================
# 2. REGISTRATION
# ===========================================================
class RegisterCompanyView(APIView):
    """POST /api/users/register-company/ — creates the company and its first admin."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = RegisterCompanySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        admin = serializer.save()

        return Response(
            {
                "message": "Company registered successfully.",
                "company_code": admin.company.company_code,
                "user": ProfileSerializer(admin).data,
            },
            status=status.HTTP_201_CREATED,
        )


class RegisterUserView(APIView):
    """POST /api/users/register-user/ — staff sign up with a company code."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = RegisterUserSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        return Response(
            {"message": "User registered successfully.", "user": ProfileSerializer(user).data},
            status=status.HTTP_201_CREATED,
        )


# ===========================================================
# 3. PROFILE (GET / PATCH)
# ===========================================================
class ProfileView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        return Response(ProfileSerializer(request.user).data, status=status.HTTP_200_OK)

    def patch(self, request):
        serializer = ProfileUpdateSerializer(request.user, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        return Response(
            {"message": "Profile updated successfully.", "user": ProfileSerializer(user).data},
            status=status.HTTP_200_OK,
        )


# ===========================================================
# 4. PASSWORDS
# ===========================================================
class ChangePasswordView(APIView):
    """POST /api/users/change-password/"""
    permission_classes = [IsAuthenticated]

    def post(self, request):
        serializer = ChangePasswordSerializer(data=request.data, context={"request": request})
        serializer.is_valid(raise_exception=True)

        user = request.user
        user.set_password(serializer.validated_data["new_password"])
        user.save(update_fields=["password"])
        logger.info(f"Password changed for {user.email}")

        return Response({"message": "Password changed successfully."}, status=status.HTTP_200_OK)


class ForgotPasswordView(APIView):
    """
    POST /api/users/forgot-password/
    Always answers 200 so the endpoint cannot be used to probe accounts.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = ForgotPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = User.objects.filter(email__iexact=serializer.validated_data["email"], is_active=True).first()
        if user:
            uid = urlsafe_base64_encode(force_bytes(user.pk))
            token = default_token_generator.make_token(user)
            reset_link = f"{settings.FRONTEND_URL}/reset-password?uid={uid}&token={token}"
            send_mail(
                subject="Password reset",
                message=(
                    f"Hello {user.get_full_name()},\n\n"
                    f"Use the link below to set a new password:\n{reset_link}\n\n"
                    f"If you did not request this, you can ignore this email."
                ),
                from_email=settings.DEFAULT_FROM_EMAIL,
                recipient_list=[user.email],
                fail_silently=False,
            )
            logger.info(f"Password reset email sent to {user.email}")

        return Response(
            {"message": "If the email is registered, a reset link has been sent."},
            status=status.HTTP_200_OK,
        )


class ResetPasswordView(APIView):
    """POST /api/users/reset-password/ — uid + token from the emailed link."""
    permission_classes = [AllowAny]
    authentication_classes = []

    def post(self, request):
        serializer = ResetPasswordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = serializer.validated_data["user"]
        user.set_password(serializer.validated_data["new_password"])
        user.save(update_fields=["password"])
        logger.info(f"Password reset completed for {user.email}")

        return Response({"message": "Password has been reset."}, status=status.HTTP_200_OK)


# ===========================================================
# 5. COMPANY
# ===========================================================
class CompanyView(APIView):
    """GET any member / PATCH admin only — the requesting user's company."""
    permission_classes = [IsCompanyMember]

    def get(self, request):
        return Response(CompanySerializer(request.user.company).data, status=status.HTTP_200_OK)

    def patch(self, request):
        if not request.user.is_admin:
            return Response({"error": "Access denied. Admins only."}, status=status.HTTP_403_FORBIDDEN)

        serializer = CompanySerializer(request.user.company, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        company = serializer.save()
        return Response(
            {"message": "Company updated successfully.", "company": CompanySerializer(company).data},
            status=status.HTTP_200_OK,
        )


# ===========================================================
# 6. USER LIST / DETAIL (Admin Only)
# ===========================================================
class UserPagination(PageNumberPagination):
    page_size = 20
    page_size_query_param = "page_size"
    max_page_size = 100


class UserListView(generics.ListAPIView):
    serializer_class = ProfileSerializer
    permission_classes = [IsCompanyAdmin]
    filter_backends = [filters.SearchFilter, filters.OrderingFilter]
    search_fields = ["full_name", "email", "department", "position"]
    ordering_fields = ["full_name", "email", "created_at", "hire_date"]
    ordering = ["full_name"]
    pagination_class = UserPagination

    def get_queryset(self):
        qs = User.objects.filter(company=self.request.user.company).select_related("company")
        params = self.request.query_params
        if params.get("role") in dict(User.ROLE_CHOICES):
            qs = qs.filter(role=params["role"])
        if "status" in params:
            qs = qs.filter(is_active=(params["status"].lower() == "active"))
        if params.get("department"):
            qs = qs.filter(department__iexact=params["department"])
        return qs


class UserDetailView(APIView):
    permission_classes = [IsCompanyAdmin]

    def get_object(self, request, pk):
        return get_object_or_404(User.objects.select_related("company"), pk=pk, company=request.user.company)

    def get(self, request, pk):
        return Response(ProfileSerializer(self.get_object(request, pk)).data, status=status.HTTP_200_OK)

    def patch(self, request, pk):
        user = self.get_object(request, pk)
        serializer = AdminUserUpdateSerializer(user, data=request.data, partial=True, context={"request": request})
        serializer.is_valid(raise_exception=True)
        user = serializer.save()
        logger.info(f"User {user.email} updated by {request.user.email}: {sorted(serializer.validated_data)}")
        return Response(
            {"message": "User updated successfully.", "user": ProfileSerializer(user).data},
            status=status.HTTP_200_OK,
        )
