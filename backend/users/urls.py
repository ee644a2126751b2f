# ===========================================================
# users/urls.py
# ===========================================================

from django.urls import path

from .views import (
    ChangePasswordView,
    CompanyView,
    ForgotPasswordView,
    ObtainTokenPairView,
    ProfileView,
    RefreshTokenView,
    RegisterCompanyView,
    RegisterUserView,
    ResetPasswordView,
    UserDetailView,
    UserListView,
)

app_name = "users"

# ===========================================================
# ROUTES SUMMARY
# ===========================================================
# /api/users/login/              → JWT login (email + password)
# /api/users/token/refresh/      → Refresh JWT token
# /api/users/register-company/   → New company + first admin
# /api/users/register-user/      → Staff joins with company code
# /api/users/profile/            → Get or update own profile
# /api/users/change-password/    → Change own password
# /api/users/forgot-password/    → Email a reset link
# /api/users/reset-password/     → Set a new password from the link
# /api/users/company/            → Own company (admin may update)
# /api/users/                    → Company user list (admin)
# /api/users/<id>/               → Company user detail / role change (admin)
# ===========================================================

urlpatterns = [
    path("login/", ObtainTokenPairView.as_view(), name="token_obtain_pair"),
    path("token/refresh/", RefreshTokenView.as_view(), name="token_refresh"),

    path("register-company/", RegisterCompanyView.as_view(), name="register_company"),
    path("register-user/", RegisterUserView.as_view(), name="register_user"),

    path("profile/", ProfileView.as_view(), name="user_profile"),
    path("change-password/", ChangePasswordView.as_view(), name="change_password"),
    path("forgot-password/", ForgotPasswordView.as_view(), name="forgot_password"),
    path("reset-password/", ResetPasswordView.as_view(), name="reset_password"),

    path("company/", CompanyView.as_view(), name="company"),
    path("", UserListView.as_view(), name="user_list"),
    path("<int:pk>/", UserDetailView.as_view(), name="user_detail"),
]
