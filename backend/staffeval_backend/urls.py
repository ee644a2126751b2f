# staffeval_backend/urls.py
from django.contrib import admin
from django.urls import path, include, re_path
from django.conf import settings
from django.conf.urls.static import static

from drf_yasg.views import get_schema_view
from drf_yasg import openapi
from rest_framework import permissions

from .views import home


# -------------------------------------------------------------------
# SWAGGER / REDOC DOCUMENTATION
# -------------------------------------------------------------------
schema_view = get_schema_view(
    openapi.Info(
        title="Staff Evaluation System API",
        default_version=getattr(settings, "API_VERSION", "v1"),
        description="Monthly staff evaluations, rank and reward rollups, goals and feedback.",
    ),
    public=True,
    permission_classes=(permissions.AllowAny,),
)

# -------------------------------------------------------------------
# URL ROUTES
# -------------------------------------------------------------------
urlpatterns = [
    path("", home, name="home"),

    path("admin/", admin.site.urls),

    path("api/users/", include("users.urls", namespace="users")),
    path("api/evaluations/", include("evaluations.urls", namespace="evaluations")),
    path("api/reports/", include("reports.urls", namespace="reports")),
    path("api/goals/", include("goals.urls", namespace="goals")),
    path("api/feedback/", include("feedback.urls", namespace="feedback")),
    path("api/notifications/", include("notifications.urls", namespace="notifications")),
]

# -------------------------------------------------------------------
# Swagger / Redoc routes (only enabled in DEBUG mode)
# -------------------------------------------------------------------
if settings.DEBUG:
    urlpatterns += [
        re_path(
            r"^swagger(?P<format>\.json|\.yaml)$",
            schema_view.without_ui(cache_timeout=0),
            name="schema-json",
        ),
        path(
            "swagger/",
            schema_view.with_ui("swagger", cache_timeout=0),
            name="schema-swagger-ui",
        ),
        path(
            "redoc/",
            schema_view.with_ui("redoc", cache_timeout=0),
            name="schema-redoc",
        ),
    ]
    urlpatterns += static(settings.MEDIA_URL, document_root=settings.MEDIA_ROOT)
