# staffeval_backend/views.py
from django.conf import settings
from django.http import JsonResponse


def home(request):
    """Landing endpoint confirming the deployment is up."""
    return JsonResponse(
        {
            "app": settings.APP_NAME,
            "version": settings.VERSION,
            "api_version": settings.API_VERSION,
        }
    )
