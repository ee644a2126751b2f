# ===============================================
# notifications/views.py
# ===============================================
from django.db import transaction
from django.shortcuts import get_object_or_404
from django.utils import timezone
from rest_framework import generics, status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from .models import Notification
from .serializers import NotificationSerializer


class NotificationPagination(PageNumberPagination):
    page_size = 10
    page_size_query_param = "page_size"
    max_page_size = 100


# ===============================================================
# Notification List View
# ===============================================================
class NotificationListView(generics.ListAPIView):
    """
    Notifications of the logged-in user.

    Query Params:
      - ?status=unread|read|all        (default: unread)
      - ?category=evaluation|comment|question|goal|system
      - Pagination: ?page=1&page_size=10
    """
    serializer_class = NotificationSerializer
    permission_classes = [IsAuthenticated]
    pagination_class = NotificationPagination

    def get_queryset(self):
        params = self.request.query_params
        status_filter = params.get("status", "unread").lower()
        qs = Notification.objects.filter(recipient=self.request.user)

        if status_filter == "read":
            qs = qs.filter(is_read=True)
        elif status_filter != "all":
            qs = qs.filter(is_read=False)

        if params.get("category") in dict(Notification.CATEGORY_CHOICES):
            qs = qs.filter(category=params["category"])

        return qs.order_by("-created_at")

    def list(self, request, *args, **kwargs):
        queryset = self.get_queryset()
        page = self.paginate_queryset(queryset)
        serializer = self.get_serializer(page, many=True)
        unread_count = Notification.objects.filter(recipient=request.user, is_read=False).count()

        return self.get_paginated_response({
            "unread_count": unread_count,
            "notifications": serializer.data,
        })


class UnreadCountView(generics.GenericAPIView):
    """Unread notification count (bell icon)."""
    permission_classes = [IsAuthenticated]

    def get(self, request):
        count = Notification.objects.filter(recipient=request.user, is_read=False).count()
        return Response({"unread_count": count}, status=status.HTTP_200_OK)


class MarkNotificationReadView(generics.GenericAPIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, pk):
        notification = get_object_or_404(Notification, pk=pk, recipient=request.user)
        deleted = notification.mark_as_read()

        message = "Notification marked as read and auto-deleted." if deleted else "Notification marked as read."
        return Response({"message": message, "notification_id": pk}, status=status.HTTP_200_OK)


class MarkNotificationUnreadView(generics.GenericAPIView):
    permission_classes = [IsAuthenticated]

    def patch(self, request, pk):
        notification = get_object_or_404(Notification, pk=pk, recipient=request.user)
        notification.mark_as_unread()
        return Response({"message": "Notification marked as unread.", "notification_id": pk}, status=status.HTTP_200_OK)


class MarkAllNotificationsReadView(generics.GenericAPIView):
    permission_classes = [IsAuthenticated]

    @transaction.atomic
    def patch(self, request):
        unread_qs = Notification.objects.filter(recipient=request.user, is_read=False)

        auto_deleted_count, _ = unread_qs.filter(auto_delete=True).delete()
        updated_count = unread_qs.filter(auto_delete=False).update(is_read=True, read_at=timezone.now())

        return Response(
            {
                "message": f"Marked {updated_count} notifications as read and auto-deleted {auto_deleted_count}.",
                "total_processed": updated_count + auto_deleted_count,
            },
            status=status.HTTP_200_OK,
        )


class NotificationDeleteView(generics.DestroyAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer

    def get_queryset(self):
        return Notification.objects.filter(recipient=self.request.user)
