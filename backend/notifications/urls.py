# ===============================================
# notifications/urls.py
# ===============================================
from django.urls import path

from .views import (
    MarkAllNotificationsReadView,
    MarkNotificationReadView,
    MarkNotificationUnreadView,
    NotificationDeleteView,
    NotificationListView,
    UnreadCountView,
)

app_name = "notifications"

urlpatterns = [
    path("", NotificationListView.as_view(), name="notification_list"),
    path("unread-count/", UnreadCountView.as_view(), name="unread_count"),
    path("mark-all-read/", MarkAllNotificationsReadView.as_view(), name="mark_all_read"),
    path("<int:pk>/read/", MarkNotificationReadView.as_view(), name="mark_read"),
    path("<int:pk>/unread/", MarkNotificationUnreadView.as_view(), name="mark_unread"),
    path("<int:pk>/delete/", NotificationDeleteView.as_view(), name="notification_delete"),
]
