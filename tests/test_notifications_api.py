import pytest
from django.db import DatabaseError

from notifications.models import Notification
from notifications import services
from notifications.services import notify, notify_many

pytestmark = pytest.mark.django_db


def test_notify_creates_notification(staff):
    notification = notify(staff, "Hello", category=Notification.CATEGORY_SYSTEM, link="/home")
    assert notification.recipient == staff
    assert notification.link == "/home"
    assert notify(None, "Nobody") is None


def test_notify_many(staff, other_staff):
    created = notify_many([staff, other_staff], "Heads up")
    assert len(created) == 2
    assert Notification.objects.count() == 2


def test_notify_failure_is_logged_not_raised(staff, monkeypatch):
    warnings = []

    def broken(**kwargs):
        raise DatabaseError("disk full")

    monkeypatch.setattr(Notification.objects, "create", broken)
    monkeypatch.setattr(services.logger, "warning", warnings.append)

    assert notify(staff, "Lost") is None
    assert "disk full" in warnings[0]


def test_list_and_unread_count(client_for, staff, other_staff):
    notify(staff, "One", category=Notification.CATEGORY_COMMENT)
    notify(staff, "Two", category=Notification.CATEGORY_GOAL)
    notify(other_staff, "Not yours")
    client = client_for(staff)

    response = client.get("/api/notifications/")
    assert response.status_code == 200
    assert response.data["results"]["unread_count"] == 2
    assert len(response.data["results"]["notifications"]) == 2

    by_category = client.get("/api/notifications/?category=goal")
    assert [n["message"] for n in by_category.data["results"]["notifications"]] == ["Two"]

    assert client.get("/api/notifications/unread-count/").data["unread_count"] == 2


def test_mark_read_unread_and_all(client_for, staff):
    first = notify(staff, "First")
    notify(staff, "Second")
    client = client_for(staff)

    assert client.patch(f"/api/notifications/{first.id}/read/").status_code == 200
    first.refresh_from_db()
    assert first.is_read and first.read_at is not None
    assert client.get("/api/notifications/?status=read").data["results"]["notifications"][0]["id"] == first.id

    client.patch(f"/api/notifications/{first.id}/unread/")
    first.refresh_from_db()
    assert not first.is_read

    response = client.patch("/api/notifications/mark-all-read/")
    assert response.data["total_processed"] == 2
    assert client.get("/api/notifications/unread-count/").data["unread_count"] == 0


def test_auto_delete_notifications_disappear_when_read(client_for, staff):
    notification = notify(staff, "Ephemeral", auto_delete=True)
    response = client_for(staff).patch(f"/api/notifications/{notification.id}/read/")
    assert "auto-deleted" in response.data["message"]
    assert not Notification.objects.filter(pk=notification.pk).exists()


def test_cannot_touch_other_users_notifications(client_for, staff, other_staff):
    notification = notify(other_staff, "Private")
    client = client_for(staff)
    assert client.patch(f"/api/notifications/{notification.id}/read/").status_code == 404
    assert client.delete(f"/api/notifications/{notification.id}/delete/").status_code == 404

    owner = client_for(other_staff)
    assert owner.delete(f"/api/notifications/{notification.id}/delete/").status_code == 204
