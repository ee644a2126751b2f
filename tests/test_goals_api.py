from datetime import date

import pytest

from goals.models import StaffGoal
from notifications.models import Notification

pytestmark = pytest.mark.django_db


def test_staff_create_goal_defaults_period_from_target_date(client_for, staff):
    response = client_for(staff).post(
        "/api/goals/",
        {"goal_title": "  Close 20 contracts ", "target_date": "2025-11-15", "achievement_rate": 10},
        format="json",
    )
    assert response.status_code == 201
    goal = StaffGoal.objects.get(staff=staff)
    assert goal.goal_title == "Close 20 contracts"
    assert (goal.period_year, goal.period_quarter) == (2025, 4)
    assert goal.status == "active"
    assert goal.interview_status == "pending"


def test_staff_cannot_set_interview_status_or_exceed_100(client_for, staff):
    client = client_for(staff)
    response = client.post(
        "/api/goals/", {"goal_title": "Grow", "interview_status": "completed"}, format="json"
    )
    assert response.status_code == 201
    assert response.data["interview_status"] == "pending"

    too_high = client.post("/api/goals/", {"goal_title": "Grow", "achievement_rate": 120}, format="json")
    assert too_high.status_code == 400


def test_staff_only_see_and_edit_own_goals(client_for, staff, other_staff):
    mine = StaffGoal.objects.create(staff=staff, goal_title="Mine")
    theirs = StaffGoal.objects.create(staff=other_staff, goal_title="Theirs")
    client = client_for(staff)

    listed = client.get("/api/goals/")
    assert [row["id"] for row in listed.data["results"]] == [mine.id]
    assert client.patch(f"/api/goals/{theirs.id}/", {"achievement_rate": 50}, format="json").status_code == 404

    updated = client.patch(f"/api/goals/{mine.id}/", {"achievement_rate": 50, "status": "completed"}, format="json")
    assert updated.status_code == 200
    mine.refresh_from_db()
    assert mine.achievement_rate == 50

    assert client.delete(f"/api/goals/{mine.id}/").status_code == 204


def test_admin_reviews_goal_and_staff_is_notified(client_for, admin, staff):
    goal = StaffGoal.objects.create(staff=staff, goal_title="Learn SQL", target_date=date(2025, 8, 1))
    client = client_for(admin)

    response = client.patch(
        f"/api/goals/{goal.id}/",
        {"interview_status": "scheduled", "goal_title": "Renamed"},
        format="json",
    )
    assert response.status_code == 200
    goal.refresh_from_db()
    assert goal.interview_status == "scheduled"
    assert goal.goal_title == "Learn SQL"

    notification = Notification.objects.get(recipient=staff)
    assert notification.category == Notification.CATEGORY_GOAL
    assert "Learn SQL" in notification.message


def test_admin_filters_and_cannot_create_or_delete(client_for, admin, staff, other_staff):
    StaffGoal.objects.create(staff=staff, goal_title="A", interview_status="scheduled")
    goal = StaffGoal.objects.create(staff=other_staff, goal_title="B")
    client = client_for(admin)

    assert client.get("/api/goals/").data["count"] == 2
    assert client.get("/api/goals/?interview_status=scheduled").data["count"] == 1
    assert client.get(f"/api/goals/?staff={other_staff.id}").data["count"] == 1

    assert client.post("/api/goals/", {"goal_title": "X"}, format="json").status_code == 403
    assert client.delete(f"/api/goals/{goal.id}/").status_code == 403


def test_goals_are_company_scoped(client_for, outsider_admin, staff):
    goal = StaffGoal.objects.create(staff=staff, goal_title="Private")
    assert client_for(outsider_admin).get(f"/api/goals/{goal.id}/").status_code == 404
