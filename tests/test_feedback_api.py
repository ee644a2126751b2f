import pytest

from evaluations.services import submit_evaluation
from feedback.models import AdminComment, EvaluationQuestion
from notifications.models import Notification

from .helpers import MAX_SCORES

pytestmark = pytest.mark.django_db


@pytest.fixture
def completed_evaluation(admin, staff):
    evaluation, _, _ = submit_evaluation(admin, staff, 2025, 8, MAX_SCORES)
    return evaluation


def test_admin_comments_on_staff_evaluation(client_for, admin, staff, completed_evaluation):
    client = client_for(admin)
    response = client.post(
        f"/api/feedback/comments/staff/{staff.id}/",
        {"evaluation": completed_evaluation.id, "comment": "Great quarter"},
        format="json",
    )
    assert response.status_code == 201
    assert response.data["data"]["admin_name"] == admin.full_name

    notification = Notification.objects.get(recipient=staff)
    assert notification.category == Notification.CATEGORY_COMMENT

    listed = client.get(f"/api/feedback/comments/staff/{staff.id}/?period=2025-08")
    assert [row["comment"] for row in listed.data] == ["Great quarter"]
    assert client.get(f"/api/feedback/comments/staff/{staff.id}/?period=2025-07").data == []


def test_comment_must_target_the_staff_members_evaluation(client_for, admin, staff, other_staff, completed_evaluation):
    response = client_for(admin).post(
        f"/api/feedback/comments/staff/{other_staff.id}/",
        {"evaluation": completed_evaluation.id, "comment": "Wrong person"},
        format="json",
    )
    assert response.status_code == 400
    assert "evaluation" in response.data["errors"]


def test_blank_comment_rejected(client_for, admin, staff, completed_evaluation):
    response = client_for(admin).post(
        f"/api/feedback/comments/staff/{staff.id}/",
        {"evaluation": completed_evaluation.id, "comment": "   "},
        format="json",
    )
    assert response.status_code == 400


def test_staff_read_own_comments_only(client_for, admin, staff, completed_evaluation):
    AdminComment.objects.create(evaluation=completed_evaluation, admin=admin, comment="Visible")
    client = client_for(staff)

    assert [row["comment"] for row in client.get("/api/feedback/comments/mine/").data] == ["Visible"]
    assert client.get(f"/api/feedback/comments/staff/{staff.id}/").status_code == 403


def test_only_author_deletes_comment(client_for, admin, second_admin, staff, completed_evaluation):
    comment = AdminComment.objects.create(evaluation=completed_evaluation, admin=admin, comment="Mine")
    assert client_for(second_admin).delete(f"/api/feedback/comments/{comment.id}/").status_code == 403
    assert client_for(admin).delete(f"/api/feedback/comments/{comment.id}/").status_code == 200
    assert not AdminComment.objects.exists()


def test_question_and_answer_flow(client_for, admin, staff, completed_evaluation):
    staff_client = client_for(staff)
    asked = staff_client.post(
        "/api/feedback/questions/",
        {"evaluation": completed_evaluation.id, "question": "How can I reach SS again?"},
        format="json",
    )
    assert asked.status_code == 201
    question_id = asked.data["data"]["id"]
    assert Notification.objects.filter(recipient=admin, category=Notification.CATEGORY_QUESTION).exists()

    admin_client = client_for(admin)
    assert [row["id"] for row in admin_client.get("/api/feedback/questions/?answered=false").data] == [question_id]

    answered = admin_client.post(
        f"/api/feedback/questions/{question_id}/answer/", {"answer": "Keep it up."}, format="json"
    )
    assert answered.status_code == 200
    assert answered.data["data"]["is_answered"] is True

    question = EvaluationQuestion.objects.get(pk=question_id)
    assert question.answer == "Keep it up."
    assert question.admin == admin
    assert question.answered_at is not None
    assert Notification.objects.filter(recipient=staff, category=Notification.CATEGORY_QUESTION).exists()
    assert admin_client.get("/api/feedback/questions/?answered=false").data == []


def test_questions_need_own_completed_evaluation(client_for, admin, second_admin, staff, other_staff):
    pending, _, _ = submit_evaluation(admin, staff, 2025, 9, MAX_SCORES)
    assert not pending.is_completed

    client = client_for(staff)
    response = client.post(
        "/api/feedback/questions/", {"evaluation": pending.id, "question": "Too early?"}, format="json"
    )
    assert response.status_code == 400

    submit_evaluation(second_admin, staff, 2025, 9, MAX_SCORES)
    intruder = client_for(other_staff).post(
        "/api/feedback/questions/", {"evaluation": pending.id, "question": "Peek"}, format="json"
    )
    assert intruder.status_code == 400


def test_admins_cannot_ask_and_staff_cannot_answer(client_for, admin, staff, completed_evaluation):
    assert client_for(admin).post(
        "/api/feedback/questions/", {"evaluation": completed_evaluation.id, "question": "?"}, format="json"
    ).status_code == 403

    question = EvaluationQuestion.objects.create(evaluation=completed_evaluation, staff=staff, question="Why?")
    assert client_for(staff).post(
        f"/api/feedback/questions/{question.id}/answer/", {"answer": "Because"}, format="json"
    ).status_code == 403


def test_questions_are_scoped(client_for, staff, other_staff, outsider_admin, completed_evaluation):
    question = EvaluationQuestion.objects.create(evaluation=completed_evaluation, staff=staff, question="Why?")

    assert client_for(other_staff).get("/api/feedback/questions/").data == []
    assert client_for(other_staff).get(f"/api/feedback/questions/{question.id}/").status_code == 404
    assert client_for(outsider_admin).get(f"/api/feedback/questions/{question.id}/").status_code == 404
    assert client_for(staff).get(f"/api/feedback/questions/{question.id}/").status_code == 200
