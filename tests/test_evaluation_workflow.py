from datetime import date, timedelta

import pytest
from rest_framework.exceptions import PermissionDenied, ValidationError

from evaluations.models import Evaluation, EvaluationCycle, EvaluationResponse, RankSetting
from evaluations.services import (
    company_items,
    get_admin_evaluation,
    recalculate_evaluation,
    required_evaluator_count,
    submit_evaluation,
)
from notifications.models import Notification
from users.models import User

from .helpers import MAX_SCORES, PASSWORD, make_scores, scores_totalling

pytestmark = pytest.mark.django_db


def test_company_seed_creates_items_categories_and_cycle(company):
    assert company.evaluation_categories.count() == 3
    assert len(company_items(company)) == 11
    cycle = EvaluationCycle.objects.get(company=company)
    assert cycle.cycle_name == "Period 6"
    assert cycle.status == EvaluationCycle.STATUS_ACTIVE


def test_required_evaluators_follow_admin_count(company, admin, second_admin, settings):
    assert required_evaluator_count(company) == 2
    settings.REQUIRED_EVALUATORS = 3
    assert required_evaluator_count(company) == 3


def test_single_submission_is_not_completed(admin, second_admin, staff):
    evaluation, response, newly_completed = submit_evaluation(admin, staff, 2025, 8, scores_totalling(90))

    assert not newly_completed
    assert response.is_submitted
    assert response.total_score == 90
    assert evaluation.status == Evaluation.STATUS_SUBMITTED
    assert evaluation.evaluation_period == "2025-08"
    assert evaluation.total_score is None
    assert evaluation.rank == ""
    assert evaluation.cycle.cycle_name == "Period 6"


def test_all_admins_submitting_completes_with_average(admin, second_admin, staff):
    submit_evaluation(admin, staff, 2025, 8, scores_totalling(90))
    evaluation, _, newly_completed = submit_evaluation(second_admin, staff, 2025, 8, scores_totalling(81))

    assert newly_completed
    assert evaluation.status == Evaluation.STATUS_COMPLETED
    assert evaluation.total_score == 85.5
    assert evaluation.average_score == 85.5
    assert evaluation.rank == "A+"
    assert evaluation.behavior_score == 30
    assert evaluation.completed_at is not None
    assert EvaluationResponse.objects.filter(evaluation=evaluation).count() == 2


def test_resubmitting_a_completed_evaluation_recomputes(admin, second_admin, staff):
    submit_evaluation(admin, staff, 2025, 8, scores_totalling(90))
    submit_evaluation(second_admin, staff, 2025, 8, scores_totalling(90))
    evaluation, _, newly_completed = submit_evaluation(admin, staff, 2025, 8, scores_totalling(80))

    assert not newly_completed
    assert evaluation.is_completed
    assert evaluation.total_score == 85
    assert evaluation.rank == "A+"


def test_reverting_to_draft_clears_completion(admin, second_admin, staff):
    submit_evaluation(admin, staff, 2025, 8, MAX_SCORES)
    submit_evaluation(second_admin, staff, 2025, 8, MAX_SCORES)
    evaluation, response, _ = submit_evaluation(admin, staff, 2025, 8, MAX_SCORES, is_draft=True)

    assert not response.is_submitted
    assert evaluation.status == Evaluation.STATUS_SUBMITTED
    assert evaluation.total_score is None
    assert evaluation.rank == ""
    assert evaluation.completed_at is None


def test_draft_only_evaluation_stays_draft(admin, second_admin, staff):
    evaluation, response, _ = submit_evaluation(admin, staff, 2025, 8, MAX_SCORES, is_draft=True)
    assert evaluation.status == Evaluation.STATUS_DRAFT
    assert response.submitted_at is None


def test_company_rank_settings_are_used(company, admin, staff):
    RankSetting.objects.create(company=company, rank_name="Gold", min_score=90, amount=5000, display_order=1)
    RankSetting.objects.create(company=company, rank_name="Silver", min_score=70, amount=1000, display_order=2)

    evaluation, _, _ = submit_evaluation(admin, staff, 2025, 8, scores_totalling(92))
    assert evaluation.rank == "Gold"


def test_comments_are_stored_per_item(admin, staff):
    _, response, _ = submit_evaluation(
        admin, staff, 2025, 8, MAX_SCORES, comments={"achievement": "  Great month  "}
    )
    items = {item.item_key: item for item in response.items.all()}
    assert len(items) == 11
    assert items["achievement"].comment == "Great month"
    assert items["attendance"].min_score == -5


def test_invalid_scores_are_rejected(admin, staff):
    with pytest.raises(ValidationError) as excinfo:
        submit_evaluation(admin, staff, 2025, 8, make_scores(achievement=26))
    assert "achievement" in excinfo.value.detail["scores"]
    assert not Evaluation.objects.exists()


def test_drafts_are_validated_too(admin, staff):
    scores = dict(MAX_SCORES)
    del scores["response"]
    with pytest.raises(ValidationError):
        submit_evaluation(admin, staff, 2025, 8, scores, is_draft=True)


def test_participants_are_checked(admin, staff, second_admin, outsider_staff):
    with pytest.raises(PermissionDenied):
        submit_evaluation(staff, staff, 2025, 8, MAX_SCORES)
    with pytest.raises(ValidationError):
        submit_evaluation(admin, outsider_staff, 2025, 8, MAX_SCORES)
    with pytest.raises(ValidationError):
        submit_evaluation(admin, second_admin, 2025, 8, MAX_SCORES)
    with pytest.raises(ValidationError):
        submit_evaluation(admin, staff, 2025, 13, MAX_SCORES)


def test_admin_only_sees_own_response(admin, second_admin, staff):
    submit_evaluation(admin, staff, 2025, 8, scores_totalling(90))
    submit_evaluation(second_admin, staff, 2025, 8, scores_totalling(80), is_draft=True)

    evaluation, response = get_admin_evaluation(second_admin, staff, 2025, 8)
    assert evaluation is not None
    assert response.admin == second_admin
    assert response.total_score == 80

    assert get_admin_evaluation(admin, staff, 2025, 9) == (None, None)


def test_demoted_admin_responses_no_longer_count(admin, second_admin, staff):
    submit_evaluation(second_admin, staff, 2025, 8, scores_totalling(75))
    second_admin.role = User.ROLE_STAFF
    second_admin.save()

    evaluation, _, newly_completed = submit_evaluation(admin, staff, 2025, 8, MAX_SCORES)

    assert newly_completed
    assert evaluation.status == Evaluation.STATUS_COMPLETED
    assert evaluation.total_score == 100
    assert evaluation.rank == "SS"
    assert evaluation.responses.count() == 2
    assert evaluation.responses.counted().count() == 1


def test_deactivated_admin_response_is_not_counted(admin, second_admin, staff):
    submit_evaluation(second_admin, staff, 2025, 8, MAX_SCORES)
    second_admin.is_active = False
    second_admin.save()
    User.objects.create_user(
        email="admin3@acme.test", password=PASSWORD, full_name="Cara Admin",
        role=User.ROLE_ADMIN, company=staff.company,
    )

    evaluation, _, newly_completed = submit_evaluation(admin, staff, 2025, 8, MAX_SCORES)

    assert not newly_completed
    assert evaluation.status == Evaluation.STATUS_SUBMITTED


def test_zero_required_never_completes(admin, staff):
    evaluation, _, _ = submit_evaluation(admin, staff, 2025, 8, MAX_SCORES)
    evaluation, newly_completed = recalculate_evaluation(evaluation, required=0)
    assert not newly_completed
    assert evaluation.status == Evaluation.STATUS_SUBMITTED


def test_completion_notifies_staff_on_commit(admin, second_admin, staff, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks(execute=True):
        submit_evaluation(admin, staff, 2025, 8, MAX_SCORES)
    assert not Notification.objects.filter(recipient=staff).exists()

    with django_capture_on_commit_callbacks(execute=True):
        submit_evaluation(second_admin, staff, 2025, 8, MAX_SCORES)

    notification = Notification.objects.get(recipient=staff)
    assert notification.category == Notification.CATEGORY_EVALUATION
    assert "2025-08" in notification.message
    assert "SS" in notification.message


# -----------------------------------------------------------
# API
# -----------------------------------------------------------
def _submit(client, staff, scores, **extra):
    payload = {"evaluation_year": 2025, "evaluation_month": 8, "scores": scores, **extra}
    return client.post(f"/api/evaluations/staff/{staff.id}/", payload, format="json")


def test_api_submit_and_complete(client_for, admin, second_admin, staff):
    first = _submit(client_for(admin), staff, scores_totalling(90))
    assert first.status_code == 200
    assert first.data["data"]["submitted_count"] == 1
    assert first.data["data"]["total_required"] == 2
    assert first.data["data"]["evaluation"]["status"] == "submitted"

    second = _submit(client_for(second_admin), staff, scores_totalling(80))
    assert second.status_code == 200
    evaluation = second.data["data"]["evaluation"]
    assert evaluation["status"] == "completed"
    assert evaluation["total_score"] == 85
    assert evaluation["rank"] == "A+"
    assert evaluation["reward"] == 4000
    assert evaluation["reward_display"] == "+¥4,000"


def test_api_get_hides_other_admins_scores(client_for, admin, second_admin, staff):
    _submit(client_for(admin), staff, scores_totalling(90))

    response = client_for(second_admin).get(f"/api/evaluations/staff/{staff.id}/?year=2025&month=8")
    assert response.status_code == 200
    assert response.data["my_response"] is None
    assert response.data["submitted_count"] == 1
    assert response.data["evaluation"]["total_score"] is None


def test_api_validation_errors_are_flattened(client_for, admin, staff):
    response = _submit(client_for(admin), staff, make_scores(achievement=99))
    assert response.status_code == 400
    assert "achievement" in response.data["errors"]["scores"]


def test_api_rejects_staff_and_other_company(client_for, admin, staff, outsider_staff):
    assert _submit(client_for(staff), staff, MAX_SCORES).status_code == 403
    assert _submit(client_for(admin), outsider_staff, MAX_SCORES).status_code == 404


def test_staff_only_see_their_completed_evaluations(client_for, admin, second_admin, staff, other_staff):
    submit_evaluation(admin, staff, 2025, 7, MAX_SCORES)
    submit_evaluation(second_admin, staff, 2025, 7, MAX_SCORES)
    submit_evaluation(admin, staff, 2025, 8, MAX_SCORES)
    submit_evaluation(admin, other_staff, 2025, 7, MAX_SCORES)

    response = client_for(staff).get("/api/evaluations/records/")
    assert response.status_code == 200
    assert [row["evaluation_period"] for row in response.data["results"]] == ["2025-07"]

    admin_view = client_for(admin).get("/api/evaluations/records/?year=2025&month=7")
    assert admin_view.data["count"] == 2


def test_items_endpoint_groups_by_category(client_for, staff):
    response = client_for(staff).get("/api/evaluations/items/")
    assert response.status_code == 200
    categories = {c["category_key"]: c for c in response.data["categories"]}
    assert len(categories["performance"]["items"]) == 4
    assert response.data["ranks"][0]["rank"] == "SS"


def test_periods_endpoint(client_for, staff):
    response = client_for(staff).get("/api/evaluations/periods/?period=1")
    assert response.status_code == 200
    assert response.data["months"][0]["label"] == "2020-07"
    assert len(response.data["quarters"]) == 4


def test_periods_endpoint_rejects_future_establishment_date(client_for, staff, company):
    company.establishment_date = date.today() + timedelta(days=400)
    company.save()

    response = client_for(staff).get("/api/evaluations/periods/")
    assert response.status_code == 400


def test_settings_are_admin_writable_only(client_for, admin, staff, company):
    payload = {"rank_name": "Gold", "min_score": 90, "amount": 5000, "display_order": 1}
    assert client_for(staff).post("/api/evaluations/settings/ranks/", payload, format="json").status_code == 403

    created = client_for(admin).post("/api/evaluations/settings/ranks/", payload, format="json")
    assert created.status_code == 201
    assert RankSetting.objects.get(rank_name="Gold").company == company

    listed = client_for(staff).get("/api/evaluations/settings/ranks/")
    assert [row["rank_name"] for row in listed.data] == ["Gold"]
