import re
from datetime import date, timedelta

import pytest
from django.core import mail

from evaluations.models import EvaluationCategory, EvaluationCycle, EvaluationItemMaster
from evaluations.services import seed_company_defaults
from users.models import Company, User

from .helpers import PASSWORD

pytestmark = pytest.mark.django_db


def test_register_company_creates_admin_and_defaults(api_client):
    response = api_client.post(
        "/api/users/register-company/",
        {
            "company_name": "Initech",
            "establishment_date": "2019-04-01",
            "full_name": "Peter Owner",
            "email": "Owner@Initech.test",
            "password": "abcdef",
            "password_confirm": "abcdef",
        },
        format="json",
    )

    assert response.status_code == 201
    code = response.data["company_code"]
    assert re.fullmatch(r"[A-Z0-9]{6}", code)

    company = Company.objects.get(company_code=code)
    admin = User.objects.get(email="owner@initech.test")
    assert admin.is_admin
    assert admin.company == company
    assert EvaluationCategory.objects.filter(company=company).count() == 3
    assert EvaluationItemMaster.objects.filter(company=company).count() == 11
    assert EvaluationCycle.objects.filter(company=company, status="active").count() == 1


def test_register_company_validates_passwords(api_client):
    response = api_client.post(
        "/api/users/register-company/",
        {
            "company_name": "Initech",
            "full_name": "Peter",
            "email": "p@initech.test",
            "password": "abc",
            "password_confirm": "abd",
        },
        format="json",
    )
    assert response.status_code == 400
    assert response.data["errors"]
    assert not Company.objects.filter(company_name="Initech").exists()


def test_register_company_rejects_future_establishment_date(api_client):
    response = api_client.post(
        "/api/users/register-company/",
        {
            "company_name": "Futura",
            "establishment_date": (date.today() + timedelta(days=400)).isoformat(),
            "full_name": "Fran Founder",
            "email": "fran@futura.test",
            "password": "abcdef",
            "password_confirm": "abcdef",
        },
        format="json",
    )

    assert response.status_code == 400
    assert "establishment_date" in response.data["errors"]
    assert not Company.objects.filter(company_name="Futura").exists()
    assert not User.objects.filter(email="fran@futura.test").exists()


def test_seeding_a_company_not_yet_founded_starts_at_period_one(db):
    company = Company.objects.create(company_name="Futura", establishment_date=date(2026, 4, 1))
    seed_company_defaults(company, today=date(2025, 8, 15))

    cycle = EvaluationCycle.objects.get(company=company)
    assert cycle.cycle_name == "Period 1"
    assert cycle.start_date == date(2026, 4, 1)
    assert cycle.end_date == date(2027, 3, 31)


def test_company_without_establishment_date_has_no_cycle(api_client):
    api_client.post(
        "/api/users/register-company/",
        {
            "company_name": "Hooli",
            "full_name": "Gavin",
            "email": "gavin@hooli.test",
            "password": "abcdef",
            "password_confirm": "abcdef",
        },
        format="json",
    )
    company = Company.objects.get(company_name="Hooli")
    assert not EvaluationCycle.objects.filter(company=company).exists()


def test_register_user_with_case_insensitive_code(api_client, company):
    response = api_client.post(
        "/api/users/register-user/",
        {
            "company_code": company.company_code.lower(),
            "full_name": "New Hire",
            "email": "hire@acme.test",
            "password": "abcdef",
            "password_confirm": "abcdef",
        },
        format="json",
    )
    assert response.status_code == 201
    user = User.objects.get(email="hire@acme.test")
    assert user.role == User.ROLE_STAFF
    assert user.company == company


def test_register_user_rejects_unknown_code_and_duplicate_email(api_client, company, staff):
    payload = {
        "company_code": "ZZZZZZ",
        "full_name": "Nobody",
        "email": staff.email.upper(),
        "password": "abcdef",
        "password_confirm": "abcdef",
    }
    response = api_client.post("/api/users/register-user/", payload, format="json")
    assert response.status_code == 400
    assert set(response.data["errors"]) >= {"company_code", "email"}


def test_login_returns_tokens_and_profile(api_client, staff):
    response = api_client.post(
        "/api/users/login/", {"email": "STAFF@acme.test", "password": PASSWORD}, format="json"
    )
    assert response.status_code == 200
    assert "access" in response.data and "refresh" in response.data
    assert response.data["user"]["role"] == "staff"
    assert response.data["user"]["company"]["company_code"] == staff.company.company_code


def test_login_rejected_for_inactive_company(api_client, staff, company):
    company.is_active = False
    company.save()
    response = api_client.post("/api/users/login/", {"email": staff.email, "password": PASSWORD}, format="json")
    assert response.status_code == 400


def test_profile_get_and_patch(client_for, staff):
    client = client_for(staff)
    assert client.get("/api/users/profile/").data["email"] == staff.email

    response = client.patch("/api/users/profile/", {"position": "Lead"}, format="json")
    assert response.status_code == 200
    staff.refresh_from_db()
    assert staff.position == "Lead"


def test_change_password(client_for, staff):
    client = client_for(staff)
    wrong = client.post(
        "/api/users/change-password/",
        {"old_password": "nope", "new_password": "newpass1", "confirm_password": "newpass1"},
        format="json",
    )
    assert wrong.status_code == 400

    ok = client.post(
        "/api/users/change-password/",
        {"old_password": PASSWORD, "new_password": "newpass1", "confirm_password": "newpass1"},
        format="json",
    )
    assert ok.status_code == 200
    staff.refresh_from_db()
    assert staff.check_password("newpass1")


def test_forgot_and_reset_password(api_client, staff):
    response = api_client.post("/api/users/forgot-password/", {"email": staff.email}, format="json")
    assert response.status_code == 200
    assert len(mail.outbox) == 1

    match = re.search(r"uid=([^&\s]+)&token=([^\s]+)", mail.outbox[0].body)
    uid, token = match.groups()

    reset = api_client.post(
        "/api/users/reset-password/",
        {"uid": uid, "token": token, "new_password": "fresh99", "confirm_password": "fresh99"},
        format="json",
    )
    assert reset.status_code == 200
    staff.refresh_from_db()
    assert staff.check_password("fresh99")

    reused = api_client.post(
        "/api/users/reset-password/",
        {"uid": uid, "token": token, "new_password": "again99", "confirm_password": "again99"},
        format="json",
    )
    assert reused.status_code == 400


def test_forgot_password_does_not_reveal_unknown_emails(api_client, db):
    response = api_client.post("/api/users/forgot-password/", {"email": "ghost@acme.test"}, format="json")
    assert response.status_code == 200
    assert mail.outbox == []


def test_admin_lists_only_company_users(client_for, admin, staff, other_staff, outsider_staff):
    response = client_for(admin).get("/api/users/?role=staff")
    assert response.status_code == 200
    emails = {row["email"] for row in response.data["results"]}
    assert emails == {staff.email, other_staff.email}


def test_staff_cannot_list_users(client_for, staff):
    assert client_for(staff).get("/api/users/").status_code == 403


def test_admin_updates_user_role_and_department(client_for, admin, staff):
    response = client_for(admin).patch(
        f"/api/users/{staff.id}/", {"role": "admin", "department": "Ops"}, format="json"
    )
    assert response.status_code == 200
    staff.refresh_from_db()
    assert staff.is_admin
    assert staff.department == "Ops"


def test_admin_cannot_demote_self_or_edit_other_companies(client_for, admin, outsider_staff):
    client = client_for(admin)
    assert client.patch(f"/api/users/{admin.id}/", {"role": "staff"}, format="json").status_code == 400
    assert client.patch(f"/api/users/{outsider_staff.id}/", {"department": "X"}, format="json").status_code == 404


def test_company_view(client_for, admin, staff, company):
    assert client_for(staff).get("/api/users/company/").data["company_name"] == "Acme Trading"
    assert client_for(staff).patch("/api/users/company/", {"company_name": "X"}, format="json").status_code == 403

    response = client_for(admin).patch("/api/users/company/", {"company_name": "Acme Holdings"}, format="json")
    assert response.status_code == 200
    company.refresh_from_db()
    assert company.company_name == "Acme Holdings"


def test_company_code_generation_is_uppercase_and_unique(db):
    first = Company.objects.create(company_name="One")
    second = Company.objects.create(company_name="Two", company_code="abc123")
    assert first.company_code != second.company_code
    assert second.company_code == "ABC123"


def test_company_update_rejects_future_establishment_date(client_for, admin, company):
    response = client_for(admin).patch(
        "/api/users/company/",
        {"establishment_date": (date.today() + timedelta(days=400)).isoformat()},
        format="json",
    )
    assert response.status_code == 400
    assert "establishment_date" in response.data["errors"]
    company.refresh_from_db()
    assert company.establishment_date == date(2020, 7, 1)
