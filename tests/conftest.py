from datetime import date

import pytest
from rest_framework.test import APIClient

from evaluations.services import seed_company_defaults
from users.models import Company, User

from .helpers import PASSWORD


@pytest.fixture(autouse=True)
def _fast_settings(settings):
    settings.PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]
    settings.EMAIL_BACKEND = "django.core.mail.backends.locmem.EmailBackend"
    settings.REQUIRED_EVALUATORS = None
    settings.FISCAL_YEAR_START_MONTH = 7


def _user(company, email, role, **extra):
    return User.objects.create_user(
        email=email,
        password=PASSWORD,
        full_name=extra.pop("full_name", email.split("@")[0].title()),
        role=role,
        company=company,
        **extra,
    )


@pytest.fixture
def company(db):
    company = Company.objects.create(company_name="Acme Trading", establishment_date=date(2020, 7, 1))
    seed_company_defaults(company, today=date(2025, 8, 15))
    return company


@pytest.fixture
def admin(company):
    return _user(company, "admin1@acme.test", User.ROLE_ADMIN, full_name="Alice Admin")


@pytest.fixture
def second_admin(company):
    return _user(company, "admin2@acme.test", User.ROLE_ADMIN, full_name="Bob Admin")


@pytest.fixture
def staff(company):
    return _user(company, "staff@acme.test", User.ROLE_STAFF, full_name="Sam Staff", department="Sales")


@pytest.fixture
def other_staff(company):
    return _user(company, "staff2@acme.test", User.ROLE_STAFF, full_name="Terry Staff", department="Support")


@pytest.fixture
def other_company(db):
    company = Company.objects.create(company_name="Globex")
    seed_company_defaults(company)
    return company


@pytest.fixture
def outsider_admin(other_company):
    return _user(other_company, "admin@globex.test", User.ROLE_ADMIN)


@pytest.fixture
def outsider_staff(other_company):
    return _user(other_company, "staff@globex.test", User.ROLE_STAFF)


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def client_for():
    def _client(user):
        client = APIClient()
        client.force_authenticate(user=user)
        return client

    return _client
