import pytest
from rest_framework.exceptions import ValidationError

from staffeval_backend.utils import to_int


def test_to_int_parses_and_bounds():
    assert to_int("7", "month", minimum=1, maximum=12) == 7
    assert to_int(None, "month", default=3) == 3
    with pytest.raises(ValidationError) as excinfo:
        to_int("13", "month", minimum=1, maximum=12)
    assert "month" in excinfo.value.detail
    with pytest.raises(ValidationError):
        to_int("abc", "year")
    with pytest.raises(ValidationError):
        to_int("", "year")


@pytest.mark.django_db
def test_home_reports_version(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["app"] == "Staff Evaluation System"


@pytest.mark.django_db
def test_anonymous_requests_are_rejected(api_client):
    response = api_client.get("/api/evaluations/records/")
    assert response.status_code == 401
    assert "detail" in response.data["errors"]
