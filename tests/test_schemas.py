"""
Tests for request validation rules and error formatting.
"""

from datetime import date

import pytest
from pydantic import ValidationError

from backend.app.error_handlers import format_validation_errors
from backend.app.schemas import (
    EducationCreateRequest,
    ExperienceCreateRequest,
    ProfileUpsertRequest,
    parse_row_id,
)


def _messages(exc: ValidationError) -> dict[str, str]:
    return {str(e["loc"][-1]): e["msg"] for e in exc.errors()}


def test_profile_request_reports_every_missing_rule():
    with pytest.raises(ValidationError) as exc_info:
        ProfileUpsertRequest.model_validate({})

    assert _messages(exc_info.value) == {
        "status": "Status is required",
        "skills": "Skills are required",
    }


def test_experience_request_accepts_from_alias():
    payload = ExperienceCreateRequest.model_validate(
        {"title": "Engineer", "company": "Acme", "from": "2020-02-01", "to": "2021-03-01"}
    )

    assert payload.from_date == date(2020, 2, 1)
    assert payload.to_date == date(2021, 3, 1)
    assert payload.current is False


@pytest.mark.parametrize("skills", [" , ", "   ", [" "]])
def test_profile_request_skills_must_name_something(skills):
    with pytest.raises(ValidationError) as exc_info:
        ProfileUpsertRequest.model_validate({"status": "Developer", "skills": skills})

    assert _messages(exc_info.value) == {"skills": "Skills are required"}


def test_profile_request_skills_are_split():
    payload = ProfileUpsertRequest.model_validate({"status": "Developer", "skills": "Go , SQL"})

    assert payload.skills == ["Go", "SQL"]


@pytest.mark.parametrize("current", [None, ""])
def test_experience_request_blank_current_is_false(current):
    payload = ExperienceCreateRequest.model_validate(
        {"title": "Engineer", "company": "Acme", "from": "2020-02-01", "current": current}
    )

    assert payload.current is False


@pytest.mark.parametrize(
    "raw, expected",
    [("42", 42), ("0", None), ("-1", None), ("abc", None), (None, None), (str(2**63), None)],
)
def test_parse_row_id(raw, expected):
    assert parse_row_id(raw) == expected


def test_experience_request_invalid_date():
    with pytest.raises(ValidationError) as exc_info:
        ExperienceCreateRequest.model_validate(
            {"title": "Engineer", "company": "Acme", "from": "not-a-date"}
        )

    assert list(_messages(exc_info.value)) == ["from"]


def test_education_request_rules():
    with pytest.raises(ValidationError) as exc_info:
        EducationCreateRequest.model_validate({"school": "MIT"})

    assert _messages(exc_info.value) == {
        "degree": "Degree is required",
        "fieldofstudy": "Field of study is required",
        "from": "From date is required",
    }


def test_unknown_fields_are_ignored():
    payload = ProfileUpsertRequest.model_validate(
        {"status": "Developer", "skills": "Go", "Bio": "wrong case"}
    )

    assert payload.bio is None


def test_format_validation_errors():
    errors = [
        {"loc": ("body", "status"), "msg": "Status is required", "input": None},
        {"loc": ("body",), "msg": "Field required", "input": None},
        {"loc": ("path", "user_id"), "msg": "bad", "input": "x"},
    ]

    assert format_validation_errors(errors) == [
        {"msg": "Status is required", "param": "status", "location": "body", "value": None},
        {"msg": "Field required", "param": "body", "location": "body", "value": None},
        {"msg": "bad", "param": "user_id", "location": "path", "value": "x"},
    ]
