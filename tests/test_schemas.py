"""Tests for request validation."""

from datetime import date, datetime

import pytest
from pydantic import ValidationError

from biodata.config import ValidationSettings
from biodata.schemas import (
    CreateCertificationRequest,
    CreateDocumentRequest,
    CreateEducationRequest,
    CreateExpertRequest,
    ExpertSearchRequest,
    UpdateExpertRequest,
)


def expert_payload(**overrides):
    data = {
        "full_name": "Alice Carter",
        "place_of_birth": "Boston",
        "date_of_birth": "1985-05-15T00:00:00",
        "address": "12 Harbor Rd",
        "email": "alice@example.com",
        "phone_number": "+1-555-0100",
    }
    data.update(overrides)
    return data


class TestCreateExpertRequest:
    def test_valid(self):
        request = CreateExpertRequest(**expert_payload())
        assert request.date_of_birth == datetime(1985, 5, 15)

    @pytest.mark.parametrize("field, value", [
        ("email", "not-an-email"),
        ("full_name", ""),
        ("phone_number", ""),
        ("date_of_birth", "yesterday"),
    ])
    def test_invalid_field(self, field, value):
        with pytest.raises(ValidationError) as exc_info:
            CreateExpertRequest(**expert_payload(**{field: value}))
        assert exc_info.value.errors()[0]["loc"] == (field,)


class TestUpdateExpertRequest:
    def test_changes_only_include_sent_fields(self):
        request = UpdateExpertRequest(address="New Street 1")
        assert request.changes() == {"address": "New Street 1"}

    def test_empty(self):
        assert UpdateExpertRequest().changes() == {}

    def test_explicit_null_rejected(self):
        with pytest.raises(ValidationError, match="Fields cannot be null: email"):
            UpdateExpertRequest(email=None)

    def test_bad_email_rejected(self):
        with pytest.raises(ValidationError):
            UpdateExpertRequest(email="nope")


class TestYearBounds:
    def test_graduation_year_bounds(self):
        limits = ValidationSettings()
        base = {"expert_id": 1, "level": "Bachelor", "major": "CS", "institution": "MIT"}

        CreateEducationRequest(**base, graduation_year=limits.min_year)
        CreateEducationRequest(**base, graduation_year=limits.max_graduation_year())
        with pytest.raises(ValidationError, match="graduation_year"):
            CreateEducationRequest(**base, graduation_year=limits.min_year - 1)
        with pytest.raises(ValidationError, match="graduation_year"):
            CreateEducationRequest(**base, graduation_year=limits.max_graduation_year() + 1)

    def test_certification_year_not_in_future(self):
        base = {"expert_id": 1, "certification_name": "PMP", "issuing_body": "PMI"}

        CreateCertificationRequest(**base, year_obtained=date.today().year)
        with pytest.raises(ValidationError, match="year_obtained"):
            CreateCertificationRequest(**base, year_obtained=date.today().year + 1)


class TestDocumentRequest:
    @pytest.mark.parametrize("field, value", [
        ("file_size", 0),
        ("file_size", -10),
        ("document_type", "spreadsheet"),
        ("mime_type", ""),
    ])
    def test_invalid(self, field, value):
        data = {
            "expert_id": 1,
            "document_name": "CV",
            "document_type": "cv",
            "file_path": "/uploads/cv.pdf",
            "file_size": 10,
            "mime_type": "application/pdf",
        }
        data[field] = value
        with pytest.raises(ValidationError):
            CreateDocumentRequest(**data)


class TestSearchRequest:
    def test_defaults(self):
        request = ExpertSearchRequest()
        assert request.limit == 20
        assert request.offset == 0
        assert request.skills is None

    @pytest.mark.parametrize("field, value", [
        ("limit", 0),
        ("offset", -1),
        ("experience_years_min", -1),
    ])
    def test_invalid(self, field, value):
        with pytest.raises(ValidationError):
            ExpertSearchRequest(**{field: value})
