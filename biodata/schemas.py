"""Pydantic request and response models for the biodata API.

Request models carry field-level validation (email shape, non-empty
strings, year bounds, positive file size). Response models are built from
ORM rows with ``from_row`` so that stored calendar dates always leave the
service as midnight date-times.
"""
from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from . import models
from .config import settings
from .dates import to_datetime
from .models import DocumentType, ProficiencyLevel


class ExportFormat(str, Enum):
    """Export output format."""
    JSON = "json"
    PDF = "pdf"


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class CreateExpertRequest(BaseModel):
    """Create expert request."""
    full_name: str = Field(min_length=1)
    place_of_birth: str = Field(min_length=1)
    date_of_birth: datetime
    address: str = Field(min_length=1)
    email: EmailStr
    phone_number: str = Field(min_length=1)


class UpdateExpertRequest(BaseModel):
    """Partial expert update.

    Only fields present in the payload are applied; ``model_fields_set``
    tells an omitted field apart from one sent with a value.
    """
    full_name: str | None = Field(default=None, min_length=1)
    place_of_birth: str | None = Field(default=None, min_length=1)
    date_of_birth: datetime | None = None
    address: str | None = Field(default=None, min_length=1)
    email: EmailStr | None = None
    phone_number: str | None = Field(default=None, min_length=1)

    @model_validator(mode="after")
    def reject_explicit_nulls(self) -> UpdateExpertRequest:
        nulls = sorted(name for name in self.model_fields_set if getattr(self, name) is None)
        if nulls:
            raise ValueError(f"Fields cannot be null: {', '.join(nulls)}")
        return self

    def changes(self) -> dict:
        """Fields the caller supplied, by name."""
        return self.model_dump(exclude_unset=True)


class CreateEducationRequest(BaseModel):
    """Create education request."""
    expert_id: int
    level: str = Field(min_length=1)
    major: str = Field(min_length=1)
    institution: str = Field(min_length=1)
    graduation_year: int

    @field_validator("graduation_year")
    @classmethod
    def validate_graduation_year(cls, v: int) -> int:
        low = settings.validation.min_year
        high = settings.validation.max_graduation_year()
        if not low <= v <= high:
            raise ValueError(f"graduation_year must be between {low} and {high}")
        return v


class CreateWorkExperienceRequest(BaseModel):
    """Create work experience request. Omit end_date for current employment."""
    expert_id: int
    company_name: str = Field(min_length=1)
    position: str = Field(min_length=1)
    start_date: datetime
    end_date: datetime | None = None
    job_description: str = Field(min_length=1)


class CreateSkillRequest(BaseModel):
    """Create skill request."""
    expert_id: int
    skill_name: str = Field(min_length=1)
    proficiency_level: ProficiencyLevel


class CreateCertificationRequest(BaseModel):
    """Create certification request."""
    expert_id: int
    certification_name: str = Field(min_length=1)
    issuing_body: str = Field(min_length=1)
    year_obtained: int
    expiry_date: datetime | None = None

    @field_validator("year_obtained")
    @classmethod
    def validate_year_obtained(cls, v: int) -> int:
        low = settings.validation.min_year
        high = settings.validation.max_certification_year()
        if not low <= v <= high:
            raise ValueError(f"year_obtained must be between {low} and {high}")
        return v


class CreateProjectRequest(BaseModel):
    """Create project request. Omit end_date for an ongoing project."""
    expert_id: int
    project_name: str = Field(min_length=1)
    role_in_project: str = Field(min_length=1)
    start_date: datetime
    end_date: datetime | None = None
    description: str = Field(min_length=1)


class CreateDocumentRequest(BaseModel):
    """Create document request (metadata for an already uploaded file)."""
    expert_id: int
    document_name: str = Field(min_length=1)
    document_type: DocumentType
    file_path: str = Field(min_length=1)
    file_size: int = Field(gt=0)
    mime_type: str = Field(min_length=1)


class ExpertSearchRequest(BaseModel):
    """Multi-criteria expert search. Every criterion is optional."""
    search_term: str | None = None
    skills: list[str] | None = None
    education_level: str | None = None
    experience_years_min: int | None = Field(default=None, ge=0)
    experience_years_max: int | None = Field(default=None, ge=0)
    limit: int = Field(default=20, gt=0)
    offset: int = Field(default=0, ge=0)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ExpertDTO(BaseModel):
    """Expert data transfer object."""
    id: int
    full_name: str
    place_of_birth: str
    date_of_birth: datetime
    address: str
    email: str
    phone_number: str
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_row(cls, row: models.Expert) -> ExpertDTO:
        return cls(
            id=row.id,
            full_name=row.full_name,
            place_of_birth=row.place_of_birth,
            date_of_birth=to_datetime(row.date_of_birth),
            address=row.address,
            email=row.email,
            phone_number=row.phone_number,
            created_at=row.created_at,
            updated_at=row.updated_at,
        )


class EducationDTO(BaseModel):
    """Education data transfer object."""
    id: int
    expert_id: int
    level: str
    major: str
    institution: str
    graduation_year: int
    created_at: datetime

    @classmethod
    def from_row(cls, row: models.Education) -> EducationDTO:
        return cls(
            id=row.id,
            expert_id=row.expert_id,
            level=row.level,
            major=row.major,
            institution=row.institution,
            graduation_year=row.graduation_year,
            created_at=row.created_at,
        )


class WorkExperienceDTO(BaseModel):
    """Work experience data transfer object."""
    id: int
    expert_id: int
    company_name: str
    position: str
    start_date: datetime
    end_date: datetime | None
    job_description: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: models.WorkExperience) -> WorkExperienceDTO:
        return cls(
            id=row.id,
            expert_id=row.expert_id,
            company_name=row.company_name,
            position=row.position,
            start_date=to_datetime(row.start_date),
            end_date=to_datetime(row.end_date),
            job_description=row.job_description,
            created_at=row.created_at,
        )


class SkillDTO(BaseModel):
    """Skill data transfer object."""
    id: int
    expert_id: int
    skill_name: str
    proficiency_level: ProficiencyLevel
    created_at: datetime

    @classmethod
    def from_row(cls, row: models.Skill) -> SkillDTO:
        return cls(
            id=row.id,
            expert_id=row.expert_id,
            skill_name=row.skill_name,
            proficiency_level=row.proficiency_level,
            created_at=row.created_at,
        )


class CertificationDTO(BaseModel):
    """Certification data transfer object."""
    id: int
    expert_id: int
    certification_name: str
    issuing_body: str
    year_obtained: int
    expiry_date: datetime | None
    created_at: datetime

    @classmethod
    def from_row(cls, row: models.Certification) -> CertificationDTO:
        return cls(
            id=row.id,
            expert_id=row.expert_id,
            certification_name=row.certification_name,
            issuing_body=row.issuing_body,
            year_obtained=row.year_obtained,
            expiry_date=to_datetime(row.expiry_date),
            created_at=row.created_at,
        )


class ProjectDTO(BaseModel):
    """Project data transfer object."""
    id: int
    expert_id: int
    project_name: str
    role_in_project: str
    start_date: datetime
    end_date: datetime | None
    description: str
    created_at: datetime

    @classmethod
    def from_row(cls, row: models.Project) -> ProjectDTO:
        return cls(
            id=row.id,
            expert_id=row.expert_id,
            project_name=row.project_name,
            role_in_project=row.role_in_project,
            start_date=to_datetime(row.start_date),
            end_date=to_datetime(row.end_date),
            description=row.description,
            created_at=row.created_at,
        )


class DocumentDTO(BaseModel):
    """Document data transfer object."""
    id: int
    expert_id: int
    document_name: str
    document_type: DocumentType
    file_path: str
    file_size: int
    mime_type: str
    uploaded_at: datetime

    @classmethod
    def from_row(cls, row: models.Document) -> DocumentDTO:
        return cls(
            id=row.id,
            expert_id=row.expert_id,
            document_name=row.document_name,
            document_type=row.document_type,
            file_path=row.file_path,
            file_size=row.file_size,
            mime_type=row.mime_type,
            uploaded_at=row.uploaded_at,
        )


class ExpertProfileDTO(BaseModel):
    """An expert together with every child collection."""
    expert: ExpertDTO
    education: list[EducationDTO] = Field(default_factory=list)
    work_experience: list[WorkExperienceDTO] = Field(default_factory=list)
    skills: list[SkillDTO] = Field(default_factory=list)
    certifications: list[CertificationDTO] = Field(default_factory=list)
    projects: list[ProjectDTO] = Field(default_factory=list)
    documents: list[DocumentDTO] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    """Delete response."""
    success: bool


class HealthResponse(BaseModel):
    """Health check response."""
    status: str
    version: str
    timestamp: str


class ErrorResponse(BaseModel):
    """Error response."""
    error: str
    detail: str | None = None
