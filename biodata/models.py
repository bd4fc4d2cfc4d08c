"""Core SQLAlchemy models (2.x style) for the expert biodata schema.

One root table (experts) with six child tables, every child keyed by
``expert_id`` with ``ON DELETE CASCADE``. Date-only attributes are stored
as ``Date`` columns; the API converts them in ``biodata.dates``.
"""

from __future__ import annotations

from datetime import date, datetime
from enum import Enum

from sqlalchemy import Date, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy import Enum as SAEnum
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class ProficiencyLevel(str, Enum):
    """Skill strength."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"
    EXPERT = "expert"


class DocumentType(str, Enum):
    """Kind of uploaded document."""
    CV = "cv"
    CERTIFICATE = "certificate"
    PORTFOLIO = "portfolio"
    OTHER = "other"


def _enum_values(enum_cls: type[Enum]) -> list[str]:
    return [member.value for member in enum_cls]


def _expert_fk() -> Mapped[int]:
    return mapped_column(
        ForeignKey("experts.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )


class Expert(Base):
    """Experts table (root of every profile)."""
    __tablename__ = "experts"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(Text, nullable=False, index=True)
    place_of_birth: Mapped[str] = mapped_column(Text, nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[str] = mapped_column(String(320), nullable=False)
    phone_number: Mapped[str] = mapped_column(String(64), nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)

    # Relationships
    education: Mapped[list[Education]] = relationship(
        "Education", back_populates="expert", cascade="all, delete-orphan", passive_deletes=True
    )
    work_experience: Mapped[list[WorkExperience]] = relationship(
        "WorkExperience", back_populates="expert", cascade="all, delete-orphan", passive_deletes=True
    )
    skills: Mapped[list[Skill]] = relationship(
        "Skill", back_populates="expert", cascade="all, delete-orphan", passive_deletes=True
    )
    certifications: Mapped[list[Certification]] = relationship(
        "Certification", back_populates="expert", cascade="all, delete-orphan", passive_deletes=True
    )
    projects: Mapped[list[Project]] = relationship(
        "Project", back_populates="expert", cascade="all, delete-orphan", passive_deletes=True
    )
    documents: Mapped[list[Document]] = relationship(
        "Document", back_populates="expert", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        Index("ix_experts_created_at", "created_at"),
    )


class Education(Base):
    """Degrees and diplomas."""
    __tablename__ = "education"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    expert_id: Mapped[int] = _expert_fk()
    level: Mapped[str] = mapped_column(Text, nullable=False)
    major: Mapped[str] = mapped_column(Text, nullable=False)
    institution: Mapped[str] = mapped_column(Text, nullable=False)
    graduation_year: Mapped[int] = mapped_column(Integer, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)

    # Relationship
    expert: Mapped[Expert] = relationship("Expert", back_populates="education")


class WorkExperience(Base):
    """Employment history. A null end_date means current employment."""
    __tablename__ = "work_experience"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    expert_id: Mapped[int] = _expert_fk()
    company_name: Mapped[str] = mapped_column(Text, nullable=False)
    position: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False, index=True)
    end_date: Mapped[date | None] = mapped_column(Date)
    job_description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)

    # Relationship
    expert: Mapped[Expert] = relationship("Expert", back_populates="work_experience")


class Skill(Base):
    """Skills, unique by name per expert."""
    __tablename__ = "skills"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    expert_id: Mapped[int] = _expert_fk()
    skill_name: Mapped[str] = mapped_column(Text, nullable=False)
    proficiency_level: Mapped[ProficiencyLevel] = mapped_column(
        SAEnum(ProficiencyLevel, name="proficiency_level", values_callable=_enum_values),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)

    # Relationship
    expert: Mapped[Expert] = relationship("Expert", back_populates="skills")

    __table_args__ = (
        UniqueConstraint("expert_id", "skill_name", name="uq_skills_expert_skill_name"),
    )


class Certification(Base):
    """Professional certifications."""
    __tablename__ = "certifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    expert_id: Mapped[int] = _expert_fk()
    certification_name: Mapped[str] = mapped_column(Text, nullable=False)
    issuing_body: Mapped[str] = mapped_column(Text, nullable=False)
    year_obtained: Mapped[int] = mapped_column(Integer, nullable=False)
    expiry_date: Mapped[date | None] = mapped_column(Date)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)

    # Relationship
    expert: Mapped[Expert] = relationship("Expert", back_populates="certifications")


class Project(Base):
    """Projects. A null end_date means the project is ongoing."""
    __tablename__ = "projects"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    expert_id: Mapped[int] = _expert_fk()
    project_name: Mapped[str] = mapped_column(Text, nullable=False)
    role_in_project: Mapped[str] = mapped_column(Text, nullable=False)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date | None] = mapped_column(Date)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)

    # Relationship
    expert: Mapped[Expert] = relationship("Expert", back_populates="projects")


class Document(Base):
    """Uploaded document metadata; file_path points at the backing file."""
    __tablename__ = "documents"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    expert_id: Mapped[int] = _expert_fk()
    document_name: Mapped[str] = mapped_column(Text, nullable=False)
    document_type: Mapped[DocumentType] = mapped_column(
        SAEnum(DocumentType, name="document_type", values_callable=_enum_values),
        nullable=False,
    )
    file_path: Mapped[str] = mapped_column(Text, nullable=False)
    file_size: Mapped[int] = mapped_column(Integer, nullable=False)
    mime_type: Mapped[str] = mapped_column(String(255), nullable=False)
    uploaded_at: Mapped[datetime] = mapped_column(default=datetime.utcnow, nullable=False)

    # Relationship
    expert: Mapped[Expert] = relationship("Expert", back_populates="documents")
