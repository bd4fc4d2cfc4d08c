"""Create handlers for the expert child collections.

Each handler checks that the parent expert exists, then applies its own
record rule (date ordering, skill uniqueness), and only then writes. A
rejected request leaves no partial state behind.
"""
from __future__ import annotations

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from biodata import models
from biodata.dates import to_date
from biodata.errors import DuplicateSkillError, InvalidDateRangeError
from biodata.handlers.experts import require_expert
from biodata.schemas import (
    CertificationDTO,
    CreateCertificationRequest,
    CreateEducationRequest,
    CreateProjectRequest,
    CreateSkillRequest,
    CreateWorkExperienceRequest,
    EducationDTO,
    ProjectDTO,
    SkillDTO,
    WorkExperienceDTO,
)

logger = logging.getLogger(__name__)


async def _persist(session: AsyncSession, record: models.Base, label: str) -> None:
    try:
        session.add(record)
        await session.commit()
    except SQLAlchemyError:
        logger.error(f"{label} creation failed", exc_info=True)
        await session.rollback()
        raise


async def create_education(session: AsyncSession, request: CreateEducationRequest) -> EducationDTO:
    await require_expert(session, request.expert_id)

    education = models.Education(
        expert_id=request.expert_id,
        level=request.level,
        major=request.major,
        institution=request.institution,
        graduation_year=request.graduation_year,
    )
    await _persist(session, education, "Education")

    logger.info(f"Created education {education.id} for expert {request.expert_id}")
    return EducationDTO.from_row(education)


async def create_work_experience(
    session: AsyncSession,
    request: CreateWorkExperienceRequest,
) -> WorkExperienceDTO:
    """Create a work experience entry.

    An end date, when given, must fall strictly after the start date.
    """
    await require_expert(session, request.expert_id)

    start_date = to_date(request.start_date)
    end_date = to_date(request.end_date)
    if end_date is not None and end_date <= start_date:
        logger.warning(f"Rejected work experience for expert {request.expert_id}: end {end_date} <= start {start_date}")
        raise InvalidDateRangeError("End date must be after start date")

    work = models.WorkExperience(
        expert_id=request.expert_id,
        company_name=request.company_name,
        position=request.position,
        start_date=start_date,
        end_date=end_date,
        job_description=request.job_description,
    )
    await _persist(session, work, "Work experience")

    logger.info(f"Created work experience {work.id} for expert {request.expert_id}")
    return WorkExperienceDTO.from_row(work)


async def _skill_exists(session: AsyncSession, expert_id: int, skill_name: str) -> bool:
    result = await session.execute(
        select(models.Skill.id).where(
            models.Skill.expert_id == expert_id,
            models.Skill.skill_name == skill_name,
        ).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def create_skill(session: AsyncSession, request: CreateSkillRequest) -> SkillDTO:
    """Create a skill. Skill names are unique per expert."""
    await require_expert(session, request.expert_id)

    if await _skill_exists(session, request.expert_id, request.skill_name):
        logger.warning(f"Rejected duplicate skill {request.skill_name!r} for expert {request.expert_id}")
        raise DuplicateSkillError(request.expert_id, request.skill_name)

    skill = models.Skill(
        expert_id=request.expert_id,
        skill_name=request.skill_name,
        proficiency_level=request.proficiency_level,
    )
    try:
        session.add(skill)
        await session.commit()
    except IntegrityError as e:
        await session.rollback()
        # A concurrent insert of the same name wins the unique constraint;
        # anything else (e.g. the expert deleted meanwhile) is not a conflict
        if await _skill_exists(session, request.expert_id, request.skill_name):
            raise DuplicateSkillError(request.expert_id, request.skill_name) from e
        logger.error("Skill creation failed", exc_info=True)
        raise
    except SQLAlchemyError:
        logger.error("Skill creation failed", exc_info=True)
        await session.rollback()
        raise

    logger.info(f"Created skill {skill.id} ({skill.skill_name}) for expert {request.expert_id}")
    return SkillDTO.from_row(skill)


async def create_certification(
    session: AsyncSession,
    request: CreateCertificationRequest,
) -> CertificationDTO:
    await require_expert(session, request.expert_id)

    certification = models.Certification(
        expert_id=request.expert_id,
        certification_name=request.certification_name,
        issuing_body=request.issuing_body,
        year_obtained=request.year_obtained,
        expiry_date=to_date(request.expiry_date),
    )
    await _persist(session, certification, "Certification")

    logger.info(f"Created certification {certification.id} for expert {request.expert_id}")
    return CertificationDTO.from_row(certification)


async def create_project(session: AsyncSession, request: CreateProjectRequest) -> ProjectDTO:
    """Create a project entry.

    Unlike work experience, a project may end on the day it starts; only an
    end date before the start date is rejected.
    """
    await require_expert(session, request.expert_id)

    start_date = to_date(request.start_date)
    end_date = to_date(request.end_date)
    if end_date is not None and end_date < start_date:
        logger.warning(f"Rejected project for expert {request.expert_id}: end {end_date} < start {start_date}")
        raise InvalidDateRangeError("End date cannot be before start date")

    project = models.Project(
        expert_id=request.expert_id,
        project_name=request.project_name,
        role_in_project=request.role_in_project,
        start_date=start_date,
        end_date=end_date,
        description=request.description,
    )
    await _persist(session, project, "Project")

    logger.info(f"Created project {project.id} for expert {request.expert_id}")
    return ProjectDTO.from_row(project)
