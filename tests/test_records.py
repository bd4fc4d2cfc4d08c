"""Tests for child record create handlers."""

from datetime import datetime

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from biodata import models
from biodata.errors import DuplicateSkillError, ExpertNotFoundError, InvalidDateRangeError
from biodata.handlers import records
from biodata.handlers.records import (
    create_certification,
    create_education,
    create_project,
    create_skill,
    create_work_experience,
)
from biodata.models import ProficiencyLevel
from biodata.schemas import (
    CreateCertificationRequest,
    CreateEducationRequest,
    CreateProjectRequest,
    CreateSkillRequest,
    CreateWorkExperienceRequest,
)


async def count_rows(session, model) -> int:
    return await session.scalar(select(func.count()).select_from(model))


def work_request(expert_id, start, end=None):
    return CreateWorkExperienceRequest(
        expert_id=expert_id,
        company_name="Globex",
        position="Analyst",
        start_date=start,
        end_date=end,
        job_description="Data analysis",
    )


def project_request(expert_id, start, end=None):
    return CreateProjectRequest(
        expert_id=expert_id,
        project_name="Migration",
        role_in_project="Architect",
        start_date=start,
        end_date=end,
        description="Moved the platform",
    )


class TestMissingExpert:
    """Every child create rejects an unknown expert without writing."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("model, create, request_obj", [
        (models.Education, create_education, CreateEducationRequest(
            expert_id=999, level="Master", major="Math", institution="ETH", graduation_year=2012)),
        (models.WorkExperience, create_work_experience, work_request(999, datetime(2015, 1, 1))),
        (models.Skill, create_skill, CreateSkillRequest(
            expert_id=999, skill_name="Go", proficiency_level="beginner")),
        (models.Certification, create_certification, CreateCertificationRequest(
            expert_id=999, certification_name="CKA", issuing_body="CNCF", year_obtained=2020)),
        (models.Project, create_project, project_request(999, datetime(2015, 1, 1))),
    ])
    async def test_not_found(self, session, model, create, request_obj):
        with pytest.raises(ExpertNotFoundError) as exc_info:
            await create(session, request_obj)

        assert exc_info.value.expert_id == 999
        assert str(exc_info.value) == "Expert with id 999 not found"
        assert await count_rows(session, model) == 0


class TestEducation:
    @pytest.mark.asyncio
    async def test_create(self, make_expert, session):
        expert = await make_expert()

        education = await create_education(session, CreateEducationRequest(
            expert_id=expert.id, level="Bachelor", major="CS", institution="MIT", graduation_year=2010,
        ))

        assert education.id is not None
        assert education.expert_id == expert.id
        assert education.institution == "MIT"
        assert education.graduation_year == 2010
        assert isinstance(education.created_at, datetime)


class TestWorkExperience:
    @pytest.mark.asyncio
    async def test_create_current_job(self, make_expert, session):
        expert = await make_expert()

        work = await create_work_experience(session, work_request(expert.id, datetime(2018, 3, 1, 10, 0)))

        assert work.start_date == datetime(2018, 3, 1)
        assert work.end_date is None

    @pytest.mark.asyncio
    async def test_create_with_end_date(self, make_expert, session):
        expert = await make_expert()

        work = await create_work_experience(
            session, work_request(expert.id, datetime(2018, 3, 1), datetime(2020, 6, 30))
        )

        assert work.end_date == datetime(2020, 6, 30)

    @pytest.mark.asyncio
    async def test_end_equal_to_start_rejected(self, make_expert, session):
        expert = await make_expert()

        with pytest.raises(InvalidDateRangeError, match="End date must be after start date"):
            await create_work_experience(
                session, work_request(expert.id, datetime(2018, 3, 1), datetime(2018, 3, 1))
            )
        assert await count_rows(session, models.WorkExperience) == 0

    @pytest.mark.asyncio
    async def test_end_before_start_rejected(self, make_expert, session):
        expert = await make_expert()

        with pytest.raises(InvalidDateRangeError):
            await create_work_experience(
                session, work_request(expert.id, datetime(2018, 3, 1), datetime(2017, 1, 1))
            )

    @pytest.mark.asyncio
    async def test_missing_expert_checked_before_dates(self, session):
        with pytest.raises(ExpertNotFoundError):
            await create_work_experience(
                session, work_request(999, datetime(2018, 3, 1), datetime(2017, 1, 1))
            )


class TestProject:
    @pytest.mark.asyncio
    async def test_same_day_project_allowed(self, make_expert, session):
        expert = await make_expert()

        project = await create_project(
            session, project_request(expert.id, datetime(2021, 5, 5), datetime(2021, 5, 5))
        )

        assert project.start_date == project.end_date == datetime(2021, 5, 5)

    @pytest.mark.asyncio
    async def test_ongoing_project(self, make_expert, session):
        expert = await make_expert()

        project = await create_project(session, project_request(expert.id, datetime(2021, 5, 5)))

        assert project.end_date is None

    @pytest.mark.asyncio
    async def test_end_before_start_rejected(self, make_expert, session):
        expert = await make_expert()

        with pytest.raises(InvalidDateRangeError, match="End date cannot be before start date"):
            await create_project(
                session, project_request(expert.id, datetime(2021, 5, 5), datetime(2021, 5, 4))
            )
        assert await count_rows(session, models.Project) == 0


class TestSkill:
    @pytest.mark.asyncio
    async def test_create(self, make_expert, session):
        expert = await make_expert()

        skill = await create_skill(session, CreateSkillRequest(
            expert_id=expert.id, skill_name="React", proficiency_level="advanced",
        ))

        assert skill.skill_name == "React"
        assert skill.proficiency_level is ProficiencyLevel.ADVANCED

    @pytest.mark.asyncio
    async def test_duplicate_for_same_expert_rejected(self, make_expert, session):
        expert = await make_expert()
        request = CreateSkillRequest(expert_id=expert.id, skill_name="React", proficiency_level="advanced")
        await create_skill(session, request)

        with pytest.raises(DuplicateSkillError) as exc_info:
            await create_skill(session, request.model_copy(update={"proficiency_level": ProficiencyLevel.EXPERT}))

        assert "React" in str(exc_info.value)
        assert str(expert.id) in str(exc_info.value)
        assert await count_rows(session, models.Skill) == 1

    @pytest.mark.asyncio
    async def test_same_name_for_different_experts(self, make_expert, session):
        first = await make_expert()
        second = await make_expert(full_name="Bruno Diaz", email="bruno@example.com")

        for expert in (first, second):
            await create_skill(session, CreateSkillRequest(
                expert_id=expert.id, skill_name="React", proficiency_level="intermediate",
            ))

        assert await count_rows(session, models.Skill) == 2

    @pytest.mark.asyncio
    async def test_concurrent_duplicate_reported_as_conflict(self, make_expert, session, monkeypatch):
        expert = await make_expert()
        request = CreateSkillRequest(expert_id=expert.id, skill_name="React", proficiency_level="advanced")
        await create_skill(session, request)

        real_check = records._skill_exists
        calls = []

        async def stale_first_check(*args):
            calls.append(args)
            # the pre-insert check misses the row another request just wrote
            return False if len(calls) == 1 else await real_check(*args)

        monkeypatch.setattr(records, "_skill_exists", stale_first_check)

        with pytest.raises(DuplicateSkillError):
            await create_skill(session, request)

        assert len(calls) == 2
        assert await count_rows(session, models.Skill) == 1

    @pytest.mark.asyncio
    async def test_expert_deleted_before_commit_is_not_a_conflict(self, session, monkeypatch):
        async def expert_still_there(session, expert_id):
            return None

        monkeypatch.setattr(records, "require_expert", expert_still_there)

        with pytest.raises(IntegrityError):
            await create_skill(session, CreateSkillRequest(
                expert_id=999, skill_name="React", proficiency_level="advanced",
            ))

        assert await count_rows(session, models.Skill) == 0


class TestCertification:
    @pytest.mark.asyncio
    async def test_create_with_and_without_expiry(self, make_expert, session):
        expert = await make_expert()

        lasting = await create_certification(session, CreateCertificationRequest(
            expert_id=expert.id, certification_name="CPA", issuing_body="AICPA", year_obtained=2012,
        ))
        expiring = await create_certification(session, CreateCertificationRequest(
            expert_id=expert.id, certification_name="AWS SA", issuing_body="Amazon",
            year_obtained=2022, expiry_date=datetime(2025, 10, 1, 12, 0),
        ))

        assert lasting.expiry_date is None
        assert expiring.expiry_date == datetime(2025, 10, 1)
