"""Profile aggregation: one expert plus all six child collections.

The child reads are independent of each other, so they are issued
concurrently and joined before the profile is assembled. An
``AsyncSession`` cannot run statements concurrently, so each read gets its
own short-lived session on the caller's engine. If any read fails the
whole aggregation fails.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Callable

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession

from biodata import models
from biodata.db import build_sessionmaker
from biodata.schemas import (
    CertificationDTO,
    DocumentDTO,
    EducationDTO,
    ExpertDTO,
    ExpertProfileDTO,
    ProjectDTO,
    SkillDTO,
    WorkExperienceDTO,
)

logger = logging.getLogger(__name__)

# (profile field, model, row converter)
CHILD_COLLECTIONS: list[tuple[str, type[models.Base], Callable]] = [
    ("education", models.Education, EducationDTO.from_row),
    ("work_experience", models.WorkExperience, WorkExperienceDTO.from_row),
    ("skills", models.Skill, SkillDTO.from_row),
    ("certifications", models.Certification, CertificationDTO.from_row),
    ("projects", models.Project, ProjectDTO.from_row),
    ("documents", models.Document, DocumentDTO.from_row),
]


async def _read_collection(
    session: AsyncSession,
    model,
    expert_id: int,
    convert: Callable,
) -> list:
    result = await session.execute(
        select(model).where(model.expert_id == expert_id).order_by(model.id)
    )
    return [convert(row) for row in result.scalars().all()]


async def _read_in_own_session(engine: AsyncEngine, model, expert_id: int, convert) -> list:
    async with build_sessionmaker(engine)() as child_session:
        return await _read_collection(child_session, model, expert_id, convert)


async def load_child_collections(session: AsyncSession, expert_id: int) -> dict[str, list]:
    """Read all six child collections for an expert.

    Runs the reads concurrently when the session is bound to an engine;
    a session bound to a single connection reads them one after another.
    In the concurrent case the caller's transaction is ended first so its
    pooled connection is back in the pool before the six reads ask for one.
    """
    bind = session.bind
    if isinstance(bind, AsyncEngine):
        await session.commit()
        results = await asyncio.gather(*(
            _read_in_own_session(bind, model, expert_id, convert)
            for _, model, convert in CHILD_COLLECTIONS
        ))
    else:
        results = [
            await _read_collection(session, model, expert_id, convert)
            for _, model, convert in CHILD_COLLECTIONS
        ]

    return {name: rows for (name, _, _), rows in zip(CHILD_COLLECTIONS, results)}


async def get_expert_profile(session: AsyncSession, expert_id: int) -> ExpertProfileDTO | None:
    """Assemble the full profile of an expert.

    Args:
        session: Database session
        expert_id: Expert to load

    Returns:
        The profile, or None if no expert has this id. An expert with no
        child rows yields a profile whose collections are all empty.
    """
    expert = await session.get(models.Expert, expert_id)
    if expert is None:
        return None

    expert_dto = ExpertDTO.from_row(expert)
    collections = await load_child_collections(session, expert_id)
    profile = ExpertProfileDTO(expert=expert_dto, **collections)

    logger.debug(
        f"Loaded profile for expert {expert_id}: "
        + ", ".join(f"{name}={len(rows)}" for name, rows in collections.items())
    )
    return profile
