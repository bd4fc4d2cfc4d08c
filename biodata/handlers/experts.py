"""Expert record handlers: create, list, get, partial update, delete."""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from biodata import models
from biodata.dates import to_date
from biodata.errors import ExpertNotFoundError
from biodata.schemas import CreateExpertRequest, ExpertDTO, UpdateExpertRequest

logger = logging.getLogger(__name__)


async def expert_exists(session: AsyncSession, expert_id: int) -> bool:
    result = await session.execute(
        select(models.Expert.id).where(models.Expert.id == expert_id).limit(1)
    )
    return result.scalar_one_or_none() is not None


async def require_expert(session: AsyncSession, expert_id: int) -> None:
    """Raise ExpertNotFoundError unless the expert exists.

    Every child create calls this before writing so that a missing parent
    is reported as a domain error rather than a foreign key violation.
    """
    if not await expert_exists(session, expert_id):
        logger.warning(f"Rejected write for missing expert {expert_id}")
        raise ExpertNotFoundError(expert_id)


async def create_expert(session: AsyncSession, request: CreateExpertRequest) -> ExpertDTO:
    """Insert a new expert and return it with generated fields populated."""
    expert = models.Expert(
        full_name=request.full_name,
        place_of_birth=request.place_of_birth,
        date_of_birth=to_date(request.date_of_birth),
        address=request.address,
        email=str(request.email),
        phone_number=request.phone_number,
    )
    try:
        session.add(expert)
        await session.commit()
    except SQLAlchemyError:
        logger.error("Expert creation failed", exc_info=True)
        await session.rollback()
        raise

    logger.info(f"Created expert {expert.id}: {expert.full_name}")
    return ExpertDTO.from_row(expert)


async def list_experts(session: AsyncSession) -> list[ExpertDTO]:
    """All experts, most recently created first."""
    result = await session.execute(
        select(models.Expert).order_by(models.Expert.created_at.desc(), models.Expert.id.desc())
    )
    experts = [ExpertDTO.from_row(row) for row in result.scalars().all()]
    logger.debug(f"Listed {len(experts)} experts")
    return experts


async def get_expert_by_id(session: AsyncSession, expert_id: int) -> ExpertDTO | None:
    expert = await session.get(models.Expert, expert_id)
    if expert is None:
        return None
    return ExpertDTO.from_row(expert)


async def update_expert(
    session: AsyncSession,
    expert_id: int,
    request: UpdateExpertRequest,
) -> ExpertDTO | None:
    """Apply the supplied fields to an expert.

    Omitted fields stay as they are. An empty update is a plain re-read and
    leaves ``updated_at`` untouched.

    Returns:
        The updated expert, or None if no expert has this id
    """
    changes = request.changes()

    expert = await session.get(models.Expert, expert_id)
    if expert is None:
        return None
    if not changes:
        return ExpertDTO.from_row(expert)

    if "date_of_birth" in changes:
        changes["date_of_birth"] = to_date(changes["date_of_birth"])
    if "email" in changes:
        changes["email"] = str(changes["email"])

    try:
        for name, value in changes.items():
            setattr(expert, name, value)
        expert.updated_at = datetime.utcnow()
        await session.commit()
    except SQLAlchemyError:
        logger.error(f"Update of expert {expert_id} failed", exc_info=True)
        await session.rollback()
        raise

    logger.info(f"Updated expert {expert_id}: {', '.join(sorted(changes))}")
    return ExpertDTO.from_row(expert)


async def delete_expert(session: AsyncSession, expert_id: int) -> bool:
    """Delete an expert; the database cascades to every child table.

    Returns:
        True if a row was removed, False if the expert did not exist
    """
    try:
        result = await session.execute(
            delete(models.Expert).where(models.Expert.id == expert_id)
        )
        await session.commit()
    except SQLAlchemyError:
        logger.error(f"Deletion of expert {expert_id} failed", exc_info=True)
        await session.rollback()
        raise

    deleted = result.rowcount > 0
    if deleted:
        logger.info(f"Deleted expert {expert_id} and all dependent records")
    return deleted
