"""Expert search with multi-criteria filtering and offset pagination."""
from __future__ import annotations

import logging
from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from biodata import models
from biodata.filters import ExpertFilterSet
from biodata.schemas import ExpertDTO, ExpertSearchRequest

logger = logging.getLogger(__name__)


async def search_experts(
    session: AsyncSession,
    request: ExpertSearchRequest,
    *,
    today: date | None = None,
) -> list[ExpertDTO]:
    """Find experts matching every given criterion.

    Results are ordered newest-created first, then sliced by
    ``offset``/``limit``. With no criteria every expert is returned.

    Args:
        session: Database session
        request: Search criteria and pagination
        today: Reference date for the experience-year filters

    Returns:
        One page of matching experts
    """
    filters = ExpertFilterSet.from_criteria(
        search_term=request.search_term,
        skills=request.skills,
        education_level=request.education_level,
        experience_years_min=request.experience_years_min,
        experience_years_max=request.experience_years_max,
        today=today,
    )

    query = (
        select(models.Expert)
        .where(filters.where_clause())
        .order_by(models.Expert.created_at.desc(), models.Expert.id.desc())
        .limit(request.limit)
        .offset(request.offset)
    )
    result = await session.execute(query)
    experts = [ExpertDTO.from_row(row) for row in result.scalars().all()]

    logger.info(
        f"Expert search ({filters.describe()}) limit={request.limit} "
        f"offset={request.offset} returned {len(experts)}"
    )
    return experts
