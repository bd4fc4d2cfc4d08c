"""Composable search predicates over the experts table.

Each active criterion becomes one ``ExpertFilter`` holding a SQL boolean
expression. Criteria on child tables are correlated EXISTS subqueries, so
an expert qualifies when at least one of its child rows matches. The
filters are combined with AND by ``ExpertFilterSet.where_clause``.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable

from sqlalchemy import and_, extract, or_, select, true
from sqlalchemy.sql.elements import ColumnElement

from biodata import models

logger = logging.getLogger(__name__)


class FilterType(str, Enum):
    """Filter categories."""
    SEARCH_TERM = "search_term"
    SKILL = "skill"
    EDUCATION_LEVEL = "education_level"
    EXPERIENCE_MIN = "experience_years_min"
    EXPERIENCE_MAX = "experience_years_max"


@dataclass
class ExpertFilter:
    """A single predicate over experts."""
    type: FilterType
    value: str | int
    clause: ColumnElement[bool]

    def describe(self) -> str:
        return f"{self.type.value}={self.value!r}"


def _has_skill(term: str) -> ColumnElement[bool]:
    return select(models.Skill.id).where(
        models.Skill.expert_id == models.Expert.id,
        models.Skill.skill_name.icontains(term, autoescape=True),
    ).exists()


def _has_education(*columns, term: str) -> ColumnElement[bool]:
    return select(models.Education.id).where(
        models.Education.expert_id == models.Expert.id,
        or_(*(column.icontains(term, autoescape=True) for column in columns)),
    ).exists()


def _has_work_experience(*conditions) -> ColumnElement[bool]:
    return select(models.WorkExperience.id).where(
        models.WorkExperience.expert_id == models.Expert.id,
        *conditions,
    ).exists()


def search_term_filter(term: str) -> ExpertFilter:
    """Case-insensitive substring match on the name or any skill, education or work row."""
    clause = or_(
        models.Expert.full_name.icontains(term, autoescape=True),
        _has_skill(term),
        _has_education(
            models.Education.level,
            models.Education.major,
            models.Education.institution,
            term=term,
        ),
        _has_work_experience(or_(
            models.WorkExperience.company_name.icontains(term, autoescape=True),
            models.WorkExperience.position.icontains(term, autoescape=True),
            models.WorkExperience.job_description.icontains(term, autoescape=True),
        )),
    )
    return ExpertFilter(FilterType.SEARCH_TERM, term, clause)


def skill_filter(skill: str) -> ExpertFilter:
    return ExpertFilter(FilterType.SKILL, skill, _has_skill(skill))


def education_level_filter(level: str) -> ExpertFilter:
    return ExpertFilter(
        FilterType.EDUCATION_LEVEL,
        level,
        _has_education(models.Education.level, term=level),
    )


def experience_min_filter(years: int, current_year: int) -> ExpertFilter:
    """Some work experience started at or before ``current_year - years``."""
    start_year = extract("year", models.WorkExperience.start_date)
    return ExpertFilter(
        FilterType.EXPERIENCE_MIN,
        years,
        _has_work_experience(start_year <= current_year - years),
    )


def experience_max_filter(years: int, current_year: int) -> ExpertFilter:
    """Some work experience started at or after ``current_year - years``."""
    start_year = extract("year", models.WorkExperience.start_date)
    return ExpertFilter(
        FilterType.EXPERIENCE_MAX,
        years,
        _has_work_experience(start_year >= current_year - years),
    )


@dataclass
class ExpertFilterSet:
    """Accumulates filters; every filter must hold for an expert to match."""
    filters: list[ExpertFilter] = field(default_factory=list)

    def add(self, expert_filter: ExpertFilter) -> ExpertFilterSet:
        self.filters.append(expert_filter)
        return self

    def __len__(self) -> int:
        return len(self.filters)

    def where_clause(self) -> ColumnElement[bool]:
        if not self.filters:
            return true()
        return and_(*(f.clause for f in self.filters))

    def describe(self) -> str:
        return ", ".join(f.describe() for f in self.filters) or "no filters"

    @classmethod
    def from_criteria(
        cls,
        *,
        search_term: str | None = None,
        skills: Iterable[str] | None = None,
        education_level: str | None = None,
        experience_years_min: int | None = None,
        experience_years_max: int | None = None,
        today: date | None = None,
    ) -> ExpertFilterSet:
        """Build the filter set for a search request.

        An empty search term, education level or skill list counts as "not
        given". An empty skill entry still requires the expert to have at
        least one skill.
        """
        filter_set = cls()
        current_year = (today or date.today()).year

        if search_term:
            filter_set.add(search_term_filter(search_term))
        for skill in skills or ():
            filter_set.add(skill_filter(skill))
        if education_level:
            filter_set.add(education_level_filter(education_level))
        if experience_years_min is not None:
            filter_set.add(experience_min_filter(experience_years_min, current_year))
        if experience_years_max is not None:
            filter_set.add(experience_max_filter(experience_years_max, current_year))

        return filter_set
