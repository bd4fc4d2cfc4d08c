"""Domain errors raised by the record handlers.

Handlers raise these before any write happens, so a caller that sees one
can assume nothing was persisted.
"""
from __future__ import annotations


class BiodataError(Exception):
    """Base class for domain rule violations."""
    pass


class ExpertNotFoundError(BiodataError):
    """Raised when a create call references an expert that does not exist."""

    def __init__(self, expert_id: int):
        self.expert_id = expert_id
        super().__init__(f"Expert with id {expert_id} not found")


class DuplicateSkillError(BiodataError):
    """Raised when an expert already has a skill with the same name."""

    def __init__(self, expert_id: int, skill_name: str):
        self.expert_id = expert_id
        self.skill_name = skill_name
        super().__init__(f'Skill "{skill_name}" already exists for expert {expert_id}')


class InvalidDateRangeError(BiodataError):
    """Raised when an end date violates the ordering rule for its record."""
    pass
