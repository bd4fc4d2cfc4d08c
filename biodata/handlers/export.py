"""Expert data export as a structured profile or a plain-text report.

The "pdf" format is a text rendering encoded to bytes; there is no real
document layout engine behind it.
"""
from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from biodata.handlers.profile import get_expert_profile
from biodata.schemas import ExpertProfileDTO, ExportFormat

logger = logging.getLogger(__name__)


def _day(value: datetime) -> str:
    return value.date().isoformat()


def render_profile_text(profile: ExpertProfileDTO) -> str:
    """Flatten a profile into a sectioned text report.

    Sections appear in a fixed order and are left out when empty.
    """
    expert = profile.expert
    lines = [
        "EXPERT PROFILE",
        "",
        f"Name: {expert.full_name}",
        f"Email: {expert.email}",
        f"Phone: {expert.phone_number}",
        f"Address: {expert.address}",
        f"Place of Birth: {expert.place_of_birth}",
        f"Date of Birth: {_day(expert.date_of_birth)}",
        "",
    ]

    def section(title: str, entries: list[str]) -> None:
        if not entries:
            return
        lines.append(title)
        lines.extend(entries)
        lines.append("")

    section("EDUCATION", [
        f"- {edu.level} in {edu.major} from {edu.institution} ({edu.graduation_year})"
        for edu in profile.education
    ])

    work_lines = []
    for work in profile.work_experience:
        end = _day(work.end_date) if work.end_date else "Present"
        work_lines.append(f"- {work.position} at {work.company_name} ({_day(work.start_date)} - {end})")
        work_lines.append(f"  {work.job_description}")
    section("WORK EXPERIENCE", work_lines)

    section("SKILLS", [
        f"- {skill.skill_name} ({skill.proficiency_level.value})"
        for skill in profile.skills
    ])

    cert_lines = []
    for cert in profile.certifications:
        line = f"- {cert.certification_name} by {cert.issuing_body} ({cert.year_obtained})"
        if cert.expiry_date:
            line += f", expires {_day(cert.expiry_date)}"
        cert_lines.append(line)
    section("CERTIFICATIONS", cert_lines)

    project_lines = []
    for project in profile.projects:
        end = _day(project.end_date) if project.end_date else "Ongoing"
        project_lines.append(
            f"- {project.project_name} ({project.role_in_project}, {_day(project.start_date)} - {end})"
        )
        project_lines.append(f"  {project.description}")
    section("PROJECTS", project_lines)

    section("DOCUMENTS", [
        f"- {doc.document_name} ({doc.document_type.value})"
        for doc in profile.documents
    ])

    return "\n".join(lines)


async def export_expert_data(
    session: AsyncSession,
    expert_id: int,
    export_format: ExportFormat,
) -> ExpertProfileDTO | bytes | None:
    """Export an expert's profile.

    Returns:
        The profile for JSON, UTF-8 encoded report bytes for PDF, or None
        if the expert does not exist (for either format)
    """
    profile = await get_expert_profile(session, expert_id)
    if profile is None:
        return None

    logger.info(f"Exporting expert {expert_id} as {export_format.value}")
    if export_format is ExportFormat.JSON:
        return profile
    return render_profile_text(profile).encode("utf-8")
