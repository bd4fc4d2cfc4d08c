"""FastAPI app exposing expert, child record, search and export operations.

Domain errors raised by the handlers are mapped to HTTP status codes by
the exception handlers below. Lookups of a missing expert or document by
id answer with ``null`` / ``{"success": false}`` rather than an error.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import Depends, FastAPI, Query, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from .config import settings
from .db import get_session
from .errors import DuplicateSkillError, ExpertNotFoundError, InvalidDateRangeError
from .handlers import documents, experts, export, profile, records, search
from .logging_config import setup_logging
from .schemas import (
    CertificationDTO,
    CreateCertificationRequest,
    CreateDocumentRequest,
    CreateEducationRequest,
    CreateExpertRequest,
    CreateProjectRequest,
    CreateSkillRequest,
    CreateWorkExperienceRequest,
    DeleteResponse,
    DocumentDTO,
    EducationDTO,
    ErrorResponse,
    ExpertDTO,
    ExpertProfileDTO,
    ExpertSearchRequest,
    ExportFormat,
    HealthResponse,
    ProjectDTO,
    SkillDTO,
    UpdateExpertRequest,
    WorkExperienceDTO,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for startup/shutdown logic."""
    # Startup
    setup_logging()
    logger.info(f"{settings.app_name} v{settings.version} starting up")

    yield

    # Shutdown
    logger.info("Application shutting down")


app = FastAPI(
    title=settings.app_name,
    version=settings.version,
    description="Biodata management for experts: education, work experience, skills, "
    "certifications, projects and documents",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.server.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _error(status_code: int, error: str, detail: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=error, detail=detail).model_dump(),
    )


# Exception handlers
@app.exception_handler(ExpertNotFoundError)
async def expert_not_found_handler(request, exc: ExpertNotFoundError):
    """Handle writes that reference a missing expert."""
    return _error(status.HTTP_404_NOT_FOUND, "not_found", str(exc))


@app.exception_handler(DuplicateSkillError)
async def duplicate_skill_handler(request, exc: DuplicateSkillError):
    """Handle duplicate skill names for one expert."""
    return _error(status.HTTP_409_CONFLICT, "conflict", str(exc))


@app.exception_handler(InvalidDateRangeError)
async def invalid_date_range_handler(request, exc: InvalidDateRangeError):
    """Handle end dates that break the record's ordering rule."""
    return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, "invariant_violation", str(exc))


@app.exception_handler(SQLAlchemyError)
async def database_error_handler(request, exc: SQLAlchemyError):
    """Handle store failures."""
    logger.error(f"Database error: {exc}")
    return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "database_error", "Database operation failed")


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="ok",
        version=settings.version,
        timestamp=datetime.utcnow().isoformat(),
    )


# Experts


@app.post("/experts", response_model=ExpertDTO, status_code=status.HTTP_201_CREATED)
async def create_expert(
    request: CreateExpertRequest,
    session: AsyncSession = Depends(get_session),
) -> ExpertDTO:
    return await experts.create_expert(session, request)


@app.get("/experts", response_model=list[ExpertDTO])
async def list_experts(session: AsyncSession = Depends(get_session)) -> list[ExpertDTO]:
    """List all experts, newest first."""
    return await experts.list_experts(session)


@app.post("/experts/search", response_model=list[ExpertDTO])
async def search_experts(
    request: ExpertSearchRequest,
    session: AsyncSession = Depends(get_session),
) -> list[ExpertDTO]:
    """Search experts by free text, skills, education level and experience years.

    All given criteria must hold. Results are newest first and paginated
    with ``limit``/``offset``.
    """
    return await search.search_experts(session, request)


@app.get("/experts/{expert_id}", response_model=ExpertDTO | None)
async def get_expert(
    expert_id: int,
    session: AsyncSession = Depends(get_session),
) -> ExpertDTO | None:
    return await experts.get_expert_by_id(session, expert_id)


@app.get("/experts/{expert_id}/profile", response_model=ExpertProfileDTO | None)
async def get_expert_profile(
    expert_id: int,
    session: AsyncSession = Depends(get_session),
) -> ExpertProfileDTO | None:
    """Expert plus education, work experience, skills, certifications, projects and documents."""
    return await profile.get_expert_profile(session, expert_id)


@app.patch("/experts/{expert_id}", response_model=ExpertDTO | None)
async def update_expert(
    expert_id: int,
    request: UpdateExpertRequest,
    session: AsyncSession = Depends(get_session),
) -> ExpertDTO | None:
    """Update only the fields present in the body."""
    return await experts.update_expert(session, expert_id, request)


@app.delete("/experts/{expert_id}", response_model=DeleteResponse)
async def delete_expert(
    expert_id: int,
    session: AsyncSession = Depends(get_session),
) -> DeleteResponse:
    """Delete an expert together with all of their records."""
    return DeleteResponse(success=await experts.delete_expert(session, expert_id))


@app.get("/experts/{expert_id}/documents", response_model=list[DocumentDTO])
async def list_expert_documents(
    expert_id: int,
    session: AsyncSession = Depends(get_session),
) -> list[DocumentDTO]:
    return await documents.list_expert_documents(session, expert_id)


@app.get("/experts/{expert_id}/export")
async def export_expert(
    expert_id: int,
    export_format: ExportFormat = Query(default=ExportFormat.JSON, alias="format"),
    session: AsyncSession = Depends(get_session),
) -> Response:
    """Export a profile as JSON or as a text report served as application/pdf.

    Answers ``null`` when the expert does not exist, whatever the format.
    """
    exported = await export.export_expert_data(session, expert_id, export_format)
    if exported is None:
        return JSONResponse(content=None)
    if isinstance(exported, bytes):
        return Response(
            content=exported,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="expert-{expert_id}.pdf"'},
        )
    return JSONResponse(content=exported.model_dump(mode="json"))


# Child records


@app.post("/education", response_model=EducationDTO, status_code=status.HTTP_201_CREATED)
async def create_education(
    request: CreateEducationRequest,
    session: AsyncSession = Depends(get_session),
) -> EducationDTO:
    return await records.create_education(session, request)


@app.post("/work-experience", response_model=WorkExperienceDTO, status_code=status.HTTP_201_CREATED)
async def create_work_experience(
    request: CreateWorkExperienceRequest,
    session: AsyncSession = Depends(get_session),
) -> WorkExperienceDTO:
    return await records.create_work_experience(session, request)


@app.post("/skills", response_model=SkillDTO, status_code=status.HTTP_201_CREATED)
async def create_skill(
    request: CreateSkillRequest,
    session: AsyncSession = Depends(get_session),
) -> SkillDTO:
    return await records.create_skill(session, request)


@app.post("/certifications", response_model=CertificationDTO, status_code=status.HTTP_201_CREATED)
async def create_certification(
    request: CreateCertificationRequest,
    session: AsyncSession = Depends(get_session),
) -> CertificationDTO:
    return await records.create_certification(session, request)


@app.post("/projects", response_model=ProjectDTO, status_code=status.HTTP_201_CREATED)
async def create_project(
    request: CreateProjectRequest,
    session: AsyncSession = Depends(get_session),
) -> ProjectDTO:
    return await records.create_project(session, request)


@app.post("/documents", response_model=DocumentDTO, status_code=status.HTTP_201_CREATED)
async def create_document(
    request: CreateDocumentRequest,
    session: AsyncSession = Depends(get_session),
) -> DocumentDTO:
    """Record an uploaded document's metadata."""
    return await documents.create_document(session, request)


@app.delete("/documents/{document_id}", response_model=DeleteResponse)
async def delete_document(
    document_id: int,
    session: AsyncSession = Depends(get_session),
) -> DeleteResponse:
    """Delete a document record and, if present, its file."""
    return DeleteResponse(success=await documents.delete_document(session, document_id))


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "app": settings.app_name,
        "version": settings.version,
        "endpoints": {
            "health": "/health",
            "experts": "/experts",
            "search": "/experts/search",
            "profile": "/experts/{expert_id}/profile",
            "export": "/experts/{expert_id}/export?format=json|pdf",
            "documents": "/documents",
            "docs": "/docs",
        },
    }
