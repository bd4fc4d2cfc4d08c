"""Document handlers: create, list per expert, delete.

Uploads are not stored by this service; a document row only records where
the file lives. Deleting the row also tries to remove that file.
"""
from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from biodata import models
from biodata.handlers.experts import require_expert
from biodata.schemas import CreateDocumentRequest, DocumentDTO

logger = logging.getLogger(__name__)


async def create_document(session: AsyncSession, request: CreateDocumentRequest) -> DocumentDTO:
    await require_expert(session, request.expert_id)

    document = models.Document(
        expert_id=request.expert_id,
        document_name=request.document_name,
        document_type=request.document_type,
        file_path=request.file_path,
        file_size=request.file_size,
        mime_type=request.mime_type,
    )
    try:
        session.add(document)
        await session.commit()
    except SQLAlchemyError:
        logger.error("Document creation failed", exc_info=True)
        await session.rollback()
        raise

    logger.info(f"Created document {document.id} ({document.document_type.value}) for expert {request.expert_id}")
    return DocumentDTO.from_row(document)


async def list_expert_documents(session: AsyncSession, expert_id: int) -> list[DocumentDTO]:
    """Documents belonging to an expert; empty for an unknown expert."""
    result = await session.execute(
        select(models.Document).where(models.Document.expert_id == expert_id)
    )
    return [DocumentDTO.from_row(row) for row in result.scalars().all()]


def remove_backing_file(file_path: str) -> None:
    """Best-effort removal of a document's file.

    A missing file is fine; any other OS error is logged, never raised.
    """
    try:
        Path(file_path).unlink(missing_ok=True)
    except OSError as e:
        logger.warning(f"Failed to delete physical file {file_path}: {e}")


async def delete_document(session: AsyncSession, document_id: int) -> bool:
    """Delete a document row, then its backing file.

    Returns:
        True if the row existed and was removed, False otherwise
    """
    document = await session.get(models.Document, document_id)
    if document is None:
        return False
    file_path = document.file_path

    try:
        await session.execute(
            delete(models.Document).where(models.Document.id == document_id)
        )
        await session.commit()
    except SQLAlchemyError:
        logger.error(f"Deletion of document {document_id} failed", exc_info=True)
        await session.rollback()
        raise

    await asyncio.to_thread(remove_backing_file, file_path)

    logger.info(f"Deleted document {document_id}")
    return True
