"""Medical document storage service. File bodies are kept in the database."""

from uuid import UUID

import structlog
from sqlalchemy import and_, delete, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import BadRequestException, NotFoundException
from app.models.medical_documents import medical_documents
from app.schemas.medical_documents import MedicalDocumentResponse

logger = structlog.get_logger()

# Metadata columns only; file_data is loaded on download
_METADATA_COLUMNS = [c for c in medical_documents.c if c.name != "file_data"]


class MedicalDocumentService:
    """Service for a user's uploaded documents."""

    def __init__(self, db: AsyncSession):
        """Initialize service with database session."""
        self.db = db

    async def store(
        self,
        user_id: UUID,
        document_type: str,
        file_name: str | None,
        content_type: str | None,
        file_data: bytes,
        description: str | None = None,
    ) -> MedicalDocumentResponse:
        """
        Store an uploaded file.

        Raises:
            BadRequestException: Empty file or missing document type
        """
        if not file_data:
            raise BadRequestException("Uploaded file is empty")
        if not document_type or not document_type.strip():
            raise BadRequestException("Document type is required")

        stmt = (
            insert(medical_documents)
            .values(
                user_id=user_id,
                document_type=document_type.strip(),
                file_name=file_name or "document",
                file_type=content_type or "application/octet-stream",
                file_data=file_data,
                description=description,
            )
            .returning(*_METADATA_COLUMNS)
        )
        result = await self.db.execute(stmt)
        await self.db.commit()
        document = dict(result.mappings().one())

        logger.info(
            "medical_document_stored",
            document_id=str(document["id"]),
            document_type=document["document_type"],
            size=len(file_data),
        )
        return MedicalDocumentResponse.model_validate(document)

    async def list_documents(
        self, user_id: UUID, document_type: str | None = None
    ) -> list[MedicalDocumentResponse]:
        """List metadata of the user's documents, optionally of one type."""
        query = select(*_METADATA_COLUMNS).where(medical_documents.c.user_id == user_id)
        if document_type:
            query = query.where(medical_documents.c.document_type == document_type)
        query = query.order_by(medical_documents.c.upload_date.desc())

        result = await self.db.execute(query)
        return [MedicalDocumentResponse.model_validate(dict(row)) for row in result.mappings().all()]

    async def get_document(self, document_id: UUID, user_id: UUID) -> dict:
        """Load a document including its bytes."""
        result = await self.db.execute(
            select(medical_documents).where(
                and_(
                    medical_documents.c.id == document_id,
                    medical_documents.c.user_id == user_id,
                )
            )
        )
        row = result.mappings().first()
        if not row:
            raise NotFoundException(f"Medical document not found with id: {document_id}")
        return dict(row)

    async def delete_document(self, document_id: UUID, user_id: UUID) -> None:
        await self.get_document(document_id, user_id)
        await self.db.execute(delete(medical_documents).where(medical_documents.c.id == document_id))
        await self.db.commit()
