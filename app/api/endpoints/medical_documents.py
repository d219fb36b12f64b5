"""Medical document endpoints."""

import re
from urllib.parse import quote
from uuid import UUID

from fastapi import APIRouter, File, Form, Response, UploadFile, status

from app.dependencies import CurrentUser, DatabaseSession
from app.schemas.medical_documents import MedicalDocumentResponse
from app.services.medical_document_service import MedicalDocumentService

router = APIRouter(prefix="/api/medical-documents", tags=["Medical Documents"])

_UNSAFE_FILENAME_CHARS = re.compile(r'["\\\x00-\x1f\x7f]')


def content_disposition(filename: str) -> str:
    """Build an RFC 6266 attachment header that survives non-ASCII names."""
    fallback = _UNSAFE_FILENAME_CHARS.sub("", filename).encode("ascii", "ignore").decode()
    return f"attachment; filename=\"{fallback or 'document'}\"; filename*=UTF-8''{quote(filename)}"


@router.post(
    "/upload",
    response_model=MedicalDocumentResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Upload a document",
)
async def upload_document(
    current_user: CurrentUser,
    db: DatabaseSession,
    file: UploadFile = File(...),
    document_type: str = Form(..., alias="documentType"),
    description: str | None = Form(None),
) -> MedicalDocumentResponse:
    """
    Store a medical document for the caller.

    Args:
        current_user: Authenticated user
        db: Database session
        file: Uploaded file
        document_type: Tag such as PRESCRIPTION or LAB_REPORT
        description: Optional free text
    """
    content = await file.read()
    return await MedicalDocumentService(db).store(
        current_user.id,
        document_type=document_type,
        file_name=file.filename,
        content_type=file.content_type,
        file_data=content,
        description=description,
    )


@router.get("", response_model=list[MedicalDocumentResponse])
async def list_documents(
    current_user: CurrentUser,
    db: DatabaseSession,
) -> list[MedicalDocumentResponse]:
    return await MedicalDocumentService(db).list_documents(current_user.id)


@router.get("/type/{document_type}", response_model=list[MedicalDocumentResponse])
async def list_documents_by_type(
    document_type: str,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> list[MedicalDocumentResponse]:
    return await MedicalDocumentService(db).list_documents(current_user.id, document_type)


@router.get("/{document_id}", summary="Download a document")
async def download_document(
    document_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> Response:
    """Return the stored bytes with their content type as an attachment."""
    document = await MedicalDocumentService(db).get_document(document_id, current_user.id)
    return Response(
        content=document["file_data"],
        media_type=document["file_type"],
        headers={"Content-Disposition": content_disposition(document["file_name"])},
    )


@router.delete("/{document_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_document(
    document_id: UUID,
    current_user: CurrentUser,
    db: DatabaseSession,
) -> None:
    await MedicalDocumentService(db).delete_document(document_id, current_user.id)
