"""Medical document schemas."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class MedicalDocumentResponse(BaseModel):
    """Document metadata; the file body is served separately."""

    id: UUID
    document_type: str
    file_name: str
    file_type: str
    description: str | None = None
    upload_date: datetime
    last_modified_date: datetime

    model_config = {"from_attributes": True}
