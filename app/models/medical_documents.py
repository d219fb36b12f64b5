"""Medical document model definition using SQLAlchemy Core."""

from uuid import uuid4

from sqlalchemy import (
    Column,
    DateTime,
    ForeignKey,
    LargeBinary,
    String,
    Table,
    Uuid,
    text,
)

from app.models.base import metadata

medical_documents = Table(
    "medical_documents",
    metadata,
    Column("id", Uuid, primary_key=True, default=uuid4),
    Column(
        "user_id",
        Uuid,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    ),
    Column("document_type", String(50), nullable=False),  # PRESCRIPTION, LAB_REPORT, XRAY...
    Column("file_name", String(255), nullable=False),
    Column("file_type", String(100), nullable=False),
    # Body is stored inline
    Column("file_data", LargeBinary, nullable=False),
    Column("description", String(1000)),
    Column(
        "upload_date",
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    ),
    Column(
        "last_modified_date",
        DateTime(timezone=True),
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP"),
    ),
)
