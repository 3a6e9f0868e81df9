"""
Pydantic schemas for policy documents and their versions.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from grc_backoffice.models.enums import DocumentVersionStatus


class DocumentCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    category: str = Field(min_length=1, max_length=100)
    owner_id: uuid.UUID | None = None


class DocumentVersionCreate(BaseModel):
    body_content: str = Field(min_length=1)
    change_description: str | None = None


class DocumentVersionResponse(BaseModel):
    id: uuid.UUID
    document_id: uuid.UUID
    version_number: int
    body_content: str
    change_description: str | None
    status: DocumentVersionStatus
    created_by_user_id: uuid.UUID | None
    created_at: datetime
    published_at: datetime | None

    model_config = {"from_attributes": True}


class DocumentResponse(BaseModel):
    id: uuid.UUID
    title: str
    category: str
    owner_id: uuid.UUID | None
    published_version_id: uuid.UUID | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class DocumentDetail(DocumentResponse):
    """A document with every version, newest first."""
    versions: list[DocumentVersionResponse] = []


class AcknowledgementResponse(BaseModel):
    id: uuid.UUID
    document_version_id: uuid.UUID
    user_id: uuid.UUID
    acknowledged_at: datetime

    model_config = {"from_attributes": True}
