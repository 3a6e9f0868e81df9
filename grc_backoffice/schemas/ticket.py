"""
Pydantic schemas for tickets and ticket comments.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from grc_backoffice.models.enums import TicketType, TicketStatus


class InternalTicketCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: str = ""
    category: str | None = Field(default=None, max_length=100)
    activated_control_id: uuid.UUID | None = None
    document_id: uuid.UUID | None = None
    asset_id: uuid.UUID | None = None


class ExternalTicketCreate(BaseModel):
    """Ticket raised by a customer system through the API key."""
    title: str = Field(min_length=1, max_length=500)
    description: str = ""
    external_customer_ref: str = Field(min_length=1, max_length=255)


class TicketUpdate(BaseModel):
    status: TicketStatus | None = None
    assigned_to_user_id: uuid.UUID | None = None
    category: str | None = Field(default=None, max_length=100)


class CommentCreate(BaseModel):
    body: str = Field(min_length=1)
    is_internal_note: bool = False


class CommentResponse(BaseModel):
    id: uuid.UUID
    ticket_id: uuid.UUID
    body: str
    is_internal_note: bool
    comment_by_user_id: uuid.UUID | None
    external_customer_ref: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class TicketResponse(BaseModel):
    id: uuid.UUID
    sequential_id: int
    ticket_type: TicketType
    title: str
    description: str
    category: str | None
    status: TicketStatus
    created_by_user_id: uuid.UUID | None
    assigned_to_user_id: uuid.UUID | None
    external_customer_ref: str | None
    activated_control_id: uuid.UUID | None
    document_id: uuid.UUID | None
    asset_id: uuid.UUID | None
    created_at: datetime
    resolved_at: datetime | None

    model_config = {"from_attributes": True}


class TicketDetailResponse(BaseModel):
    ticket: TicketResponse
    comments: list[CommentResponse]
