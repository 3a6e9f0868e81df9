"""
Pydantic schemas for GDPR data subject requests.
"""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from grc_backoffice.models.enums import DSRRequestType, DSRStatus, DSRPriority


class DSRCreate(BaseModel):
    request_type: DSRRequestType
    requester_name: str = Field(min_length=1, max_length=255)
    requester_email: str = Field(min_length=3, max_length=255)
    requester_phone: str | None = Field(default=None, max_length=50)
    data_subject_info: str | None = None
    request_details: str | None = None
    priority: DSRPriority = DSRPriority.NORMAL


class DSRUpdate(BaseModel):
    status: DSRStatus | None = None
    priority: DSRPriority | None = None
    assigned_to_user_id: uuid.UUID | None = None
    rejection_reason: str | None = None


class DSRComplete(BaseModel):
    response_summary: str = Field(min_length=1)


class DSRResponse(BaseModel):
    id: uuid.UUID
    request_type: DSRRequestType
    requester_name: str
    requester_email: str
    requester_phone: str | None
    data_subject_info: str | None
    request_details: str | None
    status: DSRStatus
    priority: DSRPriority
    assigned_to_user_id: uuid.UUID | None
    deadline_date: date
    completed_date: datetime | None
    response_summary: str | None
    rejection_reason: str | None
    created_at: datetime

    model_config = {"from_attributes": True}


class DSRMetrics(BaseModel):
    total: int
    by_status: dict[str, int]
    overdue: int
    completion_rate: float
    avg_response_days: float
