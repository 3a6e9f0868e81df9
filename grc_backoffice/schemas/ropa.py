"""
Pydantic schemas for the record of processing activities.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from grc_backoffice.models.enums import ROPAStatus


class ROPACreate(BaseModel):
    activity_name: str = Field(min_length=1, max_length=255)
    department: str | None = Field(default=None, max_length=255)
    data_controller_details: str = Field(min_length=1)
    data_categories: str = Field(min_length=1)
    data_subject_categories: str = Field(min_length=1)
    recipients: str | None = None
    third_country_transfers: str | None = None
    retention_period: str | None = Field(default=None, max_length=255)
    security_measures: str | None = None


class ROPAUpdate(BaseModel):
    activity_name: str | None = Field(default=None, min_length=1, max_length=255)
    department: str | None = Field(default=None, max_length=255)
    data_controller_details: str | None = Field(default=None, min_length=1)
    data_categories: str | None = Field(default=None, min_length=1)
    data_subject_categories: str | None = Field(default=None, min_length=1)
    recipients: str | None = None
    third_country_transfers: str | None = None
    retention_period: str | None = Field(default=None, max_length=255)
    security_measures: str | None = None
    status: ROPAStatus | None = None


class ROPAResponse(BaseModel):
    id: uuid.UUID
    activity_name: str
    department: str | None
    data_controller_details: str
    data_categories: str
    data_subject_categories: str
    recipients: str | None
    third_country_transfers: str | None
    retention_period: str | None
    security_measures: str | None
    status: ROPAStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class ROPAMetrics(BaseModel):
    total_processing_activities: int
    active: int
    draft: int
    archived: int
