"""
Pydantic schemas for the control library, activated controls
and evidence submission.
"""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from grc_backoffice.models.enums import ControlStatus, ComplianceStatus


# --- Control Library Schemas ---

class LibraryItemCreate(BaseModel):
    id: str = Field(min_length=1, max_length=50)
    standard: str = Field(min_length=1, max_length=100)
    family: str = Field(min_length=1, max_length=255)
    name: str = Field(min_length=1, max_length=500)
    description: str = ""


class LibraryItemUpdate(BaseModel):
    standard: str | None = Field(default=None, min_length=1, max_length=100)
    family: str | None = Field(default=None, min_length=1, max_length=255)
    name: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None


class LibraryItemResponse(BaseModel):
    id: str
    standard: str
    family: str
    name: str
    description: str

    model_config = {"from_attributes": True}


class LibraryImportRequest(BaseModel):
    controls: list[LibraryItemCreate] = Field(min_length=1)


class LibraryImportResponse(BaseModel):
    created: int
    skipped: int


# --- Activated Control Schemas ---

class ControlActivate(BaseModel):
    """Request to activate a library control for the organization."""
    control_library_id: str = Field(min_length=1, max_length=50)
    owner_id: uuid.UUID
    review_interval_days: int = Field(gt=0, le=3650)


class ControlUpdate(BaseModel):
    owner_id: uuid.UUID | None = None
    review_interval_days: int | None = Field(default=None, gt=0, le=3650)


class ActivatedControlResponse(BaseModel):
    id: uuid.UUID
    control_library_id: str
    owner_id: uuid.UUID | None
    status: ControlStatus
    review_interval_days: int
    last_reviewed_at: datetime | None
    next_review_due_date: date
    created_at: datetime

    model_config = {"from_attributes": True}


class ActiveControlRow(BaseModel):
    """One row of the active-controls list, joined with names."""
    id: uuid.UUID
    control_id: str
    control_name: str
    owner_name: str | None
    status: ControlStatus
    next_review_due_date: date
    last_reviewed_at: datetime | None


# --- Evidence Schemas ---

class EvidenceSubmit(BaseModel):
    compliance_status: ComplianceStatus
    notes: str = Field(min_length=1)
    evidence_link: str | None = Field(default=None, max_length=1000)


class EvidenceResponse(BaseModel):
    id: uuid.UUID
    activated_control_id: uuid.UUID
    performed_by_id: uuid.UUID | None
    performed_at: datetime
    compliance_status: ComplianceStatus
    notes: str
    evidence_link: str | None

    model_config = {"from_attributes": True}


class ControlDetailResponse(ActivatedControlResponse):
    control_name: str
    standard: str
    evidence: list[EvidenceResponse]


class ControlMap(BaseModel):
    """Body for linking an asset, document or vendor to a control."""
    activated_control_id: uuid.UUID
