"""
Pydantic schemas for vendors and vendor assessments.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, Field

from grc_backoffice.models.enums import (
    VendorRiskTier,
    VendorStatus,
    VendorAssessmentStatus,
)


class VendorCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    description: str | None = None
    category: str = Field(min_length=1, max_length=100)
    risk_tier: VendorRiskTier = VendorRiskTier.MEDIUM
    status: VendorStatus = VendorStatus.ACTIVE
    contact_name: str | None = Field(default=None, max_length=255)
    contact_email: str | None = Field(default=None, max_length=255)
    contact_phone: str | None = Field(default=None, max_length=50)
    website: str | None = Field(default=None, max_length=500)
    contract_start_date: date | None = None
    contract_end_date: date | None = None
    contract_value: Decimal | None = Field(default=None, ge=0)
    next_assessment_due: date | None = None
    owner_id: uuid.UUID | None = None
    notes: str | None = None


class VendorUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    category: str | None = Field(default=None, min_length=1, max_length=100)
    risk_tier: VendorRiskTier | None = None
    status: VendorStatus | None = None
    contact_name: str | None = Field(default=None, max_length=255)
    contact_email: str | None = Field(default=None, max_length=255)
    contact_phone: str | None = Field(default=None, max_length=50)
    website: str | None = Field(default=None, max_length=500)
    contract_start_date: date | None = None
    contract_end_date: date | None = None
    contract_value: Decimal | None = Field(default=None, ge=0)
    next_assessment_due: date | None = None
    owner_id: uuid.UUID | None = None
    notes: str | None = None


class VendorResponse(BaseModel):
    id: uuid.UUID
    name: str
    description: str | None
    category: str
    risk_tier: VendorRiskTier
    status: VendorStatus
    contact_name: str | None
    contact_email: str | None
    contact_phone: str | None
    website: str | None
    contract_start_date: date | None
    contract_end_date: date | None
    contract_value: Decimal | None
    last_assessment_date: date | None
    next_assessment_due: date | None
    owner_id: uuid.UUID | None
    notes: str | None
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class VendorAssessmentCreate(BaseModel):
    assessment_date: date
    overall_risk_score: int | None = Field(default=None, ge=1, le=5)
    data_security_score: int | None = Field(default=None, ge=1, le=5)
    compliance_score: int | None = Field(default=None, ge=1, le=5)
    financial_stability_score: int | None = Field(default=None, ge=1, le=5)
    operational_capability_score: int | None = Field(default=None, ge=1, le=5)
    findings: str | None = None
    recommendations: str | None = None
    status: VendorAssessmentStatus = VendorAssessmentStatus.COMPLETED


class VendorAssessmentResponse(BaseModel):
    id: uuid.UUID
    vendor_id: uuid.UUID
    assessment_date: date
    assessor_id: uuid.UUID | None
    overall_risk_score: int | None
    data_security_score: int | None
    compliance_score: int | None
    financial_stability_score: int | None
    operational_capability_score: int | None
    findings: str | None
    recommendations: str | None
    status: VendorAssessmentStatus
    created_at: datetime

    model_config = {"from_attributes": True}
