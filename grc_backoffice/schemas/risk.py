"""
Pydantic schemas for the risk register.
"""

import uuid
from datetime import date, datetime

from pydantic import BaseModel, Field

from grc_backoffice.models.enums import RiskStatus


class RiskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=500)
    description: str = ""
    category: str | None = Field(default=None, max_length=100)
    likelihood: int = Field(ge=1, le=5)
    impact: int = Field(ge=1, le=5)
    status: RiskStatus = RiskStatus.IDENTIFIED
    owner_id: uuid.UUID | None = None
    mitigation_plan: str | None = None
    residual_likelihood: int | None = Field(default=None, ge=1, le=5)
    residual_impact: int | None = Field(default=None, ge=1, le=5)
    review_date: date | None = None


class RiskUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    category: str | None = Field(default=None, max_length=100)
    likelihood: int | None = Field(default=None, ge=1, le=5)
    impact: int | None = Field(default=None, ge=1, le=5)
    status: RiskStatus | None = None
    owner_id: uuid.UUID | None = None
    mitigation_plan: str | None = None
    residual_likelihood: int | None = Field(default=None, ge=1, le=5)
    residual_impact: int | None = Field(default=None, ge=1, le=5)
    review_date: date | None = None


class RiskResponse(BaseModel):
    id: uuid.UUID
    title: str
    description: str
    category: str | None
    likelihood: int
    impact: int
    risk_score: int
    severity: str
    status: RiskStatus
    owner_id: uuid.UUID | None
    mitigation_plan: str | None
    residual_likelihood: int | None
    residual_impact: int | None
    residual_risk_score: int
    review_date: date | None
    created_at: datetime

    model_config = {"from_attributes": True}


class RiskControlMap(BaseModel):
    activated_control_id: uuid.UUID


class SeverityBucket(BaseModel):
    severity: str
    count: int
