"""
Pydantic schemas for the asset inventory.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel, Field

from grc_backoffice.models.enums import AssetStatus


class AssetCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    asset_type: str = Field(min_length=1, max_length=100)
    owner_id: uuid.UUID | None = None


class AssetUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=255)
    asset_type: str | None = Field(default=None, min_length=1, max_length=100)
    owner_id: uuid.UUID | None = None
    status: AssetStatus | None = None


class AssetResponse(BaseModel):
    id: uuid.UUID
    name: str
    asset_type: str
    owner_id: uuid.UUID | None
    status: AssetStatus
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class AssetTypeBreakdown(BaseModel):
    asset_type: str
    count: int
    active: int
    inactive: int
