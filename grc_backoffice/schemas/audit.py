"""
Pydantic schemas for reading the audit trail.
"""

import json
import uuid
from datetime import datetime
from typing import Any

from pydantic import BaseModel, field_validator


class AuditLogResponse(BaseModel):
    id: uuid.UUID
    performed_at: datetime
    user_id: uuid.UUID | None
    action_type: str
    target_entity_type: str
    target_entity_id: str | None
    changes: Any = None
    ip_address: str | None

    model_config = {"from_attributes": True}

    @field_validator("changes", mode="before")
    @classmethod
    def decode_changes(cls, value):
        # Stored as JSON text; clients get the structured payload back
        if isinstance(value, str):
            try:
                return json.loads(value)
            except ValueError:
                return value
        return value


class AuditLogPage(BaseModel):
    logs: list[AuditLogResponse]
    limit: int
    offset: int
