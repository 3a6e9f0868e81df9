"""
Pydantic schemas for in-app notifications.
"""

import uuid
from datetime import datetime

from pydantic import BaseModel


class NotificationResponse(BaseModel):
    id: uuid.UUID
    user_id: uuid.UUID
    message: str
    link_url: str | None
    is_read: bool
    created_at: datetime

    model_config = {"from_attributes": True}
