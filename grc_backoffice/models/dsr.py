"""
GDPR data subject request model.

The statutory deadline is fixed when the request is received
(30 days later) and is never moved, not even on completion.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import String, Text, Date, DateTime, ForeignKey, Enum as SAEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from grc_backoffice.models.base import Base, utcnow
from grc_backoffice.models.enums import (
    DSRRequestType,
    DSRStatus,
    DSRPriority,
    enum_values,
)

DSR_DEADLINE_DAYS = 30


class DataSubjectRequest(Base):
    __tablename__ = "data_subject_requests"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    request_type: Mapped[DSRRequestType] = mapped_column(
        SAEnum(
            DSRRequestType,
            name="dsr_request_type_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
    )
    requester_name: Mapped[str] = mapped_column(String(255), nullable=False)
    requester_email: Mapped[str] = mapped_column(String(255), nullable=False)
    requester_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    data_subject_info: Mapped[str | None] = mapped_column(Text, nullable=True)
    request_details: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[DSRStatus] = mapped_column(
        SAEnum(
            DSRStatus,
            name="dsr_status_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=DSRStatus.SUBMITTED,
    )
    priority: Mapped[DSRPriority] = mapped_column(
        SAEnum(
            DSRPriority,
            name="dsr_priority_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=DSRPriority.NORMAL,
    )
    assigned_to_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    deadline_date: Mapped[date] = mapped_column(Date, nullable=False)
    completed_date: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )
    response_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )
