"""
GDPR Article 30 record of processing activities (ROPA).

Records are never deleted. Archiving hides a record from the
register listing; it can still be fetched by id.
"""

import uuid
from datetime import datetime

from sqlalchemy import String, Text, DateTime, Enum as SAEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from grc_backoffice.models.base import Base, utcnow
from grc_backoffice.models.enums import ROPAStatus, enum_values


class ProcessingActivity(Base):
    __tablename__ = "gdpr_ropa"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    activity_name: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str | None] = mapped_column(String(255), nullable=True)
    data_controller_details: Mapped[str] = mapped_column(Text, nullable=False)
    data_categories: Mapped[str] = mapped_column(Text, nullable=False)
    data_subject_categories: Mapped[str] = mapped_column(Text, nullable=False)
    recipients: Mapped[str | None] = mapped_column(Text, nullable=True)
    third_country_transfers: Mapped[str | None] = mapped_column(Text, nullable=True)
    retention_period: Mapped[str | None] = mapped_column(String(255), nullable=True)
    security_measures: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[ROPAStatus] = mapped_column(
        SAEnum(
            ROPAStatus,
            name="ropa_status_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=ROPAStatus.DRAFT,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )
