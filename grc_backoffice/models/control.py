"""
Control models.

A ControlLibraryItem is catalog reference data (CIS, ISO 27001,
NIS-2). Activating one creates an ActivatedControl: the
organization's own instance, with an owner and a review cadence.

Every review is recorded as an append-only ControlEvidenceLog.
Submitting evidence is the only thing that moves a control's
due date forward, so the due date always satisfies:

    next_review_due_date = date(last_reviewed_at or created_at)
                           + review_interval_days
"""

import uuid
from datetime import date, datetime, timedelta

from sqlalchemy import (
    String, Text, Integer, Date, DateTime, ForeignKey,
    CheckConstraint, Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from grc_backoffice.models.base import Base, utcnow
from grc_backoffice.models.enums import (
    ControlStatus,
    ComplianceStatus,
    enum_values,
)


class ControlLibraryItem(Base):
    __tablename__ = "control_library"

    # Catalog code, e.g. "CIS-1.1" or "ISO-A.5.1"
    id: Mapped[str] = mapped_column(String(50), primary_key=True)
    standard: Mapped[str] = mapped_column(String(100), nullable=False)
    family: Mapped[str] = mapped_column(String(255), nullable=False)
    name: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    def __repr__(self) -> str:
        return f"<ControlLibraryItem {self.id} {self.name!r}>"


class ActivatedControl(Base):
    __tablename__ = "activated_controls"
    __table_args__ = (
        CheckConstraint(
            "review_interval_days > 0", name="ck_review_interval_positive"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    control_library_id: Mapped[str] = mapped_column(
        ForeignKey("control_library.id"), nullable=False, index=True
    )
    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True, index=True
    )
    status: Mapped[ControlStatus] = mapped_column(
        SAEnum(
            ControlStatus,
            name="control_status_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=ControlStatus.ACTIVE,
    )
    review_interval_days: Mapped[int] = mapped_column(Integer, nullable=False)
    last_reviewed_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )
    next_review_due_date: Mapped[date] = mapped_column(
        Date, nullable=False, index=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    # Relationships
    library_item: Mapped["ControlLibraryItem"] = relationship()
    owner: Mapped["User"] = relationship()
    evidence: Mapped[list["ControlEvidenceLog"]] = relationship(
        back_populates="control",
        order_by="ControlEvidenceLog.performed_at.desc()",
    )

    def review_base_date(self) -> date:
        """The date the review interval is counted from."""
        base = self.last_reviewed_at or self.created_at or utcnow()
        return base.date()

    def compute_due_date(self) -> date:
        return self.review_base_date() + timedelta(days=self.review_interval_days)

    @property
    def is_active(self) -> bool:
        return self.status == ControlStatus.ACTIVE

    def __repr__(self) -> str:
        return (
            f"<ActivatedControl {self.control_library_id} "
            f"due {self.next_review_due_date} ({self.status.value})>"
        )


class ControlEvidenceLog(Base):
    """
    Immutable compliance attestation.

    Rows are only ever inserted, in the same transaction that
    advances the parent control's due date.
    """

    __tablename__ = "control_evidence_log"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    activated_control_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("activated_controls.id"), nullable=False, index=True
    )
    performed_by_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    performed_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    compliance_status: Mapped[ComplianceStatus] = mapped_column(
        SAEnum(
            ComplianceStatus,
            name="compliance_status_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
    )
    notes: Mapped[str] = mapped_column(Text, nullable=False)
    evidence_link: Mapped[str | None] = mapped_column(
        String(1000), nullable=True, default=None
    )

    control: Mapped["ActivatedControl"] = relationship(back_populates="evidence")
