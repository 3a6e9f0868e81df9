"""
Third-party vendor models.

Each assessment scores a vendor on a 1-5 scale per area.
Recording one moves the vendor's last_assessment_date.
"""

import uuid
from datetime import date, datetime
from decimal import Decimal

from sqlalchemy import (
    String, Text, Integer, Numeric, Date, DateTime, ForeignKey,
    CheckConstraint, UniqueConstraint, Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from grc_backoffice.models.base import Base, utcnow
from grc_backoffice.models.enums import (
    VendorRiskTier,
    VendorStatus,
    VendorAssessmentStatus,
    enum_values,
)

SCORE_FIELDS = (
    "overall_risk_score",
    "data_security_score",
    "compliance_score",
    "financial_stability_score",
    "operational_capability_score",
)


class Vendor(Base):
    __tablename__ = "vendors"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    risk_tier: Mapped[VendorRiskTier] = mapped_column(
        SAEnum(
            VendorRiskTier,
            name="vendor_risk_tier_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=VendorRiskTier.MEDIUM,
    )
    status: Mapped[VendorStatus] = mapped_column(
        SAEnum(
            VendorStatus,
            name="vendor_status_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=VendorStatus.ACTIVE,
    )
    contact_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    contact_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    website: Mapped[str | None] = mapped_column(String(500), nullable=True)
    contract_start_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    contract_end_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    contract_value: Mapped[Decimal | None] = mapped_column(
        Numeric(14, 2), nullable=True
    )
    last_assessment_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    next_assessment_due: Mapped[date | None] = mapped_column(Date, nullable=True)
    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    assessments: Mapped[list["VendorAssessment"]] = relationship(
        back_populates="vendor",
        order_by="VendorAssessment.assessment_date.desc()",
        cascade="all, delete-orphan",
    )


class VendorAssessment(Base):
    __tablename__ = "vendor_assessments"
    __table_args__ = tuple(
        CheckConstraint(f"{field} BETWEEN 1 AND 5", name=f"ck_vendor_{field}")
        for field in SCORE_FIELDS
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    vendor_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    assessment_date: Mapped[date] = mapped_column(Date, nullable=False)
    assessor_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    overall_risk_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    data_security_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    compliance_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    financial_stability_score: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )
    operational_capability_score: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )
    findings: Mapped[str | None] = mapped_column(Text, nullable=True)
    recommendations: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[VendorAssessmentStatus] = mapped_column(
        SAEnum(
            VendorAssessmentStatus,
            name="vendor_assessment_status_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=VendorAssessmentStatus.COMPLETED,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    vendor: Mapped["Vendor"] = relationship(back_populates="assessments")


class VendorControlMapping(Base):
    __tablename__ = "vendor_control_mappings"
    __table_args__ = (
        UniqueConstraint(
            "vendor_id", "activated_control_id", name="uq_vendor_control"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    vendor_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("vendors.id", ondelete="CASCADE"), nullable=False, index=True
    )
    activated_control_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("activated_controls.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
