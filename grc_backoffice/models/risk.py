"""
Risk register models.

risk_score is likelihood x impact (each 1-5) and is recomputed
by recalculate_scores() whenever either factor changes. The
residual score describes the risk after mitigation and is 0
until both residual factors are known.
"""

import uuid
from datetime import date, datetime

from sqlalchemy import (
    String, Text, Integer, Date, DateTime, ForeignKey,
    CheckConstraint, UniqueConstraint, Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column

from grc_backoffice.models.base import Base, utcnow
from grc_backoffice.models.enums import RiskStatus, enum_values


def severity_for_score(score: int) -> str:
    """Bucket a risk score into the four severity bands."""
    if score >= 15:
        return "Critical"
    if score >= 10:
        return "High"
    if score >= 6:
        return "Medium"
    return "Low"


class RiskAssessment(Base):
    __tablename__ = "risk_assessments"
    __table_args__ = (
        CheckConstraint("likelihood BETWEEN 1 AND 5", name="ck_risk_likelihood"),
        CheckConstraint("impact BETWEEN 1 AND 5", name="ck_risk_impact"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    likelihood: Mapped[int] = mapped_column(Integer, nullable=False)
    impact: Mapped[int] = mapped_column(Integer, nullable=False)
    risk_score: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[RiskStatus] = mapped_column(
        SAEnum(
            RiskStatus,
            name="risk_status_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=RiskStatus.IDENTIFIED,
    )
    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    mitigation_plan: Mapped[str | None] = mapped_column(Text, nullable=True)
    residual_likelihood: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )
    residual_impact: Mapped[int | None] = mapped_column(Integer, nullable=True)
    residual_risk_score: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0
    )
    review_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    def recalculate_scores(self) -> None:
        self.risk_score = self.likelihood * self.impact
        if self.residual_likelihood and self.residual_impact:
            self.residual_risk_score = (
                self.residual_likelihood * self.residual_impact
            )
        else:
            self.residual_risk_score = 0

    @property
    def severity(self) -> str:
        return severity_for_score(self.risk_score)


class RiskControlMapping(Base):
    """Links a risk to the activated controls that mitigate it."""

    __tablename__ = "risk_control_mappings"
    __table_args__ = (
        UniqueConstraint(
            "risk_id", "activated_control_id", name="uq_risk_control"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    risk_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("risk_assessments.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    activated_control_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("activated_controls.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
