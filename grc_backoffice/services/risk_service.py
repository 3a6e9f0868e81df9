"""
Risk register service.

Scores are always derived, never accepted from the client:
every create and update goes through recalculate_scores().
"""

import uuid
from collections import Counter

from sqlalchemy import select
from sqlalchemy.orm import Session

from grc_backoffice.errors import NotFoundError
from grc_backoffice.models.control import ActivatedControl
from grc_backoffice.models.enums import RiskStatus
from grc_backoffice.models.user import User
from grc_backoffice.models.risk import (
    RiskAssessment,
    RiskControlMapping,
    severity_for_score,
)
from grc_backoffice.schemas.risk import RiskCreate, RiskUpdate

SEVERITY_ORDER = ("Critical", "High", "Medium", "Low")


class RiskService:

    def __init__(self, db: Session):
        self.db = db

    def create_risk(self, request: RiskCreate) -> RiskAssessment:
        self._check_owner(request.owner_id)
        risk = RiskAssessment(**request.model_dump())
        risk.recalculate_scores()
        self.db.add(risk)
        self.db.flush()
        return risk

    def list_risks(self) -> list[RiskAssessment]:
        """Open risks, highest score first."""
        return list(
            self.db.execute(
                select(RiskAssessment)
                .where(RiskAssessment.status != RiskStatus.CLOSED)
                .order_by(
                    RiskAssessment.risk_score.desc(),
                    RiskAssessment.created_at.desc(),
                )
            ).scalars().all()
        )

    def get_risk(self, risk_id: uuid.UUID) -> RiskAssessment:
        risk = self.db.get(RiskAssessment, risk_id)
        if not risk:
            raise NotFoundError(f"Risk {risk_id} not found")
        return risk

    def update_risk(self, risk_id: uuid.UUID, request: RiskUpdate) -> RiskAssessment:
        risk = self.get_risk(risk_id)
        self._check_owner(request.owner_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            if value is None and field in ("title", "likelihood", "impact", "status"):
                continue
            setattr(risk, field, value)
        risk.recalculate_scores()
        self.db.flush()
        return risk

    def _check_owner(self, owner_id: uuid.UUID | None) -> None:
        if owner_id is not None and not self.db.get(User, owner_id):
            raise NotFoundError(f"User {owner_id} not found")

    def delete_risk(self, risk_id: uuid.UUID) -> None:
        risk = self.get_risk(risk_id)
        for mapping in self.db.execute(
            select(RiskControlMapping).where(RiskControlMapping.risk_id == risk.id)
        ).scalars():
            self.db.delete(mapping)
        self.db.delete(risk)
        self.db.flush()

    # --- Control mappings ---

    def map_control(self, risk_id: uuid.UUID, control_id: uuid.UUID) -> bool:
        """
        Link a control to a risk.

        Returns False when the link already existed; mapping twice
        is not an error.
        """
        self.get_risk(risk_id)
        if not self.db.get(ActivatedControl, control_id):
            raise NotFoundError(f"Activated control {control_id} not found")

        existing = self._mapping(risk_id, control_id)
        if existing:
            return False

        self.db.add(
            RiskControlMapping(risk_id=risk_id, activated_control_id=control_id)
        )
        self.db.flush()
        return True

    def unmap_control(self, risk_id: uuid.UUID, control_id: uuid.UUID) -> None:
        mapping = self._mapping(risk_id, control_id)
        if not mapping:
            raise NotFoundError("Risk-control mapping not found")
        self.db.delete(mapping)
        self.db.flush()

    def mapped_controls(self, risk_id: uuid.UUID) -> list[ActivatedControl]:
        self.get_risk(risk_id)
        return list(
            self.db.execute(
                select(ActivatedControl)
                .join(
                    RiskControlMapping,
                    RiskControlMapping.activated_control_id == ActivatedControl.id,
                )
                .where(RiskControlMapping.risk_id == risk_id)
                .order_by(ActivatedControl.control_library_id)
            ).scalars().all()
        )

    def _mapping(self, risk_id, control_id) -> RiskControlMapping | None:
        return self.db.execute(
            select(RiskControlMapping).where(
                RiskControlMapping.risk_id == risk_id,
                RiskControlMapping.activated_control_id == control_id,
            )
        ).scalar_one_or_none()

    # --- Analytics ---

    def severity_distribution(self) -> list[dict]:
        """Count of open risks per severity band, always all four bands."""
        counts = Counter(severity_for_score(r.risk_score) for r in self.list_risks())
        return [
            {"severity": severity, "count": counts.get(severity, 0)}
            for severity in SEVERITY_ORDER
        ]
