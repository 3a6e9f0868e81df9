"""
Dashboard figures.

"Compliant" and "non-compliant" count active controls by the
verdict of their most recent evidence. Controls that were never
reviewed count as neither. The asset figure counts active assets
only.
"""

from datetime import date, datetime, time

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from grc_backoffice.models.asset import Asset
from grc_backoffice.models.base import utcnow
from grc_backoffice.models.control import (
    ControlLibraryItem,
    ActivatedControl,
    ControlEvidenceLog,
)
from grc_backoffice.models.document import Document
from grc_backoffice.models.enums import (
    AssetStatus,
    ControlStatus,
    ComplianceStatus,
    TicketStatus,
    OPEN_TICKET_STATUSES,
)
from grc_backoffice.models.ticket import Ticket


class DashboardService:

    def __init__(self, db: Session):
        self.db = db

    def latest_verdicts(self) -> dict:
        """Map active control id to the compliance status of its newest evidence."""
        latest = (
            select(
                ControlEvidenceLog.activated_control_id,
                func.max(ControlEvidenceLog.performed_at).label("performed_at"),
            )
            .group_by(ControlEvidenceLog.activated_control_id)
            .subquery()
        )
        rows = self.db.execute(
            select(
                ControlEvidenceLog.activated_control_id,
                ControlEvidenceLog.compliance_status,
            )
            .join(
                latest,
                (ControlEvidenceLog.activated_control_id == latest.c.activated_control_id)
                & (ControlEvidenceLog.performed_at == latest.c.performed_at),
            )
            .join(
                ActivatedControl,
                ActivatedControl.id == ControlEvidenceLog.activated_control_id,
            )
            .where(ActivatedControl.status == ControlStatus.ACTIVE)
        ).all()
        return {control_id: verdict for control_id, verdict in rows}

    def control_summary(self, today: date) -> dict:
        total = self.db.execute(
            select(func.count()).select_from(ControlLibraryItem)
        ).scalar_one()
        activated = self.db.execute(
            select(func.count(ActivatedControl.id)).where(
                ActivatedControl.status == ControlStatus.ACTIVE
            )
        ).scalar_one()
        overdue = self.db.execute(
            select(func.count(ActivatedControl.id)).where(
                ActivatedControl.status == ControlStatus.ACTIVE,
                ActivatedControl.next_review_due_date < today,
            )
        ).scalar_one()

        verdicts = list(self.latest_verdicts().values())
        compliant = verdicts.count(ComplianceStatus.COMPLIANT)
        non_compliant = verdicts.count(ComplianceStatus.NON_COMPLIANT)

        return {
            "total": total,
            "activated": activated,
            "compliant": compliant,
            "nonCompliant": non_compliant,
            "overdue": overdue,
            "compliancePercentage": (
                round(compliant / activated * 100, 1) if activated else 0.0
            ),
        }

    def ticket_summary(self, today: date) -> dict:
        month_start = datetime.combine(today.replace(day=1), time.min)
        total = self.db.execute(select(func.count(Ticket.id))).scalar_one()
        open_count = self.db.execute(
            select(func.count(Ticket.id)).where(
                Ticket.status.in_(OPEN_TICKET_STATUSES)
            )
        ).scalar_one()
        resolved = self.db.execute(
            select(func.count(Ticket.id)).where(
                Ticket.status.in_((TicketStatus.RESOLVED, TicketStatus.CLOSED)),
                Ticket.resolved_at >= month_start,
            )
        ).scalar_one()
        return {
            "totalTickets": total,
            "openTickets": open_count,
            "resolvedThisMonth": resolved,
        }

    def asset_summary(self) -> dict:
        active = self.db.execute(
            select(func.count(Asset.id)).where(Asset.status == AssetStatus.ACTIVE)
        ).scalar_one()
        return {"total": active}

    def document_summary(self) -> dict:
        total = self.db.execute(select(func.count(Document.id))).scalar_one()
        return {"total": total}

    def summary(self, today: date | None = None) -> dict:
        today = today or utcnow().date()
        return {
            "controls": self.control_summary(today),
            "tickets": self.ticket_summary(today),
            "assets": self.asset_summary(),
            "documents": self.document_summary(),
        }
