"""
Reminder jobs: due and overdue control scans, and the daily and
weekly digests.

Each method does one job's work inside the session it is given;
the scheduler owns committing it. Nothing records which controls
were already notified. While a control stays due, the hourly scan
notifies its owner again every hour until evidence is submitted.
"""

import logging
from datetime import date, datetime, time, timedelta

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from grc_backoffice.models.control import ActivatedControl, ControlEvidenceLog
from grc_backoffice.models.enums import UserRole, TicketStatus
from grc_backoffice.models.ticket import Ticket
from grc_backoffice.models.user import User
from grc_backoffice.services.control_service import ControlService
from grc_backoffice.services.dashboard_service import DashboardService
from grc_backoffice.services.email_service import EmailService
from grc_backoffice.services.notification_service import NotificationService

logger = logging.getLogger(__name__)


def control_link(control: ActivatedControl) -> str:
    return f"/controls/activated/{control.id}"


class ReminderService:

    def __init__(self, db: Session, email_service: EmailService):
        self.db = db
        self.email = email_service
        self.controls = ControlService(db)
        self.notifications = NotificationService(db)

    def _deliver(self, send, to_address: str, *args) -> bool:
        """Send one email. A failure is logged and the batch carries on."""
        try:
            return send(to_address, *args)
        except Exception:
            logger.exception("Email to %s failed, continuing", to_address)
            return False

    def check_due_controls(self, today: date) -> int:
        """Notify (and email) the owner of every due control. Returns hits."""
        due = self.controls.scan_due_controls(today)
        for control in due:
            self.notifications.create(
                control.owner_id,
                f"Control {control.control_library_id} is due for review",
                control_link(control),
            )
            owner = control.owner
            if owner and owner.email:
                self._deliver(
                    self.email.send_due_control_reminder,
                    owner.email,
                    owner.name,
                    control.library_item.name,
                    control.control_library_id,
                    control.next_review_due_date,
                    control.id,
                )
        logger.info("Due-control scan for %s: %d controls due", today, len(due))
        return len(due)

    def check_overdue_controls(self, today: date) -> int:
        overdue = self.controls.scan_overdue_controls(today)
        for control in overdue:
            self.notifications.create(
                control.owner_id,
                f"URGENT: Control {control.control_library_id} is overdue for review",
                control_link(control),
            )
            owner = control.owner
            if owner and owner.email:
                self._deliver(
                    self.email.send_overdue_control_alert,
                    owner.email,
                    owner.name,
                    control.library_item.name,
                    control.control_library_id,
                    (today - control.next_review_due_date).days,
                    control.id,
                )
        logger.info("Overdue-control scan for %s: %d controls overdue", today, len(overdue))
        return len(overdue)

    def admins(self) -> list[User]:
        return list(
            self.db.execute(
                select(User).where(User.role == UserRole.ADMIN).order_by(User.email)
            ).scalars().all()
        )

    def send_daily_summary(self, today: date) -> int:
        """Summary notification and digest email to every admin. Returns admins reached."""
        summary = DashboardService(self.db).summary(today)
        controls, tickets = summary["controls"], summary["tickets"]
        message = (
            f"Daily Summary - Controls: {controls['activated']} total, "
            f"{controls['compliant']} compliant, {controls['overdue']} overdue. "
            f"Tickets: {tickets['totalTickets']} total, {tickets['openTickets']} open."
        )
        stats = {**controls, **tickets}

        admins = self.admins()
        for admin in admins:
            self.notifications.create(admin.id, message, "/dashboard")
            self._deliver(self.email.send_daily_digest, admin.email, admin.name, stats)
        return len(admins)

    def weekly_stats(self, today: date) -> dict:
        week_start = datetime.combine(today - timedelta(days=7), time.min)
        controls = DashboardService(self.db).control_summary(today)
        evidence = self.db.execute(
            select(func.count(ControlEvidenceLog.id)).where(
                ControlEvidenceLog.performed_at >= week_start
            )
        ).scalar_one()
        resolved = self.db.execute(
            select(func.count(Ticket.id)).where(
                Ticket.status.in_((TicketStatus.RESOLVED, TicketStatus.CLOSED)),
                Ticket.resolved_at >= week_start,
            )
        ).scalar_one()
        return {
            "total_controls": controls["activated"],
            "compliance_rate": controls["compliancePercentage"],
            "overdue_controls": controls["overdue"],
            "evidence_submissions": evidence,
            "tickets_resolved": resolved,
        }

    def send_weekly_digest(self, today: date) -> int:
        stats = self.weekly_stats(today)
        admins = self.admins()
        for admin in admins:
            self._deliver(self.email.send_weekly_digest, admin.email, admin.name, stats)
        return len(admins)
