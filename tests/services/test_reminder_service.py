"""
Tests for the reminder jobs and the dashboard figures they report.
"""

from datetime import date, datetime

import pytest

from grc_backoffice.models.enums import ComplianceStatus
from grc_backoffice.schemas.control import ControlActivate, EvidenceSubmit
from grc_backoffice.services.control_service import ControlService
from grc_backoffice.services.dashboard_service import DashboardService
from grc_backoffice.services.notification_service import NotificationService
from grc_backoffice.services.reminder_service import ReminderService

ACTIVATED = datetime(2026, 1, 1, 10, 0, 0)


@pytest.fixture
def control(db_session, users, library):
    control = ControlService(db_session).activate_control(
        ControlActivate(
            control_library_id="CIS-1.1",
            owner_id=users["user"].id,
            review_interval_days=30,
        ),
        now=ACTIVATED,
    )
    db_session.commit()
    return control


class RecordingEmail:
    """Stands in for EmailService and records what would be sent."""

    def __init__(self):
        self.sent = []

    def send_due_control_reminder(self, to_address, *args):
        self.sent.append(("due", to_address))
        return True

    def send_overdue_control_alert(self, to_address, *args):
        self.sent.append(("overdue", to_address))
        return True

    def send_daily_digest(self, to_address, name, stats):
        self.sent.append(("daily", to_address))
        return True

    def send_weekly_digest(self, to_address, name, stats):
        self.sent.append(("weekly", to_address))
        return True


class FailingEmail(RecordingEmail):
    """Raises for one address, records the rest."""

    def __init__(self, failing_address):
        super().__init__()
        self.failing_address = failing_address

    def send_due_control_reminder(self, to_address, *args):
        if to_address == self.failing_address:
            raise RuntimeError("template exploded")
        return super().send_due_control_reminder(to_address, *args)


class TestDueControls:

    def test_owner_is_notified_and_emailed(self, db_session, users, control):
        email = RecordingEmail()

        hits = ReminderService(db_session, email).check_due_controls(date(2026, 1, 31))

        notes = NotificationService(db_session).list_for_user(users["user"].id)
        assert hits == 1
        assert [n.message for n in notes] == ["Control CIS-1.1 is due for review"]
        assert notes[0].link_url == f"/controls/activated/{control.id}"
        assert email.sent == [("due", "user@company.com")]

    def test_not_yet_due(self, db_session, users, control):
        hits = ReminderService(db_session, RecordingEmail()).check_due_controls(
            date(2026, 1, 30)
        )
        assert hits == 0

    def test_repeated_scans_repeat_notifications(self, db_session, users, control):
        service = ReminderService(db_session, RecordingEmail())

        service.check_due_controls(date(2026, 1, 31))
        service.check_due_controls(date(2026, 1, 31))

        notes = NotificationService(db_session).list_for_user(users["user"].id)
        assert len(notes) == 2

    def test_works_with_disabled_email(self, db_session, users, control, email_service):
        hits = ReminderService(db_session, email_service).check_due_controls(
            date(2026, 2, 5)
        )
        assert hits == 1


    def test_email_failure_does_not_stop_the_scan(self, db_session, users, control):
        ControlService(db_session).activate_control(
            ControlActivate(
                control_library_id="CIS-3.1",
                owner_id=users["john"].id,
                review_interval_days=30,
            ),
            now=ACTIVATED,
        )
        db_session.commit()
        email = FailingEmail("user@company.com")

        hits = ReminderService(db_session, email).check_due_controls(date(2026, 1, 31))

        assert hits == 2
        assert len(NotificationService(db_session).list_for_user(users["user"].id)) == 1
        assert len(NotificationService(db_session).list_for_user(users["john"].id)) == 1
        assert email.sent == [("due", users["john"].email)]


class TestOverdueControls:

    def test_urgent_notification_after_grace_period(self, db_session, users, control):
        email = RecordingEmail()
        service = ReminderService(db_session, email)

        assert service.check_overdue_controls(date(2026, 2, 6)) == 0
        assert service.check_overdue_controls(date(2026, 2, 7)) == 1

        notes = NotificationService(db_session).list_for_user(users["user"].id)
        assert notes[0].message == "URGENT: Control CIS-1.1 is overdue for review"
        assert email.sent == [("overdue", "user@company.com")]


class TestDigests:

    def test_daily_summary_goes_to_admins_only(self, db_session, users, control):
        ControlService(db_session).submit_evidence(
            control.id,
            users["user"].id,
            EvidenceSubmit(compliance_status=ComplianceStatus.COMPLIANT, notes="ok"),
            now=datetime(2026, 1, 5, 9, 0),
        )
        email = RecordingEmail()

        reached = ReminderService(db_session, email).send_daily_summary(date(2026, 1, 6))

        admin_notes = NotificationService(db_session).list_for_user(users["admin"].id)
        assert reached == 1
        assert admin_notes[0].message == (
            "Daily Summary - Controls: 1 total, 1 compliant, 0 overdue. "
            "Tickets: 0 total, 0 open."
        )
        assert admin_notes[0].link_url == "/dashboard"
        assert NotificationService(db_session).list_for_user(users["user"].id) == []
        assert email.sent == [("daily", "admin@company.com")]

    def test_weekly_stats(self, db_session, users, control):
        ControlService(db_session).submit_evidence(
            control.id,
            users["user"].id,
            EvidenceSubmit(compliance_status=ComplianceStatus.NON_COMPLIANT, notes="gap"),
            now=datetime(2026, 1, 10, 9, 0),
        )
        email = RecordingEmail()
        service = ReminderService(db_session, email)

        stats = service.weekly_stats(date(2026, 1, 12))
        service.send_weekly_digest(date(2026, 1, 12))

        assert stats == {
            "total_controls": 1,
            "compliance_rate": 0.0,
            "overdue_controls": 0,
            "evidence_submissions": 1,
            "tickets_resolved": 0,
        }
        assert email.sent == [("weekly", "admin@company.com")]


class TestDashboardSummary:

    def test_latest_verdict_wins(self, db_session, users, control):
        service = ControlService(db_session)
        for day, status in ((2, ComplianceStatus.NON_COMPLIANT), (4, ComplianceStatus.COMPLIANT)):
            service.submit_evidence(
                control.id,
                users["user"].id,
                EvidenceSubmit(compliance_status=status, notes="review"),
                now=datetime(2026, 1, day, 9, 0),
            )

        summary = DashboardService(db_session).control_summary(date(2026, 1, 5))

        assert summary["total"] == 18
        assert summary["activated"] == 1
        assert summary["compliant"] == 1
        assert summary["nonCompliant"] == 0
        assert summary["compliancePercentage"] == 100.0

    def test_overdue_counts_past_due_date(self, db_session, users, control):
        summary = DashboardService(db_session).control_summary(date(2026, 2, 1))

        assert summary["overdue"] == 1
        assert summary["compliancePercentage"] == 0.0
