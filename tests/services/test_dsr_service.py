"""
Tests for GDPR data subject requests.
"""

from datetime import date, datetime

import pytest

from grc_backoffice.errors import ConflictError, ValidationError
from grc_backoffice.models.enums import DSRPriority, DSRRequestType, DSRStatus
from grc_backoffice.schemas.dsr import DSRCreate, DSRUpdate
from grc_backoffice.services.dsr_service import DSRService

RECEIVED = datetime(2026, 3, 1, 12, 0, 0)


def submit(db_session, priority=DSRPriority.NORMAL, now=RECEIVED, name="Jane Roe"):
    dsr = DSRService(db_session).create_request(
        DSRCreate(
            request_type=DSRRequestType.ACCESS,
            requester_name=name,
            requester_email="jane@example.com",
            priority=priority,
        ),
        now=now,
    )
    db_session.commit()
    return dsr


class TestCreateRequest:

    def test_deadline_is_thirty_days_out(self, db_session):
        dsr = submit(db_session)

        assert dsr.status == DSRStatus.SUBMITTED
        assert dsr.deadline_date == date(2026, 3, 31)

    def test_list_orders_by_priority_then_deadline(self, db_session):
        submit(db_session, DSRPriority.LOW, name="low")
        submit(db_session, DSRPriority.URGENT, datetime(2026, 3, 5), name="urgent-late")
        submit(db_session, DSRPriority.URGENT, datetime(2026, 3, 2), name="urgent-early")
        submit(db_session, DSRPriority.HIGH, name="high")

        names = [d.requester_name for d in DSRService(db_session).list_requests()]

        assert names == ["urgent-early", "urgent-late", "high", "low"]


class TestCompleteRequest:

    def test_complete_keeps_deadline(self, db_session):
        dsr = submit(db_session)
        done_at = datetime(2026, 3, 11, 12, 0, 0)

        DSRService(db_session).complete_request(dsr.id, "Export sent", now=done_at)

        assert dsr.status == DSRStatus.COMPLETED
        assert dsr.completed_date == done_at
        assert dsr.deadline_date == date(2026, 3, 31)

    def test_summary_is_required(self, db_session):
        dsr = submit(db_session)

        with pytest.raises(ValidationError):
            DSRService(db_session).complete_request(dsr.id, "   ")

    def test_cannot_complete_twice(self, db_session):
        dsr = submit(db_session)
        service = DSRService(db_session)
        service.complete_request(dsr.id, "done")

        with pytest.raises(ConflictError):
            service.complete_request(dsr.id, "again")


class TestUpdateRequest:

    def test_completed_status_needs_complete_action(self, db_session):
        dsr = submit(db_session)

        with pytest.raises(ValidationError):
            DSRService(db_session).update_request(
                dsr.id, DSRUpdate(status=DSRStatus.COMPLETED)
            )

    def test_rejection_needs_reason(self, db_session):
        dsr = submit(db_session)
        service = DSRService(db_session)

        with pytest.raises(ValidationError):
            service.update_request(dsr.id, DSRUpdate(status=DSRStatus.REJECTED))

        service.update_request(dsr.id, DSRUpdate(
            status=DSRStatus.REJECTED, rejection_reason="Identity not verified"
        ))
        assert dsr.status == DSRStatus.REJECTED


class TestMetrics:

    def test_metrics(self, db_session):
        service = DSRService(db_session)
        first = submit(db_session)
        submit(db_session, now=datetime(2026, 4, 20, 12, 0, 0))
        service.complete_request(first.id, "done", now=datetime(2026, 3, 4, 12, 0, 0))
        submit(db_session, now=datetime(2026, 1, 1, 12, 0, 0))
        db_session.commit()

        metrics = service.metrics(today=date(2026, 5, 1))

        assert metrics["total"] == 3
        assert metrics["by_status"]["completed"] == 1
        assert metrics["by_status"]["submitted"] == 2
        assert metrics["overdue"] == 1
        assert metrics["completion_rate"] == 33.3
        assert metrics["avg_response_days"] == 3.0
