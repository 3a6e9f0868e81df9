"""
Tests for the ControlService: library management, activation,
evidence submission and the due/overdue scans.
"""

import uuid
from datetime import date, datetime, timedelta

import pytest
from sqlalchemy import select, func

from grc_backoffice.errors import ConflictError, NotFoundError
from grc_backoffice.models.control import ActivatedControl, ControlEvidenceLog
from grc_backoffice.models.enums import ComplianceStatus, ControlStatus
from grc_backoffice.schemas.control import (
    ControlActivate,
    ControlUpdate,
    EvidenceSubmit,
    LibraryItemCreate,
)
from grc_backoffice.services.control_service import ControlService

DAY_ZERO = datetime(2026, 1, 1, 10, 0, 0)


def activate(db_session, owner, interval=30, library_id="CIS-1.1", now=DAY_ZERO):
    control = ControlService(db_session).activate_control(
        ControlActivate(
            control_library_id=library_id,
            owner_id=owner.id,
            review_interval_days=interval,
        ),
        now=now,
    )
    db_session.commit()
    return control


def evidence(status=ComplianceStatus.COMPLIANT, notes="Reviewed inventory export"):
    return EvidenceSubmit(compliance_status=status, notes=notes)


def evidence_count(db_session) -> int:
    return db_session.execute(
        select(func.count(ControlEvidenceLog.id))
    ).scalar_one()


# --- Activation ---

class TestActivateControl:

    def test_activation_sets_due_date_from_interval(self, db_session, users, library):
        control = activate(db_session, users["user"], interval=30)

        assert control.status == ControlStatus.ACTIVE
        assert control.next_review_due_date == date(2026, 1, 31)
        assert control.last_reviewed_at is None

    def test_unknown_library_id_fails(self, db_session, users, library):
        with pytest.raises(NotFoundError):
            activate(db_session, users["user"], library_id="NOPE-1")

    def test_unknown_owner_fails(self, db_session, users, library):
        service = ControlService(db_session)
        with pytest.raises(NotFoundError):
            service.activate_control(ControlActivate(
                control_library_id="CIS-1.1",
                owner_id=uuid.uuid4(),
                review_interval_days=30,
            ))


# --- Evidence ---

class TestSubmitEvidence:

    def test_evidence_moves_due_date_and_review_time(self, db_session, users, library):
        control = activate(db_session, users["user"], interval=30)
        submitted_at = datetime(2026, 1, 20, 15, 45, 0)

        ControlService(db_session).submit_evidence(
            control.id, users["user"].id, evidence(), now=submitted_at
        )
        db_session.commit()

        assert control.last_reviewed_at == submitted_at
        assert control.next_review_due_date == date(2026, 2, 19)

    def test_uses_interval_committed_by_another_session(
        self, db_session, session_factory, users, library
    ):
        control = activate(db_session, users["user"], interval=30)
        assert control.review_interval_days == 30

        other = session_factory()
        try:
            other.get(ActivatedControl, control.id).review_interval_days = 90
            other.commit()
        finally:
            other.close()

        ControlService(db_session).submit_evidence(
            control.id, users["user"].id, evidence(), now=datetime(2026, 1, 20, 9, 0)
        )

        assert control.review_interval_days == 90
        assert control.next_review_due_date == date(2026, 4, 20)

    def test_evidence_row_is_recorded(self, db_session, users, library):
        control = activate(db_session, users["user"])

        log = ControlService(db_session).submit_evidence(
            control.id,
            users["john"].id,
            EvidenceSubmit(
                compliance_status=ComplianceStatus.NON_COMPLIANT,
                notes="Two laptops missing from inventory",
                evidence_link="https://wiki.example.com/inventory",
            ),
        )
        db_session.commit()

        assert log.activated_control_id == control.id
        assert log.performed_by_id == users["john"].id
        assert log.compliance_status == ComplianceStatus.NON_COMPLIANT
        assert evidence_count(db_session) == 1

    def test_unknown_control_fails_and_leaves_no_evidence(self, db_session, users, library):
        activate(db_session, users["user"])
        service = ControlService(db_session)

        with pytest.raises(NotFoundError):
            service.submit_evidence(uuid.uuid4(), users["user"].id, evidence())
        db_session.rollback()

        assert evidence_count(db_session) == 0

    def test_retired_control_rejects_evidence(self, db_session, users, library):
        control = activate(db_session, users["user"])
        service = ControlService(db_session)
        service.retire_control(control.id)
        db_session.commit()

        with pytest.raises(NotFoundError):
            service.submit_evidence(control.id, users["user"].id, evidence())
        db_session.rollback()

        assert evidence_count(db_session) == 0

    def test_history_is_newest_first(self, db_session, users, library):
        control = activate(db_session, users["user"])
        service = ControlService(db_session)
        for day in (5, 10, 15):
            service.submit_evidence(
                control.id,
                users["user"].id,
                evidence(notes=f"day {day}"),
                now=DAY_ZERO + timedelta(days=day),
            )
            db_session.commit()

        db_session.expire_all()
        notes = [e.notes for e in service.get_control(control.id).evidence]
        assert notes == ["day 15", "day 10", "day 5"]


# --- Scans ---

class TestScans:

    @pytest.mark.parametrize("day, expected", [(29, False), (30, True), (31, True)])
    def test_due_scan_includes_control_from_day_30(
        self, db_session, users, library, day, expected
    ):
        control = activate(db_session, users["user"], interval=30)
        today = DAY_ZERO.date() + timedelta(days=day)

        due = ControlService(db_session).scan_due_controls(today)

        assert (control in due) is expected

    @pytest.mark.parametrize("day, expected", [(30, False), (36, False), (37, True)])
    def test_overdue_scan_includes_control_from_day_37(
        self, db_session, users, library, day, expected
    ):
        control = activate(db_session, users["user"], interval=30)
        today = DAY_ZERO.date() + timedelta(days=day)

        overdue = ControlService(db_session).scan_overdue_controls(today)

        assert (control in overdue) is expected

    def test_retired_controls_are_not_scanned(self, db_session, users, library):
        control = activate(db_session, users["user"], interval=1)
        ControlService(db_session).retire_control(control.id)
        db_session.commit()

        due = ControlService(db_session).scan_due_controls(date(2026, 6, 1))

        assert due == []

    def test_evidence_takes_control_out_of_due_scan(self, db_session, users, library):
        control = activate(db_session, users["user"], interval=30)
        service = ControlService(db_session)
        day_30 = DAY_ZERO + timedelta(days=30)

        assert control in service.scan_due_controls(day_30.date())

        service.submit_evidence(control.id, users["user"].id, evidence(), now=day_30)
        db_session.commit()

        assert service.scan_due_controls(day_30.date()) == []


# --- Updates ---

class TestUpdateControl:

    def test_interval_change_recomputes_due_date(self, db_session, users, library):
        control = activate(db_session, users["user"], interval=30)

        ControlService(db_session).update_control(
            control.id, ControlUpdate(review_interval_days=90)
        )
        db_session.commit()

        assert control.next_review_due_date == date(2026, 4, 1)

    def test_interval_change_counts_from_last_review(self, db_session, users, library):
        control = activate(db_session, users["user"], interval=30)
        service = ControlService(db_session)
        service.submit_evidence(
            control.id, users["user"].id, evidence(), now=datetime(2026, 1, 10, 9, 0)
        )
        service.update_control(control.id, ControlUpdate(review_interval_days=7))
        db_session.commit()

        assert control.next_review_due_date == date(2026, 1, 17)

    def test_reassign_owner(self, db_session, users, library):
        control = activate(db_session, users["user"])

        ControlService(db_session).update_control(
            control.id, ControlUpdate(owner_id=users["john"].id)
        )
        db_session.commit()

        assert control.owner_id == users["john"].id

    def test_retire_keeps_the_row(self, db_session, users, library):
        control = activate(db_session, users["user"])
        service = ControlService(db_session)

        service.retire_control(control.id)
        db_session.commit()

        assert service.get_control(control.id).status == ControlStatus.RETIRED
        assert service.list_active_controls() == []


# --- Library ---

class TestControlLibrary:

    def test_duplicate_library_id_conflicts(self, db_session, library):
        service = ControlService(db_session)
        with pytest.raises(ConflictError):
            service.create_library_item(LibraryItemCreate(
                id="CIS-1.1", standard="CIS v8 IG1", family="x", name="dup",
            ))

    def test_activated_library_item_cannot_be_deleted(self, db_session, users, library):
        activate(db_session, users["user"], library_id="CIS-2.1")

        with pytest.raises(ConflictError):
            ControlService(db_session).delete_library_item("CIS-2.1")

    def test_import_skips_existing_ids(self, db_session, library):
        created, skipped = ControlService(db_session).import_library([
            LibraryItemCreate(id="CIS-1.1", standard="CIS v8 IG1", family="f", name="n"),
            LibraryItemCreate(id="SOC2-CC6.1", standard="SOC 2", family="CC6", name="Logical access"),
        ])
        db_session.commit()

        assert (created, skipped) == (1, 1)

    def test_active_list_is_joined_and_ordered_by_due_date(self, db_session, users, library):
        activate(db_session, users["user"], interval=60, library_id="CIS-1.1")
        activate(db_session, users["john"], interval=10, library_id="CIS-2.1")

        rows = ControlService(db_session).list_active_controls()

        assert [r["control_id"] for r in rows] == ["CIS-2.1", "CIS-1.1"]
        assert rows[0]["owner_name"] == "John Doe"
        assert rows[0]["control_name"] == "Establish and Maintain a Software Inventory"
