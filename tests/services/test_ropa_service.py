"""
Tests for the record of processing activities.
"""

import uuid

import pytest

from grc_backoffice.errors import NotFoundError
from grc_backoffice.models.enums import ROPAStatus
from grc_backoffice.schemas.ropa import ROPACreate, ROPAUpdate
from grc_backoffice.services.ropa_service import ROPAService


def create(db_session, name="Payroll"):
    record = ROPAService(db_session).create_record(ROPACreate(
        activity_name=name,
        data_controller_details="Example Ltd, 1 Main St",
        data_categories="Name, bank details",
        data_subject_categories="Employees",
    ))
    db_session.commit()
    return record


class TestROPA:

    def test_new_record_is_draft(self, db_session):
        assert create(db_session).status == ROPAStatus.DRAFT

    def test_archived_records_leave_the_register(self, db_session):
        kept = create(db_session, "Payroll")
        archived = create(db_session, "Marketing")
        service = ROPAService(db_session)

        service.archive_record(archived.id)

        assert service.list_records() == [kept]
        assert service.get_record(archived.id).status == ROPAStatus.ARCHIVED

    def test_update_ignores_null_required_fields(self, db_session):
        record = create(db_session)

        ROPAService(db_session).update_record(
            record.id,
            ROPAUpdate(activity_name=None, status=ROPAStatus.ACTIVE, recipients="HMRC"),
        )

        assert record.activity_name == "Payroll"
        assert record.status == ROPAStatus.ACTIVE
        assert record.recipients == "HMRC"

    def test_unknown_record(self, db_session):
        with pytest.raises(NotFoundError):
            ROPAService(db_session).archive_record(uuid.uuid4())

    def test_metrics_include_archived(self, db_session):
        service = ROPAService(db_session)
        active = create(db_session, "Payroll")
        service.update_record(active.id, ROPAUpdate(status=ROPAStatus.ACTIVE))
        create(db_session, "Recruiting")
        service.archive_record(create(db_session, "Marketing").id)

        assert service.metrics() == {
            "total_processing_activities": 3,
            "active": 1,
            "draft": 1,
            "archived": 1,
        }
