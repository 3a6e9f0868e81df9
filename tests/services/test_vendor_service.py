"""
Tests for vendor management.
"""

import uuid
from datetime import date

import pytest

from grc_backoffice.errors import NotFoundError, ValidationError
from grc_backoffice.models.enums import VendorRiskTier
from grc_backoffice.models.vendor import VendorAssessment
from grc_backoffice.schemas.control import ControlActivate
from grc_backoffice.schemas.vendor import (
    VendorCreate,
    VendorUpdate,
    VendorAssessmentCreate,
)
from grc_backoffice.services.control_service import ControlService
from grc_backoffice.services.vendor_service import VendorService


def create(db_session, name="CloudCo", **extra):
    vendor = VendorService(db_session).create_vendor(
        VendorCreate(name=name, category="hosting", **extra)
    )
    db_session.commit()
    return vendor


def assess(db_session, vendor, assessor, on, score=3):
    assessment = VendorService(db_session).create_assessment(
        vendor.id,
        VendorAssessmentCreate(assessment_date=on, overall_risk_score=score),
        assessor.id,
    )
    db_session.commit()
    return assessment


class TestVendors:

    def test_defaults(self, db_session):
        vendor = create(db_session)

        assert vendor.risk_tier == VendorRiskTier.MEDIUM
        assert vendor.last_assessment_date is None

    def test_contract_cannot_end_before_it_starts(self, db_session):
        with pytest.raises(ValidationError):
            create(
                db_session,
                contract_start_date=date(2026, 6, 1),
                contract_end_date=date(2026, 1, 1),
            )

    def test_update_checks_the_merged_dates(self, db_session):
        vendor = create(db_session, contract_start_date=date(2026, 6, 1))

        with pytest.raises(ValidationError):
            VendorService(db_session).update_vendor(
                vendor.id, VendorUpdate(contract_end_date=date(2026, 1, 1))
            )

    def test_unknown_owner(self, db_session):
        with pytest.raises(NotFoundError):
            create(db_session, owner_id=uuid.uuid4())

    def test_list_is_by_name(self, db_session):
        create(db_session, name="Zeta")
        create(db_session, name="Acme")

        names = [v.name for v in VendorService(db_session).list_vendors()]

        assert names == ["Acme", "Zeta"]


class TestAssessments:

    def test_last_assessment_date_only_moves_forward(self, db_session, users):
        vendor = create(db_session)

        assess(db_session, vendor, users["admin"], date(2026, 3, 1))
        assess(db_session, vendor, users["admin"], date(2026, 1, 1))

        assert vendor.last_assessment_date == date(2026, 3, 1)
        dates = [
            a.assessment_date
            for a in VendorService(db_session).list_assessments(vendor.id)
        ]
        assert dates == [date(2026, 3, 1), date(2026, 1, 1)]

    def test_delete_removes_assessments_and_links(self, db_session, users, library):
        control = ControlService(db_session).activate_control(ControlActivate(
            control_library_id="CIS-1.1",
            owner_id=users["user"].id,
            review_interval_days=30,
        ))
        vendor = create(db_session)
        assess(db_session, vendor, users["admin"], date(2026, 3, 1))
        service = VendorService(db_session)
        service.map_control(vendor.id, control.id)

        service.delete_vendor(vendor.id)
        db_session.commit()

        with pytest.raises(NotFoundError):
            service.get_vendor(vendor.id)
        assert db_session.query(VendorAssessment).count() == 0
