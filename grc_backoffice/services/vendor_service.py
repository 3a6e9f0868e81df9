"""
Vendor management service.

Recording an assessment moves the vendor's last_assessment_date
forward to the assessment date, never back.
"""

import uuid
from datetime import date

from sqlalchemy import select
from sqlalchemy.orm import Session

from grc_backoffice.errors import NotFoundError, ValidationError
from grc_backoffice.models.control import ActivatedControl
from grc_backoffice.models.user import User
from grc_backoffice.models.vendor import Vendor, VendorAssessment, VendorControlMapping
from grc_backoffice.schemas.vendor import (
    VendorCreate,
    VendorUpdate,
    VendorAssessmentCreate,
)
from grc_backoffice.services.control_mapping import ControlMappings

REQUIRED_FIELDS = ("name", "category", "risk_tier", "status")


def check_contract_dates(start: date | None, end: date | None) -> None:
    if start and end and end < start:
        raise ValidationError("contract_end_date cannot be before contract_start_date")


class VendorService:

    def __init__(self, db: Session):
        self.db = db
        self.mappings = ControlMappings(db, VendorControlMapping, "vendor_id", "Vendor")

    def create_vendor(self, request: VendorCreate) -> Vendor:
        self._check_owner(request.owner_id)
        check_contract_dates(request.contract_start_date, request.contract_end_date)
        vendor = Vendor(**request.model_dump())
        self.db.add(vendor)
        self.db.flush()
        return vendor

    def list_vendors(self) -> list[Vendor]:
        return list(
            self.db.execute(select(Vendor).order_by(Vendor.name)).scalars().all()
        )

    def get_vendor(self, vendor_id: uuid.UUID) -> Vendor:
        vendor = self.db.get(Vendor, vendor_id)
        if not vendor:
            raise NotFoundError(f"Vendor {vendor_id} not found")
        return vendor

    def update_vendor(self, vendor_id: uuid.UUID, request: VendorUpdate) -> Vendor:
        vendor = self.get_vendor(vendor_id)
        self._check_owner(request.owner_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(vendor, field, value)
        check_contract_dates(vendor.contract_start_date, vendor.contract_end_date)
        self.db.flush()
        return vendor

    def delete_vendor(self, vendor_id: uuid.UUID) -> None:
        """Deletes the vendor with its assessments and control links."""
        vendor = self.get_vendor(vendor_id)
        self.mappings.clear(vendor.id)
        self.db.delete(vendor)
        self.db.flush()

    def _check_owner(self, owner_id: uuid.UUID | None) -> None:
        if owner_id is not None and not self.db.get(User, owner_id):
            raise NotFoundError(f"User {owner_id} not found")

    # --- Assessments ---

    def create_assessment(
        self,
        vendor_id: uuid.UUID,
        request: VendorAssessmentCreate,
        assessor_id: uuid.UUID | None,
    ) -> VendorAssessment:
        vendor = self.get_vendor(vendor_id)
        assessment = VendorAssessment(
            **request.model_dump(), vendor_id=vendor.id, assessor_id=assessor_id
        )
        self.db.add(assessment)
        if (
            vendor.last_assessment_date is None
            or request.assessment_date > vendor.last_assessment_date
        ):
            vendor.last_assessment_date = request.assessment_date
        self.db.flush()
        return assessment

    def list_assessments(self, vendor_id: uuid.UUID) -> list[VendorAssessment]:
        self.get_vendor(vendor_id)
        return list(
            self.db.execute(
                select(VendorAssessment)
                .where(VendorAssessment.vendor_id == vendor_id)
                .order_by(
                    VendorAssessment.assessment_date.desc(),
                    VendorAssessment.created_at.desc(),
                )
            ).scalars().all()
        )

    # --- Control mappings ---

    def map_control(self, vendor_id: uuid.UUID, control_id: uuid.UUID) -> bool:
        self.get_vendor(vendor_id)
        return self.mappings.map(vendor_id, control_id)

    def unmap_control(self, vendor_id: uuid.UUID, control_id: uuid.UUID) -> None:
        self.mappings.unmap(vendor_id, control_id)

    def mapped_controls(self, vendor_id: uuid.UUID) -> list[ActivatedControl]:
        self.get_vendor(vendor_id)
        return self.mappings.controls(vendor_id)
