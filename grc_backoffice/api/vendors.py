"""
Vendor management endpoints.

Reading vendors, their assessments and their controls is open
to every signed-in user. Everything that changes them is
admin-only and audited.
"""

import uuid

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from grc_backoffice.api.deps import get_current_user, require_admin, client_ip
from grc_backoffice.errors import GRCError, to_http_exception
from grc_backoffice.models.base import get_db
from grc_backoffice.models.enums import AuditAction, EntityType
from grc_backoffice.models.user import User
from grc_backoffice.schemas.control import ActivatedControlResponse, ControlMap
from grc_backoffice.schemas.vendor import (
    VendorCreate,
    VendorUpdate,
    VendorResponse,
    VendorAssessmentCreate,
    VendorAssessmentResponse,
)
from grc_backoffice.services.audit_service import AuditService
from grc_backoffice.services.vendor_service import VendorService

router = APIRouter(prefix="/api/v1/vendors", tags=["Vendors"])


@router.post("", response_model=VendorResponse, status_code=201)
def create_vendor(
    body: VendorCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Register a vendor."""
    try:
        vendor = VendorService(db).create_vendor(body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.VENDOR_CREATED,
        EntityType.VENDOR,
        entity_id=vendor.id,
        changes={"name": vendor.name, "risk_tier": vendor.risk_tier.value},
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return vendor


@router.get("", response_model=list[VendorResponse])
def list_vendors(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Every vendor, by name."""
    return VendorService(db).list_vendors()


@router.get("/{vendor_id}", response_model=VendorResponse)
def get_vendor(
    vendor_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """One vendor."""
    try:
        return VendorService(db).get_vendor(vendor_id)
    except GRCError as e:
        raise to_http_exception(e)


@router.put("/{vendor_id}", response_model=VendorResponse)
def update_vendor(
    vendor_id: uuid.UUID,
    body: VendorUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Edit a vendor."""
    try:
        vendor = VendorService(db).update_vendor(vendor_id, body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.VENDOR_UPDATED,
        EntityType.VENDOR,
        entity_id=vendor_id,
        changes=body.model_dump(exclude_unset=True),
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return vendor


@router.delete("/{vendor_id}", status_code=204)
def delete_vendor(
    vendor_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Delete a vendor with its assessments and control links."""
    try:
        VendorService(db).delete_vendor(vendor_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.VENDOR_DELETED,
        EntityType.VENDOR,
        entity_id=vendor_id,
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return Response(status_code=204)


# --- Assessments ---

@router.get(
    "/{vendor_id}/assessments", response_model=list[VendorAssessmentResponse]
)
def list_assessments(
    vendor_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """A vendor's assessments, most recent first."""
    try:
        return VendorService(db).list_assessments(vendor_id)
    except GRCError as e:
        raise to_http_exception(e)


@router.post(
    "/{vendor_id}/assessments",
    response_model=VendorAssessmentResponse,
    status_code=201,
)
def create_assessment(
    vendor_id: uuid.UUID,
    body: VendorAssessmentCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Record an assessment with the caller as assessor."""
    try:
        assessment = VendorService(db).create_assessment(vendor_id, body, admin.id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.VENDOR_ASSESSMENT_CREATED,
        EntityType.VENDOR_ASSESSMENT,
        entity_id=assessment.id,
        changes={
            "vendor_id": vendor_id,
            "assessment_date": body.assessment_date,
            "overall_risk_score": body.overall_risk_score,
        },
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return assessment


# --- Control mappings ---

@router.get("/{vendor_id}/controls", response_model=list[ActivatedControlResponse])
def list_vendor_controls(
    vendor_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Controls that cover a vendor."""
    try:
        return VendorService(db).mapped_controls(vendor_id)
    except GRCError as e:
        raise to_http_exception(e)


@router.post("/{vendor_id}/controls", status_code=201)
def map_vendor_control(
    vendor_id: uuid.UUID,
    body: ControlMap,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Link a control to a vendor."""
    try:
        created = VendorService(db).map_control(vendor_id, body.activated_control_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    if created:
        AuditService(db).log(
            AuditAction.VENDOR_CONTROL_MAPPED,
            EntityType.VENDOR_CONTROL_MAPPING,
            entity_id=vendor_id,
            changes={"activated_control_id": body.activated_control_id},
            user_id=admin.id,
            ip_address=client_ip(request),
        )
    return {"mapped": True, "created": created}


@router.delete("/{vendor_id}/controls/{control_id}", status_code=204)
def unmap_vendor_control(
    vendor_id: uuid.UUID,
    control_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Remove a vendor-control link."""
    try:
        VendorService(db).unmap_control(vendor_id, control_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.VENDOR_CONTROL_UNMAPPED,
        EntityType.VENDOR_CONTROL_MAPPING,
        entity_id=vendor_id,
        changes={"activated_control_id": control_id},
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return Response(status_code=204)
