"""
Control library and activated control endpoints.

Evidence submission is the one multi-statement write: the
service inserts the evidence row and advances the due date,
and this layer commits both together or rolls both back.
"""

import uuid

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from grc_backoffice.api.deps import get_current_user, require_admin, client_ip
from grc_backoffice.errors import ConflictError, GRCError, to_http_exception
from grc_backoffice.models.base import get_db
from grc_backoffice.models.enums import AuditAction, EntityType
from grc_backoffice.models.user import User
from grc_backoffice.schemas.control import (
    LibraryItemCreate,
    LibraryItemUpdate,
    LibraryItemResponse,
    LibraryImportRequest,
    LibraryImportResponse,
    ControlActivate,
    ControlUpdate,
    ActivatedControlResponse,
    ActiveControlRow,
    ControlDetailResponse,
    EvidenceSubmit,
    EvidenceResponse,
)
from grc_backoffice.services.audit_service import AuditService
from grc_backoffice.services.control_service import ControlService

router = APIRouter(prefix="/api/v1/controls", tags=["Controls"])


# --- Control Library Endpoints ---

@router.get("/library", response_model=list[LibraryItemResponse])
def list_library(
    standard: str | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """List catalog items, optionally filtered by standard."""
    return ControlService(db).list_library(standard)


@router.get("/library/export", response_model=list[LibraryItemResponse])
def export_library(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Export the whole catalog as JSON."""
    return ControlService(db).export_library()


@router.post("/library", response_model=LibraryItemResponse, status_code=201)
def create_library_item(
    body: LibraryItemCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Add a catalog item."""
    service = ControlService(db)
    try:
        item = service.create_library_item(body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)
    except IntegrityError:
        db.rollback()
        raise to_http_exception(ConflictError(f"Control {body.id} already exists"))

    AuditService(db).log(
        AuditAction.CONTROL_LIBRARY_CREATED,
        EntityType.CONTROL_LIBRARY,
        entity_id=item.id,
        changes=body.model_dump(),
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return item


@router.put("/library/{item_id}", response_model=LibraryItemResponse)
def update_library_item(
    item_id: str,
    body: LibraryItemUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Edit a catalog item."""
    service = ControlService(db)
    try:
        item = service.update_library_item(item_id, body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.CONTROL_LIBRARY_UPDATED,
        EntityType.CONTROL_LIBRARY,
        entity_id=item_id,
        changes=body.model_dump(exclude_none=True),
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return item


@router.delete("/library/{item_id}", status_code=204)
def delete_library_item(
    item_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Delete a catalog item that was never activated."""
    service = ControlService(db)
    try:
        service.delete_library_item(item_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.CONTROL_LIBRARY_DELETED,
        EntityType.CONTROL_LIBRARY,
        entity_id=item_id,
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return Response(status_code=204)


@router.post("/library/import", response_model=LibraryImportResponse)
def import_library(
    body: LibraryImportRequest,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Bulk-import catalog items, skipping ids that already exist."""
    service = ControlService(db)
    try:
        created, skipped = service.import_library(body.controls)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise to_http_exception(ConflictError("Import conflicted with existing controls"))

    AuditService(db).log(
        AuditAction.CONTROL_LIBRARY_IMPORTED,
        EntityType.CONTROL_LIBRARY,
        changes={"created": created, "skipped": skipped},
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return LibraryImportResponse(created=created, skipped=skipped)


# --- Activated Control Endpoints ---

@router.post("/activate", response_model=ActivatedControlResponse, status_code=201)
def activate_control(
    body: ControlActivate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Activate a catalog item with an owner and review interval."""
    service = ControlService(db)
    try:
        control = service.activate_control(body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.CONTROL_ACTIVATED,
        EntityType.ACTIVATED_CONTROL,
        entity_id=control.id,
        changes={
            "control_library_id": body.control_library_id,
            "owner_id": body.owner_id,
            "review_interval_days": body.review_interval_days,
        },
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return control


@router.get("/activated", response_model=list[ActiveControlRow])
def list_active_controls(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Active controls, soonest due first."""
    return ControlService(db).list_active_controls()


@router.get("/activated/{control_id}", response_model=ControlDetailResponse)
def get_control(
    control_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """One activated control with its evidence history."""
    try:
        control = ControlService(db).get_control(control_id)
    except GRCError as e:
        raise to_http_exception(e)

    return ControlDetailResponse(
        **ActivatedControlResponse.model_validate(control).model_dump(),
        control_name=control.library_item.name,
        standard=control.library_item.standard,
        evidence=[EvidenceResponse.model_validate(e) for e in control.evidence],
    )


@router.patch("/activated/{control_id}", response_model=ActivatedControlResponse)
def update_control(
    control_id: uuid.UUID,
    body: ControlUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Change a control's owner or review interval."""
    service = ControlService(db)
    try:
        control = service.update_control(control_id, body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.CONTROL_UPDATED,
        EntityType.ACTIVATED_CONTROL,
        entity_id=control_id,
        changes=body.model_dump(exclude_none=True),
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return control


@router.delete("/activated/{control_id}", response_model=ActivatedControlResponse)
def retire_control(
    control_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Retire a control. Activated controls are never hard-deleted."""
    service = ControlService(db)
    try:
        control = service.retire_control(control_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.CONTROL_RETIRED,
        EntityType.ACTIVATED_CONTROL,
        entity_id=control_id,
        changes={"status": "retired"},
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return control


@router.post(
    "/activated/{control_id}/evidence",
    response_model=EvidenceResponse,
    status_code=201,
)
def submit_evidence(
    control_id: uuid.UUID,
    body: EvidenceSubmit,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Record a review and move the control's due date."""
    service = ControlService(db)
    try:
        evidence = service.submit_evidence(control_id, user.id, body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)
    except Exception:
        db.rollback()
        raise

    AuditService(db).log(
        AuditAction.EVIDENCE_SUBMITTED,
        EntityType.CONTROL_EVIDENCE,
        entity_id=evidence.id,
        changes={
            "activated_control_id": control_id,
            "compliance_status": body.compliance_status.value,
            "evidence_link": body.evidence_link,
        },
        user_id=user.id,
        ip_address=client_ip(request),
    )
    return evidence
