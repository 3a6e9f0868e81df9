"""
GDPR data subject request endpoints.

Data subjects submit through the public route without logging
in. Staff submissions, updates and completion are admin-only
and audited.
"""

import uuid

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from grc_backoffice.api.deps import get_current_user, require_admin, client_ip
from grc_backoffice.errors import GRCError, to_http_exception
from grc_backoffice.models.base import get_db
from grc_backoffice.models.enums import AuditAction, EntityType
from grc_backoffice.models.user import User
from grc_backoffice.schemas.dsr import (
    DSRCreate,
    DSRUpdate,
    DSRComplete,
    DSRResponse,
    DSRMetrics,
)
from grc_backoffice.services.audit_service import AuditService
from grc_backoffice.services.dsr_service import DSRService

router = APIRouter(prefix="/api/v1/gdpr/dsr", tags=["GDPR"])


@router.post("/public", response_model=DSRResponse, status_code=201)
def submit_public_request(
    body: DSRCreate,
    db: Session = Depends(get_db),
):
    """Public intake form; nobody is signed in, so nothing is audited."""
    dsr = DSRService(db).create_request(body)
    db.commit()
    return dsr


@router.post("", response_model=DSRResponse, status_code=201)
def create_request(
    body: DSRCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Log a request received by staff."""
    dsr = DSRService(db).create_request(body)
    db.commit()

    AuditService(db).log(
        AuditAction.DSR_CREATED,
        EntityType.DSR,
        entity_id=dsr.id,
        changes={
            "request_type": body.request_type.value,
            "requester_email": body.requester_email,
            "deadline_date": dsr.deadline_date,
        },
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return dsr


@router.get("", response_model=list[DSRResponse])
def list_requests(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Open and closed requests, most urgent first."""
    return DSRService(db).list_requests()


@router.get("/metrics", response_model=DSRMetrics)
def dsr_metrics(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Request counts by status and type."""
    return DSRService(db).metrics()


@router.get("/{dsr_id}", response_model=DSRResponse)
def get_request(
    dsr_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """One data subject request."""
    try:
        return DSRService(db).get_request(dsr_id)
    except GRCError as e:
        raise to_http_exception(e)


@router.put("/{dsr_id}", response_model=DSRResponse)
def update_request(
    dsr_id: uuid.UUID,
    body: DSRUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Change status, priority, assignee or notes."""
    service = DSRService(db)
    try:
        dsr = service.update_request(dsr_id, body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.DSR_UPDATED,
        EntityType.DSR,
        entity_id=dsr_id,
        changes=body.model_dump(exclude_none=True),
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return dsr


@router.post("/{dsr_id}/complete", response_model=DSRResponse)
def complete_request(
    dsr_id: uuid.UUID,
    body: DSRComplete,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Close a request with a response summary."""
    service = DSRService(db)
    try:
        dsr = service.complete_request(dsr_id, body.response_summary)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.DSR_COMPLETED,
        EntityType.DSR,
        entity_id=dsr_id,
        changes={"status": "completed", "completed_date": dsr.completed_date},
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return dsr
