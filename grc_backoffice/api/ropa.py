"""
GDPR record of processing activities endpoints.

Reading the register is open to every signed-in user; adding,
editing and archiving records is admin-only.
"""

import uuid

from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from grc_backoffice.api.deps import get_current_user, require_admin, client_ip
from grc_backoffice.errors import GRCError, to_http_exception
from grc_backoffice.models.base import get_db
from grc_backoffice.models.enums import AuditAction, EntityType
from grc_backoffice.models.user import User
from grc_backoffice.schemas.ropa import (
    ROPACreate,
    ROPAUpdate,
    ROPAResponse,
    ROPAMetrics,
)
from grc_backoffice.services.audit_service import AuditService
from grc_backoffice.services.ropa_service import ROPAService

router = APIRouter(prefix="/api/v1/gdpr/ropa", tags=["GDPR"])


@router.post("", response_model=ROPAResponse, status_code=201)
def create_record(
    body: ROPACreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Add a processing activity as a draft."""
    record = ROPAService(db).create_record(body)
    db.commit()

    AuditService(db).log(
        AuditAction.ROPA_CREATED,
        EntityType.ROPA,
        entity_id=record.id,
        changes={"activity_name": record.activity_name},
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return record


@router.get("", response_model=list[ROPAResponse])
def list_records(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """The register without archived records."""
    return ROPAService(db).list_records()


@router.get("/metrics", response_model=ROPAMetrics)
def ropa_metrics(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Record counts by status, archived included."""
    return ROPAService(db).metrics()


@router.get("/{record_id}", response_model=ROPAResponse)
def get_record(
    record_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """One processing activity, archived or not."""
    try:
        return ROPAService(db).get_record(record_id)
    except GRCError as e:
        raise to_http_exception(e)


@router.put("/{record_id}", response_model=ROPAResponse)
def update_record(
    record_id: uuid.UUID,
    body: ROPAUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Edit a processing activity."""
    try:
        record = ROPAService(db).update_record(record_id, body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.ROPA_UPDATED,
        EntityType.ROPA,
        entity_id=record_id,
        changes=body.model_dump(exclude_unset=True),
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return record


@router.delete("/{record_id}", response_model=ROPAResponse)
def archive_record(
    record_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Archive a processing activity. The row is kept."""
    try:
        record = ROPAService(db).archive_record(record_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.ROPA_ARCHIVED,
        EntityType.ROPA,
        entity_id=record_id,
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return record
