"""
Audit trail query endpoint (admins only).
"""

import uuid

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from grc_backoffice.api.deps import require_admin
from grc_backoffice.models.base import get_db
from grc_backoffice.models.user import User
from grc_backoffice.schemas.audit import AuditLogPage
from grc_backoffice.services.audit_service import (
    AuditService,
    DEFAULT_PAGE_SIZE,
    MAX_PAGE_SIZE,
)

router = APIRouter(prefix="/api/v1/audit-logs", tags=["Audit"])


@router.get("", response_model=AuditLogPage)
def list_audit_logs(
    limit: int = Query(default=DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE),
    offset: int = Query(default=0, ge=0),
    user_id: uuid.UUID | None = None,
    action_type: str | None = None,
    entity_type: str | None = None,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Page through the audit trail, newest first. Admin-only."""
    logs = AuditService(db).list_logs(
        limit=limit,
        offset=offset,
        user_id=user_id,
        action_type=action_type,
        entity_type=entity_type,
    )
    return AuditLogPage(logs=logs, limit=limit, offset=offset)
