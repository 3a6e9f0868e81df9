"""
Risk register endpoints.

Reading is open to every signed-in user; changing the register
and its control mappings is admin-only.
"""

import uuid

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from grc_backoffice.api.deps import get_current_user, require_admin, client_ip
from grc_backoffice.errors import GRCError, to_http_exception
from grc_backoffice.models.base import get_db
from grc_backoffice.models.enums import AuditAction, EntityType
from grc_backoffice.models.user import User
from grc_backoffice.schemas.control import ActivatedControlResponse
from grc_backoffice.schemas.risk import (
    RiskCreate,
    RiskUpdate,
    RiskResponse,
    RiskControlMap,
    SeverityBucket,
)
from grc_backoffice.services.audit_service import AuditService
from grc_backoffice.services.risk_service import RiskService

router = APIRouter(prefix="/api/v1/risks", tags=["Risks"])


@router.post("", response_model=RiskResponse, status_code=201)
def create_risk(
    body: RiskCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Add a risk to the register."""
    try:
        risk = RiskService(db).create_risk(body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.RISK_CREATED,
        EntityType.RISK,
        entity_id=risk.id,
        changes={
            "title": risk.title,
            "likelihood": risk.likelihood,
            "impact": risk.impact,
            "risk_score": risk.risk_score,
        },
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return risk


@router.get("", response_model=list[RiskResponse])
def list_risks(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Open risks, highest score first."""
    return RiskService(db).list_risks()


@router.get("/distribution", response_model=list[SeverityBucket])
def risk_distribution(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Open risk counts per severity band."""
    return RiskService(db).severity_distribution()


@router.get("/{risk_id}", response_model=RiskResponse)
def get_risk(
    risk_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """One risk."""
    try:
        return RiskService(db).get_risk(risk_id)
    except GRCError as e:
        raise to_http_exception(e)


@router.put("/{risk_id}", response_model=RiskResponse)
def update_risk(
    risk_id: uuid.UUID,
    body: RiskUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Edit a risk and recompute its scores."""
    service = RiskService(db)
    try:
        risk = service.update_risk(risk_id, body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.RISK_UPDATED,
        EntityType.RISK,
        entity_id=risk_id,
        changes=body.model_dump(exclude_unset=True),
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return risk


@router.delete("/{risk_id}", status_code=204)
def delete_risk(
    risk_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Delete a risk and its control mappings."""
    service = RiskService(db)
    try:
        service.delete_risk(risk_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.RISK_DELETED,
        EntityType.RISK,
        entity_id=risk_id,
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return Response(status_code=204)


# --- Control mappings ---

@router.get("/{risk_id}/controls", response_model=list[ActivatedControlResponse])
def list_risk_controls(
    risk_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Controls mapped to a risk."""
    try:
        return RiskService(db).mapped_controls(risk_id)
    except GRCError as e:
        raise to_http_exception(e)


@router.post("/{risk_id}/controls", status_code=201)
def map_control(
    risk_id: uuid.UUID,
    body: RiskControlMap,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Link a control to a risk."""
    service = RiskService(db)
    try:
        created = service.map_control(risk_id, body.activated_control_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    if created:
        AuditService(db).log(
            AuditAction.RISK_CONTROL_MAPPED,
            EntityType.RISK_CONTROL_MAPPING,
            entity_id=risk_id,
            changes={"activated_control_id": body.activated_control_id},
            user_id=admin.id,
            ip_address=client_ip(request),
        )
    return {"mapped": True, "created": created}


@router.delete("/{risk_id}/controls/{control_id}", status_code=204)
def unmap_control(
    risk_id: uuid.UUID,
    control_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Remove a risk-control link."""
    service = RiskService(db)
    try:
        service.unmap_control(risk_id, control_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.RISK_CONTROL_UNMAPPED,
        EntityType.RISK_CONTROL_MAPPING,
        entity_id=risk_id,
        changes={"activated_control_id": control_id},
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return Response(status_code=204)
