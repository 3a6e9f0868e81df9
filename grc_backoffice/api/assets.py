"""
Asset inventory endpoints.

Any signed-in user can maintain the inventory and link assets
to controls. Every change is audited.
"""

import uuid

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from grc_backoffice.api.deps import get_current_user, client_ip
from grc_backoffice.errors import GRCError, to_http_exception
from grc_backoffice.models.base import get_db
from grc_backoffice.models.enums import AuditAction, EntityType
from grc_backoffice.models.user import User
from grc_backoffice.schemas.asset import (
    AssetCreate,
    AssetUpdate,
    AssetResponse,
    AssetTypeBreakdown,
)
from grc_backoffice.schemas.control import ActivatedControlResponse, ControlMap
from grc_backoffice.services.asset_service import AssetService
from grc_backoffice.services.audit_service import AuditService

router = APIRouter(prefix="/api/v1/assets", tags=["Assets"])


@router.post("", response_model=AssetResponse, status_code=201)
def create_asset(
    body: AssetCreate,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Add an asset to the inventory."""
    try:
        asset = AssetService(db).create_asset(body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.ASSET_CREATED,
        EntityType.ASSET,
        entity_id=asset.id,
        changes={"name": asset.name, "asset_type": asset.asset_type},
        user_id=user.id,
        ip_address=client_ip(request),
    )
    return asset


@router.get("", response_model=list[AssetResponse])
def list_assets(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Every asset, newest first."""
    return AssetService(db).list_assets()


@router.get("/breakdown", response_model=list[AssetTypeBreakdown])
def asset_breakdown(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Asset counts per type."""
    return AssetService(db).type_breakdown()


@router.get("/{asset_id}", response_model=AssetResponse)
def get_asset(
    asset_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """One asset."""
    try:
        return AssetService(db).get_asset(asset_id)
    except GRCError as e:
        raise to_http_exception(e)


@router.put("/{asset_id}", response_model=AssetResponse)
def update_asset(
    asset_id: uuid.UUID,
    body: AssetUpdate,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Rename, retype, reassign or change the status of an asset."""
    try:
        asset = AssetService(db).update_asset(asset_id, body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.ASSET_UPDATED,
        EntityType.ASSET,
        entity_id=asset_id,
        changes=body.model_dump(exclude_unset=True),
        user_id=user.id,
        ip_address=client_ip(request),
    )
    return asset


@router.delete("/{asset_id}", status_code=204)
def delete_asset(
    asset_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Delete an asset and its control links."""
    try:
        AssetService(db).delete_asset(asset_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.ASSET_DELETED,
        EntityType.ASSET,
        entity_id=asset_id,
        user_id=user.id,
        ip_address=client_ip(request),
    )
    return Response(status_code=204)


# --- Control mappings ---

@router.get("/{asset_id}/controls", response_model=list[ActivatedControlResponse])
def list_asset_controls(
    asset_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Controls that protect an asset."""
    try:
        return AssetService(db).mapped_controls(asset_id)
    except GRCError as e:
        raise to_http_exception(e)


@router.post("/{asset_id}/controls", status_code=201)
def map_asset_control(
    asset_id: uuid.UUID,
    body: ControlMap,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Link a control to an asset."""
    try:
        created = AssetService(db).map_control(asset_id, body.activated_control_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    if created:
        AuditService(db).log(
            AuditAction.ASSET_CONTROL_MAPPED,
            EntityType.ASSET_CONTROL_MAPPING,
            entity_id=asset_id,
            changes={"activated_control_id": body.activated_control_id},
            user_id=user.id,
            ip_address=client_ip(request),
        )
    return {"mapped": True, "created": created}


@router.delete("/{asset_id}/controls/{control_id}", status_code=204)
def unmap_asset_control(
    asset_id: uuid.UUID,
    control_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Remove an asset-control link."""
    try:
        AssetService(db).unmap_control(asset_id, control_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.ASSET_CONTROL_UNMAPPED,
        EntityType.ASSET_CONTROL_MAPPING,
        entity_id=asset_id,
        changes={"activated_control_id": control_id},
        user_id=user.id,
        ip_address=client_ip(request),
    )
    return Response(status_code=204)
