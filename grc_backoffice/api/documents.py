"""
Policy document endpoints.

Every signed-in user can read documents and acknowledge the
published version. Creating documents and versions, publishing,
and linking documents to controls are admin-only.
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
from grc_backoffice.schemas.document import (
    DocumentCreate,
    DocumentResponse,
    DocumentDetail,
    DocumentVersionCreate,
    DocumentVersionResponse,
    AcknowledgementResponse,
)
from grc_backoffice.services.audit_service import AuditService
from grc_backoffice.services.document_service import DocumentService

router = APIRouter(prefix="/api/v1/documents", tags=["Documents"])


@router.post("", response_model=DocumentResponse, status_code=201)
def create_document(
    body: DocumentCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Create a document. Its text arrives as versions."""
    try:
        document = DocumentService(db).create_document(body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.DOCUMENT_CREATED,
        EntityType.DOCUMENT,
        entity_id=document.id,
        changes={"title": document.title, "category": document.category},
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return document


@router.get("", response_model=list[DocumentResponse])
def list_documents(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Every document, newest first."""
    return DocumentService(db).list_documents()


@router.get("/{document_id}", response_model=DocumentDetail)
def get_document(
    document_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """One document with all of its versions."""
    try:
        return DocumentService(db).get_document(document_id)
    except GRCError as e:
        raise to_http_exception(e)


# --- Versions ---

@router.get("/{document_id}/versions", response_model=list[DocumentVersionResponse])
def list_versions(
    document_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Versions of a document, newest first."""
    try:
        return DocumentService(db).list_versions(document_id)
    except GRCError as e:
        raise to_http_exception(e)


@router.post(
    "/{document_id}/versions",
    response_model=DocumentVersionResponse,
    status_code=201,
)
def create_version(
    document_id: uuid.UUID,
    body: DocumentVersionCreate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Add a draft version with the next version number."""
    try:
        version = DocumentService(db).create_version(document_id, body, admin.id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.DOCUMENT_VERSION_CREATED,
        EntityType.DOCUMENT_VERSION,
        entity_id=version.id,
        changes={
            "document_id": document_id,
            "version_number": version.version_number,
            "change_description": body.change_description,
        },
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return version


@router.put(
    "/{document_id}/versions/{version_id}/publish",
    response_model=DocumentVersionResponse,
)
def publish_version(
    document_id: uuid.UUID,
    version_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Publish a draft and archive the version it replaces."""
    try:
        version = DocumentService(db).publish_version(document_id, version_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.DOCUMENT_VERSION_PUBLISHED,
        EntityType.DOCUMENT_VERSION,
        entity_id=version_id,
        changes={"document_id": document_id, "version_number": version.version_number},
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return version


@router.post(
    "/{document_id}/versions/{version_id}/acknowledge",
    response_model=AcknowledgementResponse,
)
def acknowledge_version(
    document_id: uuid.UUID,
    version_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Record that the caller has read the published version."""
    try:
        ack, created = DocumentService(db).acknowledge(document_id, version_id, user.id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    if created:
        AuditService(db).log(
            AuditAction.DOCUMENT_ACKNOWLEDGED,
            EntityType.DOCUMENT_VERSION,
            entity_id=version_id,
            changes={"document_id": document_id},
            user_id=user.id,
            ip_address=client_ip(request),
        )
    return ack


@router.get(
    "/{document_id}/versions/{version_id}/acknowledgements",
    response_model=list[AcknowledgementResponse],
)
def list_acknowledgements(
    document_id: uuid.UUID,
    version_id: uuid.UUID,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Who has read a version, in the order they read it."""
    try:
        return DocumentService(db).acknowledgements(document_id, version_id)
    except GRCError as e:
        raise to_http_exception(e)


# --- Control mappings ---

@router.get(
    "/{document_id}/controls", response_model=list[ActivatedControlResponse]
)
def list_document_controls(
    document_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Controls a document supports."""
    try:
        return DocumentService(db).mapped_controls(document_id)
    except GRCError as e:
        raise to_http_exception(e)


@router.post("/{document_id}/controls", status_code=201)
def map_document_control(
    document_id: uuid.UUID,
    body: ControlMap,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Link a control to a document."""
    try:
        created = DocumentService(db).map_control(
            document_id, body.activated_control_id
        )
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    if created:
        AuditService(db).log(
            AuditAction.DOCUMENT_CONTROL_MAPPED,
            EntityType.DOCUMENT_CONTROL_MAPPING,
            entity_id=document_id,
            changes={"activated_control_id": body.activated_control_id},
            user_id=admin.id,
            ip_address=client_ip(request),
        )
    return {"mapped": True, "created": created}


@router.delete("/{document_id}/controls/{control_id}", status_code=204)
def unmap_document_control(
    document_id: uuid.UUID,
    control_id: uuid.UUID,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Remove a document-control link."""
    try:
        DocumentService(db).unmap_control(document_id, control_id)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.DOCUMENT_CONTROL_UNMAPPED,
        EntityType.DOCUMENT_CONTROL_MAPPING,
        entity_id=document_id,
        changes={"activated_control_id": control_id},
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return Response(status_code=204)
