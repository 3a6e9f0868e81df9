"""
Ticket endpoints.

Two authentication modes live here: JWT for staff, and the
static X-API-Key header for the two customer-facing routes
under /tickets/external.
"""

import uuid

from fastapi import APIRouter, Depends, Request
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from grc_backoffice.api.deps import (
    get_current_user,
    require_admin,
    require_api_key,
    client_ip,
)
from grc_backoffice.errors import ConflictError, GRCError, to_http_exception
from grc_backoffice.models.base import get_db
from grc_backoffice.models.enums import AuditAction, EntityType, TicketType
from grc_backoffice.models.user import User
from grc_backoffice.schemas.ticket import (
    InternalTicketCreate,
    ExternalTicketCreate,
    TicketUpdate,
    TicketResponse,
    TicketDetailResponse,
    CommentCreate,
    CommentResponse,
)
from grc_backoffice.services.audit_service import AuditService
from grc_backoffice.services.ticket_service import TicketService

router = APIRouter(prefix="/api/v1/tickets", tags=["Tickets"])

SEQUENCE_CONFLICT = "Ticket number was taken concurrently, please retry"


# --- External (API key) Endpoints ---

@router.post(
    "/external",
    response_model=TicketResponse,
    status_code=201,
    dependencies=[Depends(require_api_key)],
)
def create_external_ticket(
    body: ExternalTicketCreate,
    request: Request,
    db: Session = Depends(get_db),
):
    """Open a ticket on behalf of an external customer."""
    service = TicketService(db)
    try:
        ticket = service.create_external(body)
        db.commit()
    except IntegrityError:
        db.rollback()
        raise to_http_exception(ConflictError(SEQUENCE_CONFLICT))

    AuditService(db).log(
        AuditAction.TICKET_CREATED_EXTERNAL,
        EntityType.TICKET,
        entity_id=ticket.id,
        changes={
            "sequential_id": ticket.sequential_id,
            "external_customer_ref": body.external_customer_ref,
            "title": body.title,
        },
        ip_address=client_ip(request),
    )
    return ticket


@router.get(
    "/external/{customer_ref}",
    response_model=list[TicketDetailResponse],
    dependencies=[Depends(require_api_key)],
)
def list_external_tickets(
    customer_ref: str,
    db: Session = Depends(get_db),
):
    """A customer's tickets with the public part of each conversation."""
    service = TicketService(db)
    return [
        TicketDetailResponse(
            ticket=TicketResponse.model_validate(ticket),
            comments=[
                CommentResponse.model_validate(c)
                for c in service.public_comments(ticket)
            ],
        )
        for ticket in service.list_by_customer_ref(customer_ref)
    ]


# --- Internal Endpoints ---

@router.post("", response_model=TicketResponse, status_code=201)
def create_ticket(
    body: InternalTicketCreate,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Open an internal ticket."""
    service = TicketService(db)
    try:
        ticket = service.create_internal(body, user)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)
    except IntegrityError:
        db.rollback()
        raise to_http_exception(ConflictError(SEQUENCE_CONFLICT))

    AuditService(db).log(
        AuditAction.TICKET_CREATED,
        EntityType.TICKET,
        entity_id=ticket.id,
        changes={
            "sequential_id": ticket.sequential_id,
            "title": body.title,
            "category": body.category,
        },
        user_id=user.id,
        ip_address=client_ip(request),
    )
    return ticket


@router.get("", response_model=list[TicketResponse])
def list_tickets(
    ticket_type: TicketType | None = None,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Tickets visible to the caller."""
    return TicketService(db).list_tickets(user, ticket_type)


@router.get("/{ticket_id}", response_model=TicketDetailResponse)
def get_ticket(
    ticket_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """One ticket with the comments the caller may see."""
    try:
        ticket = TicketService(db).get_ticket_for_user(ticket_id, user)
    except GRCError as e:
        raise to_http_exception(e)

    return TicketDetailResponse(
        ticket=TicketResponse.model_validate(ticket),
        comments=[CommentResponse.model_validate(c) for c in ticket.comments],
    )


@router.post(
    "/{ticket_id}/comments",
    response_model=CommentResponse,
    status_code=201,
)
def add_comment(
    ticket_id: uuid.UUID,
    body: CommentCreate,
    request: Request,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Comment on a ticket."""
    service = TicketService(db)
    try:
        comment = service.add_comment(ticket_id, body, user)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.TICKET_COMMENT_ADDED,
        EntityType.TICKET_COMMENT,
        entity_id=comment.id,
        changes={"ticket_id": ticket_id, "is_internal_note": body.is_internal_note},
        user_id=user.id,
        ip_address=client_ip(request),
    )
    return comment


@router.patch("/{ticket_id}", response_model=TicketResponse)
def update_ticket(
    ticket_id: uuid.UUID,
    body: TicketUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: User = Depends(require_admin),
):
    """Change a ticket's status, assignee or category."""
    service = TicketService(db)
    try:
        ticket = service.update_ticket(ticket_id, body)
        db.commit()
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)

    AuditService(db).log(
        AuditAction.TICKET_UPDATED,
        EntityType.TICKET,
        entity_id=ticket_id,
        changes=body.model_dump(exclude_none=True),
        user_id=admin.id,
        ip_address=client_ip(request),
    )
    return ticket
