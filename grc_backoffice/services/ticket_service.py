"""
Ticket service.

Internal tickets come from logged-in users; external tickets
come from customer systems holding the API key and are tracked
by the customer's own reference.

Visibility: admins see every ticket. Everyone else sees only
tickets they created or are assigned to.
"""

import uuid

from sqlalchemy import select, func, or_
from sqlalchemy.orm import Session

from grc_backoffice.errors import ForbiddenError, NotFoundError
from grc_backoffice.models.asset import Asset
from grc_backoffice.models.base import utcnow
from grc_backoffice.models.control import ActivatedControl
from grc_backoffice.models.document import Document
from grc_backoffice.models.enums import TicketStatus, TicketType
from grc_backoffice.models.ticket import Ticket, TicketComment
from grc_backoffice.models.user import User
from grc_backoffice.schemas.ticket import (
    InternalTicketCreate,
    ExternalTicketCreate,
    TicketUpdate,
    CommentCreate,
)


class TicketService:

    def __init__(self, db: Session):
        self.db = db

    def _next_sequential_id(self) -> int:
        # The unique constraint on sequential_id turns a race between
        # two creators into an IntegrityError rather than a duplicate.
        current = self.db.execute(select(func.max(Ticket.sequential_id))).scalar()
        return (current or 0) + 1

    def create_internal(self, request: InternalTicketCreate, user: User) -> Ticket:
        if request.activated_control_id and not self.db.get(
            ActivatedControl, request.activated_control_id
        ):
            raise NotFoundError(
                f"Activated control {request.activated_control_id} not found"
            )
        if request.document_id and not self.db.get(Document, request.document_id):
            raise NotFoundError(f"Document {request.document_id} not found")
        if request.asset_id and not self.db.get(Asset, request.asset_id):
            raise NotFoundError(f"Asset {request.asset_id} not found")

        ticket = Ticket(
            sequential_id=self._next_sequential_id(),
            ticket_type=TicketType.INTERNAL,
            title=request.title,
            description=request.description,
            category=request.category,
            status=TicketStatus.NEW,
            created_by_user_id=user.id,
            activated_control_id=request.activated_control_id,
            document_id=request.document_id,
            asset_id=request.asset_id,
        )
        self.db.add(ticket)
        self.db.flush()
        return ticket

    def create_external(self, request: ExternalTicketCreate) -> Ticket:
        ticket = Ticket(
            sequential_id=self._next_sequential_id(),
            ticket_type=TicketType.EXTERNAL,
            title=request.title,
            description=request.description,
            status=TicketStatus.NEW,
            external_customer_ref=request.external_customer_ref,
        )
        self.db.add(ticket)
        self.db.flush()
        return ticket

    def list_tickets(
        self, user: User, ticket_type: TicketType | None = None
    ) -> list[Ticket]:
        query = select(Ticket)
        if user.is_admin:
            if ticket_type:
                query = query.where(Ticket.ticket_type == ticket_type)
        else:
            query = query.where(
                or_(
                    Ticket.created_by_user_id == user.id,
                    Ticket.assigned_to_user_id == user.id,
                )
            )
        query = query.order_by(Ticket.created_at.desc(), Ticket.sequential_id.desc())
        return list(self.db.execute(query).scalars().all())

    def list_by_customer_ref(self, customer_ref: str) -> list[Ticket]:
        return list(
            self.db.execute(
                select(Ticket)
                .where(
                    Ticket.ticket_type == TicketType.EXTERNAL,
                    Ticket.external_customer_ref == customer_ref,
                )
                .order_by(Ticket.created_at.desc())
            ).scalars().all()
        )

    def get_ticket(self, ticket_id: uuid.UUID) -> Ticket:
        ticket = self.db.get(Ticket, ticket_id)
        if not ticket:
            raise NotFoundError(f"Ticket {ticket_id} not found")
        return ticket

    def get_ticket_for_user(self, ticket_id: uuid.UUID, user: User) -> Ticket:
        ticket = self.get_ticket(ticket_id)
        if not self.can_view(ticket, user):
            raise ForbiddenError("You do not have access to this ticket")
        return ticket

    @staticmethod
    def can_view(ticket: Ticket, user: User) -> bool:
        return user.is_admin or user.id in (
            ticket.created_by_user_id,
            ticket.assigned_to_user_id,
        )

    @staticmethod
    def public_comments(ticket: Ticket) -> list[TicketComment]:
        """Comments a customer may see: everything except internal notes."""
        return [c for c in ticket.comments if not c.is_internal_note]

    def add_comment(
        self, ticket_id: uuid.UUID, request: CommentCreate, user: User
    ) -> TicketComment:
        ticket = self.get_ticket_for_user(ticket_id, user)

        comment = TicketComment(
            ticket_id=ticket.id,
            body=request.body,
            is_internal_note=request.is_internal_note,
            comment_by_user_id=user.id,
        )
        self.db.add(comment)
        ticket.updated_at = utcnow()
        self.db.flush()
        return comment

    def update_ticket(self, ticket_id: uuid.UUID, request: TicketUpdate) -> Ticket:
        """
        Change status, assignee or category.

        The first move to resolved or closed stamps resolved_at;
        reopening clears it.
        """
        ticket = self.get_ticket(ticket_id)

        if request.assigned_to_user_id is not None:
            if not self.db.get(User, request.assigned_to_user_id):
                raise NotFoundError(f"User {request.assigned_to_user_id} not found")
            ticket.assigned_to_user_id = request.assigned_to_user_id

        if request.category is not None:
            ticket.category = request.category

        if request.status is not None and request.status != ticket.status:
            ticket.status = request.status
            if request.status in (TicketStatus.RESOLVED, TicketStatus.CLOSED):
                if ticket.resolved_at is None:
                    ticket.resolved_at = utcnow()
            elif request.status in (TicketStatus.NEW, TicketStatus.IN_PROGRESS):
                ticket.resolved_at = None

        self.db.flush()
        return ticket
