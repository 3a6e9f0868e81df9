"""
Tests for the TicketService.
"""

import uuid
from datetime import date

import pytest

from grc_backoffice.errors import ForbiddenError, NotFoundError
from grc_backoffice.models.enums import TicketStatus, TicketType
from grc_backoffice.schemas.ticket import (
    CommentCreate,
    ExternalTicketCreate,
    InternalTicketCreate,
    TicketUpdate,
)
from grc_backoffice.services.reminder_service import ReminderService
from grc_backoffice.services.ticket_service import TicketService


def internal(db_session, user, title="Firewall rule review"):
    ticket = TicketService(db_session).create_internal(
        InternalTicketCreate(title=title, description="Quarterly review"), user
    )
    db_session.commit()
    return ticket


def external(db_session, ref="ACME-001", title="Data export request"):
    ticket = TicketService(db_session).create_external(
        ExternalTicketCreate(title=title, external_customer_ref=ref)
    )
    db_session.commit()
    return ticket


class TestCreateTicket:

    def test_sequential_ids_increase(self, db_session, users):
        first = internal(db_session, users["user"])
        second = external(db_session)
        third = internal(db_session, users["john"])

        assert [first.sequential_id, second.sequential_id, third.sequential_id] == [1, 2, 3]

    def test_internal_ticket_belongs_to_creator(self, db_session, users):
        ticket = internal(db_session, users["user"])

        assert ticket.ticket_type == TicketType.INTERNAL
        assert ticket.status == TicketStatus.NEW
        assert ticket.created_by_user_id == users["user"].id

    def test_external_ticket_has_no_creator(self, db_session):
        ticket = external(db_session, ref="ACME-7")

        assert ticket.ticket_type == TicketType.EXTERNAL
        assert ticket.created_by_user_id is None
        assert ticket.external_customer_ref == "ACME-7"


class TestVisibility:

    def test_admin_sees_everything(self, db_session, users):
        internal(db_session, users["user"])
        external(db_session)

        tickets = TicketService(db_session).list_tickets(users["admin"])

        assert len(tickets) == 2

    def test_admin_can_filter_by_type(self, db_session, users):
        internal(db_session, users["user"])
        external(db_session)

        tickets = TicketService(db_session).list_tickets(
            users["admin"], ticket_type=TicketType.EXTERNAL
        )

        assert [t.ticket_type for t in tickets] == [TicketType.EXTERNAL]

    def test_user_sees_created_and_assigned(self, db_session, users):
        own = internal(db_session, users["user"], title="mine")
        internal(db_session, users["john"], title="johns")
        assigned = external(db_session)
        service = TicketService(db_session)
        service.update_ticket(
            assigned.id, TicketUpdate(assigned_to_user_id=users["user"].id)
        )
        db_session.commit()

        visible = {t.id for t in service.list_tickets(users["user"])}

        assert visible == {own.id, assigned.id}

    def test_foreign_ticket_is_forbidden(self, db_session, users):
        ticket = internal(db_session, users["john"])

        with pytest.raises(ForbiddenError):
            TicketService(db_session).get_ticket_for_user(ticket.id, users["user"])

    def test_customer_ref_lookup(self, db_session):
        external(db_session, ref="ACME-001")
        external(db_session, ref="ACME-001", title="Second")
        external(db_session, ref="OTHER-9")

        tickets = TicketService(db_session).list_by_customer_ref("ACME-001")

        assert len(tickets) == 2


class TestComments:

    def test_public_comments_hide_internal_notes(self, db_session, users):
        ticket = external(db_session)
        service = TicketService(db_session)
        service.add_comment(ticket.id, CommentCreate(body="We're on it"), users["admin"])
        service.add_comment(
            ticket.id,
            CommentCreate(body="Customer is on the legacy plan", is_internal_note=True),
            users["admin"],
        )
        db_session.commit()
        db_session.expire_all()

        ticket = service.get_ticket(ticket.id)

        assert len(ticket.comments) == 2
        assert [c.body for c in service.public_comments(ticket)] == ["We're on it"]

    def test_cannot_comment_on_foreign_ticket(self, db_session, users):
        ticket = internal(db_session, users["john"])

        with pytest.raises(ForbiddenError):
            TicketService(db_session).add_comment(
                ticket.id, CommentCreate(body="hi"), users["user"]
            )


class TestUpdateTicket:

    def test_resolving_stamps_and_reopening_clears(self, db_session, users):
        ticket = internal(db_session, users["user"])
        service = TicketService(db_session)

        service.update_ticket(ticket.id, TicketUpdate(status=TicketStatus.RESOLVED))
        assert ticket.resolved_at is not None

        service.update_ticket(ticket.id, TicketUpdate(status=TicketStatus.IN_PROGRESS))
        assert ticket.resolved_at is None

    def test_closing_a_new_ticket_stamps_resolved_at(
        self, db_session, users, email_service
    ):
        ticket = internal(db_session, users["user"])

        TicketService(db_session).update_ticket(
            ticket.id, TicketUpdate(status=TicketStatus.CLOSED)
        )
        db_session.commit()

        assert ticket.resolved_at is not None
        stats = ReminderService(db_session, email_service).weekly_stats(date.today())
        assert stats["tickets_resolved"] == 1

    def test_closing_after_resolving_keeps_first_stamp(self, db_session, users):
        ticket = internal(db_session, users["user"])
        service = TicketService(db_session)

        service.update_ticket(ticket.id, TicketUpdate(status=TicketStatus.RESOLVED))
        resolved_at = ticket.resolved_at
        service.update_ticket(ticket.id, TicketUpdate(status=TicketStatus.CLOSED))

        assert ticket.resolved_at == resolved_at


class TestTicketLinks:

    def test_unknown_asset_is_rejected(self, db_session, users):
        with pytest.raises(NotFoundError):
            TicketService(db_session).create_internal(
                InternalTicketCreate(title="Patch", asset_id=uuid.uuid4()),
                users["user"],
            )

    def test_unknown_document_is_rejected(self, db_session, users):
        with pytest.raises(NotFoundError):
            TicketService(db_session).create_internal(
                InternalTicketCreate(title="Typo", document_id=uuid.uuid4()),
                users["user"],
            )
