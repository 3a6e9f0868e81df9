"""
Ticket and ticket comment models.

Tickets are either internal (raised by a logged-in user) or
external (raised by a customer system through the API key).
sequential_id is the human-facing number ("#42"); it is unique
and only ever grows.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Text, Integer, Boolean, DateTime, ForeignKey,
    Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from grc_backoffice.models.base import Base, utcnow
from grc_backoffice.models.enums import TicketType, TicketStatus, enum_values


class Ticket(Base):
    __tablename__ = "tickets"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    sequential_id: Mapped[int] = mapped_column(
        Integer, unique=True, nullable=False
    )
    ticket_type: Mapped[TicketType] = mapped_column(
        SAEnum(
            TicketType,
            name="ticket_type_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    category: Mapped[str | None] = mapped_column(String(100), nullable=True)
    status: Mapped[TicketStatus] = mapped_column(
        SAEnum(
            TicketStatus,
            name="ticket_status_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=TicketStatus.NEW,
    )
    created_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True, index=True
    )
    assigned_to_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True, index=True
    )
    external_customer_ref: Mapped[str | None] = mapped_column(
        String(255), nullable=True, index=True
    )

    # Optional links to the thing the ticket is about
    activated_control_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("activated_controls.id"), nullable=True
    )
    document_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("documents.id", ondelete="SET NULL"), nullable=True
    )
    asset_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("assets.id", ondelete="SET NULL"), nullable=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )
    resolved_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )

    comments: Mapped[list["TicketComment"]] = relationship(
        back_populates="ticket",
        order_by="TicketComment.created_at",
    )

    def __repr__(self) -> str:
        return f"<Ticket #{self.sequential_id} {self.status.value}>"


class TicketComment(Base):
    __tablename__ = "ticket_comments"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    ticket_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("tickets.id"), nullable=False, index=True
    )
    body: Mapped[str] = mapped_column(Text, nullable=False)
    # Internal notes are never shown on external tickets' public view
    is_internal_note: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False
    )
    comment_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    external_customer_ref: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )

    ticket: Mapped["Ticket"] = relationship(back_populates="comments")
