"""
Audit log model.

Records every mutating action: who did it, what kind of action,
which entity, a JSON description of the change, and the client
IP. Rows are append-only. You never update or delete an audit
record.
"""

import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from grc_backoffice.models.base import Base, utcnow


class AuditLog(Base):
    __tablename__ = "audit_logs"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    performed_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, index=True
    )
    # No foreign key: failed logins have no user, and audit rows
    # must outlive anything they describe.
    user_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, nullable=True, index=True
    )
    action_type: Mapped[str] = mapped_column(
        String(100), nullable=False, index=True
    )
    target_entity_type: Mapped[str] = mapped_column(String(100), nullable=False)
    target_entity_id: Mapped[str | None] = mapped_column(
        String(255), nullable=True
    )
    changes: Mapped[str | None] = mapped_column(Text, nullable=True)
    ip_address: Mapped[str | None] = mapped_column(String(64), nullable=True)
