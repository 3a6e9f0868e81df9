"""
Audit recorder.

Every mutating operation leaves one row here: who, what action,
which entity, a JSON description of the change, and the client
IP address.

Recording is fire-and-forget. log() runs after the business
change has been committed and writes in its own commit. If the
audit insert fails, the error is logged and swallowed; the
business change it describes stays committed.
"""

import json
import logging
import uuid
from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from grc_backoffice.models.audit_log import AuditLog
from grc_backoffice.models.base import utcnow
from grc_backoffice.models.enums import AuditAction, EntityType

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 100
MAX_PAGE_SIZE = 1000


def serialize_changes(changes: dict[str, Any] | None) -> str | None:
    """JSON-encode an audit payload. Values JSON can't represent become strings."""
    if changes is None:
        return None
    return json.dumps(changes, default=str, sort_keys=True)


class AuditService:

    def __init__(self, db: Session):
        self.db = db

    def log(
        self,
        action: AuditAction,
        entity_type: EntityType,
        entity_id: Any = None,
        changes: dict[str, Any] | None = None,
        user_id: uuid.UUID | None = None,
        ip_address: str | None = None,
    ) -> bool:
        """
        Append one audit row and commit it.

        Returns False instead of raising when the row could not
        be written.
        """
        try:
            entry = AuditLog(
                performed_at=utcnow(),
                user_id=user_id,
                action_type=action.value,
                target_entity_type=entity_type.value,
                target_entity_id=str(entity_id) if entity_id is not None else None,
                changes=serialize_changes(changes),
                ip_address=ip_address,
            )
            self.db.add(entry)
            self.db.commit()
            return True
        except (TypeError, ValueError) as e:
            logger.error(
                "Could not serialize audit changes for %s: %s", action.value, e
            )
            return False
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to write audit log %s: %s", action.value, e)
            return False

    def list_logs(
        self,
        limit: int = DEFAULT_PAGE_SIZE,
        offset: int = 0,
        user_id: uuid.UUID | None = None,
        action_type: str | None = None,
        entity_type: str | None = None,
    ) -> list[AuditLog]:
        """Newest first. limit is clamped to 1..MAX_PAGE_SIZE."""
        limit = max(1, min(limit, MAX_PAGE_SIZE))
        offset = max(0, offset)

        query = select(AuditLog)
        if user_id is not None:
            query = query.where(AuditLog.user_id == user_id)
        if action_type:
            query = query.where(AuditLog.action_type == action_type)
        if entity_type:
            query = query.where(AuditLog.target_entity_type == entity_type)

        query = query.order_by(AuditLog.performed_at.desc()).limit(limit).offset(offset)
        return list(self.db.execute(query).scalars().all())
