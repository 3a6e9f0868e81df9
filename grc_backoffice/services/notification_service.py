"""
Notification writer.

Plain inserts; the same message may be written many times (the
hourly due-control job does exactly that). Collapsing duplicates
is left to the client.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from grc_backoffice.errors import NotFoundError
from grc_backoffice.models.notification import Notification


class NotificationService:

    def __init__(self, db: Session):
        self.db = db

    def create(
        self, user_id: uuid.UUID, message: str, link_url: str | None = None
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            message=message,
            link_url=link_url,
        )
        self.db.add(notification)
        self.db.flush()
        return notification

    def list_for_user(
        self, user_id: uuid.UUID, only_unread: bool = False
    ) -> list[Notification]:
        query = select(Notification).where(Notification.user_id == user_id)
        if only_unread:
            query = query.where(Notification.is_read.is_(False))
        query = query.order_by(Notification.created_at.desc())
        return list(self.db.execute(query).scalars().all())

    def mark_as_read(
        self, notification_id: uuid.UUID, user_id: uuid.UUID
    ) -> Notification:
        """
        Mark a notification read.

        Idempotent: marking an already-read notification succeeds
        again. A notification belonging to someone else is treated
        exactly like one that does not exist.
        """
        notification = self.db.execute(
            select(Notification).where(
                Notification.id == notification_id,
                Notification.user_id == user_id,
            )
        ).scalar_one_or_none()
        if not notification:
            raise NotFoundError("Notification not found or not owned by user")

        notification.is_read = True
        self.db.flush()
        return notification
