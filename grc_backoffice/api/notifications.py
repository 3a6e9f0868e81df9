"""
Notification endpoints. Users only ever see and mark their own.
"""

import uuid

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from grc_backoffice.api.deps import get_current_user
from grc_backoffice.errors import GRCError, to_http_exception
from grc_backoffice.models.base import get_db
from grc_backoffice.models.user import User
from grc_backoffice.schemas.notification import NotificationResponse
from grc_backoffice.services.notification_service import NotificationService

router = APIRouter(prefix="/api/v1/notifications", tags=["Notifications"])


@router.get("", response_model=list[NotificationResponse])
def list_notifications(
    unread: bool = False,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """The caller's notifications, newest first."""
    return NotificationService(db).list_for_user(user.id, only_unread=unread)


@router.post("/{notification_id}/read", response_model=NotificationResponse)
def mark_notification_read(
    notification_id: uuid.UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    """Mark one of the caller's notifications read."""
    service = NotificationService(db)
    try:
        notification = service.mark_as_read(notification_id, user.id)
        db.commit()
        return notification
    except GRCError as e:
        db.rollback()
        raise to_http_exception(e)
