"""
GDPR data subject request service.

A request gets its 30-day statutory deadline when it is received.
The deadline never moves: completing or rejecting a request only
records when and how it was answered.
"""

import uuid
from datetime import date, datetime, timedelta

from sqlalchemy import select, case
from sqlalchemy.orm import Session

from grc_backoffice.errors import ConflictError, NotFoundError, ValidationError
from grc_backoffice.models.base import utcnow
from grc_backoffice.models.dsr import DataSubjectRequest, DSR_DEADLINE_DAYS
from grc_backoffice.models.enums import (
    DSRPriority,
    DSRStatus,
    CLOSED_DSR_STATUSES,
)
from grc_backoffice.models.user import User
from grc_backoffice.schemas.dsr import DSRCreate, DSRUpdate


# Urgent first
PRIORITY_RANK = {
    DSRPriority.URGENT: 1,
    DSRPriority.HIGH: 2,
    DSRPriority.NORMAL: 3,
    DSRPriority.LOW: 4,
}


class DSRService:

    def __init__(self, db: Session):
        self.db = db

    def create_request(
        self, request: DSRCreate, now: datetime | None = None
    ) -> DataSubjectRequest:
        now = now or utcnow()
        dsr = DataSubjectRequest(
            **request.model_dump(),
            status=DSRStatus.SUBMITTED,
            deadline_date=now.date() + timedelta(days=DSR_DEADLINE_DAYS),
            created_at=now,
            updated_at=now,
        )
        self.db.add(dsr)
        self.db.flush()
        return dsr

    def list_requests(self) -> list[DataSubjectRequest]:
        priority_rank = case(
            {priority: rank for priority, rank in PRIORITY_RANK.items()},
            value=DataSubjectRequest.priority,
            else_=5,
        )
        return list(
            self.db.execute(
                select(DataSubjectRequest).order_by(
                    priority_rank,
                    DataSubjectRequest.deadline_date.asc(),
                    DataSubjectRequest.created_at.desc(),
                )
            ).scalars().all()
        )

    def get_request(self, dsr_id: uuid.UUID) -> DataSubjectRequest:
        dsr = self.db.get(DataSubjectRequest, dsr_id)
        if not dsr:
            raise NotFoundError(f"Data subject request {dsr_id} not found")
        return dsr

    def update_request(
        self, dsr_id: uuid.UUID, request: DSRUpdate
    ) -> DataSubjectRequest:
        dsr = self.get_request(dsr_id)

        if request.status == DSRStatus.COMPLETED:
            raise ValidationError("Use the complete action to close a request")
        if request.status == DSRStatus.REJECTED and not (
            request.rejection_reason or dsr.rejection_reason
        ):
            raise ValidationError("A rejection reason is required")

        if request.assigned_to_user_id is not None:
            if not self.db.get(User, request.assigned_to_user_id):
                raise NotFoundError(f"User {request.assigned_to_user_id} not found")
            dsr.assigned_to_user_id = request.assigned_to_user_id

        for field in ("status", "priority", "rejection_reason"):
            value = getattr(request, field)
            if value is not None:
                setattr(dsr, field, value)

        self.db.flush()
        return dsr

    def complete_request(
        self,
        dsr_id: uuid.UUID,
        response_summary: str,
        now: datetime | None = None,
    ) -> DataSubjectRequest:
        if not response_summary or not response_summary.strip():
            raise ValidationError("A response summary is required")

        dsr = self.get_request(dsr_id)
        if dsr.status in CLOSED_DSR_STATUSES:
            raise ConflictError(f"Request is already {dsr.status.value}")

        dsr.status = DSRStatus.COMPLETED
        dsr.completed_date = now or utcnow()
        dsr.response_summary = response_summary
        self.db.flush()
        return dsr

    def metrics(self, today: date | None = None) -> dict:
        today = today or utcnow().date()
        requests = list(self.db.execute(select(DataSubjectRequest)).scalars().all())

        by_status = {status.value: 0 for status in DSRStatus}
        overdue = 0
        response_days: list[float] = []
        for dsr in requests:
            by_status[dsr.status.value] += 1
            if dsr.status not in CLOSED_DSR_STATUSES and dsr.deadline_date < today:
                overdue += 1
            if dsr.status == DSRStatus.COMPLETED and dsr.completed_date:
                elapsed = dsr.completed_date - dsr.created_at
                response_days.append(elapsed.total_seconds() / 86400)

        total = len(requests)
        completed = by_status[DSRStatus.COMPLETED.value]
        return {
            "total": total,
            "by_status": by_status,
            "overdue": overdue,
            "completion_rate": round(completed / total * 100, 1) if total else 0.0,
            "avg_response_days": (
                round(sum(response_days) / len(response_days), 1)
                if response_days else 0.0
            ),
        }
