"""
Control service: the control library and the lifecycle of
activated controls.

Activation sets the first due date; evidence submission is the
only operation that moves it afterwards. Submission reads the
control's interval, inserts the evidence row and rewrites the
due date in one unit of work. The service only flushes; the
caller commits, or rolls back on error so that no evidence row
survives a failed submission.
"""

import logging
import uuid
from datetime import date, datetime, timedelta

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from grc_backoffice.errors import ConflictError, NotFoundError
from grc_backoffice.models.base import utcnow
from grc_backoffice.models.control import (
    ControlLibraryItem,
    ActivatedControl,
    ControlEvidenceLog,
)
from grc_backoffice.models.enums import ControlStatus
from grc_backoffice.models.user import User
from grc_backoffice.schemas.control import (
    LibraryItemCreate,
    LibraryItemUpdate,
    ControlActivate,
    ControlUpdate,
    EvidenceSubmit,
)

logger = logging.getLogger(__name__)

# A due control becomes overdue after this grace period
OVERDUE_GRACE_DAYS = 7


class ControlService:

    def __init__(self, db: Session):
        self.db = db

    # --- Control Library ---

    def list_library(self, standard: str | None = None) -> list[ControlLibraryItem]:
        query = select(ControlLibraryItem)
        if standard:
            query = query.where(ControlLibraryItem.standard == standard)
        query = query.order_by(ControlLibraryItem.standard, ControlLibraryItem.id)
        return list(self.db.execute(query).scalars().all())

    def get_library_item(self, item_id: str) -> ControlLibraryItem:
        item = self.db.get(ControlLibraryItem, item_id)
        if not item:
            raise NotFoundError(f"Control library item {item_id} not found")
        return item

    def create_library_item(self, request: LibraryItemCreate) -> ControlLibraryItem:
        if self.db.get(ControlLibraryItem, request.id):
            raise ConflictError(f"Control library item {request.id} already exists")

        item = ControlLibraryItem(**request.model_dump())
        self.db.add(item)
        self.db.flush()
        return item

    def update_library_item(
        self, item_id: str, request: LibraryItemUpdate
    ) -> ControlLibraryItem:
        item = self.get_library_item(item_id)
        for field, value in request.model_dump(exclude_none=True).items():
            setattr(item, field, value)
        self.db.flush()
        return item

    def delete_library_item(self, item_id: str) -> None:
        """
        Remove a catalog entry.

        Entries that have been activated are referenced by live
        controls and evidence, so they cannot be removed.
        """
        item = self.get_library_item(item_id)
        in_use = self.db.execute(
            select(func.count(ActivatedControl.id)).where(
                ActivatedControl.control_library_id == item_id
            )
        ).scalar_one()
        if in_use:
            raise ConflictError(
                f"Control library item {item_id} has been activated and cannot be deleted"
            )
        self.db.delete(item)
        self.db.flush()

    def import_library(self, items: list[LibraryItemCreate]) -> tuple[int, int]:
        """Add catalog entries in bulk. Existing ids are skipped, not updated."""
        created = skipped = 0
        seen: set[str] = set()
        for request in items:
            if request.id in seen or self.db.get(ControlLibraryItem, request.id):
                skipped += 1
                continue
            self.db.add(ControlLibraryItem(**request.model_dump()))
            seen.add(request.id)
            created += 1
        self.db.flush()
        logger.info("Imported control library: %d created, %d skipped", created, skipped)
        return created, skipped

    def export_library(self) -> list[dict]:
        return [
            {
                "id": item.id,
                "standard": item.standard,
                "family": item.family,
                "name": item.name,
                "description": item.description,
            }
            for item in self.list_library()
        ]

    # --- Activated Controls ---

    def activate_control(
        self, request: ControlActivate, now: datetime | None = None
    ) -> ActivatedControl:
        """
        Adopt a library control.

        The control starts active and is first due
        review_interval_days after activation.
        """
        now = now or utcnow()
        self.get_library_item(request.control_library_id)

        if not self.db.get(User, request.owner_id):
            raise NotFoundError(f"User {request.owner_id} not found")

        control = ActivatedControl(
            control_library_id=request.control_library_id,
            owner_id=request.owner_id,
            status=ControlStatus.ACTIVE,
            review_interval_days=request.review_interval_days,
            next_review_due_date=now.date() + timedelta(days=request.review_interval_days),
            created_at=now,
            updated_at=now,
        )
        self.db.add(control)
        self.db.flush()
        return control

    def get_control(self, control_id: uuid.UUID) -> ActivatedControl:
        control = self.db.get(ActivatedControl, control_id)
        if not control:
            raise NotFoundError(f"Activated control {control_id} not found")
        return control

    def submit_evidence(
        self,
        control_id: uuid.UUID,
        author_id: uuid.UUID | None,
        request: EvidenceSubmit,
        now: datetime | None = None,
    ) -> ControlEvidenceLog:
        """
        Record a review and advance the control's due date.

        The control row is locked for the rest of the transaction
        so two concurrent submissions cannot both read the old
        interval and double-advance the date. The row is re-read
        even when this session already holds it.
        """
        now = now or utcnow()

        control = self.db.execute(
            select(ActivatedControl)
            .where(
                ActivatedControl.id == control_id,
                ActivatedControl.status == ControlStatus.ACTIVE,
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        ).scalar_one_or_none()
        if not control:
            raise NotFoundError(f"Active control {control_id} not found")

        evidence = ControlEvidenceLog(
            activated_control_id=control.id,
            performed_by_id=author_id,
            performed_at=now,
            compliance_status=request.compliance_status,
            notes=request.notes,
            evidence_link=request.evidence_link,
        )
        self.db.add(evidence)

        control.last_reviewed_at = now
        control.next_review_due_date = now.date() + timedelta(
            days=control.review_interval_days
        )
        self.db.flush()
        return evidence

    def list_active_controls(self) -> list[dict]:
        """Active controls joined with their catalog name and owner, soonest due first."""
        rows = self.db.execute(
            select(ActivatedControl, ControlLibraryItem.name, User.name)
            .join(
                ControlLibraryItem,
                ActivatedControl.control_library_id == ControlLibraryItem.id,
            )
            .outerjoin(User, ActivatedControl.owner_id == User.id)
            .where(ActivatedControl.status == ControlStatus.ACTIVE)
            .order_by(ActivatedControl.next_review_due_date)
        ).all()

        return [
            {
                "id": control.id,
                "control_id": control.control_library_id,
                "control_name": control_name,
                "owner_name": owner_name,
                "status": control.status,
                "next_review_due_date": control.next_review_due_date,
                "last_reviewed_at": control.last_reviewed_at,
            }
            for control, control_name, owner_name in rows
        ]

    def update_control(
        self, control_id: uuid.UUID, request: ControlUpdate
    ) -> ActivatedControl:
        """Change owner and/or interval. A new interval re-derives the due date."""
        control = self.get_control(control_id)
        if not control.is_active:
            raise ConflictError(f"Control {control_id} is retired")

        if request.owner_id is not None:
            if not self.db.get(User, request.owner_id):
                raise NotFoundError(f"User {request.owner_id} not found")
            control.owner_id = request.owner_id

        if (
            request.review_interval_days is not None
            and request.review_interval_days != control.review_interval_days
        ):
            control.review_interval_days = request.review_interval_days
            control.next_review_due_date = control.compute_due_date()

        self.db.flush()
        return control

    def retire_control(self, control_id: uuid.UUID) -> ActivatedControl:
        control = self.get_control(control_id)
        control.status = ControlStatus.RETIRED
        self.db.flush()
        return control

    # --- Due-date scans ---

    def scan_due_controls(self, today: date) -> list[ActivatedControl]:
        """Active, owned controls whose review date has arrived."""
        return self._scan(ActivatedControl.next_review_due_date <= today)

    def scan_overdue_controls(self, today: date) -> list[ActivatedControl]:
        """Active, owned controls at least OVERDUE_GRACE_DAYS past their due date."""
        cutoff = today - timedelta(days=OVERDUE_GRACE_DAYS)
        return self._scan(ActivatedControl.next_review_due_date <= cutoff)

    def _scan(self, due_clause) -> list[ActivatedControl]:
        return list(
            self.db.execute(
                select(ActivatedControl)
                .where(
                    ActivatedControl.status == ControlStatus.ACTIVE,
                    ActivatedControl.owner_id.is_not(None),
                    due_clause,
                )
                .order_by(ActivatedControl.next_review_due_date)
            ).scalars().all()
        )
