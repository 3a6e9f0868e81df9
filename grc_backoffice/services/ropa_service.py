"""
Record of processing activities service.
"""

import uuid

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from grc_backoffice.errors import NotFoundError
from grc_backoffice.models.enums import ROPAStatus
from grc_backoffice.models.ropa import ProcessingActivity
from grc_backoffice.schemas.ropa import ROPACreate, ROPAUpdate

REQUIRED_FIELDS = (
    "activity_name",
    "data_controller_details",
    "data_categories",
    "data_subject_categories",
    "status",
)


class ROPAService:

    def __init__(self, db: Session):
        self.db = db

    def create_record(self, request: ROPACreate) -> ProcessingActivity:
        record = ProcessingActivity(**request.model_dump(), status=ROPAStatus.DRAFT)
        self.db.add(record)
        self.db.flush()
        return record

    def list_records(self) -> list[ProcessingActivity]:
        """The register: every record that is not archived, newest first."""
        return list(
            self.db.execute(
                select(ProcessingActivity)
                .where(ProcessingActivity.status != ROPAStatus.ARCHIVED)
                .order_by(ProcessingActivity.created_at.desc())
            ).scalars().all()
        )

    def get_record(self, record_id: uuid.UUID) -> ProcessingActivity:
        record = self.db.get(ProcessingActivity, record_id)
        if not record:
            raise NotFoundError(f"Processing activity {record_id} not found")
        return record

    def update_record(
        self, record_id: uuid.UUID, request: ROPAUpdate
    ) -> ProcessingActivity:
        record = self.get_record(record_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            if value is None and field in REQUIRED_FIELDS:
                continue
            setattr(record, field, value)
        self.db.flush()
        return record

    def archive_record(self, record_id: uuid.UUID) -> ProcessingActivity:
        record = self.get_record(record_id)
        record.status = ROPAStatus.ARCHIVED
        self.db.flush()
        return record

    def metrics(self) -> dict:
        counts = dict(
            self.db.execute(
                select(ProcessingActivity.status, func.count(ProcessingActivity.id))
                .group_by(ProcessingActivity.status)
            ).all()
        )
        return {
            "total_processing_activities": sum(counts.values()),
            "active": counts.get(ROPAStatus.ACTIVE, 0),
            "draft": counts.get(ROPAStatus.DRAFT, 0),
            "archived": counts.get(ROPAStatus.ARCHIVED, 0),
        }
