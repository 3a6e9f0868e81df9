"""
Policy document service.

Version numbers start at 1 and grow per document. Only drafts
can be published; publishing archives the previously published
version in the same transaction. Only the published version can
be acknowledged, and acknowledging twice records nothing new.
"""

import uuid

from sqlalchemy import select, func
from sqlalchemy.orm import Session

from grc_backoffice.errors import ConflictError, NotFoundError
from grc_backoffice.models.base import utcnow
from grc_backoffice.models.control import ActivatedControl
from grc_backoffice.models.document import (
    Document,
    DocumentVersion,
    DocumentAcknowledgement,
    DocumentControlMapping,
)
from grc_backoffice.models.enums import DocumentVersionStatus
from grc_backoffice.models.user import User
from grc_backoffice.schemas.document import DocumentCreate, DocumentVersionCreate
from grc_backoffice.services.control_mapping import ControlMappings


class DocumentService:

    def __init__(self, db: Session):
        self.db = db
        self.mappings = ControlMappings(
            db, DocumentControlMapping, "document_id", "Document"
        )

    def create_document(self, request: DocumentCreate) -> Document:
        if request.owner_id is not None and not self.db.get(User, request.owner_id):
            raise NotFoundError(f"User {request.owner_id} not found")
        document = Document(**request.model_dump())
        self.db.add(document)
        self.db.flush()
        return document

    def list_documents(self) -> list[Document]:
        return list(
            self.db.execute(
                select(Document).order_by(Document.created_at.desc())
            ).scalars().all()
        )

    def get_document(self, document_id: uuid.UUID) -> Document:
        document = self.db.get(Document, document_id)
        if not document:
            raise NotFoundError(f"Document {document_id} not found")
        return document

    # --- Versions ---

    def create_version(
        self,
        document_id: uuid.UUID,
        request: DocumentVersionCreate,
        author_id: uuid.UUID | None,
    ) -> DocumentVersion:
        document = self.get_document(document_id)
        latest = self.db.execute(
            select(func.max(DocumentVersion.version_number)).where(
                DocumentVersion.document_id == document.id
            )
        ).scalar_one()
        version = DocumentVersion(
            document_id=document.id,
            version_number=(latest or 0) + 1,
            body_content=request.body_content,
            change_description=request.change_description,
            status=DocumentVersionStatus.DRAFT,
            created_by_user_id=author_id,
        )
        self.db.add(version)
        self.db.flush()
        return version

    def list_versions(self, document_id: uuid.UUID) -> list[DocumentVersion]:
        self.get_document(document_id)
        return list(
            self.db.execute(
                select(DocumentVersion)
                .where(DocumentVersion.document_id == document_id)
                .order_by(DocumentVersion.version_number.desc())
            ).scalars().all()
        )

    def get_version(
        self, document_id: uuid.UUID, version_id: uuid.UUID
    ) -> DocumentVersion:
        version = self.db.get(DocumentVersion, version_id)
        if not version or version.document_id != document_id:
            raise NotFoundError(
                f"Version {version_id} of document {document_id} not found"
            )
        return version

    def publish_version(
        self, document_id: uuid.UUID, version_id: uuid.UUID
    ) -> DocumentVersion:
        document = self.get_document(document_id)
        version = self.get_version(document_id, version_id)
        if version.status != DocumentVersionStatus.DRAFT:
            raise ConflictError(
                f"Version {version.version_number} is {version.status.value}; "
                "only drafts can be published"
            )

        for previous in self.db.execute(
            select(DocumentVersion).where(
                DocumentVersion.document_id == document.id,
                DocumentVersion.status == DocumentVersionStatus.PUBLISHED,
            )
        ).scalars():
            previous.status = DocumentVersionStatus.ARCHIVED

        version.status = DocumentVersionStatus.PUBLISHED
        version.published_at = utcnow()
        document.published_version_id = version.id
        self.db.flush()
        return version

    # --- Acknowledgements ---

    def acknowledge(
        self, document_id: uuid.UUID, version_id: uuid.UUID, user_id: uuid.UUID
    ) -> tuple[DocumentAcknowledgement, bool]:
        """Record that a user read the published version. Returns (row, created)."""
        version = self.get_version(document_id, version_id)
        if version.status != DocumentVersionStatus.PUBLISHED:
            raise ConflictError("Only the published version can be acknowledged")

        existing = self.db.execute(
            select(DocumentAcknowledgement).where(
                DocumentAcknowledgement.document_version_id == version.id,
                DocumentAcknowledgement.user_id == user_id,
            )
        ).scalar_one_or_none()
        if existing:
            return existing, False

        ack = DocumentAcknowledgement(document_version_id=version.id, user_id=user_id)
        self.db.add(ack)
        self.db.flush()
        return ack, True

    def acknowledgements(
        self, document_id: uuid.UUID, version_id: uuid.UUID
    ) -> list[DocumentAcknowledgement]:
        version = self.get_version(document_id, version_id)
        return list(
            self.db.execute(
                select(DocumentAcknowledgement)
                .where(DocumentAcknowledgement.document_version_id == version.id)
                .order_by(DocumentAcknowledgement.acknowledged_at)
            ).scalars().all()
        )

    # --- Control mappings ---

    def map_control(self, document_id: uuid.UUID, control_id: uuid.UUID) -> bool:
        self.get_document(document_id)
        return self.mappings.map(document_id, control_id)

    def unmap_control(self, document_id: uuid.UUID, control_id: uuid.UUID) -> None:
        self.mappings.unmap(document_id, control_id)

    def mapped_controls(self, document_id: uuid.UUID) -> list[ActivatedControl]:
        self.get_document(document_id)
        return self.mappings.controls(document_id)
