"""
Policy document models.

A document is a title and a category; its text lives in
numbered versions. New versions start as drafts. Publishing one
archives whichever version was published before, so a document
has at most one published version, and staff acknowledge that
version by reading it.
"""

import uuid
from datetime import datetime

from sqlalchemy import (
    String, Text, Integer, DateTime, ForeignKey,
    UniqueConstraint, Enum as SAEnum, Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from grc_backoffice.models.base import Base, utcnow
from grc_backoffice.models.enums import DocumentVersionStatus, enum_values


class Document(Base):
    __tablename__ = "documents"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    title: Mapped[str] = mapped_column(String(500), nullable=False)
    category: Mapped[str] = mapped_column(String(100), nullable=False)
    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    # Plain column: document_versions already references documents.
    published_version_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    versions: Mapped[list["DocumentVersion"]] = relationship(
        back_populates="document",
        order_by="DocumentVersion.version_number.desc()",
    )


class DocumentVersion(Base):
    __tablename__ = "document_versions"
    __table_args__ = (
        UniqueConstraint(
            "document_id", "version_number", name="uq_document_version_number"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    document_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("documents.id"), nullable=False, index=True
    )
    version_number: Mapped[int] = mapped_column(Integer, nullable=False)
    body_content: Mapped[str] = mapped_column(Text, nullable=False)
    change_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[DocumentVersionStatus] = mapped_column(
        SAEnum(
            DocumentVersionStatus,
            name="document_version_status_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=DocumentVersionStatus.DRAFT,
    )
    created_by_user_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    published_at: Mapped[datetime | None] = mapped_column(
        DateTime, nullable=True, default=None
    )

    document: Mapped["Document"] = relationship(back_populates="versions")


class DocumentAcknowledgement(Base):
    """One user has read one version. Recorded once per pair."""

    __tablename__ = "document_acknowledgements"
    __table_args__ = (
        UniqueConstraint(
            "document_version_id", "user_id", name="uq_document_ack"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    document_version_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("document_versions.id"), nullable=False, index=True
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("users.id"), nullable=False
    )
    acknowledged_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )


class DocumentControlMapping(Base):
    __tablename__ = "document_control_mappings"
    __table_args__ = (
        UniqueConstraint(
            "document_id", "activated_control_id", name="uq_document_control"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    document_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("documents.id", ondelete="CASCADE"), nullable=False, index=True
    )
    activated_control_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("activated_controls.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
