"""
Asset inventory models.

An asset is anything worth protecting: a server, a SaaS account,
a database. Controls are linked to the assets they protect
through AssetControlMapping.
"""

import uuid
from datetime import datetime

from sqlalchemy import String, DateTime, ForeignKey, UniqueConstraint, Enum as SAEnum, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from grc_backoffice.models.base import Base, utcnow
from grc_backoffice.models.enums import AssetStatus, enum_values


class Asset(Base):
    __tablename__ = "assets"

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    asset_type: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    owner_id: Mapped[uuid.UUID | None] = mapped_column(
        ForeignKey("users.id"), nullable=True
    )
    status: Mapped[AssetStatus] = mapped_column(
        SAEnum(
            AssetStatus,
            name="asset_status_enum",
            create_constraint=True,
            values_callable=enum_values,
        ),
        nullable=False,
        default=AssetStatus.ACTIVE,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow, onupdate=utcnow
    )


class AssetControlMapping(Base):
    __tablename__ = "asset_control_mappings"
    __table_args__ = (
        UniqueConstraint(
            "asset_id", "activated_control_id", name="uq_asset_control"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        Uuid, primary_key=True, default=uuid.uuid4
    )
    asset_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("assets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    activated_control_id: Mapped[uuid.UUID] = mapped_column(
        ForeignKey("activated_controls.id"), nullable=False
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, default=utcnow
    )
