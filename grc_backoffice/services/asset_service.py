"""
Asset inventory service.

Deleting an asset removes its control links and unlinks any
tickets raised about it; the tickets themselves stay.
"""

import uuid

from sqlalchemy import select, func, case, update
from sqlalchemy.orm import Session

from grc_backoffice.errors import NotFoundError
from grc_backoffice.models.asset import Asset, AssetControlMapping
from grc_backoffice.models.control import ActivatedControl
from grc_backoffice.models.enums import AssetStatus
from grc_backoffice.models.ticket import Ticket
from grc_backoffice.models.user import User
from grc_backoffice.schemas.asset import AssetCreate, AssetUpdate
from grc_backoffice.services.control_mapping import ControlMappings


class AssetService:

    def __init__(self, db: Session):
        self.db = db
        self.mappings = ControlMappings(db, AssetControlMapping, "asset_id", "Asset")

    def create_asset(self, request: AssetCreate) -> Asset:
        self._check_owner(request.owner_id)
        asset = Asset(**request.model_dump(), status=AssetStatus.ACTIVE)
        self.db.add(asset)
        self.db.flush()
        return asset

    def list_assets(self) -> list[Asset]:
        return list(
            self.db.execute(
                select(Asset).order_by(Asset.created_at.desc())
            ).scalars().all()
        )

    def get_asset(self, asset_id: uuid.UUID) -> Asset:
        asset = self.db.get(Asset, asset_id)
        if not asset:
            raise NotFoundError(f"Asset {asset_id} not found")
        return asset

    def update_asset(self, asset_id: uuid.UUID, request: AssetUpdate) -> Asset:
        asset = self.get_asset(asset_id)
        self._check_owner(request.owner_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            if value is None and field in ("name", "asset_type", "status"):
                continue
            setattr(asset, field, value)
        self.db.flush()
        return asset

    def delete_asset(self, asset_id: uuid.UUID) -> None:
        asset = self.get_asset(asset_id)
        self.mappings.clear(asset.id)
        self.db.execute(
            update(Ticket).where(Ticket.asset_id == asset.id).values(asset_id=None)
        )
        self.db.delete(asset)
        self.db.flush()

    def _check_owner(self, owner_id: uuid.UUID | None) -> None:
        if owner_id is not None and not self.db.get(User, owner_id):
            raise NotFoundError(f"User {owner_id} not found")

    # --- Control mappings ---

    def map_control(self, asset_id: uuid.UUID, control_id: uuid.UUID) -> bool:
        self.get_asset(asset_id)
        return self.mappings.map(asset_id, control_id)

    def unmap_control(self, asset_id: uuid.UUID, control_id: uuid.UUID) -> None:
        self.mappings.unmap(asset_id, control_id)

    def mapped_controls(self, asset_id: uuid.UUID) -> list[ActivatedControl]:
        self.get_asset(asset_id)
        return self.mappings.controls(asset_id)

    # --- Analytics ---

    def type_breakdown(self) -> list[dict]:
        """Asset counts per type, most common type first."""
        active = func.sum(case((Asset.status == AssetStatus.ACTIVE, 1), else_=0))
        count = func.count(Asset.id)
        rows = self.db.execute(
            select(Asset.asset_type, count, active)
            .group_by(Asset.asset_type)
            .order_by(count.desc(), Asset.asset_type)
        ).all()
        return [
            {
                "asset_type": asset_type,
                "count": total,
                "active": active_count or 0,
                "inactive": total - (active_count or 0),
            }
            for asset_type, total, active_count in rows
        ]
