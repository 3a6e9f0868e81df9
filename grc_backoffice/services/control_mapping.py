"""
Links between an entity (asset, document, vendor) and the
activated controls that cover it.

Each link table has the same shape: an entity id column, an
activated_control_id column and a unique constraint over the
pair. Mapping twice is not an error; unmapping a link that does
not exist is.
"""

import uuid

from sqlalchemy import select
from sqlalchemy.orm import Session

from grc_backoffice.errors import NotFoundError
from grc_backoffice.models.control import ActivatedControl


class ControlMappings:

    def __init__(self, db: Session, mapping_model, entity_column: str, label: str):
        self.db = db
        self.model = mapping_model
        self.column = getattr(mapping_model, entity_column)
        self.entity_column = entity_column
        self.label = label

    def map(self, entity_id: uuid.UUID, control_id: uuid.UUID) -> bool:
        """Returns False when the link already existed."""
        if not self.db.get(ActivatedControl, control_id):
            raise NotFoundError(f"Activated control {control_id} not found")
        if self._find(entity_id, control_id):
            return False
        self.db.add(
            self.model(
                **{self.entity_column: entity_id, "activated_control_id": control_id}
            )
        )
        self.db.flush()
        return True

    def unmap(self, entity_id: uuid.UUID, control_id: uuid.UUID) -> None:
        mapping = self._find(entity_id, control_id)
        if not mapping:
            raise NotFoundError(f"{self.label}-control mapping not found")
        self.db.delete(mapping)
        self.db.flush()

    def controls(self, entity_id: uuid.UUID) -> list[ActivatedControl]:
        return list(
            self.db.execute(
                select(ActivatedControl)
                .join(self.model, self.model.activated_control_id == ActivatedControl.id)
                .where(self.column == entity_id)
                .order_by(ActivatedControl.control_library_id)
            ).scalars().all()
        )

    def clear(self, entity_id: uuid.UUID) -> None:
        """Drop every link for an entity that is about to be deleted."""
        for mapping in self.db.execute(
            select(self.model).where(self.column == entity_id)
        ).scalars():
            self.db.delete(mapping)

    def _find(self, entity_id, control_id):
        return self.db.execute(
            select(self.model).where(
                self.column == entity_id,
                self.model.activated_control_id == control_id,
            )
        ).scalar_one_or_none()
