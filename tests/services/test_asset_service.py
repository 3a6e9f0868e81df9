"""
Tests for the asset inventory.
"""

import uuid

import pytest

from grc_backoffice.errors import NotFoundError
from grc_backoffice.models.enums import AssetStatus
from grc_backoffice.models.ticket import Ticket
from grc_backoffice.schemas.asset import AssetCreate, AssetUpdate
from grc_backoffice.schemas.control import ControlActivate
from grc_backoffice.schemas.ticket import InternalTicketCreate
from grc_backoffice.services.asset_service import AssetService
from grc_backoffice.services.control_service import ControlService
from grc_backoffice.services.dashboard_service import DashboardService
from grc_backoffice.services.ticket_service import TicketService


def create(db_session, name="Payroll DB", asset_type="database", **extra):
    asset = AssetService(db_session).create_asset(
        AssetCreate(name=name, asset_type=asset_type, **extra)
    )
    db_session.commit()
    return asset


@pytest.fixture
def control(db_session, users, library):
    control = ControlService(db_session).activate_control(ControlActivate(
        control_library_id="CIS-3.1",
        owner_id=users["user"].id,
        review_interval_days=90,
    ))
    db_session.commit()
    return control


class TestAssetCrud:

    def test_new_asset_is_active(self, db_session, users):
        asset = create(db_session, owner_id=users["user"].id)

        assert asset.status == AssetStatus.ACTIVE
        assert asset.owner_id == users["user"].id

    def test_unknown_owner(self, db_session):
        with pytest.raises(NotFoundError):
            create(db_session, owner_id=uuid.uuid4())

    def test_partial_update(self, db_session):
        asset = create(db_session)

        AssetService(db_session).update_asset(
            asset.id, AssetUpdate(status=AssetStatus.DECOMMISSIONED)
        )

        assert asset.status == AssetStatus.DECOMMISSIONED
        assert asset.name == "Payroll DB"

    def test_dashboard_counts_active_assets_only(self, db_session):
        create(db_session, name="a")
        retired = create(db_session, name="b")
        AssetService(db_session).update_asset(
            retired.id, AssetUpdate(status=AssetStatus.INACTIVE)
        )

        assert DashboardService(db_session).asset_summary() == {"total": 1}

    def test_delete_unlinks_tickets(self, db_session, users, control):
        asset = create(db_session)
        service = AssetService(db_session)
        service.map_control(asset.id, control.id)
        ticket = TicketService(db_session).create_internal(
            InternalTicketCreate(title="Patch DB", asset_id=asset.id), users["user"]
        )
        db_session.commit()

        service.delete_asset(asset.id)
        db_session.commit()

        with pytest.raises(NotFoundError):
            service.get_asset(asset.id)
        assert db_session.get(Ticket, ticket.id).asset_id is None


class TestAssetControls:

    def test_mapping_twice_is_not_an_error(self, db_session, control):
        asset = create(db_session)
        service = AssetService(db_session)

        assert service.map_control(asset.id, control.id) is True
        assert service.map_control(asset.id, control.id) is False
        assert service.mapped_controls(asset.id) == [control]

    def test_unmap_missing_link(self, db_session, control):
        asset = create(db_session)

        with pytest.raises(NotFoundError):
            AssetService(db_session).unmap_control(asset.id, control.id)

    def test_unknown_control(self, db_session, control):
        asset = create(db_session)

        with pytest.raises(NotFoundError):
            AssetService(db_session).map_control(asset.id, uuid.uuid4())


class TestBreakdown:

    def test_counts_per_type(self, db_session):
        create(db_session, name="web-1", asset_type="server")
        create(db_session, name="web-2", asset_type="server")
        laptop = create(db_session, name="lt-1", asset_type="laptop")
        AssetService(db_session).update_asset(
            laptop.id, AssetUpdate(status=AssetStatus.INACTIVE)
        )

        breakdown = AssetService(db_session).type_breakdown()

        assert breakdown == [
            {"asset_type": "server", "count": 2, "active": 2, "inactive": 0},
            {"asset_type": "laptop", "count": 1, "active": 0, "inactive": 1},
        ]
