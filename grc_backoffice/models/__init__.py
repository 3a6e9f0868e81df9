"""
Database models package.

All models must be imported here so that every table is
registered on Base.metadata before create_all() runs.
"""

from grc_backoffice.models.base import Base, Database, get_db, utcnow
from grc_backoffice.models.user import User
from grc_backoffice.models.control import (
    ControlLibraryItem,
    ActivatedControl,
    ControlEvidenceLog,
)
from grc_backoffice.models.ticket import Ticket, TicketComment
from grc_backoffice.models.notification import Notification
from grc_backoffice.models.audit_log import AuditLog
from grc_backoffice.models.risk import RiskAssessment, RiskControlMapping
from grc_backoffice.models.dsr import DataSubjectRequest
from grc_backoffice.models.asset import Asset, AssetControlMapping
from grc_backoffice.models.document import (
    Document,
    DocumentVersion,
    DocumentAcknowledgement,
    DocumentControlMapping,
)
from grc_backoffice.models.vendor import Vendor, VendorAssessment, VendorControlMapping
from grc_backoffice.models.ropa import ProcessingActivity

__all__ = [
    "Base",
    "Database",
    "get_db",
    "utcnow",
    "User",
    "ControlLibraryItem",
    "ActivatedControl",
    "ControlEvidenceLog",
    "Ticket",
    "TicketComment",
    "Notification",
    "AuditLog",
    "RiskAssessment",
    "RiskControlMapping",
    "DataSubjectRequest",
    "Asset",
    "AssetControlMapping",
    "Document",
    "DocumentVersion",
    "DocumentAcknowledgement",
    "DocumentControlMapping",
    "Vendor",
    "VendorAssessment",
    "VendorControlMapping",
    "ProcessingActivity",
]
