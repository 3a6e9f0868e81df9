"""Business logic services."""

from grc_backoffice.services.audit_service import AuditService
from grc_backoffice.services.asset_service import AssetService
from grc_backoffice.services.auth_service import AuthService
from grc_backoffice.services.control_service import ControlService
from grc_backoffice.services.dashboard_service import DashboardService
from grc_backoffice.services.document_service import DocumentService
from grc_backoffice.services.dsr_service import DSRService
from grc_backoffice.services.email_service import EmailService
from grc_backoffice.services.notification_service import NotificationService
from grc_backoffice.services.reminder_service import ReminderService
from grc_backoffice.services.risk_service import RiskService
from grc_backoffice.services.ropa_service import ROPAService
from grc_backoffice.services.scheduler import Scheduler
from grc_backoffice.services.ticket_service import TicketService
from grc_backoffice.services.vendor_service import VendorService

__all__ = [
    "AuditService",
    "AssetService",
    "AuthService",
    "ControlService",
    "DashboardService",
    "DocumentService",
    "DSRService",
    "EmailService",
    "NotificationService",
    "ReminderService",
    "RiskService",
    "ROPAService",
    "Scheduler",
    "TicketService",
    "VendorService",
]
