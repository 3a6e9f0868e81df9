"""
Shared enumerations for database models.

Using Python enums mapped to database enums ensures that
only valid values can be stored. The database stores the
enum *value* (e.g. "non-compliant"), which is also what the
API sends and receives.
"""

import enum


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """values_callable for SAEnum so columns hold values, not member names."""
    return [member.value for member in enum_cls]


class UserRole(str, enum.Enum):
    ADMIN = "admin"
    USER = "user"


class ControlStatus(str, enum.Enum):
    """Lifecycle of an activated control. Retired controls are kept."""
    ACTIVE = "active"
    RETIRED = "retired"


class ComplianceStatus(str, enum.Enum):
    """Verdict recorded with each piece of evidence."""
    COMPLIANT = "compliant"
    NON_COMPLIANT = "non-compliant"


class TicketType(str, enum.Enum):
    INTERNAL = "internal"
    EXTERNAL = "external"


class TicketStatus(str, enum.Enum):
    NEW = "new"
    IN_PROGRESS = "in_progress"
    RESOLVED = "resolved"
    CLOSED = "closed"


OPEN_TICKET_STATUSES = (TicketStatus.NEW, TicketStatus.IN_PROGRESS)


class RiskStatus(str, enum.Enum):
    IDENTIFIED = "identified"
    ASSESSED = "assessed"
    MITIGATED = "mitigated"
    ACCEPTED = "accepted"
    CLOSED = "closed"


class DSRRequestType(str, enum.Enum):
    """GDPR articles 15-21."""
    ACCESS = "access"
    ERASURE = "erasure"
    RECTIFICATION = "rectification"
    PORTABILITY = "portability"
    RESTRICTION = "restriction"
    OBJECTION = "objection"


class DSRStatus(str, enum.Enum):
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"


CLOSED_DSR_STATUSES = (DSRStatus.COMPLETED, DSRStatus.REJECTED)


class DSRPriority(str, enum.Enum):
    LOW = "low"
    NORMAL = "normal"
    HIGH = "high"
    URGENT = "urgent"


class AssetStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    DECOMMISSIONED = "decommissioned"


class DocumentVersionStatus(str, enum.Enum):
    """At most one version of a document is published at a time."""
    DRAFT = "draft"
    PUBLISHED = "published"
    ARCHIVED = "archived"


class VendorRiskTier(str, enum.Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class VendorStatus(str, enum.Enum):
    ACTIVE = "active"
    UNDER_REVIEW = "under_review"
    INACTIVE = "inactive"


class VendorAssessmentStatus(str, enum.Enum):
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class ROPAStatus(str, enum.Enum):
    """Archiving is the only way a processing record leaves the register."""
    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"


class AuditAction(str, enum.Enum):
    """Every action type the audit recorder writes."""
    USER_LOGIN_SUCCESS = "USER_LOGIN_SUCCESS"
    USER_LOGIN_FAILURE = "USER_LOGIN_FAILURE"
    CONTROL_LIBRARY_CREATED = "CONTROL_LIBRARY_CREATED"
    CONTROL_LIBRARY_UPDATED = "CONTROL_LIBRARY_UPDATED"
    CONTROL_LIBRARY_DELETED = "CONTROL_LIBRARY_DELETED"
    CONTROL_LIBRARY_IMPORTED = "CONTROL_LIBRARY_IMPORTED"
    CONTROL_ACTIVATED = "CONTROL_ACTIVATED"
    CONTROL_UPDATED = "CONTROL_UPDATED"
    CONTROL_RETIRED = "CONTROL_RETIRED"
    EVIDENCE_SUBMITTED = "EVIDENCE_SUBMITTED"
    TICKET_CREATED = "TICKET_CREATED"
    TICKET_CREATED_EXTERNAL = "TICKET_CREATED_EXTERNAL"
    TICKET_UPDATED = "TICKET_UPDATED"
    TICKET_COMMENT_ADDED = "TICKET_COMMENT_ADDED"
    RISK_CREATED = "RISK_CREATED"
    RISK_UPDATED = "RISK_UPDATED"
    RISK_DELETED = "RISK_DELETED"
    RISK_CONTROL_MAPPED = "RISK_CONTROL_MAPPED"
    RISK_CONTROL_UNMAPPED = "RISK_CONTROL_UNMAPPED"
    DSR_CREATED = "DSR_CREATED"
    DSR_UPDATED = "DSR_UPDATED"
    DSR_COMPLETED = "DSR_COMPLETED"
    ASSET_CREATED = "ASSET_CREATED"
    ASSET_UPDATED = "ASSET_UPDATED"
    ASSET_DELETED = "ASSET_DELETED"
    ASSET_CONTROL_MAPPED = "ASSET_CONTROL_MAPPED"
    ASSET_CONTROL_UNMAPPED = "ASSET_CONTROL_UNMAPPED"
    DOCUMENT_CREATED = "DOCUMENT_CREATED"
    DOCUMENT_VERSION_CREATED = "DOCUMENT_VERSION_CREATED"
    DOCUMENT_VERSION_PUBLISHED = "DOCUMENT_VERSION_PUBLISHED"
    DOCUMENT_ACKNOWLEDGED = "DOCUMENT_ACKNOWLEDGED"
    DOCUMENT_CONTROL_MAPPED = "DOCUMENT_CONTROL_MAPPED"
    DOCUMENT_CONTROL_UNMAPPED = "DOCUMENT_CONTROL_UNMAPPED"
    VENDOR_CREATED = "VENDOR_CREATED"
    VENDOR_UPDATED = "VENDOR_UPDATED"
    VENDOR_DELETED = "VENDOR_DELETED"
    VENDOR_ASSESSMENT_CREATED = "VENDOR_ASSESSMENT_CREATED"
    VENDOR_CONTROL_MAPPED = "VENDOR_CONTROL_MAPPED"
    VENDOR_CONTROL_UNMAPPED = "VENDOR_CONTROL_UNMAPPED"
    ROPA_CREATED = "ROPA_CREATED"
    ROPA_UPDATED = "ROPA_UPDATED"
    ROPA_ARCHIVED = "ROPA_ARCHIVED"


class EntityType(str, enum.Enum):
    """Target entity recorded on an audit row."""
    USER = "user"
    CONTROL_LIBRARY = "control_library"
    ACTIVATED_CONTROL = "activated_control"
    CONTROL_EVIDENCE = "control_evidence"
    TICKET = "ticket"
    TICKET_COMMENT = "ticket_comment"
    RISK = "risk_assessment"
    RISK_CONTROL_MAPPING = "risk_control_mapping"
    DSR = "data_subject_request"
    ASSET = "asset"
    ASSET_CONTROL_MAPPING = "asset_control_mapping"
    DOCUMENT = "document"
    DOCUMENT_VERSION = "document_version"
    DOCUMENT_CONTROL_MAPPING = "document_control_mapping"
    VENDOR = "vendor"
    VENDOR_ASSESSMENT = "vendor_assessment"
    VENDOR_CONTROL_MAPPING = "vendor_control_mapping"
    ROPA = "gdpr_ropa"
