"""
Reference data loaded at startup.

Seeding is idempotent: existing control library entries and
users are left untouched, so it is safe to run on every boot.
"""

import logging

from sqlalchemy import select
from sqlalchemy.orm import Session

from grc_backoffice.models.control import ControlLibraryItem
from grc_backoffice.models.enums import UserRole
from grc_backoffice.models.user import User

logger = logging.getLogger(__name__)

CIS = "CIS v8 IG1"
ISO = "ISO/IEC 27001:2022"
NIS2 = "NIS-2 Directive"

CONTROL_LIBRARY = [
    # (id, standard, family, name, description)
    ("CIS-1.1", CIS, "Inventory and Control of Hardware Assets",
     "Establish and Maintain Detailed Enterprise Asset Inventory",
     "Keep an accurate, up-to-date inventory of every enterprise asset able "
     "to store or process data, including boundary, internal and mobile devices."),
    ("CIS-1.2", CIS, "Inventory and Control of Hardware Assets",
     "Address Unauthorized Assets",
     "Remove, quarantine or inventory unauthorized assets in a timely manner."),
    ("CIS-2.1", CIS, "Inventory and Control of Software Assets",
     "Establish and Maintain a Software Inventory",
     "Keep a detailed inventory of all licensed software installed on enterprise assets."),
    ("CIS-3.1", CIS, "Data Protection",
     "Encrypt Sensitive Data at Rest",
     "Encrypt sensitive data at rest on servers, applications and databases."),
    ("CIS-4.1", CIS, "Access Control Management",
     "Establish and Maintain Access Control Policies",
     "Maintain policies and procedures for authorizing user access to systems and data."),
    ("CIS-5.1", CIS, "Account Management",
     "Establish and Maintain Account Management Processes",
     "Manage the full lifecycle of system and application accounts, from "
     "provisioning to removal."),
    ("CIS-7.1", CIS, "Continuous Vulnerability Management",
     "Establish and Maintain a Vulnerability Management Process",
     "Document a vulnerability management process and review it annually."),
    ("CIS-8.1", CIS, "Audit Log Management",
     "Establish and Maintain an Audit Log Management Process",
     "Define how audit logs are collected, retained, protected and reviewed."),
    ("ISO27001-A.5.1", ISO, "Organizational controls",
     "Policies for information security",
     "Define, approve, publish and periodically review information security policies."),
    ("ISO27001-A.5.2", ISO, "Organizational controls",
     "Information security roles and responsibilities",
     "Define and allocate information security roles according to organizational needs."),
    ("ISO27001-A.5.15", ISO, "Organizational controls",
     "Access control",
     "Establish rules for physical and logical access based on business and "
     "security requirements."),
    ("ISO27001-A.8.5", ISO, "Technological controls",
     "Secure authentication",
     "Implement secure authentication technologies and procedures."),
    ("ISO27001-A.8.16", ISO, "Technological controls",
     "Monitoring activities",
     "Monitor networks, systems and applications for anomalous behaviour."),
    ("ISO27001-A.8.24", ISO, "Technological controls",
     "Use of cryptography",
     "Define and apply rules for the effective use of cryptography, including key management."),
    ("NIS2-Art6.1", NIS2, "Cybersecurity risk-management measures",
     "Risk analysis and information system security policies",
     "Maintain policies on risk analysis and information system security."),
    ("NIS2-Art6.2", NIS2, "Cybersecurity risk-management measures",
     "Incident handling",
     "Prevent, detect and respond to incidents."),
    ("NIS2-Art6.4", NIS2, "Cybersecurity risk-management measures",
     "Supply chain security",
     "Address security in relationships with direct suppliers and service providers."),
    ("NIS2-Art21.2", NIS2, "Reporting obligations",
     "Incident notification (72 hours)",
     "Submit an incident notification within 72 hours of becoming aware of a "
     "significant incident."),
]

SEED_USERS = [
    # (email, name, role)
    ("admin@company.com", "System Administrator", UserRole.ADMIN),
    ("user@company.com", "Compliance User", UserRole.USER),
    ("john.doe@company.com", "John Doe", UserRole.USER),
]


def seed_control_library(db: Session) -> int:
    existing = set(db.execute(select(ControlLibraryItem.id)).scalars().all())
    created = 0
    for item_id, standard, family, name, description in CONTROL_LIBRARY:
        if item_id in existing:
            continue
        db.add(ControlLibraryItem(
            id=item_id,
            standard=standard,
            family=family,
            name=name,
            description=description,
        ))
        created += 1
    db.flush()
    return created


def seed_users(db: Session) -> int:
    existing = set(db.execute(select(User.email)).scalars().all())
    created = 0
    for email, name, role in SEED_USERS:
        if email in existing:
            continue
        db.add(User(email=email, name=name, role=role))
        created += 1
    db.flush()
    return created


def seed_all(db: Session) -> None:
    """Seed reference data and commit."""
    controls = seed_control_library(db)
    users = seed_users(db)
    db.commit()
    logger.info("Seeded %d control library items and %d users", controls, users)
