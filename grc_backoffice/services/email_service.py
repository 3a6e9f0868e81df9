"""
Email dispatcher.

SMTP is optional. The service is enabled only when host, port,
user and password are all configured. When it is disabled,
send_email() logs that the message was not sent and still
reports success, so callers never need to check whether mail
is configured.

Every message is rendered from the one shared template in
templates/email/base.html.
"""

import logging
import smtplib
from datetime import date
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from typing import Any, Mapping

from jinja2 import Environment, FileSystemLoader, select_autoescape

from grc_backoffice.config import Settings

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates" / "email"
FOOTER = "This is an automated message from your GRC Compliance Platform."


class EmailService:
    """Service for sending emails via SMTP."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.env = Environment(
            loader=FileSystemLoader(TEMPLATE_DIR),
            autoescape=select_autoescape(["html", "xml"]),
            trim_blocks=True,
            lstrip_blocks=True,
        )

    def is_enabled(self) -> bool:
        s = self.settings
        return bool(s.SMTP_HOST and s.SMTP_PORT and s.SMTP_USER and s.SMTP_PASSWORD)

    @property
    def from_address(self) -> str:
        return self.settings.SMTP_FROM_EMAIL or self.settings.SMTP_USER

    def link(self, path: str) -> str:
        return f"{self.settings.FRONTEND_BASE_URL.rstrip('/')}{path}"

    def render_email(
        self,
        recipient_name: str,
        subject: str,
        title: str,
        body: str,
        action_url: str | None = None,
        action_text: str | None = None,
        preheader: str | None = None,
    ) -> str:
        """Render the shared HTML template. Blank lines in body split paragraphs."""
        template = self.env.get_template("base.html")
        return template.render(
            recipient_name=recipient_name,
            subject=subject,
            preheader=preheader or title,
            title=title,
            paragraphs=[p.strip() for p in body.split("\n\n") if p.strip()],
            action_url=action_url,
            action_text=action_text,
            footer=FOOTER,
            year=date.today().year,
        )

    def send_email(
        self, to_address: str, subject: str, html_body: str, text_body: str = ""
    ) -> bool:
        """
        Send one email.

        Returns True when sent, or when email is disabled.
        Returns False when the SMTP exchange failed.
        """
        if not self.is_enabled():
            logger.info(
                "Email disabled, not sent to %s: %s", to_address, subject
            )
            return True

        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = f"{self.settings.SMTP_FROM_NAME} <{self.from_address}>"
        msg["To"] = to_address
        if text_body:
            msg.attach(MIMEText(text_body, "plain"))
        msg.attach(MIMEText(html_body, "html"))

        try:
            server = smtplib.SMTP(
                self.settings.SMTP_HOST,
                int(self.settings.SMTP_PORT),
                timeout=self.settings.SMTP_TIMEOUT,
            )
            try:
                if self.settings.SMTP_USE_TLS:
                    server.starttls()
                server.login(self.settings.SMTP_USER, self.settings.SMTP_PASSWORD)
                server.send_message(msg, self.from_address, [to_address])
            finally:
                server.quit()
        except (smtplib.SMTPException, OSError, ValueError) as e:
            logger.error("Failed to send email to %s: %s", to_address, e)
            return False

        logger.info("Email sent to %s: %s", to_address, subject)
        return True

    # --- Convenience senders ---

    def send_due_control_reminder(
        self,
        to_address: str,
        recipient_name: str,
        control_name: str,
        control_id: str,
        due_date: date,
        activated_control_id: Any,
    ) -> bool:
        subject = f"📅 Control Review Due: {control_name}"
        body = (
            f"The control {control_id} ({control_name}) is due for review "
            f"on {due_date.isoformat()}.\n\n"
            "Please review the control and submit evidence of compliance."
        )
        html = self.render_email(
            recipient_name,
            subject,
            "Control Review Due",
            body,
            action_url=self.link(f"/controls/activated/{activated_control_id}"),
            action_text="Review Control",
        )
        return self.send_email(to_address, subject, html, body)

    def send_overdue_control_alert(
        self,
        to_address: str,
        recipient_name: str,
        control_name: str,
        control_id: str,
        days_overdue: int,
        activated_control_id: Any,
    ) -> bool:
        subject = f"⚠️ Overdue Control Alert: {control_name}"
        body = (
            f"The control {control_id} ({control_name}) is {days_overdue} days "
            "overdue for review.\n\n"
            "Overdue controls put your compliance posture at risk. "
            "Please submit evidence as soon as possible."
        )
        html = self.render_email(
            recipient_name,
            subject,
            "Overdue Control Alert",
            body,
            action_url=self.link(f"/controls/activated/{activated_control_id}"),
            action_text="Submit Evidence",
        )
        return self.send_email(to_address, subject, html, body)

    def send_daily_digest(
        self, to_address: str, recipient_name: str, stats: Mapping[str, Any]
    ) -> bool:
        subject = "📊 Daily Compliance Digest"
        body = (
            f"Active controls: {stats['activated']}\n\n"
            f"Compliant: {stats['compliant']} "
            f"({stats['compliancePercentage']}% compliance rate)\n\n"
            f"Overdue controls: {stats['overdue']}\n\n"
            f"Open tickets: {stats['openTickets']}"
        )
        html = self.render_email(
            recipient_name,
            subject,
            "Daily Compliance Digest",
            body,
            action_url=self.link("/dashboard"),
            action_text="View Dashboard",
        )
        return self.send_email(to_address, subject, html, body)

    def send_weekly_digest(
        self, to_address: str, recipient_name: str, stats: Mapping[str, Any]
    ) -> bool:
        subject = "📈 Weekly Compliance Report"
        body = (
            f"Active controls: {stats['total_controls']}\n\n"
            f"Compliance rate: {stats['compliance_rate']}%\n\n"
            f"Overdue controls: {stats['overdue_controls']}\n\n"
            f"Evidence submitted this week: {stats['evidence_submissions']}\n\n"
            f"Tickets resolved this week: {stats['tickets_resolved']}"
        )
        html = self.render_email(
            recipient_name,
            subject,
            "Weekly Compliance Report",
            body,
            action_url=self.link("/dashboard"),
            action_text="View Dashboard",
        )
        return self.send_email(to_address, subject, html, body)
