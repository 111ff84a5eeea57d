"""
Transactional email delivery.

SendGrid's HTTP API is used when an API key is configured; any SendGrid
failure falls back to plain SMTP. Delivery problems are reported in the
returned ``EmailResult`` and logged; callers decide whether they matter.

Configuration via environment variables (see ``EmailSettings``):
    EMAIL_SENDGRID_API_KEY: SendGrid API key (optional)
    EMAIL_FROM_ADDRESS: Sender address
    EMAIL_NOTIFICATION_EMAIL: Where contact notifications go, also reply-to
    EMAIL_SERVER_HOST / _PORT / _USER / _PASSWORD / _SECURE: SMTP fallback
"""

import html
import smtplib
import ssl
from dataclasses import dataclass
from email.mime.text import MIMEText
from email.utils import make_msgid
from typing import Optional

import requests

from groomer_directory.config import EmailSettings, settings
from groomer_directory.exceptions import EmailConfigurationError
from groomer_directory.logging_config import get_logger

logger = get_logger(__name__)


@dataclass
class EmailResult:
    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None
    transport: Optional[str] = None


class EmailSender:
    """
    Sends HTML email via SendGrid, falling back to SMTP.

    Args:
        config: Email settings; defaults to the global settings.
        http: requests session used for the SendGrid API.
    """

    def __init__(self, config: EmailSettings | None = None, http: requests.Session | None = None):
        self.config = config or settings.email
        self.http = http or requests.Session()

    @property
    def enabled(self) -> bool:
        return bool(self.config.sendgrid_api_key or self.config.server_host)

    def check_configuration(self) -> None:
        """
        Raises:
            EmailConfigurationError: If neither SendGrid nor SMTP is configured.
        """
        if not self.enabled:
            raise EmailConfigurationError(
                "No email transport configured",
                details={"expected": ["EMAIL_SENDGRID_API_KEY", "EMAIL_SERVER_HOST"]},
            )

    def send(self, to: str, subject: str, html_body: str) -> EmailResult:
        """
        Send an email.

        Args:
            to: Recipient address.
            subject: Subject line.
            html_body: HTML body.

        Returns:
            EmailResult describing the outcome; never raises for delivery errors.
        """
        logger.info("Sending email to %s: %s", to, subject)
        if self.config.sendgrid_api_key:
            result = self._send_with_sendgrid(to, subject, html_body)
            if result.success:
                return result
            logger.warning("SendGrid delivery failed (%s), falling back to SMTP", result.error)
        return self._send_with_smtp(to, subject, html_body)

    def _send_with_sendgrid(self, to: str, subject: str, html_body: str) -> EmailResult:
        payload = {
            "personalizations": [{"to": [{"email": to}]}],
            "from": {"email": self.config.from_address},
            "subject": subject,
            "content": [{"type": "text/html", "value": html_body}],
        }
        if self.config.notification_email:
            payload["reply_to"] = {"email": self.config.notification_email}

        try:
            response = self.http.post(
                self.config.sendgrid_url,
                json=payload,
                headers={"Authorization": f"Bearer {self.config.sendgrid_api_key}"},
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            return EmailResult(success=False, error=str(e), transport="sendgrid")

        if response.status_code >= 400:
            return EmailResult(
                success=False,
                error=f"SendGrid returned HTTP {response.status_code}: {response.text[:200]}",
                transport="sendgrid",
            )

        message_id = response.headers.get("X-Message-Id")
        logger.info("Email sent via SendGrid (id=%s)", message_id)
        return EmailResult(success=True, message_id=message_id, transport="sendgrid")

    def _send_with_smtp(self, to: str, subject: str, html_body: str) -> EmailResult:
        cfg = self.config
        if not cfg.server_host:
            logger.error("No email transport configured, cannot send to %s", to)
            return EmailResult(success=False, error="No email transport configured", transport="smtp")

        sender = cfg.from_address or cfg.server_user
        msg = MIMEText(html_body, "html", "utf-8")
        msg["From"] = sender
        msg["To"] = to
        msg["Subject"] = subject
        msg["Message-ID"] = make_msgid()
        if cfg.notification_email:
            msg["Reply-To"] = cfg.notification_email

        context = ssl.create_default_context()
        try:
            if cfg.server_secure:
                server = smtplib.SMTP_SSL(cfg.server_host, cfg.server_port, timeout=cfg.timeout, context=context)
            else:
                server = smtplib.SMTP(cfg.server_host, cfg.server_port, timeout=cfg.timeout)
            with server:
                if not cfg.server_secure:
                    server.starttls(context=context)
                if cfg.server_user and cfg.server_password:
                    server.login(cfg.server_user, cfg.server_password)
                server.sendmail(sender, [to], msg.as_string())
        except (smtplib.SMTPException, OSError) as e:
            logger.error("SMTP delivery to %s failed: %s", to, e)
            return EmailResult(success=False, error=str(e), transport="smtp")

        logger.info("Email sent via SMTP (%s)", cfg.server_host)
        return EmailResult(success=True, message_id=msg["Message-ID"], transport="smtp")


def build_contact_notification(name: str, email: str, message: str) -> tuple[str, str]:
    """
    Subject and HTML body notifying the site owner of a contact form message.

    All submitted values are HTML-escaped.
    """
    site_name = settings.site.name
    safe_name = html.escape(name)
    safe_email = html.escape(email, quote=True)
    safe_message = html.escape(message)

    subject = f"New Contact Form Submission - {site_name}"
    body = f"""
    <div style="font-family: Arial, sans-serif; padding: 20px; max-width: 600px;">
      <h2 style="color: #333;">New Contact Form Submission</h2>
      <p>You have received a new message from the {html.escape(site_name)} contact form.</p>
      <div style="margin: 20px 0; padding: 15px; border-left: 4px solid #0070f3; background-color: #f5f5f5;">
        <p><strong>Name:</strong> {safe_name}</p>
        <p><strong>Email:</strong> <a href="mailto:{safe_email}">{safe_email}</a></p>
        <p><strong>Message:</strong></p>
        <p style="white-space: pre-wrap;">{safe_message}</p>
      </div>
      <p>You can reply directly to this email to respond to the sender.</p>
      <hr style="border: none; border-top: 1px solid #eaeaea; margin: 20px 0;" />
      <p style="color: #666; font-size: 12px;">This is an automated message from your {html.escape(site_name)} website.</p>
    </div>
    """
    return subject, body
