"""Outgoing mail for receipts, order updates and stock alerts."""

from __future__ import annotations

import logging
import re
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from backend.app.core.config import settings

logger = logging.getLogger(__name__)

SENDER_NAME = "Sling ERP"

_TAG_RE = re.compile(r"<[^>]+>")


def html_to_text(body_html: str) -> str:
    """Plain-text fallback for mail clients that do not render HTML."""
    text = body_html.replace("<br>", "\n").replace("</p>", "\n")
    return _TAG_RE.sub("", text).strip()


class EmailService:
    """Deliver notification mail over SMTP.

    Connection details default to the application settings. Delivery
    never raises: a notification goes out after the business operation
    has committed, so any failure is logged and reported as ``False``.
    """

    def __init__(
        self,
        host: str | None = None,
        port: int | None = None,
        username: str | None = None,
        password: str | None = None,
        enabled: bool | None = None,
    ) -> None:
        self.host = host or settings.SMTP_HOST
        self.port = port or settings.SMTP_PORT
        self.username = settings.SMTP_USERNAME if username is None else username
        self.password = settings.SMTP_PASSWORD if password is None else password
        self.enabled = settings.NOTIFICATION_ENABLED if enabled is None else enabled

    def build_message(
        self, to: str, subject: str, body_html: str, from_addr: str | None = None
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((SENDER_NAME, from_addr or self.username))
        msg["To"] = to
        if settings.OWNER_EMAIL:
            msg["Reply-To"] = settings.OWNER_EMAIL
        # Last part is the preferred rendering.
        msg.attach(MIMEText(html_to_text(body_html), "plain", "utf-8"))
        msg.attach(MIMEText(body_html, "html", "utf-8"))
        return msg

    def send(
        self,
        to: str,
        subject: str,
        body_html: str,
        from_addr: str | None = None,
    ) -> bool:
        """Send an HTML email. Returns ``True`` when the server accepted it."""
        if not self.enabled:
            logger.info("Notifications disabled, skipping email to %s: %s", to, subject)
            return False

        msg = self.build_message(to, subject, body_html, from_addr)
        try:
            with smtplib.SMTP(self.host, self.port) as server:
                server.ehlo()
                if self.port != 25:
                    server.starttls()
                if self.username:
                    server.login(self.username, self.password)
                server.sendmail(from_addr or self.username, [to], msg.as_string())
            logger.info("Email sent to %s: %s", to, subject)
            return True
        except Exception:
            logger.exception("Failed to send email to %s", to)
            return False
