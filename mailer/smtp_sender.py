"""SMTP delivery of verification emails."""

from __future__ import annotations

import logging
import smtplib
from email.message import EmailMessage

from markupsafe import escape

from services.errors import DeliveryError

from .abstract_sender import EmailSender

logger = logging.getLogger(__name__)

TEXT_BODY = (
    "Welcome to Chambitas!\n\n"
    "Open the following link to activate your account:\n{link}\n"
)
HTML_BODY = (
    "Welcome to Chambitas! <br/><br/> Click the following link to activate "
    'your account: <a href="{link}">{link}</a>'
)


class SmtpEmailSender(EmailSender):
    """Send messages through an SMTP relay, one connection per message."""

    def __init__(
        self,
        host: str,
        port: int,
        sender: str,
        *,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = False,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.sender = sender
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    def build_message(self, to_address: str, subject: str, verification_link: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to_address
        message["Subject"] = subject
        message.set_content(TEXT_BODY.format(link=verification_link))
        message.add_alternative(
            HTML_BODY.format(link=escape(verification_link)), subtype="html"
        )
        return message

    def send(self, to_address: str, subject: str, verification_link: str) -> None:
        message = self.build_message(to_address, subject, verification_link)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as conn:
                if self.use_tls:
                    conn.starttls()
                if self.username:
                    conn.login(self.username, self.password or "")
                conn.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.warning("SMTP delivery to %s failed: %s", to_address, exc)
            raise DeliveryError() from exc
