"""Verification email delivery backends."""

from .abstract_sender import EmailSender
from .console_sender import ConsoleEmailSender
from .smtp_sender import SmtpEmailSender

__all__ = ["ConsoleEmailSender", "EmailSender", "SmtpEmailSender"]
