"""Development backend that writes verification links to the log."""

from __future__ import annotations

import logging

from .abstract_sender import EmailSender

logger = logging.getLogger(__name__)


class ConsoleEmailSender(EmailSender):
    """Log messages instead of delivering them.

    The link carries a live verification token, so it is only written at
    DEBUG. Enable DEBUG for ``mailer.console_sender`` in development to see
    it; at INFO only the recipient is recorded.
    """

    def send(self, to_address: str, subject: str, verification_link: str) -> None:
        logger.info("Verification email to %s (%s) not delivered: console backend", to_address, subject)
        logger.debug("Verification link for %s: %s", to_address, verification_link)
