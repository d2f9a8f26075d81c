"""Tests for the logging email backend."""

from __future__ import annotations

import logging

from mailer.console_sender import ConsoleEmailSender

LINK = "https://app.example.com/verify-email?token=0123456789abcdef"


def test_link_is_not_logged_at_info(caplog):
    caplog.set_level(logging.INFO, logger="mailer.console_sender")

    ConsoleEmailSender().send("alice@example.com", "Activate", LINK)

    assert "alice@example.com" in caplog.text
    assert "0123456789abcdef" not in caplog.text


def test_link_is_logged_at_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="mailer.console_sender")

    ConsoleEmailSender().send("alice@example.com", "Activate", LINK)

    assert LINK in caplog.text
