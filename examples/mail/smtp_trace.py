#!/usr/bin/env python3
"""Send a message with TRACE-level SMTP logging.

Shows the EHLO exchange, STARTTLS negotiation, authentication and envelope
as the dispatcher talks to a real server.

Setup:
    1. Go to https://ethereal.email and create a free account
    2. Set environment variables:
       export ETHEREAL_USER="your-user@ethereal.email"
       export ETHEREAL_PASS="your-password"

Usage:
    python examples/mail/smtp_trace.py
"""

from __future__ import annotations

import os
import sys

from smtpmail.logging import init_logging
from smtpmail.mail import Dispatcher, SenderConfig

ETHEREAL_HOST = "smtp.ethereal.email"
ETHEREAL_PORT = 587


def main() -> None:
    """Send one message to yourself with TRACE logging enabled."""
    user = os.getenv("ETHEREAL_USER")
    password = os.getenv("ETHEREAL_PASS")
    if not user or not password:
        print("Set ETHEREAL_USER and ETHEREAL_PASS first (see https://ethereal.email).")
        sys.exit(1)

    log = init_logging(preset="trace")
    log.info("TRACE logging enabled, SMTP session details follow")

    config = SenderConfig(
        address=user,
        password=password,
        host=ETHEREAL_HOST,
        port=ETHEREAL_PORT,
        display_name="smtpmail trace demo",
    )
    result = Dispatcher(config).send(
        "TRACE logging test from smtpmail",
        "This email was sent with TRACE-level logging enabled.",
        "",
        "",
        [user],
    )

    if not result:
        print(f"Send failed ({result.kind.value if result.kind else 'unknown'}): {result.error}")
        sys.exit(1)
    print("Email sent. View it at: https://ethereal.email/messages")


if __name__ == "__main__":  # pragma: no cover - manual example
    main()
