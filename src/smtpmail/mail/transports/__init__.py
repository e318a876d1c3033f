"""Transport implementations for mail delivery.

Available transports:
    - SMTPTransport: Standard SMTP protocol via smtplib (sync)
"""

from smtpmail.mail.transports.smtp import SMTPSecurity, SMTPTransport

__all__ = [
    "SMTPSecurity",
    "SMTPTransport",
]
