"""Compose MIME messages and deliver them over SMTP.

Examples:
    >>> from smtpmail.mail import Dispatcher, SenderConfig
    >>> config = SenderConfig(
    ...     address="noreply@example.com",
    ...     password="secret",
    ...     host="smtp.example.com",
    ...     display_name="Example",
    ...     reply_to="support@example.com",
    ...     attachment_root_prefix="storage",
    ... )
    >>> dispatcher = Dispatcher(config)
    >>> result = dispatcher.send("Hello", "Hi there", "<p>Hi there</p>", "", ["a@x.com"])  # doctest: +SKIP
"""

from smtpmail.mail.builder import MessageBuilder, build_message, guess_content_type
from smtpmail.mail.dispatcher import Dispatcher
from smtpmail.mail.exceptions import (
    AttachmentReadError,
    EmptyBodyError,
    ErrorKind,
    InvalidAddressError,
    InvalidAttachmentPathError,
    MailConfigurationError,
    MailError,
    MailTransportError,
    MimeBuildError,
)
from smtpmail.mail.filesystem import FileReader, LocalFileReader
from smtpmail.mail.models import OutgoingEmail, SenderConfig, SendResult
from smtpmail.mail.transport import MailTransport, SMTPCredentials
from smtpmail.mail.transports import SMTPSecurity, SMTPTransport

__all__ = [
    "AttachmentReadError",
    "Dispatcher",
    "EmptyBodyError",
    "ErrorKind",
    "FileReader",
    "InvalidAddressError",
    "InvalidAttachmentPathError",
    "LocalFileReader",
    "MailConfigurationError",
    "MailError",
    "MailTransport",
    "MailTransportError",
    "MessageBuilder",
    "MimeBuildError",
    "OutgoingEmail",
    "SMTPCredentials",
    "SMTPSecurity",
    "SMTPTransport",
    "SendResult",
    "SenderConfig",
    "build_message",
    "guess_content_type",
]
