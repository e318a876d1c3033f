"""smtpmail: MIME message builder and SMTP dispatcher.

Examples:
    >>> import smtpmail
    >>> smtpmail.__version__ == smtpmail.meta.__version__
    True
"""

from smtpmail import meta
from smtpmail.mail import (
    Dispatcher,
    ErrorKind,
    MailError,
    MessageBuilder,
    OutgoingEmail,
    SenderConfig,
    SendResult,
    build_message,
)
from smtpmail.meta import __version__

__all__ = [
    "Dispatcher",
    "ErrorKind",
    "MailError",
    "MessageBuilder",
    "OutgoingEmail",
    "SendResult",
    "SenderConfig",
    "__version__",
    "build_message",
    "meta",
]
