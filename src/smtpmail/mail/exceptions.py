"""Specialized exceptions raised by the smtpmail.mail module.

Exception hierarchy::

    SmtpmailError
        MailError (base for all mail errors, carries an ErrorKind)
            MailConfigurationError (invalid sender settings, also ValueError)
            InvalidAttachmentPathError (attachment outside the allowed root)
            InvalidAddressError (address unusable in a header or envelope)
            EmptyBodyError (neither plain nor HTML body)
            AttachmentReadError (attachment file could not be read)
            MimeBuildError (serialisation failure)
            MailTransportError (SMTP delivery failure)
"""

from __future__ import annotations

from enum import Enum

from smtpmail.config.exceptions import SmtpmailError


class ErrorKind(str, Enum):
    """Category of a mail failure.

    Attributes:
        INVALID_ATTACHMENT_PATH: Attachment path fails the root prefix check.
        INVALID_ADDRESS: An address contains a line break or cannot be made ASCII.
        EMPTY_BODY: Neither a plain nor an HTML body was supplied.
        ATTACHMENT_READ: The attachment could not be read from disk.
        MIME_BUILD: The MIME serialiser failed.
        TRANSPORT: The SMTP transport rejected or failed the delivery.
        CONFIGURATION: Sender configuration is invalid.
    """

    INVALID_ATTACHMENT_PATH = "invalid_attachment_path"
    INVALID_ADDRESS = "invalid_address"
    EMPTY_BODY = "empty_body"
    ATTACHMENT_READ = "attachment_read"
    MIME_BUILD = "mime_build"
    TRANSPORT = "transport"
    CONFIGURATION = "configuration"

    @property
    def retryable(self) -> bool:
        """Return True when a later attempt may succeed without caller changes."""
        return self is ErrorKind.TRANSPORT


class MailError(SmtpmailError):
    """Base exception for all mail module errors.

    Attributes:
        kind: The :class:`ErrorKind` of the failure.
    """

    kind: ErrorKind = ErrorKind.MIME_BUILD


class MailConfigurationError(MailError, ValueError):
    """Sender or transport configuration is invalid."""

    kind = ErrorKind.CONFIGURATION


class InvalidAttachmentPathError(MailError):
    """Attachment path does not live under the configured root prefix.

    Attributes:
        path: The rejected path.
        prefix: The required prefix (with trailing slash).
    """

    kind = ErrorKind.INVALID_ATTACHMENT_PATH

    def __init__(self, path: str, prefix: str) -> None:
        """Initialize InvalidAttachmentPathError.

        Args:
            path: The rejected path.
            prefix: The required prefix (with trailing slash).
        """
        super().__init__(f"Attachment path must start with: {prefix} (got {path!r})")
        self.path = path
        self.prefix = prefix


class InvalidAddressError(MailError):
    """An address cannot be written to a header or the SMTP envelope.

    Attributes:
        address: The rejected address.
        reason: Why it was rejected.
    """

    kind = ErrorKind.INVALID_ADDRESS

    def __init__(self, address: str, reason: str) -> None:
        """Initialize InvalidAddressError.

        Args:
            address: The rejected address.
            reason: Why it was rejected.
        """
        super().__init__(f"Invalid address {address!r}: {reason}")
        self.address = address
        self.reason = reason


class EmptyBodyError(MailError):
    """Neither a plain-text nor an HTML body was provided."""

    kind = ErrorKind.EMPTY_BODY

    def __init__(self, message: str = "Neither plain body nor HTML body provided") -> None:
        """Initialize EmptyBodyError."""
        super().__init__(message)


class AttachmentReadError(MailError):
    """The attachment file could not be read.

    The underlying :class:`OSError` is available as ``__cause__``.

    Attributes:
        path: Path of the unreadable attachment.
        reason: Text of the underlying error.
    """

    kind = ErrorKind.ATTACHMENT_READ

    def __init__(self, path: str, reason: str) -> None:
        """Initialize AttachmentReadError.

        Args:
            path: Path of the unreadable attachment.
            reason: Text of the underlying error.
        """
        super().__init__(f"Cannot read attachment '{path}': {reason}")
        self.path = path
        self.reason = reason


class MimeBuildError(MailError):
    """The MIME serialiser failed to produce the message."""

    kind = ErrorKind.MIME_BUILD


class MailTransportError(MailError):
    """The transport failed to deliver the message."""

    kind = ErrorKind.TRANSPORT


__all__ = [
    "AttachmentReadError",
    "EmptyBodyError",
    "ErrorKind",
    "InvalidAddressError",
    "InvalidAttachmentPathError",
    "MailConfigurationError",
    "MailError",
    "MailTransportError",
    "MimeBuildError",
]
