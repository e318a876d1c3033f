"""MIME message construction.

:class:`MessageBuilder` turns an :class:`~smtpmail.mail.models.OutgoingEmail`
into the raw bytes handed to the SMTP transport. The outer container is
always ``multipart/mixed``; its first part is the body and its optional
second part the attachment:

- plain and HTML bodies -> nested ``multipart/alternative`` (plain first)
- plain body only -> a single ``text/plain`` part
- HTML body only -> a single ``text/html`` part

Every multipart section gets its own random boundary. Text bodies and the
attachment are base64 encoded, headers carry RFC 2047 encoded words, and the
output uses CRLF line endings throughout.

Examples:
    >>> from smtpmail.mail.models import OutgoingEmail, SenderConfig
    >>> config = SenderConfig(address="noreply@example.com", host="smtp.example.com")
    >>> raw = MessageBuilder(config).build(
    ...     OutgoingEmail(subject="Hello", plain_body="Hi there", recipients=("a@x.com",))
    ... )
    >>> b"To: a@x.com\\r\\n" in raw
    True
"""

from __future__ import annotations

import base64
import logging
import mimetypes
import posixpath
from collections.abc import Sequence
from email.errors import MessageError
from email.message import Message
from email.policy import compat32
from email.utils import encode_rfc2231

from smtpmail.logging import TRACE_LEVEL
from smtpmail.mail.exceptions import (
    AttachmentReadError,
    EmptyBodyError,
    MailError,
    MimeBuildError,
)
from smtpmail.mail.filesystem import FileReader, LocalFileReader, ensure_under_prefix
from smtpmail.mail.headers import (
    encode_word,
    format_recipients,
    format_sender,
    make_boundary,
    normalize_address,
)
from smtpmail.mail.models import OutgoingEmail, SenderConfig

log = logging.getLogger(__name__)

DEFAULT_ATTACHMENT_TYPE = "application/octet-stream"

# CRLF on the wire; fold only past the RFC 5322 hard line limit
WIRE_POLICY = compat32.clone(linesep="\r\n", max_line_length=998)

# mimetypes reports compression as an encoding, not a type
_COMPRESSED_TYPES = {
    "gzip": "application/gzip",
    "bzip2": "application/x-bzip2",
    "xz": "application/x-xz",
    "compress": "application/x-compress",
    "br": "application/x-brotli",
}


def guess_content_type(path: str) -> str:
    """Return the MIME type for *path* based on its extension.

    Examples:
        >>> guess_content_type("storage/report.pdf")
        'application/pdf'
        >>> guess_content_type("storage/blob")
        'application/octet-stream'
        >>> guess_content_type("storage/logs.tar.gz")
        'application/gzip'
    """
    content_type, encoding = mimetypes.guess_type(path)
    if encoding is not None:
        return _COMPRESSED_TYPES.get(encoding, DEFAULT_ATTACHMENT_TYPE)
    return content_type or DEFAULT_ATTACHMENT_TYPE


def _base64_body(data: bytes) -> str:
    """Return *data* as base64 text in 76 character lines."""
    return base64.encodebytes(data).decode("ascii").rstrip("\n")


def _content_disposition(filename: str) -> str:
    """Return an ``attachment`` disposition, RFC 2231 encoded for non-ASCII names."""
    if filename.isascii():
        escaped = filename.replace("\\", "\\\\").replace('"', '\\"')
        return f'attachment; filename="{escaped}"'
    return f"attachment; filename*={encode_rfc2231(filename, 'utf-8')}"


def _text_part(content: str, subtype: str) -> Message:
    part = Message()
    part["Content-Type"] = f"text/{subtype}; charset=UTF-8"
    part["Content-Transfer-Encoding"] = "base64"
    part.set_payload(_base64_body(content.encode("utf-8")))
    return part


class MessageBuilder:
    """Build RFC 5322 / MIME messages for a fixed sender.

    The builder holds no per-message state, so one instance can serve
    concurrent callers.

    Args:
        config: Sender identity and attachment root.
        reader: Source of attachment bytes (local disk by default).
    """

    def __init__(self, config: SenderConfig, *, reader: FileReader | None = None) -> None:
        """Initialize MessageBuilder."""
        self._config = config
        self._reader: FileReader = reader if reader is not None else LocalFileReader()

    @property
    def config(self) -> SenderConfig:
        """Return the sender configuration."""
        return self._config

    def build(self, email: OutgoingEmail) -> bytes:
        """Assemble the complete message.

        Args:
            email: Subject, bodies, attachment path and ``To`` recipients.

        Returns:
            Headers and MIME body as bytes with CRLF line endings.

        Raises:
            EmptyBodyError: If both bodies are empty.
            InvalidAttachmentPathError: If the attachment is outside the root prefix.
            InvalidAddressError: If a recipient contains a line break or a
                non-ASCII local part.
            AttachmentReadError: If the attachment cannot be read.
            MimeBuildError: If serialisation fails.
        """
        if not email.plain_body and not email.html_body:
            raise EmptyBodyError()
        if email.attachment_path:
            ensure_under_prefix(email.attachment_path, self._config.attachment_root_prefix)
        recipients = tuple(normalize_address(address) for address in email.recipients)

        attachment = self._read_attachment(email.attachment_path) if email.attachment_path else None

        try:
            root = self._headers(email, recipients)
            root.attach(self._body(email))
            if attachment is not None:
                root.attach(self._attachment(email.attachment_path, attachment))
            raw = root.as_bytes(policy=WIRE_POLICY)
        except MailError:
            raise
        except (TypeError, ValueError, LookupError, MessageError) as e:
            raise MimeBuildError(f"Failed to build MIME message: {e}") from e

        log.debug(
            "Built message (%d bytes, recipients=%d, attachment=%s)",
            len(raw),
            len(email.recipients),
            attachment is not None,
        )
        return raw

    def _headers(self, email: OutgoingEmail, recipients: Sequence[str]) -> Message:
        """Create the ``multipart/mixed`` root with the top-level headers."""
        config = self._config
        boundary = make_boundary()

        root = Message()
        root["MIME-Version"] = "1.0"
        root["From"] = format_sender(config.display_name, config.address)
        root["To"] = format_recipients(recipients)
        root["Subject"] = encode_word(email.subject)
        if config.reply_to:
            root["Reply-To"] = config.reply_to
        root["Content-Type"] = f"multipart/mixed; boundary={boundary}"
        return root

    def _body(self, email: OutgoingEmail) -> Message:
        """Return the body part matching which bodies are present."""
        if email.plain_body and email.html_body:
            boundary = make_boundary()
            alternative = Message()
            alternative["Content-Type"] = f"multipart/alternative; boundary={boundary}"
            alternative.attach(_text_part(email.plain_body, "plain"))
            alternative.attach(_text_part(email.html_body, "html"))
            if log.isEnabledFor(TRACE_LEVEL):
                log.log(TRACE_LEVEL, "[MIME] multipart/alternative (plain + html)")
            return alternative
        if email.plain_body:
            return _text_part(email.plain_body, "plain")
        return _text_part(email.html_body, "html")

    def _read_attachment(self, path: str) -> bytes:
        """Read the attachment through the configured reader."""
        try:
            data = self._reader.read_bytes(path)
        except OSError as e:
            raise AttachmentReadError(path, e.strerror or str(e)) from e
        if log.isEnabledFor(TRACE_LEVEL):
            log.log(TRACE_LEVEL, "[MIME] Read attachment %s (%d bytes)", path, len(data))
        return data

    @staticmethod
    def _attachment(path: str, data: bytes) -> Message:
        """Return the base64 attachment part."""
        part = Message()
        part["Content-Type"] = guess_content_type(path)
        part["Content-Disposition"] = _content_disposition(posixpath.basename(path))
        part["Content-Transfer-Encoding"] = "base64"
        part.set_payload(_base64_body(data))
        return part


def build_message(
    config: SenderConfig,
    subject: str,
    plain_body: str | None,
    html_body: str | None,
    attachment_path: str | None,
    recipients: Sequence[str],
    *,
    reader: FileReader | None = None,
) -> bytes:
    """Build a message in one call.

    Args:
        config: Sender identity and attachment root.
        subject: Subject line.
        plain_body: Plain-text body (empty or None for none).
        html_body: HTML body (empty or None for none).
        attachment_path: File to attach (empty or None for none).
        recipients: ``To`` addresses.
        reader: Source of attachment bytes.

    Returns:
        The raw message bytes.
    """
    email = OutgoingEmail.create(subject, plain_body, html_body, attachment_path, recipients)
    return MessageBuilder(config, reader=reader).build(email)


__all__ = [
    "DEFAULT_ATTACHMENT_TYPE",
    "WIRE_POLICY",
    "MessageBuilder",
    "build_message",
    "guess_content_type",
]
