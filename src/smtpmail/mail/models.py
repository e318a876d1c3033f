"""Data models for the smtpmail.mail module.

- SenderConfig: Frozen sender and server settings shared by every send
- OutgoingEmail: Frozen per-call message content and recipients
- SendResult: Outcome of a dispatch, truthy on success
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from smtpmail.mail.exceptions import ErrorKind, InvalidAddressError, MailConfigurationError, MailError
from smtpmail.mail.headers import normalize_address

DEFAULT_SMTP_PORT = 587
DEFAULT_TIMEOUT = 30.0

_SENDER_KEYS = frozenset(
    {
        "address",
        "password",
        "host",
        "port",
        "display_name",
        "reply_to",
        "attachment_root_prefix",
        "bcc_address",
        "timeout",
    }
)


@dataclass(frozen=True, slots=True)
class SenderConfig:
    """Sender identity and SMTP server settings.

    Build it once at startup and share it between threads; it never changes
    after construction.
    Addresses are stored in ASCII form, with internationalised domains IDNA
    encoded.

    Attributes:
        address: Envelope sender and ``From`` address, also the SMTP username.
        password: SMTP secret (hidden from ``repr``).
        host: SMTP server host name.
        port: SMTP server port.
        display_name: Human-readable sender name for the ``From`` header.
        reply_to: Value of the ``Reply-To`` header (empty to omit it).
        attachment_root_prefix: Directory prefix every attachment path must
            start with (checked as ``<prefix>/``).
        bcc_address: Address added to the delivery envelope only (empty for none).
        timeout: Socket timeout handed to the transport, in seconds.

    Examples:
        >>> config = SenderConfig(address="noreply@example.com", password="s3cret", host="smtp.example.com")
        >>> config.host_port
        'smtp.example.com:587'
    """

    address: str
    password: str = field(default="", repr=False)
    host: str = "localhost"
    port: int = DEFAULT_SMTP_PORT
    display_name: str = ""
    reply_to: str = ""
    attachment_root_prefix: str = "storage"
    bcc_address: str = ""
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        """Validate configuration values.

        Raises:
            MailConfigurationError: If any value is invalid.
        """
        if not self.address or "@" not in self.address:
            raise MailConfigurationError(f"Sender address is invalid: {self.address!r}")
        if not self.host:
            raise MailConfigurationError("SMTP host is required")
        if not 0 < self.port < 65536:
            raise MailConfigurationError(f"SMTP port out of range: {self.port}")
        if self.timeout <= 0:
            raise MailConfigurationError(f"Timeout must be positive, got {self.timeout}")
        if not self.attachment_root_prefix.strip("/"):
            raise MailConfigurationError("attachment_root_prefix must name a directory")

        # Stored in header-safe ASCII form (IDNA domains)
        for name in ("address", "reply_to", "bcc_address"):
            value = getattr(self, name)
            if not value:
                continue
            try:
                object.__setattr__(self, name, normalize_address(value))
            except InvalidAddressError as e:
                raise MailConfigurationError(f"Sender setting '{name}' is invalid: {e.reason}") from e

    @property
    def host_port(self) -> str:
        """Return ``host:port`` as expected by the transport."""
        return f"{self.host}:{self.port}"

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SenderConfig:
        """Create a SenderConfig from a configuration mapping.

        Unknown keys are rejected so typos do not pass silently. ``port`` and
        ``timeout`` may be strings (as produced by environment expansion).

        Args:
            data: Mapping with SenderConfig field names as keys.

        Returns:
            Validated SenderConfig.

        Raises:
            MailConfigurationError: If keys are unknown or values invalid.
        """
        unknown = set(data) - _SENDER_KEYS
        if unknown:
            raise MailConfigurationError(f"Unknown sender settings: {', '.join(sorted(unknown))}")
        if "address" not in data:
            raise MailConfigurationError("Sender setting 'address' is required")

        values: dict[str, Any] = {k: ("" if v is None else v) for k, v in data.items()}
        try:
            if "port" in values:
                values["port"] = int(values["port"])
            if "timeout" in values:
                values["timeout"] = float(values["timeout"])
        except (TypeError, ValueError) as e:
            raise MailConfigurationError(f"Invalid numeric sender setting: {e}") from e

        for key in _SENDER_KEYS - {"port", "timeout"}:
            if key in values:
                values[key] = str(values[key])
        return cls(**values)


@dataclass(frozen=True, slots=True)
class OutgoingEmail:
    """Content and recipients of a single message.

    Attributes:
        subject: Subject line (any UTF-8 text).
        plain_body: Plain-text body, empty for none.
        html_body: HTML body, empty for none.
        attachment_path: Path of the file to attach, empty for none.
        recipients: Ordered ``To`` addresses.
    """

    subject: str
    plain_body: str = ""
    html_body: str = ""
    attachment_path: str = ""
    recipients: tuple[str, ...] = ()

    @classmethod
    def create(
        cls,
        subject: str,
        plain_body: str | None = None,
        html_body: str | None = None,
        attachment_path: str | None = None,
        recipients: Sequence[str] = (),
    ) -> OutgoingEmail:
        """Normalise ``None`` values to empty strings and freeze the recipients."""
        if isinstance(recipients, str):
            recipients = (recipients,)
        return cls(
            subject=subject or "",
            plain_body=plain_body or "",
            html_body=html_body or "",
            attachment_path=attachment_path or "",
            recipients=tuple(recipients),
        )


@dataclass(frozen=True, slots=True)
class SendResult:
    """Outcome of :meth:`smtpmail.mail.dispatcher.Dispatcher.send`.

    Attributes:
        ok: True when the transport accepted the message.
        error: The failure, if any.
        recipients: Envelope recipients handed (or about to be handed) to the transport.
    """

    ok: bool
    error: MailError | None = None
    recipients: tuple[str, ...] = ()

    @property
    def kind(self) -> ErrorKind | None:
        """Return the :class:`ErrorKind` of the failure, or None on success."""
        return self.error.kind if self.error is not None else None

    @property
    def retryable(self) -> bool:
        """Return True when the failure is worth retrying later."""
        return self.error is not None and self.error.kind.retryable

    def __bool__(self) -> bool:
        """Return the success flag."""
        return self.ok


__all__ = [
    "DEFAULT_SMTP_PORT",
    "DEFAULT_TIMEOUT",
    "OutgoingEmail",
    "SendResult",
    "SenderConfig",
]
