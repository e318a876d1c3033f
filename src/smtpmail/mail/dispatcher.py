"""Send orchestration: build the message, then hand it to the transport.

The dispatcher owns an immutable :class:`SenderConfig`, so a single instance
may be shared by threads sending concurrently. Failures never raise out of
:meth:`Dispatcher.send`; they come back as a falsy :class:`SendResult`
carrying the error and its :class:`ErrorKind`.

Examples:
    >>> dispatcher = Dispatcher.from_config("smtpmail.yml")  # doctest: +SKIP
    >>> result = dispatcher.send("Hello", "Hi there", "", "", ["a@x.com"])  # doctest: +SKIP
    >>> bool(result)  # doctest: +SKIP
    True
"""

from __future__ import annotations

import logging
import smtplib
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from smtpmail.config import load_config, load_from_mapping
from smtpmail.mail.builder import MessageBuilder
from smtpmail.mail.exceptions import MailConfigurationError, MailError, MailTransportError
from smtpmail.mail.filesystem import FileReader
from smtpmail.mail.headers import normalize_address
from smtpmail.mail.models import OutgoingEmail, SenderConfig, SendResult
from smtpmail.mail.transport import MailTransport, SMTPCredentials
from smtpmail.mail.transports.smtp import SMTPSecurity, SMTPTransport

log = logging.getLogger(__name__)

_SECURITY_KEYS = frozenset({"use_ssl", "use_starttls", "verify_certificates"})


def _sender_section(data: Mapping[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split a config tree into its sender and security sections.

    Accepts ``{mail: {sender: {...}, security: {...}}}``, ``{sender: ..., security: ...}``
    or a flat sender mapping with an optional ``security`` key.
    """
    mail = data.get("mail", data)
    if not isinstance(mail, Mapping):
        raise MailConfigurationError("'mail' section must be a mapping")

    security = mail.get("security") or {}
    if not isinstance(security, Mapping):
        raise MailConfigurationError("'security' section must be a mapping")

    sender = mail.get("sender")
    if sender is None:
        sender = {k: v for k, v in mail.items() if k != "security"}
    if not isinstance(sender, Mapping):
        raise MailConfigurationError("'sender' section must be a mapping")
    return dict(sender), dict(security)


def _security_from_mapping(data: Mapping[str, Any]) -> SMTPSecurity:
    unknown = set(data) - _SECURITY_KEYS
    if unknown:
        raise MailConfigurationError(f"Unknown security settings: {', '.join(sorted(unknown))}")
    return SMTPSecurity(**{k: bool(v) for k, v in data.items()})


class Dispatcher:
    """Build and send messages for one sender configuration.

    Args:
        config: Sender identity, server and attachment settings.
        transport: Delivery backend (an :class:`SMTPTransport` by default).
        reader: Source of attachment bytes (local disk by default).

    Examples:
        >>> config = SenderConfig(address="noreply@example.com", host="smtp.example.com")
        >>> Dispatcher(config).config.host_port
        'smtp.example.com:587'
    """

    def __init__(
        self,
        config: SenderConfig,
        *,
        transport: MailTransport | None = None,
        reader: FileReader | None = None,
    ) -> None:
        """Initialize Dispatcher."""
        self._config = config
        self._transport = transport if transport is not None else SMTPTransport(timeout=config.timeout)
        self._builder = MessageBuilder(config, reader=reader)

    @property
    def config(self) -> SenderConfig:
        """Return the sender configuration."""
        return self._config

    @property
    def transport(self) -> MailTransport:
        """Return the delivery backend."""
        return self._transport

    @classmethod
    def from_config(
        cls,
        source: str | Path | Mapping[str, Any],
        *,
        transport: MailTransport | None = None,
        reader: FileReader | None = None,
    ) -> Dispatcher:
        """Create a Dispatcher from a YAML file or a mapping.

        Args:
            source: Path to a YAML file, or an already loaded mapping.
            transport: Delivery backend; built from the ``security`` section when omitted.
            reader: Source of attachment bytes.

        Returns:
            Configured Dispatcher.

        Raises:
            ConfigError: If the file cannot be loaded.
            MailConfigurationError: If the sender settings are invalid.
        """
        data = load_from_mapping(dict(source)) if isinstance(source, Mapping) else load_config(source)
        sender_data, security_data = _sender_section(data)
        config = SenderConfig.from_mapping(sender_data)
        if transport is None:
            transport = SMTPTransport(security=_security_from_mapping(security_data), timeout=config.timeout)
        return cls(config, transport=transport, reader=reader)

    def envelope_recipients(self, recipients: Sequence[str]) -> tuple[str, ...]:
        """Return the delivery recipients: *recipients* plus the BCC address, if any.

        Addresses are normalised the same way as the ``To`` header.

        Raises:
            InvalidAddressError: If a recipient cannot be normalised.

        Examples:
            >>> config = SenderConfig(address="me@example.com", bcc_address="bcc@x.com")
            >>> Dispatcher(config).envelope_recipients(["a@x.com"])
            ('a@x.com', 'bcc@x.com')
        """
        return self._with_bcc(tuple(normalize_address(address) for address in recipients))

    def _with_bcc(self, recipients: tuple[str, ...]) -> tuple[str, ...]:
        if self._config.bcc_address:
            return (*recipients, self._config.bcc_address)
        return recipients

    def credentials(self) -> SMTPCredentials:
        """Return PLAIN credentials for the configured sender."""
        return SMTPCredentials(username=self._config.address, password=self._config.password)

    def send(
        self,
        subject: str,
        plain_body: str | None,
        html_body: str | None,
        attachment_path: str | None,
        recipients: Sequence[str],
    ) -> SendResult:
        """Build the message and deliver it once.

        The ``To`` header lists *recipients* only; the transport envelope also
        carries the configured BCC address. Nothing is sent when the build
        fails, and failed deliveries are not retried.

        Args:
            subject: Subject line.
            plain_body: Plain-text body (empty or None for none).
            html_body: HTML body (empty or None for none).
            attachment_path: File to attach (empty or None for none).
            recipients: ``To`` addresses.

        Returns:
            SendResult, truthy when the transport accepted the message.
        """
        email = OutgoingEmail.create(subject, plain_body, html_body, attachment_path, recipients)
        try:
            raw_message = self._builder.build(email)
            envelope = self.envelope_recipients(email.recipients)
        except MailError as e:
            log.error("Error creating message (%s): %s", e.kind.value, e)
            return SendResult(ok=False, error=e, recipients=self._with_bcc(email.recipients))

        try:
            self._transport.send(
                self._config.host_port,
                self.credentials(),
                self._config.address,
                envelope,
                raw_message,
            )
        except MailTransportError as e:
            log.error("Error sending email: %s", e)
            return SendResult(ok=False, error=e, recipients=envelope)
        except (smtplib.SMTPException, OSError) as e:
            error = MailTransportError(str(e))
            error.__cause__ = e
            log.error("Error sending email: %s", error)
            return SendResult(ok=False, error=error, recipients=envelope)

        log.info("Email sent to %d recipient(s) via %s", len(envelope), self._config.host_port)
        return SendResult(ok=True, recipients=envelope)


__all__ = [
    "Dispatcher",
]
