"""SMTP transport built on :mod:`smtplib`.

Opens one connection per message: EHLO, opportunistic STARTTLS, PLAIN style
login, then ``sendmail`` with the raw bytes and the full envelope.

When TRACE logging is enabled, the smtplib protocol dialogue and the
negotiated TLS parameters are logged under ``smtpmail.mail.transports.smtp``.
Capturing the dialogue redirects ``sys.stderr``, so traced sends run one at
a time.

Examples:
    >>> from smtpmail.mail.transport import SMTPCredentials
    >>> transport = SMTPTransport(timeout=10.0)
    >>> transport.send(  # doctest: +SKIP
    ...     "smtp.example.com:587",
    ...     SMTPCredentials("me@example.com", "secret"),
    ...     "me@example.com",
    ...     ["you@example.com"],
    ...     raw_message,
    ... )
"""

from __future__ import annotations

import contextlib
import io
import logging
import smtplib
import ssl
import sys
import threading
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Any

from smtpmail.logging import TRACE_LEVEL
from smtpmail.mail.exceptions import MailConfigurationError, MailTransportError
from smtpmail.mail.transport import MailTransport, SMTPCredentials, split_host_port

log = logging.getLogger(__name__)

# sys.stderr is process-wide; traced sessions take turns while it is redirected
_DEBUG_CAPTURE_LOCK = threading.Lock()


@dataclass(frozen=True, slots=True)
class SMTPSecurity:
    """Connection security options.

    Attributes:
        use_ssl: Connect with implicit TLS (``SMTP_SSL``, usually port 465).
        use_starttls: Upgrade with STARTTLS when the server offers it.
        verify_certificates: Verify the server certificate chain and host name.
    """

    use_ssl: bool = False
    use_starttls: bool = True
    verify_certificates: bool = True

    def ssl_context(self) -> ssl.SSLContext:
        """Return the TLS context for SSL or STARTTLS connections."""
        context = ssl.create_default_context()
        if not self.verify_certificates:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE
        return context


@contextlib.contextmanager
def _capture_smtp_debug() -> Iterator[io.StringIO]:
    """Redirect stderr (where smtplib prints its debug output) into a buffer.

    Only one capture is active at a time, so concurrent traced sends are
    serialised. Anything else written to stderr meanwhile lands in the buffer.
    """
    with _DEBUG_CAPTURE_LOCK:
        buffer = io.StringIO()
        original = sys.stderr
        sys.stderr = buffer
        try:
            yield buffer
        finally:
            sys.stderr = original


def _log_smtp_debug_output(buffer: io.StringIO) -> None:
    """Log captured smtplib debug lines at TRACE level."""
    if not log.isEnabledFor(TRACE_LEVEL):
        return
    for raw_line in buffer.getvalue().splitlines():
        line = raw_line.strip()
        if not line:
            continue
        if line.startswith("send:"):
            log.log(TRACE_LEVEL, "[SMTP] >>> %s", line[5:].strip())
        elif line.startswith("reply:"):
            log.log(TRACE_LEVEL, "[SMTP] <<< %s", line[6:].strip())
        else:
            log.log(TRACE_LEVEL, "[SMTP] %s", line)


def _extract_ssl_info(sock: Any) -> dict[str, Any]:
    """Return TLS version and cipher details of *sock* (empty when not TLS)."""
    if sock is None or not hasattr(sock, "version"):
        return {}
    info: dict[str, Any] = {}
    try:
        info["version"] = sock.version() or "unknown"
    except (AttributeError, ValueError, OSError):
        info["version"] = "unknown"
    try:
        cipher = sock.cipher()
    except (AttributeError, ValueError, OSError):
        cipher = None
    if cipher:
        info["cipher_name"], info["cipher_protocol"], info["cipher_bits"] = cipher
    return info


class SMTPTransport(MailTransport):
    """Deliver messages through an SMTP server.

    Args:
        security: TLS options.
        timeout: Socket timeout in seconds.

    Raises:
        MailConfigurationError: If *timeout* is not positive.
    """

    def __init__(self, *, security: SMTPSecurity | None = None, timeout: float = 30.0) -> None:
        """Initialize SMTPTransport."""
        if timeout <= 0:
            raise MailConfigurationError("Timeout must be greater than 0")
        self._security = security or SMTPSecurity()
        self._timeout = timeout

    @property
    def security(self) -> SMTPSecurity:
        """Return the connection security options."""
        return self._security

    def send(
        self,
        host_port: str,
        credentials: SMTPCredentials,
        from_address: str,
        recipients: Sequence[str],
        raw_message: bytes,
    ) -> None:
        """Connect, authenticate and deliver *raw_message*.

        Raises:
            MailTransportError: On connection, TLS, authentication or
                delivery failure, including any refused recipient.
        """
        try:
            host, port = split_host_port(host_port)
        except ValueError as e:
            raise MailTransportError(str(e)) from e

        trace_enabled = log.isEnabledFor(TRACE_LEVEL)
        capture = _capture_smtp_debug() if trace_enabled else contextlib.nullcontext(None)

        with capture as buffer:
            try:
                self._deliver(host, port, credentials, from_address, list(recipients), raw_message, trace_enabled)
            except smtplib.SMTPException as e:
                raise MailTransportError(f"SMTP delivery to {host_port} failed: {e}") from e
            except OSError as e:
                raise MailTransportError(f"SMTP connection to {host_port} failed: {e}") from e
            except UnicodeError as e:
                raise MailTransportError(f"SMTP envelope for {host_port} is not ASCII: {e}") from e
            finally:
                if buffer is not None:
                    _log_smtp_debug_output(buffer)

    def _deliver(
        self,
        host: str,
        port: int,
        credentials: SMTPCredentials,
        from_address: str,
        recipients: list[str],
        raw_message: bytes,
        trace_enabled: bool,
    ) -> None:
        security = self._security
        if trace_enabled:
            log.log(TRACE_LEVEL, "[SMTP] Connecting to %s:%d (ssl=%s)", host, port, security.use_ssl)

        client: smtplib.SMTP
        if security.use_ssl:
            client = smtplib.SMTP_SSL(host=host, port=port, timeout=self._timeout, context=security.ssl_context())
        else:
            client = smtplib.SMTP(host=host, port=port, timeout=self._timeout)

        with client:
            if trace_enabled:
                client.set_debuglevel(1)
            client.ehlo()

            if security.use_ssl:
                if trace_enabled:
                    log.log(TRACE_LEVEL, "[SMTP] SSL: %s", _extract_ssl_info(getattr(client, "sock", None)))
            elif security.use_starttls and client.has_extn("STARTTLS"):
                client.starttls(context=security.ssl_context())
                client.ehlo()
                if trace_enabled:
                    log.log(TRACE_LEVEL, "[SMTP] STARTTLS upgraded")
                    log.log(TRACE_LEVEL, "[SMTP] TLS: %s", _extract_ssl_info(getattr(client, "sock", None)))

            if credentials.password:
                self._authenticate(client, credentials, trace_enabled)

            if trace_enabled:
                log.log(TRACE_LEVEL, "[SMTP] MAIL FROM: %s", from_address)
                log.log(TRACE_LEVEL, "[SMTP] RCPT TO: %s", ", ".join(recipients))

            refused = client.sendmail(from_address, recipients, raw_message)
            if refused:
                rejected = ", ".join(f"{addr} ({code})" for addr, (code, _msg) in refused.items())
                raise MailTransportError(f"Recipients refused: {rejected}")

            if trace_enabled:
                log.log(TRACE_LEVEL, "[SMTP] Message sent successfully")

    @staticmethod
    def _authenticate(client: smtplib.SMTP, credentials: SMTPCredentials, trace_enabled: bool) -> None:
        """Log in; an explicit identity forces AUTH PLAIN with an authzid."""
        if trace_enabled:
            log.log(TRACE_LEVEL, "[SMTP] Authenticating as: %s", credentials.username)

        if credentials.identity:
            token = f"{credentials.identity}\0{credentials.username}\0{credentials.password}"
            client.auth("PLAIN", lambda challenge=None: token)
        else:
            client.login(credentials.username, credentials.password)

        if trace_enabled:
            log.log(TRACE_LEVEL, "[SMTP] Authentication successful")


__all__ = [
    "SMTPSecurity",
    "SMTPTransport",
]
