"""Transport contract used by the dispatcher.

A transport receives a fully built message plus its SMTP envelope and is
responsible for the connection, the authentication handshake and the
delivery itself.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Sequence
from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class SMTPCredentials:
    """PLAIN-style SMTP credentials.

    Attributes:
        username: Login name, usually the sender address.
        password: Secret (hidden from ``repr``).
        identity: Authorization identity, empty to act as *username*.
    """

    username: str
    password: str = field(default="", repr=False)
    identity: str = ""


class MailTransport(ABC):
    """Abstract synchronous mail transport."""

    @abstractmethod
    def send(
        self,
        host_port: str,
        credentials: SMTPCredentials,
        from_address: str,
        recipients: Sequence[str],
        raw_message: bytes,
    ) -> None:
        """Deliver *raw_message* to *recipients*.

        Args:
            host_port: Server address as ``host:port``.
            credentials: Authentication credentials.
            from_address: Envelope sender (``MAIL FROM``).
            recipients: Envelope recipients (``RCPT TO``), BCC included.
            raw_message: Message bytes, sent unmodified.

        Raises:
            MailTransportError: If delivery fails.
        """


def split_host_port(host_port: str) -> tuple[str, int]:
    """Split ``host:port`` into its parts.

    Raises:
        ValueError: If the port is missing or not numeric.

    Examples:
        >>> split_host_port("smtp.example.com:587")
        ('smtp.example.com', 587)
        >>> split_host_port("[::1]:25")
        ('::1', 25)
    """
    host, sep, port = host_port.rpartition(":")
    if not sep or not host or not port.isdigit():
        raise ValueError(f"Expected host:port, got {host_port!r}")
    return host.strip("[]"), int(port)


__all__ = [
    "MailTransport",
    "SMTPCredentials",
    "split_host_port",
]
