"""Shared pytest fixtures for the smtpmail test suite."""

from __future__ import annotations

# Disable Rich colors and force wide terminal BEFORE any imports
# Rich checks these at import time
import os

os.environ["NO_COLOR"] = "1"
os.environ["TERM"] = "dumb"
os.environ["COLUMNS"] = "200"

import email
from collections.abc import Callable, Sequence
from email.message import Message
from pathlib import Path

import pytest

from smtpmail.mail.models import SenderConfig
from smtpmail.mail.transport import MailTransport, SMTPCredentials

# pylint: disable=redefined-outer-name


class RecordingTransport(MailTransport):
    """In-memory transport capturing every call for assertions."""

    def __init__(self, error: Exception | None = None) -> None:
        self.calls: list[dict[str, object]] = []
        self._error = error

    def send(
        self,
        host_port: str,
        credentials: SMTPCredentials,
        from_address: str,
        recipients: Sequence[str],
        raw_message: bytes,
    ) -> None:
        """Record the call, then raise the configured error if any."""
        self.calls.append(
            {
                "host_port": host_port,
                "credentials": credentials,
                "from_address": from_address,
                "recipients": list(recipients),
                "raw_message": raw_message,
            }
        )
        if self._error is not None:
            raise self._error


@pytest.fixture
def storage_root(tmp_path: Path) -> Path:
    """Return an existing attachment root inside the temporary workspace."""
    root = tmp_path / "storage"
    root.mkdir()
    return root


@pytest.fixture
def sender_config(storage_root: Path) -> SenderConfig:
    """Provide a complete sender configuration rooted in ``storage_root``."""
    return SenderConfig(
        address="noreply@example.com",
        password="s3cret",
        host="smtp.example.com",
        port=587,
        display_name="Example Sender",
        reply_to="support@example.com",
        attachment_root_prefix=str(storage_root),
    )


@pytest.fixture
def recording_transport() -> RecordingTransport:
    """Provide a transport that records instead of sending."""
    return RecordingTransport()


@pytest.fixture
def parse_message() -> Callable[[bytes], Message]:
    """Return a helper parsing raw bytes back into a message tree."""

    def _parse(raw: bytes) -> Message:
        return email.message_from_bytes(raw)

    return _parse


@pytest.fixture
def transport_factory() -> Callable[..., RecordingTransport]:
    """Return the recording transport class, for tests needing a failing instance."""
    return RecordingTransport
