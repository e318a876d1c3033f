"""Build or send a message from the command line."""

from __future__ import annotations

from pathlib import Path

import typer

from smtpmail.cli.common import console, exit_error
from smtpmail.config import ConfigError
from smtpmail.logging import init_logging
from smtpmail.mail import Dispatcher, MailConfigurationError, MailError, MessageBuilder, OutgoingEmail

CONFIG_OPTION = typer.Option(
    ...,
    "--config",
    "-c",
    help="YAML file with the mail.sender (and optional mail.security) section.",
)
TO_OPTION = typer.Option(..., "--to", "-t", help="Recipient address (repeat for several).")
SUBJECT_OPTION = typer.Option("", "--subject", "-s", help="Subject line.")
TEXT_OPTION = typer.Option(None, "--text", help="Plain-text body.")
TEXT_FILE_OPTION = typer.Option(None, "--text-file", help="Read the plain-text body from a file.")
HTML_OPTION = typer.Option(None, "--html", help="HTML body.")
HTML_FILE_OPTION = typer.Option(None, "--html-file", help="Read the HTML body from a file.")
ATTACH_OPTION = typer.Option(None, "--attach", "-a", help="File to attach (must be under the attachment root).")
VERBOSE_OPTION = typer.Option(False, "--verbose", "-v", help="Log the SMTP dialogue (TRACE level).")


def _read_body(inline: str | None, path: Path | None, label: str) -> str:
    """Return the body given inline or from a file (not both)."""
    if inline is not None and path is not None:
        exit_error(f"Use either --{label} or --{label}-file, not both.")
    if path is None:
        return inline or ""
    try:
        return path.read_text(encoding="utf-8")
    except OSError as e:
        exit_error(f"Cannot read {label} body from {path}: {e}")


def _load_dispatcher(config: Path) -> Dispatcher:
    try:
        return Dispatcher.from_config(config)
    except (ConfigError, MailConfigurationError) as e:
        exit_error(f"Invalid configuration: {e}", code=2)


def send(
    config: Path = CONFIG_OPTION,
    to: list[str] = TO_OPTION,
    subject: str = SUBJECT_OPTION,
    text: str | None = TEXT_OPTION,
    text_file: Path | None = TEXT_FILE_OPTION,
    html: str | None = HTML_OPTION,
    html_file: Path | None = HTML_FILE_OPTION,
    attach: str | None = ATTACH_OPTION,
    verbose: bool = VERBOSE_OPTION,
) -> None:
    """Build a message and deliver it through the configured SMTP server.

    Exit codes: 0 (sent), 1 (build or delivery failed), 2 (bad configuration).
    """
    # Errors reach the user through exit_error only
    init_logging("TRACE" if verbose else "CRITICAL")
    plain_body = _read_body(text, text_file, "text")
    html_body = _read_body(html, html_file, "html")

    dispatcher = _load_dispatcher(config)
    result = dispatcher.send(subject, plain_body, html_body, attach, to)

    if not result:
        kind = result.kind.value if result.kind is not None else "unknown"
        exit_error(f"Send failed ({kind}): {result.error}")

    console.print(f"[green]Sent[/] to {len(result.recipients)} recipient(s)")


def build(
    config: Path = CONFIG_OPTION,
    to: list[str] = TO_OPTION,
    subject: str = SUBJECT_OPTION,
    text: str | None = TEXT_OPTION,
    text_file: Path | None = TEXT_FILE_OPTION,
    html: str | None = HTML_OPTION,
    html_file: Path | None = HTML_FILE_OPTION,
    attach: str | None = ATTACH_OPTION,
) -> None:
    """Print the raw MIME message to stdout without sending it."""
    plain_body = _read_body(text, text_file, "text")
    html_body = _read_body(html, html_file, "html")

    dispatcher = _load_dispatcher(config)
    email = OutgoingEmail.create(subject, plain_body, html_body, attach, to)
    try:
        raw = MessageBuilder(dispatcher.config).build(email)
    except MailError as e:
        exit_error(f"Build failed ({e.kind.value}): {e}")

    typer.echo(raw.decode("utf-8", errors="replace"), nl=False)


__all__ = ["build", "send"]
