"""Build a message with both bodies and an attachment, then print it."""

from __future__ import annotations

from pathlib import Path
from tempfile import TemporaryDirectory

from smtpmail.mail import MessageBuilder, OutgoingEmail, SenderConfig


def build_message_with_attachment() -> None:
    """Create a multipart/alternative message with a text attachment."""
    with TemporaryDirectory() as tmp_dir:
        storage = Path(tmp_dir) / "storage"
        storage.mkdir()
        report_path = storage / "daily-report.txt"
        report_path.write_text("Daily metrics: 42 conversions", encoding="utf-8")

        config = SenderConfig(
            address="sender@example.com",
            host="smtp.example.com",
            display_name="Reporting Bot",
            reply_to="ops@example.com",
            attachment_root_prefix=str(storage),
        )
        raw = MessageBuilder(config).build(
            OutgoingEmail(
                subject="Daily metrics report",
                plain_body="Please find the report attached.",
                html_body="<p>Please find the report <b>attached</b>.</p>",
                attachment_path=str(report_path),
                recipients=("ops@example.com",),
            )
        )

        print(raw.decode("ascii"))


if __name__ == "__main__":  # pragma: no cover - manual example
    build_message_with_attachment()
