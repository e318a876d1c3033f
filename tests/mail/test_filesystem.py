"""Tests for the attachment path guard and file readers."""

from __future__ import annotations

from pathlib import Path

import pytest

from smtpmail.mail.exceptions import ErrorKind, InvalidAttachmentPathError
from smtpmail.mail.filesystem import FileReader, LocalFileReader, ensure_under_prefix, required_prefix


class TestRequiredPrefix:
    """Tests for prefix normalisation."""

    @pytest.mark.parametrize(
        ("root", "expected"),
        [
            ("storage", "storage/"),
            ("storage/", "storage/"),
            ("storage//", "storage/"),
            ("/srv/mail", "/srv/mail/"),
        ],
    )
    def test_trailing_slash(self, root: str, expected: str) -> None:
        """Exactly one trailing slash is appended."""
        assert required_prefix(root) == expected


class TestEnsureUnderPrefix:
    """Tests for the attachment root check."""

    @pytest.mark.parametrize(
        "path",
        [
            "storage/report.pdf",
            "storage/nested/dir/file.txt",
            "storage/./file.txt",
            "storage/a/../file.txt",
        ],
    )
    def test_accepts_paths_below_root(self, path: str) -> None:
        """Paths inside the root pass unchanged."""
        assert ensure_under_prefix(path, "storage") == path

    @pytest.mark.parametrize(
        "path",
        [
            "/etc/passwd",
            "storage",
            "storagefile.txt",
            "storage-old/file.txt",
            "./storage/file.txt",
            "Storage/file.txt",
        ],
    )
    def test_rejects_paths_without_prefix(self, path: str) -> None:
        """The raw string must start with ``<prefix>/``."""
        with pytest.raises(InvalidAttachmentPathError) as excinfo:
            ensure_under_prefix(path, "storage")

        assert excinfo.value.path == path
        assert excinfo.value.prefix == "storage/"
        assert excinfo.value.kind is ErrorKind.INVALID_ATTACHMENT_PATH
        assert "Attachment path must start with: storage/" in str(excinfo.value)

    @pytest.mark.parametrize("path", ["storage/../secret.txt", "storage/a/../../etc/passwd", "storage/.."])
    def test_rejects_traversal(self, path: str) -> None:
        """Normalised paths escaping the root are rejected."""
        with pytest.raises(InvalidAttachmentPathError):
            ensure_under_prefix(path, "storage")

    def test_prefix_with_trailing_slash(self) -> None:
        """A configured trailing slash makes no difference."""
        assert ensure_under_prefix("storage/file.txt", "storage/") == "storage/file.txt"
        with pytest.raises(InvalidAttachmentPathError):
            ensure_under_prefix("storagefile.txt", "storage/")

    @pytest.mark.parametrize("path", ["./report.pdf", "./nested/file.txt", "./a/../r.txt", "././r.txt"])
    def test_current_directory_prefix_accepts(self, path: str) -> None:
        """A root of ``.`` allows paths written as ``./name``."""
        assert ensure_under_prefix(path, ".") == path

    @pytest.mark.parametrize("path", ["./", "./.", "./../x.txt", "./a/../../x.txt", "report.pdf", "/report.pdf"])
    def test_current_directory_prefix_rejects(self, path: str) -> None:
        """A root of ``.`` still refuses escapes and the root itself."""
        with pytest.raises(InvalidAttachmentPathError):
            ensure_under_prefix(path, ".")

    def test_parent_relative_prefix(self) -> None:
        """Roots starting with ``..`` compare segment by segment."""
        assert ensure_under_prefix("../shared/x.txt", "../shared") == "../shared/x.txt"
        with pytest.raises(InvalidAttachmentPathError):
            ensure_under_prefix("../shared/../x.txt", "../shared")

    def test_absolute_prefix(self) -> None:
        """Absolute roots work the same way."""
        assert ensure_under_prefix("/srv/mail/out.csv", "/srv/mail") == "/srv/mail/out.csv"
        with pytest.raises(InvalidAttachmentPathError):
            ensure_under_prefix("/srv/mailbox/out.csv", "/srv/mail")


class TestLocalFileReader:
    """Tests for the disk reader."""

    def test_reads_bytes(self, tmp_path: Path) -> None:
        """File content is returned verbatim."""
        target = tmp_path / "data.bin"
        target.write_bytes(b"\x00\x01payload")
        assert LocalFileReader().read_bytes(str(target)) == b"\x00\x01payload"

    def test_missing_file_raises_oserror(self, tmp_path: Path) -> None:
        """Missing files propagate as FileNotFoundError."""
        with pytest.raises(FileNotFoundError):
            LocalFileReader().read_bytes(str(tmp_path / "missing"))

    def test_satisfies_protocol(self) -> None:
        """LocalFileReader is a FileReader."""
        assert isinstance(LocalFileReader(), FileReader)
