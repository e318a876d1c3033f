"""Attachment path guard and file reading for the mail builder.

Attachments are only read from below a configured root prefix. The check is
a string-level prefix test on the path as given, followed by a segment-wise
comparison of the normalised path so that ``storage/../etc/passwd`` is
rejected as well.
"""

from __future__ import annotations

import posixpath
from pathlib import Path
from typing import Protocol, runtime_checkable

from smtpmail.mail.exceptions import InvalidAttachmentPathError


@runtime_checkable
class FileReader(Protocol):
    """Source of attachment bytes.

    Examples:
        >>> class MemoryReader:
        ...     def read_bytes(self, path: str) -> bytes:
        ...         return b"data"
        >>> isinstance(MemoryReader(), FileReader)
        True
    """

    def read_bytes(self, path: str) -> bytes:
        """Return the full content of *path*.

        Raises:
            OSError: If the file cannot be read.
        """
        ...


class LocalFileReader:
    """Read attachments from the local filesystem."""

    def read_bytes(self, path: str) -> bytes:
        """Return the content of *path* from disk."""
        return Path(path).read_bytes()


def required_prefix(root_prefix: str) -> str:
    """Return the prefix an attachment path must start with.

    Examples:
        >>> required_prefix("storage")
        'storage/'
        >>> required_prefix("/srv/mail/")
        '/srv/mail/'
    """
    return root_prefix.rstrip("/") + "/"


def _segments(path: str) -> tuple[bool, list[str]]:
    """Return whether *path* is absolute and its normalised segments.

    Examples:
        >>> _segments("./storage/a/../b.txt")
        (False, ['storage', 'b.txt'])
        >>> _segments(".")
        (False, [])
    """
    normalized = posixpath.normpath(path)
    parts = [part for part in normalized.split("/") if part not in ("", ".")]
    return normalized.startswith("/"), parts


def ensure_under_prefix(path: str, root_prefix: str) -> str:
    """Check that *path* lives under *root_prefix*.

    The raw path must start with ``<root_prefix>/``. Its normalised segments
    must then begin with the prefix segments and name something below them,
    so ``..`` cannot climb out of the root.

    Args:
        path: Attachment path as supplied by the caller.
        root_prefix: Configured attachment root (with or without trailing slash).

    Returns:
        The path, unchanged.

    Raises:
        InvalidAttachmentPathError: If the path, raw or normalised, is not
            below ``<root_prefix>/``.

    Examples:
        >>> ensure_under_prefix("storage/report.pdf", "storage")
        'storage/report.pdf'
        >>> ensure_under_prefix("./report.pdf", ".")
        './report.pdf'
        >>> ensure_under_prefix("storage/../secret.txt", "storage")
        Traceback (most recent call last):
        ...
        smtpmail.mail.exceptions.InvalidAttachmentPathError: Attachment path must start with: storage/ (got 'storage/../secret.txt')
    """
    prefix = required_prefix(root_prefix)
    if not path.startswith(prefix):
        raise InvalidAttachmentPathError(path, prefix)

    root_absolute, root_parts = _segments(prefix)
    path_absolute, path_parts = _segments(path)
    depth = len(root_parts)
    if (
        path_absolute != root_absolute
        or len(path_parts) <= depth
        or path_parts[:depth] != root_parts
        or ".." in path_parts[depth:]
    ):
        raise InvalidAttachmentPathError(path, prefix)
    return path


__all__ = [
    "FileReader",
    "LocalFileReader",
    "ensure_under_prefix",
    "required_prefix",
]
