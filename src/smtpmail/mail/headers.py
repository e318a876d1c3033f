"""Header value helpers: RFC 2047 encoded words and multipart boundaries."""

from __future__ import annotations

import base64
import secrets
from collections.abc import Iterable

from smtpmail.mail.exceptions import InvalidAddressError

_WORD_PREFIX = "=?UTF-8?B?"
_WORD_SUFFIX = "?="

# 45 raw bytes -> 60 base64 chars -> 72 chars per encoded word (RFC 2047 caps it at 75)
_MAX_WORD_BYTES = 45

# 30 random bytes rendered as hex, 60 chars (RFC 2046 allows up to 70)
_BOUNDARY_BYTES = 30


def _chunk_utf8(text: str, limit: int) -> Iterable[bytes]:
    """Yield UTF-8 chunks of at most *limit* bytes without splitting a character."""
    chunk = b""
    for char in text:
        encoded = char.encode("utf-8")
        if chunk and len(chunk) + len(encoded) > limit:
            yield chunk
            chunk = b""
        chunk += encoded
    if chunk:
        yield chunk


def encode_word(text: str) -> str:
    """Encode *text* as one or more RFC 2047 ``B`` encoded words.

    Long values are split into several words separated by a space; decoders
    drop that space and join the words back together.

    Examples:
        >>> encode_word("Hello")
        '=?UTF-8?B?SGVsbG8=?='
        >>> encode_word("")
        ''
    """
    return " ".join(
        f"{_WORD_PREFIX}{base64.b64encode(chunk).decode('ascii')}{_WORD_SUFFIX}"
        for chunk in _chunk_utf8(text, _MAX_WORD_BYTES)
    )


def normalize_address(address: str) -> str:
    """Return *address* in the ASCII form used for headers and the SMTP envelope.

    Internationalised domains are IDNA encoded. Line breaks and non-ASCII
    local parts (which would need SMTPUTF8) are rejected.

    Raises:
        InvalidAddressError: If the address cannot be written safely.

    Examples:
        >>> normalize_address("a@x.com")
        'a@x.com'
        >>> normalize_address("joe@exämple.com")
        'joe@xn--exmple-cua.com'
    """
    if "\r" in address or "\n" in address:
        raise InvalidAddressError(address, "contains a line break")
    if address.isascii():
        return address

    local, sep, domain = address.rpartition("@")
    if not sep or not local.isascii():
        raise InvalidAddressError(address, "non-ASCII local part requires SMTPUTF8")
    try:
        ascii_domain = domain.encode("idna").decode("ascii")
    except UnicodeError as e:
        raise InvalidAddressError(address, f"domain cannot be IDNA encoded ({e})") from e
    return f"{local}@{ascii_domain}"


def format_sender(display_name: str, address: str) -> str:
    """Return the ``From`` header value.

    Examples:
        >>> format_sender("", "noreply@example.com")
        'noreply@example.com'
        >>> format_sender("Ops", "ops@example.com")
        '=?UTF-8?B?T3Bz?= <ops@example.com>'
    """
    if not display_name:
        return address
    return f"{encode_word(display_name)} <{address}>"


def format_recipients(recipients: Iterable[str]) -> str:
    """Join addresses for the ``To`` header."""
    return ", ".join(recipients)


def make_boundary() -> str:
    """Return a fresh random multipart boundary token."""
    return secrets.token_hex(_BOUNDARY_BYTES)


__all__ = [
    "encode_word",
    "format_recipients",
    "format_sender",
    "make_boundary",
    "normalize_address",
]
