"""
Secret-derived output addresses for notes.

A note is published under a directory named by a short hash of its file
stem and the site secret, so URLs can't be guessed from note names.
"""

from __future__ import annotations

import base64
import hashlib

# Nominal hash bytes kept for an address (see derive_address for the
# byte that actually gets dropped).
FILENAME_BYTES = 8

_RFC4648_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"
_CROCKFORD_ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
_TO_CROCKFORD = str.maketrans(_RFC4648_ALPHABET, _CROCKFORD_ALPHABET)


def crockford_b32encode(data: bytes) -> str:
    """Base-32 encode bytes with Crockford's alphabet, no padding."""
    encoded = base64.b32encode(data).decode("ascii").rstrip("=")
    return encoded.translate(_TO_CROCKFORD)


def lossy_utf8(text: str) -> bytes:
    """UTF-8 bytes of a file name, with undecodable bytes as U+FFFD."""
    raw = text.encode("utf-8", errors="surrogateescape")
    return raw.decode("utf-8", errors="replace").encode("utf-8")


def note_stem(name: str) -> str:
    """Return a filename without its last extension ("a.tar.md" -> "a.tar")."""
    if not name:
        raise ValueError("note has no file name")
    head, dot, _ = name.rpartition(".")
    return head if dot and head else name


def derive_address(stem: str, secret: str, truncate_bytes: int = FILENAME_BYTES) -> str:
    """Hash stem + secret into a lowercase Crockford base-32 token.

    Zero or more than the digest size uses the whole digest. The last
    byte of the truncated slice is dropped before encoding, so
    ``truncate_bytes=8`` yields 7 bytes of hash. Addresses already
    published depend on this. ``truncate_bytes=1`` would leave nothing
    to encode and raises ValueError.

    Undecodable bytes in a file name (surrogate escapes) hash as U+FFFD.
    """
    if truncate_bytes == 1:
        raise ValueError("truncate_bytes=1 leaves an empty address")

    h = hashlib.sha256()
    h.update(lossy_utf8(stem))
    h.update(secret.encode("utf-8"))
    digest = h.digest()

    # zero or too many => the whole hash
    trunc = len(digest) if truncate_bytes <= 0 or truncate_bytes > len(digest) else truncate_bytes
    return crockford_b32encode(digest[: trunc - 1]).lower()
