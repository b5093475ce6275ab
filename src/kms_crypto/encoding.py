"""Base64 transcoding for ciphertext carried as text."""
from __future__ import annotations

import base64


def b64e(data: bytes) -> str:
    """Standard base64 encode with padding"""
    return base64.b64encode(data).decode("ascii")


def b64d(value: str) -> bytes:
    """Strict standard base64 decode.

    Line breaks are skipped, so text read from a file with a trailing
    newline still decodes. Any other character outside the standard
    alphabet, bad padding, or non-ASCII input raises ``ValueError``.
    """
    compact = value.replace("\r", "").replace("\n", "")
    return base64.b64decode(compact.encode("ascii"), validate=True)


__all__ = ["b64e", "b64d"]
