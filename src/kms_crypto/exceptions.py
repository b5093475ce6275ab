"""Central exception hierarchy for KMS crypto operations."""
from __future__ import annotations

import enum


class ErrorKind(str, enum.Enum):
    CONNECTION = "connection"
    ENCODING = "encoding"
    REMOTE = "remote"


class KmsCryptoError(Exception):
    """Base exception for all failures.

    Messages name the failed operation and the key resource name only;
    plaintext and ciphertext values are never embedded.
    """

    kind: ErrorKind

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        key: str | None = None,
        cause: BaseException | None = None,
    ) -> None:
        super().__init__(message)
        self.operation = operation
        self.key = key
        self.cause = cause


class KmsConnectionError(KmsCryptoError):
    """Raised when the KMS client session cannot be established"""

    kind = ErrorKind.CONNECTION


class EncodingError(KmsCryptoError):
    """Raised for malformed base64 input or undecodable plaintext"""

    kind = ErrorKind.ENCODING


class RemoteServiceError(KmsCryptoError):
    """Raised when the KMS endpoint rejects or fails a request"""

    kind = ErrorKind.REMOTE

    def __init__(
        self,
        message: str,
        *,
        operation: str | None = None,
        key: str | None = None,
        cause: BaseException | None = None,
        cancelled: bool = False,
        status: str | None = None,
    ) -> None:
        super().__init__(message, operation=operation, key=key, cause=cause)
        self.cancelled = cancelled
        self.status = status


__all__ = [
    "ErrorKind",
    "KmsCryptoError",
    "KmsConnectionError",
    "EncodingError",
    "RemoteServiceError",
]
