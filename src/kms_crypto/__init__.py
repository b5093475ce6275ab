"""Envelope encryption through Google Cloud KMS."""
from .exceptions import (
    EncodingError,
    ErrorKind,
    KmsConnectionError,
    KmsCryptoError,
    RemoteServiceError,
)
from .keys import DEFAULT_LOCATION, KeyReference, build_key_name
from .logging import configure_logging
from .service import AsyncKeyCryptoService, KeyCryptoService, new_async_service, new_service
from .version import __version__

__all__ = [
    "__version__",
    "AsyncKeyCryptoService",
    "DEFAULT_LOCATION",
    "EncodingError",
    "ErrorKind",
    "KeyCryptoService",
    "KeyReference",
    "KmsConnectionError",
    "KmsCryptoError",
    "RemoteServiceError",
    "build_key_name",
    "configure_logging",
    "new_async_service",
    "new_service",
]
