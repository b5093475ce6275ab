"""Encrypt and decrypt through a remote key-management service.

The services here hold no key material and no mutable state: every call is
one request to the injected backend, with standard base64 applied around
ciphertext bytes. Backends are shared by all callers, so a single service
instance may be used from many threads (``KeyCryptoService``) or many
coroutines (``AsyncKeyCryptoService``) at once.
"""
from __future__ import annotations

import asyncio
from typing import Optional

import structlog
from google.api_core.exceptions import Cancelled, DeadlineExceeded, GoogleAPIError, RetryError
from google.auth.exceptions import GoogleAuthError

from .backends.base import AsyncKmsBackend, KmsBackend
from .backends.gcp import AsyncGcpKmsBackend, GcpKmsBackend
from .config import AppConfig, KmsConfig, load_config
from .encoding import b64d, b64e
from .exceptions import EncodingError, RemoteServiceError
from .keys import KeyLike, build_key_name, key_name
from .logging import configure_logging

logger = structlog.get_logger(__name__)

_REMOTE_ERRORS = (GoogleAPIError, GoogleAuthError, TimeoutError, asyncio.TimeoutError)
# RetryError is raised only once the retry deadline has run out.
_CANCELLED_ERRORS = (Cancelled, DeadlineExceeded, RetryError, TimeoutError, asyncio.TimeoutError)


def _to_bytes(plaintext: str | bytes) -> bytes:
    if isinstance(plaintext, str):
        return plaintext.encode("utf-8")
    return bytes(plaintext)


def _status_name(exc: BaseException) -> Optional[str]:
    if isinstance(exc, RetryError) and exc.cause is not None:
        exc = exc.cause
    code = getattr(exc, "grpc_status_code", None)
    return getattr(code, "name", None)


def _remote_error(operation: str, name: str, exc: BaseException) -> RemoteServiceError:
    cancelled = isinstance(exc, _CANCELLED_ERRORS)
    status = _status_name(exc)
    logger.warning(
        f"kms.{operation}.failed",
        key=name,
        error=type(exc).__name__,
        status=status,
        cancelled=cancelled,
    )
    return RemoteServiceError(
        f"kms: failed to {operation} with {name}: {type(exc).__name__}",
        operation=operation,
        key=name,
        cause=exc,
        cancelled=cancelled,
        status=status,
    )


def _decode_ciphertext(name: str, ciphertext: str) -> bytes:
    try:
        return b64d(ciphertext)
    except ValueError as exc:
        logger.warning("kms.decode.failed", key=name, error=type(exc).__name__)
        raise EncodingError(
            "kms: failed base64 decode",
            operation="decrypt",
            key=name,
            cause=exc,
        ) from exc


def _to_text(name: str, plaintext: bytes) -> str:
    try:
        return plaintext.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise EncodingError(
            f"kms: decrypted data for {name} is not UTF-8 text; use decrypt_bytes",
            operation="decrypt",
            key=name,
            cause=exc,
        ) from exc


class KeyCryptoService:
    """Encrypt/decrypt strings under keys held by a :class:`KmsBackend`.

    ``timeout`` is the default per-call deadline in seconds; ``None`` leaves
    the backend's own default in place.
    """

    build_key_name = staticmethod(build_key_name)

    def __init__(self, backend: KmsBackend, *, timeout: float | None = None) -> None:
        self._backend = backend
        self._timeout = timeout

    def _deadline(self, timeout: float | None) -> float | None:
        return timeout if timeout is not None else self._timeout

    def encrypt(self, key: KeyLike, plaintext: str | bytes, *, timeout: float | None = None) -> str:
        """Encrypt ``plaintext`` and return the ciphertext as standard base64."""
        name = key_name(key)
        data = _to_bytes(plaintext)
        try:
            ciphertext = self._backend.encrypt(name, data, timeout=self._deadline(timeout))
        except _REMOTE_ERRORS as exc:
            raise _remote_error("encrypt", name, exc) from exc
        logger.debug("kms.encrypt", key=name, plaintext_len=len(data), ciphertext_len=len(ciphertext))
        return b64e(ciphertext)

    def decrypt_bytes(self, key: KeyLike, ciphertext: str, *, timeout: float | None = None) -> bytes:
        """Decrypt base64 ``ciphertext`` and return the raw plaintext bytes.

        Malformed base64 raises :class:`EncodingError` before any request
        reaches the backend.
        """
        name = key_name(key)
        raw = _decode_ciphertext(name, ciphertext)
        try:
            plaintext = self._backend.decrypt(name, raw, timeout=self._deadline(timeout))
        except _REMOTE_ERRORS as exc:
            raise _remote_error("decrypt", name, exc) from exc
        logger.debug("kms.decrypt", key=name, ciphertext_len=len(raw), plaintext_len=len(plaintext))
        return plaintext

    def decrypt(self, key: KeyLike, ciphertext: str, *, timeout: float | None = None) -> str:
        """Decrypt base64 ``ciphertext`` and return the plaintext as UTF-8 text."""
        name = key_name(key)
        return _to_text(name, self.decrypt_bytes(name, ciphertext, timeout=timeout))

    def close(self) -> None:
        self._backend.close()

    def __enter__(self) -> "KeyCryptoService":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


class AsyncKeyCryptoService:
    """Coroutine flavour of :class:`KeyCryptoService`.

    Each call is bounded by ``asyncio.wait_for``; an expired deadline surfaces
    as a :class:`RemoteServiceError` with ``cancelled`` set. Cancelling the
    calling task propagates ``asyncio.CancelledError`` unchanged.
    """

    build_key_name = staticmethod(build_key_name)

    def __init__(self, backend: AsyncKmsBackend, *, timeout: float | None = None) -> None:
        self._backend = backend
        self._timeout = timeout

    def _deadline(self, timeout: float | None) -> float | None:
        return timeout if timeout is not None else self._timeout

    async def encrypt(self, key: KeyLike, plaintext: str | bytes, *, timeout: float | None = None) -> str:
        name = key_name(key)
        data = _to_bytes(plaintext)
        deadline = self._deadline(timeout)
        try:
            ciphertext = await asyncio.wait_for(self._backend.encrypt(name, data, timeout=deadline), deadline)
        except _REMOTE_ERRORS as exc:
            raise _remote_error("encrypt", name, exc) from exc
        logger.debug("kms.encrypt", key=name, plaintext_len=len(data), ciphertext_len=len(ciphertext))
        return b64e(ciphertext)

    async def decrypt_bytes(self, key: KeyLike, ciphertext: str, *, timeout: float | None = None) -> bytes:
        name = key_name(key)
        raw = _decode_ciphertext(name, ciphertext)
        deadline = self._deadline(timeout)
        try:
            plaintext = await asyncio.wait_for(self._backend.decrypt(name, raw, timeout=deadline), deadline)
        except _REMOTE_ERRORS as exc:
            raise _remote_error("decrypt", name, exc) from exc
        logger.debug("kms.decrypt", key=name, ciphertext_len=len(raw), plaintext_len=len(plaintext))
        return plaintext

    async def decrypt(self, key: KeyLike, ciphertext: str, *, timeout: float | None = None) -> str:
        name = key_name(key)
        return _to_text(name, await self.decrypt_bytes(name, ciphertext, timeout=timeout))

    async def close(self) -> None:
        await self._backend.close()


def _settings(config: AppConfig | KmsConfig | None) -> KmsConfig:
    if isinstance(config, KmsConfig):
        return config
    app = config or load_config()
    if app.logging.configure:
        configure_logging(app.logging)
    return app.kms


def new_service(config: AppConfig | KmsConfig | None = None) -> KeyCryptoService:
    """Connect to Cloud KMS with ambient credentials.

    ``config`` defaults to :func:`~kms_crypto.config.load_config`. A full
    :class:`AppConfig` with ``logging.configure`` set also installs the JSON
    log output. Raises :class:`~kms_crypto.exceptions.KmsConnectionError`
    when the client cannot be created. No retries are attempted.
    """
    cfg = _settings(config)
    backend = GcpKmsBackend.connect(api_endpoint=cfg.api_endpoint)
    return KeyCryptoService(backend, timeout=cfg.timeout_seconds)


def new_async_service(config: AppConfig | KmsConfig | None = None) -> AsyncKeyCryptoService:
    """Async counterpart of :func:`new_service`; call from a running event loop."""
    cfg = _settings(config)
    backend = AsyncGcpKmsBackend.connect(api_endpoint=cfg.api_endpoint)
    return AsyncKeyCryptoService(backend, timeout=cfg.timeout_seconds)


__all__ = [
    "AsyncKeyCryptoService",
    "KeyCryptoService",
    "new_async_service",
    "new_service",
]
