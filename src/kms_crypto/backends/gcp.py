"""Google Cloud KMS backends built on ``google-cloud-kms``."""
from __future__ import annotations

from typing import Any, Optional

import structlog
from google.api_core.client_options import ClientOptions
from google.auth.exceptions import GoogleAuthError
from google.cloud import kms

from ..exceptions import KmsConnectionError

logger = structlog.get_logger(__name__)


def _client_options(api_endpoint: str | None) -> Optional[ClientOptions]:
    if not api_endpoint:
        return None
    return ClientOptions(api_endpoint=api_endpoint)


class GcpKmsBackend:
    """Symmetric encrypt/decrypt against one ``KeyManagementServiceClient``.

    The client is created once with Application Default Credentials and
    reused for every call; GAPIC clients are thread-safe.
    """

    def __init__(self, client: kms.KeyManagementServiceClient) -> None:
        self._client = client

    @classmethod
    def connect(cls, *, api_endpoint: str | None = None) -> "GcpKmsBackend":
        try:
            client = kms.KeyManagementServiceClient(client_options=_client_options(api_endpoint))
        except (GoogleAuthError, ValueError) as exc:
            raise KmsConnectionError(
                f"kms: failed to create client: {type(exc).__name__}",
                operation="connect",
                cause=exc,
            ) from exc
        logger.info("kms.client.created", endpoint=api_endpoint or "default")
        return cls(client)

    def encrypt(self, name: str, plaintext: bytes, *, timeout: float | None = None) -> bytes:
        kwargs: dict[str, Any] = {"request": {"name": name, "plaintext": plaintext}}
        if timeout is not None:
            kwargs["timeout"] = timeout
        return self._client.encrypt(**kwargs).ciphertext

    def decrypt(self, name: str, ciphertext: bytes, *, timeout: float | None = None) -> bytes:
        kwargs: dict[str, Any] = {"request": {"name": name, "ciphertext": ciphertext}}
        if timeout is not None:
            kwargs["timeout"] = timeout
        return self._client.decrypt(**kwargs).plaintext

    def close(self) -> None:
        self._client.transport.close()


class AsyncGcpKmsBackend:
    """Coroutine counterpart backed by ``KeyManagementServiceAsyncClient``"""

    def __init__(self, client: kms.KeyManagementServiceAsyncClient) -> None:
        self._client = client

    @classmethod
    def connect(cls, *, api_endpoint: str | None = None) -> "AsyncGcpKmsBackend":
        try:
            client = kms.KeyManagementServiceAsyncClient(client_options=_client_options(api_endpoint))
        except (GoogleAuthError, ValueError) as exc:
            raise KmsConnectionError(
                f"kms: failed to create async client: {type(exc).__name__}",
                operation="connect",
                cause=exc,
            ) from exc
        logger.info("kms.client.created", endpoint=api_endpoint or "default", mode="async")
        return cls(client)

    async def encrypt(self, name: str, plaintext: bytes, *, timeout: float | None = None) -> bytes:
        kwargs: dict[str, Any] = {"request": {"name": name, "plaintext": plaintext}}
        if timeout is not None:
            kwargs["timeout"] = timeout
        response = await self._client.encrypt(**kwargs)
        return response.ciphertext

    async def decrypt(self, name: str, ciphertext: bytes, *, timeout: float | None = None) -> bytes:
        kwargs: dict[str, Any] = {"request": {"name": name, "ciphertext": ciphertext}}
        if timeout is not None:
            kwargs["timeout"] = timeout
        response = await self._client.decrypt(**kwargs)
        return response.plaintext

    async def close(self) -> None:
        await self._client.transport.close()


__all__ = ["AsyncGcpKmsBackend", "GcpKmsBackend"]
