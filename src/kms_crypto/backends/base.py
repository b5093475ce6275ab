"""Interfaces a KMS backend must provide to the crypto services."""
from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class KmsBackend(Protocol):
    """A minimal interface for remote key managers.

    Implementations must be safe for concurrent use from several threads;
    the service shares one backend across every call.
    """

    def encrypt(self, name: str, plaintext: bytes, *, timeout: float | None = None) -> bytes:
        ...

    def decrypt(self, name: str, ciphertext: bytes, *, timeout: float | None = None) -> bytes:
        ...

    def close(self) -> None:
        ...


@runtime_checkable
class AsyncKmsBackend(Protocol):
    """Coroutine flavour of :class:`KmsBackend`"""

    async def encrypt(self, name: str, plaintext: bytes, *, timeout: float | None = None) -> bytes:
        ...

    async def decrypt(self, name: str, ciphertext: bytes, *, timeout: float | None = None) -> bytes:
        ...

    async def close(self) -> None:
        ...
