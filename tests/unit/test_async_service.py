import asyncio

import pytest

from kms_crypto import AsyncKeyCryptoService, EncodingError, RemoteServiceError

from fakes import AsyncFakeKms

SECRET = "attack at dawn"


@pytest.mark.asyncio
async def test_async_round_trip(async_service: AsyncKeyCryptoService, key: str) -> None:
    ciphertext = await async_service.encrypt(key, SECRET)
    assert await async_service.decrypt(key, ciphertext) == SECRET
    assert await async_service.decrypt_bytes(key, await async_service.encrypt(key, b"")) == b""


@pytest.mark.asyncio
async def test_async_invalid_base64_makes_no_call(async_fake_kms: AsyncFakeKms, async_service, key: str) -> None:
    with pytest.raises(EncodingError):
        await async_service.decrypt(key, "not-valid-base64!!")
    assert async_fake_kms.calls["decrypt"] == 0


@pytest.mark.asyncio
async def test_async_unknown_key(async_service: AsyncKeyCryptoService) -> None:
    with pytest.raises(RemoteServiceError) as excinfo:
        await async_service.encrypt("projects/p/locations/global/keyRings/r/cryptoKeys/nope", SECRET)
    assert excinfo.value.status == "NOT_FOUND"
    assert SECRET not in str(excinfo.value)


@pytest.mark.asyncio
async def test_async_deadline_becomes_cancelled_remote_error(key: str) -> None:
    service = AsyncKeyCryptoService(AsyncFakeKms([key], delay=1.0), timeout=0.01)
    with pytest.raises(RemoteServiceError) as excinfo:
        await service.encrypt(key, SECRET)
    assert excinfo.value.cancelled is True
    assert excinfo.value.operation == "encrypt"


@pytest.mark.asyncio
async def test_task_cancellation_propagates(key: str) -> None:
    service = AsyncKeyCryptoService(AsyncFakeKms([key], delay=1.0))
    task = asyncio.create_task(service.encrypt(key, SECRET))
    await asyncio.sleep(0.01)
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task


@pytest.mark.asyncio
async def test_async_close(async_fake_kms: AsyncFakeKms, async_service: AsyncKeyCryptoService) -> None:
    await async_service.close()
    assert async_fake_kms.closed is True
