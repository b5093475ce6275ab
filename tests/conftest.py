from __future__ import annotations

import pytest

from fakes import AsyncFakeKms, FakeKms
from kms_crypto import AsyncKeyCryptoService, KeyCryptoService, build_key_name

KEY = build_key_name("proj1", "ring1", "key1")
OTHER_KEY = build_key_name("proj1", "ring1", "key2")


@pytest.fixture
def key() -> str:
    return KEY


@pytest.fixture
def other_key() -> str:
    return OTHER_KEY


@pytest.fixture
def fake_kms() -> FakeKms:
    return FakeKms([KEY, OTHER_KEY])


@pytest.fixture
def service(fake_kms: FakeKms) -> KeyCryptoService:
    return KeyCryptoService(fake_kms)


@pytest.fixture
def async_fake_kms() -> AsyncFakeKms:
    return AsyncFakeKms([KEY, OTHER_KEY])


@pytest.fixture
def async_service(async_fake_kms: AsyncFakeKms) -> AsyncKeyCryptoService:
    return AsyncKeyCryptoService(async_fake_kms)
