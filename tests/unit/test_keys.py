import pytest

from kms_crypto import DEFAULT_LOCATION, KeyCryptoService, KeyReference, build_key_name
from kms_crypto.keys import key_name


def test_build_key_name_exact_format() -> None:
    assert (
        build_key_name("proj1", "ring1", "key1")
        == "projects/proj1/locations/global/keyRings/ring1/cryptoKeys/key1"
    )


def test_service_exposes_key_name_builder() -> None:
    assert KeyCryptoService.build_key_name("p", "r", "k") == build_key_name("p", "r", "k")


def test_key_reference_renders_canonical_name() -> None:
    ref = KeyReference.build("proj1", "ring1", "key1")
    assert ref.location == DEFAULT_LOCATION
    assert str(ref) == ref.name == build_key_name("proj1", "ring1", "key1")


def test_key_reference_custom_location() -> None:
    ref = KeyReference(project_id="p", key_ring_id="r", key_id="k", location="europe-west1")
    assert ref.name == "projects/p/locations/europe-west1/keyRings/r/cryptoKeys/k"


def test_key_reference_is_immutable() -> None:
    ref = KeyReference.build("p", "r", "k")
    with pytest.raises(AttributeError):
        ref.key_id = "other"  # type: ignore[misc]


def test_identifiers_are_not_validated_or_escaped() -> None:
    assert build_key_name("a/b", "", "k") == "projects/a/b/locations/global/keyRings//cryptoKeys/k"


def test_key_name_accepts_strings_and_references() -> None:
    ref = KeyReference.build("p", "r", "k")
    assert key_name(ref) == ref.name
    assert key_name("projects/x") == "projects/x"
