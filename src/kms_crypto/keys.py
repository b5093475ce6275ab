"""Key resource names understood by Cloud KMS."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Union

DEFAULT_LOCATION: Final[str] = "global"
_KEY_NAME_FORMAT: Final[str] = "projects/{project}/locations/{location}/keyRings/{ring}/cryptoKeys/{key}"


@dataclass(frozen=True, slots=True)
class KeyReference:
    """Fully-qualified crypto key name.

    Parts are formatted as given: no validation and no escaping, so an
    identifier containing ``/`` yields a name the service will not resolve.
    """

    project_id: str
    key_ring_id: str
    key_id: str
    location: str = DEFAULT_LOCATION

    @classmethod
    def build(cls, project_id: str, key_ring_id: str, key_id: str) -> "KeyReference":
        return cls(project_id=project_id, key_ring_id=key_ring_id, key_id=key_id)

    @property
    def name(self) -> str:
        return _KEY_NAME_FORMAT.format(
            project=self.project_id,
            location=self.location,
            ring=self.key_ring_id,
            key=self.key_id,
        )

    def __str__(self) -> str:
        return self.name


KeyLike = Union[KeyReference, str]


def build_key_name(project_id: str, key_ring_id: str, key_id: str) -> str:
    """Return ``projects/P/locations/global/keyRings/R/cryptoKeys/K``."""
    return KeyReference.build(project_id, key_ring_id, key_id).name


def key_name(key: KeyLike) -> str:
    if isinstance(key, KeyReference):
        return key.name
    return key


__all__ = ["DEFAULT_LOCATION", "KeyLike", "KeyReference", "build_key_name", "key_name"]
