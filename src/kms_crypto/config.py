"""Configuration loading utilities."""
from __future__ import annotations

import os
from pathlib import Path
from typing import Iterable, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .keys import DEFAULT_LOCATION, KeyReference
from .paths import runtime_config_dir

CONFIG_ENV = "KMS_CRYPTO_CONFIG"


class KmsConfig(BaseModel):
    project_id: Optional[str] = Field(default=None, description="Project holding the key ring")
    key_ring: Optional[str] = Field(default=None)
    key_id: Optional[str] = Field(default=None)
    location: str = Field(default=DEFAULT_LOCATION)
    api_endpoint: Optional[str] = Field(default=None, description="Override the KMS API endpoint")
    timeout_seconds: Optional[float] = Field(default=30.0, gt=0, description="Per-call deadline")

    @field_validator("api_endpoint")
    @classmethod
    def _blank_endpoint_is_default(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value.strip():
            return None
        return value

    def key_reference(self) -> KeyReference:
        if not (self.project_id and self.key_ring and self.key_id):
            raise ValueError("KMS key incomplete. Set kms.project_id, kms.key_ring and kms.key_id")
        return KeyReference(
            project_id=self.project_id,
            key_ring_id=self.key_ring,
            key_id=self.key_id,
            location=self.location,
        )


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO", description="Logging verbosity level")
    configure: bool = Field(
        default=False,
        description="Install JSON log output when a service is built from this config",
    )

    def normalized_level(self) -> str:
        return self.level.upper()


class AppConfig(BaseModel):
    kms: KmsConfig = Field(default_factory=KmsConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


DEFAULT_CONFIG = AppConfig()


def config_search_paths(explicit: Optional[Path] = None) -> Iterable[Path]:
    if explicit:
        yield explicit
    env_path = os.getenv(CONFIG_ENV)
    if env_path:
        yield Path(env_path).expanduser()
    yield Path.cwd() / ".kms_crypto" / "config.yaml"
    yield runtime_config_dir() / "config.yaml"


def _parse_config_file(path: Path) -> AppConfig:
    document = yaml.safe_load(path.read_text(encoding="utf-8"))
    try:
        return AppConfig.model_validate(document or {})
    except ValidationError as exc:
        raise ValueError(f"Invalid configuration in {path}: {exc}") from exc


def load_config(path: Optional[Path] = None) -> AppConfig:
    """Return the first config file found on the search path, else defaults."""
    found = next((candidate for candidate in config_search_paths(path) if candidate.is_file()), None)
    if found is None:
        return DEFAULT_CONFIG.model_copy(deep=True)
    return _parse_config_file(found)


__all__ = [
    "AppConfig",
    "CONFIG_ENV",
    "DEFAULT_CONFIG",
    "KmsConfig",
    "LoggingConfig",
    "config_search_paths",
    "load_config",
]
