"""KMS backends: the two-operation capability the service delegates to."""
from .base import AsyncKmsBackend, KmsBackend

__all__ = ["AsyncKmsBackend", "KmsBackend"]
