"""Credential store implementations."""

from .file_store import FileCredentialStore
from .memory_store import InMemoryCredentialStore
from .redis_store import RedisCredentialStore

__all__ = ["FileCredentialStore", "InMemoryCredentialStore", "RedisCredentialStore"]
