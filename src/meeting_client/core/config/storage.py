"""
Credential storage settings.
"""
from typing import Literal

from pydantic_settings import BaseSettings


class StorageSettings(BaseSettings):
    """
    Selects the durable store that keeps the access/refresh token pair across
    restarts.

    Security Note:
        - The credential file holds live bearer tokens; it is written with
          0600 permissions and should sit in a directory only the current user
          can read.
        - When using Redis, REDIS_URL should carry TLS parameters on any
          untrusted network.
    """
    CREDENTIAL_STORE: Literal["memory", "file", "redis"] = "memory"
    CREDENTIAL_FILE: str = "~/.meeting-client/credentials.json"
    REDIS_URL: str = "redis://localhost:6379/0"
    CREDENTIAL_KEY_PREFIX: str = "meeting-client:credentials"
