"""Process-local credential store."""

from typing import Optional

from meeting_client.domain.interfaces.credential_store import ICredentialStore
from meeting_client.domain.value_objects.credentials import CredentialPair


class InMemoryCredentialStore(ICredentialStore):
    """Keeps the pair in memory only; nothing survives a restart."""

    def __init__(self, credentials: Optional[CredentialPair] = None):
        self._credentials = credentials

    async def load(self) -> Optional[CredentialPair]:
        return self._credentials

    async def save(self, credentials: CredentialPair) -> None:
        self._credentials = credentials

    async def clear(self) -> None:
        self._credentials = None
