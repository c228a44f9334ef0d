"""Credential store interface.

The client owns its credential pair but persists it through this port so the
pair survives restarts. Implementations live in
``meeting_client.infrastructure.storage``.
"""

from abc import ABC, abstractmethod
from typing import Optional

from meeting_client.domain.value_objects.credentials import CredentialPair


class ICredentialStore(ABC):
    """Interface for durable credential persistence.

    Only the HTTP client writes to the store. Implementations need no
    multi-writer discipline, but each call must leave the store either with
    the new pair or untouched.
    """

    @abstractmethod
    async def load(self) -> Optional[CredentialPair]:
        """Returns the persisted pair, or None when nothing is stored."""
        raise NotImplementedError

    @abstractmethod
    async def save(self, credentials: CredentialPair) -> None:
        """Persists the pair, replacing whatever was stored before."""
        raise NotImplementedError

    @abstractmethod
    async def clear(self) -> None:
        """Removes the stored pair. Clearing an empty store is a no-op."""
        raise NotImplementedError
