"""
Redis credential store.

Stores the pair as a Redis hash so several processes of the same deployment
(for example a worker and a CLI) share one session. The client is expected to
be created with ``decode_responses=True``.

**Security Note**: the hash holds live bearer tokens. Use TLS (``rediss://``)
and authentication on any network that is not fully trusted, and never log
the connection URL with its password.
"""

from typing import Optional

import structlog
from redis.asyncio import Redis

from meeting_client.domain.interfaces.credential_store import ICredentialStore
from meeting_client.domain.value_objects.credentials import CredentialPair

logger = structlog.get_logger(__name__)


class RedisCredentialStore(ICredentialStore):
    """Persists the credential pair under ``<key_prefix>:<namespace>``."""

    def __init__(self, redis_client: Redis, key_prefix: str, namespace: str = "default"):
        self.redis_client = redis_client
        self.key = f"{key_prefix}:{namespace}"

    @classmethod
    def from_url(cls, url: str, key_prefix: str, namespace: str = "default") -> "RedisCredentialStore":
        redis_client = Redis.from_url(url, encoding="utf-8", decode_responses=True)
        return cls(redis_client, key_prefix, namespace)

    async def load(self) -> Optional[CredentialPair]:
        data = await self.redis_client.hgetall(self.key)
        if not data:
            return None
        return CredentialPair.from_dict(data)

    async def save(self, credentials: CredentialPair) -> None:
        mapping = {"access_token": credentials.access_token}
        async with self.redis_client.pipeline(transaction=True) as pipe:
            pipe.delete(self.key)
            if credentials.refresh_token:
                mapping["refresh_token"] = credentials.refresh_token
            pipe.hset(self.key, mapping=mapping)
            await pipe.execute()
        logger.debug("credentials_stored_in_redis", key=self.key)

    async def clear(self) -> None:
        await self.redis_client.delete(self.key)
        logger.debug("credentials_removed_from_redis", key=self.key)

    async def aclose(self) -> None:
        await self.redis_client.aclose()
