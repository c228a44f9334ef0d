"""JSON file credential store.

The on-disk analogue of browser localStorage: one small JSON document holding
the access and refresh token. Writes go to a temporary file in the same
directory which then replaces the target, so a crash never leaves a half
written credential file behind.
"""

import asyncio
import json
import os
import tempfile
from typing import Optional

import structlog

from meeting_client.domain.interfaces.credential_store import ICredentialStore
from meeting_client.domain.value_objects.credentials import CredentialPair

logger = structlog.get_logger(__name__)


class FileCredentialStore(ICredentialStore):
    """Persists the credential pair to a 0600 JSON file.

    Attributes:
        path (str): Absolute path of the credential file.
    """

    def __init__(self, path: str):
        self.path = os.path.abspath(os.path.expanduser(path))

    async def load(self) -> Optional[CredentialPair]:
        return await asyncio.to_thread(self._read)

    async def save(self, credentials: CredentialPair) -> None:
        await asyncio.to_thread(self._write, credentials)

    async def clear(self) -> None:
        await asyncio.to_thread(self._remove)

    def _read(self) -> Optional[CredentialPair]:
        try:
            with open(self.path, "r", encoding="utf-8") as fp:
                data = json.load(fp)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as exc:
            # A corrupt file is the same as no session: the user logs in again.
            logger.warning("credential_file_unreadable", path=self.path, error=str(exc))
            return None
        if not isinstance(data, dict):
            logger.warning("credential_file_unreadable", path=self.path, error="not an object")
            return None
        return CredentialPair.from_dict(data)

    def _write(self, credentials: CredentialPair) -> None:
        directory = os.path.dirname(self.path)
        os.makedirs(directory, mode=0o700, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".credentials-", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fp:
                if hasattr(os, "fchmod"):
                    os.fchmod(fp.fileno(), 0o600)
                json.dump(credentials.to_dict(), fp, indent=2)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            raise
        logger.debug("credential_file_written", path=self.path)

    def _remove(self) -> None:
        try:
            os.unlink(self.path)
        except FileNotFoundError:
            return
        logger.debug("credential_file_removed", path=self.path)
