"""Dependency wiring for the meeting client.

Builds the credential store selected by ``CREDENTIAL_STORE``, the
authenticated HTTP client on top of it and the domain services that share
that client. Callers depend on the returned objects, never on the concrete
store classes.
"""

import os
from dataclasses import dataclass
from typing import Optional

import httpx
import structlog

from meeting_client.core.config.settings import Settings, settings as default_settings
from meeting_client.domain.interfaces.credential_store import ICredentialStore
from meeting_client.domain.services.analysis_poller import AnalysisPoller
from meeting_client.domain.services.auth_service import AuthService, LoggedOutCallback
from meeting_client.domain.services.meeting_service import MeetingService
from meeting_client.infrastructure.http.client import AuthExpiredCallback, AuthenticatedHttpClient
from meeting_client.infrastructure.storage import (
    FileCredentialStore,
    InMemoryCredentialStore,
    RedisCredentialStore,
)

logger = structlog.get_logger(__name__)


def build_credential_store(config: Optional[Settings] = None) -> ICredentialStore:
    """Credential store for ``config.CREDENTIAL_STORE``."""
    config = config or default_settings
    kind = config.CREDENTIAL_STORE

    if kind == "file":
        store: ICredentialStore = FileCredentialStore(os.path.expanduser(config.CREDENTIAL_FILE))
    elif kind == "redis":
        store = RedisCredentialStore.from_url(config.REDIS_URL, config.CREDENTIAL_KEY_PREFIX)
    else:
        store = InMemoryCredentialStore()

    logger.debug("credential_store_built", kind=kind)
    return store


def build_http_client(
    config: Optional[Settings] = None,
    credential_store: Optional[ICredentialStore] = None,
    *,
    on_auth_expired: Optional[AuthExpiredCallback] = None,
    locale: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> AuthenticatedHttpClient:
    config = config or default_settings
    return AuthenticatedHttpClient(
        config.API_BASE_URL,
        credential_store or build_credential_store(config),
        refresh_path=config.REFRESH_PATH,
        login_redirect_path=config.LOGIN_REDIRECT_PATH,
        timeout=config.REQUEST_TIMEOUT_SECONDS,
        refresh_timeout=config.REFRESH_TIMEOUT_SECONDS,
        on_auth_expired=on_auth_expired,
        locale=locale or config.DEFAULT_LANGUAGE,
        transport=transport,
    )


@dataclass
class MeetingClient:
    """The assembled client: one HTTP client shared by every service.

    Use as an async context manager to restore persisted credentials on
    entry and close the connection pool on exit. A credential store built by
    the factory is closed with it; a store passed in by the caller is not.
    """

    http: AuthenticatedHttpClient
    auth: AuthService
    meetings: MeetingService
    poller: AnalysisPoller
    owns_store: bool = False

    async def __aenter__(self) -> "MeetingClient":
        await self.http.restore()
        return self

    async def __aexit__(self, exc_type, exc_val, traceback) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the connection pool, and the credential store if it was built here."""
        await self.http.aclose()
        close_store = getattr(self.http.credential_store, "aclose", None)
        if self.owns_store and close_store is not None:
            await close_store()


def build_meeting_client(
    config: Optional[Settings] = None,
    *,
    credential_store: Optional[ICredentialStore] = None,
    on_auth_expired: Optional[AuthExpiredCallback] = None,
    on_logged_out: Optional[LoggedOutCallback] = None,
    locale: Optional[str] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> MeetingClient:
    """Wire the whole client from settings."""
    config = config or default_settings
    http = build_http_client(
        config,
        credential_store,
        on_auth_expired=on_auth_expired,
        locale=locale,
        transport=transport,
    )
    meetings = MeetingService(http)
    return MeetingClient(
        http=http,
        auth=AuthService(http, on_logged_out=on_logged_out),
        meetings=meetings,
        poller=AnalysisPoller(
            meetings,
            interval=config.POLL_INTERVAL_SECONDS,
            timeout=config.POLL_TIMEOUT_SECONDS,
            locale=http.locale,
        ),
        owns_store=credential_store is None,
    )
