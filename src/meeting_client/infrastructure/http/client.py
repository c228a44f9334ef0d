"""Authenticated HTTP client for the meeting backend.

This module provides the client every other part of the package talks to the
backend through. It attaches the bearer token, turns every failure into a
typed `ApiError`, and recovers from an expired access token by exchanging the
refresh token.

Refresh protocol:
- The first request that receives a 401 becomes the refresher. It flips
  ``is_refreshing`` and calls the refresh endpoint, bounded by
  ``refresh_timeout``.
- Requests that receive a 401 while a refresh is in flight suspend on a
  future appended to the waiter list. They are released in arrival order
  once the refresh settles.
- On success every suspended request, and the refresher itself, is replayed
  exactly once with the new access token. A replay that is rejected again
  fails with `AuthenticationExpiredError` instead of refreshing again.
- On failure the credentials are cleared, every suspended request and the
  refresher fail with `AuthenticationExpiredError`, and ``on_auth_expired``
  is invoked with the login redirect path.
- The refresh runs in its own task. A refresher that is cancelled stops
  waiting for it, but the refresh still settles every suspended request.

Concurrency model:
    The client is meant for a single asyncio event loop. The check of
    ``is_refreshing`` and the assignment that claims the refresh happen with
    no ``await`` between them, which is what makes the refresh single-flight
    without a lock.
"""

import asyncio
import inspect
from functools import lru_cache
from typing import Any, Awaitable, Callable, Dict, Iterable, List, Mapping, Optional, Union

import httpx
import structlog
from pydantic import BaseModel, TypeAdapter
from pydantic import ValidationError as PydanticValidationError

from meeting_client.core.exceptions import (
    ApiError,
    AuthenticationExpiredError,
    TransportError,
    api_error_from_status,
)
from meeting_client.domain.interfaces.credential_store import ICredentialStore
from meeting_client.domain.value_objects.credentials import CredentialPair, TokenPair
from meeting_client.domain.value_objects.envelope import Envelope, open_envelope
from meeting_client.domain.value_objects.multipart import MultipartForm, UploadFile
from meeting_client.infrastructure.storage.memory_store import InMemoryCredentialStore
from meeting_client.utils.i18n import get_translated_message

logger = structlog.get_logger(__name__)

AuthExpiredCallback = Callable[[str], Optional[Awaitable[None]]]
RequestBody = Union[Mapping[str, Any], List[Any], BaseModel, MultipartForm, None]

_ERROR_MESSAGE_KEYS = ("message", "detail", "error")

# A 401 from these means "wrong credentials", not "expired token"
DEFAULT_ANONYMOUS_PATHS = ("/auth/login", "/auth/signup")


def _normalize_path(path: str) -> str:
    return path.split("?", 1)[0].rstrip("/")


@lru_cache(maxsize=128)
def _cached_type_adapter(response_model: Any) -> TypeAdapter:
    return TypeAdapter(response_model)


def _type_adapter(response_model: Any) -> TypeAdapter:
    if isinstance(response_model, TypeAdapter):
        return response_model
    try:
        return _cached_type_adapter(response_model)
    except TypeError:
        # Unhashable annotations (e.g. Annotated with field metadata)
        return TypeAdapter(response_model)


def _extract_error_message(body: Any) -> Optional[str]:
    """Best-effort human message from an error body."""
    if isinstance(body, Mapping):
        for key in _ERROR_MESSAGE_KEYS:
            value = body.get(key)
            if isinstance(value, str) and value:
                return value
    return None


class AuthenticatedHttpClient:
    """Typed HTTP client with bearer tokens and single-flight token refresh.

    Attributes:
        base_url (str): Backend base URL every path is resolved against.
        refresh_path (str): Path of the refresh-token endpoint.
        anonymous_paths (frozenset): Paths whose 401 is returned to the
            caller as-is instead of starting a refresh.
        login_redirect_path (str): Passed to ``on_auth_expired`` when the
            session cannot be recovered.
        refresh_timeout (float): Upper bound in seconds for one refresh call.
        locale (Optional[str]): Language of client-generated error messages.
    """

    def __init__(
        self,
        base_url: str,
        credential_store: Optional[ICredentialStore] = None,
        *,
        refresh_path: str = "/auth/refresh",
        anonymous_paths: Iterable[str] = DEFAULT_ANONYMOUS_PATHS,
        login_redirect_path: str = "/login",
        timeout: float = 30.0,
        refresh_timeout: float = 5.0,
        on_auth_expired: Optional[AuthExpiredCallback] = None,
        locale: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.refresh_path = refresh_path
        self.anonymous_paths = frozenset(_normalize_path(p) for p in anonymous_paths)
        self.login_redirect_path = login_redirect_path
        self.refresh_timeout = refresh_timeout
        self.on_auth_expired = on_auth_expired
        self.locale = locale

        self._store = credential_store or InMemoryCredentialStore()
        self._http = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

        self._credentials: Optional[CredentialPair] = None
        self._is_refreshing = False
        self._waiters: List[asyncio.Future] = []
        self._refresh_task: Optional[asyncio.Task] = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> "AuthenticatedHttpClient":
        await self.restore()
        return self

    async def __aexit__(self, exc_type, exc_val, traceback) -> None:
        await self.aclose()

    async def restore(self) -> Optional[CredentialPair]:
        """Load persisted credentials, as on application start."""
        credentials = await self._store.load()
        self._credentials = credentials
        logger.debug("credentials_restored", authenticated=credentials is not None)
        return credentials

    async def aclose(self) -> None:
        await self._http.aclose()

    # ------------------------------------------------------------------
    # Credentials
    # ------------------------------------------------------------------

    @property
    def credential_store(self) -> ICredentialStore:
        return self._store

    @property
    def credentials(self) -> Optional[CredentialPair]:
        return self._credentials

    @property
    def access_token(self) -> Optional[str]:
        return self._credentials.access_token if self._credentials else None

    @property
    def is_authenticated(self) -> bool:
        return self._credentials is not None

    @property
    def is_refreshing(self) -> bool:
        return self._is_refreshing

    async def set_token(self, access_token: str, refresh_token: Optional[str] = None) -> None:
        """Replace the held credentials and persist them.

        When ``refresh_token`` is omitted the currently held refresh token is
        kept, since some flows only rotate the access token.
        """
        if self._credentials is not None:
            credentials = self._credentials.rotate(access_token, refresh_token)
        else:
            credentials = CredentialPair(access_token=access_token, refresh_token=refresh_token)
        self._credentials = credentials
        await self._store.save(credentials)

    async def clear_token(self) -> None:
        """Forget the credentials in memory and in durable storage."""
        self._credentials = None
        await self._store.clear()

    # ------------------------------------------------------------------
    # Typed verb helpers
    # ------------------------------------------------------------------

    async def get(
        self,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        response_model: Any = None,
        envelope: Envelope = Envelope.AUTO,
    ) -> Any:
        return await self.request(
            "GET", path, params=params, response_model=response_model, envelope=envelope
        )

    async def post(
        self,
        path: str,
        body: RequestBody = None,
        *,
        response_model: Any = None,
        envelope: Envelope = Envelope.AUTO,
    ) -> Any:
        return await self.request(
            "POST", path, body, response_model=response_model, envelope=envelope
        )

    async def put(
        self,
        path: str,
        body: RequestBody = None,
        *,
        response_model: Any = None,
        envelope: Envelope = Envelope.AUTO,
    ) -> Any:
        return await self.request(
            "PUT", path, body, response_model=response_model, envelope=envelope
        )

    async def delete(
        self,
        path: str,
        *,
        response_model: Any = None,
        envelope: Envelope = Envelope.AUTO,
    ) -> Any:
        return await self.request(
            "DELETE", path, response_model=response_model, envelope=envelope
        )

    async def upload(
        self,
        path: str,
        filename: str,
        content: bytes,
        *,
        content_type: Optional[str] = None,
        field: str = "file",
        fields: Optional[Mapping[str, str]] = None,
        response_model: Any = None,
        envelope: Envelope = Envelope.AUTO,
    ) -> Any:
        """POST a single file as multipart/form-data, with optional extra fields."""
        form = MultipartForm(
            fields=dict(fields or {}),
            files={field: UploadFile(filename=filename, content=content, content_type=content_type)},
        )
        return await self.post(path, form, response_model=response_model, envelope=envelope)

    # ------------------------------------------------------------------
    # Request pipeline
    # ------------------------------------------------------------------

    async def request(
        self,
        method: str,
        path: str,
        body: RequestBody = None,
        *,
        params: Optional[Mapping[str, Any]] = None,
        response_model: Any = None,
        envelope: Envelope = Envelope.AUTO,
    ) -> Any:
        """Send one request and return its decoded payload.

        Raises:
            TransportError: No response was received.
            AuthenticationExpiredError: The session could not be recovered.
            ApiError: Any other non-2xx response or an unreadable body.
        """
        sent_token = self.access_token
        response = await self._send(method, path, body, params)

        if response.status_code == 401 and not self._skips_refresh(path):
            logger.info("access_token_rejected", method=method, path=path)
            await self._recover_from_unauthorized(sent_token)

            response = await self._send(method, path, body, params)
            if response.status_code == 401:
                logger.warning("replayed_request_unauthorized", method=method, path=path)
                raise self._session_expired_error()

        return self._decode(response, response_model, envelope)

    def _build_headers(self, multipart: bool = False) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if not multipart:
            headers["Content-Type"] = "application/json"
        if self._credentials is not None:
            headers["Authorization"] = f"Bearer {self._credentials.access_token}"
        return headers

    async def _send(
        self,
        method: str,
        path: str,
        body: RequestBody = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> httpx.Response:
        kwargs: Dict[str, Any] = {}
        if isinstance(body, MultipartForm):
            data, files = body.as_httpx()
            kwargs["data"] = data
            kwargs["files"] = files
        elif isinstance(body, BaseModel):
            kwargs["json"] = body.model_dump(mode="json", by_alias=True, exclude_none=True)
        elif body is not None:
            kwargs["json"] = body

        headers = self._build_headers(multipart=isinstance(body, MultipartForm))
        try:
            response = await self._http.request(method, path, headers=headers, params=params, **kwargs)
        except httpx.RequestError as exc:
            logger.warning("http_transport_error", method=method, path=path, error=str(exc))
            raise TransportError(str(exc) or type(exc).__name__) from exc

        logger.debug("http_response", method=method, path=path, status=response.status_code)
        return response

    def _skips_refresh(self, path: str) -> bool:
        """A 401 from the refresh endpoint or a credential exchange is final."""
        normalized = _normalize_path(path)
        return normalized == _normalize_path(self.refresh_path) or normalized in self.anonymous_paths

    # ------------------------------------------------------------------
    # Refresh protocol
    # ------------------------------------------------------------------

    async def _recover_from_unauthorized(self, sent_token: Optional[str]) -> None:
        """Return once fresh credentials are held, or raise.

        Joins an in-flight refresh, skips the refresh when the token the
        request carried has already been rotated, or becomes the refresher.
        """
        if self._is_refreshing:
            waiter = asyncio.get_running_loop().create_future()
            self._waiters.append(waiter)
            logger.debug("request_queued_behind_refresh", queued=len(self._waiters))
            await waiter
            return

        current_token = self.access_token
        if current_token is not None and current_token != sent_token:
            # Another request finished a refresh while this one was in flight
            return

        self._is_refreshing = True
        # The refresh outlives the request that started it: cancelling that
        # request must not fail the requests queued behind it.
        self._refresh_task = asyncio.get_running_loop().create_task(self._run_refresh())
        failure = await asyncio.shield(self._refresh_task)
        if failure is not None:
            raise self._session_expired_error() from failure

    async def _run_refresh(self) -> Optional[BaseException]:
        """Exchange the refresh token and settle every waiter.

        Returns None on success, otherwise the exception that made the
        refresh fail. Credentials are cleared and ``on_auth_expired`` is
        notified before a failure is returned.
        """
        failure: Optional[BaseException] = None
        try:
            tokens = await asyncio.wait_for(self._exchange_refresh_token(), timeout=self.refresh_timeout)
            await self.set_token(tokens.access_token, tokens.refresh_token)
        except asyncio.TimeoutError as exc:
            logger.warning("token_refresh_timed_out", timeout=self.refresh_timeout)
            failure = exc
        except ApiError as exc:
            logger.warning("token_refresh_failed", status=exc.status, code=exc.code, error=exc.message)
            failure = exc
        except Exception as exc:
            # Persisting the new pair failed; the session cannot be trusted
            logger.exception("token_refresh_errored", error=str(exc))
            failure = exc
        except BaseException as exc:
            failure = exc
            raise
        finally:
            self._is_refreshing = False
            self._refresh_task = None
            waiters, self._waiters = self._waiters, []
            if failure is not None:
                self._credentials = None
            for waiter in waiters:
                if waiter.done():
                    continue
                if failure is None:
                    waiter.set_result(None)
                else:
                    expired = self._session_expired_error()
                    expired.__cause__ = failure
                    waiter.set_exception(expired)
            logger.info("token_refresh_settled", refreshed=failure is None, released=len(waiters))

        if failure is not None:
            try:
                await self.clear_token()
            except Exception:
                logger.exception("credential_store_clear_failed")
            await self._notify_auth_expired()
        return failure

    async def _exchange_refresh_token(self) -> TokenPair:
        """Call the refresh endpoint with the refresh token as bearer."""
        refresh_token = self._credentials.refresh_token if self._credentials else None
        if not refresh_token:
            raise AuthenticationExpiredError(
                self._message("session_expired"), code="refresh_token_missing"
            )

        logger.info("token_refresh_started")
        headers = {"Accept": "application/json", "Authorization": f"Bearer {refresh_token}"}
        try:
            response = await self._http.post(self.refresh_path, headers=headers)
        except httpx.RequestError as exc:
            raise TransportError(str(exc) or type(exc).__name__) from exc

        tokens = self._decode(response, TokenPair, Envelope.AUTO)
        if not tokens.access_token:
            raise ApiError(
                self._message("malformed_response"),
                status=response.status_code,
                code="malformed_response",
            )
        logger.info("token_refresh_succeeded", refresh_token_rotated=tokens.refresh_token is not None)
        return tokens

    async def _notify_auth_expired(self) -> None:
        if self.on_auth_expired is None:
            return
        try:
            result = self.on_auth_expired(self.login_redirect_path)
            if inspect.isawaitable(result):
                await result
        except Exception:
            # The session error below is what the caller must see
            logger.exception("auth_expired_callback_failed")

    def _session_expired_error(self) -> AuthenticationExpiredError:
        return AuthenticationExpiredError(self._message("session_expired"))

    # ------------------------------------------------------------------
    # Decoding
    # ------------------------------------------------------------------

    def _decode(self, response: httpx.Response, response_model: Any, envelope: Envelope) -> Any:
        if not response.is_success:
            raise self._error_from_response(response)

        if response.status_code == 204 or not response.content:
            payload = None
        else:
            try:
                raw = response.json()
                wrapper = open_envelope(raw, envelope)
            except ValueError as exc:
                raise self._malformed(response) from exc

            if wrapper is None:
                payload = raw
            elif not wrapper.success:
                raise ApiError(
                    wrapper.message or self._message("request_rejected"),
                    status=response.status_code,
                    code="request_rejected",
                    body=raw,
                )
            else:
                payload = wrapper.data

        if response_model is None:
            return payload
        try:
            return _type_adapter(response_model).validate_python(payload)
        except PydanticValidationError as exc:
            logger.warning(
                "response_validation_failed",
                url=str(response.request.url),
                errors=exc.error_count(),
            )
            raise self._malformed(response) from exc

    def _error_from_response(self, response: httpx.Response) -> ApiError:
        try:
            body = response.json()
        except ValueError:
            body = None
        message = _extract_error_message(body) or self._message("request_failed")
        return api_error_from_status(response.status_code, message, body)

    def _malformed(self, response: httpx.Response) -> ApiError:
        return ApiError(
            self._message("malformed_response"),
            status=response.status_code,
            code="malformed_response",
        )

    def _message(self, key: str) -> str:
        return get_translated_message(key, self.locale)
