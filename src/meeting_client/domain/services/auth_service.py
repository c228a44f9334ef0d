"""Authentication service.

Wraps the backend's credential endpoints (login, signup, logout, nickname
availability) and keeps the authenticated HTTP client's token pair in step
with them.
"""

import inspect
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

import structlog
from pydantic import AliasChoices, BaseModel, Field

from meeting_client.core.exceptions import ApiError, AuthenticationError
from meeting_client.domain.entities.user import SessionUser
from meeting_client.domain.value_objects.credentials import TokenPair
from meeting_client.domain.value_objects.envelope import Envelope
from meeting_client.infrastructure.http.client import AuthenticatedHttpClient
from meeting_client.utils.i18n import get_translated_message

logger = structlog.get_logger(__name__)

LoggedOutCallback = Callable[[str], Optional[Awaitable[None]]]


class NicknameAvailability(BaseModel):
    available: bool = Field(validation_alias=AliasChoices("available", "isAvailable", "is_available"))


class AuthService:
    """Login, signup and logout on top of `AuthenticatedHttpClient`.

    Attributes:
        client (AuthenticatedHttpClient): The client whose credentials this
            service manages.
        current_user (Optional[SessionUser]): The signed-in user, if any.
    """

    LOGIN_PATH = "/auth/login"
    SIGNUP_PATH = "/auth/signup"
    LOGOUT_PATH = "/auth/logout"
    CHECK_NICKNAME_PATH = "/auth/check-nickname"

    def __init__(
        self,
        client: AuthenticatedHttpClient,
        *,
        envelope: Envelope = Envelope.AUTO,
        on_logged_out: Optional[LoggedOutCallback] = None,
    ):
        self.client = client
        self.envelope = envelope
        self.on_logged_out = on_logged_out
        self.current_user: Optional[SessionUser] = None

    @property
    def is_authenticated(self) -> bool:
        return self.client.is_authenticated

    async def login(self, email: str, password: str) -> TokenPair:
        """Exchange email and password for a token pair and store it.

        Raises:
            AuthenticationError: Wrong credentials, or a response without an
                access token.
            ApiError: Any other backend failure.
        """
        payload = await self.client.post(
            self.LOGIN_PATH, {"email": email, "password": password}, envelope=self.envelope
        )
        tokens = self._tokens_from(payload)
        if not tokens.access_token:
            logger.warning("login_response_without_token", email=email)
            raise AuthenticationError(
                get_translated_message("login_token_missing", self.client.locale),
                code="login_token_missing",
            )

        await self.client.set_token(tokens.access_token, tokens.refresh_token)
        self.current_user = SessionUser(email=email, nickname=email.split("@")[0])
        logger.info("login_succeeded", has_refresh_token=tokens.refresh_token is not None)
        return tokens

    async def signup(self, email: str, password: str, nickname: str) -> TokenPair:
        """Create an account and start a session.

        Backends that do not hand out tokens on signup are followed by a
        regular login with the same credentials.
        """
        payload = await self.client.post(
            self.SIGNUP_PATH,
            {"email": email, "password": password, "nickname": nickname},
            envelope=self.envelope,
        )
        tokens = self._tokens_from(payload)
        if not tokens.access_token:
            logger.info("signup_without_token_falling_back_to_login", email=email)
            tokens = await self.login(email, password)
        else:
            await self.client.set_token(tokens.access_token, tokens.refresh_token)
            logger.info("signup_succeeded", has_refresh_token=tokens.refresh_token is not None)

        self.current_user = SessionUser(email=email, nickname=nickname)
        return tokens

    async def logout(self) -> None:
        """End the session.

        The server-side logout is best effort; local credentials are always
        cleared and ``on_logged_out`` always fires. Without a session there is
        nothing to revoke, so no request is sent.
        """
        try:
            if self.client.is_authenticated:
                await self.client.post(self.LOGOUT_PATH, envelope=self.envelope)
        except ApiError as exc:
            logger.warning("logout_request_failed", status=exc.status, error=exc.message)
        finally:
            await self.client.clear_token()
            self.current_user = None
            logger.info("logged_out")

        if self.on_logged_out is not None:
            result = self.on_logged_out(self.client.login_redirect_path)
            if inspect.isawaitable(result):
                await result

    async def check_nickname(self, nickname: str) -> bool:
        """True when the nickname is still free."""
        result = await self.client.get(
            self.CHECK_NICKNAME_PATH,
            params={"nickname": nickname},
            response_model=Union[bool, NicknameAvailability],
            envelope=self.envelope,
        )
        if isinstance(result, NicknameAvailability):
            return result.available
        return result

    @staticmethod
    def _tokens_from(payload: Any) -> TokenPair:
        if isinstance(payload, Mapping):
            return TokenPair.model_validate(payload)
        return TokenPair()
