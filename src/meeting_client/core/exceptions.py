from __future__ import annotations

"""Centralized, structured exception hierarchy for the meeting client.

Every failure that leaves the client is one of these exceptions. They carry a
machine-readable `code` for programmatic handling and a human-readable,
translatable `message`. Errors that come from the backend additionally carry
the HTTP `status`, with `0` reserved for transport-level failures where no
response was received at all.

The hierarchy is designed to:
- Give callers one `except ApiError` for anything the backend round-trip can
  produce.
- Let callers separate "log in again" (`AuthenticationExpiredError`) from
  ordinary request failures.
- Offer a consistent `{message, status}` shape for presentation layers.
"""

from typing import Any, Dict, Final, Optional

__all__: Final = [
    "MeetingClientError",
    "ApiError",
    "TransportError",
    "AuthenticationError",
    "AuthenticationExpiredError",
    "ClientRequestError",
    "ServerError",
    "ValidationError",
    "PollingTimeoutError",
    "api_error_from_status",
]


class MeetingClientError(Exception):
    """Base exception class for all custom errors in the meeting client.

    Attributes:
        message (str): A human-readable error message, suitable for display.
        code (str): A unique, machine-readable error code.
    """

    message: str
    code: str = "generic_error"

    def __init__(self, message: str, code: str = "generic_error"):
        self.message = message
        self.code = code
        Exception.__init__(self, self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Backend round-trip errors
# ---------------------------------------------------------------------------


class ApiError(MeetingClientError):
    """Raised when a call to the backend does not produce a usable payload.

    Attributes:
        message (str): Backend-provided message when available, otherwise a
                       generic translated message.
        status (int): HTTP status of the failed response, `0` when no
                      response was received.
        code (str): Machine-readable error code, defaults to "api_error".
        body (Any): The decoded error body, if one could be parsed.
    """

    def __init__(
        self,
        message: str,
        status: int,
        code: str = "api_error",
        body: Optional[Any] = None,
    ):
        super().__init__(message, code)
        self.status = status
        self.body = body

    def to_dict(self) -> Dict[str, Any]:
        """The `{message, status}` shape surfaced to presentation layers."""
        return {"message": self.message, "status": self.status}

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status={self.status}, code={self.code!r}, message={self.message!r})"


class TransportError(ApiError):
    """Raised when no HTTP response was received (DNS, refused connection,
    timeout, broken stream). Always carries status `0`.
    """

    def __init__(self, message: str, code: str = "transport_error"):
        super().__init__(message, status=0, code=code)


class AuthenticationError(ApiError):
    """Raised for authentication failures. Maps to `401 Unauthorized`."""

    def __init__(
        self,
        message: str,
        status: int = 401,
        code: str = "authentication_error",
        body: Optional[Any] = None,
    ):
        super().__init__(message, status=status, code=code, body=body)


class AuthenticationExpiredError(AuthenticationError):
    """Raised when the session cannot be recovered without a new login.

    Produced when a refresh attempt fails or is impossible, and when a request
    replayed with a freshly refreshed token is rejected again. Callers should
    send the user back to the login entry point.
    """

    def __init__(self, message: str, code: str = "session_expired"):
        super().__init__(message, status=401, code=code)


class ClientRequestError(ApiError):
    """Raised for 4xx responses other than 401 (validation, forbidden,
    not found, conflict). The backend's message is surfaced verbatim.
    """

    def __init__(
        self, message: str, status: int, code: str = "client_error", body: Optional[Any] = None
    ):
        super().__init__(message, status=status, code=code, body=body)


class ServerError(ApiError):
    """Raised for 5xx responses. The caller decides whether to retry."""

    def __init__(
        self, message: str, status: int, code: str = "server_error", body: Optional[Any] = None
    ):
        super().__init__(message, status=status, code=code, body=body)


def api_error_from_status(status: int, message: str, body: Optional[Any] = None) -> ApiError:
    """Build the most specific `ApiError` subclass for an HTTP status."""
    if status == 401:
        return AuthenticationError(message, body=body)
    if 400 <= status < 500:
        return ClientRequestError(message, status=status, body=body)
    if status >= 500:
        return ServerError(message, status=status, body=body)
    return ApiError(message, status=status, body=body)


# ---------------------------------------------------------------------------
# Local errors
# ---------------------------------------------------------------------------


class ValidationError(MeetingClientError):
    """Raised when input is rejected before any request is sent, e.g. an
    audio file that is empty, too large or of an unsupported type.
    """

    def __init__(self, message: str, code: str = "validation_error"):
        super().__init__(message, code)


class PollingTimeoutError(MeetingClientError):
    """Raised when a meeting is still awaiting analysis after the polling
    deadline.
    """

    def __init__(self, message: str, meeting_id: str, code: str = "polling_timeout"):
        super().__init__(message, code)
        self.meeting_id = meeting_id
