"""HTTP client settings for talking to the meeting backend."""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class HttpSettings(BaseSettings):
    """Defines where the backend lives and how long the client waits for it.

    REFRESH_TIMEOUT_SECONDS bounds the refresh-token exchange. Requests queued
    behind a refresh would otherwise hang for as long as the backend does, so
    a timed-out refresh is treated exactly like a rejected one.
    """

    API_BASE_URL: str = "http://localhost:8000"
    REQUEST_TIMEOUT_SECONDS: float = Field(default=30.0, gt=0)
    REFRESH_TIMEOUT_SECONDS: float = Field(default=5.0, gt=0)
    REFRESH_PATH: str = "/auth/refresh"
    LOGIN_REDIRECT_PATH: str = "/login"

    # Analysis polling
    POLL_INTERVAL_SECONDS: float = Field(default=5.0, gt=0)
    POLL_TIMEOUT_SECONDS: float = Field(default=600.0, gt=0)

    @field_validator("API_BASE_URL")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")
