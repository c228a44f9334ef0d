"""Credential value objects for bearer-token authentication.

These value objects encapsulate the rules around the access/refresh token
pair the client holds, and the wire shape the backend uses to hand out new
tokens.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class CredentialPair:
    """The access/refresh token pair held by one client instance.

    The access token is attached to every outbound request. The refresh token
    is optional because some flows only ever hand out an access token.

    Attributes:
        access_token: Short-lived bearer credential.
        refresh_token: Longer-lived credential exchanged for a new access
            token, or None.
    """

    access_token: str
    refresh_token: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.access_token:
            raise ValueError("Access token cannot be empty")
        if self.refresh_token == "":
            object.__setattr__(self, "refresh_token", None)

    def rotate(self, access_token: str, refresh_token: Optional[str] = None) -> "CredentialPair":
        """Return the pair after a refresh.

        Refresh-token rotation is optional on the backend: a returned refresh
        token always wins, otherwise the current one is kept.
        """
        return CredentialPair(
            access_token=access_token,
            refresh_token=refresh_token or self.refresh_token,
        )

    def to_dict(self) -> Dict[str, Optional[str]]:
        return {"access_token": self.access_token, "refresh_token": self.refresh_token}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Optional["CredentialPair"]:
        """Rebuild a pair from its persisted form, or None if no access token."""
        access_token = data.get("access_token")
        if not access_token:
            return None
        return cls(access_token=access_token, refresh_token=data.get("refresh_token"))

    def __repr__(self) -> str:
        # Never render token material in logs or tracebacks.
        return f"CredentialPair(access_token=***, refresh_token={'***' if self.refresh_token else None})"


class TokenPair(BaseModel):
    """Tokens returned by the login, signup and refresh endpoints.

    The backend answers in camelCase; snake_case is accepted as well.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    access_token: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("accessToken", "access_token")
    )
    refresh_token: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("refreshToken", "refresh_token")
    )
    token_type: str = Field(default="Bearer", validation_alias=AliasChoices("tokenType", "token_type"))
