from datetime import datetime, timezone
from typing import Optional

from pydantic import Field

from .base import ApiModel


class SessionUser(ApiModel):
    """The signed-in user as known to the client.

    The backend exposes no profile endpoint yet, so the profile is assembled
    from what the user typed at login or signup.
    """

    user_id: Optional[str] = None
    email: str
    nickname: Optional[str] = None
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def display_name(self) -> str:
        return self.nickname or self.email
