"""Meeting entities and request models."""

from datetime import datetime
from enum import Enum
from typing import Annotated, Any, Generic, List, Literal, Optional, TypeVar, Union

from pydantic import AliasChoices, Field, field_validator

from .base import ApiModel

T = TypeVar("T")


def _as_str(value: Any) -> Any:
    # The backend uses numeric ids; the client treats every id as a string.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class MeetingStatus(str, Enum):
    """Lifecycle of an uploaded meeting.

    The backend reports statuses in upper case (``PROCESSING``); they are
    normalized to lower case on the way in.
    """

    UPLOADED = "uploaded"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_pending(self) -> bool:
        return self in (MeetingStatus.UPLOADED, MeetingStatus.PROCESSING)


class Meeting(ApiModel):
    id: str
    title: str
    status: MeetingStatus = MeetingStatus.UPLOADED
    date: Optional[datetime] = None
    summary: Optional[str] = None
    action_count: Optional[int] = None
    duration: Optional[float] = None
    audio_url: Optional[str] = None
    transcript: Optional[str] = None
    user_id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("status", mode="before")
    @classmethod
    def normalize_status(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    @field_validator("id", "user_id", mode="before")
    @classmethod
    def stringify_ids(cls, v: Any) -> Any:
        return _as_str(v)


class UpdateMeeting(ApiModel):
    """Fields a meeting update may change; unset fields are not sent."""

    title: Optional[str] = None
    summary: Optional[str] = None
    action_count: Optional[int] = None
    duration: Optional[float] = None
    transcript: Optional[str] = None


class ActionItem(ApiModel):
    id: Optional[str] = None
    description: str = Field(validation_alias=AliasChoices("description", "title"))
    assignee: Optional[str] = None
    due_date: Optional[str] = Field(default=None, validation_alias=AliasChoices("dueDate", "due_date"))
    priority: Literal["low", "medium", "high"] = "medium"
    status: Literal["pending", "todo", "in_progress", "completed", "done"] = "pending"

    @field_validator("priority", "status", mode="before")
    @classmethod
    def lowercase(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) else v

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return _as_str(v)


class MeetingFeedback(ApiModel):
    """Post-analysis feedback: action items, topics and follow-up questions."""

    meeting_id: Optional[str] = None
    action_items: List[ActionItem] = Field(default_factory=list)
    topics: List[str] = Field(default_factory=list)
    follow_up_questions: List[str] = Field(default_factory=list)

    @field_validator("meeting_id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        return _as_str(v)


class MeetingStats(ApiModel):
    total_meetings: int = 0
    total_duration: float = 0
    average_duration: float = 0
    completed_meetings: int = 0
    processing_meetings: int = 0
    failed_meetings: int = 0
    total_action_items: int = 0
    completed_action_items: int = 0


class PaginationParams(ApiModel):
    page: Optional[int] = Field(default=None, ge=1)
    limit: Optional[int] = Field(default=None, ge=1)
    sort_by: Optional[str] = None
    sort_order: Optional[Literal["asc", "desc"]] = None

    def as_query(self) -> dict:
        """Query parameters, camelCased, with unset values left out."""
        return self.model_dump(by_alias=True, exclude_none=True)


class Pagination(ApiModel):
    page: int
    limit: int
    total: int
    total_pages: int


class Page(ApiModel, Generic[T]):
    data: List[T]
    pagination: Optional[Pagination] = None


class MeetingResult(ApiModel):
    """``{"meeting": {...}}`` as returned by create and update."""

    meeting: Meeting


class PendingMeetings(ApiModel):
    meetings: List[Meeting] = Field(default_factory=list)


# Endpoints answer with either the keyed or the bare form; the keyed form is
# tried first so a bare meeting never shadows it.
MeetingPayload = Annotated[Union[MeetingResult, Meeting], Field(union_mode="left_to_right")]
PendingPayload = Annotated[
    Union[PendingMeetings, List[Meeting], None], Field(union_mode="left_to_right")
]
AnalysisPayload = Annotated[
    Union[MeetingResult, Meeting, Any], Field(union_mode="left_to_right")
]
