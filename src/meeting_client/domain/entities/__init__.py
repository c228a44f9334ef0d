"""Domain entities returned by the meeting backend."""

from .meeting import (
    ActionItem,
    AnalysisPayload,
    Meeting,
    MeetingFeedback,
    MeetingPayload,
    MeetingResult,
    MeetingStats,
    MeetingStatus,
    Page,
    Pagination,
    PaginationParams,
    PendingMeetings,
    PendingPayload,
    UpdateMeeting,
)
from .user import SessionUser

__all__ = [
    "ActionItem",
    "AnalysisPayload",
    "Meeting",
    "MeetingFeedback",
    "MeetingPayload",
    "MeetingResult",
    "MeetingStats",
    "MeetingStatus",
    "Page",
    "Pagination",
    "PaginationParams",
    "PendingMeetings",
    "PendingPayload",
    "SessionUser",
    "UpdateMeeting",
]
