"""Meeting service.

Typed access to the meeting endpoints: listing, multipart upload, CRUD,
analysis trigger, feedback and the pending-analysis check used for polling.
"""

from datetime import datetime, timezone
from typing import Any, List, Optional
from urllib.parse import quote

import structlog
from pydantic import TypeAdapter

from meeting_client.core.exceptions import ValidationError
from meeting_client.domain.entities.meeting import (
    AnalysisPayload,
    Meeting,
    MeetingFeedback,
    MeetingPayload,
    MeetingResult,
    MeetingStats,
    Page,
    PaginationParams,
    PendingMeetings,
    PendingPayload,
    UpdateMeeting,
)
from meeting_client.domain.validation.audio_file import validate_audio_file
from meeting_client.domain.value_objects.envelope import Envelope
from meeting_client.domain.value_objects.multipart import MultipartForm, UploadFile
from meeting_client.infrastructure.http.client import AuthenticatedHttpClient
from meeting_client.utils.i18n import get_translated_message

logger = structlog.get_logger(__name__)

_MEETING = TypeAdapter(MeetingPayload)
_PENDING = TypeAdapter(PendingPayload)
_ANALYSIS = TypeAdapter(AnalysisPayload)


def _meeting_path(meeting_id: str, *suffix: str) -> str:
    return "/".join(["/meetings", quote(str(meeting_id), safe=""), *suffix])


def _as_meeting(result: Any) -> Any:
    return result.meeting if isinstance(result, MeetingResult) else result


class MeetingService:
    """Meeting endpoints on top of `AuthenticatedHttpClient`.

    Attributes:
        client (AuthenticatedHttpClient): Client used for every call.
        envelope (Envelope): Response framing used by the meeting endpoints.
    """

    def __init__(self, client: AuthenticatedHttpClient, *, envelope: Envelope = Envelope.AUTO):
        self.client = client
        self.envelope = envelope

    async def list_meetings(self, pagination: Optional[PaginationParams] = None) -> Page[Meeting]:
        params = (pagination or PaginationParams()).as_query()
        return await self.client.get(
            "/meetings", params=params, response_model=Page[Meeting], envelope=self.envelope
        )

    async def create_meeting(
        self,
        title: str,
        filename: str,
        content: bytes,
        *,
        content_type: Optional[str] = None,
        date: Optional[datetime] = None,
    ) -> Meeting:
        """Upload a recording as a new meeting.

        Raises:
            ValidationError: Empty title or an audio file the backend would
                reject.
        """
        title = (title or "").strip()
        if not title:
            raise ValidationError(
                get_translated_message("meeting_title_required", self.client.locale),
                code="meeting_title_required",
            )
        upload = validate_audio_file(
            UploadFile(filename=filename, content=content, content_type=content_type),
            self.client.locale,
        )

        recorded_at = date or datetime.now(timezone.utc)
        form = MultipartForm(
            fields={"title": title, "date": recorded_at.isoformat()},
            files={"file": upload},
        )
        logger.info("meeting_upload_started", title=title, filename=filename, size=upload.size)
        meeting = _as_meeting(
            await self.client.post("/meetings", form, response_model=_MEETING, envelope=self.envelope)
        )
        logger.info("meeting_uploaded", meeting_id=meeting.id, status=meeting.status.value)
        return meeting

    async def create_meeting_from_path(
        self, title: str, path: str, content_type: Optional[str] = None
    ) -> Meeting:
        upload = UploadFile.from_path(path, content_type)
        return await self.create_meeting(
            title, upload.filename, upload.content, content_type=upload.content_type
        )

    async def get_meeting(self, meeting_id: str) -> Meeting:
        return _as_meeting(
            await self.client.get(
                _meeting_path(meeting_id), response_model=_MEETING, envelope=self.envelope
            )
        )

    async def update_meeting(self, meeting_id: str, changes: UpdateMeeting) -> Meeting:
        return _as_meeting(
            await self.client.put(
                _meeting_path(meeting_id), changes, response_model=_MEETING, envelope=self.envelope
            )
        )

    async def delete_meeting(self, meeting_id: str) -> None:
        await self.client.delete(_meeting_path(meeting_id), envelope=self.envelope)
        logger.info("meeting_deleted", meeting_id=meeting_id)

    async def analyze_meeting(self, meeting_id: str) -> Optional[Meeting]:
        """Ask the backend to (re)run analysis.

        Returns the meeting when the backend echoes it back, None otherwise.
        """
        result = _as_meeting(
            await self.client.post(
                _meeting_path(meeting_id, "analyze"), response_model=_ANALYSIS, envelope=self.envelope
            )
        )
        logger.info("meeting_analysis_requested", meeting_id=meeting_id)
        return result if isinstance(result, Meeting) else None

    async def get_feedback(self, meeting_id: str) -> MeetingFeedback:
        return await self.client.get(
            _meeting_path(meeting_id, "feedback"),
            response_model=MeetingFeedback,
            envelope=self.envelope,
        )

    async def check_pending(self) -> List[Meeting]:
        """Meetings still awaiting analysis (uploaded or processing)."""
        result = await self.client.get(
            "/meetings/check", response_model=_PENDING, envelope=self.envelope
        )
        if result is None:
            return []
        if isinstance(result, PendingMeetings):
            return result.meetings
        return result

    async def get_stats(self) -> MeetingStats:
        return await self.client.get(
            "/meetings/stats", response_model=MeetingStats, envelope=self.envelope
        )
