import json
from datetime import datetime, timezone

import pytest
import pytest_asyncio

from meeting_client.core.exceptions import ApiError, ClientRequestError, ValidationError
from meeting_client.domain.entities.meeting import MeetingStatus, PaginationParams, UpdateMeeting
from meeting_client.domain.services.meeting_service import MeetingService
from tests.factories.meeting import create_fake_audio, create_fake_meeting


@pytest_asyncio.fixture
async def meetings(signed_in_client):
    return MeetingService(signed_in_client)


def wrapped(data):
    return {"success": True, "data": data, "message": None}


class TestListAndGet:
    @pytest.mark.asyncio
    async def test_list_meetings_with_pagination(self, meetings, backend):
        backend.respond(
            "GET",
            "/meetings",
            200,
            {
                "data": [create_fake_meeting(id=1), create_fake_meeting(id=2)],
                "pagination": {"page": 2, "limit": 2, "total": 6, "totalPages": 3},
            },
        )

        page = await meetings.list_meetings(PaginationParams(page=2, limit=2, sort_order="desc"))

        assert [m.id for m in page.data] == ["1", "2"]
        assert page.pagination.total == 6
        params = backend.requests[0].url.params
        assert params["page"] == "2"
        assert params["limit"] == "2"
        assert params["sortOrder"] == "desc"

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body",
        [
            create_fake_meeting(id=11),
            {"meeting": create_fake_meeting(id=11)},
            wrapped({"meeting": create_fake_meeting(id=11)}),
        ],
    )
    async def test_get_meeting_accepts_each_response_shape(self, meetings, backend, body):
        backend.respond("GET", "/meetings/11", 200, body)

        meeting = await meetings.get_meeting("11")

        assert meeting.id == "11"

    @pytest.mark.asyncio
    async def test_get_meeting_quotes_id(self, meetings, backend):
        backend.respond("GET", "/meetings/a/b", 200, create_fake_meeting(id="a/b"))

        await meetings.get_meeting("a/b")

        assert backend.requests[0].url.raw_path == b"/meetings/a%2Fb"

    @pytest.mark.asyncio
    async def test_get_meeting_not_found(self, meetings, backend):
        backend.respond("GET", "/meetings/404", 404, {"message": "Meeting not found"})

        with pytest.raises(ClientRequestError) as exc_info:
            await meetings.get_meeting("404")

        assert exc_info.value.to_dict() == {"message": "Meeting not found", "status": 404}

    @pytest.mark.asyncio
    async def test_unreadable_meeting_is_api_error(self, meetings, backend):
        backend.respond("GET", "/meetings/1", 200, {"meeting": {"title": "no id"}})

        with pytest.raises(ApiError) as exc_info:
            await meetings.get_meeting("1")

        assert exc_info.value.code == "malformed_response"


class TestCreate:
    @pytest.mark.asyncio
    async def test_create_meeting_uploads_multipart(self, meetings, backend):
        backend.respond("POST", "/meetings", 201, {"meeting": create_fake_meeting(id=5, status="UPLOADED")})
        recorded = datetime(2024, 3, 1, 9, 30, tzinfo=timezone.utc)

        meeting = await meetings.create_meeting(
            " Design review ", "review.webm", create_fake_audio(), content_type="audio/webm", date=recorded
        )

        assert meeting.id == "5"
        assert meeting.status is MeetingStatus.UPLOADED
        request = backend.requests[0]
        assert request.headers["Content-Type"].startswith("multipart/form-data")
        assert b'name="title"\r\n\r\nDesign review\r\n' in request.content
        assert recorded.isoformat().encode() in request.content
        assert b'filename="review.webm"' in request.content
        assert b"Content-Type: audio/webm" in request.content

    @pytest.mark.asyncio
    async def test_create_meeting_from_path(self, meetings, backend, tmp_path):
        path = tmp_path / "call.mp3"
        path.write_bytes(create_fake_audio(64))
        backend.respond("POST", "/meetings", 201, create_fake_meeting(id=6))

        meeting = await meetings.create_meeting_from_path("Call", str(path), "audio/mpeg")

        assert meeting.id == "6"
        assert b'filename="call.mp3"' in backend.requests[0].content

    @pytest.mark.asyncio
    async def test_blank_title_rejected_before_upload(self, meetings, backend):
        with pytest.raises(ValidationError) as exc_info:
            await meetings.create_meeting("   ", "a.webm", b"x")

        assert exc_info.value.code == "meeting_title_required"
        assert backend.requests == []

    @pytest.mark.asyncio
    async def test_invalid_audio_rejected_before_upload(self, meetings, backend):
        with pytest.raises(ValidationError) as exc_info:
            await meetings.create_meeting("Sync", "slides.pdf", b"%PDF", content_type="application/pdf")

        assert exc_info.value.code == "invalid_audio_file"
        assert backend.requests == []


class TestUpdateDeleteAnalyze:
    @pytest.mark.asyncio
    async def test_update_sends_only_changes(self, meetings, backend):
        backend.respond("PUT", "/meetings/3", 200, {"meeting": create_fake_meeting(id=3, title="Renamed")})

        meeting = await meetings.update_meeting("3", UpdateMeeting(title="Renamed"))

        assert meeting.title == "Renamed"
        assert json.loads(backend.requests[0].content) == {"title": "Renamed"}

    @pytest.mark.asyncio
    async def test_delete(self, meetings, backend):
        backend.respond("DELETE", "/meetings/3", 200, wrapped(None))

        assert await meetings.delete_meeting("3") is None
        assert len(backend.calls("DELETE", "/meetings/3")) == 1

    @pytest.mark.asyncio
    async def test_analyze_returns_meeting_when_echoed(self, meetings, backend):
        backend.respond("POST", "/meetings/3/analyze", 200, wrapped({"meeting": create_fake_meeting(id=3, status="PROCESSING")}))

        meeting = await meetings.analyze_meeting("3")

        assert meeting.status is MeetingStatus.PROCESSING

    @pytest.mark.asyncio
    async def test_analyze_without_meeting_returns_none(self, meetings, backend):
        backend.respond("POST", "/meetings/3/analyze", 202, {"message": "queued"})

        assert await meetings.analyze_meeting("3") is None


class TestFeedbackPendingStats:
    @pytest.mark.asyncio
    async def test_feedback(self, meetings, backend):
        backend.respond(
            "GET",
            "/meetings/8/feedback",
            200,
            wrapped({"actionItems": [{"description": "Book room", "assignee": "Park"}], "topics": ["hiring"]}),
        )

        feedback = await meetings.get_feedback("8")

        assert feedback.action_items[0].assignee == "Park"
        assert feedback.topics == ["hiring"]
        assert feedback.follow_up_questions == []

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "body, expected_ids",
        [
            ({"meetings": [create_fake_meeting(id=1, status="PROCESSING")]}, ["1"]),
            (wrapped([create_fake_meeting(id=2, status="UPLOADED")]), ["2"]),
            (wrapped(None), []),
        ],
    )
    async def test_check_pending(self, meetings, backend, body, expected_ids):
        backend.respond("GET", "/meetings/check", 200, body)

        pending = await meetings.check_pending()

        assert [m.id for m in pending] == expected_ids

    @pytest.mark.asyncio
    async def test_stats(self, meetings, backend):
        backend.respond("GET", "/meetings/stats", 200, {"totalMeetings": 4, "completedMeetings": 3, "totalDuration": 5400})

        stats = await meetings.get_stats()

        assert stats.total_meetings == 4
        assert stats.completed_meetings == 3
        assert stats.failed_meetings == 0
