"""Waits for a meeting's analysis to finish by polling the pending list."""

import asyncio
from typing import Dict, Iterable, Optional

import structlog

from meeting_client.core.config.settings import settings
from meeting_client.core.exceptions import PollingTimeoutError
from meeting_client.domain.entities.meeting import Meeting
from meeting_client.utils.i18n import get_translated_message

from .meeting_service import MeetingService

logger = structlog.get_logger(__name__)


class AnalysisPoller:
    """Polls ``/meetings/check`` until a meeting leaves the pending set.

    Attributes:
        meetings (MeetingService): Service used for the check and the final
            fetch.
        interval (float): Seconds between two checks.
        timeout (float): Seconds after which waiting gives up.
    """

    def __init__(
        self,
        meetings: MeetingService,
        *,
        interval: float = settings.POLL_INTERVAL_SECONDS,
        timeout: float = settings.POLL_TIMEOUT_SECONDS,
        locale: Optional[str] = None,
    ):
        self.meetings = meetings
        self.interval = interval
        self.timeout = timeout
        self.locale = locale

    async def wait_for_completion(self, meeting_id: str) -> Meeting:
        """Block until the meeting is analyzed (or failed) and return it.

        Raises:
            PollingTimeoutError: Still pending after ``timeout`` seconds.
            ApiError: A check or the final fetch failed.
        """
        meeting_id = str(meeting_id)
        loop = asyncio.get_running_loop()
        deadline = loop.time() + self.timeout
        attempts = 0

        while True:
            attempts += 1
            pending = await self.meetings.check_pending()
            if meeting_id not in {m.id for m in pending}:
                break

            remaining = deadline - loop.time()
            if remaining <= 0:
                logger.warning("analysis_polling_timed_out", meeting_id=meeting_id, attempts=attempts)
                raise PollingTimeoutError(
                    get_translated_message("analysis_timeout", self.locale, meeting_id=meeting_id),
                    meeting_id=meeting_id,
                )
            await asyncio.sleep(min(self.interval, remaining))

        meeting = await self.meetings.get_meeting(meeting_id)
        logger.info(
            "analysis_finished", meeting_id=meeting_id, status=meeting.status.value, attempts=attempts
        )
        return meeting

    async def wait_for_all(self, meeting_ids: Iterable[str]) -> Dict[str, Meeting]:
        """Wait for several meetings concurrently, keyed by id."""
        ids = [str(i) for i in meeting_ids]
        results = await asyncio.gather(*(self.wait_for_completion(i) for i in ids))
        return dict(zip(ids, results))
