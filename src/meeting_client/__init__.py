"""Async client for the meeting recording and summarization API."""

__version__ = "0.1.0"

from meeting_client.core.logging import configure_logging
from meeting_client.infrastructure.dependency_injection import MeetingClient, build_meeting_client

__all__ = ["MeetingClient", "build_meeting_client", "configure_logging"]
