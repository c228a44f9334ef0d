"""Factories that assemble the client from settings."""

from .client_factory import MeetingClient, build_credential_store, build_http_client, build_meeting_client

__all__ = ["MeetingClient", "build_credential_store", "build_http_client", "build_meeting_client"]
