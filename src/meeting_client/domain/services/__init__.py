"""Domain services built on the authenticated HTTP client."""

from .analysis_poller import AnalysisPoller
from .auth_service import AuthService
from .meeting_service import MeetingService

__all__ = ["AnalysisPoller", "AuthService", "MeetingService"]
