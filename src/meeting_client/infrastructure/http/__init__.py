"""HTTP infrastructure components."""

from .client import AuthenticatedHttpClient

__all__ = ["AuthenticatedHttpClient"]
