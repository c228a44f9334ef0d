"""Domain interfaces (ports) the infrastructure layer implements."""

from .credential_store import ICredentialStore

__all__ = ["ICredentialStore"]
