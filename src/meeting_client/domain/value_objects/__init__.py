"""Domain value objects for the meeting client.

Value objects are immutable objects that describe domain concepts by their
attributes rather than their identity.
"""

from .credentials import CredentialPair, TokenPair
from .envelope import ApiEnvelope, Envelope
from .multipart import MultipartForm, UploadFile

__all__ = [
    "CredentialPair",
    "TokenPair",
    "ApiEnvelope",
    "Envelope",
    "MultipartForm",
    "UploadFile",
]
