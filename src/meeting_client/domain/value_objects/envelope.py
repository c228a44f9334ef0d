"""Response envelope handling.

The backend answers either with a bare payload or with the payload wrapped as
``{"data": ..., "message": ..., "success": ...}``. Each endpoint contract
states which shape it uses by picking an `Envelope` mode once; the client
normalizes at the boundary so callers only ever see the payload.
"""

from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict


class Envelope(str, Enum):
    """How the payload of a successful response is framed."""

    WRAPPED = "wrapped"
    BARE = "bare"
    AUTO = "auto"


class ApiEnvelope(BaseModel):
    """The ``{data, message, success}`` wrapper."""

    model_config = ConfigDict(extra="ignore")

    data: Any = None
    message: Optional[str] = None
    success: bool = True


def looks_wrapped(raw: Any) -> bool:
    """True when a decoded body has the shape of an `ApiEnvelope`."""
    return isinstance(raw, Mapping) and "data" in raw and "success" in raw


def open_envelope(raw: Any, envelope: Envelope) -> Optional[ApiEnvelope]:
    """Parse ``raw`` as an `ApiEnvelope` if the contract says it is one.

    Returns None for bare payloads. ``WRAPPED`` contracts whose body is not a
    mapping raise ``ValueError``.
    """
    if envelope is Envelope.BARE:
        return None
    if envelope is Envelope.AUTO and not looks_wrapped(raw):
        return None
    if not isinstance(raw, Mapping):
        raise ValueError("Expected a wrapped response body")
    return ApiEnvelope.model_validate(raw)
