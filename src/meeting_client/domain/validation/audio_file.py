"""Audio upload validation.

Rejects recordings the backend would refuse before any bytes leave the
client: missing or empty files, files over the size limit, and files whose
extension or MIME type is not a supported audio format.
"""

from dataclasses import dataclass
from typing import FrozenSet, Optional

import structlog

from meeting_client.core.exceptions import ValidationError
from meeting_client.domain.value_objects.multipart import UploadFile
from meeting_client.utils.i18n import get_translated_message

logger = structlog.get_logger(__name__)

MAX_FILE_SIZE = 100 * 1024 * 1024  # 100MB

ALLOWED_AUDIO_TYPES: FrozenSet[str] = frozenset(
    {
        "audio/webm",
        "audio/wav",
        "audio/mp3",
        "audio/mpeg",
        "audio/mp4",
        "audio/m4a",
        "audio/ogg",
        "audio/x-m4a",
        "audio/x-wav",
    }
)

ALLOWED_AUDIO_EXTENSIONS = (".webm", ".wav", ".mp3", ".m4a", ".ogg", ".mp4")


@dataclass(frozen=True)
class FileValidationResult:
    """Outcome of validating one upload."""

    valid: bool
    error: Optional[str] = None


def check_audio_file(upload: Optional[UploadFile], locale: Optional[str] = None) -> FileValidationResult:
    """Validate an audio upload without raising.

    Args:
        upload: The file about to be sent, or None if nothing was chosen.
        locale: Language of the error message.

    Returns:
        FileValidationResult: ``valid`` plus a translated error when invalid.
    """
    if upload is None:
        return FileValidationResult(False, get_translated_message("file_required", locale))

    if upload.size == 0:
        return FileValidationResult(False, get_translated_message("file_empty", locale))

    if upload.size > MAX_FILE_SIZE:
        return FileValidationResult(
            False,
            get_translated_message(
                "file_too_large",
                locale,
                max_mb=f"{MAX_FILE_SIZE / (1024 * 1024):.0f}",
                size_mb=f"{upload.size / (1024 * 1024):.1f}",
            ),
        )

    if upload.extension not in ALLOWED_AUDIO_EXTENSIONS:
        return FileValidationResult(
            False,
            get_translated_message(
                "file_extension_unsupported", locale, extensions=", ".join(ALLOWED_AUDIO_EXTENSIONS)
            ),
        )

    # An unknown content type is checked by extension only
    if upload.content_type and upload.content_type not in ALLOWED_AUDIO_TYPES:
        return FileValidationResult(
            False,
            get_translated_message("file_type_unsupported", locale, mime_type=upload.content_type),
        )

    return FileValidationResult(True)


def validate_audio_file(upload: Optional[UploadFile], locale: Optional[str] = None) -> UploadFile:
    """Validate an audio upload and return it unchanged.

    Raises:
        ValidationError: If the file would be rejected.
    """
    result = check_audio_file(upload, locale)
    if not result.valid:
        logger.info(
            "audio_file_rejected",
            filename=getattr(upload, "filename", None),
            reason=result.error,
        )
        raise ValidationError(result.error, code="invalid_audio_file")
    return upload
