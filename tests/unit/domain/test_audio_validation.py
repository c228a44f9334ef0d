import pytest

from meeting_client.core.exceptions import ValidationError
from meeting_client.domain.validation.audio_file import (
    MAX_FILE_SIZE,
    check_audio_file,
    validate_audio_file,
)
from meeting_client.domain.value_objects.multipart import UploadFile


class _Sized(UploadFile):
    """Upload that reports a size without allocating it."""

    @property
    def size(self) -> int:
        return MAX_FILE_SIZE + 1


@pytest.mark.parametrize(
    "upload, expected",
    [
        (None, "Please select a file."),
        (UploadFile("a.webm", b""), "Empty files cannot be uploaded."),
        (UploadFile("notes.txt", b"x"), "Unsupported file format. Supported formats: .webm, .wav, .mp3, .m4a, .ogg, .mp4"),
        (UploadFile("a.mp3", b"x", "text/plain"), "Only audio files can be uploaded. File type: text/plain"),
    ],
)
def test_invalid_uploads(upload, expected):
    result = check_audio_file(upload, "en")

    assert not result.valid
    assert result.error == expected


def test_too_large():
    result = check_audio_file(_Sized("big.wav", b"x"), "en")

    assert not result.valid
    assert result.error.startswith("File size cannot exceed 100MB")


@pytest.mark.parametrize(
    "filename, content_type",
    [
        ("rec.webm", "audio/webm"),
        ("rec.WAV", "audio/x-wav"),
        ("rec.m4a", "audio/x-m4a"),
        ("rec.mp3", None),
    ],
)
def test_valid_uploads(filename, content_type):
    assert check_audio_file(UploadFile(filename, b"audio", content_type)).valid


def test_validate_audio_file_raises_with_code():
    with pytest.raises(ValidationError) as exc_info:
        validate_audio_file(UploadFile("a.webm", b""), "en")

    assert exc_info.value.code == "invalid_audio_file"


def test_validate_audio_file_returns_upload():
    upload = UploadFile("a.ogg", b"audio", "audio/ogg")
    assert validate_audio_file(upload) is upload


def test_messages_follow_locale():
    result = check_audio_file(None, "ko")
    assert result.error != "Please select a file."
