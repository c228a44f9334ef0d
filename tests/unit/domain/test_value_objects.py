import pytest

from meeting_client.domain.value_objects import (
    ApiEnvelope,
    CredentialPair,
    Envelope,
    MultipartForm,
    TokenPair,
    UploadFile,
)
from meeting_client.domain.value_objects.envelope import looks_wrapped, open_envelope


class TestCredentialPair:
    def test_empty_access_token_rejected(self):
        with pytest.raises(ValueError):
            CredentialPair("")

    def test_empty_refresh_token_normalized(self):
        assert CredentialPair("a", "").refresh_token is None

    def test_rotate_keeps_refresh_token_when_not_returned(self):
        pair = CredentialPair("old-access", "old-refresh")

        assert pair.rotate("new-access") == CredentialPair("new-access", "old-refresh")
        assert pair.rotate("new-access", "new-refresh").refresh_token == "new-refresh"

    def test_from_dict(self):
        assert CredentialPair.from_dict({"access_token": None}) is None
        assert CredentialPair.from_dict({"access_token": "a"}) == CredentialPair("a")

    def test_repr_hides_tokens(self):
        text = repr(CredentialPair("secret-access", "secret-refresh"))
        assert "secret" not in text


class TestTokenPair:
    def test_accepts_camel_and_snake_case(self):
        camel = TokenPair.model_validate({"accessToken": "a", "refreshToken": "r"})
        snake = TokenPair.model_validate({"access_token": "a", "refresh_token": "r"})

        assert camel.access_token == snake.access_token == "a"
        assert camel.refresh_token == snake.refresh_token == "r"
        assert camel.token_type == "Bearer"

    def test_missing_tokens_are_none(self):
        assert TokenPair.model_validate({"user": {"id": 1}}).access_token is None


class TestEnvelope:
    def test_looks_wrapped(self):
        assert looks_wrapped({"data": 1, "success": True})
        assert not looks_wrapped({"data": 1})
        assert not looks_wrapped([{"data": 1, "success": True}])

    def test_bare_contract_never_opens(self):
        assert open_envelope({"data": 1, "success": True}, Envelope.BARE) is None

    def test_auto_opens_only_wrapper_shaped_bodies(self):
        assert open_envelope({"id": 1}, Envelope.AUTO) is None
        opened = open_envelope({"data": {"id": 1}, "success": False, "message": "no"}, Envelope.AUTO)
        assert opened == ApiEnvelope(data={"id": 1}, success=False, message="no")

    def test_wrapped_contract_requires_mapping(self):
        with pytest.raises(ValueError):
            open_envelope([1, 2], Envelope.WRAPPED)

    def test_wrapped_contract_defaults_success(self):
        assert open_envelope({"data": [1]}, Envelope.WRAPPED).success is True


class TestMultipart:
    def test_upload_file_properties(self):
        upload = UploadFile("Team Sync.M4A", b"1234")

        assert upload.size == 4
        assert upload.extension == ".m4a"
        assert "1234" not in repr(upload)

    def test_from_path(self, tmp_path):
        path = tmp_path / "call.wav"
        path.write_bytes(b"RIFF")

        upload = UploadFile.from_path(str(path), "audio/wav")

        assert upload == UploadFile("call.wav", b"RIFF", "audio/wav")

    def test_as_httpx_defaults_content_type(self):
        form = MultipartForm(fields={"title": "Sync"}, files={"file": UploadFile("a.mp3", b"x")})

        data, files = form.as_httpx()

        assert data == {"title": "Sync"}
        assert files == [("file", ("a.mp3", b"x", "application/octet-stream"))]
