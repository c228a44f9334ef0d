import pytest

from meeting_client.core.config.settings import settings
from meeting_client.utils import i18n
from meeting_client.utils.i18n import _translations, get_translated_message, setup_i18n


@pytest.fixture(autouse=True)
def fresh_catalogs():
    _translations.clear()
    yield
    _translations.clear()


def test_setup_loads_every_supported_language():
    setup_i18n()

    for lang in settings.SUPPORTED_LANGUAGES:
        assert lang in _translations
        assert i18n._fallback_catalogs[lang]["session_expired"]


def test_setup_i18n_locales_not_found(tmp_path):
    with pytest.raises(FileNotFoundError):
        setup_i18n(str(tmp_path / "missing"))


def test_english_and_korean_messages():
    assert get_translated_message("session_expired", "en") == "Your session has expired. Please log in again."
    assert get_translated_message("session_expired", "ko") != get_translated_message("session_expired", "en")


def test_placeholders_are_formatted():
    assert get_translated_message("analysis_timeout", "en", meeting_id="7") == "Meeting 7 is still awaiting analysis"


def test_unsupported_locale_falls_back_to_default(mocker):
    mock_logger = mocker.patch("meeting_client.utils.i18n.logger")

    message = get_translated_message("file_required", "fr")

    assert message == get_translated_message("file_required", settings.DEFAULT_LANGUAGE)
    mock_logger.warning.assert_any_call(
        "unsupported_locale_requested", requested_locale="fr", fallback_locale=settings.DEFAULT_LANGUAGE
    )


def test_unknown_key_returns_key(mocker):
    mock_logger = mocker.patch("meeting_client.utils.i18n.logger")

    assert get_translated_message("no_such_key", "en") == "no_such_key"
    mock_logger.warning.assert_called_with("translation_key_not_found", key="no_such_key", locale="en")
