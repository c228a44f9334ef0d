from __future__ import annotations

"""
Internationalization (i18n) utility module for user-facing messages.

This module provides functionality for:
- Loading translations for every supported language
- Translating message keys with a fallback to the default language
- Logging of translation-related events

The module uses Python's built-in gettext for translation management. Catalogs
live in the package's ``locales`` directory.
"""

import gettext
import os
from typing import Dict, Optional

from meeting_client.core.config.settings import settings
from meeting_client.core.logging import logger

_translations: Dict[str, gettext.NullTranslations] = {}

# ---------------------------------------------------------------------------
# Internal fallback catalog (parsed from *.po* files)
# ---------------------------------------------------------------------------

# Compiled *.mo* files are not shipped with the package, so gettext usually
# returns the msgid unchanged. The *.po* sources are parsed at setup and kept
# as a secondary lookup.

_fallback_catalogs: Dict[str, Dict[str, str]] = {}

LOCALES_PATH = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), "locales")


def setup_i18n(locales_path: str = LOCALES_PATH) -> None:
    """
    Initialize the internationalization system by loading translations.

    Raises:
        FileNotFoundError: If the locales directory is not found.
    """
    if not os.path.exists(locales_path):
        raise FileNotFoundError(f"Locales directory not found: {locales_path}")

    for lang in settings.SUPPORTED_LANGUAGES:
        _translations[lang] = gettext.translation(
            domain="messages",
            localedir=locales_path,
            languages=[lang],
            fallback=True,
        )

        po_path = os.path.join(locales_path, lang, "LC_MESSAGES", "messages.po")
        catalog: Dict[str, str] = {}
        if os.path.exists(po_path):
            with open(po_path, "r", encoding="utf-8") as po_file:
                current_msgid: Optional[str] = None
                for raw_line in po_file:
                    line = raw_line.strip()
                    if line.startswith("msgid "):
                        current_msgid = line[6:].strip().strip('"')
                    elif line.startswith("msgstr ") and current_msgid is not None:
                        msgstr = line[7:].strip().strip('"')
                        catalog[current_msgid] = msgstr or current_msgid
                        current_msgid = None

        _fallback_catalogs[lang] = catalog
        logger.debug("i18n_initialized", language=lang, entries=len(catalog))


def get_translated_message(key: str, locale: Optional[str] = None, **params) -> str:
    """
    Retrieve a translated message for the given key and locale.

    Unknown locales fall back to the default language, unknown keys to the
    key itself. Keyword arguments are substituted with ``str.format``.

    Args:
        key: The message key to translate.
        locale: The target language code (defaults to DEFAULT_LANGUAGE).
        **params: Values for the placeholders in the translated message.

    Returns:
        The translated, formatted message.
    """
    if not _translations:
        setup_i18n()

    locale = locale or settings.DEFAULT_LANGUAGE
    if locale not in _translations:
        logger.warning(
            "unsupported_locale_requested",
            requested_locale=locale,
            fallback_locale=settings.DEFAULT_LANGUAGE,
        )
        locale = settings.DEFAULT_LANGUAGE

    translated = _translations[locale].gettext(key)
    if translated == key:
        translated = _fallback_catalogs.get(locale, {}).get(key, key)
        if translated == key:
            logger.warning("translation_key_not_found", key=key, locale=locale)

    if params:
        translated = translated.format(**params)
    return translated
