from __future__ import annotations

"""
Internationalization (i18n) utility module for handling translations and language preferences.

This module provides functionality for:
- Loading and managing translations for the supported languages
- Translating user-facing recovery messages
- Determining user language from query parameters or headers
- Fallback mechanisms for missing translations

The module uses Python's built-in gettext for translation management. Messages
may carry ``str.format`` placeholders, filled through keyword arguments.
"""

import os
import gettext
from typing import Dict, Optional
from fastapi import Request
from src.core.config.settings import settings
from src.core.logging import logger

# Store translations for each language
_translations: Dict[str, gettext.NullTranslations] = {}

# ---------------------------------------------------------------------------
# Internal fallback catalog (parsed from *.po* files)
# ---------------------------------------------------------------------------

# Compiled *.mo* files are optional. When they are missing or stale, gettext
# returns the msgid unchanged, so the *.po* sources are parsed at startup and
# kept as a secondary lookup.

_fallback_catalogs: Dict[str, Dict[str, str]] = {}


def _locales_path() -> str:
    base_dir = os.path.abspath(os.path.join(os.path.dirname(__file__), "../.."))
    return os.path.join(base_dir, "locales")


def setup_i18n() -> None:
    """
    Initialize the internationalization system by loading translations.

    Loads translation files for each supported language from the locales directory
    and parses .po files as a fallback for environments where .mo files were not
    compiled.

    Raises:
        FileNotFoundError: If the locales directory is not found.
    """
    locales_path = _locales_path()

    if not os.path.exists(locales_path):
        raise FileNotFoundError(f"Locales directory not found: {locales_path}")

    for lang in settings.SUPPORTED_LANGUAGES:
        translation = gettext.translation(
            domain="messages",
            localedir=locales_path,
            languages=[lang],
            fallback=True,
        )
        _translations[lang] = translation

        po_path = os.path.join(locales_path, lang, "LC_MESSAGES", "messages.po")
        catalog: Dict[str, str] = {}
        if os.path.exists(po_path):
            # Limit file size to prevent memory exhaustion
            file_size = os.path.getsize(po_path)
            if file_size > 10 * 1024 * 1024:
                logger.warning("i18n_po_file_too_large", lang=lang, size=file_size)
                continue

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
        logger.info("i18n_initialized", language=lang, entries=len(catalog))

    logger.info("i18n_setup_complete", default_locale=settings.DEFAULT_LANGUAGE)


def get_translated_message(key: str, locale: str = settings.DEFAULT_LANGUAGE, **params) -> str:
    """
    Retrieve a translated message for the given key and locale.

    Validates the requested locale, attempts translation, and falls back to the
    default language or key if needed.

    Args:
        key: The message key to translate.
        locale: The target language code (defaults to DEFAULT_LANGUAGE).
        **params: Values for ``{placeholder}`` fields in the message.

    Returns:
        The translated message or the original key if translation fails.
    """
    if not _translations:
        setup_i18n()

    if locale not in _translations:
        logger.warning("unsupported_locale_requested", requested_locale=locale,
                       fallback_locale=settings.DEFAULT_LANGUAGE)
        locale = settings.DEFAULT_LANGUAGE

    translation = _translations.get(locale)
    if not translation:
        logger.error("translation_missing_for_locale", locale=locale)
        return key

    translated = translation.gettext(key)
    if translated == key:
        catalog = _fallback_catalogs.get(locale, {})
        translated = catalog.get(key, key)
        if translated == key:
            logger.warning("translation_key_not_found", key=key, locale=locale)

    if params:
        translated = translated.format(**params)
    return translated


def get_request_language(request: Request) -> str:
    """
    Determine the preferred language from a request.

    Checks language preference in order: query parameter 'lang',
    Accept-Language header, then default language from settings.

    Args:
        request: The FastAPI request object.

    Returns:
        The determined language code.
    """
    lang = request.query_params.get("lang")
    if lang and lang in settings.SUPPORTED_LANGUAGES:
        return lang

    accept_language = request.headers.get("Accept-Language",
                                          settings.DEFAULT_LANGUAGE)
    for lang in accept_language.split(","):
        lang = lang.split(";")[0].strip().split("-")[0]
        if lang in settings.SUPPORTED_LANGUAGES:
            return lang

    return settings.DEFAULT_LANGUAGE
