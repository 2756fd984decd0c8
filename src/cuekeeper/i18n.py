"""Internationalization utilities."""

import os
from pathlib import Path
from typing import Any, Dict

import yaml

from cuekeeper.paths import get_i18n_dir

# Cache for loaded strings to avoid repeated file I/O
_strings_cache: Dict[str, Dict[str, Any]] = {}

# Supported languages
SUPPORTED_LANGUAGES = ["zh", "en"]
DEFAULT_LANGUAGE = "zh"
FALLBACK_LANGUAGE = "en"


def _get_i18n_dir() -> Path:
    return get_i18n_dir()


def load_strings(lang: str) -> Dict[str, Any]:
    """
    Load strings from locales/strings_{lang}.yaml.

    Args:
        lang: Language code (zh, en)

    Returns:
        Dictionary with all strings for the given language

    Raises:
        ValueError: If language is not supported
        FileNotFoundError: If the strings file doesn't exist
    """
    if lang not in SUPPORTED_LANGUAGES:
        raise ValueError(
            f"Language '{lang}' not supported. Supported languages: {SUPPORTED_LANGUAGES}"
        )

    if lang in _strings_cache:
        return _strings_cache[lang]

    strings_file = _get_i18n_dir() / f"strings_{lang}.yaml"

    if not strings_file.exists():
        raise FileNotFoundError(f"Strings file not found: {strings_file}")

    with open(strings_file, "r", encoding="utf-8") as f:
        strings = yaml.safe_load(f)

    _strings_cache[lang] = strings or {}

    return _strings_cache[lang]


def _lookup(strings: Dict[str, Any], key: str) -> Any:
    """Walk a dot-notation key through nested dicts, None if missing."""
    value: Any = strings
    for part in key.split("."):
        if isinstance(value, dict) and part in value:
            value = value[part]
        else:
            return None
    return value


def get_string(key: str, lang: str = DEFAULT_LANGUAGE, **kwargs) -> str:
    """
    Get a string by key for the specified language.

    Supports dot notation for nested keys (e.g., "setup.placeholder_name").
    Missing keys fall back to English, then to the key itself.

    Args:
        key: String key (supports dot notation for nested keys)
        lang: Language code (zh, en)
        **kwargs: Format variables to substitute in the string

    Returns:
        The translated string, or the key itself if not found

    Examples:
        >>> get_string("setup.placeholder_name", "en", number=3)
        "Player 3"
        >>> get_string("setup.placeholder_name", "zh", number=3)
        "玩家 3"
    """
    try:
        value = _lookup(load_strings(lang), key)
    except (ValueError, FileNotFoundError):
        value = None

    if value is None and lang != FALLBACK_LANGUAGE:
        try:
            value = _lookup(load_strings(FALLBACK_LANGUAGE), key)
        except (ValueError, FileNotFoundError):
            return key

    if not isinstance(value, str):
        return key

    if kwargs:
        try:
            return value.format(**kwargs)
        except (KeyError, ValueError):
            return value

    return value


def clear_cache() -> None:
    """Clear the strings cache. Useful for testing or reloading strings."""
    _strings_cache.clear()


def get_language_from_env() -> str:
    """
    Get the language from environment variable CUEKEEPER_LANG.

    Returns:
        Language code (defaults to DEFAULT_LANGUAGE if not set or invalid)
    """
    env_lang = os.environ.get("CUEKEEPER_LANG", DEFAULT_LANGUAGE)
    if env_lang in SUPPORTED_LANGUAGES:
        return env_lang
    return DEFAULT_LANGUAGE
