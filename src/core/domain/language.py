"""Workspace languages.

This module centralizes the language codes the service accepts for a
workspace. Keeping it in the domain layer lets the CLI validate options
without importing adapters.
"""

from __future__ import annotations

from enum import Enum

_LABELS = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "ja": "Japanese",
    "ko": "Korean",
    "pt-br": "Brazilian Portuguese",
    "zh-cn": "Simplified Chinese",
    "ar": "Arabic",
    "nl": "Dutch",
    "cs": "Czech",
}


class Language(str, Enum):
    """Language codes accepted for a workspace."""

    ENGLISH = "en"
    SPANISH = "es"
    FRENCH = "fr"
    GERMAN = "de"
    ITALIAN = "it"
    JAPANESE = "ja"
    KOREAN = "ko"
    BRAZILIAN_PORTUGUESE = "pt-br"
    SIMPLIFIED_CHINESE = "zh-cn"
    ARABIC = "ar"
    DUTCH = "nl"
    CZECH = "cs"

    @classmethod
    def default(cls) -> "Language":
        """Return the language the service assumes when none is given."""

        return cls.ENGLISH

    def label(self) -> str:
        """Human readable label for tables and prompts."""

        return _LABELS[self.value]


def language_label(code: str) -> str:
    """Label for a raw code coming from the wire; unknown codes are shown as-is."""

    try:
        return Language(code.lower()).label()
    except ValueError:
        return code
