"""Readers for language metadata files.

Each loader parses only the metadata part of a file and ignores the
translation data. Missing fields fall back to the :class:`LanguageInfo`
defaults; failures to read or parse the file propagate unchanged.
"""

from __future__ import annotations

import configparser
import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from .language_types import LanguageInfo

INI_LANGUAGE_SECTION = "Language"
JSON_LANGUAGE_KEY = "language"


class LanguageInfoLoader(ABC):
    """Loads a :class:`LanguageInfo` record from a format-specific file."""

    @abstractmethod
    def load_from_file(self, file_path: str | Path) -> LanguageInfo:
        """Read the metadata stored in ``file_path``."""


class IniLanguageInfoLoader(LanguageInfoLoader):
    """Reads the ``[Language]`` section of an INI language file."""

    def load_from_file(self, file_path: str | Path) -> LanguageInfo:
        parser = configparser.ConfigParser(interpolation=None, strict=False)
        parser.optionxform = str  # type: ignore[assignment]
        with open(file_path, encoding="utf-8-sig") as handle:
            parser.read_file(handle)

        if not parser.has_section(INI_LANGUAGE_SECTION):
            return LanguageInfo()

        section = parser[INI_LANGUAGE_SECTION]
        return LanguageInfo(
            id=section.get("Id", ""),
            name=section.get("Name", ""),
            native_name=section.get("NativeName", ""),
            is_right_to_left=section.getboolean("IsRightToLeft", fallback=False),
            ui_font=section.get("UIFont", ""),
            fallback_font=section.get("FallbackFont", ""),
        )


class JsonLanguageInfoLoader(LanguageInfoLoader):
    """Reads the top-level ``language`` object of a JSON language file."""

    def load_from_file(self, file_path: str | Path) -> LanguageInfo:
        data: Any = json.loads(Path(file_path).read_text(encoding="utf-8-sig"))
        lang = data.get(JSON_LANGUAGE_KEY) if isinstance(data, dict) else None
        if not isinstance(lang, dict):
            return LanguageInfo()

        is_right_to_left = lang.get("isRightToLeft", False)
        if not isinstance(is_right_to_left, bool):
            raise ValueError(f"isRightToLeft must be a JSON boolean, not {is_right_to_left!r}")

        return LanguageInfo(
            id=str(lang.get("id", "")),
            name=str(lang.get("name", "")),
            native_name=str(lang.get("nativeName", "")),
            is_right_to_left=is_right_to_left,
            ui_font=str(lang.get("uiFont", "")),
            fallback_font=str(lang.get("fallbackFont", "")),
        )


__all__ = [
    "LanguageInfoLoader",
    "IniLanguageInfoLoader",
    "JsonLanguageInfoLoader",
]
