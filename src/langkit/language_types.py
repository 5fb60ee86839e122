"""Shared types, constants, and exceptions for the localization engine.

Holds the persistence format enumeration, the language metadata record,
the reserved file names, and the two-level error taxonomy used by the
engines and the coordinators.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


RUNTIME_FILE_NAME = "runtime"
"""Base name of the per-language file holding generic runtime strings."""

LANGUAGE_INFO_FILE_NAME = "lang"
"""Base name of the per-language file holding :class:`LanguageInfo` data."""

STRINGS_SECTION = "strings"
"""Reserved group holding hashed runtime strings (INI section, JSON key)."""

LIST_SEPARATOR = "§"
"""Separator used when a list attribute is stored as a single value."""

# User-facing error messages.
MSG_CANT_CREATE_PATH = "Can't create {path} path."
MSG_ENGINE_NOT_IMPLEMENTED = "Engine not implemented."
MSG_LANGUAGE_CANNOT_BE_EMPTY = "Language property can not be empty."
MSG_NO_ENGINE_SELECTED = "No Language engine selected."
MSG_NO_FILE_SELECTED = "No Language file selected."
MSG_CLASS_NOT_A_CODEC = "The class {name} does not implement FormatCodec"


class PersistenceFormat(Enum):
    """File formats a translation engine can read and write.

    The value doubles as the identifier used in settings files.
    """

    JSON = "json"
    INI = "ini"
    INI_FLAT = "ini_flat"

    @property
    def extension(self) -> str:
        """File extension (with leading dot) for this format."""
        return _FILE_EXTENSIONS[self]

    @property
    def comment_start(self) -> str:
        """Comment prefix of the format, empty when it has none."""
        return _COMMENT_STARTS[self]

    @classmethod
    def from_extension(cls, file_name: str | Path) -> "PersistenceFormat":
        """Return the format matching the extension of ``file_name``.

        Raises:
            ConfigurationError: If no format uses the extension.
        """
        suffix = Path(file_name).suffix.lower()
        for fmt, ext in _FILE_EXTENSIONS.items():
            if ext == suffix:
                return fmt
        raise ConfigurationError(f"Unknown language file extension '{suffix}'.")

    @classmethod
    def parse(cls, value: "str | PersistenceFormat") -> "PersistenceFormat":
        """Coerce a settings value (name or value, any case) into a format."""
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for fmt in cls:
            if text in (fmt.value, fmt.name.lower()):
                return fmt
        raise ConfigurationError(f"Unknown persistence format '{value}'.")


_FILE_EXTENSIONS: dict[PersistenceFormat, str] = {
    PersistenceFormat.JSON: ".json",
    PersistenceFormat.INI: ".lng",
    PersistenceFormat.INI_FLAT: ".clng",
}

_COMMENT_STARTS: dict[PersistenceFormat, str] = {
    PersistenceFormat.JSON: "",
    PersistenceFormat.INI: ";",
    PersistenceFormat.INI_FLAT: ";",
}


@dataclass(frozen=True)
class LanguageInfo:
    """Describes a language supported by the application.

    Attributes:
        id: BCP-47 identifier, such as ``it-IT`` or ``ar-SA``.
        name: Language name in English.
        native_name: Language name as written by its speakers.
        is_right_to_left: True for scripts such as Arabic or Hebrew.
        ui_font: Suggested UI font, empty when there is no preference.
        fallback_font: Font to use when ``ui_font`` is unavailable.
    """

    id: str = ""
    name: str = ""
    native_name: str = ""
    is_right_to_left: bool = False
    ui_font: str = ""
    fallback_font: str = ""


class LanguageError(Exception):
    """Base class for every error raised by the localization engine."""


class ConfigurationError(LanguageError):
    """Fatal misconfiguration; always raised to the caller."""


class DomainError(LanguageError):
    """Non-fatal translation failure; reported by coordinators, not raised."""


__all__ = [
    "RUNTIME_FILE_NAME",
    "LANGUAGE_INFO_FILE_NAME",
    "STRINGS_SECTION",
    "LIST_SEPARATOR",
    "PersistenceFormat",
    "LanguageInfo",
    "LanguageError",
    "ConfigurationError",
    "DomainError",
]
