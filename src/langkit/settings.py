"""Localization settings persistence.

Stores the languages folder, active language, file format and engine
options in a JSON file. Stored values are merged over
:data:`DEFAULT_SETTINGS`; a missing, unreadable or malformed file yields
the defaults.

Usage::

    from langkit import get_language_server
    from langkit.settings import apply_to_server, load_settings

    settings = load_settings("langkit.json")
    apply_to_server(settings, get_language_server())
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, List

from .language_types import ConfigurationError, PersistenceFormat

if TYPE_CHECKING:
    from .language_server import GlobalLanguageServer

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_PATH = Path.home() / ".langkit.json"

DEFAULT_SETTINGS: Dict[str, Any] = {
    "languages_folder": "languages",
    "language": "",
    "file_format": PersistenceFormat.INI.value,
    "create_if_missing": False,
    "exclude_on_action": True,
    "exclude_classes": [],
    "exclude_attributes": [],
    "register_on_start": True,
}


def _as_list(value: Any) -> List[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, (list, tuple)):
        return [str(item) for item in value]
    return []


@dataclass
class LanguageSettings:
    """Typed view of the settings dictionary."""

    languages_folder: str = DEFAULT_SETTINGS["languages_folder"]
    language: str = DEFAULT_SETTINGS["language"]
    file_format: PersistenceFormat = PersistenceFormat.INI
    create_if_missing: bool = DEFAULT_SETTINGS["create_if_missing"]
    exclude_on_action: bool = DEFAULT_SETTINGS["exclude_on_action"]
    exclude_classes: List[str] = field(default_factory=list)
    exclude_attributes: List[str] = field(default_factory=list)
    register_on_start: bool = DEFAULT_SETTINGS["register_on_start"]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LanguageSettings":
        """Build settings from a dictionary, filling gaps with defaults.

        An unknown ``file_format`` falls back to the default format.
        """
        merged = {**DEFAULT_SETTINGS, **data}
        try:
            file_format = PersistenceFormat.parse(merged["file_format"])
        except ConfigurationError as exc:
            logger.warning("%s Using %s.", exc, DEFAULT_SETTINGS["file_format"])
            file_format = PersistenceFormat.parse(DEFAULT_SETTINGS["file_format"])

        return cls(
            languages_folder=str(merged["languages_folder"] or ""),
            language=str(merged["language"] or ""),
            file_format=file_format,
            create_if_missing=bool(merged["create_if_missing"]),
            exclude_on_action=bool(merged["exclude_on_action"]),
            exclude_classes=_as_list(merged["exclude_classes"]),
            exclude_attributes=_as_list(merged["exclude_attributes"]),
            register_on_start=bool(merged["register_on_start"]),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "languages_folder": self.languages_folder,
            "language": self.language,
            "file_format": self.file_format.value,
            "create_if_missing": self.create_if_missing,
            "exclude_on_action": self.exclude_on_action,
            "exclude_classes": list(self.exclude_classes),
            "exclude_attributes": list(self.exclude_attributes),
            "register_on_start": self.register_on_start,
        }


def load_settings(path: str | Path | None = None) -> LanguageSettings:
    """Return stored settings merged with defaults.

    Args:
        path: Settings file; defaults to ``~/.langkit.json``.

    Returns:
        The loaded settings, or the defaults when the file is missing or
        cannot be parsed.
    """
    settings_path = Path(path) if path else DEFAULT_SETTINGS_PATH
    if not settings_path.exists():
        return LanguageSettings.from_dict({})

    try:
        data = json.loads(settings_path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        logger.warning("Could not read settings from %s: %s", settings_path, exc)
        return LanguageSettings.from_dict({})

    if not isinstance(data, dict):
        return LanguageSettings.from_dict({})
    return LanguageSettings.from_dict(data)


def save_settings(settings: LanguageSettings, path: str | Path | None = None) -> bool:
    """Persist settings to disk.

    Returns:
        True if the file was written.
    """
    settings_path = Path(path) if path else DEFAULT_SETTINGS_PATH
    try:
        settings_path.parent.mkdir(parents=True, exist_ok=True)
        serialized = json.dumps(settings.to_dict(), indent=2, sort_keys=True)
        settings_path.write_text(serialized, encoding="utf-8")
    except OSError as exc:
        logger.warning("Could not save settings to %s: %s", settings_path, exc)
        return False
    return True


def apply_to_server(settings: LanguageSettings, server: "GlobalLanguageServer") -> None:
    """Push format, folder and language onto ``server``.

    The language goes last so that clients synchronize once everything
    else is in place.
    """
    server.file_format = settings.file_format
    server.root_path = settings.languages_folder
    if settings.language:
        server.language = settings.language


def coordinator_options(settings: LanguageSettings) -> Dict[str, Any]:
    """Keyword arguments for :class:`~langkit.coordinator.LanguageCoordinator`."""
    options: Dict[str, Any] = {
        "file_format": settings.file_format,
        "root_path": settings.languages_folder,
        "create_if_missing": settings.create_if_missing,
        "exclude_on_action": settings.exclude_on_action,
        "exclude_classes": list(settings.exclude_classes),
        "exclude_attributes": list(settings.exclude_attributes),
        "register_on_start": settings.register_on_start,
    }
    if settings.language:
        options["language"] = settings.language
    return options


__all__ = [
    "DEFAULT_SETTINGS",
    "DEFAULT_SETTINGS_PATH",
    "LanguageSettings",
    "apply_to_server",
    "coordinator_options",
    "load_settings",
    "save_settings",
]
