"""Application-wide language server.

The server federates every :class:`~langkit.coordinator.LanguageCoordinator`
of an application under one language, one languages folder and one file
format. Changing any of them reloads the shared runtime strings, pushes
the new settings to every registered coordinator, reads the language
metadata and finally notifies listeners.

Files are looked up in ``<root_path>/<language>/``:

* ``runtime<ext>``: runtime strings shared by the whole application.
* ``lang<ext>``: language metadata (:class:`~langkit.language_types.LanguageInfo`).

Usage::

    from langkit import get_language_server

    server = get_language_server()
    server.root_path = "languages"
    server.language = "it"
    print(server.translate("Open file"))
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path
from typing import TYPE_CHECKING, Callable, List, Optional

from .engines.base_engine import EngineOptions, TranslationEngine
from .engines.engine_registry import EngineRegistry, get_default_registry
from .language_types import (
    LANGUAGE_INFO_FILE_NAME,
    RUNTIME_FILE_NAME,
    LanguageInfo,
    PersistenceFormat,
)
from .translation_store import TranslationStore

if TYPE_CHECKING:
    from .coordinator import LanguageCoordinator

logger = logging.getLogger(__name__)

LanguageListener = Callable[[str, str], None]


class GlobalLanguageServer:
    """Shared language state and runtime strings for many coordinators.

    Attributes:
        language_info: Metadata of the active language.
    """

    def __init__(
        self,
        registry: Optional[EngineRegistry] = None,
        file_format: PersistenceFormat = PersistenceFormat.INI,
    ) -> None:
        self._registry = registry or get_default_registry()
        self._lock = threading.RLock()
        self._clients: List["LanguageCoordinator"] = []
        self._listeners: List[LanguageListener] = []
        self._store = TranslationStore()
        self._language = ""
        self._root_path = ""
        self._file_format = file_format
        self.language_info = LanguageInfo()

    # -- settings --------------------------------------------------------

    @property
    def language(self) -> str:
        return self._language

    @language.setter
    def language(self, value: str) -> None:
        value = value or ""
        if value == self._language:
            return
        self._language = value
        self._settings_changed()

    @property
    def root_path(self) -> str:
        return self._root_path

    @root_path.setter
    def root_path(self, value: str | Path) -> None:
        value = str(value) if value else ""
        if value == self._root_path:
            return
        self._root_path = value
        self._settings_changed()

    @property
    def file_format(self) -> PersistenceFormat:
        return self._file_format

    @file_format.setter
    def file_format(self, value: PersistenceFormat) -> None:
        if value == self._file_format:
            return
        self._file_format = value
        self._settings_changed()

    @property
    def language_folder(self) -> Path:
        return Path(self._root_path) / self._language

    @property
    def store(self) -> TranslationStore:
        return self._store

    def can_sync(self) -> bool:
        """True when language and root are set and the language folder exists."""
        return bool(self._language and self._root_path) and self.language_folder.is_dir()

    # -- clients ---------------------------------------------------------

    @property
    def clients(self) -> List["LanguageCoordinator"]:
        with self._lock:
            return list(self._clients)

    def register_client(self, client: "LanguageCoordinator") -> None:
        """Attach ``client``; it is synchronized at once when possible."""
        with self._lock:
            if client in self._clients:
                return
            self._clients.append(client)
            if self.can_sync():
                self._sync_client(client)
                client.language_info = self.language_info

    def unregister_client(self, client: "LanguageCoordinator") -> None:
        with self._lock:
            if client in self._clients:
                self._clients.remove(client)

    def add_listener(self, listener: LanguageListener) -> None:
        """Call ``listener(language, root_path)`` after every synchronization."""
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def remove_listener(self, listener: LanguageListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # -- translation -----------------------------------------------------

    def translate(self, text: str) -> str:
        """Return the shared translation of ``text``, or ``text`` itself."""
        if not text:
            return ""
        value, found = self._store.try_get(text)
        return value if found and value is not None else text

    # -- synchronization -------------------------------------------------

    def _settings_changed(self) -> None:
        if not self.can_sync():
            logger.debug(
                "Language folder %s not available; clients not synchronized",
                self.language_folder,
            )
            return
        self.synchronize()

    def synchronize(self) -> None:
        """Reload shared strings and push the current settings everywhere."""
        with self._lock:
            logger.info(
                "Switching to language '%s' (%s, %s)",
                self._language,
                self._root_path,
                self._file_format.value,
            )
            self._import_runtime_strings()
            for client in list(self._clients):
                self._sync_client(client)
            self.language_info = self._import_language_info()
            for client in list(self._clients):
                client.language_info = self.language_info
            listeners = list(self._listeners)

        for listener in listeners:
            listener(self._language, self._root_path)

    def _create_engine(self) -> TranslationEngine:
        return self._registry.create(self._file_format, EngineOptions())

    def _import_runtime_strings(self) -> None:
        path = self.language_folder / f"{RUNTIME_FILE_NAME}{self._file_format.extension}"
        runtime = TranslationStore()
        result = self._create_engine().load(None, path, runtime)
        if not result.success:
            logger.warning("No runtime strings loaded: %s", result.error)
        self._store.replace_with(runtime)

    def _import_language_info(self) -> LanguageInfo:
        path = self.language_folder / f"{LANGUAGE_INFO_FILE_NAME}{self._file_format.extension}"
        if not path.exists():
            logger.debug("No language metadata at %s", path)
            return LanguageInfo()
        return self._create_engine().read_language_info(path)

    def _sync_client(self, client: "LanguageCoordinator") -> None:
        client.apply_settings(self._language, self._root_path, self._file_format)


_language_server: GlobalLanguageServer | None = None
_server_lock = threading.Lock()


def get_language_server() -> GlobalLanguageServer:
    """Get the process-wide language server, creating it on first use."""
    global _language_server
    with _server_lock:
        if _language_server is None:
            _language_server = GlobalLanguageServer()
        return _language_server


def reset_language_server() -> None:
    """Drop the process-wide server and all of its registrations."""
    global _language_server
    with _server_lock:
        _language_server = None


__all__ = [
    "GlobalLanguageServer",
    "get_language_server",
    "reset_language_server",
]
