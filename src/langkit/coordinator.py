"""Per-container language coordinator.

A :class:`LanguageCoordinator` ties one container tree to its language
file. It resolves ``<root>/<language>/<container name><ext>`` from its
settings, owns one translation engine and one runtime-string store, and
reloads automatically whenever the language, root folder, file or format
changes. Domain errors from the engine are reported through ``on_error``
instead of being raised.

Usage::

    from langkit import LanguageCoordinator, PersistenceFormat

    coordinator = LanguageCoordinator(
        main_form,
        root_path="languages",
        language="it",
        file_format=PersistenceFormat.JSON,
    )
    label.caption = coordinator.translate("Loaded")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterable, List, Optional

from .components import ComponentIntrospector, TreeIntrospector
from .engines.base_engine import EngineOptions, EngineResult, TranslationEngine
from .engines.engine_registry import EngineRegistry, get_default_registry
from .language_server import GlobalLanguageServer, get_language_server
from .language_types import (
    MSG_LANGUAGE_CANNOT_BE_EMPTY,
    MSG_NO_ENGINE_SELECTED,
    MSG_NO_FILE_SELECTED,
    ConfigurationError,
    DomainError,
    LanguageError,
    LanguageInfo,
    PersistenceFormat,
)
from .translation_store import TranslationStore

logger = logging.getLogger(__name__)

# (container, file_path) -> False to cancel
BeforeCallback = Callable[[Any, str], Optional[bool]]
AfterCallback = Callable[[Any, str], None]
ErrorCallback = Callable[["LanguageCoordinator", str], None]


class LanguageCoordinator:
    """Loads and saves the language file of one container tree.

    Attributes:
        container: Root of the translated tree; not owned.
        language_info: Metadata of the active language, pushed by the server.
        before_load: Called before loading; returning False cancels.
        after_load: Called after a successful load.
        before_save: Called before saving; returning False cancels.
        after_save: Called after a successful save.
        on_error: Receives domain errors that stopped a load or save.
    """

    def __init__(
        self,
        container: Any,
        *,
        server: Optional[GlobalLanguageServer] = None,
        registry: Optional[EngineRegistry] = None,
        file_format: PersistenceFormat = PersistenceFormat.INI,
        root_path: str | Path = "",
        language: str = "",
        file_path: str | Path = "",
        create_if_missing: bool = False,
        exclude_on_action: bool = True,
        exclude_classes: Iterable[str] = (),
        exclude_attributes: Iterable[str] = (),
        register_on_start: bool = True,
        introspector: Optional[TreeIntrospector] = None,
        before_load: Optional[BeforeCallback] = None,
        after_load: Optional[AfterCallback] = None,
        before_save: Optional[BeforeCallback] = None,
        after_save: Optional[AfterCallback] = None,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self._initializing = True

        self.container = container
        self.language_info = LanguageInfo()
        self.register_on_start = register_on_start
        self.before_load = before_load
        self.after_load = after_load
        self.before_save = before_save
        self.after_save = after_save
        self.on_error = on_error

        self._server = server if server is not None else get_language_server()
        self._registry = registry or get_default_registry()
        self._introspector = introspector or ComponentIntrospector()
        self._store = TranslationStore()
        self._engine: Optional[TranslationEngine] = None
        self._engine_error = ""
        self._loaded = False

        self._file_format = file_format
        self._create_if_missing = create_if_missing
        self._exclude_on_action = exclude_on_action
        self._exclude_classes: List[str] = list(exclude_classes)
        self._exclude_attributes: List[str] = list(exclude_attributes)
        self._root_path = str(root_path) if root_path else ""
        self._language = language or ""
        self._file_path = ""

        self._create_engine()
        if file_path:
            self.file_path = str(file_path)
        else:
            self._calculate_file_path()

        self._initializing = False

        if self.register_on_start:
            self._server.register_client(self)
        if self._file_path and not self._loaded:
            self.load()

    # -- state -----------------------------------------------------------

    @property
    def name(self) -> str:
        return self._introspector.name_of(self.container) if self.container is not None else ""

    @property
    def server(self) -> GlobalLanguageServer:
        return self._server

    @property
    def engine(self) -> Optional[TranslationEngine]:
        return self._engine

    @property
    def store(self) -> TranslationStore:
        return self._store

    @property
    def root_path(self) -> str:
        return self._root_path

    @root_path.setter
    def root_path(self, value: str | Path) -> None:
        value = str(value) if value else ""
        if value == self._root_path:
            return
        self._root_path = value
        if value and self._calculate_file_path():
            self._reload()

    @property
    def language(self) -> str:
        return self._language

    @language.setter
    def language(self, value: str) -> None:
        if not value:
            raise ConfigurationError(MSG_LANGUAGE_CANNOT_BE_EMPTY)
        if value == self._language:
            return
        self._language = value
        if self._calculate_file_path():
            self._reload()

    @property
    def file_path(self) -> str:
        return self._file_path

    @file_path.setter
    def file_path(self, value: str | Path) -> None:
        """Use an explicit file; language and root folder are derived from it."""
        value = str(value) if value else ""
        if value == self._file_path:
            return
        self._file_path = value
        if value:
            path = Path(value)
            self._language = path.parent.name
            self._root_path = str(path.parent.parent)
        self._reload()

    @property
    def file_format(self) -> PersistenceFormat:
        return self._file_format

    @file_format.setter
    def file_format(self, value: PersistenceFormat) -> None:
        if value == self._file_format:
            return
        self._file_format = value
        self._create_engine()
        self._calculate_file_path()
        self._reload()

    @property
    def create_if_missing(self) -> bool:
        return self._create_if_missing

    @create_if_missing.setter
    def create_if_missing(self, value: bool) -> None:
        self._create_if_missing = value
        if self._engine is not None:
            self._engine.options.create_if_missing = value

    @property
    def exclude_on_action(self) -> bool:
        return self._exclude_on_action

    @exclude_on_action.setter
    def exclude_on_action(self, value: bool) -> None:
        self._exclude_on_action = value
        if self._engine is not None:
            self._engine.options.exclude_on_action = value

    @property
    def exclude_classes(self) -> List[str]:
        return list(self._exclude_classes)

    @exclude_classes.setter
    def exclude_classes(self, value: Iterable[str]) -> None:
        self._exclude_classes = list(value)
        if self._engine is not None:
            self._engine.options.exclude_classes = list(self._exclude_classes)

    @property
    def exclude_attributes(self) -> List[str]:
        return list(self._exclude_attributes)

    @exclude_attributes.setter
    def exclude_attributes(self, value: Iterable[str]) -> None:
        self._exclude_attributes = list(value)
        if self._engine is not None:
            self._engine.options.exclude_attributes = list(self._exclude_attributes)

    def apply_settings(
        self,
        language: str,
        root_path: str | Path,
        file_format: PersistenceFormat,
    ) -> None:
        """Change language, root folder and format with a single reload."""
        changed = False
        if language and language != self._language:
            self._language = language
            changed = True
        root = str(root_path) if root_path else ""
        if root != self._root_path:
            self._root_path = root
            changed = True
        if file_format != self._file_format:
            self._file_format = file_format
            self._create_engine()
            changed = True
        if changed and self._calculate_file_path():
            self._reload()

    # -- operations ------------------------------------------------------

    def load(self, container: Any = None, file_path: str | Path | None = None) -> bool:
        """Apply the language file to ``container`` (default: own container).

        Returns:
            True if the file was applied; False if the coordinator is not
            ready, a callback cancelled, or a domain error was reported.
        """
        target = self.container if container is None else container
        path = str(file_path) if file_path else self._file_path
        if not self._ensure_engine() or not path:
            return False

        if not self._fire_before(self.before_load, target, path):
            logger.debug("Loading %s cancelled", path)
            return False

        self._loaded = True
        self._store.clear()
        result = self._engine.load(target, path, self._store)  # type: ignore[union-attr]
        if not result.success:
            return self._handle_failure(result)

        logger.info("Loaded language file %s", path)
        if self.after_load is not None:
            self.after_load(target, path)
        return True

    def save(self, container: Any = None, file_path: str | Path | None = None) -> bool:
        """Write the translatable values of ``container`` to the language file.

        Raises:
            ConfigurationError: If no language file is resolved.
        """
        target = self.container if container is None else container
        path = str(file_path) if file_path else self._file_path
        if not path:
            raise ConfigurationError(MSG_NO_FILE_SELECTED)
        if not self._ensure_engine():
            return False

        if not self._fire_before(self.before_save, target, path):
            logger.debug("Saving %s cancelled", path)
            return False

        result = self._engine.save(target, path)  # type: ignore[union-attr]
        if not result.success:
            return self._handle_failure(result)

        logger.info("Saved language file %s", path)
        if self.after_save is not None:
            self.after_save(target, path)
        return True

    def translate(self, text: str) -> str:
        """Translate a runtime string, falling back to the language server."""
        value, found = self._store.try_get(text) if text else (None, False)
        if found and value is not None:
            return value
        return self._server.translate(text)

    def close(self) -> None:
        """Detach from the language server."""
        self._server.unregister_client(self)

    # -- internals -------------------------------------------------------

    def _engine_options(self) -> EngineOptions:
        return EngineOptions(
            create_if_missing=self._create_if_missing,
            exclude_on_action=self._exclude_on_action,
            exclude_classes=list(self._exclude_classes),
            exclude_attributes=list(self._exclude_attributes),
            introspector=self._introspector,
        )

    def _create_engine(self) -> None:
        try:
            self._engine = self._registry.create(self._file_format, self._engine_options())
            self._engine_error = ""
        except ConfigurationError as exc:
            self._engine = None
            self._engine_error = str(exc)
            logger.warning(
                "No engine for format %s: %s", self._file_format.value, exc
            )

    def _ensure_engine(self) -> bool:
        if self._engine is None:
            self._create_engine()
        if self._engine is None:
            self._report_error(DomainError(self._engine_error or MSG_NO_ENGINE_SELECTED))
            return False
        return True

    def _calculate_file_path(self) -> bool:
        if not (self._language and self._root_path):
            return False
        file_name = f"{self.name}{self._file_format.extension}"
        self._file_path = str(Path(self._root_path) / self._language / file_name)
        return True

    def _reload(self) -> None:
        if not self._initializing:
            self.load()

    @staticmethod
    def _fire_before(callback: Optional[BeforeCallback], target: Any, path: str) -> bool:
        if callback is None:
            return True
        return callback(target, path) is not False

    def _handle_failure(self, result: EngineResult) -> bool:
        error: Optional[LanguageError] = result.error
        if isinstance(error, DomainError):
            self._report_error(error)
            return False
        if error is not None:
            raise error
        return False

    def _report_error(self, error: LanguageError) -> None:
        logger.warning("Language error in '%s': %s", self.name, error)
        if self.on_error is not None:
            self.on_error(self, str(error))

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(container={self.name!r}, "
            f"language={self._language!r}, file_path={self._file_path!r})"
        )


__all__ = ["LanguageCoordinator"]
