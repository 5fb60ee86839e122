"""Runtime localization for trees of UI-bound objects.

Translatable text attributes of a container tree are applied from, or
extracted to, language files in JSON or INI format. Runtime strings are
looked up by a deterministic hash of their source text, first in the
coordinator's own file and then in the language server's shared
``runtime`` file.

The Qt binding lives in :mod:`langkit.qt_binding` and is imported on
demand.
"""

from .components import (
    AttributeKind,
    AttributeSpec,
    Component,
    ComponentIntrospector,
    TreeIntrospector,
    attribute,
    register_attributes,
    translatable,
)
from .coordinator import LanguageCoordinator
from .encoder import LineEncoder, crc32_of_string, make_key
from .engines import EngineOptions, EngineRegistry, EngineResult, TranslationEngine, get_default_registry
from .language_server import GlobalLanguageServer, get_language_server, reset_language_server
from .language_types import (
    ConfigurationError,
    DomainError,
    LanguageError,
    LanguageInfo,
    PersistenceFormat,
)
from .translation_store import TranslationStore

__version__ = "1.0.0"

__all__ = [
    "AttributeKind",
    "AttributeSpec",
    "Component",
    "ComponentIntrospector",
    "ConfigurationError",
    "DomainError",
    "EngineOptions",
    "EngineRegistry",
    "EngineResult",
    "GlobalLanguageServer",
    "LanguageCoordinator",
    "LanguageError",
    "LanguageInfo",
    "LineEncoder",
    "PersistenceFormat",
    "TranslationEngine",
    "TranslationStore",
    "TreeIntrospector",
    "attribute",
    "crc32_of_string",
    "get_default_registry",
    "get_language_server",
    "make_key",
    "register_attributes",
    "reset_language_server",
    "translatable",
]
