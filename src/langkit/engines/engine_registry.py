"""Registry mapping persistence formats to format codecs.

Codec classes are probed once when registered, so a broken class fails
at registration time instead of on the first load. The first class
registered for a format stays active; later registrations for the same
format are ignored.
"""

from __future__ import annotations

import logging
import threading
from typing import Dict, List, Optional, Type

from ..language_types import (
    MSG_CLASS_NOT_A_CODEC,
    MSG_ENGINE_NOT_IMPLEMENTED,
    ConfigurationError,
    PersistenceFormat,
)
from .base_engine import EngineOptions, FormatCodec, TranslationEngine

logger = logging.getLogger(__name__)


class EngineRegistry:
    """Maps :class:`PersistenceFormat` values to :class:`FormatCodec` classes."""

    def __init__(self) -> None:
        self._codecs: Dict[PersistenceFormat, Type[FormatCodec]] = {}
        self._lock = threading.Lock()

    def register(self, file_format: PersistenceFormat, codec_class: Type[FormatCodec]) -> None:
        """Register ``codec_class`` for ``file_format``.

        Raises:
            ConfigurationError: If the class cannot be instantiated or does
                not implement :class:`FormatCodec`.
        """
        class_name = getattr(codec_class, "__name__", repr(codec_class))
        try:
            probe = codec_class()
        except Exception as exc:
            raise ConfigurationError(MSG_CLASS_NOT_A_CODEC.format(name=class_name)) from exc
        if not isinstance(probe, FormatCodec):
            raise ConfigurationError(MSG_CLASS_NOT_A_CODEC.format(name=class_name))

        with self._lock:
            if file_format in self._codecs:
                logger.debug(
                    "Format %s already registered to %s; ignoring %s",
                    file_format.value,
                    self._codecs[file_format].__name__,
                    class_name,
                )
                return
            self._codecs[file_format] = codec_class

    def unregister(self, file_format: PersistenceFormat) -> None:
        with self._lock:
            self._codecs.pop(file_format, None)

    def is_registered(self, file_format: PersistenceFormat) -> bool:
        with self._lock:
            return file_format in self._codecs

    def codec_class(self, file_format: PersistenceFormat) -> Type[FormatCodec]:
        with self._lock:
            codec_class = self._codecs.get(file_format)
        if codec_class is None:
            raise ConfigurationError(MSG_ENGINE_NOT_IMPLEMENTED)
        return codec_class

    def formats(self) -> List[PersistenceFormat]:
        with self._lock:
            return list(self._codecs)

    def create(
        self,
        file_format: PersistenceFormat,
        options: Optional[EngineOptions] = None,
    ) -> TranslationEngine:
        """Build a fresh engine for ``file_format``.

        Raises:
            ConfigurationError: If no codec is registered for the format.
        """
        return TranslationEngine(self.codec_class(file_format)(), options)


_default_registry: EngineRegistry | None = None
_default_lock = threading.Lock()


def register_builtin_codecs(registry: EngineRegistry) -> EngineRegistry:
    """Register the JSON, INI and flat INI codecs on ``registry``."""
    from .ini_engine import FlatIniCodec, IniCodec
    from .json_engine import JsonCodec

    registry.register(PersistenceFormat.JSON, JsonCodec)
    registry.register(PersistenceFormat.INI, IniCodec)
    registry.register(PersistenceFormat.INI_FLAT, FlatIniCodec)
    return registry


def get_default_registry() -> EngineRegistry:
    """Return the process-wide registry, creating it with the builtin codecs."""
    global _default_registry
    with _default_lock:
        if _default_registry is None:
            _default_registry = register_builtin_codecs(EngineRegistry())
        return _default_registry


__all__ = [
    "EngineRegistry",
    "get_default_registry",
    "register_builtin_codecs",
]
