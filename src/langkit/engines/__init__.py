"""Translation engines and the format codecs they delegate to.

Exports:
    TranslationEngine: Format-independent orchestrator.
    FormatCodec: Strategy interface implemented by each file format.
    EngineOptions: Eligibility and auto-create settings of an engine.
    EngineResult: Outcome of a load or save.
    EngineRegistry: Maps persistence formats to codec classes.
    JsonCodec, IniCodec, FlatIniCodec: Builtin formats.
"""

from .base_engine import (
    ACTION_ATTRIBUTES,
    EngineOptions,
    EngineResult,
    FormatCodec,
    TranslationEngine,
)
from .engine_registry import EngineRegistry, get_default_registry, register_builtin_codecs
from .ini_engine import FlatIniCodec, IniCodec
from .json_engine import JsonCodec

__all__ = [
    "ACTION_ATTRIBUTES",
    "EngineOptions",
    "EngineRegistry",
    "EngineResult",
    "FlatIniCodec",
    "FormatCodec",
    "IniCodec",
    "JsonCodec",
    "TranslationEngine",
    "get_default_registry",
    "register_builtin_codecs",
]
