#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Hierarchical and flat INI language files.

The hierarchical flavour (``.lng``) writes one section per container,
named by its qualified name::

    [Form1]
    Caption=Main window

    [Form1.Button1]
    Caption=OK

The flat flavour (``.clng``) writes everything into one ``[UIElements]``
section keyed by ``QualifiedName.AttributeName``. Both keep runtime strings
in a ``[strings]`` section keyed by hash, store multiline values on one
line with the ``~~`` placeholder, and merge into an existing file when
saving so hand-written sections survive.
"""

from __future__ import annotations

import configparser
import logging
from pathlib import Path
from typing import Any

from ..encoder import LineEncoder
from ..info_loaders import IniLanguageInfoLoader, LanguageInfoLoader
from ..language_types import STRINGS_SECTION, PersistenceFormat
from ..translation_store import TranslationStore
from .base_engine import FormatCodec, TranslationEngine

logger = logging.getLogger(__name__)

FLAT_SECTION = "UIElements"
_DEFAULT_SECTION = "__langkit_defaults__"

# Menu separators and similar placeholders are never persisted.
SKIPPED_VALUE = "-"


def _new_parser() -> configparser.ConfigParser:
    """Return a parser matching the INI dialect of the language files."""
    parser = configparser.ConfigParser(
        interpolation=None,
        delimiters=("=",),
        comment_prefixes=(";",),
        inline_comment_prefixes=None,
        strict=False,
        empty_lines_in_values=False,
        default_section=_DEFAULT_SECTION,
    )
    parser.optionxform = str  # type: ignore[assignment]
    return parser


class IniCodec(FormatCodec):
    """One INI section per container, keyed by qualified name."""

    FORMAT = PersistenceFormat.INI

    def create_info_loader(self) -> LanguageInfoLoader:
        return IniLanguageInfoLoader()

    def deserialize(
        self,
        engine: TranslationEngine,
        container: Any,
        file_path: Path,
        runtime: TranslationStore,
    ) -> None:
        parser = _new_parser()
        with open(file_path, encoding="utf-8-sig") as handle:
            parser.read_file(handle)

        for section in parser.sections():
            if section.lower() == STRINGS_SECTION:
                for key, value in parser.items(section, raw=True):
                    runtime.set_raw(key, LineEncoder.restore_multiline(value))
            elif container is not None:
                self._read_section(engine, container, parser, section)

    def _read_section(
        self,
        engine: TranslationEngine,
        container: Any,
        parser: configparser.ConfigParser,
        section: str,
    ) -> None:
        node = engine.find_qualified_component(container, section)
        if not engine.is_eligible_component(node):
            logger.debug("Section [%s] does not match a translatable container", section)
            return
        for key, value in parser.items(section, raw=True):
            engine.set_attribute_value(
                node,
                LineEncoder.denormalize_key(key),
                LineEncoder.restore_multiline(value),
            )

    def serialize(self, engine: TranslationEngine, container: Any, file_path: Path) -> None:
        parser = _new_parser()
        if file_path.exists():
            with open(file_path, encoding="utf-8-sig") as handle:
                parser.read_file(handle)

        for qualified_name, node in engine.iter_components(container):
            for spec in engine.persistable_attributes(node):
                value = spec.get(node)
                self._write_value(
                    parser,
                    qualified_name,
                    spec.name,
                    LineEncoder.join_multiline("" if value is None else str(value)),
                )

        with open(file_path, "w", encoding="utf-8") as handle:
            parser.write(handle, space_around_delimiters=False)

    def _write_value(
        self,
        parser: configparser.ConfigParser,
        qualified_name: str,
        attribute_name: str,
        value: str,
    ) -> None:
        if value == SKIPPED_VALUE:
            return
        if not parser.has_section(qualified_name):
            parser.add_section(qualified_name)
        parser.set(qualified_name, LineEncoder.normalize_key(attribute_name), value)


class FlatIniCodec(IniCodec):
    """Single ``[UIElements]`` section keyed by ``QualifiedName.AttributeName``."""

    FORMAT = PersistenceFormat.INI_FLAT

    def _read_section(
        self,
        engine: TranslationEngine,
        container: Any,
        parser: configparser.ConfigParser,
        section: str,
    ) -> None:
        if section.lower() != FLAT_SECTION.lower():
            return
        for key, value in parser.items(section, raw=True):
            qualified_name, _, attribute_name = LineEncoder.denormalize_key(key).rpartition(".")
            if not qualified_name or not attribute_name:
                continue
            node = engine.find_qualified_component(container, qualified_name)
            if engine.is_eligible_component(node):
                engine.set_attribute_value(
                    node, attribute_name, LineEncoder.restore_multiline(value)
                )

    def _write_value(
        self,
        parser: configparser.ConfigParser,
        qualified_name: str,
        attribute_name: str,
        value: str,
    ) -> None:
        if value == SKIPPED_VALUE:
            return
        if not parser.has_section(FLAT_SECTION):
            parser.add_section(FLAT_SECTION)
        key = LineEncoder.normalize_key(f"{qualified_name}.{attribute_name}")
        parser.set(FLAT_SECTION, key, value)


__all__ = ["IniCodec", "FlatIniCodec", "FLAT_SECTION"]
