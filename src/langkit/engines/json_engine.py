#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Structured (JSON) language files.

Each container becomes one JSON object holding its attributes and, under
their names, the objects of its children::

    {
      "Form1": {
        "Caption": "Main window",
        "Button1": {"Caption": "OK"},
        "ListBox1": {"Items": {"Text": "One§Two"}}
      },
      "Strings": {"3A1F09C2": "Caricato"}
    }

String-list attributes are joined with ``§`` under a ``Text`` key
(with ``"Count": 0`` or ``1`` beside an empty ``Text``), nested
value objects recurse into their own attributes, and the reserved
``Strings`` map holds runtime strings keyed by hash.
"""

from __future__ import annotations

import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Optional, Set

from ..components import AttributeKind, AttributeSpec
from ..encoder import LineEncoder
from ..info_loaders import JSON_LANGUAGE_KEY, JsonLanguageInfoLoader, LanguageInfoLoader
from ..language_types import LIST_SEPARATOR, DomainError, PersistenceFormat
from ..translation_store import TranslationStore
from .base_engine import FormatCodec, TranslationEngine

logger = logging.getLogger(__name__)

JSON_STRINGS_KEY = "Strings"
LIST_TEXT_KEY = "Text"
# Written only when "Text" is empty, to tell [] from [""].
LIST_COUNT_KEY = "Count"

# Encoded items never end with "[", so only "[§]" has one before the separator.
_LIST_SPLIT_RE = re.compile(r"(?<!\[)" + re.escape(LIST_SEPARATOR))


class JsonCodec(FormatCodec):
    """Reads and writes nested JSON language files."""

    FORMAT = PersistenceFormat.JSON

    def create_info_loader(self) -> LanguageInfoLoader:
        return JsonLanguageInfoLoader()

    # -- reading ---------------------------------------------------------

    @staticmethod
    def _read_document(file_path: Path) -> Dict[str, Any]:
        text = file_path.read_text(encoding="utf-8-sig")
        if not text.strip():
            return {}
        document = json.loads(text)
        if not isinstance(document, dict):
            raise DomainError(f"{file_path} is not a JSON language file")
        return document

    @staticmethod
    def _is_reserved(key: str) -> bool:
        return key.lower() in (JSON_STRINGS_KEY.lower(), JSON_LANGUAGE_KEY)

    def deserialize(
        self,
        engine: TranslationEngine,
        container: Any,
        file_path: Path,
        runtime: TranslationStore,
    ) -> None:
        document = self._read_document(file_path)

        for key, value in document.items():
            if key.lower() == JSON_STRINGS_KEY.lower() and isinstance(value, dict):
                for hashed_key, translated in value.items():
                    runtime.set_raw(str(hashed_key), str(translated))

        if container is None:
            return

        for key, value in document.items():
            if self._is_reserved(key) or not isinstance(value, dict):
                continue
            node = engine.find_qualified_component(container, key)
            if node is None:
                logger.debug("No container matches '%s' in %s", key, file_path)
                continue
            self._apply_component(engine, container, node, value)

    def _apply_component(
        self,
        engine: TranslationEngine,
        root: Any,
        node: Any,
        data: Dict[str, Any],
    ) -> None:
        if not engine.is_eligible_component(node):
            return
        introspector = engine.introspector
        self._apply_object(engine, node, data)

        for key, value in data.items():
            if not isinstance(value, dict) or introspector.find_attribute(node, key):
                continue
            child = introspector.find_child(node, key)
            if child is None:
                child = introspector.find_descendant(root, key)
            if child is not None:
                self._apply_component(engine, root, child, value)

    def _apply_object(self, engine: TranslationEngine, target: Any, data: Dict[str, Any]) -> None:
        introspector = engine.introspector
        for key, value in data.items():
            spec = introspector.find_attribute(target, key)
            if spec is None:
                continue

            if spec.kind is AttributeKind.TEXT:
                if isinstance(value, (dict, list)):
                    continue
                if engine.should_translate_attribute(spec, target):
                    spec.set(target, "" if value is None else str(value))

            elif spec.kind is AttributeKind.TEXT_LIST:
                if not (spec.writable and self._is_nested_candidate(engine, spec)):
                    continue
                if not isinstance(value, dict) or not isinstance(value.get(LIST_TEXT_KEY), str):
                    continue
                text = value[LIST_TEXT_KEY]
                if text:
                    items = [LineEncoder.decode(item) for item in _LIST_SPLIT_RE.split(text)]
                else:
                    items = [""] if value.get(LIST_COUNT_KEY) == 1 else []
                spec.set(target, items)

            elif spec.kind is AttributeKind.OBJECT:
                if not isinstance(value, dict) or not self._is_nested_candidate(engine, spec):
                    continue
                nested = spec.get(target)
                if nested is not None:
                    self._apply_object(engine, nested, value)

    # -- writing ---------------------------------------------------------

    def serialize(self, engine: TranslationEngine, container: Any, file_path: Path) -> None:
        document: Dict[str, Any] = {}
        if file_path.exists():
            document = self._read_document(file_path)

        if container is not None and engine.is_eligible_component(container):
            name = engine.introspector.name_of(container)
            if name:
                document[name] = self._component_to_json(engine, container)

        file_path.write_text(
            json.dumps(document, indent=2, ensure_ascii=False) + "\n",
            encoding="utf-8",
        )

    def _component_to_json(self, engine: TranslationEngine, node: Any) -> Dict[str, Any]:
        introspector = engine.introspector
        data = self._serialize_object(engine, node, set())

        for child in introspector.children_of(node):
            child_name = introspector.name_of(child)
            if not child_name or not engine.is_eligible_component(child):
                continue
            if child_name in data:
                logger.warning(
                    "Container '%s' clashes with an attribute of '%s'; not saved",
                    child_name,
                    introspector.name_of(node),
                )
                continue
            child_data = self._component_to_json(engine, child)
            if child_data:
                data[child_name] = child_data
        return data

    def _serialize_object(self, engine: TranslationEngine, source: Any, seen: Set[int]) -> Dict[str, Any]:
        if source is None or id(source) in seen:
            return {}
        seen.add(id(source))

        data: Dict[str, Any] = {}
        for spec in engine.introspector.attributes_of(source):
            if spec.kind is AttributeKind.TEXT:
                if engine.should_persist_attribute(spec):
                    value = spec.get(source)
                    data[spec.name] = "" if value is None else str(value)

            elif spec.kind is AttributeKind.TEXT_LIST:
                if spec.writable and self._is_nested_candidate(engine, spec):
                    items = spec.get(source) or []
                    joined = LIST_SEPARATOR.join(LineEncoder.encode(str(item)) for item in items)
                    data[spec.name] = {LIST_TEXT_KEY: joined}
                    if not joined:
                        data[spec.name][LIST_COUNT_KEY] = len(items)

            elif spec.kind is AttributeKind.OBJECT:
                if self._is_nested_candidate(engine, spec):
                    nested = self._serialize_object(engine, spec.get(source), seen)
                    if nested:
                        data[spec.name] = nested
        return data

    @staticmethod
    def _is_nested_candidate(engine: TranslationEngine, spec: Optional[AttributeSpec]) -> bool:
        """Eligibility of list and object attributes, which are not plain text."""
        return (
            spec is not None
            and spec.readable
            and spec.published
            and spec.name.lower() != engine.introspector.identity_attribute.lower()
            and not engine.is_excluded_attribute(spec.name)
        )


__all__ = ["JsonCodec", "JSON_STRINGS_KEY"]
