#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""Shared translation engine and the interface format codecs implement.

:class:`TranslationEngine` owns everything that does not depend on the
file format: eligibility rules, tree traversal helpers, the
existence/auto-create policy and the runtime-string dictionary used by
:meth:`TranslationEngine.translate`. The raw reading and writing of a file
is delegated to a :class:`FormatCodec` strategy.

Eligibility is decided in two steps:

1. Structural: the attribute is a readable, writable, published text
   attribute and not the identity attribute. Static per type.
2. Contextual: the attribute is not excluded by name, and it is not an
   action-managed value (Caption, Hint, Text...) of a container bound to
   an action while ``exclude_on_action`` is on.

Saving uses only the name exclusion on top of the structural check, so a
file always holds a superset of what loading applies. Values owned by an
action are written for later use but never overwritten on load.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Iterator, List, Optional, Tuple

from ..components import (
    AttributeKind,
    AttributeSpec,
    ComponentIntrospector,
    TreeIntrospector,
)
from ..info_loaders import LanguageInfoLoader
from ..language_types import (
    DomainError,
    LanguageError,
    LanguageInfo,
    PersistenceFormat,
)
from ..translation_store import TranslationStore

logger = logging.getLogger(__name__)

# Lower-cased names whose runtime value belongs to a bound action.
ACTION_ATTRIBUTES = frozenset(
    {"caption", "hint", "text", "tooltip", "statustip", "whatsthis", "icontext"}
)


@dataclass
class EngineOptions:
    """Per-engine translation settings.

    Attributes:
        create_if_missing: Write a starter file when loading a missing one,
            and create missing parent directories when saving.
        exclude_on_action: Leave action-managed attributes untouched on load
            for containers bound to an action.
        exclude_classes: Container type names to skip (case-insensitive).
        exclude_attributes: Attribute names to skip (case-insensitive).
        introspector: Reader used to walk container trees.
    """

    create_if_missing: bool = False
    exclude_on_action: bool = False
    exclude_classes: List[str] = field(default_factory=list)
    exclude_attributes: List[str] = field(default_factory=list)
    introspector: TreeIntrospector = field(default_factory=ComponentIntrospector)


@dataclass
class EngineResult:
    """Outcome of a load or save.

    ``error`` is set when the operation stopped on a :class:`DomainError`;
    other failures are raised and never reach a result.

    Attributes:
        operation: ``"load"`` or ``"save"``.
        file_path: File the operation targeted.
        success: False when the operation stopped early.
        error: The domain error that stopped it, if any.
    """

    operation: str
    file_path: Path
    success: bool = True
    error: Optional[LanguageError] = None

    @classmethod
    def ok(cls, operation: str, file_path: Path) -> "EngineResult":
        return cls(operation=operation, file_path=file_path)

    @classmethod
    def failed(
        cls, operation: str, file_path: Path, error: LanguageError
    ) -> "EngineResult":
        return cls(operation=operation, file_path=file_path, success=False, error=error)


class FormatCodec(ABC):
    """Strategy reading and writing one persistence format.

    Subclasses define ``FORMAT`` and implement the two primitives. Both
    receive the calling engine so they can use its eligibility rules and
    traversal helpers.
    """

    FORMAT: PersistenceFormat

    @property
    def extension(self) -> str:
        return self.FORMAT.extension

    @abstractmethod
    def deserialize(
        self,
        engine: "TranslationEngine",
        container: Any,
        file_path: Path,
        runtime: TranslationStore,
    ) -> None:
        """Parse ``file_path``, fill ``runtime`` and apply values to the tree.

        ``container`` may be None, in which case only runtime strings are
        read.
        """

    @abstractmethod
    def serialize(self, engine: "TranslationEngine", container: Any, file_path: Path) -> None:
        """Write the persistable attributes of the tree to ``file_path``."""

    @abstractmethod
    def create_info_loader(self) -> LanguageInfoLoader:
        """Return the metadata reader for this format."""


class TranslationEngine:
    """Format-independent translation engine.

    Attributes:
        codec: Strategy handling the file format.
        options: Eligibility and auto-create settings.
    """

    def __init__(self, codec: FormatCodec, options: Optional[EngineOptions] = None) -> None:
        self.codec = codec
        self.options = options or EngineOptions()
        self._translations = TranslationStore()

    @property
    def file_format(self) -> PersistenceFormat:
        return self.codec.FORMAT

    @property
    def introspector(self) -> TreeIntrospector:
        return self.options.introspector

    # -- public contract -------------------------------------------------

    def load(
        self,
        container: Any,
        file_path: str | Path,
        store: Optional[TranslationStore] = None,
    ) -> EngineResult:
        """Apply a language file to ``container`` and collect runtime strings.

        Args:
            container: Root of the tree to translate, or None to only read
                runtime strings.
            file_path: Language file to read.
            store: Optional store receiving every runtime string found.

        Returns:
            A successful result, or a failed one carrying the
            :class:`DomainError` that stopped the load.
        """
        path = Path(file_path)
        if not path.exists():
            if not self.options.create_if_missing:
                logger.debug("Language file %s not found", path)
                return EngineResult.failed(
                    "load", path, DomainError(f"Language file not found: {path}")
                )
            saved = self.save(container, path)
            if not saved.success:
                return EngineResult.failed("load", path, saved.error)  # type: ignore[arg-type]
            logger.info("Created missing language file %s", path)

        runtime = TranslationStore()
        try:
            self.codec.deserialize(self, container, path, runtime)
        except DomainError as exc:
            return EngineResult.failed("load", path, exc)

        self._translations.replace_with(runtime)
        if store is not None:
            with store.updating():
                for hashed_key, value in runtime.items():
                    store.set_raw(hashed_key, value)

        logger.debug("Loaded %s (%d runtime strings)", path, len(runtime))
        return EngineResult.ok("load", path)

    def save(self, container: Any, file_path: str | Path) -> EngineResult:
        """Write the persistable attributes of ``container``'s tree."""
        path = Path(file_path)
        if not path.parent.exists() and self.options.create_if_missing:
            path.parent.mkdir(parents=True, exist_ok=True)

        try:
            self.codec.serialize(self, container, path)
        except DomainError as exc:
            return EngineResult.failed("save", path, exc)

        logger.debug("Saved %s", path)
        return EngineResult.ok("save", path)

    def translate(self, text: str) -> str:
        """Return the runtime translation of ``text``, or ``text`` itself."""
        if not isinstance(text, str) or not text:
            return text
        value, found = self._translations.try_get(text)
        return value if found and value is not None else text

    def read_language_info(self, file_path: str | Path) -> LanguageInfo:
        return self.codec.create_info_loader().load_from_file(file_path)

    # -- eligibility -----------------------------------------------------

    def is_translatable_attribute(self, spec: Optional[AttributeSpec]) -> bool:
        """Structural check: a readable, writable, published text attribute."""
        return (
            spec is not None
            and spec.kind is AttributeKind.TEXT
            and spec.readable
            and spec.writable
            and spec.published
            and spec.name.lower() != self.introspector.identity_attribute.lower()
        )

    def is_excluded_attribute(self, name: str) -> bool:
        return name.lower() in {item.lower() for item in self.options.exclude_attributes}

    def should_persist_attribute(self, spec: Optional[AttributeSpec]) -> bool:
        """Save-side check: structurally eligible and not excluded by name."""
        return self.is_translatable_attribute(spec) and not self.is_excluded_attribute(
            spec.name  # type: ignore[union-attr]
        )

    def should_translate_attribute(self, spec: Optional[AttributeSpec], node: Any) -> bool:
        """Load-side check for ``spec`` on the container ``node``."""
        if not self.should_persist_attribute(spec):
            return False
        return not (
            self.options.exclude_on_action
            and spec.name.lower() in ACTION_ATTRIBUTES  # type: ignore[union-attr]
            and self.has_action(node)
        )

    def is_eligible_component(self, node: Any) -> bool:
        if node is None:
            return False
        excluded = {item.lower() for item in self.options.exclude_classes}
        return self.introspector.type_name_of(node).lower() not in excluded

    def has_action(self, node: Any) -> bool:
        return node is not None and self.introspector.has_action(node)

    # -- traversal helpers for codecs ------------------------------------

    def persistable_attributes(self, node: Any) -> List[AttributeSpec]:
        return [
            spec
            for spec in self.introspector.attributes_of(node)
            if self.should_persist_attribute(spec)
        ]

    def iter_components(self, container: Any) -> Iterator[Tuple[str, Any]]:
        """Yield ``(qualified_name, node)`` for every persistable container.

        The walk is depth first and starts with ``container`` itself.
        Anonymous containers and excluded classes are skipped together with
        their subtrees.
        """
        if container is None:
            return
        stack: List[Tuple[str, Any]] = [("", container)]
        while stack:
            prefix, node = stack.pop()
            name = self.introspector.name_of(node)
            if not name or not self.is_eligible_component(node):
                continue
            qualified = f"{prefix}.{name}" if prefix else name
            yield qualified, node
            children = self.introspector.children_of(node)
            for child in reversed(children):
                stack.append((qualified, child))

    def find_qualified_component(self, container: Any, qualified_name: str) -> Any:
        """Resolve a dotted qualified name below ``container``.

        Walks the path one segment at a time. A first segment equal to the
        container name is consumed. When a step cannot be resolved, falls
        back to a tree-wide search for the last segment, which keeps files
        usable after an ancestor is renamed but may bind the values to a
        different container sharing that name.
        """
        names = [part for part in qualified_name.split(".") if part]
        if container is None or not names:
            return None

        introspector = self.introspector
        parts = names
        if introspector.name_of(container).lower() == names[0].lower():
            parts = names[1:]

        current = container
        for part in parts:
            current = introspector.find_child(current, part)
            if current is None:
                logger.debug(
                    "Could not resolve '%s', searching for '%s'", qualified_name, names[-1]
                )
                return introspector.find_descendant(container, names[-1])
        return current

    def set_attribute_value(self, node: Any, name: str, value: Any) -> bool:
        """Assign ``value`` to the attribute ``name`` if it may be translated.

        Returns:
            True if the value was applied.
        """
        if node is None:
            return False
        spec = self.introspector.find_attribute(node, name)
        if not self.should_translate_attribute(spec, node):
            return False
        spec.set(node, value)  # type: ignore[union-attr]
        return True


__all__ = [
    "ACTION_ATTRIBUTES",
    "EngineOptions",
    "EngineResult",
    "FormatCodec",
    "TranslationEngine",
]
