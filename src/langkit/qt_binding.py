"""PySide6 binding: translate live Qt widget trees.

:class:`QtIntrospector` exposes a ``QObject`` tree to the translation
engines through Qt's meta-object system. ``QString`` properties become
text attributes and ``QStringList`` properties list attributes; the
``objectName`` property is the identity and is never translated. A
widget with a ``defaultAction()`` is treated as action-bound.

:class:`QtLanguageNotifier` turns language server changes into a Qt
signal so widgets can refresh texts they build at runtime.

Usage::

    from langkit import LanguageCoordinator, get_language_server
    from langkit.qt_binding import QtIntrospector, QtLanguageNotifier

    coordinator = LanguageCoordinator(window, introspector=QtIntrospector())
    notifier = QtLanguageNotifier(get_language_server())
    notifier.language_changed.connect(window.retranslate)
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Tuple

from PySide6.QtCore import QObject, Signal

from .components import AttributeKind, AttributeSpec, TreeIntrospector
from .language_server import GlobalLanguageServer

logger = logging.getLogger(__name__)

_PROPERTY_KINDS: Dict[str, AttributeKind] = {
    "QString": AttributeKind.TEXT,
    "QStringList": AttributeKind.TEXT_LIST,
}


def _property_spec(name: str, kind: AttributeKind, writable: bool, designable: bool) -> AttributeSpec:
    def getter(instance: Any) -> Any:
        value = instance.property(name)
        if kind is AttributeKind.TEXT_LIST:
            return list(value or [])
        return "" if value is None else str(value)

    def setter(instance: Any, value: Any) -> None:
        instance.setProperty(name, list(value) if kind is AttributeKind.TEXT_LIST else value)

    return AttributeSpec(
        name=name,
        getter=getter,
        setter=setter if writable else None,
        kind=kind,
        published=designable,
    )


class QtIntrospector(TreeIntrospector):
    """Reads ``QObject`` trees through their meta-objects."""

    identity_attribute = "objectName"

    def __init__(self) -> None:
        self._specs: Dict[str, Tuple[AttributeSpec, ...]] = {}

    def name_of(self, node: Any) -> str:
        return node.objectName() if isinstance(node, QObject) else ""

    def children_of(self, node: Any) -> List[Any]:
        if not isinstance(node, QObject):
            return []
        return [child for child in node.children() if isinstance(child, QObject)]

    def type_name_of(self, node: Any) -> str:
        if isinstance(node, QObject):
            return node.metaObject().className()
        return super().type_name_of(node)

    def attributes_of(self, node: Any) -> List[AttributeSpec]:
        if not isinstance(node, QObject):
            return []
        meta = node.metaObject()
        class_name = meta.className()
        specs = self._specs.get(class_name)
        if specs is None:
            specs = self._read_meta_object(meta)
            self._specs[class_name] = specs
        return list(specs)

    def has_action(self, node: Any) -> bool:
        default_action = getattr(node, "defaultAction", None)
        return callable(default_action) and default_action() is not None

    @staticmethod
    def _read_meta_object(meta: Any) -> Tuple[AttributeSpec, ...]:
        specs: List[AttributeSpec] = []
        for index in range(meta.propertyCount()):
            prop = meta.property(index)
            kind = _PROPERTY_KINDS.get(prop.typeName())
            if kind is None or not prop.isReadable():
                continue
            specs.append(
                _property_spec(prop.name(), kind, prop.isWritable(), prop.isDesignable())
            )
        logger.debug("%s exposes %d text properties", meta.className(), len(specs))
        return tuple(specs)


class QtLanguageNotifier(QObject):
    """Re-emits language server changes as ``language_changed(language, root_path)``."""

    language_changed = Signal(str, str)

    def __init__(self, server: GlobalLanguageServer, parent: Optional[QObject] = None) -> None:
        super().__init__(parent)
        self._server: Optional[GlobalLanguageServer] = server
        server.add_listener(self._on_language_changed)

    def _on_language_changed(self, language: str, root_path: str) -> None:
        self.language_changed.emit(language, root_path)

    def detach(self) -> None:
        """Stop listening to the server."""
        if self._server is not None:
            self._server.remove_listener(self._on_language_changed)
            self._server = None


__all__ = ["QtIntrospector", "QtLanguageNotifier"]
