"""Container tree model and the explicit attribute registry.

Translation engines never reflect over arbitrary objects. Each container
type declares the attributes it exposes (name, kind, getter, setter) in a
per-type registry, and engines read trees through a
:class:`TreeIntrospector`. :class:`ComponentIntrospector` serves trees built
from :class:`Component`; other toolkits plug in their own introspector
(see :mod:`langkit.qt_binding`).

Usage::

    from langkit.components import Component, translatable

    @translatable("Caption", "Hint")
    class Button(Component):
        def __init__(self, name, parent=None, caption=""):
            super().__init__(name, parent)
            self.caption = caption
            self.hint = ""

    form = Component("Form1")
    ok = Button("Button1", form, caption="OK")
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple


class AttributeKind(Enum):
    """Value shapes an attribute can have."""

    TEXT = auto()
    TEXT_LIST = auto()
    OBJECT = auto()


@dataclass(frozen=True)
class AttributeSpec:
    """Declaration of one attribute exposed by a container type.

    Attributes:
        name: Attribute name as written to language files.
        getter: Callable returning the current value from an instance.
        setter: Callable storing a value on an instance; None if read-only.
        kind: Value shape; only TEXT attributes are structurally
            translatable, TEXT_LIST and OBJECT are handled by formats that
            support nested values.
        published: False hides the attribute from external inspection.
    """

    name: str
    getter: Optional[Callable[[Any], Any]]
    setter: Optional[Callable[[Any, Any], None]] = None
    kind: AttributeKind = AttributeKind.TEXT
    published: bool = True

    @property
    def readable(self) -> bool:
        return self.getter is not None

    @property
    def writable(self) -> bool:
        return self.setter is not None

    def get(self, instance: Any) -> Any:
        if self.getter is None:
            raise AttributeError(f"Attribute '{self.name}' is not readable")
        return self.getter(instance)

    def set(self, instance: Any, value: Any) -> None:
        if self.setter is None:
            raise AttributeError(f"Attribute '{self.name}' is not writable")
        self.setter(instance, value)


_ATTRIBUTE_REGISTRY: Dict[type, Tuple[AttributeSpec, ...]] = {}


def _python_name(name: str) -> str:
    """Map a declared attribute name to a Python attribute (``ToolTip`` -> ``tool_tip``)."""
    chars: List[str] = []
    for index, char in enumerate(name):
        if char.isupper() and index and not name[index - 1].isupper():
            chars.append("_")
        chars.append(char.lower())
    return "".join(chars)


def attribute(
    name: str,
    python_name: str | None = None,
    *,
    kind: AttributeKind = AttributeKind.TEXT,
    read_only: bool = False,
    published: bool = True,
) -> AttributeSpec:
    """Build a spec backed by a plain Python attribute of the instance."""
    target = python_name or _python_name(name)

    def getter(instance: Any) -> Any:
        return getattr(instance, target)

    def setter(instance: Any, value: Any) -> None:
        setattr(instance, target, value)

    return AttributeSpec(
        name=name,
        getter=getter,
        setter=None if read_only else setter,
        kind=kind,
        published=published,
    )


def register_attributes(cls: type, *specs: AttributeSpec) -> None:
    """Declare the attributes exposed by ``cls``.

    Calling it again for the same class replaces the earlier declaration.
    Subclasses inherit declarations; a subclass spec with the same name
    overrides the inherited one.
    """
    _ATTRIBUTE_REGISTRY[cls] = tuple(specs)


def unregister_attributes(cls: type) -> None:
    _ATTRIBUTE_REGISTRY.pop(cls, None)


def attribute_specs_for(cls: type) -> List[AttributeSpec]:
    """Return every attribute declared by ``cls`` and its base classes."""
    merged: Dict[str, AttributeSpec] = {}
    for klass in reversed(cls.__mro__):
        for spec in _ATTRIBUTE_REGISTRY.get(klass, ()):
            merged[spec.name] = spec
    return list(merged.values())


def translatable(
    *text_names: str,
    lists: Sequence[str] = (),
    objects: Sequence[str] = (),
) -> Callable[[type], type]:
    """Class decorator registering plain-attribute specs for a type.

    Args:
        text_names: Names of string attributes.
        lists: Names of string-list attributes.
        objects: Names of attributes holding nested value objects.
    """

    def decorate(cls: type) -> type:
        specs = [attribute(name) for name in text_names]
        specs += [attribute(name, kind=AttributeKind.TEXT_LIST) for name in lists]
        specs += [attribute(name, kind=AttributeKind.OBJECT) for name in objects]
        register_attributes(cls, *specs)
        return cls

    return decorate


class Component:
    """A named node of a translatable object tree.

    Attributes:
        name: Identity of the node, unique among its siblings.
        parent: Owning component, or None for a tree root.
        action: Optional delegate that owns Caption/Hint/Text-like values
            at runtime (menu and button actions).
    """

    def __init__(self, name: str = "", parent: "Component | None" = None) -> None:
        self.name = name
        self.parent: Component | None = None
        self.action: Any = None
        self._children: List[Component] = []
        if parent is not None:
            parent.add_child(self)

    @property
    def children(self) -> List["Component"]:
        return list(self._children)

    def add_child(self, child: "Component") -> "Component":
        if child.parent is not None:
            child.parent.remove_child(child)
        child.parent = self
        self._children.append(child)
        return child

    def remove_child(self, child: "Component") -> None:
        if child in self._children:
            self._children.remove(child)
            child.parent = None

    def find_child(self, name: str) -> "Component | None":
        """Return the direct child called ``name`` (case-insensitive)."""
        wanted = name.lower()
        for child in self._children:
            if child.name.lower() == wanted:
                return child
        return None

    def walk(self) -> Iterator["Component"]:
        """Yield this component and every descendant, depth first."""
        yield self
        for child in self._children:
            yield from child.walk()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r})"


class TreeIntrospector(ABC):
    """Read access to a container tree for the translation engines."""

    #: Name of the identity attribute, never translated.
    identity_attribute: str = "name"

    @abstractmethod
    def name_of(self, node: Any) -> str:
        """Return the node name, empty for anonymous nodes."""

    @abstractmethod
    def children_of(self, node: Any) -> List[Any]:
        """Return the direct children of ``node``."""

    @abstractmethod
    def attributes_of(self, node: Any) -> List[AttributeSpec]:
        """Return the attribute declarations of ``node``."""

    @abstractmethod
    def has_action(self, node: Any) -> bool:
        """Return True if ``node`` is bound to an action delegate."""

    def type_name_of(self, node: Any) -> str:
        return type(node).__name__

    def find_child(self, node: Any, name: str) -> Any:
        """Return the direct child called ``name`` (case-insensitive)."""
        wanted = name.lower()
        for child in self.children_of(node):
            if self.name_of(child).lower() == wanted:
                return child
        return None

    def find_descendant(self, node: Any, name: str) -> Any:
        """Depth-first search below ``node`` for a descendant called ``name``."""
        for child in self.children_of(node):
            if self.name_of(child).lower() == name.lower():
                return child
            found = self.find_descendant(child, name)
            if found is not None:
                return found
        return None

    def find_attribute(self, node: Any, name: str) -> AttributeSpec | None:
        wanted = name.lower()
        for spec in self.attributes_of(node):
            if spec.name.lower() == wanted:
                return spec
        return None


class ComponentIntrospector(TreeIntrospector):
    """Introspector for :class:`Component` trees and registered value types."""

    def name_of(self, node: Any) -> str:
        return getattr(node, "name", "") or ""

    def children_of(self, node: Any) -> List[Any]:
        return list(getattr(node, "children", ()))

    def attributes_of(self, node: Any) -> List[AttributeSpec]:
        return attribute_specs_for(type(node))

    def has_action(self, node: Any) -> bool:
        return getattr(node, "action", None) is not None


__all__ = [
    "AttributeKind",
    "AttributeSpec",
    "Component",
    "ComponentIntrospector",
    "TreeIntrospector",
    "attribute",
    "attribute_specs_for",
    "register_attributes",
    "translatable",
    "unregister_attributes",
]
