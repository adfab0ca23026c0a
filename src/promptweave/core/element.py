"""
Template tree nodes.

The markup parser (an external collaborator) produces a tree of Elements
and Text nodes. Compiler passes never mutate that tree; they build new
nodes, sharing untouched subtrees. The ``el`` and ``fragment`` builders give
Python code the same tree a parser would produce.
"""

from collections.abc import Iterable, Mapping
from typing import Any, TypeAlias

from attrs import evolve, field, frozen

from promptweave.core.deferred import DeferredReference

FRAGMENT_TAG = "Fragment"


@frozen
class Text:
    """
    Raw text exactly as the parser produced it.

    Params:
        value: Text content, including any source indentation and newlines
    """

    value: str


@frozen
class Literal:
    """
    Opaque text produced by the whitespace normalizer.

    Literal text is already dedented and is emitted verbatim; no further
    whitespace handling applies to it.

    Params:
        value: Normalized text content
    """

    value: str


@frozen
class BindingRef:
    """
    Site of a hoisted binding inside the tree.

    Params:
        name: Binding name in the template scope
        origin: True at the site where the invocation originally appeared,
            False for later occurrences of the same name
    """

    name: str
    origin: bool = True


def _to_attributes(value: Mapping[str, Any] | None) -> dict[str, Any]:
    return dict(value or {})


def _to_children(value: Iterable["Node"] | None) -> tuple["Node", ...]:
    return tuple(value or ())


@frozen
class Element:
    """
    A named element with attributes and ordered children.

    Params:
        tag: Element tag; dotted tags (``Ask.Text``) address namespaced components
        attributes: Attribute bag; values may be plain data or deferred references
        children: Ordered child nodes
    """

    tag: str
    attributes: dict[str, Any] = field(factory=dict, converter=_to_attributes)
    children: tuple["Node", ...] = field(default=(), converter=_to_children)

    def get(self, attribute: str, default: Any = None) -> Any:
        """Return an attribute value or ``default``."""
        return self.attributes.get(attribute, default)

    def with_children(self, children: Iterable["Node"]) -> "Element":
        """Return a copy of this element with new children."""
        return evolve(self, children=tuple(children))


Node: TypeAlias = Element | Text | Literal | BindingRef | DeferredReference

NODE_TYPES = (Element, Text, Literal, BindingRef, DeferredReference)


def normalize_children(children: Iterable[Any]) -> list[Node]:
    """
    Flatten child arguments into a list of nodes.

    Nested lists and tuples are flattened, ``None`` and ``False`` are dropped,
    strings and numbers become Text nodes. Anything else is kept as given so
    the compiler can reject it with a precise error.

    Params:
        children: Raw child values as passed to a builder

    Returns:
        Flat list of child nodes
    """
    result: list[Node] = []
    for child in children:
        if child is None or child is False or child is True:
            continue
        if isinstance(child, list | tuple):
            result.extend(normalize_children(child))
        elif isinstance(child, str):
            result.append(Text(child))
        elif isinstance(child, int | float):
            result.append(Text(str(child)))
        else:
            result.append(child)
    return result


def el(tag: str, attributes: Mapping[str, Any] | None = None, *children: Any) -> Element:
    """
    Build an Element the way the markup parser would.

    Params:
        tag: Element tag
        attributes: Attribute bag (optional)
        children: Child nodes, strings or nested lists of them

    Returns:
        New Element
    """
    return Element(tag, attributes, normalize_children(children))


def fragment(*children: Any) -> Element:
    """Build a Fragment element grouping ``children`` without a wrapper."""
    return Element(FRAGMENT_TAG, {}, normalize_children(children))

