"""
Compiled template units and their binding namespace.

A compiled template is the canonical tree the evaluator consumes: external
bindings produced by ``Uses`` directives, named bindings produced by the
name hoister, and the body in document order.
"""

from collections.abc import Iterable, Sequence
from typing import Literal as TypingLiteral

from attrs import evolve, field, frozen

from promptweave.core.element import Element, Node, normalize_children


@frozen
class ImportBinding:
    """
    External binding declared by a ``Uses`` directive.

    Params:
        local_name: Name the template uses as a tag
        imported_name: Name exported by the source
        source: Module or library the component comes from
        kind: ``named`` for ``component=`` entries, ``default`` for ``default=``
    """

    local_name: str
    imported_name: str
    source: str
    kind: TypingLiteral["named", "default"] = "named"


@frozen
class Binding:
    """
    Named, unevaluated invocation hoisted out of the tree.

    Params:
        name: Binding name, unique within the template scope
        element: The invocation, evaluated at most once per render call
    """

    name: str
    element: Element


def _to_tuple(value: Iterable) -> tuple:
    return tuple(value)


@frozen
class CompiledTemplate:
    """
    Canonical template unit consumed by the evaluator.

    Params:
        body: Top-level nodes in document order
        declarations: Hoisted bindings in creation order (innermost first)
        imports: External bindings in order of encounter
    """

    body: tuple[Node, ...] = field(default=(), converter=_to_tuple)
    declarations: tuple[Binding, ...] = field(default=(), converter=_to_tuple)
    imports: tuple[ImportBinding, ...] = field(default=(), converter=_to_tuple)

    @classmethod
    def from_source(cls, source: "Element | Sequence[Node] | CompiledTemplate | None") -> "CompiledTemplate":
        """
        Wrap a parse tree as an uncompiled template unit.

        Params:
            source: Root element, a sequence of top-level nodes, None for an
                empty template, or an already compiled template

        Returns:
            CompiledTemplate whose body holds the source nodes
        """
        if isinstance(source, CompiledTemplate):
            return source
        if source is None:
            return cls()
        if isinstance(source, Element):
            return cls(body=(source,))
        return cls(body=normalize_children(source))

    def binding(self, name: str) -> Binding | None:
        """Return the hoisted binding called ``name``, if any."""
        for declaration in self.declarations:
            if declaration.name == name:
                return declaration
        return None

    def binding_map(self) -> dict[str, Binding]:
        return {declaration.name: declaration for declaration in self.declarations}

    def import_map(self) -> dict[str, ImportBinding]:
        return {binding.local_name: binding for binding in self.imports}

    def replace(self, **changes) -> "CompiledTemplate":
        return evolve(self, **changes)


class Scope:
    """
    Binding namespace of one compiled template unit.

    The scope is passed explicitly into the compiler passes. A name declared
    twice keeps its first binding; the second declaration is reported back
    so the caller can turn the site into a plain reference.
    """

    def __init__(self, structural_tags: Iterable[str] = ()):
        """
        Initialize an empty scope.

        Params:
            structural_tags: Tags exempt from name hoisting in this unit
        """
        self.structural_tags = frozenset(structural_tags)
        self._bindings: dict[str, Binding] = {}
        self._imports: dict[str, ImportBinding] = {}

    @classmethod
    def from_template(cls, template: CompiledTemplate, structural_tags: Iterable[str] = ()) -> "Scope":
        """Create a scope seeded with the bindings a template already declares."""
        scope = cls(structural_tags)
        for binding in template.declarations:
            scope._bindings.setdefault(binding.name, binding)
        for binding in template.imports:
            scope._imports.setdefault(binding.local_name, binding)
        return scope

    def __contains__(self, name: str) -> bool:
        return name in self._bindings or name in self._imports

    def has_binding(self, name: str) -> bool:
        return name in self._bindings

    def declare(self, name: str, element: Element) -> bool:
        """
        Declare a hoisted binding.

        Params:
            name: Binding name
            element: Invocation to bind

        Returns:
            True if a new binding was created, False if the name already existed
        """
        if name in self._bindings:
            return False
        self._bindings[name] = Binding(name, element)
        return True

    def declare_import(self, binding: ImportBinding) -> bool:
        """Declare an external binding; returns False if the local name is taken."""
        if binding.local_name in self._imports:
            return False
        self._imports[binding.local_name] = binding
        return True

    @property
    def declarations(self) -> tuple[Binding, ...]:
        return tuple(self._bindings.values())

    @property
    def imports(self) -> tuple[ImportBinding, ...]:
        return tuple(self._imports.values())
