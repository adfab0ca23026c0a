"""
Import elaborator compiler pass.

Rewrites ``Uses`` directive elements into external bindings collected at the
top of the compiled unit:

- ``<Uses component="X" from="lib" />``         -> X bound to lib's X
- ``<Uses component="X" as="Y" from="lib" />``  -> Y bound to lib's X
- ``<Uses default="X" from="lib" />``           -> X bound to lib's default export
- ``<Uses component="A, B" from="lib" />``      -> A and B bound to lib's A and B

The directive element itself is removed from the tree.
"""

from promptweave.compiler.hoisting import STRUCTURAL_TAGS, declared_name
from promptweave.compiler.template import Binding, CompiledTemplate, ImportBinding, Scope
from promptweave.core.element import BindingRef, Element, Node
from promptweave.exceptions import DirectiveError, ErrorContext

DIRECTIVE_TAG = "Uses"

DEFAULT_EXPORT = "default"


def _string_attribute(element: Element, name: str) -> str | None:
    value = element.get(name)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def parse_directive(element: Element) -> list[ImportBinding]:
    """
    Turn one ``Uses`` element into its external bindings.

    Params:
        element: The directive element

    Returns:
        Bindings in declaration order: the default binding first, then the
        named components in the order listed

    Raises:
        DirectiveError: If ``from`` is missing, or both ``component`` and
            ``default`` are missing
    """
    source = _string_attribute(element, "from")
    components = _string_attribute(element, "component")
    default = _string_attribute(element, DEFAULT_EXPORT)
    alias = _string_attribute(element, "as")

    if source is None:
        raise DirectiveError(
            '<Uses> requires a "from" attribute specifying the module source',
            ErrorContext(tag=DIRECTIVE_TAG, attribute="from"),
        )
    if components is None and default is None:
        raise DirectiveError(
            '<Uses> requires either a "component" or "default" attribute',
            ErrorContext(tag=DIRECTIVE_TAG, attribute="component"),
        )

    bindings = []
    if default is not None:
        bindings.append(ImportBinding(default, DEFAULT_EXPORT, source, kind="default"))

    if components is not None:
        names = [name.strip() for name in components.split(",") if name.strip()]
        for name in names:
            local_name = alias if alias and len(names) == 1 else name
            bindings.append(ImportBinding(local_name, name, source, kind="named"))

    return bindings


class _Elaborator:
    """Walks the unit in document order collecting directives."""

    def __init__(self, template: CompiledTemplate, scope: Scope):
        self.scope = scope
        self.structural_tags = scope.structural_tags or STRUCTURAL_TAGS
        self.bindings = template.binding_map()
        self.rewritten: dict[str, Binding] = {}
        self.found: list[ImportBinding] = []
        self.claimed: set[str] = set()

    def nodes(self, nodes: tuple[Node, ...]) -> tuple[Node, ...]:
        result: list[Node] = []
        for node in nodes:
            if isinstance(node, Element):
                if node.tag == DIRECTIVE_TAG:
                    for binding in parse_directive(node):
                        if self.scope.declare_import(binding):
                            self.found.append(binding)
                    continue
                if self.is_repeated_name(node):
                    # the name hoister drops this subtree
                    result.append(node)
                    continue
                result.append(self.element(node))
            else:
                if isinstance(node, BindingRef) and node.origin:
                    self.binding(node.name)
                result.append(node)
        return tuple(result)

    def is_repeated_name(self, element: Element) -> bool:
        name = declared_name(element, self.structural_tags)
        if name is None:
            return False
        if name in self.claimed or name in self.bindings:
            return True
        self.claimed.add(name)
        return False

    def element(self, element: Element) -> Element:
        children = self.nodes(element.children)
        if children == element.children:
            return element
        return element.with_children(children)

    def binding(self, name: str) -> None:
        if name in self.rewritten or name not in self.bindings:
            return
        binding = self.bindings[name]
        self.rewritten[name] = Binding(name, self.element(binding.element))


def elaborate_imports(template: CompiledTemplate, scope: Scope | None = None) -> CompiledTemplate:
    """
    Replace ``Uses`` directives with external bindings.

    Directives are collected in pre-order of encounter. Hoisted bindings are
    visited at their origin site, so the order is the same whether or not
    the name hoister ran first.

    Params:
        template: Template unit to elaborate
        scope: Binding namespace of the unit; a fresh one is used if omitted

    Returns:
        New template unit without directive elements

    Raises:
        DirectiveError: If a directive is malformed
    """
    scope = scope or Scope.from_template(template)
    elaborator = _Elaborator(template, scope)
    body = elaborator.nodes(template.body)

    for binding in template.declarations:
        elaborator.binding(binding.name)
    declarations = tuple(elaborator.rewritten[binding.name] for binding in template.declarations)

    return template.replace(
        body=body,
        declarations=declarations,
        imports=template.imports + tuple(elaborator.found),
    )
