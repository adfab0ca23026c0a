"""
Name hoisting compiler pass.

Hoists named invocations into bindings so later siblings can reference
their values:

    <Ask.Text name="username" label="User" />   ->  binding ``username``
    <Task>Greet {username}</Task>                   site -> BindingRef("username")

Hoisting applies to dotted tags (``Ask.Text``) and to capitalized tags that
are not structural. Structural components use ``name`` for identification
only and are never hoisted.
"""

import re
from collections.abc import Iterable

from promptweave.compiler.template import Binding, CompiledTemplate, Scope
from promptweave.core.element import BindingRef, Element, Node
from promptweave.exceptions import HoistedNameError

# Structural component tags whose `name` attribute is not a binding.
STRUCTURAL_TAGS = frozenset(
    {
        "Prompt",
        "Section",
        "Role",
        "Task",
        "Context",
        "Constraint",
        "Constraints",
        "Format",
        "Audience",
        "Tone",
        "Objective",
        "Style",
        "SuccessCriteria",
        "Criterion",
        "Example",
        "Examples",
        "Steps",
        "Step",
        "ChainOfThought",
        "If",
        "ForEach",
        "Code",
        "Data",
        "Json",
        "Xml",
        "PostExecution",
        "OpenUrl",
        "RunCommand",
        "Uses",
        "Fragment",
    }
)

RESERVED_WORDS = frozenset(
    {
        "break", "case", "catch", "continue", "debugger", "default", "delete",
        "do", "else", "finally", "for", "function", "if", "in", "instanceof",
        "new", "return", "switch", "this", "throw", "try", "typeof", "var",
        "void", "while", "with", "class", "const", "enum", "export", "extends",
        "import", "super", "implements", "interface", "let", "package", "private",
        "protected", "public", "static", "yield", "true", "false", "null",
    }
)  # fmt: skip

IDENTIFIER_PATTERN = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")


def is_valid_identifier(name: str) -> bool:
    """
    Check whether a binding name is a valid identifier.

    Params:
        name: Candidate binding name

    Returns:
        True if the name starts with a letter, underscore or ``$``, continues
        with letters, digits, underscores or ``$``, and is not reserved
    """
    return bool(IDENTIFIER_PATTERN.match(name)) and name not in RESERVED_WORDS


def is_hoistable_tag(tag: str, structural_tags: Iterable[str] = STRUCTURAL_TAGS) -> bool:
    """
    Check whether elements with this tag turn their ``name`` into a binding.

    Params:
        tag: Element tag
        structural_tags: Tags exempt from hoisting

    Returns:
        True for dotted tags, and for capitalized tags that are not structural
    """
    if "." in tag:
        return True
    if not tag or tag in structural_tags:
        return False
    first = tag[0]
    return first.isupper() and first != first.lower()


def declared_name(element: Element, structural_tags: Iterable[str] = STRUCTURAL_TAGS) -> str | None:
    """Return the raw ``name`` of a hoistable element without validating it."""
    if not is_hoistable_tag(element.tag, structural_tags):
        return None
    name = element.get("name")
    if not isinstance(name, str) or not name:
        return None
    return name


def binding_name(element: Element, structural_tags: Iterable[str] = STRUCTURAL_TAGS) -> str | None:
    """
    Return the binding name an element declares, if it declares one.

    Params:
        element: Candidate invocation
        structural_tags: Tags exempt from hoisting

    Returns:
        The validated name, or None if the element is not hoisted

    Raises:
        HoistedNameError: If the ``name`` attribute is not a valid identifier
    """
    name = declared_name(element, structural_tags)
    if name is None:
        return None
    if not is_valid_identifier(name):
        raise HoistedNameError(name, element.tag)
    return name


class _Hoister:
    def __init__(self, scope: Scope, structural_tags: frozenset[str]):
        self.scope = scope
        self.structural_tags = structural_tags
        self.created: list[Binding] = []
        self.claimed: set[str] = set()

    def nodes(self, nodes: Iterable[Node]) -> tuple[Node, ...]:
        return tuple(self.node(node) for node in nodes)

    def node(self, node: Node) -> Node:
        if not isinstance(node, Element):
            return node

        name = binding_name(node, self.structural_tags)
        if name is not None:
            # A later occurrence is dropped whole, nested names included
            if name in self.claimed or self.scope.has_binding(name):
                return BindingRef(name, origin=False)
            self.claimed.add(name)

        # children first, so nested names are bound before their parent
        children = self.nodes(node.children)
        element = node if children == node.children else node.with_children(children)
        if name is None:
            return element

        self.scope.declare(name, element)
        self.created.append(Binding(name, element))
        return BindingRef(name, origin=True)


def hoist_names(template: CompiledTemplate, scope: Scope | None = None) -> CompiledTemplate:
    """
    Hoist named invocations into deduplicated bindings.

    The first occurrence of a name in pre-order creates a binding and its
    site becomes an origin reference; later occurrences become plain
    references and their elements are dropped with everything they contain,
    so an invocation is never evaluated twice.

    Params:
        template: Template unit to rewrite
        scope: Binding namespace of the unit; a fresh one using the default
            structural tags is created if omitted

    Returns:
        New template unit with hoisted bindings appended to its declarations

    Raises:
        HoistedNameError: If a hoistable element carries an invalid name
    """
    if scope is None:
        scope = Scope.from_template(template, STRUCTURAL_TAGS)
    structural_tags = scope.structural_tags or STRUCTURAL_TAGS

    hoister = _Hoister(scope, structural_tags)
    body = hoister.nodes(template.body)
    return template.replace(body=body, declarations=template.declarations + tuple(hoister.created))
