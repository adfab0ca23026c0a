"""
Whitespace normalizer compiler pass.

Multi-line text carries meaning in prompts (bullet lists, paragraphs), so
block-like text is dedented into an opaque Literal instead of being left to
the parser's inline whitespace collapsing.

A text node is block-like when it starts with a newline and the text after
its last newline is whitespace only:

    <Context>          ->  <Context>{"Line one\\nLine two"}</Context>
      Line one
      Line two
    </Context>

Inline text such as ``" to "`` or ``"Hello"`` is left untouched.
"""

from collections.abc import Iterable

from promptweave.compiler.template import Binding, CompiledTemplate, Scope
from promptweave.core.element import Element, Literal, Node, Text


def is_block_text(text: str) -> bool:
    """
    Check whether text forms a complete block.

    Params:
        text: Raw text node content

    Returns:
        True if the text starts with a newline and ends with a whitespace-only line
    """
    if not text.startswith("\n"):
        return False
    trailing = text[text.rfind("\n") + 1 :]
    return trailing.strip() == ""


def _indent_width(line: str) -> int:
    return len(line) - len(line.lstrip())


def dedent_text(text: str) -> str | None:
    """
    Remove common indentation from block text.

    Leading and trailing whitespace-only lines are dropped, the minimum
    indentation of the remaining non-blank lines is stripped from every line
    and blank lines become empty. Applying it to its own output is a no-op.

    Params:
        text: Block text content

    Returns:
        The dedented text, or None when nothing but whitespace remains
    """
    lines = text.split("\n")

    while lines and lines[0].strip() == "":
        lines.pop(0)
    while lines and lines[-1].strip() == "":
        lines.pop()

    if not lines:
        return None

    min_indent = min(_indent_width(line) for line in lines if line.strip())

    return "\n".join("" if not line.strip() else line[min_indent:] for line in lines)


def _normalize_nodes(nodes: Iterable[Node]) -> tuple[Node, ...]:
    result: list[Node] = []
    for node in nodes:
        if isinstance(node, Text):
            if not is_block_text(node.value):
                result.append(node)
                continue
            dedented = dedent_text(node.value)
            if dedented is not None:
                result.append(Literal(dedented))
        elif isinstance(node, Element):
            result.append(_normalize_element(node))
        else:
            result.append(node)
    return tuple(result)


def _normalize_element(element: Element) -> Element:
    children = _normalize_nodes(element.children)
    if children == element.children:
        return element
    return element.with_children(children)


def normalize_whitespace(template: CompiledTemplate, scope: Scope | None = None) -> CompiledTemplate:
    """
    Rewrite block-like text nodes into dedented Literals.

    Applies to the body and to every hoisted binding, so the result does not
    depend on whether the name hoister ran before this pass.

    Params:
        template: Template unit to normalize
        scope: Unused; accepted so all passes share one signature

    Returns:
        New template unit with block text normalized
    """
    declarations = tuple(
        Binding(binding.name, _normalize_element(binding.element))
        for binding in template.declarations
    )
    return template.replace(body=_normalize_nodes(template.body), declarations=declarations)
