"""
Compilation pipeline turning a parse tree into a canonical template unit.
"""

import logging
from collections.abc import Callable, Iterable, Sequence

from promptweave.compiler.hoisting import STRUCTURAL_TAGS, hoist_names
from promptweave.compiler.imports import elaborate_imports
from promptweave.compiler.template import CompiledTemplate, Scope
from promptweave.compiler.whitespace import normalize_whitespace
from promptweave.core.deferred import DeferredReference
from promptweave.core.element import NODE_TYPES, Element, Node
from promptweave.exceptions import ErrorContext, MalformedTreeError

logger = logging.getLogger(__name__)

CompilerPass = Callable[[CompiledTemplate, Scope], CompiledTemplate]

# The passes touch disjoint node kinds (text, directives, named invocations)
# and commute; this order is only the default.
DEFAULT_PASSES: tuple[CompilerPass, ...] = (
    normalize_whitespace,
    elaborate_imports,
    hoist_names,
)


def check_tree(nodes: Iterable[Node], parent: str | None = None) -> None:
    """
    Verify that a parse tree only contains template nodes.

    Params:
        nodes: Nodes to check, recursively
        parent: Tag of the enclosing element, for error messages

    Raises:
        MalformedTreeError: On a non-node child, an empty or non-string tag,
            or non-string attribute names
    """
    for node in nodes:
        if not isinstance(node, NODE_TYPES):
            raise MalformedTreeError(
                f"Unexpected {type(node).__name__} in template tree: {node!r}",
                ErrorContext(tag=parent),
            )
        if isinstance(node, DeferredReference) or not isinstance(node, Element):
            continue
        if not isinstance(node.tag, str) or not node.tag.strip():
            raise MalformedTreeError(
                f"Element tag must be a non-empty string, got {node.tag!r}",
                ErrorContext(tag=parent),
            )
        for attribute in node.attributes:
            if not isinstance(attribute, str):
                raise MalformedTreeError(
                    f"Attribute names must be strings, got {attribute!r}",
                    ErrorContext(tag=node.tag),
                )
        check_tree(node.children, node.tag)


def compile_template(
    source: Element | Sequence[Node] | CompiledTemplate | None,
    structural_tags: Iterable[str] = STRUCTURAL_TAGS,
    passes: Sequence[CompilerPass] = DEFAULT_PASSES,
) -> CompiledTemplate:
    """
    Compile a parse tree into a canonical template unit.

    Params:
        source: Root element, sequence of top-level nodes, None for an empty
            template, or a template unit to compile further
        structural_tags: Tags exempt from name hoisting
        passes: Compiler passes to run, in order

    Returns:
        The compiled template unit

    Raises:
        CompileError: If the tree is malformed or a pass rejects it
    """
    template = CompiledTemplate.from_source(source)
    check_tree(template.body)
    for binding in template.declarations:
        check_tree((binding.element,))

    scope = Scope.from_template(template, structural_tags)
    for compiler_pass in passes:
        logger.debug("Running compiler pass %s", compiler_pass.__name__)
        template = compiler_pass(template, scope)

    logger.debug(
        "Compiled template with %d binding(s) and %d import(s)",
        len(template.declarations),
        len(template.imports),
    )
    return template
