"""
Core promptweave building blocks.

This package provides the template tree nodes, deferred references and
shared type aliases used by the compiler and the evaluator.
"""

from promptweave.core.deferred import (
    DeferredReference,
    contains_reference,
    follow_path,
    iter_references,
    ref,
)
from promptweave.core.element import (
    FRAGMENT_TAG,
    BindingRef,
    Element,
    Literal,
    Node,
    Text,
    el,
    fragment,
    normalize_children,
)
from promptweave.core.types import InvocationId, PathSegment, PropsDict, ResolvedValue

__all__ = [
    "FRAGMENT_TAG",
    "BindingRef",
    "DeferredReference",
    "Element",
    "InvocationId",
    "Literal",
    "Node",
    "PathSegment",
    "PropsDict",
    "ResolvedValue",
    "Text",
    "contains_reference",
    "el",
    "follow_path",
    "fragment",
    "iter_references",
    "normalize_children",
    "ref",
]
