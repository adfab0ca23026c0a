"""
Template compiler passes.

The whitespace normalizer, import elaborator and name hoister rewrite a
parse tree into the canonical template unit consumed by the evaluator.
"""

from promptweave.compiler.hoisting import (
    STRUCTURAL_TAGS,
    binding_name,
    hoist_names,
    is_hoistable_tag,
    is_valid_identifier,
)
from promptweave.compiler.imports import DIRECTIVE_TAG, elaborate_imports, parse_directive
from promptweave.compiler.pipeline import DEFAULT_PASSES, check_tree, compile_template
from promptweave.compiler.template import Binding, CompiledTemplate, ImportBinding, Scope
from promptweave.compiler.whitespace import dedent_text, is_block_text, normalize_whitespace

__all__ = [
    "Binding",
    "CompiledTemplate",
    "DEFAULT_PASSES",
    "DIRECTIVE_TAG",
    "ImportBinding",
    "STRUCTURAL_TAGS",
    "Scope",
    "binding_name",
    "check_tree",
    "compile_template",
    "dedent_text",
    "elaborate_imports",
    "hoist_names",
    "is_block_text",
    "is_hoistable_tag",
    "is_valid_identifier",
    "normalize_whitespace",
    "parse_directive",
]
