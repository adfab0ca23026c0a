"""
Tests for the compilation pipeline.
"""

from itertools import permutations

import pytest

from promptweave.compiler.hoisting import hoist_names
from promptweave.compiler.imports import elaborate_imports
from promptweave.compiler.pipeline import DEFAULT_PASSES, compile_template
from promptweave.compiler.template import CompiledTemplate
from promptweave.compiler.whitespace import normalize_whitespace
from promptweave.core.deferred import ref
from promptweave.core.element import BindingRef, Element, Literal, el
from promptweave.exceptions import CompileError, MalformedTreeError


def sample_tree():
    return el(
        "Prompt",
        None,
        el("Uses", {"component": "Card", "from": "ui"}),
        el(
            "Producer",
            {"name": "u", "value": {"name": "Alice"}},
            "\n      Loaded profile\n    ",
            el("Uses", {"default": "Badge", "from": "./badge"}),
        ),
        el("Task", None, "\n    Greet the user.\n      Be brief.\n  "),
        el("Consumer", {"value": ref("u").name}),
        el("Producer", {"name": "u"}, el("Uses", {"component": "Unused", "from": "elsewhere"})),
    )


class TestCompileTemplate:
    """Tests for compile_template."""

    def test_compiles_all_passes(self):
        """The default pipeline normalizes, elaborates and hoists."""
        result = compile_template(sample_tree())

        prompt = result.body[0]
        assert [type(child).__name__ for child in prompt.children] == [
            "BindingRef",
            "Element",
            "Element",
            "BindingRef",
        ]
        assert prompt.children[0] == BindingRef("u", origin=True)
        assert prompt.children[3] == BindingRef("u", origin=False)
        assert prompt.children[1].children == (Literal("Greet the user.\n  Be brief."),)
        assert result.binding("u").element.children == (Literal("Loaded profile"),)
        assert [binding.local_name for binding in result.imports] == ["Card", "Badge"]

    @pytest.mark.parametrize("order", list(permutations(DEFAULT_PASSES)))
    def test_passes_commute(self, order):
        """Every ordering of the passes produces the same unit."""
        expected = compile_template(sample_tree())
        assert compile_template(sample_tree(), passes=order) == expected

    @pytest.mark.parametrize("order", list(permutations(DEFAULT_PASSES)))
    def test_repeated_name_subtree_ignored_in_any_order(self, order):
        """Directives and names inside a repeated binding never take effect."""
        tree = el(
            "Prompt",
            None,
            el("Producer", {"name": "u"}, el("Uses", {"component": "A", "from": "p"})),
            el(
                "Producer",
                {"name": "u"},
                el("Uses", {"component": "B"}),
                el("Producer", {"name": "nested"}),
            ),
        )
        result = compile_template(tree, passes=order)
        assert [binding.local_name for binding in result.imports] == ["A"]
        assert [binding.name for binding in result.declarations] == ["u"]

    def test_empty_template(self):
        """None compiles to an empty unit."""
        assert compile_template(None) == CompiledTemplate()

    def test_sequence_source(self):
        """A list of top-level nodes becomes the body."""
        result = compile_template(["Hello ", el("Task", None, "x")])
        assert len(result.body) == 2

    def test_compiled_template_recompiles_to_itself(self):
        """Compiling a compiled unit again is a no-op."""
        once = compile_template(sample_tree())
        assert compile_template(once) == once

    def test_malformed_child_rejected(self):
        """Objects that are not nodes are a compile error."""
        with pytest.raises(MalformedTreeError) as exc_info:
            compile_template(el("Task", None, {"not": "a node"}))
        assert exc_info.value.context.tag == "Task"

    def test_empty_tag_rejected(self):
        with pytest.raises(MalformedTreeError):
            compile_template(Element(""))

    def test_directive_errors_propagate(self):
        """compile_template raises CompileError for direct callers."""
        with pytest.raises(CompileError):
            compile_template(el("Uses", {"component": "Card"}))

    def test_custom_passes(self):
        """Passes can be selected explicitly."""
        result = compile_template(sample_tree(), passes=(hoist_names,))
        assert result.imports == ()
        assert result.binding("u") is not None

    def test_individual_passes_share_signature(self):
        """Every pass accepts a template and an optional scope."""
        template = CompiledTemplate.from_source(sample_tree())
        for compiler_pass in (normalize_whitespace, elaborate_imports, hoist_names):
            assert isinstance(compiler_pass(template), CompiledTemplate)
