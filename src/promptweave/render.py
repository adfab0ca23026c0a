"""
Render entry points.

``render`` compiles a template tree, evaluates it, runs the whole-tree
diagnostic rules and applies the caller's warning policy:

    result = await render(el("Prompt", None, el("Task", None, "Summarize")))
    if result.ok:
        print(result.text)
"""

import asyncio
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from promptweave.compiler.pipeline import compile_template
from promptweave.compiler.template import CompiledTemplate
from promptweave.components.builtins import default_registry
from promptweave.components.registry import ComponentRegistry
from promptweave.config import RenderOptions
from promptweave.core.element import Element, Node
from promptweave.diagnostics.models import Diagnostic
from promptweave.diagnostics.policy import apply_policy
from promptweave.diagnostics.rules import DEFAULT_CONFLICT_RULES, run_post_passes
from promptweave.exceptions.core import CompileError
from promptweave.execution.actions import ActionModel
from promptweave.execution.context import RenderContext
from promptweave.execution.evaluator import Evaluator

logger = logging.getLogger(__name__)

TemplateSource = Element | Sequence[Node] | CompiledTemplate | None


@dataclass
class RenderResult:
    """
    Outcome of one render call.

    Params:
        ok: True when no hard error remains after the warning policy
        text: Rendered text; best-effort output when ``ok`` is False
        errors: Hard errors first, then warnings; None when there are none
        post_execution: Actions to run, in document order; always empty when
            ``ok`` is False
    """

    ok: bool
    text: str
    errors: list[Diagnostic] | None = None
    post_execution: list[ActionModel] = field(default_factory=list)

    @property
    def warnings(self) -> list[Diagnostic]:
        return [diagnostic for diagnostic in self.errors or [] if diagnostic.is_warning]


def _finish(text: str, diagnostics: Sequence[Diagnostic], actions: Sequence[ActionModel], options: RenderOptions) -> RenderResult:
    outcome = apply_policy(diagnostics, options.ignore_warnings, options.throw_on_warnings)
    return RenderResult(
        ok=outcome.ok,
        text=text,
        errors=list(outcome.errors) or None,
        post_execution=list(actions) if outcome.ok else [],
    )


async def render(
    template: TemplateSource,
    options: RenderOptions | Mapping[str, Any] | None = None,
    *,
    registry: ComponentRegistry | None = None,
    **overrides: Any,
) -> RenderResult:
    """
    Compile and render a template.

    Params:
        template: Root element, top-level nodes, or an already compiled template
        options: RenderOptions or a mapping of option names (snake_case or camelCase)
        registry: Components available to the template; the built-ins by default
        overrides: Individual options applied on top of ``options``

    Returns:
        RenderResult. Compile and evaluation errors are reported as
        diagnostics, never raised.

    Raises:
        pydantic.ValidationError: If the options themselves are invalid
    """
    options = RenderOptions.build(options, **overrides)
    registry = registry or default_registry()

    if isinstance(template, CompiledTemplate):
        compiled = template
    else:
        try:
            compiled = compile_template(template, structural_tags=registry.structural_tags())
        except CompileError as exc:
            logger.debug("Compilation failed: %s", exc.message)
            return _finish("", [exc.to_diagnostic()], [], options)

    context = RenderContext(inputs=options.inputs, env=options.env)
    evaluator = Evaluator(compiled, registry, context)
    text = await evaluator.evaluate()
    if options.trim:
        text = text.strip()

    diagnostics = list(context.diagnostics)
    diagnostics.extend(
        run_post_passes(
            evaluator.rendered,
            required_elements=options.required_elements,
            conflict_rules=DEFAULT_CONFLICT_RULES if options.check_conflicts else (),
        )
    )
    logger.debug(
        "Rendered %d element(s) with %d diagnostic(s) and %d action(s)",
        len(evaluator.rendered),
        len(diagnostics),
        len(context.post_execution),
    )
    return _finish(text, diagnostics, context.post_execution, options)


def render_sync(
    template: TemplateSource,
    options: RenderOptions | Mapping[str, Any] | None = None,
    *,
    registry: ComponentRegistry | None = None,
    **overrides: Any,
) -> RenderResult:
    """Run ``render`` to completion in a new event loop."""
    return asyncio.run(render(template, options, registry=registry, **overrides))
