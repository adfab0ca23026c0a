"""
Whole-tree diagnostic rules run after evaluation.

Rules look at the elements that were actually rendered, so an element in a
branch that did not render (``<If when={False}>``) never triggers them.
"""

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from inflection import underscore

from promptweave.diagnostics.models import Diagnostic


@dataclass(frozen=True)
class RenderedElement:
    """
    Trace record of one rendered element.

    Params:
        tag: Element tag
        props: Validated props the element rendered with (without children)
        owner: Invocation id of the element
    """

    tag: str
    props: dict[str, Any] = field(default_factory=dict)
    owner: str | None = None


PropsPredicate = Callable[[dict[str, Any]], bool]


@dataclass(frozen=True)
class ConflictRule:
    """
    Warns once when two contradictory instructions are both active.

    Params:
        code: Warning code
        message: Warning message
        first_tag: Tag of the first instruction
        first_active: Whether an instance of the first instruction is active
        second_tag: Tag of the second instruction
        second_active: Whether an instance of the second instruction is active
    """

    code: str
    message: str
    first_tag: str
    first_active: PropsPredicate
    second_tag: str
    second_active: PropsPredicate

    def check(self, rendered: Sequence[RenderedElement]) -> list[Diagnostic]:
        first = any(item.tag == self.first_tag and self.first_active(item.props) for item in rendered)
        if not first:
            return []
        second = any(item.tag == self.second_tag and self.second_active(item.props) for item in rendered)
        if not second:
            return []
        return [Diagnostic(code=self.code, message=self.message, component=self.first_tag)]


@dataclass(frozen=True)
class RequiredElementRule:
    """
    Warns when a mandatory top-level instruction element never rendered.

    Params:
        tag: Tag that must be present
    """

    tag: str

    @property
    def code(self) -> str:
        return f"warn_missing_{underscore(self.tag.replace('.', '_'))}"

    def check(self, rendered: Sequence[RenderedElement]) -> list[Diagnostic]:
        if any(item.tag == self.tag for item in rendered):
            return []
        return [
            Diagnostic(
                code=self.code,
                message=f"Prompt has no {self.tag} element. Consider adding a <{self.tag}> element.",
                component=self.tag,
            )
        ]


STRICT_FORMAT_WITH_REASONING = ConflictRule(
    code="warn_conflicting_instructions",
    message=(
        "<Format strict> and <ChainOfThought show_reasoning> produce contradictory instructions. "
        "Format strict tells the LLM to return ONLY formatted output, while ChainOfThought asks it "
        "to show reasoning. Consider setting show_reasoning={False} or removing strict."
    ),
    first_tag="Format",
    first_active=lambda props: props.get("strict") is True,
    second_tag="ChainOfThought",
    second_active=lambda props: props.get("show_reasoning") is not False,
)

DEFAULT_CONFLICT_RULES: tuple[ConflictRule, ...] = (STRICT_FORMAT_WITH_REASONING,)


def run_post_passes(
    rendered: Sequence[RenderedElement],
    required_elements: Iterable[str] = (),
    conflict_rules: Iterable[ConflictRule] = DEFAULT_CONFLICT_RULES,
) -> list[Diagnostic]:
    """
    Run the whole-tree rules over the rendered elements.

    Params:
        rendered: Elements in the order they rendered
        required_elements: Tags that must render at least once
        conflict_rules: Conflict rules to apply

    Returns:
        Diagnostics in rule order: conflicts first, then missing elements
    """
    diagnostics: list[Diagnostic] = []
    for rule in conflict_rules:
        diagnostics.extend(rule.check(rendered))
    for tag in required_elements:
        diagnostics.extend(RequiredElementRule(tag).check(rendered))
    return diagnostics
