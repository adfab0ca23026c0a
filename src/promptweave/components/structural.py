"""
Structural prompt components.

Structural components organize a prompt into delimited sections (role,
task, context, output format, reasoning). They use ``name`` for
identification only, so they are never hoisted.
"""

from typing import Any, Literal

from pydantic import BaseModel

from promptweave.components.base import Component
from promptweave.components.delimiters import Delimiter, section_name, wrap_with_delimiter
from promptweave.core.types import PropsDict


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


class SectionProps(BaseModel):
    name: str | None = None
    delimiter: Delimiter = "xml"


class StructuralComponent(Component):
    """Wraps its content in a section named after the component tag."""

    schema = SectionProps
    structural = True
    section: str | None = None

    def section_title(self, props: PropsDict) -> str:
        return self.section or section_name(self.name)

    def content(self, props: PropsDict) -> str:
        return _text(props.get("children"))

    def render(self, props: PropsDict, resolved_value: Any, context) -> str | None:
        content = self.content(props)
        if not content:
            return None
        return wrap_with_delimiter(content, self.section_title(props), props.get("delimiter", "xml"))


class Prompt(Component):
    """Root of a prompt; renders its sections in order."""

    class Props(BaseModel):
        name: str | None = None
        description: str | None = None

    schema = Props
    structural = True

    def render(self, props: PropsDict, resolved_value: Any, context) -> str:
        return props.get("children") or ""


class Fragment(Component):
    """Groups children without adding output of its own."""

    structural = True


class Section(StructuralComponent):
    """Generic named section; the ``name`` attribute becomes the section name."""

    def section_title(self, props: PropsDict) -> str:
        return section_name(props.get("name") or "section")


class Role(StructuralComponent):
    class Props(SectionProps):
        expertise: str | None = None

    schema = Props

    def content(self, props: PropsDict) -> str:
        content = _text(props.get("children"))
        expertise = props.get("expertise")
        if expertise:
            suffix = f"You have expertise in {expertise}."
            content = f"{content} {suffix}" if content else suffix
        return content


class Task(StructuralComponent):
    pass


class Context(StructuralComponent):
    class Props(SectionProps):
        label: str | None = None

    schema = Props

    def content(self, props: PropsDict) -> str:
        content = _text(props.get("children"))
        label = props.get("label")
        if label and content:
            return f"[{label}]\n{content}"
        return content


CONSTRAINT_PREFIXES = {
    "must": "MUST: ",
    "should": "SHOULD: ",
    "must_not": "MUST NOT: ",
    "may": "MAY: ",
}


class Constraint(StructuralComponent):
    class Props(SectionProps):
        type: Literal["must", "should", "must_not", "may"] = "must"

    schema = Props

    def content(self, props: PropsDict) -> str:
        content = _text(props.get("children"))
        if not content:
            return ""
        return f"{CONSTRAINT_PREFIXES[props.get('type', 'must')]}{content}"


class Format(StructuralComponent):
    """Output format instructions; ``strict`` demands formatted output only."""

    class Props(SectionProps):
        type: Literal["json", "markdown", "xml", "text", "code", "yaml", "csv", "list", "table"] | None = None
        language: str | None = None
        strict: bool = False

    schema = Props

    def content(self, props: PropsDict) -> str:
        content = _text(props.get("children"))
        format_type = props.get("type")
        if format_type:
            description = f"{format_type} ({props['language']})" if props.get("language") else format_type
            lines = [f"Output format: {description}"]
            if content:
                lines.append(content)
            content = "\n\n".join(lines)
        if props.get("strict") and content:
            content = f"{content}\n\nReturn ONLY the formatted output, with no additional text."
        return content


class ChainOfThought(StructuralComponent):
    """Asks for step-by-step reasoning, shown or kept internal."""

    class Props(SectionProps):
        show_reasoning: bool = True

    schema = Props
    section = "reasoning"

    def content(self, props: PropsDict) -> str:
        content = _text(props.get("children")) or "Think through this step by step."
        if props.get("show_reasoning", True):
            return f"{content}\nShow your reasoning before giving the final answer."
        return f"{content}\nKeep your reasoning internal and only provide the final answer."
