"""
Input components.

``Ask.*`` components are producers: their value comes from the caller's
inputs (keyed by the ``name`` attribute), falling back to ``default``.
Interactive collection of missing inputs happens outside the renderer.
"""

from typing import Any

from pydantic import BaseModel, TypeAdapter

from promptweave.components.base import Component
from promptweave.core.types import PropsDict
from promptweave.diagnostics.models import Diagnostic

_bool_adapter = TypeAdapter(bool)
_number_adapter = TypeAdapter(float)


class AskProps(BaseModel):
    name: str
    label: str | None = None
    description: str | None = None
    default: Any = None


class AskComponent(Component):
    """Base for input producers."""

    schema = AskProps

    def coerce(self, value: Any) -> Any:
        return value

    def resolve(self, props: PropsDict, context) -> Any:
        name = props["name"]
        if name in context.inputs:
            value = context.inputs[name]
        else:
            value = props.get("default")
        if value is None:
            context.add_diagnostic(
                Diagnostic(
                    code="warn_missing_input",
                    message=f"No value provided for input '{name}' and no default is set.",
                    component=self.tag,
                    prop="name",
                )
            )
            return None
        return self.coerce(value)

    @property
    def tag(self) -> str:
        return f"Ask.{self.name.removeprefix('Ask')}"

    def render(self, props: PropsDict, resolved_value: Any, context) -> Any:
        return resolved_value


class AskText(AskComponent):
    def coerce(self, value: Any) -> str:
        return str(value)


class AskNumber(AskComponent):
    def coerce(self, value: Any) -> int | float:
        number = _number_adapter.validate_python(value)
        return int(number) if number.is_integer() else number


class AskConfirm(AskComponent):
    class Props(AskProps):
        default: bool = False

    schema = Props

    def coerce(self, value: Any) -> bool:
        return _bool_adapter.validate_python(value)

    def render(self, props: PropsDict, resolved_value: Any, context) -> str:
        return "yes" if resolved_value else "no"
