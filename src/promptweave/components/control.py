"""
Control-flow components.
"""

from typing import Any

from pydantic import BaseModel

from promptweave.components.base import Component
from promptweave.core.types import PropsDict


class If(Component):
    """
    Renders its children only when ``when`` is true.

    Children are received unevaluated, so nothing inside a false branch is
    rendered and none of its post-execution actions are recorded.
    """

    class Props(BaseModel):
        when: bool

    schema = Props
    raw_children = True
    structural = True

    def render(self, props: PropsDict, resolved_value: Any, context) -> Any:
        if props["when"]:
            return list(props.get("children") or ())
        return None
