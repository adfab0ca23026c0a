"""
Post-execution components.

These components contribute no text. Each records a structured action on
the render context; the caller runs the actions after a successful render.
"""

from typing import Any

from pydantic import BaseModel

from promptweave.components.base import Component
from promptweave.core.types import PropsDict
from promptweave.execution.actions import OpenUrlAction, ReviewFileAction, RunCommandAction


class PostExecution(Component):
    """Container grouping post-execution actions."""

    structural = True


class ReviewFile(Component):
    class Props(BaseModel):
        file: str
        editor: str | None = None

    schema = Props

    def render(self, props: PropsDict, resolved_value: Any, context) -> None:
        context.add_action(ReviewFileAction(file=props["file"], editor=props.get("editor")))
        return None


class OpenUrl(Component):
    class Props(BaseModel):
        url: str
        browser: str | None = None

    schema = Props
    structural = True

    def render(self, props: PropsDict, resolved_value: Any, context) -> None:
        context.add_action(OpenUrlAction(url=props["url"], browser=props.get("browser")))
        return None


class RunCommand(Component):
    class Props(BaseModel):
        command: str
        cwd: str | None = None
        env: dict[str, str] | None = None

    schema = Props
    structural = True

    def render(self, props: PropsDict, resolved_value: Any, context) -> None:
        context.add_action(
            RunCommandAction(command=props["command"], cwd=props.get("cwd"), env=props.get("env"))
        )
        return None
