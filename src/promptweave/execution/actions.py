"""
Post-execution action models.

Actions are requests for side effects (review a file, open a URL, run a
command) collected while rendering. They are pure data; executing them is
the caller's responsibility and only happens after a successful render.
"""

from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


class ActionModel(BaseModel):
    """Base class for post-execution actions."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    def to_dict(self) -> dict[str, Any]:
        """Return the action as ``{type, ...fields}`` without unset optional fields."""
        return self.model_dump(exclude_none=True)


class ReviewFileAction(ActionModel):
    """Open a file for review in an editor."""

    type: Literal["reviewFile"] = "reviewFile"
    file: str
    editor: str | None = None


class OpenUrlAction(ActionModel):
    """Open a URL in a browser."""

    type: Literal["openUrl"] = "openUrl"
    url: str
    browser: str | None = None


class RunCommandAction(ActionModel):
    """Execute a shell command."""

    type: Literal["runCommand"] = "runCommand"
    command: str
    cwd: str | None = None
    env: dict[str, str] | None = None


Action = Annotated[
    ReviewFileAction | OpenUrlAction | RunCommandAction,
    Field(discriminator="type"),
]

_action_adapter: TypeAdapter[Action] = TypeAdapter(Action)


def parse_action(data: ActionModel | dict[str, Any]) -> ActionModel:
    """
    Validate an action given as a model or as ``{type, ...}`` data.

    Raises:
        pydantic.ValidationError: If the type is unknown or fields are invalid
    """
    if isinstance(data, ActionModel):
        return data
    return _action_adapter.validate_python(data)
