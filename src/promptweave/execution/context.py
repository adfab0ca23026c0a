"""
Render context threaded through one render call.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from promptweave.diagnostics.models import Diagnostic
from promptweave.execution.actions import ActionModel, parse_action


@dataclass
class RenderContext:
    """
    Per-call state shared by every component.

    Components read ``inputs`` and ``env`` and append diagnostics and
    post-execution actions. Both lists are append-only for the duration of
    a render call.

    Params:
        inputs: Caller-supplied input values, keyed by input name
        env: Caller-supplied environment values
        metadata: Free-form per-call scratch space for components
    """

    inputs: Mapping[str, Any] = field(default_factory=dict)
    env: Mapping[str, Any] = field(default_factory=dict)
    metadata: dict[str, Any] = field(default_factory=dict)
    _diagnostics: list[Diagnostic] = field(default_factory=list, repr=False)
    _actions: list[ActionModel] = field(default_factory=list, repr=False)

    @property
    def diagnostics(self) -> tuple[Diagnostic, ...]:
        return tuple(self._diagnostics)

    @property
    def post_execution(self) -> tuple[ActionModel, ...]:
        return tuple(self._actions)

    def add_diagnostic(self, diagnostic: Diagnostic) -> None:
        self._diagnostics.append(diagnostic)

    def extend_diagnostics(self, diagnostics: Iterable[Diagnostic]) -> None:
        self._diagnostics.extend(diagnostics)

    def add_action(self, action: ActionModel | dict[str, Any]) -> ActionModel:
        """
        Record a post-execution action.

        Params:
            action: Action model or ``{type, ...}`` mapping

        Returns:
            The validated action

        Raises:
            pydantic.ValidationError: If the action data is invalid
        """
        parsed = parse_action(action)
        self._actions.append(parsed)
        return parsed

    def fork(self) -> "RenderContext":
        """
        Create a buffer context sharing inputs, env and metadata.

        Writes made through the buffer stay in it until ``merge`` moves them
        into this context, which lets concurrently resolved producers record
        diagnostics and actions in document order.
        """
        return RenderContext(inputs=self.inputs, env=self.env, metadata=self.metadata)

    def merge(self, other: "RenderContext") -> None:
        """Move the diagnostics and actions recorded in ``other`` into this context."""
        self._diagnostics.extend(other._diagnostics)
        self._actions.extend(other._actions)
        other._diagnostics.clear()
        other._actions.clear()
