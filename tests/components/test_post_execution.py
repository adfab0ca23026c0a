"""
Tests for post-execution action components.
"""

from promptweave.components.base import Component
from promptweave.components.builtins import default_registry
from promptweave.core.element import el
from promptweave.execution.actions import OpenUrlAction, ReviewFileAction, RunCommandAction
from promptweave.render import render_sync


def actions_template():
    return el(
        "Prompt",
        None,
        el("Task", None, "Refactor the module."),
        el(
            "PostExecution",
            None,
            el("ReviewFile", {"file": "src/app.py", "editor": "vim"}),
            el("OpenUrl", {"url": "https://example.com/docs"}),
            el("RunCommand", {"command": "pytest -q", "cwd": "/repo"}),
        ),
    )


class TestActionCollection:
    """Actions are collected in document order and contribute no text."""

    def test_actions_returned_in_order(self):
        result = render_sync(actions_template())
        assert result.ok
        assert result.text == "<task>\nRefactor the module.\n</task>"
        assert result.post_execution == [
            ReviewFileAction(file="src/app.py", editor="vim"),
            OpenUrlAction(url="https://example.com/docs"),
            RunCommandAction(command="pytest -q", cwd="/repo"),
        ]

    def test_action_dicts(self):
        """Actions serialize to {type, ...fields} without unset fields."""
        result = render_sync(actions_template())
        assert [action.to_dict() for action in result.post_execution] == [
            {"type": "reviewFile", "file": "src/app.py", "editor": "vim"},
            {"type": "openUrl", "url": "https://example.com/docs"},
            {"type": "runCommand", "command": "pytest -q", "cwd": "/repo"},
        ]

    def test_actions_dropped_on_failure(self):
        """A failed render returns no actions."""
        template = el(
            "Prompt",
            None,
            el("Task", None, "x"),
            el("ReviewFile", {"file": "a.py"}),
            el("OpenUrl", {}),
        )
        result = render_sync(template)
        assert not result.ok
        assert result.post_execution == []
        assert result.errors[0].code == "missing"
        assert result.errors[0].prop == "url"

    def test_actions_dropped_on_escalated_warning(self):
        template = el("Prompt", None, el("ReviewFile", {"file": "a.py"}))
        result = render_sync(template, throw_on_warnings=True)
        assert not result.ok
        assert result.post_execution == []
        assert result.errors[0].code == "warn_missing_task"

    def test_custom_component_with_action_dict(self):
        """Components may record actions as plain {type, ...} mappings."""

        class Deploy(Component):
            def render(self, props, value, context):
                context.add_action({"type": "runCommand", "command": "make deploy"})
                return "deploying"

        registry = default_registry()
        registry.register("Deploy", Deploy)
        result = render_sync(el("Deploy"), registry=registry, required_elements=())
        assert result.ok
        assert result.text == "deploying"
        assert result.post_execution == [RunCommandAction(command="make deploy")]

    def test_invalid_action_reported(self):
        """An action that does not validate is a hard error."""

        class Broken(Component):
            def render(self, props, value, context):
                context.add_action({"type": "launchRocket"})
                return "never shown"

        registry = default_registry()
        registry.register("Broken", Broken)
        result = render_sync(el("Broken"), registry=registry, required_elements=())
        assert not result.ok
        assert result.errors[0].code == "invalid_action"
        assert result.errors[0].component == "Broken"
