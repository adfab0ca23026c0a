"""
Built-in component table.
"""

from promptweave.components.ask import AskConfirm, AskNumber, AskText
from promptweave.components.base import ComponentFactory
from promptweave.components.control import If
from promptweave.components.post_execution import OpenUrl, PostExecution, ReviewFile, RunCommand
from promptweave.components.registry import ComponentRegistry
from promptweave.components.structural import (
    ChainOfThought,
    Constraint,
    Context,
    Format,
    Fragment,
    Prompt,
    Role,
    Section,
    Task,
)

BUILTIN_COMPONENTS: dict[str, ComponentFactory] = {
    # Structural
    "Prompt": Prompt,
    "Fragment": Fragment,
    "Section": Section,
    "Role": Role,
    "Task": Task,
    "Context": Context,
    "Constraint": Constraint,
    "Format": Format,
    "ChainOfThought": ChainOfThought,
    # Control flow
    "If": If,
    # Inputs
    "Ask.Text": AskText,
    "Ask.Number": AskNumber,
    "Ask.Confirm": AskConfirm,
    # Post-execution
    "PostExecution": PostExecution,
    "ReviewFile": ReviewFile,
    "OpenUrl": OpenUrl,
    "RunCommand": RunCommand,
}


def default_registry() -> ComponentRegistry:
    """Create a registry holding the built-in components."""
    return ComponentRegistry(BUILTIN_COMPONENTS)
