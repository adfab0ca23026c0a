"""
Component contract, registry and built-in components.
"""

from promptweave.components.ask import AskConfirm, AskNumber, AskText
from promptweave.components.base import Component, ComponentFactory, FunctionComponent, instantiate
from promptweave.components.builtins import BUILTIN_COMPONENTS, default_registry
from promptweave.components.control import If
from promptweave.components.delimiters import section_name, wrap_with_delimiter
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

__all__ = [
    "BUILTIN_COMPONENTS",
    "AskConfirm",
    "AskNumber",
    "AskText",
    "ChainOfThought",
    "Component",
    "ComponentFactory",
    "ComponentRegistry",
    "Constraint",
    "Context",
    "Format",
    "Fragment",
    "FunctionComponent",
    "If",
    "OpenUrl",
    "PostExecution",
    "Prompt",
    "ReviewFile",
    "Role",
    "RunCommand",
    "Section",
    "Task",
    "default_registry",
    "instantiate",
    "section_name",
    "wrap_with_delimiter",
]
