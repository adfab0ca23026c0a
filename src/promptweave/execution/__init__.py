"""
Template evaluation: render context, resolution cache, post-execution
actions and the two-phase evaluator.
"""

from promptweave.execution.actions import (
    Action,
    ActionModel,
    OpenUrlAction,
    ReviewFileAction,
    RunCommandAction,
    parse_action,
)
from promptweave.execution.cache import ResolutionCache
from promptweave.execution.context import RenderContext
from promptweave.execution.evaluator import Evaluator, Invocation, to_text

__all__ = [
    "Action",
    "ActionModel",
    "Evaluator",
    "Invocation",
    "OpenUrlAction",
    "RenderContext",
    "ResolutionCache",
    "ReviewFileAction",
    "RunCommandAction",
    "parse_action",
    "to_text",
]
